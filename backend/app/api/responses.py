"""Shared HTTP error responses for resource routes."""

from fastapi import HTTPException, status

RESOURCE_NOT_FOUND = "Resource not found"


def not_found() -> HTTPException:
    """404 that never reveals whether the id exists under another tenant."""
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RESOURCE_NOT_FOUND)


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
