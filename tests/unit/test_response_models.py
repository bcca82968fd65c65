"""Unit tests for response model datetime handling."""

from datetime import datetime, timedelta, timezone

from backend.app.models import RoleRead


def _role(created_at: datetime) -> RoleRead:
    return RoleRead(
        id=1, name="Admin", description=None, is_active=True, created_at=created_at, updated_at=None
    )


def test_naive_datetime_treated_as_utc() -> None:
    role = _role(datetime(2026, 10, 17, 23, 4, 42, 126488))

    assert role.created_at.tzinfo == timezone.utc
    assert role.model_dump(mode="json")["created_at"] == "2026-10-17T23:04:42.126488Z"


def test_offset_datetime_converted_to_utc() -> None:
    plus_two = timezone(timedelta(hours=2))
    role = _role(datetime(2026, 10, 18, 1, 0, tzinfo=plus_two))

    assert role.created_at == datetime(2026, 10, 17, 23, 0, tzinfo=timezone.utc)
    assert role.model_dump(mode="json")["created_at"] == "2026-10-17T23:00:00Z"
