"""Condominium and housing unit request/response models."""

from pydantic import BaseModel, Field

from backend.app.models.common import EMAIL_PATTERN, ORMModel, UtcDatetime

# Fits the NUMERIC(10, 2) column
MAX_AREA_SQM = 10**8


class CondominiumCreate(BaseModel):
    """Request body for POST /api/condominiums."""

    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    total_units: int = Field(0, ge=0)


class CondominiumUpdate(CondominiumCreate):
    """Request body for PUT /api/condominiums/{id}."""

    is_active: bool = True


class HousingUnitBase(BaseModel):
    unit_number: str = Field(..., min_length=1, max_length=50, description='e.g. "A-101"')
    description: str | None = Field(None, max_length=200)
    unit_type: str | None = Field(None, max_length=50, description="Apartment, house, shop...")
    area_sqm: float | None = Field(None, ge=0, lt=MAX_AREA_SQM)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    has_garage: bool = False
    condominium_id: int = Field(..., gt=0)


class HousingUnitCreate(HousingUnitBase):
    """Request body for POST /api/housing-units."""


class HousingUnitUpdate(HousingUnitBase):
    """Request body for PUT /api/housing-units/{id}."""

    is_active: bool = True
    is_occupied: bool = False


class HousingUnitRead(ORMModel):
    """Housing unit as returned by the API."""

    id: int
    unit_number: str
    description: str | None
    unit_type: str | None
    area_sqm: float | None
    bedrooms: int | None
    bathrooms: int | None
    has_garage: bool
    is_active: bool
    is_occupied: bool
    condominium_id: int
    created_at: UtcDatetime
    updated_at: UtcDatetime | None


class CondominiumSummary(ORMModel):
    """Condominium reference embedded in housing unit responses."""

    id: int
    name: str
    city: str | None


class HousingUnitDetail(HousingUnitRead):
    """Housing unit with its condominium."""

    condominium: CondominiumSummary


class CondominiumRead(ORMModel):
    """Condominium with its housing units."""

    id: int
    name: str
    address: str | None
    city: str | None
    postal_code: str | None
    phone: str | None
    email: str | None
    total_units: int
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime | None
    housing_units: list[HousingUnitRead] = []
