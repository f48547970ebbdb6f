"""Property Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from staybill.models.enums import SettlementMode
from staybill.services.settlement import SettlementError, parse_tariff


def _validate_tariff(v: object) -> Decimal | None:
    if v is None:
        return None
    try:
        return parse_tariff(v)
    except SettlementError as exc:
        raise ValueError(exc.message) from exc


class PropertyBase(BaseModel):
    """Base property schema."""

    display_name: str = Field(min_length=1, max_length=100)


class PropertyCreate(PropertyBase):
    """Schema for creating a new property.

    The tariff accepts either ',' or '.' as decimal separator.
    """

    address: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    tariff: Decimal | None = None
    settlement_mode: SettlementMode | None = None

    @field_validator("tariff", mode="before")
    @classmethod
    def validate_tariff(cls, v: object) -> Decimal | None:
        """Parse the tariff and require it to be positive."""
        return _validate_tariff(v)

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Property name is required")
        return v.strip()


class PropertyUpdate(BaseModel):
    """Schema for updating a property."""

    display_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    tariff: Decimal | None = None
    settlement_mode: SettlementMode | None = None
    is_active: bool | None = None

    @field_validator("tariff", mode="before")
    @classmethod
    def validate_tariff(cls, v: object) -> Decimal | None:
        """Parse the tariff and require it to be positive."""
        return _validate_tariff(v)


class PropertyResponse(PropertyBase):
    """Schema for property response."""

    id: int
    owner_id: int
    address: str | None
    city: str | None
    state: str | None
    tariff: Decimal
    settlement_mode: SettlementMode
    created_at: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class PropertyShareRequest(BaseModel):
    """Schema for granting another user access to a property."""

    username: str


class PropertySummary(BaseModel):
    """Stay and revenue totals for a property."""

    property_id: int
    total_stays: int
    open_stays: int  # Any status other than paid
    received_revenue: Decimal  # Sum of paid charges
    pending_revenue: Decimal  # Sum of completed, unpaid charges
