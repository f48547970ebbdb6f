"""Stay Pydantic schemas for request/response validation.

Readings are accepted as raw strings (or numbers) and parsed by the
settlement module, so API clients get the same errors as the calculator.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from staybill.models.enums import SettlementMode, StayStatus


class EntryReadings(BaseModel):
    """Readings taken at check-in."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    code03_entry: str | None = None
    code103_entry: str | None = None
    monitoring_entry: str | None = None


class StayCreate(BaseModel):
    """Schema for registering a new stay."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    guest_name: str
    guest_phone: str | None = None
    payment_key: str | None = None
    check_in_date: date
    entry: EntryReadings | None = None

    @field_validator("guest_name")
    @classmethod
    def validate_guest_name(cls, v: str) -> str:
        """Reject blank guest names."""
        if not v.strip():
            raise ValueError("Guest name is required")
        return v.strip()

    @field_validator("guest_phone")
    @classmethod
    def validate_guest_phone(cls, v: str | None) -> str | None:
        """Require at least one digit in a phone number."""
        if v is None or not v.strip():
            return None
        if not any(ch.isdigit() for ch in v):
            raise ValueError("Guest phone must contain digits")
        return v.strip()


class StayExit(BaseModel):
    """Check-out date and readings, submitted to settle a stay."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    check_out_date: date | str | None = None
    code03_exit: str | None = None
    code103_exit: str | None = None
    monitoring_exit: str | None = None
    tariff: str | None = None  # Overrides the tariff snapshot taken at creation


class StayResponse(BaseModel):
    """Schema for stay response."""

    id: int
    property_id: int
    guest_name: str
    guest_phone: str | None
    payment_key: str | None
    check_in_date: date
    check_out_date: date | None
    settlement_mode: SettlementMode
    status: StayStatus

    code03_entry: Decimal | None
    code03_exit: Decimal | None
    code103_entry: Decimal | None
    code103_exit: Decimal | None
    monitoring_entry: Decimal | None
    monitoring_exit: Decimal | None

    grid_consumption: Decimal | None
    grid_injection: Decimal | None
    solar_generation: Decimal | None
    self_consumption: Decimal | None
    total_consumption: Decimal | None
    tariff_used: Decimal
    amount_to_charge: Decimal | None

    is_paid: bool
    paid_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class StayMessageResponse(BaseModel):
    """Guest message for a completed stay."""

    stay_id: int
    message: str
    messaging_link: str | None
