"""Schemas for the stateless settlement calculator endpoint."""

from datetime import date

from pydantic import BaseModel, ConfigDict

from staybill.services.settlement import MeterReadings, SettlementResult


class SettlementRequest(BaseModel):
    """Calculator form: stay period, readings, tariff and guest contact."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    check_in: date | str | None = None
    check_out: date | str | None = None
    mode: str | None = None
    readings: MeterReadings = MeterReadings()
    tariff: str | None = None
    guest_name: str | None = None
    guest_phone: str | None = None
    payment_key: str | None = None
    locale: str | None = None


class SettlementResponse(BaseModel):
    """Computed settlement plus the message ready to copy or send."""

    result: SettlementResult
    message: str
    messaging_link: str
