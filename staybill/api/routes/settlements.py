"""Stateless settlement calculator route."""

from fastapi import APIRouter, HTTPException, status

from staybill.core.config import settings
from staybill.schemas.settlement import SettlementRequest, SettlementResponse
from staybill.services.message import (
    SUPPORTED_LOCALES,
    GuestContact,
    build_messaging_link,
    render_guest_message,
)
from staybill.services.settlement import MissingFieldError, SettlementInput, calculate_settlement

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("/calculate", response_model=SettlementResponse)
def calculate(request: SettlementRequest) -> SettlementResponse:
    """Compute a settlement without storing anything.

    Returns the breakdown, the guest message and a messaging link (addressed
    to the guest when a phone number is given).
    """
    locale = request.locale or settings.MESSAGE_LOCALE
    if locale not in SUPPORTED_LOCALES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported locale '{locale}'",
        )
    phone = (request.guest_phone or "").strip() or None
    if phone and not any(ch.isdigit() for ch in phone):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Guest phone must contain digits",
        )
    if not request.guest_name or not request.guest_name.strip():
        raise MissingFieldError()

    result = calculate_settlement(
        SettlementInput(
            check_in=request.check_in,
            check_out=request.check_out,
            mode=request.mode,
            readings=request.readings,
            tariff=request.tariff,
        )
    )

    contact = GuestContact(
        name=request.guest_name.strip(),
        phone=phone,
        payment_key=(request.payment_key or "").strip() or None,
    )
    message = render_guest_message(
        result,
        contact,
        locale=locale,
        currency_symbol=settings.CURRENCY_SYMBOL,
    )
    link = build_messaging_link(
        message,
        contact.phone,
        base_url=settings.MESSAGING_BASE_URL,
        country_code=settings.PHONE_COUNTRY_CODE,
    )
    return SettlementResponse(result=result, message=message, messaging_link=link)
