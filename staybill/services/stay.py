"""Stay service: guest stay lifecycle and the settlement attached to it.

    pending_entry -> in_progress -> completed -> paid

Entry readings move a stay to ``in_progress``; exit readings run the
settlement calculator and move it to ``completed``. Resubmitting readings
overwrites them in full. ``paid`` is terminal.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from staybill.core.config import settings
from staybill.models.enums import SettlementMode, StayStatus
from staybill.models.property import Property
from staybill.models.stay import Stay
from staybill.models.user import User
from staybill.schemas.stay import EntryReadings, StayCreate, StayExit
from staybill.services.message import (
    GuestContact,
    build_messaging_link,
    render_guest_message,
    resolve_payment_key,
)
from staybill.services.property import get_property
from staybill.services.settlement import (
    MeterReadings,
    MissingFieldError,
    SettlementInput,
    SettlementResult,
    calculate_settlement,
    parse_reading,
)

logger = logging.getLogger(__name__)


def _conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def _as_text(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _parse_entry_readings(entry: EntryReadings, mode: SettlementMode) -> dict[str, Decimal | None]:
    """Parse entry readings, requiring every one the mode needs."""
    raw = {
        "code03_entry": entry.code03_entry,
        "code103_entry": entry.code103_entry,
        "monitoring_entry": entry.monitoring_entry,
    }
    required = ["code03_entry", "code103_entry"]
    if mode == SettlementMode.MONITORING:
        required.append("monitoring_entry")

    parsed: dict[str, Decimal | None] = {}
    for name, value in raw.items():
        if name in required or value not in (None, ""):
            parsed[name] = parse_reading(value)
        else:
            parsed[name] = None
    return parsed


def _has_any_entry(entry: EntryReadings | None) -> bool:
    if entry is None:
        return False
    return any(
        value not in (None, "")
        for value in (entry.code03_entry, entry.code103_entry, entry.monitoring_entry)
    )


def get_stay(db: Session, stay_id: int, user: User) -> Stay:
    """Get a stay by ID, if the user can see its property."""
    stay = db.query(Stay).filter(Stay.id == stay_id).first()
    if not stay or user not in stay.parent_property.users:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stay not found",
        )
    return stay


def get_stays_for_property(
    db: Session,
    property_id: int,
    user: User,
    status_filter: StayStatus | None = None,
) -> list[Stay]:
    """List a property's stays, most recent check-in first."""
    db_property = get_property(db, property_id, user)
    query = db.query(Stay).filter(Stay.property_id == db_property.id)
    if status_filter is not None:
        query = query.filter(Stay.status == status_filter)
    return query.order_by(Stay.check_in_date.desc(), Stay.id.desc()).all()


def create_stay(db: Session, property_id: int, user: User, stay_data: StayCreate) -> Stay:
    """Register a stay, snapshotting the property's tariff and settlement mode.

    The stay starts ``in_progress`` when entry readings are supplied and
    ``pending_entry`` otherwise.
    """
    db_property: Property = get_property(db, property_id, user)
    if not db_property.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    mode = SettlementMode(db_property.settlement_mode)

    stay = Stay(
        property_id=db_property.id,
        guest_name=stay_data.guest_name,
        guest_phone=(stay_data.guest_phone or "").strip() or None,
        payment_key=(stay_data.payment_key or "").strip() or None,
        check_in_date=stay_data.check_in_date,
        settlement_mode=mode,
        tariff_used=db_property.tariff,
        status=StayStatus.PENDING_ENTRY,
        is_paid=False,
    )

    if _has_any_entry(stay_data.entry):
        for name, value in _parse_entry_readings(stay_data.entry, mode).items():
            setattr(stay, name, value)
        stay.status = StayStatus.IN_PROGRESS

    db.add(stay)
    db.commit()
    db.refresh(stay)
    logger.info("Created stay %s for property %s (%s)", stay.id, db_property.id, stay.status)
    return stay


def record_entry_readings(db: Session, stay_id: int, user: User, entry: EntryReadings) -> Stay:
    """Overwrite the entry readings of a stay.

    Any stored settlement is discarded and the stay goes back to
    ``in_progress``.
    """
    stay = get_stay(db, stay_id, user)
    if stay.status == StayStatus.PAID:
        raise _conflict("Paid stays cannot be changed")

    for name, value in _parse_entry_readings(entry, SettlementMode(stay.settlement_mode)).items():
        setattr(stay, name, value)

    if stay.status == StayStatus.COMPLETED:
        logger.info("Entry readings of completed stay %s overwritten; settlement cleared", stay.id)
    stay.clear_settlement()
    stay.status = StayStatus.IN_PROGRESS

    db.commit()
    db.refresh(stay)
    return stay


def complete_stay(db: Session, stay_id: int, user: User, exit_data: StayExit) -> Stay:
    """Record check-out readings, compute the settlement and store it."""
    stay = get_stay(db, stay_id, user)
    if stay.status == StayStatus.PAID:
        raise _conflict("Paid stays cannot be changed")
    if stay.status == StayStatus.PENDING_ENTRY or not stay.has_entry_readings():
        raise _conflict("Entry readings must be recorded before check-out")

    settlement_input = SettlementInput(
        check_in=stay.check_in_date,
        check_out=exit_data.check_out_date,
        mode=SettlementMode(stay.settlement_mode),
        readings=MeterReadings(
            code03_entry=_as_text(stay.code03_entry),
            code03_exit=exit_data.code03_exit,
            code103_entry=_as_text(stay.code103_entry),
            code103_exit=exit_data.code103_exit,
            monitoring_entry=_as_text(stay.monitoring_entry),
            monitoring_exit=exit_data.monitoring_exit,
        ),
        tariff=exit_data.tariff or _as_text(stay.tariff_used),
    )
    result = calculate_settlement(settlement_input)
    readings = settlement_input.readings

    stay.check_out_date = result.check_out
    stay.code03_exit = parse_reading(readings.code03_exit)
    stay.code103_exit = parse_reading(readings.code103_exit)
    stay.monitoring_exit = (
        parse_reading(readings.monitoring_exit)
        if result.mode == SettlementMode.MONITORING
        else None
    )
    stay.grid_consumption = result.grid_consumption
    stay.grid_injection = result.grid_injection
    stay.solar_generation = result.solar_generation
    stay.self_consumption = result.self_consumption
    stay.total_consumption = result.total_consumption
    stay.tariff_used = result.tariff
    stay.amount_to_charge = result.charge
    stay.status = StayStatus.COMPLETED

    db.commit()
    db.refresh(stay)
    logger.info(
        "Completed stay %s: %s kWh, charge %s",
        stay.id,
        result.total_consumption,
        result.charge,
    )
    return stay


def mark_paid(db: Session, stay_id: int, user: User) -> Stay:
    """Confirm payment of a completed stay."""
    stay = get_stay(db, stay_id, user)
    if stay.status == StayStatus.PAID:
        raise _conflict("Stay is already paid")
    if stay.status != StayStatus.COMPLETED:
        raise _conflict("Only completed stays can be marked as paid")

    stay.is_paid = True
    stay.paid_at = datetime.now(UTC)
    stay.status = StayStatus.PAID
    db.commit()
    db.refresh(stay)
    logger.info("Stay %s marked as paid", stay.id)
    return stay


def delete_stay(db: Session, stay_id: int, user: User) -> None:
    """Delete a stay."""
    stay = get_stay(db, stay_id, user)
    db.delete(stay)
    db.commit()
    logger.info("Deleted stay %s", stay_id)


def settlement_from_stay(stay: Stay) -> SettlementResult:
    """Rebuild the stored settlement of a completed stay without recomputing it."""
    if stay.status not in (StayStatus.COMPLETED, StayStatus.PAID) or stay.amount_to_charge is None:
        raise _conflict("Stay has not been settled yet")

    return SettlementResult(
        mode=SettlementMode(stay.settlement_mode),
        check_in=stay.check_in_date,
        check_out=stay.check_out_date,
        days=(stay.check_out_date - stay.check_in_date).days,
        grid_consumption=stay.grid_consumption,
        grid_injection=stay.grid_injection,
        solar_generation=stay.solar_generation,
        self_consumption=stay.self_consumption,
        total_consumption=stay.total_consumption,
        tariff=stay.tariff_used,
        charge=stay.amount_to_charge,
    )


def guest_contact_for_stay(stay: Stay) -> GuestContact:
    """Guest contact for a stay, with the payment key chosen by the configured policy."""
    owner = stay.parent_property.owner
    payment_key = resolve_payment_key(
        stay.payment_key,
        owner.payment_key if owner else None,
        settings.PAYMENT_KEY_POLICY,
    )
    if not stay.guest_name.strip():
        raise MissingFieldError()
    return GuestContact(name=stay.guest_name, phone=stay.guest_phone, payment_key=payment_key)


def get_stay_message(db: Session, stay_id: int, user: User) -> tuple[str, str | None]:
    """Render the guest message of a settled stay and its messaging link."""
    stay = get_stay(db, stay_id, user)
    result = settlement_from_stay(stay)
    contact = guest_contact_for_stay(stay)

    message = render_guest_message(
        result,
        contact,
        locale=settings.MESSAGE_LOCALE,
        currency_symbol=settings.CURRENCY_SYMBOL,
    )
    link = None
    if contact.phone:
        link = build_messaging_link(
            message,
            contact.phone,
            base_url=settings.MESSAGING_BASE_URL,
            country_code=settings.PHONE_COUNTRY_CODE,
        )
    return message, link
