"""Stay API routes: guest stays, their readings and settlement."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staybill.api.dependencies import get_current_user
from staybill.core.database import get_db
from staybill.models.enums import StayStatus
from staybill.models.user import User
from staybill.schemas.stay import (
    EntryReadings,
    StayCreate,
    StayExit,
    StayMessageResponse,
    StayResponse,
)
from staybill.services import stay as stay_service

router = APIRouter(tags=["stays"])


@router.post(
    "/properties/{property_id}/stays",
    response_model=StayResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_stay(
    property_id: int,
    stay_data: StayCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StayResponse:
    """Register a guest stay, optionally with its check-in readings."""
    stay = stay_service.create_stay(db, property_id, current_user, stay_data)
    return StayResponse.model_validate(stay)


@router.get("/properties/{property_id}/stays", response_model=list[StayResponse])
def list_stays(
    property_id: int,
    status_filter: StayStatus | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[StayResponse]:
    """List a property's stays, most recent check-in first."""
    stays = stay_service.get_stays_for_property(db, property_id, current_user, status_filter)
    return [StayResponse.model_validate(s) for s in stays]


@router.get("/stays/{stay_id}", response_model=StayResponse)
def get_stay(
    stay_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StayResponse:
    """Get a stay by ID."""
    return StayResponse.model_validate(stay_service.get_stay(db, stay_id, current_user))


@router.put("/stays/{stay_id}/entry", response_model=StayResponse)
def record_entry_readings(
    stay_id: int,
    entry: EntryReadings,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StayResponse:
    """Record (or overwrite) the check-in readings."""
    stay = stay_service.record_entry_readings(db, stay_id, current_user, entry)
    return StayResponse.model_validate(stay)


@router.put("/stays/{stay_id}/exit", response_model=StayResponse)
def complete_stay(
    stay_id: int,
    exit_data: StayExit,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StayResponse:
    """Record check-out readings and settle the stay."""
    stay = stay_service.complete_stay(db, stay_id, current_user, exit_data)
    return StayResponse.model_validate(stay)


@router.post("/stays/{stay_id}/paid", response_model=StayResponse)
def mark_paid(
    stay_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StayResponse:
    """Confirm that the guest paid."""
    return StayResponse.model_validate(stay_service.mark_paid(db, stay_id, current_user))


@router.get("/stays/{stay_id}/message", response_model=StayMessageResponse)
def get_stay_message(
    stay_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StayMessageResponse:
    """Guest message for a settled stay, plus a messaging link when a phone is known."""
    message, link = stay_service.get_stay_message(db, stay_id, current_user)
    return StayMessageResponse(stay_id=stay_id, message=message, messaging_link=link)


@router.delete("/stays/{stay_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stay(
    stay_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """Delete a stay."""
    stay_service.delete_stay(db, stay_id, current_user)
