"""Property API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staybill.api.dependencies import get_current_user
from staybill.core.database import get_db
from staybill.models.user import User
from staybill.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyShareRequest,
    PropertySummary,
    PropertyUpdate,
)
from staybill.services import property as property_service

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """Create a property; the tariff defaults to the configured value."""
    db_property = property_service.create_property(db, current_user, property_data)
    return PropertyResponse.model_validate(db_property)


@router.get("/", response_model=list[PropertyResponse])
def list_properties(
    active_only: bool = Query(True, description="Only return active properties"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PropertyResponse]:
    """List the properties the current user can access."""
    properties = property_service.get_properties_for_user(db, current_user, active_only)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
    property_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """Get a property by ID."""
    db_property = property_service.get_property(db, property_id, current_user)
    return PropertyResponse.model_validate(db_property)


@router.patch("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """Update a property."""
    db_property = property_service.update_property(db, property_id, current_user, property_data)
    return PropertyResponse.model_validate(db_property)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_property(
    property_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """Soft-delete a property (deactivates it)."""
    property_service.delete_property(db, property_id, current_user)


@router.post("/{property_id}/share", response_model=PropertyResponse)
def share_property(
    property_id: int,
    share: PropertyShareRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """Give another user access to a property."""
    db_property = property_service.share_property(db, property_id, current_user, share.username)
    return PropertyResponse.model_validate(db_property)


@router.get("/{property_id}/summary", response_model=PropertySummary)
def get_property_summary(
    property_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertySummary:
    """Stay counts and revenue totals for a property."""
    return property_service.get_property_summary(db, property_id, current_user)
