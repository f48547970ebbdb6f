"""Property service for business logic."""

import logging
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from staybill.core.config import settings
from staybill.models.enums import SettlementMode, StayStatus
from staybill.models.property import Property
from staybill.models.stay import Stay
from staybill.models.user import User
from staybill.schemas.property import PropertyCreate, PropertySummary, PropertyUpdate
from staybill.services.auth import get_user_by_username
from staybill.services.settlement import parse_tariff

logger = logging.getLogger(__name__)


def create_property(db: Session, owner: User, property_data: PropertyCreate) -> Property:
    """Create a property owned by ``owner`` and give the owner access to it."""
    db_property = Property(
        owner_id=owner.id,
        display_name=property_data.display_name,
        address=property_data.address,
        city=property_data.city,
        state=property_data.state,
        tariff=property_data.tariff or parse_tariff(settings.DEFAULT_TARIFF),
        settlement_mode=(
            property_data.settlement_mode or SettlementMode(settings.DEFAULT_SETTLEMENT_MODE)
        ),
    )
    db.add(db_property)
    db_property.users.append(owner)

    db.commit()
    db.refresh(db_property)
    logger.info("User %s created property %s", owner.username, db_property.id)
    return db_property


def get_property(db: Session, property_id: int, user: User) -> Property:
    """Get a property by ID, as seen by ``user``.

    Properties the user has no access to are reported as missing.
    """
    db_property = db.query(Property).filter(Property.id == property_id).first()
    if not db_property or user not in db_property.users:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return db_property


def get_properties_for_user(db: Session, user: User, active_only: bool = True) -> list[Property]:
    """Get all properties a user can access, newest first."""
    properties = sorted(user.properties, key=lambda p: p.created_at, reverse=True)
    if active_only:
        properties = [p for p in properties if p.is_active]
    return properties


def update_property(
    db: Session,
    property_id: int,
    user: User,
    property_data: PropertyUpdate,
) -> Property:
    """Update a property."""
    db_property = get_property(db, property_id, user)

    update_data = property_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("display_name", "tariff", "settlement_mode"):
            continue
        setattr(db_property, field, value)

    db.commit()
    db.refresh(db_property)
    return db_property


def delete_property(db: Session, property_id: int, user: User) -> None:
    """Soft-delete a property; only its owner may do so."""
    db_property = get_property(db, property_id, user)
    if db_property.owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owner can delete a property",
        )
    db_property.is_active = False
    db.commit()
    logger.info("User %s deactivated property %s", user.username, property_id)


def share_property(db: Session, property_id: int, user: User, username: str) -> Property:
    """Give another user access to a property."""
    db_property = get_property(db, property_id, user)
    if db_property.owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owner can share a property",
        )

    other = get_user_by_username(db, username)
    if not other:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    if other not in db_property.users:
        db_property.users.append(other)
        db.commit()
        db.refresh(db_property)
    return db_property


def get_property_summary(db: Session, property_id: int, user: User) -> PropertySummary:
    """Count stays and total up received and pending revenue for a property."""
    db_property = get_property(db, property_id, user)
    stays = db.query(Stay).filter(Stay.property_id == db_property.id).all()

    received = sum(
        (s.amount_to_charge or Decimal("0") for s in stays if s.status == StayStatus.PAID),
        Decimal("0"),
    )
    pending = sum(
        (s.amount_to_charge or Decimal("0") for s in stays if s.status == StayStatus.COMPLETED),
        Decimal("0"),
    )

    return PropertySummary(
        property_id=db_property.id,
        total_stays=len(stays),
        open_stays=sum(1 for s in stays if s.status != StayStatus.PAID),
        received_revenue=received,
        pending_revenue=pending,
    )
