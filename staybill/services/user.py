"""User profile service."""

from sqlalchemy.orm import Session

from staybill.models.user import User
from staybill.schemas.user import UserProfileUpdate


def update_profile(db: Session, user: User, profile_data: UserProfileUpdate) -> User:
    """Update the host profile; blank strings clear a field."""
    update_data = profile_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if isinstance(value, str):
            value = value.strip() or None
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user
