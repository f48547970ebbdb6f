"""User profile routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staybill.api.dependencies import get_current_user
from staybill.core.database import get_db
from staybill.models.user import User
from staybill.schemas.user import UserProfileUpdate, UserResponse
from staybill.services import user as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def read_profile(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Get the current host's profile."""
    return UserResponse.model_validate(current_user)


@router.patch("/me", response_model=UserResponse)
def update_profile(
    profile_data: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Update name, phone and default payment key."""
    user = user_service.update_profile(db, current_user, profile_data)
    return UserResponse.model_validate(user)
