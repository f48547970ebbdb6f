"""User Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Base user schema."""

    username: str = Field(min_length=3, max_length=50)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for creating a new user."""

    # bcrypt rejects passwords longer than 72 bytes
    password: str = Field(min_length=8, max_length=72)
    full_name: str | None = None

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        """Keep the encoded password within bcrypt's 72-byte limit."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class UserResponse(UserBase):
    """Schema for user response."""

    id: int
    created_at: datetime
    is_active: bool
    full_name: str | None = None
    phone_number: str | None = None
    payment_key: str | None = None

    model_config = {"from_attributes": True}


class UserProfileUpdate(BaseModel):
    """Schema for updating the host profile."""

    full_name: str | None = None
    phone_number: str | None = None
    payment_key: str | None = None


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Schema for token payload data."""

    username: str | None = None


class LoginRequest(BaseModel):
    """Schema for login request."""

    username: str
    password: str
