"""
Authentication and user administration schemas.

This module defines Pydantic schemas for login, token responses and user
management requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from salesflow.database.models.user import UserRole


def _check_password_strength(value: str) -> str:
    if not any(c.isalpha() for c in value) or not any(c.isdigit() for c in value):
        raise ValueError("Password must contain at least one letter and one digit")
    return value


class LoginRequest(BaseModel):
    """Credentials for username/password login."""

    username: str = Field(..., min_length=1, max_length=100, examples=["mary_manager"])
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """
    Bearer token issued on successful login.
    """

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class UserCreate(BaseModel):
    """
    Schema for creating a user.

    Validates password strength: at least 8 characters with a letter and a
    digit.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr = Field(..., examples=["user@example.com"])
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    department: str = Field("", max_length=100)
    phone: str = Field("", max_length=50)
    manager_id: Optional[int] = None

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class UserUpdate(BaseModel):
    """Partial user update; omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    role: Optional[UserRole] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    manager_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_password_strength(value)


class UserResponse(BaseModel):
    """User as exposed over the API, without the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: UserRole
    is_active: bool
    first_name: str
    last_name: str
    full_name: str
    department: str
    phone: str
    manager_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    last_login: Optional[datetime] = None
    created_at: datetime
