# schemas/user_auth.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

from app.models.user_auth import Status


# =====================================================================
# CREATE SCHEMAS
# =====================================================================

class UserRegister(BaseModel):
    """Public registration payload."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator('password')
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not any(c.isalpha() for c in v):
            raise ValueError('Password must contain at least one letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one digit')
        return v


# =====================================================================
# READ SCHEMAS
# =====================================================================

class UserOut(BaseModel):
    """Minimal public view of a user."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    handle: str
    email: EmailStr
    avatar_url: Optional[str] = None
    status: Status
    created_at: datetime


# =====================================================================
# AUTH SCHEMAS
# =====================================================================

class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Authentication token response."""
    access_token: str
    token_type: str = "bearer"
    refresh_token: str
    user: UserOut


class RefreshTokenRequest(BaseModel):
    """Refresh token request."""
    refresh_token: str


# =====================================================================
# RESPONSE WRAPPERS
# =====================================================================

class SuccessResponse(BaseModel):
    """Generic success response."""
    success: bool = True
    message: str
