# schemas/profile.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date

from app.models.profile import Gender


class ProfileUpdate(BaseModel):
    """Validated profile update (avatar file travels separately)."""
    name: str
    gender: Gender
    country: str
    date_of_birth: date


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gender: Optional[Gender] = None
    country: Optional[str] = None
    date_of_birth: Optional[date] = None


class UserProfileOut(BaseModel):
    """User name and avatar with the attached profile."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    handle: str
    avatar_url: Optional[str] = None
    profile: Optional[ProfileOut] = None
