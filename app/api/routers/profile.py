# app/api/routers/profile.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_user
from app.core.storage import LocalStorage, get_storage
from app.models.profile import Gender
from app.models.user_auth import User
from app.schemas.profile import ProfileUpdate, UserProfileOut
from app.services.profile import profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/me", response_model=UserProfileOut, summary="Show my profile")
def show_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Name, avatar URL, gender, date of birth and country."""
    return profile_service.show_profile(db, user_id=current_user.id)


@router.patch("/me", response_model=UserProfileOut, summary="Update my profile")
def update_profile(
    name: str = Form(..., min_length=1, max_length=100),
    gender: Gender = Form(...),
    country: str = Form(..., min_length=1, max_length=100),
    date_of_birth: date = Form(...),
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """
    Update the profile (multipart form).

    Changing the name regenerates the handle; a new **avatar** replaces
    the previous file.
    """
    data = ProfileUpdate(
        name=name, gender=gender, country=country, date_of_birth=date_of_birth
    )
    return profile_service.update_profile(
        db, storage, user_id=current_user.id, data=data, avatar=avatar
    )
