# crud/profile.py
from typing import Optional
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.user_auth import User
from app.schemas.profile import ProfileUpdate


class CRUDProfile:
    """CRUD operations for Profile model. Writes flush only."""

    def get_by_user_id(self, db: Session, *, user_id: int) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    def get_or_create(self, db: Session, *, user_id: int) -> Profile:
        profile = self.get_by_user_id(db, user_id=user_id)
        if profile is None:
            profile = Profile(user_id=user_id)
            db.add(profile)
            db.flush()
        return profile

    def update(self, db: Session, *, db_obj: Profile, obj_in: ProfileUpdate) -> Profile:
        """Update gender, country and date of birth."""
        db_obj.gender = obj_in.gender
        db_obj.country = obj_in.country
        db_obj.date_of_birth = obj_in.date_of_birth
        db.flush()
        return db_obj

    def rename_user(self, db: Session, *, user: User, name: str, handle: str) -> User:
        user.name = name
        user.handle = handle
        db.flush()
        return user

    def set_avatar(self, db: Session, *, user: User, path: str) -> User:
        user.avatar = path
        db.flush()
        return user


crud_profile = CRUDProfile()
