# services/profile.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BusinessError
from app.core.storage import LocalStorage, Upload
from app.crud.profile import crud_profile
from app.crud.user_auth import crud_user
from app.schemas.profile import ProfileOut, ProfileUpdate, UserProfileOut
from app.services.user_auth import generate_unique_handle

logger = logging.getLogger(__name__)


class ProfileService:
    """Show and update the signed-in user's profile."""

    def __init__(self):
        self.crud = crud_profile

    def _user_profile(self, db: Session, user_id: int) -> UserProfileOut:
        user = crud_user.get(db, id=user_id)
        if user is None:
            raise BusinessError.not_found("User not found")
        profile = self.crud.get_by_user_id(db, user_id=user.id)
        return UserProfileOut(
            id=user.id,
            name=user.name,
            handle=user.handle,
            avatar_url=user.avatar_url,
            profile=ProfileOut.model_validate(profile) if profile else None,
        )

    def show_profile(self, db: Session, user_id: int) -> UserProfileOut:
        return self._user_profile(db, user_id)

    def update_profile(
        self,
        db: Session,
        storage: LocalStorage,
        user_id: int,
        data: ProfileUpdate,
        avatar: Optional[Upload] = None,
    ) -> UserProfileOut:
        """
        Update name, profile fields and optionally the avatar in one transaction.

        A changed name regenerates the handle. The previous avatar file is
        deleted only after the new one is committed.
        """
        old_avatar = None
        try:
            user = crud_user.get(db, id=user_id)
            if user is None:
                raise BusinessError.not_found("User not found")

            if data.name != user.name:
                handle = generate_unique_handle(db, data.name, exclude_user_id=user.id)
                self.crud.rename_user(db, user=user, name=data.name, handle=handle)

            profile = self.crud.get_or_create(db, user_id=user.id)
            self.crud.update(db, db_obj=profile, obj_in=data)

            if avatar is not None:
                old_avatar = user.avatar
                stored = storage.upload(avatar, f"user/{user.id}")
                self.crud.set_avatar(db, user=user, path=stored)

            db.commit()
        except BusinessError:
            db.rollback()
            raise
        except Exception as exc:
            db.rollback()
            logger.error(f"ProfileService.update_profile: {exc}", exc_info=True)
            raise

        if old_avatar:
            try:
                storage.delete(old_avatar)
            except (OSError, ValueError) as exc:
                logger.warning(f"ProfileService.update_profile: old avatar not removed: {exc}")

        return self._user_profile(db, user_id)


profile_service = ProfileService()
