# services/user_auth.py
import logging
import re
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BusinessError
from app.crud.user_auth import crud_user
from app.models.user_auth import User, Status
from app.schemas.user_auth import UserRegister, LoginRequest

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated ASCII slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "user"


def generate_unique_handle(
    db: Session, name: str, exclude_user_id: Optional[int] = None
) -> str:
    """
    Slug of ``name``, suffixed with a counter until no other user has it.

    Args:
        db: Database session
        name: Display name to derive the handle from
        exclude_user_id: User whose current handle may be reused

    Returns:
        Handle not taken by any other user
    """
    base = slugify(name)
    handle = base
    counter = 1
    while True:
        owner = crud_user.get_by_handle(db, handle)
        if owner is None or owner.id == exclude_user_id:
            return handle
        handle = f"{base}-{counter}"
        counter += 1


class UserAuthService:
    """Service layer for registration and login."""

    def __init__(self):
        self.crud = crud_user

    # =====================================================================
    # REGISTRATION
    # =====================================================================

    def register_user(self, db: Session, data: UserRegister) -> User:
        """
        Register a user with a unique handle and an empty profile.

        Raises:
            BusinessError(conflict): If the email is already registered
        """
        if self.crud.get_by_email(db, email=data.email):
            raise BusinessError.conflict("Email already registered")

        user = self.crud.create(
            db,
            name=data.name,
            handle=generate_unique_handle(db, data.name),
            email=data.email,
            password=data.password,
        )
        logger.info(f"UserAuthService.register_user: user {user.id} registered")
        return user

    # =====================================================================
    # AUTHENTICATION & LOGIN
    # =====================================================================

    def authenticate_user(self, db: Session, login_data: LoginRequest) -> User:
        """
        Authenticate user with email and password.

        Raises:
            BusinessError(unauthorized): If credentials are invalid
            BusinessError(access_denied): If account is not active
        """
        user = self.crud.get_by_email(db, email=login_data.email)
        if not user or not self.crud.verify_password(login_data.password, user.password_hash):
            raise BusinessError.unauthorized("Invalid email or password")

        if user.status != Status.active:
            raise BusinessError.access_denied(f"Account is {user.status.value}")

        return self.crud.touch_last_login(db, db_obj=user)

    # =====================================================================
    # USER RETRIEVAL
    # =====================================================================

    def get_user(self, db: Session, user_id: int) -> User:
        user = self.crud.get(db, id=user_id)
        if not user:
            raise BusinessError.not_found("User not found")
        return user


user_auth_service = UserAuthService()
