# crud/user_auth.py
from typing import Optional
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from passlib.context import CryptContext

from app.models.user_auth import User, Status
from app.models.profile import Profile

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserCRUD:
    """CRUD operations for User model."""

    # =====================================================================
    # HELPER METHODS
    # =====================================================================

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password."""
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return pwd_context.verify(plain_password, hashed_password)

    # =====================================================================
    # CREATE OPERATIONS
    # =====================================================================

    def create(
        self, db: Session, *, name: str, handle: str, email: str, password: str
    ) -> User:
        """
        Create a new user together with an empty profile.

        Args:
            db: Database session
            name: Display name
            handle: Unique slug derived from the name
            email: Login email
            password: Plain password (hashed here)

        Returns:
            Created User instance
        """
        db_obj = User(
            name=name,
            handle=handle,
            email=email,
            password_hash=self.hash_password(password),
            status=Status.active,
        )
        db.add(db_obj)
        db.flush()

        db.add(Profile(user_id=db_obj.id))

        db.commit()
        db.refresh(db_obj)
        return db_obj

    # =====================================================================
    # UPDATE OPERATIONS
    # =====================================================================

    def touch_last_login(self, db: Session, *, db_obj: User) -> User:
        """Record a successful login."""
        db_obj.last_login_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get(self, db: Session, id: int) -> Optional[User]:
        """Get user by ID."""
        return db.query(User).filter(User.id == id).first()

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        """Get user by email."""
        return db.query(User).filter(User.email == email).first()

    def get_by_handle(self, db: Session, handle: str) -> Optional[User]:
        """Get user by handle."""
        return db.query(User).filter(User.handle == handle).first()


crud_user = UserCRUD()
