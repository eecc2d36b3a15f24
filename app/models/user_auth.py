# models/user_auth.py

from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, DateTime, Integer, Enum as SqlEnum
)
import enum
from sqlalchemy.orm import relationship
from app.core.config import Base
from app.core.storage import public_url


class Status(enum.Enum):
    active = "active"
    suspended = "suspended"
    deactivated = "deactivated"


class User(Base):
    __tablename__ = "users"

    # ---- Base fields ----
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    handle = Column(String(120), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(255), nullable=True)  # storage path or absolute URL

    # ---- Account status ----
    status = Column(SqlEnum(Status), default=Status.active)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))
    last_login_at = Column(DateTime, nullable=True)

    # ---- Relationships ----
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    journals = relationship("Journal", back_populates="user", cascade="all, delete-orphan")

    @property
    def avatar_url(self):
        return public_url(self.avatar)
