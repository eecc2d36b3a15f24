# models/journal.py

import enum
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum as SqlEnum
)
from sqlalchemy.orm import relationship
from app.core.config import Base


class ReminderType(enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class Journal(Base):
    __tablename__ = "journals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    archive = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="journals")
    pages = relationship("JournalPage", back_populates="journal", cascade="all, delete-orphan", order_by="JournalPage.id")
    notification = relationship("JournalNotification", back_populates="journal", uselist=False, cascade="all, delete-orphan")


class JournalPage(Base):
    __tablename__ = "journal_pages"

    id = Column(Integer, primary_key=True, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)  # sanitized HTML

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    journal = relationship("Journal", back_populates="pages")
    images = relationship("Image", back_populates="page", cascade="all, delete-orphan", order_by="Image.id")


class Image(Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    journal_page_id = Column(Integer, ForeignKey("journal_pages.id", ondelete="CASCADE"), nullable=False, index=True)
    path = Column(String(255), nullable=False)  # storage path or absolute URL

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    page = relationship("JournalPage", back_populates="images")


class JournalNotification(Base):
    __tablename__ = "journal_notifications"

    id = Column(Integer, primary_key=True, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), unique=True, nullable=False)
    type = Column(SqlEnum(ReminderType), nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    journal = relationship("Journal", back_populates="notification")
