# app/models/__init__.py

from app.core.config import Base

# Import all models here so metadata.create_all and app-wide imports work
from .user_auth import User, Status
from .profile import Profile, Gender
from .journal import Journal, JournalPage, Image, JournalNotification, ReminderType

__all__ = [
    "Base",
    "User",
    "Status",
    "Profile",
    "Gender",
    "Journal",
    "JournalPage",
    "Image",
    "JournalNotification",
    "ReminderType",
]
