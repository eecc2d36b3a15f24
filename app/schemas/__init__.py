# app/schemas/__init__.py

from .user_auth import (
    UserRegister,
    UserOut,
    LoginRequest,
    TokenResponse,
    RefreshTokenRequest,
    SuccessResponse,
)
from .profile import (
    ProfileUpdate,
    ProfileOut,
    UserProfileOut,
)
from .journal import (
    JournalCreate,
    JournalArchiveRequest,
    ImageOut,
    NotificationOut,
    PageOut,
    JournalSummary,
    JournalWithPages,
    JournalWithPage,
    ArchiveStatus,
    PdfExportOut,
    ShippingAddress,
    PrintJobRequest,
)


__all__ = [
    # Auth
    "UserRegister", "UserOut", "LoginRequest", "TokenResponse",
    "RefreshTokenRequest", "SuccessResponse",

    # Profile
    "ProfileUpdate", "ProfileOut", "UserProfileOut",

    # Journals
    "JournalCreate", "JournalArchiveRequest", "ImageOut", "NotificationOut",
    "PageOut", "JournalSummary", "JournalWithPages", "JournalWithPage",
    "ArchiveStatus", "PdfExportOut", "ShippingAddress", "PrintJobRequest",
]
