# schemas/journal.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

from app.models.journal import ReminderType


REMINDER_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# =====================================================================
# REQUEST SCHEMAS
# =====================================================================

class JournalCreate(BaseModel):
    """Fields of a journal creation request (uploaded images travel separately)."""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, description="Delta JSON array or HTML")
    reminder_type: Optional[ReminderType] = None
    reminder_time: Optional[str] = Field(default=None, pattern=REMINDER_TIME_PATTERN)


class JournalArchiveRequest(BaseModel):
    journal_id: int


# =====================================================================
# READ SCHEMAS
# =====================================================================

class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: ReminderType
    time: str


class PageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    journal_id: int
    content: str
    created_at: datetime
    images: List[ImageOut] = []


class JournalSummary(BaseModel):
    """List item: journal with its earliest page as preview."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    archive: bool
    created_at: datetime
    preview: Optional[PageOut] = None


class JournalWithPages(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    created_at: datetime
    pages: List[PageOut] = []


class JournalWithPage(BaseModel):
    """Result of a content submission: the journal and the page just created."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    archive: bool
    created_at: datetime
    notification: Optional[NotificationOut] = None
    page: PageOut


class ArchiveStatus(BaseModel):
    journal_id: int
    archive: bool


# =====================================================================
# EXPORT / PRINT SCHEMAS
# =====================================================================

class PdfExportOut(BaseModel):
    cover_url: str
    pdf_url: str
    total_pages: int


class ShippingAddress(BaseModel):
    name: str
    street1: str
    city: str
    state_code: Optional[str] = None
    postcode: str
    country_code: str = Field(..., min_length=2, max_length=2)
    phone_number: str


class PrintJobRequest(BaseModel):
    journal_id: int
    contact_email: EmailStr
    external_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    shipping_level: str = "MAIL"
    shipping_address: ShippingAddress

    class Config:
        json_schema_extra = {
            "example": {
                "journal_id": 1,
                "contact_email": "jane@example.com",
                "quantity": 1,
                "shipping_level": "MAIL",
                "shipping_address": {
                    "name": "Jane Doe",
                    "street1": "350 5th Ave",
                    "city": "New York",
                    "state_code": "NY",
                    "postcode": "10001",
                    "country_code": "US",
                    "phone_number": "212-555-1234",
                },
            }
        }
