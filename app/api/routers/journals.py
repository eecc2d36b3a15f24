# app/api/routers/journals.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_user
from app.core.storage import LocalStorage, get_storage
from app.models.journal import ReminderType
from app.models.user_auth import User
from app.schemas.journal import (
    REMINDER_TIME_PATTERN,
    ArchiveStatus,
    JournalArchiveRequest,
    JournalCreate,
    JournalSummary,
    JournalWithPage,
    JournalWithPages,
    PdfExportOut,
)
from app.schemas.user_auth import SuccessResponse
from app.services.journal import journal_service

router = APIRouter(prefix="/journals", tags=["Journals"])


# =====================================================================
# LISTING & SEARCH
# =====================================================================

@router.get("", response_model=List[JournalSummary], summary="List journals")
def list_journals(
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Non-archived journals, newest first, each with its first page."""
    return journal_service.get_journals(db, storage, user_id=current_user.id)


@router.get("/archive", response_model=List[JournalSummary], summary="List archived journals")
def list_archived_journals(
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return journal_service.get_archived_journals(db, storage, user_id=current_user.id)


@router.post("/archive", response_model=ArchiveStatus, summary="Toggle archive flag")
def toggle_archive(
    request: JournalArchiveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Archive a journal, or bring it back if it is already archived.
    """
    return journal_service.toggle_archive(
        db, user_id=current_user.id, journal_id=request.journal_id
    )


@router.get("/search", response_model=List[JournalSummary], summary="Search journals by title")
def search_journals(
    title: str = Query(..., min_length=1, max_length=255),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return journal_service.search_journals(
        db, storage, user_id=current_user.id, title=title
    )


# =====================================================================
# CREATE
# =====================================================================

@router.post(
    "",
    response_model=JournalWithPage,
    status_code=status.HTTP_201_CREATED,
    summary="Create a journal with its first page",
)
def create_journal(
    title: str = Form(..., min_length=1, max_length=255),
    content: str = Form(..., min_length=1),
    reminder_type: Optional[ReminderType] = Form(None),
    reminder_time: Optional[str] = Form(None, pattern=REMINDER_TIME_PATTERN),
    images: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """
    Create a journal and its first page (multipart form).

    - **content**: delta JSON array or HTML; HTML may embed base64 images
    - **images**: files paired by position with the content's images
    - **reminder_type** / **reminder_time**: optional, given together (`HH:MM`)
    """
    data = JournalCreate(
        title=title,
        content=content,
        reminder_type=reminder_type,
        reminder_time=reminder_time,
    )
    return journal_service.create_journal(
        db, storage, user_id=current_user.id, data=data, images=images or []
    )


# =====================================================================
# PER-JOURNAL OPERATIONS
# =====================================================================

@router.get(
    "/{journal_id}/pages",
    response_model=JournalWithPages,
    summary="List pages of a journal",
)
def list_pages(
    journal_id: int,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return journal_service.get_journal_pages(
        db, storage, user_id=current_user.id, journal_id=journal_id
    )


@router.post(
    "/{journal_id}/pages",
    response_model=JournalWithPage,
    status_code=status.HTTP_201_CREATED,
    summary="Add a page to a journal",
)
def create_page(
    journal_id: int,
    content: str = Form(..., min_length=1),
    images: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return journal_service.create_journal_page(
        db,
        storage,
        user_id=current_user.id,
        journal_id=journal_id,
        content=content,
        images=images or [],
    )


@router.get("/{journal_id}/pdf", response_model=PdfExportOut, summary="Render journal to PDF")
def generate_pdf(
    journal_id: int,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """
    Render the interior and cover PDFs and return their URLs and page count.
    """
    return journal_service.generate_pdf(
        db, storage, user_id=current_user.id, journal_id=journal_id
    )


@router.delete("/{journal_id}", response_model=SuccessResponse, summary="Delete a journal")
def delete_journal(
    journal_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    journal_service.delete_journal(db, user_id=current_user.id, journal_id=journal_id)
    return SuccessResponse(message="Journal deleted")
