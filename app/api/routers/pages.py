# app/api/routers/pages.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_user
from app.core.storage import LocalStorage, get_storage
from app.models.user_auth import User
from app.schemas.journal import PageOut
from app.schemas.user_auth import SuccessResponse
from app.services.journal import journal_service

router = APIRouter(prefix="/pages", tags=["Journal Pages"])


@router.get("/{page_id}", response_model=PageOut, summary="Show a page")
def show_page(
    page_id: int,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return journal_service.show_journal_page(
        db, storage, user_id=current_user.id, page_id=page_id
    )


@router.delete("/{page_id}", response_model=SuccessResponse, summary="Delete a page")
def delete_page(
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    journal_service.delete_journal_page(db, user_id=current_user.id, page_id=page_id)
    return SuccessResponse(message="Journal page deleted")
