# app/api/routers/print_jobs.py
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_user
from app.core.storage import LocalStorage, get_storage
from app.models.user_auth import User
from app.schemas.journal import PrintJobRequest
from app.services.journal import journal_service
from app.services.print_vendor import PrintVendorClient, get_print_client

router = APIRouter(prefix="/print-jobs", tags=["Print Jobs"])


@router.post("", response_model=Dict[str, Any], summary="Order a printed copy")
def create_print_job(
    request: PrintJobRequest,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    client: PrintVendorClient = Depends(get_print_client),
    current_user: User = Depends(get_current_user),
):
    """
    Render the journal's PDFs and submit a print job.

    The vendor's response is returned as received, errors included.
    """
    return journal_service.create_print_job(
        db, storage, client, user_id=current_user.id, request=request
    )
