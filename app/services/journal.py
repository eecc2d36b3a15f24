# =====================================================================
# SERVICE LAYER - services/journal.py
# =====================================================================

import json
import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Sequence, Tuple

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessError
from app.core.storage import LocalStorage
from app.crud.journal import crud_journal
from app.models.journal import Journal, JournalPage
from app.schemas.journal import (
    ArchiveStatus,
    ImageOut,
    JournalCreate,
    JournalSummary,
    JournalWithPage,
    JournalWithPages,
    NotificationOut,
    PageOut,
    PdfExportOut,
    PrintJobRequest,
)
from app.services.content_formatter import ContentFormatter
from app.services.html_rewriter import HtmlImageRewriter
from app.services.pdf_export import PdfExporter
from app.services.print_vendor import PrintVendorClient, build_print_job_payload

logger = logging.getLogger(__name__)

INLINE_IMAGE_MARKER = "data:image/"


def parse_content(content: str) -> Any:
    """
    Decode submitted content.

    JSON arrays/objects are returned decoded (delta payloads); anything else
    is returned unchanged and treated as HTML.
    """
    stripped = content.strip()
    if stripped[:1] in ("[", "{"):
        try:
            return json.loads(stripped)
        except ValueError:
            pass
    return content


class JournalService:
    """Journal creation, queries, archive/delete and export."""

    def __init__(self):
        self.crud = crud_journal

    # =====================================================================
    # HELPERS
    # =====================================================================

    @contextmanager
    def transaction(self, db: Session, where: str):
        """Commit on success; roll back and re-raise on any failure."""
        try:
            yield
            db.commit()
        except BusinessError as exc:
            db.rollback()
            logger.warning(f"{where}: {exc.kind.value}: {exc.message}")
            raise
        except Exception as exc:
            db.rollback()
            logger.error(f"{where}: {exc}", exc_info=True)
            raise

    def _get_journal(
        self, db: Session, journal_id: int, user_id: int, *, for_update: bool
    ) -> Journal:
        """
        Load a journal owned by user_id.

        Foreign journals are reported as access denied for mutations and as
        not found for reads.
        """
        journal = self.crud.get(db, id=journal_id)
        if journal is None:
            raise BusinessError.not_found("Journal not found")
        if journal.user_id != user_id:
            if for_update:
                raise BusinessError.access_denied("You do not own this journal")
            raise BusinessError.not_found("Journal not found")
        return journal

    def _get_page(
        self, db: Session, page_id: int, user_id: int, *, for_update: bool
    ) -> JournalPage:
        page = self.crud.get_page(db, id=page_id)
        if page is None:
            raise BusinessError.not_found("Journal page not found")
        if page.journal.user_id != user_id:
            if for_update:
                raise BusinessError.access_denied("You do not own this journal page")
            raise BusinessError.not_found("Journal page not found")
        return page

    @staticmethod
    def page_out(page: JournalPage, storage: LocalStorage) -> PageOut:
        """Page with image URLs resolved against the given storage."""
        return PageOut(
            id=page.id,
            journal_id=page.journal_id,
            content=page.content,
            created_at=page.created_at,
            images=[ImageOut(id=image.id, url=storage.url(image.path)) for image in page.images],
        )

    def _summaries(
        self, db: Session, storage: LocalStorage, journals: List[Journal]
    ) -> List[JournalSummary]:
        previews = self.crud.first_pages(db, (j.id for j in journals))
        return [
            JournalSummary(
                id=journal.id,
                title=journal.title,
                archive=journal.archive,
                created_at=journal.created_at,
                preview=(
                    self.page_out(previews[journal.id], storage)
                    if journal.id in previews
                    else None
                ),
            )
            for journal in journals
        ]

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get_journals(
        self, db: Session, storage: LocalStorage, user_id: int
    ) -> List[JournalSummary]:
        """Non-archived journals, newest first, each with its first page."""
        journals = self.crud.list_by_user(db, user_id=user_id, archived=False)
        return self._summaries(db, storage, journals)

    def get_archived_journals(
        self, db: Session, storage: LocalStorage, user_id: int
    ) -> List[JournalSummary]:
        """Archived journals, newest first, each with its first page."""
        journals = self.crud.list_by_user(db, user_id=user_id, archived=True)
        return self._summaries(db, storage, journals)

    def search_journals(
        self, db: Session, storage: LocalStorage, user_id: int, title: str
    ) -> List[JournalSummary]:
        """Title search over the user's non-archived journals."""
        journals = self.crud.search_by_title(db, user_id=user_id, title=title)
        return self._summaries(db, storage, journals)

    def get_journal_pages(
        self, db: Session, storage: LocalStorage, user_id: int, journal_id: int
    ) -> JournalWithPages:
        """All pages of one journal, newest first."""
        journal = self._get_journal(db, journal_id, user_id, for_update=False)
        pages = self.crud.list_pages(db, journal_id=journal.id)
        return JournalWithPages(
            id=journal.id,
            title=journal.title,
            created_at=journal.created_at,
            pages=[self.page_out(page, storage) for page in pages],
        )

    def show_journal_page(
        self, db: Session, storage: LocalStorage, user_id: int, page_id: int
    ) -> PageOut:
        page = self._get_page(db, page_id, user_id, for_update=False)
        return self.page_out(page, storage)

    # =====================================================================
    # ARCHIVE / DELETE
    # =====================================================================

    def toggle_archive(self, db: Session, user_id: int, journal_id: int) -> ArchiveStatus:
        with self.transaction(db, "JournalService.toggle_archive"):
            journal = self._get_journal(db, journal_id, user_id, for_update=True)
            self.crud.toggle_archive(db, db_obj=journal)
        return ArchiveStatus(journal_id=journal.id, archive=journal.archive)

    def delete_journal(self, db: Session, user_id: int, journal_id: int) -> None:
        with self.transaction(db, "JournalService.delete_journal"):
            journal = self._get_journal(db, journal_id, user_id, for_update=True)
            self.crud.delete(db, db_obj=journal)

    def delete_journal_page(self, db: Session, user_id: int, page_id: int) -> None:
        with self.transaction(db, "JournalService.delete_journal_page"):
            page = self._get_page(db, page_id, user_id, for_update=True)
            self.crud.delete_page(db, db_obj=page)

    # =====================================================================
    # CONTENT SUBMISSION
    # =====================================================================

    def process_content(
        self,
        storage: LocalStorage,
        content: str,
        journal_id: int,
        images: Sequence[Optional[UploadFile]],
    ) -> Tuple[str, List[str]]:
        """
        Turn submitted content into stored HTML.

        Delta JSON goes through the formatter; HTML with inline base64 images
        through the inline rewriter; other HTML through the upload rewriter.

        Returns:
            (html, stored image paths)
        """
        parsed = parse_content(content)

        if isinstance(parsed, str):
            rewriter = HtmlImageRewriter(storage)
            if INLINE_IMAGE_MARKER in parsed:
                result = rewriter.rewrite_inline(parsed, journal_id)
            else:
                result = rewriter.rewrite_uploaded(parsed, images, journal_id)
            return result.html, result.image_paths

        uploads = []
        if isinstance(parsed, (list, tuple)):
            uploads = [
                storage.upload(image, f"journal/{journal_id}")
                for image in images
                if image is not None
            ]
        result = ContentFormatter(storage).format(parsed, journal_id, uploads)
        if not result.ok:
            raise BusinessError.validation(result.error)
        return result.html, result.image_paths

    def _create_page(
        self, db: Session, journal: Journal, html: str, image_paths: List[str]
    ) -> JournalPage:
        page = self.crud.create_page(db, journal_id=journal.id, content=html)
        for path in image_paths:
            self.crud.create_image(db, page_id=page.id, path=path)
        return page

    def _with_page(
        self, db: Session, storage: LocalStorage, journal: Journal, page: JournalPage
    ) -> JournalWithPage:
        db.refresh(journal)
        db.refresh(page)
        notification = self.crud.get_notification(db, journal_id=journal.id)
        return JournalWithPage(
            id=journal.id,
            title=journal.title,
            archive=journal.archive,
            created_at=journal.created_at,
            notification=(
                NotificationOut.model_validate(notification) if notification else None
            ),
            page=self.page_out(page, storage),
        )

    def create_journal(
        self,
        db: Session,
        storage: LocalStorage,
        user_id: int,
        data: JournalCreate,
        images: Sequence[Optional[UploadFile]] = (),
    ) -> JournalWithPage:
        """
        Create a journal with its first page in one transaction.

        Journal, notification, page and image rows commit together or not
        at all. Stored files are not removed on rollback.
        """
        if (data.reminder_type is None) != (data.reminder_time is None):
            raise BusinessError.validation(
                "reminder_type and reminder_time must be given together"
            )

        with self.transaction(db, "JournalService.create_journal"):
            journal = self.crud.create(db, user_id=user_id, title=data.title)
            if data.reminder_type is not None:
                self.crud.create_notification(
                    db,
                    journal_id=journal.id,
                    reminder_type=data.reminder_type,
                    reminder_time=data.reminder_time,
                )
            html, image_paths = self.process_content(
                storage, data.content, journal.id, images
            )
            page = self._create_page(db, journal, html, image_paths)

        return self._with_page(db, storage, journal, page)

    def create_journal_page(
        self,
        db: Session,
        storage: LocalStorage,
        user_id: int,
        journal_id: int,
        content: str,
        images: Sequence[Optional[UploadFile]] = (),
    ) -> JournalWithPage:
        """Add a page to an existing journal in one transaction."""
        with self.transaction(db, "JournalService.create_journal_page"):
            journal = self._get_journal(db, journal_id, user_id, for_update=True)
            html, image_paths = self.process_content(storage, content, journal.id, images)
            page = self._create_page(db, journal, html, image_paths)

        return self._with_page(db, storage, journal, page)

    # =====================================================================
    # EXPORT / PRINT
    # =====================================================================

    def generate_pdf(
        self, db: Session, storage: LocalStorage, user_id: int, journal_id: int
    ) -> PdfExportOut:
        journal = self._get_journal(db, journal_id, user_id, for_update=False)
        pages = self.crud.list_pages_chronological(db, journal_id=journal.id)
        try:
            return PdfExporter(storage).export(journal, pages)
        except Exception as exc:
            logger.error(f"JournalService.generate_pdf: {exc}", exc_info=True)
            raise

    def create_print_job(
        self,
        db: Session,
        storage: LocalStorage,
        client: PrintVendorClient,
        user_id: int,
        request: PrintJobRequest,
    ) -> dict:
        """Render the journal, then submit it to the print vendor."""
        journal = self._get_journal(db, request.journal_id, user_id, for_update=False)
        export = self.generate_pdf(db, storage, user_id, journal.id)
        payload = build_print_job_payload(
            request, export, title=journal.title, external_id=f"journal-{journal.id}"
        )
        try:
            return client.create_print_job(payload)
        except Exception as exc:
            logger.error(f"JournalService.create_print_job: {exc}", exc_info=True)
            raise


journal_service = JournalService()
