# =====================================================================
# CRUD LAYER - crud/journal.py
# =====================================================================

from typing import Optional, List, Dict, Iterable
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.journal import (
    Journal,
    JournalPage,
    Image,
    JournalNotification,
    ReminderType,
)


class CRUDJournal:
    """
    Repository for journals, pages, images and notifications.

    Write methods only flush; the service layer owns commit and rollback so
    that one content submission lands in a single transaction.
    """

    # =====================================================================
    # CREATE OPERATIONS
    # =====================================================================

    def create(self, db: Session, *, user_id: int, title: str) -> Journal:
        """Create a journal owned by user_id."""
        db_obj = Journal(user_id=user_id, title=title, archive=False)
        db.add(db_obj)
        db.flush()
        return db_obj

    def create_notification(
        self,
        db: Session,
        *,
        journal_id: int,
        reminder_type: ReminderType,
        reminder_time: str,
    ) -> JournalNotification:
        """Attach a reminder configuration to a journal."""
        db_obj = JournalNotification(
            journal_id=journal_id, type=reminder_type, time=reminder_time
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def create_page(self, db: Session, *, journal_id: int, content: str) -> JournalPage:
        """Create a page holding already-processed HTML."""
        db_obj = JournalPage(journal_id=journal_id, content=content)
        db.add(db_obj)
        db.flush()
        return db_obj

    def create_image(self, db: Session, *, page_id: int, path: str) -> Image:
        """Link a stored image path to a page."""
        db_obj = Image(journal_page_id=page_id, path=path)
        db.add(db_obj)
        db.flush()
        return db_obj

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get(self, db: Session, id: int) -> Optional[Journal]:
        """Get journal by ID."""
        return db.query(Journal).filter(Journal.id == id).first()

    def get_page(self, db: Session, id: int) -> Optional[JournalPage]:
        """Get page by ID."""
        return db.query(JournalPage).filter(JournalPage.id == id).first()

    def get_notification(self, db: Session, *, journal_id: int) -> Optional[JournalNotification]:
        return (
            db.query(JournalNotification)
            .filter(JournalNotification.journal_id == journal_id)
            .first()
        )

    def list_by_user(
        self, db: Session, *, user_id: int, archived: bool = False
    ) -> List[Journal]:
        """Journals of a user filtered by archive flag, newest first."""
        return (
            db.query(Journal)
            .filter(Journal.user_id == user_id, Journal.archive == archived)
            .order_by(Journal.id.desc())
            .all()
        )

    def search_by_title(self, db: Session, *, user_id: int, title: str) -> List[Journal]:
        """Non-archived journals of a user whose title contains ``title``."""
        return (
            db.query(Journal)
            .filter(
                Journal.user_id == user_id,
                Journal.archive.is_(False),
                Journal.title.contains(title, autoescape=True),
            )
            .order_by(Journal.id.desc())
            .all()
        )

    def first_pages(self, db: Session, journal_ids: Iterable[int]) -> Dict[int, JournalPage]:
        """Earliest page of each journal, fetched in one batched query."""
        journal_ids = list(journal_ids)
        if not journal_ids:
            return {}

        first_ids = (
            db.query(func.min(JournalPage.id))
            .filter(JournalPage.journal_id.in_(journal_ids))
            .group_by(JournalPage.journal_id)
        )
        pages = db.query(JournalPage).filter(JournalPage.id.in_(first_ids)).all()
        return {page.journal_id: page for page in pages}

    def list_pages(self, db: Session, *, journal_id: int) -> List[JournalPage]:
        """Pages of a journal, newest first."""
        return (
            db.query(JournalPage)
            .filter(JournalPage.journal_id == journal_id)
            .order_by(JournalPage.id.desc())
            .all()
        )

    def list_pages_chronological(self, db: Session, *, journal_id: int) -> List[JournalPage]:
        """Pages of a journal in writing order (used for export)."""
        return (
            db.query(JournalPage)
            .filter(JournalPage.journal_id == journal_id)
            .order_by(JournalPage.id.asc())
            .all()
        )

    # =====================================================================
    # UPDATE OPERATIONS
    # =====================================================================

    def toggle_archive(self, db: Session, *, db_obj: Journal) -> Journal:
        """Invert the archive flag."""
        db_obj.archive = not db_obj.archive
        db.flush()
        return db_obj

    # =====================================================================
    # DELETE OPERATIONS
    # =====================================================================

    def delete(self, db: Session, *, db_obj: Journal) -> Journal:
        """Delete a journal with its pages, images and notification."""
        db.delete(db_obj)
        db.flush()
        return db_obj

    def delete_page(self, db: Session, *, db_obj: JournalPage) -> JournalPage:
        """Delete a page with its images."""
        db.delete(db_obj)
        db.flush()
        return db_obj


crud_journal = CRUDJournal()
