# =====================================================================
# PDF EXPORT - services/pdf_export.py
# =====================================================================

import html
import io
import logging
from typing import Iterable

import fitz  # PyMuPDF
from xhtml2pdf import pisa

from app.core.config import settings
from app.core.storage import LocalStorage
from app.models.journal import Journal, JournalPage
from app.schemas.journal import PdfExportOut

logger = logging.getLogger(__name__)

PDF_FOLDER = "journal_pdfs"

BASE_CSS = """
@page {{
    size: {width}pt {height}pt;
    margin: 36pt;
}}
body {{
    font-family: Helvetica, sans-serif;
    font-size: 11pt;
}}
.journal-title {{
    text-align: center;
    font-size: 24px;
    font-weight: bold;
    margin-bottom: 20px;
}}
.journal-page {{
    page-break-after: always;
}}
.page-date {{
    color: #666666;
    font-size: 9pt;
    margin-bottom: 8px;
}}
img {{
    max-width: 100%;
}}
"""

DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>{css}</style>
</head>
<body>
<div class="journal-title">{title}</div>
{body}
</body>
</html>
"""


def clean_page_content(content: str) -> str:
    """Drop literal backslash-n / backslash-r sequences left by JSON clients."""
    return content.replace("\\n", "").replace("\\r", "")


def count_pages(data: bytes) -> int:
    with fitz.open("pdf", data) as doc:
        return doc.page_count


class PdfExporter:
    """Renders a journal to an interior PDF and a cover PDF."""

    def __init__(
        self,
        storage: LocalStorage,
        page_width: int = settings.PDF_PAGE_WIDTH,
        page_height: int = settings.PDF_PAGE_HEIGHT,
    ):
        self.storage = storage
        self.css = BASE_CSS.format(width=page_width, height=page_height)

    # =====================================================================
    # HTML
    # =====================================================================

    def interior_html(self, journal: Journal, pages: Iterable[JournalPage]) -> str:
        blocks = []
        for page in pages:
            created = page.created_at.strftime("%d %B %Y") if page.created_at else ""
            blocks.append(
                '<div class="journal-page">'
                f'<div class="page-date">{created}</div>'
                f"{clean_page_content(page.content)}"
                "</div>"
            )
        return DOCUMENT.format(
            title=html.escape(journal.title), css=self.css, body="\n".join(blocks)
        )

    def cover_html(self, journal: Journal) -> str:
        return DOCUMENT.format(title=html.escape(journal.title), css=self.css, body="")

    # =====================================================================
    # RENDERING
    # =====================================================================

    def link_callback(self, uri: str, rel: str) -> str:
        """Resolve served storage URLs to local files so images embed offline."""
        prefix = f"{self.storage.base_url}/"
        if uri.startswith(prefix):
            try:
                return str(self.storage.path(uri[len(prefix):]))
            except ValueError:
                return uri
        return uri

    def render(self, markup: str) -> bytes:
        result = io.BytesIO()
        pisa_status = pisa.CreatePDF(markup, dest=result, link_callback=self.link_callback)
        if pisa_status.err:
            raise RuntimeError(f"PDF generation error: {pisa_status.err}")
        return result.getvalue()

    def export(self, journal: Journal, pages: Iterable[JournalPage]) -> PdfExportOut:
        """
        Render and store ``journal_pdfs/<id>.pdf`` and ``journal_pdfs/<id>_cover.pdf``.

        Returns:
            Served URLs of both files and the interior page count
        """
        interior = self.render(self.interior_html(journal, pages))
        cover = self.render(self.cover_html(journal))

        pdf_path = self.storage.put(f"{PDF_FOLDER}/{journal.id}.pdf", interior)
        cover_path = self.storage.put(f"{PDF_FOLDER}/{journal.id}_cover.pdf", cover)
        total_pages = count_pages(interior)

        logger.info(f"PdfExporter: journal {journal.id} rendered, {total_pages} page(s)")
        return PdfExportOut(
            cover_url=self.storage.url(cover_path),
            pdf_url=self.storage.url(pdf_path),
            total_pages=total_pages,
        )
