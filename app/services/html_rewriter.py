# =====================================================================
# HTML IMAGE REWRITER - services/html_rewriter.py
# =====================================================================
"""
Rewrites ``<img>`` tags of submitted HTML so they point at stored files.

Two variants exist:

* ``rewrite_uploaded`` pairs tags with uploaded files by position and only
  moves to the next upload after a successful substitution.
* ``rewrite_inline`` decodes ``data:image/<mime>;base64,<data>`` sources and
  stores each payload.
"""

import base64
import binascii
import logging
import re
import tempfile
import warnings
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from fastapi import UploadFile
from pydantic import BaseModel, Field

from app.core.storage import LocalStorage, Upload

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(
    r"^\s*data:image/(?P<mime>[\w.+-]+);base64,(?P<data>.+?)\s*$", re.DOTALL
)
DOUBLE_QUOTED_SRC = re.compile(r'(?<![\w-])src="([^"\']*)"')
WHITESPACE_CONTROL = str.maketrans("", "", "\n\r\t")


class RewriteResult(BaseModel):
    html: str
    image_paths: List[str] = Field(default_factory=list)
    diagnostics: List[str] = Field(default_factory=list)


def parse_lenient(markup: str) -> Tuple[BeautifulSoup, List[str]]:
    """
    Parse possibly malformed HTML without raising.

    Returns the tree and the parser warnings collected while building it.
    """
    diagnostics: List[str] = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            soup = BeautifulSoup(markup or "", "html.parser")
        except ParserRejectedMarkup as exc:
            diagnostics.append(f"markup rejected: {exc}")
            soup = BeautifulSoup("", "html.parser")
    diagnostics.extend(str(w.message) for w in caught)
    return soup, diagnostics


def serialize_body(soup: BeautifulSoup) -> str:
    """
    Serialize only the body's children, single-quote ``src`` values and drop
    newline, carriage return and tab characters.
    """
    container = soup.body or soup
    markup = "".join(str(node) for node in container.contents)
    markup = DOUBLE_QUOTED_SRC.sub(r"src='\1'", markup)
    return markup.translate(WHITESPACE_CONTROL)


def extension_for_mime(mime: str) -> str:
    subtype = mime.lower().split("+", 1)[0]
    return f"image.{subtype}"


class HtmlImageRewriter:
    """Stores images referenced by HTML content and rewrites their ``src``."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    @staticmethod
    def folder(journal_id: int) -> str:
        return f"journal/{journal_id}"

    # =====================================================================
    # UPLOADED FILES
    # =====================================================================

    def rewrite_uploaded(
        self,
        markup: str,
        uploads: Sequence[Optional[Upload]],
        journal_id: int,
    ) -> RewriteResult:
        """
        Pair ``<img>`` tags, in document order, with uploaded files.

        The upload index advances only when a substitution happens; a tag
        whose slot is absent keeps its original ``src``.
        """
        soup, diagnostics = parse_lenient(markup)
        image_paths: List[str] = []
        upload_index = 0

        for img in soup.find_all("img"):
            upload = uploads[upload_index] if upload_index < len(uploads) else None
            if upload is None:
                continue

            stored = self.storage.upload(upload, self.folder(journal_id))
            img["src"] = self.storage.url(stored)
            image_paths.append(stored)
            upload_index += 1

        remaining = len([u for u in uploads if u is not None]) - upload_index
        if remaining > 0:
            diagnostics.append(f"{remaining} uploaded image(s) left unused")
        if diagnostics:
            logger.debug(f"HtmlImageRewriter.rewrite_uploaded: {diagnostics}")

        return RewriteResult(
            html=serialize_body(soup), image_paths=image_paths, diagnostics=diagnostics
        )

    # =====================================================================
    # INLINE BASE64 IMAGES
    # =====================================================================

    def rewrite_inline(self, markup: str, journal_id: int) -> RewriteResult:
        """
        Store every inline base64 image and point its ``src`` at the stored file.

        Sources that are not base64 data URLs are left unchanged.
        """
        soup, diagnostics = parse_lenient(markup)
        image_paths: List[str] = []

        for img in soup.find_all("img"):
            match = DATA_URL_PATTERN.match(img.get("src") or "")
            if not match or not match.group("mime") or not match.group("data"):
                continue

            try:
                payload = base64.b64decode(match.group("data"))
            except (binascii.Error, ValueError) as exc:
                diagnostics.append(f"undecodable base64 image skipped: {exc}")
                continue

            stored = self.store_payload(payload, match.group("mime"), journal_id)
            img["src"] = self.storage.url(stored)
            image_paths.append(stored)

        if diagnostics:
            logger.debug(f"HtmlImageRewriter.rewrite_inline: {diagnostics}")

        return RewriteResult(
            html=serialize_body(soup), image_paths=image_paths, diagnostics=diagnostics
        )

    def store_payload(self, payload: bytes, mime: str, journal_id: int) -> str:
        """Materialize a decoded image as a temporary file and store it."""
        with tempfile.SpooledTemporaryFile() as tmp:
            tmp.write(payload)
            tmp.seek(0)
            upload = UploadFile(file=tmp, filename=extension_for_mime(mime))
            return self.storage.upload(upload, self.folder(journal_id))
