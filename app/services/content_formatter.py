# =====================================================================
# CONTENT FORMATTER - services/content_formatter.py
# =====================================================================
"""
Rich-text delta -> HTML.

A delta is an ordered list of insert operations::

    [{"insert": "Day one", "attributes": {"h": 1}},
     {"insert": "Went hiking", "attributes": {"b": true, "color": "#333"}},
     {"insert": {"_type": "image", "source": "tmp/IMG_01.jpg"}}]

Images are paired with the already-uploaded files by position: the n-th
image operation renders the n-th uploaded file, whatever its ``source`` says.
"""

import html
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.storage import LocalStorage, unique_filename

logger = logging.getLogger(__name__)

HEADING_LEVELS = {1, 2, 3, 4, 5, 6}


class FormatResult(BaseModel):
    """Formatter outcome. Failures are reported here, never raised."""

    html: str = ""
    image_paths: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> "FormatResult":
        return cls(error=message)


class ContentFormatter:
    """Converts delta operations into HTML and copies embedded images."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    # =====================================================================
    # PUBLIC API
    # =====================================================================

    def format(self, content: Any, journal_id: int, uploads: List[str]) -> FormatResult:
        """
        Format delta operations into HTML.

        Args:
            content: Sequence of insert operations
            journal_id: Journal the images are stored for
            uploads: Storage paths of the uploaded images, in order

        Returns:
            FormatResult with the HTML and the stored image paths
        """
        if not isinstance(content, (list, tuple)):
            logger.error(f"ContentFormatter.format: invalid content received: {content!r:.200}")
            return FormatResult.failure("Invalid content format")

        parts: List[str] = []
        image_paths: List[str] = []
        image_index = 0

        for item in content:
            if not isinstance(item, dict):
                continue
            insert = item.get("insert")

            if isinstance(insert, dict) and insert.get("_type") == "image":
                if image_index >= len(uploads):
                    logger.error(
                        f"ContentFormatter.format: image operation {image_index + 1} "
                        f"has no uploaded file ({len(uploads)} uploaded)"
                    )
                    return FormatResult.failure(
                        f"Image {image_index + 1} has no matching uploaded file"
                    )

                stored = self.save_image(insert.get("source"), journal_id)
                parts.append(f"<img src='{self.storage.url(uploads[image_index])}'>")
                if stored is not None:
                    image_paths.append(stored)
                image_index += 1

            elif isinstance(insert, str):
                attributes = item.get("attributes")
                if not isinstance(attributes, dict):
                    # malformed attributes are dropped, the text is kept
                    attributes = {}
                parts.append(self.format_text(insert, attributes))

        return FormatResult(html="".join(parts), image_paths=image_paths)

    # =====================================================================
    # HELPERS
    # =====================================================================

    def save_image(self, source: Optional[str], journal_id: int) -> Optional[str]:
        """
        Copy an image from the public tree into ``uploads/<journal_id>/``.

        Sources outside the storage root are treated as missing.
        """
        if not isinstance(source, str) or not source:
            return None
        try:
            if not self.storage.exists(source):
                logger.warning(f"ContentFormatter.save_image: source not found: {source}")
                return None
            data = self.storage.path(source).read_bytes()
        except ValueError:
            logger.warning(f"ContentFormatter.save_image: rejected source path: {source}")
            return None

        return self.storage.put(f"uploads/{journal_id}/{unique_filename('.jpg')}", data)

    @staticmethod
    def format_text(text: str, attributes: Dict[str, Any]) -> str:
        """Escape text, wrap it in a block tag, then apply inline styles in fixed order."""
        escaped = html.escape(text)

        level = attributes.get("h")
        if isinstance(level, int) and not isinstance(level, bool) and level in HEADING_LEVELS:
            markup = f"<h{level}>{escaped}</h{level}>"
        else:
            markup = f"<p>{escaped}</p>"

        if attributes.get("b") is not None:
            markup = f"<b>{markup}</b>"
        if attributes.get("i") is not None:
            markup = f"<i>{markup}</i>"
        if attributes.get("u") is not None:
            markup = f"<u>{markup}</u>"
        if attributes.get("s") is not None:
            markup = f"<s>{markup}</s>"
        if attributes.get("color") is not None:
            color = html.escape(str(attributes["color"]))
            markup = f"<span style='color: {color}'>{markup}</span>"
        if attributes.get("size") is not None:
            size = html.escape(str(attributes["size"]))
            markup = f"<span style='font-size: {size}px'>{markup}</span>"

        return markup
