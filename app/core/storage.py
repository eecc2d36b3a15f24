# app/core/storage.py
import logging
import re
import uuid
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from app.core.config import settings

logger = logging.getLogger(__name__)


class Upload(Protocol):
    """Anything shaped like fastapi.UploadFile."""

    filename: Optional[str]
    file: BinaryIO


def sanitize_extension(filename: Optional[str], default: str = ".jpg") -> str:
    """Return a safe lowercase extension (with dot) taken from filename."""
    if not filename or "." not in filename:
        return default
    ext = filename.rsplit(".", 1)[-1].lower()
    if not re.fullmatch(r"[a-z0-9]{1,8}", ext):
        return default
    return f".{ext}"


def unique_filename(ext: str = ".jpg") -> str:
    return f"{uuid.uuid4().hex}{ext}"


class LocalStorage:
    """
    Public file tree rooted at ``root`` and served under ``base_url``.

    Paths handed in and out are relative (e.g. ``journal/3/ab12.png``);
    ``url()`` turns them into served URLs.
    """

    def __init__(self, root: Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    # =====================================================================
    # PATH HELPERS
    # =====================================================================

    def path(self, relative: str) -> Path:
        """Absolute filesystem path for a stored relative path."""
        if ".." in Path(relative).parts or relative.startswith(("/", "\\")):
            raise ValueError(f"Invalid storage path: {relative}")
        return self.root / relative

    def url(self, relative: str) -> str:
        """Served URL for a stored path; absolute URLs pass through."""
        if relative.startswith(("http://", "https://")):
            return relative
        return f"{self.base_url}/{relative.lstrip('/')}"

    def exists(self, relative: str) -> bool:
        return self.path(relative).is_file()

    # =====================================================================
    # WRITE OPERATIONS
    # =====================================================================

    def put(self, relative: str, data: bytes) -> str:
        """Write bytes at a relative path, creating folders. Returns the path."""
        target = self.path(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug(f"Stored {len(data)} bytes at {relative}")
        return relative

    def upload(self, upload: Upload, folder: str) -> str:
        """Persist an uploaded file under folder with a generated unique name."""
        ext = sanitize_extension(upload.filename)
        relative = f"{folder.strip('/')}/{unique_filename(ext)}"
        upload.file.seek(0)
        return self.put(relative, upload.file.read())

    def delete(self, relative: Optional[str]) -> bool:
        """Delete a stored file. Missing files and absolute URLs are ignored."""
        if not relative or relative.startswith(("http://", "https://")):
            return False
        target = self.path(relative)
        if not target.is_file():
            return False
        target.unlink()
        return True


def get_storage() -> LocalStorage:
    """Storage dependency."""
    return LocalStorage(root=settings.STORAGE_ROOT, base_url=settings.STORAGE_URL)


def public_url(relative: Optional[str]) -> Optional[str]:
    """Served URL for a stored path using the configured storage URL."""
    if not relative:
        return None
    return get_storage().url(relative)
