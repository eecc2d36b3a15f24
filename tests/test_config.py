"""Tests for settings loading."""
from pathlib import Path

from app.core.config import Settings


def test_defaults(monkeypatch):
    for key in ("PDF_PAGE_WIDTH", "PDF_PAGE_HEIGHT", "PRINT_POD_PACKAGE_ID", "STORAGE_ROOT"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings(_env_file=None)

    assert settings.PDF_PAGE_WIDTH == 432
    assert settings.PDF_PAGE_HEIGHT == 648
    assert settings.PRINT_POD_PACKAGE_ID == "0600X0900FCPREPB080CW444GXX"
    assert settings.PRINT_PRODUCTION_DELAY == 120
    assert settings.STORAGE_ROOT == Path("storage/app/public")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PDF_PAGE_WIDTH", "500")
    monkeypatch.setenv("STORAGE_URL", "https://files.example.com/storage")
    monkeypatch.setenv("CORS_ORIGINS", '["https://app.example.com"]')

    settings = Settings(_env_file=None)

    assert settings.PDF_PAGE_WIDTH == 500
    assert settings.STORAGE_URL == "https://files.example.com/storage"
    assert settings.CORS_ORIGINS == ["https://app.example.com"]
