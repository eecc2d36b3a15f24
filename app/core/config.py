from pathlib import Path
from typing import Generator, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from pydantic_settings import BaseSettings


# =====================================================================
# SETTINGS
# =====================================================================


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Journal API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./journal.db"

    # JWT
    SECRET_KEY: str = "Supersecretkey"
    REFRESH_SECRET_KEY: str = "Journalsecretkey"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # Public file tree (images, avatars, generated PDFs)
    STORAGE_ROOT: Path = Path("storage/app/public")
    STORAGE_URL: str = "http://localhost:8000/storage"

    # PDF paper size in points (6 x 9 in)
    PDF_PAGE_WIDTH: int = 432
    PDF_PAGE_HEIGHT: int = 648

    # Print-on-demand vendor
    PRINT_AUTH_URL: str = "https://api.sandbox.lulu.com/auth/realms/glasstree/protocol/openid-connect/token"
    PRINT_JOB_URL: str = "https://api.sandbox.lulu.com/print-jobs/"
    PRINT_CLIENT_KEY: str = ""
    PRINT_CLIENT_SECRET: str = ""
    PRINT_POD_PACKAGE_ID: str = "0600X0900FCPREPB080CW444GXX"
    PRINT_PRODUCTION_DELAY: int = 120
    PRINT_TIMEOUT: float = 30.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


# =====================================================================
# DATABASE
# =====================================================================

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=(
        {"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}
    ),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
