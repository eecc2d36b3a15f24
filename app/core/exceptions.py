import enum
import logging
from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.requests import Request

logger = logging.getLogger(__name__)


# ---------------------------
# Error kinds
# ---------------------------

class ErrorKind(str, enum.Enum):
    not_found = "not_found"
    access_denied = "access_denied"
    validation = "validation"
    conflict = "conflict"
    unauthorized = "unauthorized"
    unexpected = "unexpected"


STATUS_BY_KIND = {
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.access_denied: status.HTTP_403_FORBIDDEN,
    ErrorKind.validation: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.unauthorized: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.unexpected: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# ---------------------------
# Service (Business logic)
# ---------------------------

class BusinessError(Exception):
    """
    Service-layer failure tagged with an ErrorKind.

    Callers branch on ``exc.kind``.
    """

    def __init__(self, kind: ErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or kind.value.replace("_", " ").capitalize()
        super().__init__(self.message)

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> "BusinessError":
        return cls(ErrorKind.not_found, message)

    @classmethod
    def access_denied(cls, message: str = "Permission denied") -> "BusinessError":
        return cls(ErrorKind.access_denied, message)

    @classmethod
    def validation(cls, message: str) -> "BusinessError":
        return cls(ErrorKind.validation, message)

    @classmethod
    def conflict(cls, message: str = "Resource already exists") -> "BusinessError":
        return cls(ErrorKind.conflict, message)

    @classmethod
    def unauthorized(cls, message: str = "Authentication failed") -> "BusinessError":
        return cls(ErrorKind.unauthorized, message)


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def register_exception_handlers(app):
    @app.exception_handler(BusinessError)
    async def business_error_handler(request: Request, exc: BusinessError):
        status_code = STATUS_BY_KIND.get(
            exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= 500:
            logger.error(f"Service error on {request.url.path}: {exc}", exc_info=exc)
            return JSONResponse(
                status_code=status_code,
                content={"detail": "Internal server error"},
            )
        headers = (
            {"WWW-Authenticate": "Bearer"}
            if exc.kind == ErrorKind.unauthorized
            else None
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
