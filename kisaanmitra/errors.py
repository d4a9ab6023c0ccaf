"""Domain errors and their conversion into user-facing notifications.

Services raise these; the handlers registered by :func:`register_exception_handlers`
turn them into a JSON body the frontend shows as a toast::

    {"title": "...", "description": "...", "variant": "destructive", ...}
"""
import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class KisaanMitraError(Exception):
    """Base class for all errors surfaced to the user."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.title
        super().__init__(self.message)

    def extra(self) -> Dict:
        return {}


class ValidationError(KisaanMitraError):
    """Input failed validation; ``errors`` maps field name to message."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    title = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        self.errors = errors or {}
        if message is None and self.errors:
            message = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(message)

    def extra(self) -> Dict:
        return {"errors": self.errors}


class AuthRequiredError(KisaanMitraError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Not logged in"


class NotFoundError(KisaanMitraError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not found"


class InsufficientCreditsError(KisaanMitraError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    title = "Insufficient credits"

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"You need {required} credits to make this purchase. "
            f"You currently have {available} credits."
        )

    def extra(self) -> Dict:
        return {"required": self.required, "available": self.available}


class ListingUnavailableError(KisaanMitraError):
    status_code = status.HTTP_409_CONFLICT
    title = "Listing unavailable"


class RemoteStoreError(KisaanMitraError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    title = "Service unavailable"


# Where FastAPI found the bad value; not part of the field name
REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def field_errors(exc) -> Dict[str, str]:
    """Flatten pydantic errors into ``{field: message}``."""
    errors = {}
    for error in exc.errors():
        loc = list(error["loc"])
        if len(loc) > 1 and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "__root__"
        errors.setdefault(field, error["msg"])
    return errors


def notification(exc: KisaanMitraError) -> Dict:
    body = {
        "title": exc.title,
        "description": exc.message,
        "variant": "destructive",
    }
    body.update(exc.extra())
    return body


async def kisaanmitra_error_handler(request: Request, exc: KisaanMitraError):
    if isinstance(exc, RemoteStoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc,
                     exc_info=exc.__cause__)
        body = notification(exc)
        body["description"] = "Please try again in a moment."
    else:
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method,
                    request.url.path, exc.message)
        body = notification(exc)

    headers = None
    if isinstance(exc, AuthRequiredError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return await kisaanmitra_error_handler(request, ValidationError(errors=field_errors(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KisaanMitraError, kisaanmitra_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
