"""Exceptions raised by the survey services and their HTTP mapping.

Every error carries a machine-readable `code` and the HTTP status it is
reported with. `StoreError` wraps failures of the relational store and knows
whether the cause was a foreign-key violation.
"""
from typing import Any

from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

FOREIGN_KEY_VIOLATION = "23503"


class SurveyError(Exception):
    """Base exception for all survey errors"""

    status_code = 400

    def __init__(self, message: str, code: str = "SURVEY_ERROR", details: dict[str, Any] | None = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body = {"success": False, "error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class SessionNotFoundError(SurveyError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Survey session {session_id} not found", code="SESSION_NOT_FOUND")


class WizardTransitionError(SurveyError):
    status_code = 409

    def __init__(self, action: str, page: str):
        super().__init__(
            f"Action '{action}' is not available on page '{page}'",
            code="WIZARD_TRANSITION",
            details={"action": action, "page": page},
        )


class NoDraftError(SurveyError):
    status_code = 409

    def __init__(self, message: str = "No assignment draft in progress"):
        super().__init__(message, code="NO_DRAFT")


class BoardIncompleteError(SurveyError):
    status_code = 409

    def __init__(self, assigned: int, total: int):
        super().__init__(
            "Please assign an icon to all roles before submitting.",
            code="BOARD_INCOMPLETE",
            details={"assigned": assigned, "total": total},
        )


class UnknownIconError(SurveyError):
    def __init__(self, icon: str):
        super().__init__(f"Icon '{icon}' is not part of this survey", code="UNKNOWN_ICON")


class RankingIncompleteError(SurveyError):
    status_code = 409

    def __init__(self, role_title: str):
        super().__init__(f"Rank at least one icon for '{role_title}'", code="RANKING_INCOMPLETE")


class StoreError(SurveyError):
    """A write or read against the relational store failed."""

    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, code="INTERNAL_ERROR")
        self.cause = cause

    @property
    def is_invalid_reference(self) -> bool:
        return is_foreign_key_violation(self.cause)


def is_foreign_key_violation(exc: Exception | None) -> bool:
    """Tell whether `exc` is a foreign-key violation reported by the driver.

    Postgres drivers expose the SQLSTATE (`pgcode` for psycopg2, `sqlstate`
    for psycopg 3); SQLite only reports it in the message.
    """
    if not isinstance(exc, IntegrityError):
        return False
    orig = exc.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return True
    return "FOREIGN KEY constraint failed" in str(orig)


def store_error_response(exc: StoreError) -> JSONResponse:
    if exc.is_invalid_reference:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid reference data", "code": "INVALID_REFERENCE"},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def validation_details(errors: list[dict]) -> list[dict[str, str]]:
    """Flatten pydantic errors into `{field, message}` pairs.

    The leading `body` segment FastAPI adds to request-body locations is
    dropped so that fields read `participant.age` or `responses.0.role_title`.
    """
    details = []
    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]
        details.append({
            "field": ".".join(str(part) for part in loc) or "body",
            "message": err.get("msg", "Invalid value"),
        })
    return details
