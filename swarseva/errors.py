"""
Error taxonomy for the service directory.

Every operational failure is a ``SwarSevaError`` carrying the HTTP status it
maps to; the handlers registered in ``swarseva.main`` turn them into the
``{"success": false, "message": ...}`` envelope. Criterion failures and
invalid documents are never raised, they are part of the returned results.
"""
from typing import Dict, List, Optional


class SwarSevaError(Exception):
    """Base class for expected, client-facing errors"""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class NotFoundError(SwarSevaError):
    """Service or referenced entity does not exist"""

    status_code = 404


class InvalidStateError(SwarSevaError):
    """Operation attempted against a service in the wrong lifecycle status"""

    status_code = 400


class InvalidInputError(SwarSevaError):
    """Malformed or missing input, with per-field messages"""

    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "InvalidInputError":
        return cls(message, errors=[{"field": field, "message": message}])


class AuthenticationError(SwarSevaError):
    status_code = 401


class ForbiddenError(SwarSevaError):
    status_code = 403


class ServerError(SwarSevaError):
    """Unexpected failure; ``detail`` is exposed only in debug mode"""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


def pydantic_errors_to_fields(errors) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``[{field, message}]``"""
    fields = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({
            "field": ".".join(location) or "body",
            "message": error.get("msg", "Invalid value")
        })
    return fields
