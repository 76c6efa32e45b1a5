"""
core/errors.py -- Application error taxonomy.

Every expected failure in FormBot is one of these exceptions. Route handlers
and the auth gate raise them; a single boundary handler in api/main.py maps
them to the outward status code and the {code, message} envelope.

Pattern: Exception hierarchy with class-level defaults. Subclasses only set
status_code and code; the message is chosen at the raise site so it can match
the user-facing wording of each endpoint ("User not found", "Wrong password").

Unexpected failures (persistence, crypto) are NOT wrapped in these classes --
they propagate unchanged to the boundary, which logs them and returns a
generic 500/503 without leaking internal detail.

Layer rule: core/ is the kernel. No imports from api/, auth/, or forms/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that carry their own HTTP mapping."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400
    code = "validation_error"
    default_message = "Request validation failed."


class ConflictError(AppError):
    """A unique field (email, folder name) is already taken.

    Reported as 400 rather than 409 -- the FormBot UI treats every 400 on
    signup as "show the message under the form".
    """

    status_code = 400
    code = "conflict"
    default_message = "Resource already exists."


class UnauthorizedError(AppError):
    """Missing or invalid credential."""

    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required."

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(message, headers or {"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppError):
    """Authenticated, but not the owner of the target resource."""

    status_code = 403
    code = "forbidden"
    default_message = "Not authorized."


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class InternalError(AppError):
    status_code = 500
    code = "internal_error"
    default_message = "An unexpected error occurred."


class StoreUnavailableError(AppError):
    """The persistence layer did not answer within its timeout."""

    status_code = 503
    code = "store_unavailable"
    default_message = "Service temporarily unavailable."
