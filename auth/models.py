"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in forms/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/ or forms/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A FormBot account.

    email is stored trimmed and lower-cased so uniqueness is case-insensitive;
    the store normalizes on every write and lookup.

    id is None before the record is written to the database.
    """

    username: str
    email: str
    hashed_password: str
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class Identity:
    """The verified caller of a request, as produced by the auth gate.

    Frozen: handlers receive it as an explicit argument and never mutate it.
    expires_at is None only for tokens issued without an exp claim, which
    TokenService never does itself.
    """

    user_id: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None
