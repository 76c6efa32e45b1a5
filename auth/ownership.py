"""
auth/ownership.py -- Resource ownership check.

Folders and forms record the id of the user who created them. Only that user
may read, change or delete them. Handlers call ensure_owner() after loading
the resource and before any side effect -- never after.

Layer rule: no imports from api/ or forms/. Callers pass the owner id in, so
this module knows nothing about the resource types it protects.
"""

from __future__ import annotations

import logging

from auth.models import Identity
from core.errors import ForbiddenError

logger = logging.getLogger("formbot.auth")


def is_owner(identity: Identity, owner_id: str | None) -> bool:
    """Exact match between the caller and the recorded owner."""
    return owner_id is not None and identity.user_id == owner_id


def ensure_owner(identity: Identity, owner_id: str | None, action: str) -> None:
    """Raise ForbiddenError (403) unless identity owns the resource.

    action completes the message "Not authorized to ...", e.g.
    "delete this folder".
    """
    if not is_owner(identity, owner_id):
        logger.warning("Ownership check failed user_id=%s action=%r", identity.user_id, action)
        raise ForbiddenError(f"Not authorized to {action}")
