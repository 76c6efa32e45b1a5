"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The auth gate. Every protected route declares one of these dependencies, so
FastAPI runs it before the handler and passes the result in as an argument:

  get_identity()      -- header -> token -> verified Identity. Stateless: no
                         store lookup, validity is signature + expiry only.
  get_current_user()  -- get_identity() plus a UserStore lookup, for handlers
                         that need the stored account.

Gate states (any failure raises before the handler is invoked):
  no / empty Authorization header   -> 401 "Authorization header is missing"
  header with no token segment      -> 401 "Token not found"
  token fails verification          -> 401 "Invalid token"
  token verifies                    -> Identity returned to the handler

The outward message is the same for every verification failure. The
internal reason (malformed, bad_signature, expired) goes to the log only.

Layer rule: no imports from api/ or forms/. This module may import from
fastapi because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request

from auth.models import Identity, User
from auth.store import UserStore
from auth.tokens import TokenError, TokenService
from core.errors import NotFoundError, UnauthorizedError

logger = logging.getLogger("formbot.auth")

_SCHEME = "bearer"


def extract_bearer_token(header: str) -> str | None:
    """Return the token from a "Bearer <token>" header value, or None.

    Splits on whitespace and takes the second segment. A bare "Bearer", or a
    scheme other than Bearer, yields None rather than an error.
    """
    parts = header.split()
    if len(parts) < 2 or parts[0].lower() != _SCHEME:
        return None
    return parts[1]


def get_identity(request: Request) -> Identity:
    """Require a valid bearer token. Raises UnauthorizedError (401) otherwise.

    Use as a FastAPI dependency:
        @router.delete("/folders/{folder_id}")
        def route(identity: Identity = Depends(get_identity)): ...
    """
    path = request.url.path
    header = request.headers.get("Authorization")
    if not header:
        logger.info("Auth rejected reason=missing_header path=%s", path)
        raise UnauthorizedError("Authorization header is missing")

    token = extract_bearer_token(header)
    if token is None:
        logger.info("Auth rejected reason=missing_token path=%s", path)
        raise UnauthorizedError("Token not found")

    tokens: TokenService = request.app.state.tokens
    try:
        return tokens.identify(token)
    except TokenError as exc:
        logger.info("Auth rejected reason=%s path=%s", exc.reason, path)
        raise UnauthorizedError("Invalid token") from exc


def get_current_user(request: Request, identity: Identity = Depends(get_identity)) -> User:
    """Require a valid token whose user still exists. 404 if the account is gone."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(identity.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
