"""
api/routes/v1/users.py -- Account signup, login and profile endpoints.

Routes:
  POST /api/v1/user/signup   -- create account (public)
  POST /api/v1/user/login    -- password login; returns a bearer token (public)
  POST /api/v1/user/update   -- change username / email / password (requires auth)
  GET  /api/v1/user/me       -- current account info (requires auth)

Security:
  Signup and login are rate-limited per client IP.
  Cache-Control: no-store on login responses so the token is never cached.
  Passwords only ever reach auth.passwords; they are never logged.

The status codes and messages follow the FormBot UI's expectations:
unknown email on login is 404 "User not found", a bad password is 400
"Wrong password", and a duplicate signup is 400 "User already exists".
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import IntegrityError

from api.limiter import limiter
from api.models import LoginRequest, LoginResponse, MeResponse, MessageResponse, SignupRequest, UserUpdateRequest
from auth.dependencies import get_current_user
from auth.models import User
from auth.passwords import hash_password, verify_password
from auth.store import UserStore
from auth.tokens import TokenService
from core.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("formbot.api")

# Auth policy:
# - POST /api/v1/user/signup:  public
# - POST /api/v1/user/login:   public
# - POST /api/v1/user/update:  requires auth (get_current_user)
# - GET  /api/v1/user/me:      requires auth (get_current_user)
router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/user/signup", response_model=MessageResponse)
@limiter.limit("5/minute")
def signup(request: Request, body: SignupRequest) -> MessageResponse:
    """Create an account. Emails are unique regardless of case."""
    user_store: UserStore = request.app.state.user_store
    if user_store.get_by_email(body.email) is not None:
        raise ConflictError("User already exists")

    user = User(username=body.username, email=body.email, hashed_password=hash_password(body.password))
    try:
        user_id = user_store.create_user(user)
    except IntegrityError as exc:
        # A concurrent signup for the same email won the race.
        raise ConflictError("User already exists") from exc

    logger.info("User created user_id=%s", user_id)
    return MessageResponse(message="User created")


@router.post("/user/login", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """Exchange email + password for a signed bearer token."""
    response.headers["Cache-Control"] = "no-store"
    user_store: UserStore = request.app.state.user_store
    tokens: TokenService = request.app.state.tokens

    user = user_store.get_by_email(body.email)
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(body.password, user.hashed_password):
        logger.info("Login failed reason=wrong_password user_id=%s", user.id)
        raise ValidationError("Wrong password")

    token = tokens.issue_for_user(user.id)
    logger.info("Login succeeded user_id=%s", user.id)
    return LoginResponse(token=token, username=user.username, expires_in=tokens.expire_seconds)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.post("/user/update", response_model=MessageResponse)
def update_user(
    request: Request,
    body: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Update username, email and/or password for the calling account.

    Changing the password requires both oldPassword (checked against the
    stored hash) and a different newPassword. All checks run before anything
    is written, so a rejected request leaves the account untouched.
    """
    user_store: UserStore = request.app.state.user_store
    updates: dict = {}

    if body.username is not None:
        updates["username"] = body.username

    if body.email is not None and body.email != current_user.email:
        existing = user_store.get_by_email(body.email)
        if existing is not None and existing.id != current_user.id:
            raise ConflictError("Email already in use")
        updates["email"] = body.email

    if body.old_password is not None or body.new_password is not None:
        if body.old_password is None or body.new_password is None:
            raise ValidationError("Both oldPassword and newPassword are required to change the password")
        if not verify_password(body.old_password, current_user.hashed_password):
            raise ValidationError("Incorrect old password")
        if body.old_password == body.new_password:
            raise ValidationError("Password can't be the same")
        updates["hashed_password"] = hash_password(body.new_password)

    if not updates and body.email is None:
        raise ValidationError("No fields to update")

    if updates:
        try:
            updated = user_store.update_user(current_user.id, **updates)
        except IntegrityError as exc:
            raise ConflictError("Email already in use") from exc
        if not updated:
            raise NotFoundError("User not found")
        logger.info("User updated user_id=%s fields=%s", current_user.id, sorted(updates))

    return MessageResponse(message="User updated successfully")


@router.get("/user/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return account information for the authenticated caller."""
    return MeResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        created_at=current_user.created_at or "",
    )
