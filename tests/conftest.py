"""
tests/conftest.py -- Shared test fixtures for FormBot.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users and forms
  - _patch_lifespan(): wires test stores and a TokenService into app.state,
    bypassing the real startup (no environment or .env needed)
  - tokens: a TokenService with a fixed test secret
  - api_client: TestClient plus one pre-registered user and its bearer token
  - make_user: factory that registers further users directly in the store

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. Each fixture instance gets a unique name, so tests never see each
other's rows.

The rate limiter is disabled for the whole session: many tests log in from
the same client address within one minute.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import app
from auth.models import User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import TokenService
from forms.store import FormStore

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters-long"
TEST_PASSWORD = "correct-horse-battery"

limiter.enabled = False


@dataclass
class Account:
    """A registered test user and a valid bearer token for it."""

    id: str
    username: str
    email: str
    password: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores() -> tuple[UserStore, FormStore]:
    """Create stores over one uniquely named shared-memory SQLite database."""
    db_url = f"sqlite:///file:test_formbot_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=db_url), FormStore(db_url=db_url)


def _patch_lifespan(user_store: UserStore, form_store: FormStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.form_store = form_store
        app.state.tokens = tokens
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret_key=TEST_SECRET, expire_seconds=3600)


@pytest.fixture
def stores() -> Generator[tuple[UserStore, FormStore], None, None]:
    user_store, form_store = _make_test_stores()
    yield user_store, form_store
    form_store.close()
    user_store.close()


@pytest.fixture
def make_user(stores: tuple[UserStore, FormStore], tokens: TokenService) -> Callable[..., Account]:
    """Register a user directly in the store and return it with a fresh token."""
    user_store, _ = stores

    def _make(username: str = "ada", email: str | None = None, password: str = TEST_PASSWORD) -> Account:
        email = email or f"{username}-{uuid.uuid4().hex[:8]}@example.com"
        uid = user_store.create_user(User(username=username, email=email, hashed_password=hash_password(password)))
        return Account(
            id=uid,
            username=username,
            email=email.lower(),
            password=password,
            token=tokens.issue_for_user(uid),
        )

    return _make


@pytest.fixture
def client(stores: tuple[UserStore, FormStore], tokens: TokenService) -> Generator[TestClient, None, None]:
    """TestClient over the real app with isolated stores.

    raise_server_exceptions=False so the catch-all 500 handler can be
    asserted on like any other response.
    """
    user_store, form_store = stores
    app.router.lifespan_context = _patch_lifespan(user_store, form_store, tokens)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def api_client(client: TestClient, make_user: Callable[..., Account]) -> tuple[TestClient, Account]:
    """Yield (client, account) where account is a registered user with a valid token."""
    return client, make_user("owner")
