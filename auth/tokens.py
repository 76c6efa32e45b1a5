"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. A signed, self-contained token means any
       request can be authenticated without a session store. Tokens carry the
       user id ("id"), issued-at ("iat") and expiry ("exp"). Every token
       issued here has an expiry -- there is no unbounded lifetime.

  Secret: passed explicitly to TokenService by the application lifespan.
       This module never reads configuration itself, so it can be exercised
       in tests with any key and no environment setup. The key is held on a
       private attribute and excluded from repr().

  Failures: verify() raises a TokenError subclass instead of returning None.
       The auth gate collapses all of them into the same 401, but the reason
       attribute lets it log *why* a token was refused.

Layer rule: no imports from api/ or forms/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from auth.models import Identity

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Failure taxonomy
# ---------------------------------------------------------------------------


class TokenError(Exception):
    """Base class for every reason a presented token is refused."""

    reason = "invalid"


class MissingToken(TokenError):
    reason = "missing_token"


class MalformedToken(TokenError):
    reason = "malformed"


class InvalidSignature(TokenError):
    reason = "bad_signature"


class TokenExpired(TokenError):
    reason = "expired"


# ---------------------------------------------------------------------------
# Issuer / verifier
# ---------------------------------------------------------------------------


class TokenService:
    """Issue and verify signed identity tokens.

    Usage:
        tokens = TokenService(secret_key=settings.jwt_secret.get_secret_value())
        token = tokens.issue_for_user(user.id)
        identity = tokens.identify(token)   # raises TokenError on failure

    One instance is created at startup and shared by every request. It holds
    no mutable state, so no locking is needed.
    """

    def __init__(self, secret_key: str, expire_seconds: int = 3600, algorithm: str = _ALGORITHM) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty.")
        if expire_seconds <= 0:
            raise ValueError("expire_seconds must be positive.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds
        self.algorithm = algorithm

    def __repr__(self) -> str:
        return f"TokenService(algorithm={self.algorithm!r}, expire_seconds={self.expire_seconds})"

    def issue(self, claims: dict[str, Any]) -> str:
        """Sign a claim set and return the encoded token.

        iat is always stamped with the current time. exp defaults to
        iat + expire_seconds; a caller-supplied exp is kept as-is.
        """
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload.setdefault("exp", now + timedelta(seconds=self.expire_seconds))
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def issue_for_user(self, user_id: str) -> str:
        return self.issue({"id": user_id})

    def verify(self, token: str | None) -> dict[str, Any]:
        """Check structure, signature and expiry. Return the decoded claims.

        Structure is checked first, without the key, so a garbage string is
        reported as malformed rather than as a bad signature.
        """
        if not token:
            raise MissingToken("No token presented.")
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedToken("Token could not be parsed.") from exc
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired.") from exc
        except JWTClaimsError as exc:
            raise MalformedToken("Token claims are invalid.") from exc
        except JWTError as exc:
            raise InvalidSignature("Token signature verification failed.") from exc
        if not isinstance(claims.get("id"), str) or not claims["id"]:
            raise MalformedToken("Token carries no user id.")
        return claims

    def identify(self, token: str | None) -> Identity:
        """verify() the token and project its claims into an Identity."""
        claims = self.verify(token)
        return Identity(
            user_id=claims["id"],
            issued_at=_from_timestamp(claims.get("iat")),
            expires_at=_from_timestamp(claims.get("exp")),
        )


def _from_timestamp(value: Any) -> datetime | None:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None
