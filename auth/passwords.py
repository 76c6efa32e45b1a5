"""
auth/passwords.py -- Password hashing with bcrypt.

bcrypt is used directly (no passlib wrapper). gensalt() produces a fresh
random salt per call and hashpw() embeds it in the output, so two hashes of
the same password differ and verify_password() needs nothing but the stored
hash. checkpw() compares in constant time.

bcrypt only looks at the first 72 bytes of a password and current releases
refuse longer input outright. The API layer rejects longer passwords with a
400 (see api/models.py) so they never reach hash_password().

Layer rule: no imports from api/ or forms/.
"""

from __future__ import annotations

import bcrypt

MAX_PASSWORD_BYTES = 72


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    Errors propagate: a password that cannot be hashed must fail the calling
    operation rather than store something unverifiable.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Never raises. A malformed or empty hash, or a password bcrypt refuses,
    is simply a mismatch.
    """
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
