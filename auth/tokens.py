"""
auth/tokens.py -- JWT issuance/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the configured secret
       key and carry the user id (sub), issue time (iat) and expiry (exp).
       verify_token() accepts only HS256, so a token re-signed with "none" or
       an asymmetric algorithm is rejected before its claims are read.

       Expiry is checked by this module against an explicit `now` rather than
       by python-jose against the wall clock. That keeps verify_token() a pure
       function of (token, secret, now), which is what makes the expiry
       boundary unit-testable without sleeping or patching time.

  Passwords: bcrypt directly (no passlib wrapper) with an explicit cost factor
       (default 10 rounds). dummy_verify() enables timing
       equalization in CredentialService.login() so response time does not
       reveal whether an identifier exists.

Layer rule: no imports from api/ or tasks/. Import from core/ is allowed --
core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt
from jose import JWTError, jwt

from auth.models import AccessClaims
from core.errors import InvalidCredential

logger = logging.getLogger("tasklist.auth")

_ALGORITHM = "HS256"

DEFAULT_TOKEN_TTL = 3600
DEFAULT_BCRYPT_ROUNDS = 10

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Return a bcrypt hash of the given plaintext password using a fresh salt.

    bcrypt only looks at the first 72 bytes of input and current releases
    refuse longer passwords outright. The request models cap passwords at 72
    UTF-8 bytes so this function never sees one.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long input: never a match.
        return False


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    return hash_password("tasklist_timing_dummy", rounds=rounds)


# Timing equalization dummy hash, one per cost factor.
# The default is computed at module load so the first login attempt is not
# measurably slower than subsequent ones. Login always runs a bcrypt
# comparison, even when the identifier does not exist.
_dummy_hash(DEFAULT_BCRYPT_ROUNDS)


def dummy_verify(plain: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
    """Burn one bcrypt comparison at the given cost. Used when there is no real hash to check."""
    verify_password(plain, _dummy_hash(rounds))


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def issue_token(
    user_id: int,
    secret_key: str,
    issued_at: datetime | None = None,
    ttl_seconds: int = DEFAULT_TOKEN_TTL,
) -> str:
    """Encode a signed JWT binding user_id to an expiry ttl_seconds after issued_at.

    Args:
        user_id:     Storage id of the user the token speaks for.
        secret_key:  HS256 signing key.
        issued_at:   Issue time; defaults to now (UTC). Tests pass a fixed time.
        ttl_seconds: Lifetime in seconds (1 hour by default).
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + timedelta(seconds=ttl_seconds)
    payload = {
        # RFC 7519 requires sub to be a string; python-jose enforces it on decode.
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, secret_key, algorithm=_ALGORITHM)


def verify_token(token: str, secret_key: str, now: datetime | None = None) -> AccessClaims:
    """Verify signature and expiry of token and return its claims.

    Raises InvalidCredential when the signature does not verify, the token is
    malformed, the claims are missing or mistyped, or now is at or past the
    embedded expiry.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    try:
        # No require_exp here: python-jose turns every required claim back on
        # for verification, which would check exp against the wall clock.
        # A missing exp fails below as KeyError.
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[_ALGORITHM],
            options={"verify_exp": False, "require_sub": True},
        )
        user_id = int(payload["sub"])
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    except (JWTError, KeyError, TypeError, ValueError) as exc:
        raise InvalidCredential() from exc

    if now >= expires_at:
        raise InvalidCredential()
    return AccessClaims(user_id=user_id, expires_at=expires_at)
