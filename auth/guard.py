"""
auth/guard.py -- Access Guard: turns an Authorization header into a user id.

The guard is deliberately transport-agnostic: it receives the raw header value
(or None) rather than a Request, so it can be exercised without an HTTP stack.
auth/dependencies.py is the thin FastAPI adapter.

Verification is purely cryptographic. The guard never consults the user store,
so it never blocks on the database and cannot fail with StorageError.

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

from datetime import datetime

from auth.tokens import verify_token
from core.errors import InvalidCredential, MissingCredential

BEARER_PREFIX = "Bearer "


class AccessGuard:
    """Validates bearer tokens signed with a single secret key."""

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key

    def authorize(self, authorization: str | None, now: datetime | None = None) -> int:
        """Return the user id carried by a valid `Bearer <token>` header.

        Raises:
            MissingCredential: header absent, or nothing after the prefix.
            InvalidCredential: wrong scheme, bad signature, or expired token.
        """
        if not authorization:
            raise MissingCredential("Authorization header missing.")
        if not authorization.startswith(BEARER_PREFIX):
            raise InvalidCredential()
        token = authorization[len(BEARER_PREFIX) :].strip()
        if not token:
            raise MissingCredential()
        return verify_token(token, self._secret_key, now=now).user_id
