"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in tasks/models.py -- dataclasses own domain shape; stores, services and routes
do the work.

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account.

    identifier is unique and case-sensitive (typically an email address).
    hashed_password is a bcrypt hash; the plaintext is never stored.

    id is None before the record is written to the database.
    """

    identifier: str
    hashed_password: str
    id: int | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""


@dataclass(frozen=True)
class AccessClaims:
    """The verified contents of an access token.

    Immutable: once verify_token() has produced it, the identity and expiry
    are facts about a signed credential and must not be edited.
    """

    user_id: int
    expires_at: datetime
