"""
auth/service.py -- Credential Service: registration, login, token issuance.

CredentialService is constructed with everything it needs (user store, signing
secret, token lifetime, bcrypt cost) and holds no other state. It knows
nothing about HTTP: it takes an identifier and a password and either returns a
signed token or raises one of the core.errors classes.

Indistinguishability:
  login() raises the same InvalidCredentials for an unknown identifier and for
  a wrong password, and runs one bcrypt comparison in both cases so the two
  paths also take the same time.

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

import logging
from datetime import datetime

from auth.models import User
from auth.store import UserStore
from auth.tokens import (
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_TOKEN_TTL,
    dummy_verify,
    hash_password,
    issue_token,
    verify_password,
)
from core.errors import IdentifierTaken, InvalidCredentials, ValidationError

logger = logging.getLogger("tasklist.auth")


class CredentialService:
    """Registers users, authenticates logins, and issues access tokens."""

    def __init__(
        self,
        user_store: UserStore,
        secret_key: str,
        token_ttl: int = DEFAULT_TOKEN_TTL,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ) -> None:
        self._store = user_store
        self._secret_key = secret_key
        self.token_ttl = token_ttl
        self._bcrypt_rounds = bcrypt_rounds

    def register(self, identifier: str, password: str) -> str:
        """Create a user and return an access token for it.

        Raises:
            ValidationError: identifier or password is empty.
            IdentifierTaken: a user with this identifier already exists.
            StorageError:    the user store failed; no record was written.
        """
        if not identifier or not password:
            raise ValidationError("Identifier and password are required.")

        if self._store.get_by_identifier(identifier) is not None:
            raise IdentifierTaken()

        hashed = hash_password(password, rounds=self._bcrypt_rounds)
        user = self._store.create_user(User(identifier=identifier, hashed_password=hashed))
        logger.info("Registered user id=%s", user.id)
        return self.issue(user.id)

    def login(self, identifier: str, password: str) -> str:
        """Verify credentials and return a fresh access token.

        Raises InvalidCredentials for an unknown identifier or a wrong
        password -- the caller cannot tell which.
        """
        user = self._store.get_by_identifier(identifier) if identifier else None
        if user is None:
            # Equalize timing -- do NOT return before running bcrypt.
            dummy_verify(password or "", rounds=self._bcrypt_rounds)
            raise InvalidCredentials()
        if not verify_password(password or "", user.hashed_password):
            logger.info("Failed login for user id=%s", user.id)
            raise InvalidCredentials()
        return self.issue(user.id)

    def issue(self, user_id: int, issued_at: datetime | None = None) -> str:
        return issue_token(user_id, self._secret_key, issued_at=issued_at, ttl_seconds=self.token_ttl)
