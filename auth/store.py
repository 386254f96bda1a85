"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as tasks/store.py).
UserStore is the repository; _row_to_user is the mapper.
Service and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  The UNIQUE constraint on identifier is the final arbiter of "identifier
  already taken". CredentialService checks first for a friendly fast path,
  but two concurrent registrations can both pass that check; the loser's
  INSERT fails on the constraint and surfaces as IdentifierTaken here.

Failure model:
  Every statement runs inside core.db.translate_errors(), so a dead or
  misconfigured database reaches callers as StorageError. Each write is a
  single INSERT -- there is never a partial user record.

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.db import make_engine, now_iso, translate_errors
from core.errors import IdentifierTaken

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("identifier", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///tasklist.db")
        user = store.create_user(User(identifier="a@example.com", hashed_password=hash_password("secret")))
        same = store.get_by_identifier("a@example.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        with translate_errors("create users schema"):
            _metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with translate_errors("ping"), self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def count_users(self) -> int:
        with translate_errors("count_users"), self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_users)).scalar()
        return result or 0

    def create_user(self, user: User) -> User:
        """Insert a new user and return it with id and timestamps populated.

        Raises IdentifierTaken if the identifier already exists.
        """
        stamp = now_iso()
        with translate_errors("create_user"):
            try:
                with self.engine.connect() as conn:
                    result = conn.execute(
                        _users.insert().values(
                            identifier=user.identifier,
                            hashed_password=user.hashed_password,
                            created_at=stamp,
                            updated_at=stamp,
                        )
                    )
                    conn.commit()
            except IntegrityError as exc:
                raise IdentifierTaken() from exc
        return User(
            id=result.inserted_primary_key[0],
            identifier=user.identifier,
            hashed_password=user.hashed_password,
            created_at=stamp,
            updated_at=stamp,
        )

    def get_by_identifier(self, identifier: str) -> User | None:
        """Look up a user by exact identifier (case-sensitive). Returns None if not found."""
        with translate_errors("get_by_identifier"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.identifier == identifier)).fetchone()
        return _row_to_user(row) if row is not None else None

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        identifier=row.identifier,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
