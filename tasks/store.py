"""
tasks/store.py -- SQLAlchemy Core persistence layer for tasks.

Pattern: Repository + Data Mapper (same as auth/store.py).
TaskStore is the repository; _row_to_task is the mapper.

Ownership:
  Every read and write that names a task id also names the owner, and both
  go into the same WHERE clause. update_task() and delete_task() are single
  UPDATE/DELETE ... RETURNING statements -- there is no SELECT-then-check-then-
  write sequence, so nothing can change between the ownership check and the
  mutation.

  A task that does not exist and a task owned by someone else produce the
  same result (None / False). Callers turn both into one 404.

  create_task() is an INSERT ... SELECT guarded by EXISTS on users.id, so a
  task is only written for an owner that resolves to a stored user. The users
  table itself belongs to auth/store.py; this module only names its id column.

Failure model:
  Every statement runs inside core.db.translate_errors(); driver failures reach
  callers as StorageError. Each mutation touches exactly one row.
"""

from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, column, literal, select, table
from sqlalchemy.engine import Engine

from core.db import make_engine, now_iso, translate_errors
from tasks.models import Task

# Columns a PATCH may change. owner, id and timestamps are never client-writable.
UPDATABLE_FIELDS = frozenset({"title", "completed"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("completed", Integer, nullable=False, server_default="0"),
    Column("user_id", Integer, nullable=False, index=True),  # User.id, immutable
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# Owned by auth/store.py; referenced here only to check that an owner exists.
_users = table("users", column("id"))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TaskStore:
    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        with translate_errors("create tasks schema"):
            metadata.create_all(self.engine)

    def create_task(self, owner: int, title: str) -> Optional[Task]:
        """Insert a new, not-yet-completed task for owner and return it.

        Returns None, and writes nothing, if owner is not a stored user.
        """
        stamp = now_iso()
        owner_exists = select(_users.c.id).where(_users.c.id == owner).exists()
        row_values = select(
            literal(title), literal(0), literal(owner), literal(stamp), literal(stamp)
        ).where(owner_exists)
        with translate_errors("create_task"), self.engine.connect() as conn:
            row = conn.execute(
                _tasks.insert()
                .from_select(["title", "completed", "user_id", "created_at", "updated_at"], row_values)
                .returning(*_tasks.c)
            ).fetchone()
            conn.commit()
        return _row_to_task(row) if row is not None else None

    def list_tasks(self, owner: int) -> list[Task]:
        """Return all of owner's tasks, newest first.

        id is the tie-breaker for tasks created within the same timestamp.
        """
        with translate_errors("list_tasks"), self.engine.connect() as conn:
            rows = conn.execute(
                _tasks.select()
                .where(_tasks.c.user_id == owner)
                .order_by(_tasks.c.created_at.desc(), _tasks.c.id.desc())
            ).fetchall()
        return [_row_to_task(r) for r in rows]

    def get_task(self, task_id: int, owner: int) -> Optional[Task]:
        """Fetch one task by id if owner owns it. Returns None otherwise."""
        with translate_errors("get_task"), self.engine.connect() as conn:
            row = conn.execute(
                _tasks.select().where((_tasks.c.id == task_id) & (_tasks.c.user_id == owner))
            ).fetchone()
        return _row_to_task(row) if row is not None else None

    def update_task(self, task_id: int, owner: int, **fields) -> Optional[Task]:
        """Apply fields to the task if owner owns it and return the updated task.

        Accepted fields: title, completed. Anything else is dropped silently,
        so a body that tries to reassign the owner has no effect. updated_at is
        always restamped, even when no accepted field is present.

        Returns None if no row matched (task missing or owned by someone else).
        """
        values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if "completed" in values:
            values["completed"] = 1 if values["completed"] else 0
        values["updated_at"] = now_iso()
        with translate_errors("update_task"), self.engine.connect() as conn:
            row = conn.execute(
                _tasks.update()
                .where((_tasks.c.id == task_id) & (_tasks.c.user_id == owner))
                .values(**values)
                .returning(*_tasks.c)
            ).fetchone()
            conn.commit()
        return _row_to_task(row) if row is not None else None

    def delete_task(self, task_id: int, owner: int) -> bool:
        """Permanently delete the task if owner owns it.

        Returns True if deleted, False if not found or wrong owner.
        """
        with translate_errors("delete_task"), self.engine.connect() as conn:
            row = conn.execute(
                _tasks.delete()
                .where((_tasks.c.id == task_id) & (_tasks.c.user_id == owner))
                .returning(_tasks.c.id)
            ).fetchone()
            conn.commit()
        return row is not None

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern -- DB row -> domain dataclass)
# ---------------------------------------------------------------------------


def _row_to_task(row) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        owner=row.user_id,
        completed=bool(row.completed),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
