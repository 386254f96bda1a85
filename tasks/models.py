"""
tasks/models.py -- Domain dataclasses for to-do tasks.

Pure data containers with zero logic. Ownership rules and persistence live in
tasks/store.py; request shapes live in api/models.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Task:
    """A unit of work owned by exactly one user.

    owner is the User.id taken from the verified access token at creation
    time. It is never updated afterwards.

    id is None before the record is written to the database.
    """

    title: str
    owner: int
    completed: bool = False
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, restamped on every update
