"""
API request and response models for TaskList REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
tasks/models.py, which own the internal domain representation. Route handlers
map between the two.

Validation is presence-only: identifiers and titles must be non-empty after
trimming, passwords must be non-empty. The single exception is the 72-byte
password ceiling on registration, which is a hard bcrypt limit rather than a
policy choice.
"""

from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from tasks.models import Task

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BCRYPT_MAX_PASSWORD_BYTES = 72

_Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
_Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /auth/login.

    `email` is accepted in place of `identifier` for clients that post the
    field under that name.
    """

    model_config = ConfigDict(populate_by_name=True)

    identifier: _Identifier = Field(validation_alias=AliasChoices("identifier", "email"))
    password: str = Field(min_length=1)


class RegisterRequest(LoginRequest):
    """Request body for POST /auth/register."""

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return value


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """Response for successful register and login calls."""

    model_config = ConfigDict(frozen=True)

    token: str
    token_type: str = "bearer"
    expires_in: int


# ---------------------------------------------------------------------------
# Tasks -- request models
# ---------------------------------------------------------------------------


class TaskCreate(BaseModel):
    """Request body for POST /tasks. Any owner field in the body is ignored."""

    title: _Title


class TaskPatch(BaseModel):
    """Request body for PATCH /tasks/{task_id}.

    Every field is optional; omitted or null fields are left unchanged.
    Unknown fields (owner, id, timestamps) are dropped by Pydantic.
    """

    title: Optional[_Title] = None
    completed: Optional[bool] = None


# ---------------------------------------------------------------------------
# Tasks -- response models
# ---------------------------------------------------------------------------


class TaskResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    completed: bool
    owner: int
    created_at: str
    updated_at: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        """Build a TaskResponse from a tasks.models.Task.

        Factory Method pattern -- the mapping lives here, colocated with the
        output model, rather than scattered across route handlers.
        """
        return cls(
            id=task.id,
            title=task.title,
            completed=task.completed,
            owner=task.owner,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
