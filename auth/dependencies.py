"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

One auth method: the `Authorization: Bearer <token>` header. There are no
cookies, API keys, or sessions -- possession of a valid token is the only
credential.

get_current_user_id() raises MissingCredential / InvalidCredential, which the
exception handlers in api/main.py render as 401. The returned id is the ONLY
source of truth for task ownership; route handlers must never read an owner
from the path, query string, or body.

Layer rule: auth/dependencies.py may import from fastapi (for Request) because
this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.guard import AccessGuard


def get_current_user_id(request: Request) -> int:
    """Require a valid bearer token and return the caller's user id.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user_id: int = Depends(get_current_user_id)): ...
    """
    guard: AccessGuard = request.app.state.guard
    return guard.authorize(request.headers.get("Authorization"))
