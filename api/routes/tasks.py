"""
api/routes/tasks.py -- Per-user task CRUD routes.

Routes:
  GET    /tasks             -- list caller's tasks, newest first
  POST   /tasks             -- create task owned by caller
  GET    /tasks/{task_id}   -- single task
  PATCH  /tasks/{task_id}   -- update title and/or completed
  DELETE /tasks/{task_id}   -- permanent delete

Ownership:
  Every handler takes user_id from get_current_user_id() -- the verified
  token -- and passes it to the store alongside the task id. Nothing in the
  path, query, or body can name a different owner.

  A missing task and another user's task both raise NotFoundOrForbidden (404).
  There is no 403 here: it would confirm that the id exists.
"""

from fastapi import APIRouter, Depends, Request

from api.models import MessageResponse, TaskCreate, TaskPatch, TaskResponse
from auth.dependencies import get_current_user_id
from core.errors import InvalidCredential, NotFoundOrForbidden
from tasks.store import TaskStore

# Router-level dependency: every task route requires a valid bearer token,
# even handlers that do not read the user id themselves.
router = APIRouter(dependencies=[Depends(get_current_user_id)])


@router.get("/tasks", response_model=list[TaskResponse])
def list_tasks(request: Request, user_id: int = Depends(get_current_user_id)) -> list[TaskResponse]:
    """Return the caller's tasks, newest first."""
    store: TaskStore = request.app.state.task_store
    return [TaskResponse.from_task(t) for t in store.list_tasks(user_id)]


@router.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    request: Request,
    body: TaskCreate,
    user_id: int = Depends(get_current_user_id),
) -> TaskResponse:
    """Create a task owned by the caller."""
    store: TaskStore = request.app.state.task_store
    task = store.create_task(owner=user_id, title=body.title)
    if task is None:
        # Validly signed, but for a user the store does not hold.
        raise InvalidCredential()
    return TaskResponse.from_task(task)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(request: Request, task_id: int, user_id: int = Depends(get_current_user_id)) -> TaskResponse:
    store: TaskStore = request.app.state.task_store
    task = store.get_task(task_id, owner=user_id)
    if task is None:
        raise NotFoundOrForbidden()
    return TaskResponse.from_task(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    request: Request,
    task_id: int,
    body: TaskPatch,
    user_id: int = Depends(get_current_user_id),
) -> TaskResponse:
    """Update title and/or completion. Omitted fields keep their values."""
    store: TaskStore = request.app.state.task_store
    task = store.update_task(task_id, owner=user_id, **body.model_dump(exclude_none=True))
    if task is None:
        raise NotFoundOrForbidden()
    return TaskResponse.from_task(task)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(request: Request, task_id: int, user_id: int = Depends(get_current_user_id)) -> MessageResponse:
    store: TaskStore = request.app.state.task_store
    if not store.delete_task(task_id, owner=user_id):
        raise NotFoundOrForbidden()
    return MessageResponse(message="Task deleted successfully")
