"""Task endpoints."""

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.api.common import MessageResponse, UpdateSchema, apply_changes, get_or_404
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.task import Task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


class TaskResponse(BaseModel):
    """Task response schema."""

    id: int
    client_id: int | None
    title: str
    details: str
    due_date: date | None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(BaseModel):
    """Task creation schema."""

    client_id: int | None = None
    title: str = ""
    details: str = ""
    due_date: date | None = None
    status: str = "open"


class TaskUpdate(UpdateSchema):
    """Fields a task update may change."""

    title: str | None = None
    details: str | None = None
    due_date: date | None = None
    status: str | None = None


_CLEARED_DEFAULTS = {"title": "", "details": "", "status": "open"}


@router.get("", response_model=list[TaskResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_tasks(request: Request, db: AsyncSession = Depends(get_db)) -> list[Task]:
    """List tasks by due date, undated tasks last."""
    result = await db.execute(
        select(Task).order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc())
    )
    return list(result.scalars().all())


@router.post("", response_model=TaskResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_task(
    request: Request, task_data: TaskCreate, db: AsyncSession = Depends(get_db)
) -> Task:
    """Create a task; new tasks are open."""
    task = Task(**task_data.model_dump())
    db.add(task)
    await db.commit()
    await db.refresh(task)

    logger.info("Created task: id=%d, due=%s", task.id, task.due_date)
    return task


@router.put("/{task_id}", response_model=TaskResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_task(
    request: Request,
    task_id: int,
    task_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
) -> Task:
    """Update the supplied fields of a task."""
    task = await get_or_404(db, Task, task_id, "Task")
    changes = {
        field: _CLEARED_DEFAULTS[field] if value is None and field in _CLEARED_DEFAULTS else value
        for field, value in task_data.changes().items()
    }
    apply_changes(task, changes)
    await db.commit()
    await db.refresh(task)

    logger.info("Updated task: id=%d, status=%s", task.id, task.status)
    return task


@router.delete("/{task_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_task(
    request: Request, task_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete a task."""
    task = await get_or_404(db, Task, task_id, "Task")
    await db.delete(task)
    await db.commit()

    logger.info("Deleted task: id=%d", task_id)
    return MessageResponse(message="Task deleted")
