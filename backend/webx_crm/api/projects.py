"""Project endpoints."""

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, field_validator
from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.api.common import MessageResponse, UpdateSchema, get_or_404
from webx_crm.core.config import settings
from webx_crm.core.errors import ApiError
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.client import Client
from webx_crm.models.project import Project

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])

PRIORITIES = ("urgent", "high", "normal", "low")
STAGES = ("not_started", "discovery", "design", "build", "qa", "live", "blocked", "completed")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def parse_cost(value: Any) -> Decimal | None:
    """Blank means no cost; anything else must be numeric."""
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError("cost must be a number") from e


def parse_progress(value: Any) -> int:
    """Parse a percentage, clamped to 0..100; unparsable values become 0."""
    if value is None or value == "":
        return 0
    try:
        progress = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, progress))


def normalize_priority(value: str | None) -> str:
    return value if value in PRIORITIES else "normal"


def normalize_stage(value: str | None) -> str:
    return value if value in STAGES else "not_started"


class ProjectOut(BaseModel):
    """Project as returned to the frontend."""

    id: int
    client_id: int | None
    client_name: str | None
    client_name_manual: str | None
    title: str
    notes: str | None
    allocated_to: str
    cost: float | None
    start_date: date | None
    eta_date: date | None
    completed: int
    completed_at: str | None
    priority: str
    stage: str
    progress_percent: int

    @classmethod
    def from_project(cls, project: Project, client_name: str | None = None) -> "ProjectOut":
        return cls(
            id=project.id,
            client_id=project.client_id,
            client_name=client_name or None,
            client_name_manual=project.client_name_manual,
            title=project.title,
            notes=project.notes,
            allocated_to=project.allocated_to,
            cost=float(project.cost) if project.cost is not None else None,
            start_date=project.start_date,
            eta_date=project.eta_date,
            completed=1 if project.completed else 0,
            completed_at=(
                project.completed_at.strftime("%Y-%m-%d %H:%M:%S") if project.completed_at else None
            ),
            priority=project.priority or "normal",
            stage=project.stage or "not_started",
            progress_percent=project.progress_percent or 0,
        )


class ProjectListResponse(BaseModel):
    ok: bool = True
    projects: list[ProjectOut]


class ProjectResponse(BaseModel):
    ok: bool = True
    project: ProjectOut


class ProjectCreate(BaseModel):
    """Project creation schema."""

    client_id: int | None = None
    client_name_manual: str | None = None
    title: str | None = None
    notes: str | None = None
    allocated_to: str | None = None
    cost: Decimal | None = None
    start_date: date | None = None
    eta_date: date | None = None
    priority: str | None = None
    stage: str | None = None
    progress_percent: int = 0

    @field_validator("client_id", "start_date", "eta_date", mode="before")
    @classmethod
    def falsy_to_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("cost", mode="before")
    @classmethod
    def validate_cost(cls, v: Any) -> Decimal | None:
        return parse_cost(v)

    @field_validator("progress_percent", mode="before")
    @classmethod
    def validate_progress(cls, v: Any) -> int:
        return parse_progress(v)


class ProjectUpdate(UpdateSchema):
    """Fields a project update may change."""

    client_id: int | None = None
    client_name_manual: str | None = None
    title: str | None = None
    notes: str | None = None
    allocated_to: str | None = None
    cost: Decimal | None = None
    start_date: date | None = None
    eta_date: date | None = None
    priority: str | None = None
    stage: str | None = None
    progress_percent: int | None = None
    completed: bool | None = None

    @field_validator("cost", mode="before")
    @classmethod
    def validate_cost(cls, v: Any) -> Decimal | None:
        return parse_cost(v)

    @field_validator("progress_percent", mode="before")
    @classmethod
    def validate_progress(cls, v: Any) -> int:
        return parse_progress(v)


def require_title(title: str | None) -> str:
    if not title or not title.strip():
        raise ApiError("Title is required")
    return title.strip()


async def resolve_client_id(db: AsyncSession, manual_name: str) -> int:
    """Find a client by company name, creating a minimal one when missing."""
    existing = await db.scalar(select(Client.id).where(Client.company == manual_name).limit(1))
    if existing is not None:
        return existing

    client = Client(name=manual_name, company=manual_name, status="active")
    db.add(client)
    await db.flush()
    logger.info("Auto-created client for project: id=%d, company=%s", client.id, manual_name)
    return client.id


async def client_name_for(db: AsyncSession, client_id: int | None) -> str | None:
    if client_id is None:
        return None
    return await db.scalar(select(Client.company).where(Client.id == client_id))


@router.get("", response_model=ProjectListResponse)
@limiter.limit(DEFAULT_LIMIT)
async def list_projects(
    request: Request,
    status_filter: str | None = Query(None, alias="status"),
    month: str | None = Query(None, description="YYYY-MM, applies to completed projects"),
    client_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ProjectListResponse:
    """List projects: open work first, then by priority and ETA."""
    query = select(Project, Client.company.label("client_name")).outerjoin(
        Client, Project.client_id == Client.id
    )

    if status_filter == "active":
        query = query.where(Project.completed.is_(False))
    elif status_filter == "completed":
        query = query.where(Project.completed.is_(True))

    if client_id:
        query = query.where(Project.client_id == client_id)

    if status_filter == "completed" and month and MONTH_PATTERN.match(month):
        year, mon = int(month[:4]), int(month[5:7])
        if 1 <= mon <= 12:
            start = datetime(year, mon, 1, tzinfo=settings.business_tz)
            end = start + relativedelta(months=1)
            query = query.where(Project.completed_at >= start, Project.completed_at < end)

    priority_rank = case(
        {name: rank for rank, name in enumerate(PRIORITIES)},
        value=Project.priority,
        else_=len(PRIORITIES),
    )
    query = query.order_by(
        Project.completed.asc(),
        priority_rank,
        Project.eta_date.is_(None),
        Project.eta_date.asc(),
        Project.id.desc(),
    )

    result = await db.execute(query)
    return ProjectListResponse(
        projects=[ProjectOut.from_project(project, client_name) for project, client_name in result.all()]
    )


@router.post("", response_model=ProjectResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_project(
    request: Request, project_data: ProjectCreate, db: AsyncSession = Depends(get_db)
) -> ProjectResponse:
    """Create a project, linking or creating its client by name if needed."""
    title = require_title(project_data.title)
    manual_name = (project_data.client_name_manual or "").strip() or None

    client_id = project_data.client_id
    if client_id is None and manual_name:
        client_id = await resolve_client_id(db, manual_name)

    project = Project(
        client_id=client_id,
        client_name_manual=manual_name,
        title=title,
        notes=project_data.notes or None,
        allocated_to=(project_data.allocated_to or "").strip() or "Unassigned",
        cost=project_data.cost,
        start_date=project_data.start_date or datetime.now(settings.business_tz).date(),
        eta_date=project_data.eta_date,
        completed=False,
        priority=normalize_priority(project_data.priority),
        stage=normalize_stage(project_data.stage),
        progress_percent=project_data.progress_percent,
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)

    logger.info("Created project: id=%d, client_id=%s", project.id, project.client_id)
    return ProjectResponse(project=ProjectOut.from_project(project, await client_name_for(db, client_id)))


@router.put("/{project_id}", response_model=ProjectResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_project(
    request: Request,
    project_id: int,
    project_data: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    """Update the supplied fields of a project."""
    changes = project_data.changes()
    project = await get_or_404(db, Project, project_id, "Project")

    if "title" in changes:
        changes["title"] = require_title(changes["title"])
    if "priority" in changes:
        changes["priority"] = normalize_priority(changes["priority"])
    if "stage" in changes:
        changes["stage"] = normalize_stage(changes["stage"])
    if "allocated_to" in changes:
        changes["allocated_to"] = (changes["allocated_to"] or "").strip() or "Unassigned"
    if "progress_percent" in changes and changes["progress_percent"] is None:
        changes["progress_percent"] = 0
    if "completed" in changes:
        done = bool(changes["completed"])
        changes["completed"] = done
        if done and not project.completed:
            changes["completed_at"] = datetime.now(settings.business_tz)
        elif not done:
            changes["completed_at"] = None

    for field, value in changes.items():
        setattr(project, field, value)
    await db.commit()
    await db.refresh(project)

    logger.info("Updated project: id=%d, fields=%s", project.id, sorted(changes))
    return ProjectResponse(
        project=ProjectOut.from_project(project, await client_name_for(db, project.client_id))
    )


@router.delete("/{project_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_project(
    request: Request, project_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete a project."""
    project = await get_or_404(db, Project, project_id, "Project")
    await db.delete(project)
    await db.commit()

    logger.info("Deleted project: id=%d", project_id)
    return MessageResponse(message="Project deleted")
