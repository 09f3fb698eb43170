"""Helpers shared by the CRUD routers."""

from typing import Any, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class UpdateSchema(BaseModel):
    """Base for partial-update bodies.

    The declared fields are the only ones a client may change; anything
    else in the body is ignored. Blank strings clear a field.
    """

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat "" as an explicit null."""
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    def changes(self) -> dict[str, Any]:
        """Fields present in the request body, or 400 if there are none."""
        data = self.model_dump(exclude_unset=True)
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update",
            )
        return data


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


async def get_or_404(db: AsyncSession, model: type[ModelT], record_id: int, label: str) -> ModelT:
    """Load a row by primary key or raise 404."""
    instance = await db.get(model, record_id)
    if instance is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return instance


def apply_changes(instance: Base, changes: dict[str, Any]) -> None:
    """Copy validated changes onto an ORM instance."""
    for field, value in changes.items():
        setattr(instance, field, value)
