"""Target (goal) model definitions."""
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from app.models.action import DeleteMode
from app.models.base import CamelModel


class TargetStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class Target(CamelModel):
    """Target as returned by the list endpoint."""

    id: str = Field(alias="_id", serialization_alias="id")
    target_id: str
    title: str = ""
    status: TargetStatus = TargetStatus.ACTIVE
    archived: bool = False
    smart: dict[str, Any] = Field(default_factory=dict)
    user_id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TargetListResponse(CamelModel):
    targets: list[Target]


class ArchiveTargetRequest(CamelModel):
    archived: Optional[bool] = None


class ArchiveTargetResponse(CamelModel):
    success: bool = True
    target_id: str
    archived: bool
    actions_updated: int


class DeleteTargetResponse(CamelModel):
    success: bool = True
    target_id: str
    mode: DeleteMode
    deleted_actions: int
