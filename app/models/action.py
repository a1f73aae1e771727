"""Action model definitions."""
from enum import Enum
from typing import Optional

from pydantic import Field

from app.models.base import CamelModel
from app.models.generation import RepeatConfig


class Frequency(str, Enum):
    """How often an action repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONCE = "once"


class ActionStatus(str, Enum):
    """Action states."""

    PENDING = "pending"
    DONE = "done"


class DeleteMode(str, Enum):
    """Soft delete archives; hard delete removes the document."""

    SOFT = "soft"
    HARD = "hard"


class Action(CamelModel):
    """Action as returned by the list endpoint."""

    action_id: str
    target_id: str = ""
    goal_title: str = ""
    title: str = ""
    description: str = ""
    frequency: Frequency = Frequency.ONCE
    repeat_config: Optional[RepeatConfig] = None
    deadline: Optional[str] = None
    status: ActionStatus = ActionStatus.PENDING
    is_archived: bool = False
    order: Optional[int | float] = None
    completed_dates: list[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ActionListRequest(CamelModel):
    target_id: Optional[str] = None
    include_archived: bool = True


class ActionListResponse(CamelModel):
    actions: list[Action]


class UpdateActionRequest(CamelModel):
    action_id: Optional[str] = None
    status: Optional[str] = None


class DeleteActionRequest(CamelModel):
    action_id: Optional[str] = None
    mode: Optional[str] = None


class DeleteActionResponse(CamelModel):
    success: bool = True
    mode: DeleteMode


class CompleteActionRequest(CamelModel):
    action_id: Optional[str] = None
    user_id: Optional[str] = None


class CompleteActionResponse(CamelModel):
    success: bool = True
    message: str


class DashboardAction(CamelModel):
    """Recurring action with today's check-in state and current streak."""

    id: str
    title: str = ""
    description: str = ""
    frequency: Frequency
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_active: bool = True
    is_completed_today: bool = False
    streak: int = 0


class DashboardResponse(CamelModel):
    actions: list[DashboardAction]


class SuccessResponse(CamelModel):
    success: bool = True
