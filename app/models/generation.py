"""Request and response models for the wizard's generation and save endpoints."""
from typing import Any, Optional

from pydantic import Field

from app.models.base import CamelModel
from app.models.smart import SmartBreakdown


class GenerateQuestionsRequest(CamelModel):
    user_input: Optional[Any] = None


class GenerateQuestionsResponse(CamelModel):
    questions: list[str]


class GenerateSmartRequest(CamelModel):
    user_input: Optional[Any] = None
    answers: Optional[Any] = None


class GenerateSmartResponse(CamelModel):
    goal_title: str
    smart: SmartBreakdown


class RepeatConfig(CamelModel):
    """Repeat details; only present for weekly or monthly actions."""

    on_days: Optional[list[str]] = None
    day_of_month: Optional[int] = None


class ActionSuggestion(CamelModel):
    """A generated action, not yet saved."""

    action_id: str
    target_id: str = ""
    title: str
    description: Optional[str] = None
    frequency: str
    repeat_config: Optional[RepeatConfig] = None
    order: Optional[int | float] = None
    completed_dates: list[str] = Field(default_factory=list)
    is_archived: bool = False
    created_at: str


class GenerateActionsRequest(CamelModel):
    goal_title: Optional[Any] = None
    smart: Optional[Any] = None
    target_id: Optional[Any] = None


class GenerateMoreActionsRequest(GenerateActionsRequest):
    # non-object items are dropped by the service
    previous_actions: Optional[list[Any]] = None


class GenerateActionsResponse(CamelModel):
    actions: list[ActionSuggestion]


class SaveGoalRequest(CamelModel):
    """Final wizard payload; actions are sanitized by the service."""

    user_id: Optional[Any] = None
    goal_title: Optional[Any] = None
    smart: Optional[Any] = None
    actions: Optional[Any] = None


class SaveGoalResponse(CamelModel):
    success: bool = True
    target_id: str
