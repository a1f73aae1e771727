"""Serializable state of an in-progress goal wizard."""
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from app.models.smart import WizardSmart

logger = logging.getLogger(__name__)

STORAGE_KEY = "goal-wizard-state-v1"
FIRST_STEP = 1
LAST_STEP = 4


def clamp_step(step: int) -> int:
    return min(max(step, FIRST_STEP), LAST_STEP)


class WizardAction(BaseModel):
    """An action as edited in step 4."""

    action_id: Optional[str] = None
    title: str = ""
    description: str = ""
    frequency: str = "once"
    repeat_config: Optional[dict] = None
    user_deadline: str = ""


class WizardSession(BaseModel):
    """Everything the wizard needs to resume where the user left off."""

    step: int = FIRST_STEP
    user_id: str = ""
    goal_title: str = ""
    questions: list[str] = Field(default_factory=list)
    answers: list[str] = Field(default_factory=list)
    smart: WizardSmart = Field(default_factory=WizardSmart)
    actions: list[WizardAction] = Field(default_factory=list)

    @field_validator("step")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return clamp_step(value)


def dump_session(session: WizardSession) -> str:
    """Serialize a session to JSON."""
    return session.model_dump_json()


def load_session(raw: Optional[str]) -> WizardSession:
    """
    Deserialize a session, starting fresh on empty or corrupt input.

    Example:
        >>> load_session("not json").step
        1
    """
    if not raw:
        return WizardSession()
    try:
        return WizardSession.model_validate_json(raw)
    except ValidationError:
        logger.warning("Discarding unreadable wizard session")
        return WizardSession()


class SessionFile:
    """Stores a wizard session as a JSON file between runs."""

    def __init__(self, directory: Path):
        self.path = Path(directory) / f".{STORAGE_KEY}.json"

    def load(self) -> WizardSession:
        if not self.path.exists():
            return WizardSession()
        return load_session(self.path.read_text(encoding="utf-8"))

    def save(self, session: WizardSession) -> None:
        self.path.write_text(dump_session(session), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
