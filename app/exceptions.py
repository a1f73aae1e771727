"""Exception hierarchy for the goal wizard service."""
from typing import Any, Dict, Optional


class GoalWizardError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class InvalidRequestError(GoalWizardError):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class NotFoundError(GoalWizardError):
    """Raised when a target or action does not exist."""

    pass


class OwnershipError(GoalWizardError):
    """Raised when a document belongs to another user."""

    pass


class GenerationError(GoalWizardError):
    """Raised when an LLM response cannot be turned into the expected shape."""

    pass


class DuplicateSuggestionsError(GoalWizardError):
    """Raised when every additional suggestion repeats a previous one."""

    pass


class LLMConfigurationError(GoalWizardError):
    """Raised when the completion service is not configured."""

    pass


HTTP_STATUS = {
    InvalidRequestError: 400,
    DuplicateSuggestionsError: 400,
    NotFoundError: 404,
    OwnershipError: 403,
    GenerationError: 500,
    LLMConfigurationError: 500,
}


def http_status(error: GoalWizardError) -> int:
    """Map a domain error to its HTTP status code."""
    for error_type, status_code in HTTP_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return 500
