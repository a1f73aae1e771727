"""SMART breakdown models.

The service, the LLM and the database use ``timeBased``; the wizard UI calls
the same field ``timebound``. Conversion happens only through
``to_external`` / ``from_external``.
"""
from pydantic import BaseModel

from app.models.base import CamelModel


class SmartBreakdown(CamelModel):
    """Canonical SMART breakdown (serialized with ``timeBased``)."""

    specific: str
    measurable: str
    achievable: str
    relevant: str
    time_based: str


class WizardSmart(BaseModel):
    """SMART fields as edited in the wizard."""

    specific: str = ""
    measurable: str = ""
    achievable: str = ""
    relevant: str = ""
    timebound: str = ""

    def trimmed(self) -> "WizardSmart":
        return WizardSmart(**{key: value.strip() for key, value in self.model_dump().items()})

    def is_complete(self) -> bool:
        return all(value.strip() for value in self.model_dump().values())


def to_external(smart: SmartBreakdown) -> WizardSmart:
    """Convert the canonical breakdown to wizard vocabulary."""
    return WizardSmart(
        specific=smart.specific,
        measurable=smart.measurable,
        achievable=smart.achievable,
        relevant=smart.relevant,
        timebound=smart.time_based,
    )


def from_external(smart: WizardSmart) -> SmartBreakdown:
    """Convert wizard SMART fields to the canonical breakdown."""
    return SmartBreakdown(
        specific=smart.specific,
        measurable=smart.measurable,
        achievable=smart.achievable,
        relevant=smart.relevant,
        time_based=smart.timebound,
    )
