"""Pydantic data models shared across the core.

The scoring engine, migration adapter, report serializers and the MCP server
all exchange these models. Wire keys are camelCase so exported files stay
compatible with earlier versions of the tool.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Quadrant(str, Enum):
    """Priority bucket derived from business value and feasibility."""

    QUICK_WINS = "Quick Wins"
    STRATEGIC_INITIATIVES = "Strategic Initiatives"
    INCREMENTAL_IMPROVEMENTS = "Incremental Improvements"
    DEPRIORITIZE = "Deprioritize"


class Outcome(str, Enum):
    """Result of a user-facing operation."""

    SUCCESS = "success"
    WARNING = "warning"
    NOOP = "noop"


REQUIRED_TEXT_FIELDS = (
    "title",
    "business_process",
    "pain_points",
    "opportunities",
    "pii_considerations",
    "data_availability",
    "ai_impact",
)

TEXT_FIELDS = REQUIRED_TEXT_FIELDS + ("additional_information",)


class WireModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class UseCaseForm(WireModel):
    """The in-progress entry form. Ratings are raw until saved."""

    title: str = ""
    business_process: str = ""
    pain_points: str = ""
    opportunities: str = ""
    pii_considerations: str = ""
    data_availability: str = ""
    ai_impact: str = ""
    additional_information: str = ""
    ratings: dict[str, Any] = Field(default_factory=dict)

    def stripped(self) -> UseCaseForm:
        return self.model_copy(update={name: getattr(self, name).strip() for name in TEXT_FIELDS})


class UseCase(WireModel):
    """A candidate automation/AI opportunity with its ratings and derived scores.

    Keys the current schema does not know about are kept as extras so that a
    JSON export reproduces the record exactly.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    title: str
    business_process: str = ""
    pain_points: str = ""
    opportunities: str = ""
    pii_considerations: str = ""
    data_availability: str = ""
    ai_impact: str = ""
    additional_information: str = ""
    ratings: dict[str, int] = Field(default_factory=dict)
    business_value: float = 0.0
    feasibility: float = 0.0
    quadrant: Quadrant = Quadrant.DEPRIORITIZE
    created_at: datetime
    last_modified: datetime

    def extra_field(self, key: str, default: Any = None) -> Any:
        return (self.model_extra or {}).get(key, default)


class ScoreResult(BaseModel):
    """Composite scores for one set of ratings."""

    business_value: float
    feasibility: float
    quadrant: Quadrant


class MatrixPoint(BaseModel):
    """One use case positioned on the value/feasibility matrix."""

    id: str
    title: str
    x: float = Field(description="Feasibility")
    y: float = Field(description="Business value")
    quadrant: Quadrant
    color: str


class PortfolioSummary(BaseModel):
    """Aggregate statistics over the whole collection."""

    total: int
    avg_business_value: float
    avg_feasibility: float
    quick_wins: int
    by_quadrant: dict[Quadrant, int]


class AppState(BaseModel):
    """Everything the tool holds in memory.

    Transitions live in ``core.workspace`` and always return a new state.
    """

    model_config = ConfigDict(frozen=True)

    use_cases: tuple[UseCase, ...] = ()
    editing_id: Optional[str] = None
    dirty: bool = False
    draft: Optional[UseCaseForm] = None


class OperationResult(BaseModel):
    """What a service call reports back to the presentation layer."""

    outcome: Outcome
    message: str
    use_case: Optional[UseCase] = None
    count: int = 0
