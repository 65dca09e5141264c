"""Assessment profiles: rating dimensions, scale bounds and schema-drift tables.

Two incompatible dimension sets have been used by the tool over time. Each
one is a profile; nothing in the engine hardcodes dimension names, bounds or
thresholds.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class DefaultPolicy(str, Enum):
    """Rating used when a dimension is missing or unreadable."""

    ZERO = "zero"
    MIDPOINT = "midpoint"


class DimensionGroup(str, Enum):
    VALUE = "value"
    FEASIBILITY = "feasibility"


class Dimension(BaseModel):
    """A single rating dimension."""

    key: str
    label: str
    group: DimensionGroup
    inverted: bool = Field(False, description="Higher ratings reduce the composite score")


class CsvColumn(BaseModel):
    header: str
    field: str = Field(description="UseCase attribute rendered in this column")


DEFAULT_FIELD_RENAMES: list[tuple[str, str]] = [
    ("useCaseTitle", "title"),
    ("valueChain", "businessProcess"),
    ("problemStatement", "painPoints"),
    ("rootCause", "opportunities"),
    ("regulatory", "piiConsiderations"),
    ("potentialSolution", "aiImpact"),
    ("timestamp", "createdAt"),
]

# Retired fields folded into additionalInformation, with their label.
DEFAULT_FOLDED_FIELDS: list[tuple[str, str]] = [
    ("estimatedCost", "Cost"),
    ("timeToComplete", "Time"),
]

DEFAULT_CSV_COLUMNS: list[CsvColumn] = [
    CsvColumn(header="Title", field="title"),
    CsvColumn(header="Business Process", field="business_process"),
    CsvColumn(header="Pain Points", field="pain_points"),
    CsvColumn(header="Business Value", field="business_value"),
    CsvColumn(header="Feasibility", field="feasibility"),
    CsvColumn(header="Quadrant", field="quadrant"),
    CsvColumn(header="Created Date", field="created_at"),
]


class AssessmentProfile(BaseModel):
    """Scale, dimensions and schema-drift tables for one version of the tool."""

    name: str
    scale_min: int
    scale_max: int
    default_policy: DefaultPolicy = DefaultPolicy.ZERO
    dimensions: list[Dimension]
    threshold: Optional[float] = Field(None, description="Quadrant cut-off; defaults to the scale midpoint")
    field_renames: list[tuple[str, str]] = Field(default_factory=lambda: list(DEFAULT_FIELD_RENAMES))
    folded_fields: list[tuple[str, str]] = Field(default_factory=lambda: list(DEFAULT_FOLDED_FIELDS))
    fold_target: str = "additionalInformation"
    csv_columns: list[CsvColumn] = Field(default_factory=lambda: list(DEFAULT_CSV_COLUMNS))

    @model_validator(mode="after")
    def _check_dimensions(self) -> AssessmentProfile:
        if self.scale_min >= self.scale_max:
            raise ValueError(f"scale_min ({self.scale_min}) must be below scale_max ({self.scale_max})")
        keys = [d.key for d in self.dimensions]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Duplicate dimension keys: {', '.join(duplicates)}")
        if not self.value_dimensions:
            raise ValueError("Profile needs at least one value dimension")
        if not self.feasibility_dimensions:
            raise ValueError("Profile needs at least one feasibility dimension")
        return self

    @property
    def value_dimensions(self) -> list[Dimension]:
        return [d for d in self.dimensions if d.group == DimensionGroup.VALUE]

    @property
    def feasibility_dimensions(self) -> list[Dimension]:
        return [d for d in self.dimensions if d.group == DimensionGroup.FEASIBILITY]

    @property
    def dimension_keys(self) -> list[str]:
        return [d.key for d in self.dimensions]

    @property
    def quadrant_threshold(self) -> float:
        if self.threshold is not None:
            return self.threshold
        return (self.scale_min + self.scale_max) / 2

    @property
    def default_rating(self) -> int:
        if self.default_policy == DefaultPolicy.MIDPOINT:
            return (self.scale_min + self.scale_max) // 2
        return max(self.scale_min, 0)


FIVE_POINT = AssessmentProfile(
    name="five_point",
    scale_min=0,
    scale_max=5,
    default_policy=DefaultPolicy.ZERO,
    threshold=2.5,
    dimensions=[
        Dimension(key="economicImpact", label="Economic Impact", group=DimensionGroup.VALUE),
        Dimension(key="hsec", label="HSEC / Sustainability", group=DimensionGroup.VALUE),
        Dimension(key="esg", label="ESG", group=DimensionGroup.VALUE),
        Dimension(key="productivity", label="Productivity", group=DimensionGroup.VALUE),
        Dimension(key="dataReadiness", label="Data Readiness", group=DimensionGroup.FEASIBILITY),
        Dimension(key="technicalComplexity", label="Technical Complexity", group=DimensionGroup.FEASIBILITY, inverted=True),
        Dimension(key="aiComplexity", label="AI Complexity", group=DimensionGroup.FEASIBILITY, inverted=True),
        Dimension(key="organisationalCapability", label="Organisational Capability", group=DimensionGroup.FEASIBILITY),
    ],
)

TEN_POINT = AssessmentProfile(
    name="ten_point",
    scale_min=1,
    scale_max=10,
    default_policy=DefaultPolicy.MIDPOINT,
    threshold=5.5,
    dimensions=[
        Dimension(key="strategicAlignment", label="Strategic Alignment", group=DimensionGroup.VALUE),
        Dimension(key="financialImpact", label="Financial Impact", group=DimensionGroup.VALUE),
        Dimension(key="customerImpact", label="Customer Impact", group=DimensionGroup.VALUE),
        Dimension(key="dataReadiness", label="Data Readiness", group=DimensionGroup.FEASIBILITY),
        Dimension(key="technicalComplexity", label="Technical Complexity", group=DimensionGroup.FEASIBILITY, inverted=True),
        Dimension(key="implementationEffort", label="Implementation Effort", group=DimensionGroup.FEASIBILITY, inverted=True),
        Dimension(key="organisationalReadiness", label="Organisational Readiness", group=DimensionGroup.FEASIBILITY),
    ],
)

BUILTIN_PROFILES: dict[str, AssessmentProfile] = {
    FIVE_POINT.name: FIVE_POINT,
    TEN_POINT.name: TEN_POINT,
}

DEFAULT_PROFILE = FIVE_POINT
