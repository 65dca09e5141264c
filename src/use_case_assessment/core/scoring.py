"""Scoring and quadrant classification engine.

Turns a set of ratings into the two composite scores and a priority quadrant.
Everything here is pure: no I/O, no clock, and rating input never raises.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional

from .models import MatrixPoint, Quadrant, ScoreResult, UseCase
from .profiles import DEFAULT_PROFILE, AssessmentProfile, Dimension

logger = logging.getLogger(__name__)

QUADRANT_COLORS: dict[Quadrant, str] = {
    Quadrant.QUICK_WINS: "#28a745",
    Quadrant.STRATEGIC_INITIATIVES: "#ffc107",
    Quadrant.INCREMENTAL_IMPROVEMENTS: "#17a2b8",
    Quadrant.DEPRIORITIZE: "#dc3545",
}
UNCATEGORIZED_COLOR = "#6c757d"

_ONE_DECIMAL = Decimal("0.1")


def round_score(value: float) -> float:
    """Round to one decimal, half away from zero (``toFixed(1)`` semantics).

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return float(Decimal(repr(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def coerce_rating(raw: Any, profile: AssessmentProfile = DEFAULT_PROFILE) -> int:
    """Read one rating, falling back to the profile default and clamping to the scale."""
    value = profile.default_rating
    if raw is not None and not isinstance(raw, bool) and raw != "":
        try:
            value = int(float(raw))
        except (TypeError, ValueError, OverflowError):
            logger.debug("Unreadable rating %r, using default %d", raw, profile.default_rating)
    return max(profile.scale_min, min(profile.scale_max, value))


def normalize_ratings(inputs: Optional[Mapping[str, Any]], profile: AssessmentProfile = DEFAULT_PROFILE) -> dict[str, int]:
    """Coerced rating for every dimension of the profile, in profile order."""
    inputs = inputs or {}
    return {d.key: coerce_rating(inputs.get(d.key), profile) for d in profile.dimensions}


def _dimension_score(dimension: Dimension, rating: int, profile: AssessmentProfile) -> int:
    if dimension.inverted:
        return profile.scale_min + profile.scale_max - rating
    return rating


def _group_mean(dimensions: list[Dimension], ratings: Mapping[str, int], profile: AssessmentProfile) -> float:
    total = sum(_dimension_score(d, ratings[d.key], profile) for d in dimensions)
    return round_score(total / len(dimensions))


def compute_business_value(inputs: Optional[Mapping[str, Any]], profile: AssessmentProfile = DEFAULT_PROFILE) -> float:
    """Mean of the value dimensions."""
    ratings = normalize_ratings(inputs, profile)
    return _group_mean(profile.value_dimensions, ratings, profile)


def compute_feasibility(inputs: Optional[Mapping[str, Any]], profile: AssessmentProfile = DEFAULT_PROFILE) -> float:
    """Mean of the feasibility dimensions.

    Complexity-type dimensions are inverted first: higher complexity means
    lower feasibility.
    """
    ratings = normalize_ratings(inputs, profile)
    return _group_mean(profile.feasibility_dimensions, ratings, profile)


def classify_quadrant(business_value: float, feasibility: float, threshold: float) -> Quadrant:
    """Bucket a pair of scores. Boundaries are inclusive on the high side."""
    if business_value >= threshold and feasibility >= threshold:
        return Quadrant.QUICK_WINS
    if business_value >= threshold and feasibility < threshold:
        return Quadrant.STRATEGIC_INITIATIVES
    if business_value < threshold and feasibility >= threshold:
        return Quadrant.INCREMENTAL_IMPROVEMENTS
    return Quadrant.DEPRIORITIZE


def score(inputs: Optional[Mapping[str, Any]], profile: AssessmentProfile = DEFAULT_PROFILE) -> ScoreResult:
    """Compute business value, feasibility and quadrant for a set of ratings."""
    business_value = compute_business_value(inputs, profile)
    feasibility = compute_feasibility(inputs, profile)
    return ScoreResult(
        business_value=business_value,
        feasibility=feasibility,
        quadrant=classify_quadrant(business_value, feasibility, profile.quadrant_threshold),
    )


def quadrant_color(quadrant: Optional[str]) -> str:
    try:
        return QUADRANT_COLORS[Quadrant(quadrant)]
    except ValueError:
        return UNCATEGORIZED_COLOR


def matrix_points(use_cases: Iterable[UseCase]) -> list[MatrixPoint]:
    """Scatter-plot positions for the priority matrix.

    Records whose stored scores are not finite are left off the plot.
    """
    points = []
    for uc in use_cases:
        if not (math.isfinite(uc.business_value) and math.isfinite(uc.feasibility)):
            logger.warning("Invalid scores for %r: value=%s feasibility=%s", uc.title, uc.business_value, uc.feasibility)
            continue
        points.append(MatrixPoint(
            id=uc.id,
            title=uc.title,
            x=uc.feasibility,
            y=uc.business_value,
            quadrant=uc.quadrant,
            color=quadrant_color(uc.quadrant),
        ))
    return points
