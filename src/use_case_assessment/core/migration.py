"""Schema migration adapter for imported and persisted use-case records.

Field names drifted across versions of the tool. Records from any earlier
version are brought to the current schema through the profile's declarative
rename table; the only hard requirement is a non-empty title.
"""

from __future__ import annotations

import json
import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from .models import UseCase
from .profiles import DEFAULT_PROFILE, AssessmentProfile
from .scoring import classify_quadrant, normalize_ratings, score

logger = logging.getLogger(__name__)

_timestamp = TypeAdapter(datetime)

# Ratings for dimensions the active profile does not define.
UNSCORED_RATINGS_KEY = "unscoredRatings"


class ImportFormatError(ValueError):
    """The import payload could not be turned into any use cases."""


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_score(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _as_timestamp(value: Any, fallback: datetime) -> datetime:
    if not _present(value):
        return fallback
    try:
        return _timestamp.validate_python(value)
    except ValidationError:
        logger.debug("Unreadable timestamp %r, using %s", value, fallback)
        return fallback


def _apply_renames(record: dict[str, Any], profile: AssessmentProfile) -> None:
    for old, new in profile.field_renames:
        if old not in record:
            continue
        if not _present(record.get(new)) and _present(record[old]):
            record[new] = record.pop(old)
        elif not _present(record[old]):
            record.pop(old)


def _fold_retired_fields(record: dict[str, Any], profile: AssessmentProfile) -> None:
    parts = []
    for old, label in profile.folded_fields:
        value = record.pop(old, None)
        if _present(value):
            parts.append(f"{label}: {_as_text(value)}")
    if not parts:
        return
    folded = ", ".join(parts)
    existing = _as_text(record.get(profile.fold_target))
    record[profile.fold_target] = f"{existing}\n\n{folded}" if existing.strip() else folded


def _lift_flat_ratings(record: dict[str, Any], profile: AssessmentProfile) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split ratings into the profile's dimensions and any others.

    Includes ratings stored as top-level keys by older versions, and ratings
    parked under ``unscoredRatings`` by an earlier migration with another profile.
    """
    ratings = record.get("ratings")
    collected = dict(ratings) if isinstance(ratings, Mapping) else {}
    for key in profile.dimension_keys:
        if key in record and key not in collected:
            collected[key] = record.pop(key)
    if isinstance(record.get(UNSCORED_RATINGS_KEY), Mapping):
        for key, value in record.pop(UNSCORED_RATINGS_KEY).items():
            collected.setdefault(key, value)
    known = set(profile.dimension_keys)
    scored = {k: v for k, v in collected.items() if k in known}
    unscored = {k: v for k, v in collected.items() if k not in known}
    return scored, unscored


def migrate_record(
    record: Any,
    profile: AssessmentProfile = DEFAULT_PROFILE,
    now: Optional[datetime] = None,
) -> Optional[UseCase]:
    """Bring one record to the current schema, or return None if it has no title.

    Derived scores are recomputed whenever the record rates at least one of the
    profile's dimensions. Otherwise the stored scores are kept and get a
    matching quadrant. Ratings for other dimensions move to ``unscoredRatings``.
    """
    if not isinstance(record, Mapping):
        logger.warning("Skipping non-object record of type %s", type(record).__name__)
        return None

    migrated = dict(record)
    _apply_renames(migrated, profile)
    _fold_retired_fields(migrated, profile)

    if not _present(migrated.get("title")):
        logger.warning("Skipping record without a title (id=%s)", migrated.get("id"))
        return None

    now = now or datetime.now(timezone.utc)
    raw_ratings, unscored = _lift_flat_ratings(migrated, profile)
    if unscored:
        logger.debug("Record %r rates dimensions outside profile %s: %s",
                     migrated["title"], profile.name, ", ".join(sorted(unscored)))
        migrated[UNSCORED_RATINGS_KEY] = unscored
    if raw_ratings:
        ratings = normalize_ratings(raw_ratings, profile)
        result = score(ratings, profile)
        business_value, feasibility, quadrant = result.business_value, result.feasibility, result.quadrant
    else:
        ratings = {}
        business_value = _as_score(migrated.get("businessValue"))
        feasibility = _as_score(migrated.get("feasibility"))
        quadrant = classify_quadrant(business_value, feasibility, profile.quadrant_threshold)

    created_at = _as_timestamp(migrated.get("createdAt"), now)
    migrated.update(
        id=_as_text(migrated.get("id")) or uuid.uuid4().hex,
        title=_as_text(migrated["title"]).strip(),
        businessProcess=_as_text(migrated.get("businessProcess")),
        painPoints=_as_text(migrated.get("painPoints")),
        opportunities=_as_text(migrated.get("opportunities")),
        piiConsiderations=_as_text(migrated.get("piiConsiderations")),
        dataAvailability=_as_text(migrated.get("dataAvailability")),
        aiImpact=_as_text(migrated.get("aiImpact")),
        additionalInformation=_as_text(migrated.get("additionalInformation")),
        ratings=ratings,
        businessValue=business_value,
        feasibility=feasibility,
        quadrant=quadrant,
        createdAt=created_at,
        lastModified=_as_timestamp(migrated.get("lastModified"), created_at),
    )

    try:
        return UseCase.model_validate(migrated)
    except ValidationError as exc:
        logger.warning("Skipping record %r: %s", migrated["title"], exc)
        return None


def migrate_records(
    records: list[Any],
    profile: AssessmentProfile = DEFAULT_PROFILE,
    now: Optional[datetime] = None,
) -> list[UseCase]:
    """Migrate a batch, keeping the valid subset in its original order.

    Ids are unique in the result; a repeated id is replaced with a fresh one.
    """
    use_cases = []
    seen: set[str] = set()
    for index, record in enumerate(records, start=1):
        use_case = migrate_record(record, profile, now)
        if use_case is None:
            logger.info("Record %d dropped during migration", index)
            continue
        if use_case.id in seen:
            fresh = uuid.uuid4().hex
            logger.warning("Record %d repeats id %s, assigned %s", index, use_case.id, fresh)
            use_case = use_case.model_copy(update={"id": fresh})
        seen.add(use_case.id)
        use_cases.append(use_case)
    return use_cases


def parse_import(content: str, profile: AssessmentProfile = DEFAULT_PROFILE) -> list[UseCase]:
    """Parse an import file: a JSON array, or an object with a ``useCases`` array.

    Raises ImportFormatError for malformed JSON, any other shape, or a batch in
    which no record survives migration.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ImportFormatError(f"File is not valid JSON: {exc.msg} (line {exc.lineno})") from exc

    if isinstance(data, list):
        records = data
    elif isinstance(data, dict) and isinstance(data.get("useCases"), list):
        records = data["useCases"]
    else:
        raise ImportFormatError("Expected a JSON array of use cases or an object with a 'useCases' array")

    if not records:
        raise ImportFormatError("No valid use cases found in file")

    use_cases = migrate_records(records, profile)
    if not use_cases:
        raise ImportFormatError("No valid use cases found in file")

    logger.info("Parsed %d of %d imported record(s)", len(use_cases), len(records))
    return use_cases
