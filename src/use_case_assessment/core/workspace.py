"""State transitions over the in-memory use-case collection.

Every function takes an AppState and returns a new one; nothing here touches
storage. The service layer decides when to persist.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from .models import REQUIRED_TEXT_FIELDS, AppState, UseCase, UseCaseForm
from .profiles import DEFAULT_PROFILE, AssessmentProfile
from .scoring import normalize_ratings, score


class IncompleteFormError(ValueError):
    """A required form field is empty."""


def validate_form(form: UseCaseForm) -> bool:
    """Presence check on the required text fields."""
    return all(getattr(form, name).strip() for name in REQUIRED_TEXT_FIELDS)


def build_use_case(
    form: UseCaseForm,
    profile: AssessmentProfile = DEFAULT_PROFILE,
    now: Optional[datetime] = None,
    existing: Optional[UseCase] = None,
) -> UseCase:
    """Turn a form into a scored record. Editing keeps id, creation time and extras."""
    now = now or datetime.now(timezone.utc)
    form = form.stripped()
    ratings = normalize_ratings(form.ratings, profile)
    result = score(ratings, profile)

    record = dict(existing.model_extra or {}) if existing else {}
    record.update(form.model_dump(exclude={"ratings"}))
    record.update(
        id=existing.id if existing else uuid.uuid4().hex,
        ratings=ratings,
        business_value=result.business_value,
        feasibility=result.feasibility,
        quadrant=result.quadrant,
        created_at=existing.created_at if existing else now,
        last_modified=now,
    )
    return UseCase.model_validate(record)


def find_use_case(state: AppState, use_case_id: str) -> Optional[UseCase]:
    return next((uc for uc in state.use_cases if uc.id == use_case_id), None)


def save_form(
    state: AppState,
    form: UseCaseForm,
    profile: AssessmentProfile = DEFAULT_PROFILE,
    now: Optional[datetime] = None,
) -> tuple[AppState, UseCase, bool]:
    """Create a use case, or update the one being edited.

    Returns the new state, the saved record and whether it was newly created.
    Raises IncompleteFormError when a required field is empty.
    """
    if not validate_form(form):
        raise IncompleteFormError("Please fill in all required fields.")

    existing = find_use_case(state, state.editing_id) if state.editing_id else None
    saved = build_use_case(form, profile, now, existing)
    if existing:
        use_cases = tuple(saved if uc.id == existing.id else uc for uc in state.use_cases)
    else:
        use_cases = state.use_cases + (saved,)

    return clear_form(state.model_copy(update={"use_cases": use_cases})), saved, existing is None


def form_from_use_case(use_case: UseCase) -> UseCaseForm:
    return UseCaseForm.model_validate(use_case.model_dump(include=set(UseCaseForm.model_fields)))


def start_edit(state: AppState, use_case_id: str) -> tuple[AppState, Optional[UseCaseForm]]:
    """Load a use case into the form. Unknown ids leave the state unchanged."""
    use_case = find_use_case(state, use_case_id)
    if use_case is None:
        return state, None
    form = form_from_use_case(use_case)
    return state.model_copy(update={"editing_id": use_case.id, "draft": form, "dirty": False}), form


def update_draft(state: AppState, form: UseCaseForm) -> AppState:
    return state.model_copy(update={"draft": form, "dirty": True})


def clear_form(state: AppState) -> AppState:
    return state.model_copy(update={"editing_id": None, "draft": None, "dirty": False})


def delete_use_case(state: AppState, use_case_id: str) -> AppState:
    use_cases = tuple(uc for uc in state.use_cases if uc.id != use_case_id)
    update: dict = {"use_cases": use_cases}
    if state.editing_id == use_case_id:
        update.update(editing_id=None, draft=None, dirty=False)
    return state.model_copy(update=update)


def replace_use_cases(state: AppState, use_cases: list[UseCase]) -> AppState:
    return state.model_copy(update={"use_cases": tuple(use_cases), "editing_id": None})


def clear_all(state: AppState) -> AppState:
    return clear_form(state.model_copy(update={"use_cases": ()}))
