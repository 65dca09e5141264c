"""Use-case service: in-memory state mirrored to a key-value store.

Binds the pure core to a store and an assessment profile. Every public method
reports a tri-state OperationResult instead of raising, so the presentation
layer only has to show the message.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from .core import workspace
from .core.migration import ImportFormatError, migrate_records, parse_import
from .core.models import AppState, OperationResult, Outcome, UseCase, UseCaseForm
from .core.profiles import DEFAULT_PROFILE, AssessmentProfile
from .core.reports import to_json
from .store import AUTOSAVE_KEY, USE_CASES_KEY, KeyValueStore, StoreError

logger = logging.getLogger(__name__)


def _ok(message: str, **kwargs) -> OperationResult:
    return OperationResult(outcome=Outcome.SUCCESS, message=message, **kwargs)


def _warn(message: str, **kwargs) -> OperationResult:
    return OperationResult(outcome=Outcome.WARNING, message=message, **kwargs)


def _noop(message: str, **kwargs) -> OperationResult:
    return OperationResult(outcome=Outcome.NOOP, message=message, **kwargs)


class UseCaseService:
    """Owns the AppState for one user and persists it after every mutation."""

    def __init__(self, store: KeyValueStore, profile: AssessmentProfile = DEFAULT_PROFILE):
        self.store = store
        self.profile = profile
        self.state = AppState()

    @property
    def use_cases(self) -> tuple[UseCase, ...]:
        return self.state.use_cases

    # ─── Persistence ─────────────────────────────────────────────────────────

    async def load(self) -> OperationResult:
        """Read the stored collection. Corrupt data falls back to an empty one."""
        try:
            saved = await self.store.get(USE_CASES_KEY)
            records = json.loads(saved) if saved else []
            if not isinstance(records, list):
                raise ValueError(f"expected a JSON array, got {type(records).__name__}")
        except (StoreError, ValueError) as exc:
            logger.error("Error loading data: %s", exc)
            self.state = AppState()
            return _warn("Error loading saved data. Starting fresh.")

        use_cases = migrate_records(records, self.profile)
        self.state = workspace.replace_use_cases(AppState(), use_cases)
        logger.info("Loaded %d use cases", len(use_cases))
        return _ok(f"Loaded {len(use_cases)} use case(s).", count=len(use_cases))

    async def _persist(self) -> Optional[OperationResult]:
        """Write the collection; returns a warning result on failure."""
        try:
            await self.store.set(USE_CASES_KEY, to_json(self.state.use_cases))
        except StoreError as exc:
            logger.error("Error saving data: %s", exc)
            return _warn("Error saving data. Please try again.", count=len(self.state.use_cases))
        logger.debug("Data saved (%d use cases)", len(self.state.use_cases))
        return None

    # ─── Form lifecycle ──────────────────────────────────────────────────────

    async def save_form(self, form: UseCaseForm, now: Optional[datetime] = None) -> OperationResult:
        """Create a new use case or update the one being edited."""
        try:
            state, saved, created = workspace.save_form(self.state, form, self.profile, now)
        except workspace.IncompleteFormError as exc:
            return _warn(str(exc))

        self.state = state
        failure = await self._persist()
        if failure:
            return failure
        await self.discard_draft()
        message = "Use case saved successfully!" if created else "Use case updated successfully!"
        return _ok(message, use_case=saved, count=len(self.state.use_cases))

    def start_edit(self, use_case_id: str) -> OperationResult:
        state, form = workspace.start_edit(self.state, use_case_id)
        if form is None:
            return _noop(f"No use case with id {use_case_id!r}.")
        self.state = state
        return _ok("Use case loaded for editing.", use_case=workspace.find_use_case(state, use_case_id))

    def update_draft(self, form: UseCaseForm) -> OperationResult:
        self.state = workspace.update_draft(self.state, form)
        return _ok("Draft updated.")

    def clear_form(self) -> OperationResult:
        self.state = workspace.clear_form(self.state)
        return _ok("Form cleared.")

    # ─── Collection mutations ────────────────────────────────────────────────

    async def delete(self, use_case_id: str) -> OperationResult:
        use_case = workspace.find_use_case(self.state, use_case_id)
        if use_case is None:
            return _noop(f"No use case with id {use_case_id!r}.")
        self.state = workspace.delete_use_case(self.state, use_case_id)
        failure = await self._persist()
        if failure:
            return failure
        return _ok("Use case deleted successfully.", use_case=use_case, count=len(self.state.use_cases))

    async def clear_all(self) -> OperationResult:
        self.state = workspace.clear_all(self.state)
        try:
            await self.store.remove(USE_CASES_KEY)
            await self.store.remove(AUTOSAVE_KEY)
        except StoreError as exc:
            logger.error("Error clearing stored data: %s", exc)
            return _warn("Data cleared in memory but could not be removed from storage.")
        return _ok("All data cleared successfully!")

    async def import_content(self, content: str, confirm: bool = False) -> OperationResult:
        """Replace the collection with the records in an import file.

        Without confirmation only the parse is performed and the prompt is
        returned; existing data is never touched by a failed import.
        """
        try:
            use_cases = parse_import(content, self.profile)
        except ImportFormatError as exc:
            logger.error("Import error: %s", exc)
            return _warn(f"Import failed: {exc}")

        if not confirm:
            return _noop(
                f"Import {len(use_cases)} use case(s)? This will replace all existing data.",
                count=len(use_cases),
            )

        self.state = workspace.replace_use_cases(self.state, use_cases)
        failure = await self._persist()
        if failure:
            return failure
        logger.info("Import completed: %d use cases", len(use_cases))
        return _ok(f"Successfully imported {len(use_cases)} use case(s)!", count=len(use_cases))

    # ─── Autosave ────────────────────────────────────────────────────────────

    async def autosave(self) -> bool:
        """Snapshot the unsaved form if it is dirty and has a title.

        Returns True when a snapshot was written.
        """
        draft = self.state.draft
        if not self.state.dirty or draft is None or not draft.title.strip():
            return False
        snapshot = draft.to_record()
        snapshot["timestamp"] = datetime.now(timezone.utc).isoformat()
        await self.store.set(AUTOSAVE_KEY, json.dumps(snapshot))
        logger.debug("Autosaved draft %r", draft.title)
        return True

    async def restore_draft(self) -> OperationResult:
        """Bring back an autosaved form, removing the snapshot once restored."""
        try:
            saved = await self.store.get(AUTOSAVE_KEY)
        except StoreError as exc:
            logger.error("Auto-save restore error: %s", exc)
            return _warn("Could not read auto-saved data.")
        if not saved:
            return _noop("No auto-saved data.")

        try:
            form = UseCaseForm.model_validate_json(saved)
        except ValidationError as exc:
            logger.error("Auto-save restore error: %s", exc)
            await self.discard_draft()
            return _warn("Auto-saved data was unreadable and has been discarded.")
        if not form.title.strip():
            await self.discard_draft()
            return _noop("No auto-saved data.")

        self.state = workspace.update_draft(self.state, form)
        await self.discard_draft()
        return _ok("Auto-saved data restored!")

    async def discard_draft(self) -> None:
        try:
            await self.store.remove(AUTOSAVE_KEY)
        except StoreError as exc:
            logger.warning("Could not remove auto-saved data: %s", exc)
