"""Use Case Assessment MCP server.

FastMCP server exposing the scoring engine, the use-case collection and its
exports as tools, plus the executive summary report as a resource.
Run: use-case-assessment-mcp
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .config import load_profile
from .core.models import OperationResult, UseCaseForm
from .core.reports import (
    render_summary_report,
    render_use_case_report,
    report_filename,
    summarize,
    to_csv,
    to_json,
)
from .core.scoring import matrix_points, normalize_ratings, quadrant_color, score
from .core.workspace import find_use_case
from .db import close_db, init_db
from .scheduler import AutosaveScheduler
from .service import UseCaseService
from .store import SQLiteStore

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)
DESTRUCTIVE = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=False, openWorldHint=False)

service = UseCaseService(SQLiteStore())
scheduler = AutosaveScheduler(service)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Open the database, load the collection and start autosaving drafts."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    service.profile = load_profile()
    await init_db()
    result = await service.load()
    logger.info("%s (profile: %s)", result.message, service.profile.name)
    await scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()
        await close_db()


mcp = FastMCP(
    "Use Case Assessment",
    instructions="Capture candidate automation/AI use cases, rate them, and prioritise them into Quick Wins, Strategic Initiatives, Incremental Improvements or Deprioritize. Exports JSON, CSV and HTML reports.",
    lifespan=lifespan,
)


def _result(result: OperationResult, **extra: Any) -> dict:
    payload = result.model_dump(mode="json", by_alias=True, exclude_none=True)
    if result.use_case is not None:
        payload["use_case"] = result.use_case.to_record()
    payload.update(extra)
    return payload


def _form(
    title: str,
    business_process: str,
    pain_points: str,
    opportunities: str,
    pii_considerations: str,
    data_availability: str,
    ai_impact: str,
    additional_information: str,
    ratings: Optional[dict[str, Any]],
) -> UseCaseForm:
    return UseCaseForm(
        title=title,
        business_process=business_process,
        pain_points=pain_points,
        opportunities=opportunities,
        pii_considerations=pii_considerations,
        data_availability=data_availability,
        ai_impact=ai_impact,
        additional_information=additional_information,
        ratings=ratings or {},
    )


# ─── Resource: Summary Report ────────────────────────────────────────────────

SUMMARY_RESOURCE_URI = "ui://use-case-assessment/summary"


@mcp.resource(SUMMARY_RESOURCE_URI, mime_type="text/html")
def summary_report() -> str:
    """Executive summary of every use case, grouped by priority quadrant."""
    return render_summary_report(service.use_cases)


# ─── Scoring ─────────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def usecase_score(ratings: dict[str, Any]) -> dict:
    """Preview business value, feasibility and quadrant for a set of ratings.

    Args:
        ratings: Dimension key to rating, e.g. {"economicImpact": 4, "technicalComplexity": 2}.
                 Missing or unreadable ratings use the profile default.
    """
    result = score(ratings, service.profile)
    return {
        "ratings": normalize_ratings(ratings, service.profile),
        "business_value": result.business_value,
        "feasibility": result.feasibility,
        "quadrant": result.quadrant.value,
        "color": quadrant_color(result.quadrant),
        "summary": f"Business value {result.business_value}, feasibility {result.feasibility}: {result.quadrant.value}",
    }


@mcp.tool(annotations=READ_ONLY)
async def usecase_profile() -> dict:
    """The active rating scale, dimensions and quadrant threshold."""
    profile = service.profile
    return {
        "name": profile.name,
        "scale": [profile.scale_min, profile.scale_max],
        "threshold": profile.quadrant_threshold,
        "default_rating": profile.default_rating,
        "dimensions": [d.model_dump(mode="json") for d in profile.dimensions],
    }


# ─── Entry form ──────────────────────────────────────────────────────────────


@mcp.tool(annotations=WRITE)
async def usecase_save(
    title: str,
    business_process: str,
    pain_points: str,
    opportunities: str,
    pii_considerations: str,
    data_availability: str,
    ai_impact: str,
    additional_information: str = "",
    ratings: Optional[dict[str, Any]] = None,
) -> dict:
    """Save the entry form: creates a use case, or updates the one loaded with usecase_edit.

    All text fields except additional_information are required.
    """
    form = _form(title, business_process, pain_points, opportunities, pii_considerations,
                 data_availability, ai_impact, additional_information, ratings)
    return _result(await service.save_form(form))


@mcp.tool(annotations=WRITE)
async def usecase_update_draft(
    title: str = "",
    business_process: str = "",
    pain_points: str = "",
    opportunities: str = "",
    pii_considerations: str = "",
    data_availability: str = "",
    ai_impact: str = "",
    additional_information: str = "",
    ratings: Optional[dict[str, Any]] = None,
) -> dict:
    """Record unsaved form contents. Drafts with a title are autosaved periodically."""
    form = _form(title, business_process, pain_points, opportunities, pii_considerations,
                 data_availability, ai_impact, additional_information, ratings)
    result = service.update_draft(form)
    preview = score(form.ratings, service.profile)
    return _result(result, preview=preview.model_dump(mode="json"))


@mcp.tool(annotations=WRITE)
async def usecase_edit(use_case_id: str) -> dict:
    """Load a use case into the form; the next usecase_save updates it in place."""
    result = service.start_edit(use_case_id)
    draft = service.state.draft
    return _result(result, form=draft.to_record() if draft and service.state.editing_id == use_case_id else None)


@mcp.tool(annotations=WRITE)
async def usecase_clear_form() -> dict:
    """Discard the current form contents and stop editing."""
    return _result(service.clear_form())


@mcp.tool(annotations=WRITE)
async def usecase_restore_draft() -> dict:
    """Restore form contents autosaved before the last shutdown."""
    result = await service.restore_draft()
    draft = service.state.draft
    return _result(result, form=draft.to_record() if draft else None)


# ─── Collection ──────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def usecase_list() -> dict:
    """All use cases in entry order, with portfolio statistics."""
    use_cases = service.use_cases
    stats = summarize(use_cases)
    return {
        "use_cases": [
            {
                "id": uc.id,
                "title": uc.title,
                "quadrant": uc.quadrant.value,
                "business_value": uc.business_value,
                "feasibility": uc.feasibility,
                "pain_points": uc.pain_points,
            }
            for uc in use_cases
        ],
        "statistics": stats.model_dump(mode="json"),
        "summary": f"{stats.total} use case(s), {stats.quick_wins} quick win(s). "
        f"Average business value {stats.avg_business_value}, feasibility {stats.avg_feasibility}.",
    }


@mcp.tool(annotations=READ_ONLY)
async def usecase_get(use_case_id: str) -> dict:
    """Full record for one use case."""
    use_case = find_use_case(service.state, use_case_id)
    if use_case is None:
        raise ValueError(f"No use case with id {use_case_id!r}")
    return use_case.to_record()


@mcp.tool(annotations=READ_ONLY)
async def usecase_matrix() -> dict:
    """Priority matrix points: x = feasibility, y = business value."""
    points = matrix_points(service.use_cases)
    return {
        "threshold": service.profile.quadrant_threshold,
        "scale": [service.profile.scale_min, service.profile.scale_max],
        "points": [p.model_dump(mode="json") for p in points],
    }


@mcp.tool(annotations=DESTRUCTIVE)
async def usecase_delete(use_case_id: str) -> dict:
    """Delete one use case."""
    return _result(await service.delete(use_case_id))


@mcp.tool(annotations=DESTRUCTIVE)
async def usecase_clear_all(confirm: bool = False) -> dict:
    """Delete ALL use cases and any autosaved draft. Requires confirm=true."""
    if not confirm:
        return {"outcome": "noop", "message": "Are you sure you want to delete ALL use cases? Call again with confirm=true."}
    return _result(await service.clear_all())


# ─── Import / Export ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def usecase_export(format: str = "json") -> dict:
    """Export every use case.

    Args:
        format: 'json' (full records, re-importable) or 'csv'.
    """
    use_cases = service.use_cases
    if not use_cases:
        return {"outcome": "noop", "message": "No data to export!"}
    fmt = format.lower()
    if fmt == "json":
        return {"filename": "use-cases.json", "content_type": "application/json", "content": to_json(use_cases)}
    if fmt == "csv":
        return {"filename": "use-cases.csv", "content_type": "text/csv", "content": to_csv(use_cases, service.profile)}
    raise ValueError(f"Unsupported export format {format!r}; use 'json' or 'csv'")


@mcp.tool(annotations=READ_ONLY)
async def usecase_report(use_case_id: str = "") -> dict:
    """Standalone HTML report: the executive summary, or a single use case when an id is given."""
    if not use_case_id:
        if not service.use_cases:
            return {"outcome": "noop", "message": "No data to export!"}
        return {"filename": "agentic-ai-summary-report.html", "content_type": "text/html",
                "content": render_summary_report(service.use_cases)}

    use_case = find_use_case(service.state, use_case_id)
    if use_case is None:
        raise ValueError(f"No use case with id {use_case_id!r}")
    return {"filename": report_filename(use_case.title), "content_type": "text/html",
            "content": render_use_case_report(use_case, service.profile)}


@mcp.tool(annotations=DESTRUCTIVE)
async def usecase_import(content: str, confirm: bool = False) -> dict:
    """Import use cases from a JSON export, replacing all existing data.

    Args:
        content: File contents, either a JSON array, or an object with a 'useCases' array.
                 Older field names are migrated automatically.
        confirm: False only validates and reports how many records would be imported.
    """
    return _result(await service.import_content(content, confirm))


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
