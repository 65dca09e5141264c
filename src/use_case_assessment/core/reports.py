"""Export serializers for CSV, full-fidelity JSON and standalone HTML reports."""

from __future__ import annotations

import csv
import io
import json
import math
import re
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

from jinja2 import Environment, select_autoescape

from .models import PortfolioSummary, Quadrant, UseCase
from .profiles import DEFAULT_PROFILE, AssessmentProfile
from .scoring import quadrant_color, round_score


def format_date(value: Any) -> str:
    """Render a date as ``Oct 18, 2026``."""
    try:
        if isinstance(value, str):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if not isinstance(value, date):
            raise TypeError(type(value).__name__)
    except (TypeError, ValueError):
        return "Invalid Date"
    return f"{value:%b} {value.day}, {value.year}"


def truncate_text(text: Optional[str], length: int = 100) -> str:
    if not text or len(text) <= length:
        return text or ""
    return text[:length].strip() + "..."


def report_filename(title: str) -> str:
    """File name for a single use-case report download."""
    return re.sub(r"[^a-z0-9]", "-", title, flags=re.IGNORECASE).lower() + ".html"


# ─── CSV ──────────────────────────────────────────────────────────────────────


def _csv_value(use_case: UseCase, field: str) -> str:
    value = getattr(use_case, field, None)
    if value is None:
        value = use_case.extra_field(field, "")
    if isinstance(value, datetime):
        return format_date(value)
    if isinstance(value, Quadrant):
        return value.value
    return str(value)


def to_csv(use_cases: Iterable[UseCase], profile: AssessmentProfile = DEFAULT_PROFILE) -> str:
    """Every value double-quoted; the header row is always written."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([column.header for column in profile.csv_columns])
    for uc in use_cases:
        writer.writerow([_csv_value(uc, column.field) for column in profile.csv_columns])
    return buffer.getvalue()


# ─── JSON ─────────────────────────────────────────────────────────────────────


def to_records(use_cases: Iterable[UseCase]) -> list[dict[str, Any]]:
    return [uc.to_record() for uc in use_cases]


def to_json(use_cases: Iterable[UseCase]) -> str:
    """Pretty-printed array of the complete records, legacy keys included."""
    return json.dumps(to_records(use_cases), indent=2, ensure_ascii=False)


# ─── Summary statistics ───────────────────────────────────────────────────────


def group_by_quadrant(use_cases: Iterable[UseCase]) -> dict[Quadrant, list[UseCase]]:
    groups: dict[Quadrant, list[UseCase]] = {q: [] for q in Quadrant}
    for uc in use_cases:
        groups[uc.quadrant].append(uc)
    return groups


def _mean(values: list[float]) -> float:
    finite = [v for v in values if math.isfinite(v)]
    return round_score(sum(finite) / len(finite)) if finite else 0.0


def summarize(use_cases: Sequence[UseCase]) -> PortfolioSummary:
    """Portfolio statistics. Non-finite scores are left out of the averages."""
    total = len(use_cases)
    groups = group_by_quadrant(use_cases)
    avg_value = _mean([uc.business_value for uc in use_cases])
    avg_feasibility = _mean([uc.feasibility for uc in use_cases])
    return PortfolioSummary(
        total=total,
        avg_business_value=avg_value,
        avg_feasibility=avg_feasibility,
        quick_wins=len(groups[Quadrant.QUICK_WINS]),
        by_quadrant={q: len(items) for q, items in groups.items()},
    )


# ─── HTML ─────────────────────────────────────────────────────────────────────

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))
_env.filters["truncate_text"] = truncate_text
_env.filters["quadrant_color"] = quadrant_color
_env.filters["format_date"] = format_date

SUCCESS_FACTORS = [
    "Establish clear success metrics and KPIs for each implementation",
    "Ensure adequate data infrastructure and quality",
    "Invest in change management and training",
    "Start with pilot projects to validate assumptions",
    "Build internal AI/automation capabilities",
]

ROADMAP_PHASES = [
    (Quadrant.QUICK_WINS, "Phase 1: Quick Wins (0-6 months)",
     "Focus on high-value, high-feasibility use cases for immediate impact:"),
    (Quadrant.STRATEGIC_INITIATIVES, "Phase 2: Strategic Initiatives (6-24 months)",
     "Invest in transformative use cases that require significant planning and resources:"),
]

SUMMARY_TEMPLATE = _env.from_string("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Agentic AI Use Cases - Summary Report</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
        .header { text-align: center; border-bottom: 3px solid #667eea; padding-bottom: 20px; margin-bottom: 30px; }
        .summary-stats { display: flex; justify-content: space-around; background: #f8f9fa; padding: 20px; border-radius: 8px; margin-bottom: 30px; }
        .stat-item { text-align: center; }
        .stat-value { font-size: 28px; font-weight: bold; color: #667eea; }
        .quadrant-section { margin: 30px 0; }
        .quadrant-title { font-size: 18px; font-weight: bold; margin-bottom: 15px; }
        .use-case-summary { background: #f8f9fa; padding: 15px; margin-bottom: 15px; border-radius: 8px; border-left: 4px solid #667eea; }
        .use-case-title { font-weight: bold; color: #495057; margin-bottom: 5px; }
        .use-case-scores { font-size: 14px; color: #6c757d; }
        table { width: 100%; border-collapse: collapse; margin: 20px 0; }
        th, td { border: 1px solid #dee2e6; padding: 12px; text-align: left; }
        th { background: #667eea; color: white; }
        .page-break { page-break-before: always; }
        @media print { body { margin: 20px; } }
    </style>
</head>
<body>
    <div class="header">
        <h1>Agentic AI Use Cases</h1>
        <h2>Executive Summary Report</h2>
        <p>Generated on {{ generated_on | format_date }} | Total Use Cases: {{ summary.total }}</p>
    </div>

    <div class="summary-stats">
        <div class="stat-item"><div class="stat-value" id="stat-total">{{ summary.total }}</div><div>Total Use Cases</div></div>
        <div class="stat-item"><div class="stat-value" id="stat-value">{{ summary.avg_business_value }}</div><div>Avg Business Value</div></div>
        <div class="stat-item"><div class="stat-value" id="stat-feasibility">{{ summary.avg_feasibility }}</div><div>Avg Feasibility</div></div>
        <div class="stat-item"><div class="stat-value" id="stat-quick-wins">{{ summary.quick_wins }}</div><div>Quick Wins</div></div>
    </div>
{% for quadrant, items in groups.items() if items %}
    <div class="quadrant-section">
        <div class="quadrant-title" style="color: {{ quadrant | quadrant_color }};">{{ quadrant.value }} ({{ items | length }} use cases)</div>
        {%- for uc in items %}
        <div class="use-case-summary" style="border-left-color: {{ quadrant | quadrant_color }};">
            <div class="use-case-title">{{ uc.title }}</div>
            <div class="use-case-scores">Business Value: {{ uc.business_value }} | Feasibility: {{ uc.feasibility }}</div>
            <div style="margin-top: 8px; font-size: 13px;">{{ uc.pain_points | truncate_text(100) }}</div>
        </div>
        {%- endfor %}
    </div>
{% endfor %}
    <div class="page-break"></div>
    <h2>Detailed Use Cases Overview</h2>
    <table>
        <thead>
            <tr><th>Use Case</th><th>Business Process</th><th>Business Value</th><th>Feasibility</th><th>Priority</th></tr>
        </thead>
        <tbody>
        {%- for uc in use_cases %}
            <tr>
                <td><strong>{{ uc.title }}</strong></td>
                <td>{{ uc.business_process }}</td>
                <td>{{ uc.business_value }}</td>
                <td>{{ uc.feasibility }}</td>
                <td style="background: {{ uc.quadrant | quadrant_color }}20; color: {{ uc.quadrant | quadrant_color }};">{{ uc.quadrant.value }}</td>
            </tr>
        {%- endfor %}
        </tbody>
    </table>

    <div class="page-break"></div>
    <h2>Implementation Roadmap Recommendations</h2>
{% for quadrant, heading, intro in roadmap if groups[quadrant] %}
    <h3>{{ heading }}</h3>
    <p>{{ intro }}</p>
    <ul>
    {%- for uc in groups[quadrant] %}
        <li><strong>{{ uc.title }}</strong> - {{ uc.extra_field("financialImpact") or "Impact TBD" }}</li>
    {%- endfor %}
    </ul>
{% endfor %}
    <h3>Key Success Factors</h3>
    <ul>
    {%- for factor in success_factors %}
        <li>{{ factor }}</li>
    {%- endfor %}
    </ul>
</body>
</html>
""")

USE_CASE_TEMPLATE = _env.from_string("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Use Case Report: {{ uc.title }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
        .header { text-align: center; border-bottom: 2px solid #3a165e; padding-bottom: 20px; margin-bottom: 30px; }
        .section { margin-bottom: 25px; }
        .section h3 { color: #3a165e; border-bottom: 1px solid #eee; padding-bottom: 5px; }
        .scores { display: flex; justify-content: space-around; background: #f8f9fa; padding: 20px; border-radius: 8px; }
        .score-item { text-align: center; }
        .score-value { font-size: 24px; font-weight: bold; color: #3a165e; }
        table { border-collapse: collapse; }
        th, td { border: 1px solid #dee2e6; padding: 6px 12px; text-align: left; }
    </style>
</head>
<body>
    <div class="header">
        <h1>Use Case Assessment Report</h1>
        <h2>{{ uc.title }}</h2>
        <p>Generated on {{ generated_on | format_date }}</p>
    </div>

    <div class="section">
        <h3>Overview</h3>
        <p><strong>Business Process:</strong> {{ uc.business_process }}</p>
        <p><strong>Pain Points:</strong> {{ uc.pain_points }}</p>
        <p><strong>Opportunities:</strong> {{ uc.opportunities }}</p>
    </div>

    <div class="section">
        <h3>Assessment Scores</h3>
        <div class="scores">
            <div class="score-item"><div class="score-value">{{ uc.business_value }}</div><div>Business Value</div></div>
            <div class="score-item"><div class="score-value">{{ uc.feasibility }}</div><div>Feasibility</div></div>
            <div class="score-item"><div class="score-value">{{ uc.quadrant.value }}</div><div>Priority Category</div></div>
        </div>
    </div>
{% if ratings %}
    <div class="section">
        <h3>Ratings ({{ scale_min }}-{{ scale_max }})</h3>
        <table>
        {%- for label, rating in ratings %}
            <tr><th>{{ label }}</th><td>{{ rating }}</td></tr>
        {%- endfor %}
        </table>
    </div>
{% endif %}
    <div class="section">
        <h3>Implementation Details</h3>
        <p><strong>Data Availability:</strong> {{ uc.data_availability }}</p>
        <p><strong>AI Impact:</strong> {{ uc.ai_impact }}</p>
        <p><strong>PII Considerations:</strong> {{ uc.pii_considerations }}</p>
    {%- if uc.additional_information %}
        <p><strong>Additional Information:</strong> {{ uc.additional_information }}</p>
    {%- endif %}
    </div>
</body>
</html>
""")


def render_summary_report(use_cases: Sequence[UseCase], generated_on: Optional[date] = None) -> str:
    """Executive summary grouped by quadrant, with overview table and roadmap."""
    return SUMMARY_TEMPLATE.render(
        use_cases=use_cases,
        summary=summarize(use_cases),
        groups=group_by_quadrant(use_cases),
        roadmap=ROADMAP_PHASES,
        success_factors=SUCCESS_FACTORS,
        generated_on=generated_on or date.today(),
    )


def render_use_case_report(
    use_case: UseCase,
    profile: AssessmentProfile = DEFAULT_PROFILE,
    generated_on: Optional[date] = None,
) -> str:
    ratings = [(d.label, use_case.ratings[d.key]) for d in profile.dimensions if d.key in use_case.ratings]
    return USE_CASE_TEMPLATE.render(
        uc=use_case,
        ratings=ratings,
        scale_min=profile.scale_min,
        scale_max=profile.scale_max,
        generated_on=generated_on or date.today(),
    )
