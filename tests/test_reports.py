"""Tests for CSV, JSON and HTML report serialization."""

import csv
import io
import json
from datetime import date

from use_case_assessment.core.models import Quadrant
from use_case_assessment.core.profiles import FIVE_POINT
from use_case_assessment.core.reports import (
    format_date,
    render_summary_report,
    render_use_case_report,
    report_filename,
    summarize,
    to_csv,
    to_json,
    truncate_text,
)

HEADER = '"Title","Business Process","Pain Points","Business Value","Feasibility","Quadrant","Created Date"\n'


class TestCsv:
    def test_empty_collection_is_header_only(self):
        assert to_csv([], FIVE_POINT) == HEADER

    def test_row_values(self, make_use_case, quick_win_ratings):
        output = to_csv([make_use_case(ratings=quick_win_ratings)], FIVE_POINT)
        lines = output.splitlines()
        assert len(lines) == 2
        assert lines[1] == (
            '"Invoice triage","Accounts payable","Invoices are keyed in by hand",'
            '"3.5","3.5","Quick Wins","Oct 18, 2026"'
        )

    def test_embedded_quotes_are_doubled(self, make_use_case):
        uc = make_use_case(pain_points='Staff say "it takes forever"')
        row = to_csv([uc], FIVE_POINT).splitlines()[1]
        assert '"Staff say ""it takes forever"""' in row

    def test_embedded_newlines_stay_in_one_record(self, make_use_case):
        uc = make_use_case(pain_points="Line one\nLine two")
        rows = list(csv.reader(io.StringIO(to_csv([uc, make_use_case("Second")], FIVE_POINT))))
        assert len(rows) == 3
        assert rows[1][2] == "Line one\nLine two"

    def test_one_row_per_use_case_in_order(self, make_use_case):
        rows = list(csv.reader(io.StringIO(to_csv([make_use_case("A"), make_use_case("B")], FIVE_POINT))))
        assert [r[0] for r in rows[1:]] == ["A", "B"]


class TestJson:
    def test_pretty_printed_array(self, make_use_case):
        output = to_json([make_use_case()])
        assert output.startswith("[\n  {")
        data = json.loads(output)
        assert data[0]["title"] == "Invoice triage"
        assert data[0]["businessProcess"] == "Accounts payable"
        assert data[0]["quadrant"] == "Incremental Improvements"

    def test_empty(self):
        assert json.loads(to_json([])) == []


class TestSummary:
    def test_statistics(self, make_use_case, quick_win_ratings, strategic_ratings):
        use_cases = [make_use_case("A", quick_win_ratings), make_use_case("B", strategic_ratings)]
        stats = summarize(use_cases)
        assert stats.total == 2
        # (3.5 + 4.0) / 2 = 3.75
        assert stats.avg_business_value == 3.8
        # (3.5 + 1.0) / 2 = 2.25
        assert stats.avg_feasibility == 2.3
        assert stats.quick_wins == 1
        assert stats.by_quadrant[Quadrant.STRATEGIC_INITIATIVES] == 1
        assert stats.by_quadrant[Quadrant.DEPRIORITIZE] == 0

    def test_empty(self):
        stats = summarize([])
        assert (stats.total, stats.avg_business_value, stats.avg_feasibility, stats.quick_wins) == (0, 0.0, 0.0, 0)

    def test_non_finite_scores_are_left_out(self, make_use_case, quick_win_ratings):
        broken = make_use_case("Broken").model_copy(update={"business_value": float("inf"), "feasibility": float("nan")})
        stats = summarize([make_use_case("A", quick_win_ratings), broken])
        assert stats.total == 2
        assert (stats.avg_business_value, stats.avg_feasibility) == (3.5, 3.5)


class TestHtmlReports:
    def test_summary_numbers_match_data(self, make_use_case, quick_win_ratings, strategic_ratings):
        use_cases = [make_use_case("A", quick_win_ratings), make_use_case("B", strategic_ratings)]
        html = render_summary_report(use_cases, date(2026, 10, 18))
        assert 'id="stat-total">2<' in html
        assert 'id="stat-value">3.8<' in html
        assert 'id="stat-feasibility">2.3<' in html
        assert 'id="stat-quick-wins">1<' in html
        assert "Generated on Oct 18, 2026" in html

    def test_summary_groups_and_roadmap(self, make_use_case, quick_win_ratings, strategic_ratings):
        use_cases = [make_use_case("A", quick_win_ratings), make_use_case("B", strategic_ratings)]
        html = render_summary_report(use_cases, date(2026, 10, 18))
        assert "Quick Wins (1 use cases)" in html
        assert "Strategic Initiatives (1 use cases)" in html
        assert "Incremental Improvements (" not in html
        assert "Phase 1: Quick Wins (0-6 months)" in html
        assert "Phase 2: Strategic Initiatives (6-24 months)" in html
        assert "Impact TBD" in html

    def test_text_is_escaped(self, make_use_case):
        html = render_summary_report([make_use_case("<script>alert(1)</script>")], date(2026, 10, 18))
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_use_case_report(self, make_use_case, quick_win_ratings):
        uc = make_use_case(ratings=quick_win_ratings, additional_information="Owner: AP team")
        html = render_use_case_report(uc, FIVE_POINT, date(2026, 10, 18))
        assert "<title>Use Case Report: Invoice triage</title>" in html
        assert "Economic Impact" in html
        assert "Quick Wins" in html
        assert "Owner: AP team" in html
        assert "Ratings (0-5)" in html


class TestFormatting:
    def test_format_date(self, now):
        assert format_date(now) == "Oct 18, 2026"
        assert format_date("2024-03-01T10:00:00.000Z") == "Mar 1, 2024"

    def test_format_invalid_date(self):
        assert format_date("not a date") == "Invalid Date"
        assert format_date(None) == "Invalid Date"

    def test_truncate_text(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a" * 12, 10) == "a" * 10 + "..."
        assert truncate_text(None) == ""

    def test_report_filename(self):
        assert report_filename("Invoice Triage: AP") == "invoice-triage--ap.html"
