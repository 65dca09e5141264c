"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from use_case_assessment.core.models import UseCaseForm
from use_case_assessment.core.profiles import FIVE_POINT
from use_case_assessment.core.workspace import build_use_case
from use_case_assessment.service import UseCaseService
from use_case_assessment.store import MemoryStore, StoreError


NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
LATER = datetime(2026, 10, 20, 14, 0, tzinfo=timezone.utc)


class BrokenStore(MemoryStore):
    """Store whose writes always fail, reads still work."""

    async def set(self, key, value):
        raise StoreError("quota exceeded")

    async def remove(self, key):
        raise StoreError("quota exceeded")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def later():
    return LATER


@pytest.fixture
def quick_win_ratings():
    """Worked example: business value 3.5, feasibility 3.5."""
    return {
        "economicImpact": 5,
        "hsec": 3,
        "esg": 4,
        "productivity": 2,
        "dataReadiness": 4,
        "technicalComplexity": 1,
        "aiComplexity": 2,
        "organisationalCapability": 3,
    }


@pytest.fixture
def strategic_ratings():
    """High value, hard to build: business value 4.0, feasibility 1.0."""
    return {
        "economicImpact": 4,
        "hsec": 4,
        "esg": 4,
        "productivity": 4,
        "dataReadiness": 1,
        "technicalComplexity": 5,
        "aiComplexity": 4,
        "organisationalCapability": 2,
    }


@pytest.fixture
def make_form():
    def _make(title="Invoice triage", ratings=None, **fields):
        values = {
            "title": title,
            "business_process": "Accounts payable",
            "pain_points": "Invoices are keyed in by hand",
            "opportunities": "Automated extraction and routing",
            "pii_considerations": "Supplier bank details",
            "data_availability": "Five years of scanned invoices",
            "ai_impact": "Document understanding model",
            "additional_information": "",
            "ratings": ratings or {},
        }
        values.update(fields)
        return UseCaseForm(**values)

    return _make


@pytest.fixture
def make_use_case(make_form):
    def _make(title="Invoice triage", ratings=None, now=NOW, **fields):
        return build_use_case(make_form(title, ratings, **fields), FIVE_POINT, now)

    return _make


@pytest.fixture
def legacy_record():
    """A record exported by an early version of the browser tool."""
    return {
        "id": 1709287200000,
        "useCaseTitle": "Supplier onboarding",
        "valueChain": "Procurement",
        "problemStatement": "Onboarding takes three weeks",
        "rootCause": "Self-service portal",
        "regulatory": "Bank account verification",
        "dataAvailability": "Vendor master data",
        "potentialSolution": "Agent that chases missing documents",
        "estimatedCost": "$50k",
        "timeToComplete": "3 months",
        "economicImpact": "4",
        "hsec": 2,
        "esg": 3,
        "productivity": 5,
        "dataReadiness": 3,
        "technicalComplexity": 2,
        "aiComplexity": 3,
        "organisationalCapability": 4,
        "businessValue": 3.5,
        "feasibility": 3.0,
        "quadrant": "Quick Wins",
        "timestamp": "2024-03-01T10:00:00.000Z",
        "financialImpact": "Saves 2 FTE",
    }


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def service(store):
    return UseCaseService(store, FIVE_POINT)


@pytest.fixture
def broken_service():
    return UseCaseService(BrokenStore(), FIVE_POINT)
