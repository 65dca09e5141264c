"""Tests for assessment profile selection from the environment."""

import pytest
from pydantic import ValidationError

from use_case_assessment.config import load_profile
from use_case_assessment.core.profiles import FIVE_POINT, TEN_POINT


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("ASSESSMENT_PROFILE", raising=False)
    monkeypatch.delenv("ASSESSMENT_PROFILE_FILE", raising=False)


class TestLoadProfile:
    def test_default(self):
        assert load_profile() is FIVE_POINT

    def test_builtin_by_name(self, monkeypatch):
        monkeypatch.setenv("ASSESSMENT_PROFILE", "ten_point")
        assert load_profile() is TEN_POINT

    def test_unknown_name(self, monkeypatch):
        monkeypatch.setenv("ASSESSMENT_PROFILE", "seven_point")
        with pytest.raises(ValueError, match="Unknown ASSESSMENT_PROFILE"):
            load_profile()

    def test_profile_file(self, monkeypatch, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(
            '{"name": "lean", "scale_min": 0, "scale_max": 4, "default_policy": "midpoint",'
            ' "dimensions": ['
            '{"key": "impact", "label": "Impact", "group": "value"},'
            '{"key": "effort", "label": "Effort", "group": "feasibility", "inverted": true}],'
            ' "field_renames": [["name", "title"]]}',
            encoding="utf-8",
        )
        monkeypatch.setenv("ASSESSMENT_PROFILE_FILE", str(path))
        profile = load_profile()
        assert profile.name == "lean"
        assert profile.quadrant_threshold == 2.0
        assert profile.default_rating == 2
        assert profile.field_renames == [("name", "title")]

    def test_invalid_profile_file(self, monkeypatch, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text('{"name": "broken", "scale_min": 0, "scale_max": 4, "dimensions": []}', encoding="utf-8")
        monkeypatch.setenv("ASSESSMENT_PROFILE_FILE", str(path))
        with pytest.raises(ValidationError):
            load_profile()
