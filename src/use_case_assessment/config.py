"""Runtime configuration read from the environment.

ASSESSMENT_PROFILE_FILE  path to a JSON AssessmentProfile (takes precedence)
ASSESSMENT_PROFILE       name of a built-in profile: five_point | ten_point
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .core.profiles import BUILTIN_PROFILES, DEFAULT_PROFILE, AssessmentProfile

logger = logging.getLogger(__name__)


def load_profile() -> AssessmentProfile:
    """Resolve the active assessment profile.

    Raises ValueError for an unknown profile name or an invalid profile file.
    """
    profile_file = os.environ.get("ASSESSMENT_PROFILE_FILE", "")
    if profile_file:
        profile = AssessmentProfile.model_validate_json(Path(profile_file).read_text(encoding="utf-8"))
        logger.info("Loaded assessment profile %r from %s", profile.name, profile_file)
        return profile

    name = os.environ.get("ASSESSMENT_PROFILE", DEFAULT_PROFILE.name)
    if name not in BUILTIN_PROFILES:
        raise ValueError(f"Unknown ASSESSMENT_PROFILE {name!r}. Choose one of: {', '.join(sorted(BUILTIN_PROFILES))}")
    return BUILTIN_PROFILES[name]
