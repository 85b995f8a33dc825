# engine/__init__.py
# ─────────────────────────────
# Init file for CoachMatch engine package
# Exposes core components

from .filters import apply_all_filters
from .features import build_feature_vector, NO_PREFERENCE
from .geography import Geography, load_geography, default_geography
from .matcher import Matcher, MatchResult, PatientPreferences, match, score_provider

__all__ = [
    "apply_all_filters",
    "build_feature_vector",
    "NO_PREFERENCE",
    "Geography",
    "load_geography",
    "default_geography",
    "Matcher",
    "MatchResult",
    "PatientPreferences",
    "match",
    "score_provider",
]
