# 📦 engine/matcher.py
# ─────────────────────────────
# Matching engine for CoachMatch: eligibility filter, weighted scoring, top-N ranking

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import structlog
import yaml

from engine import filters, features
from engine.features import NO_PREFERENCE
from engine.geography import Geography, default_geography

log = structlog.get_logger()

config_path = Path(__file__).resolve().parent.parent / "config" / "weights.yml"

DEFAULT_TOP_N = 3

SCORING_TERMS = (
    "specialty_matches",
    "payment_match",
    "timeslot_matches",
    "gender_ok",
    "language_match",
    "ethnicity_ok",
    "religion_ok",
    "modality_no_preference",
    "modality_matches",
    "location_exact",
    "location_neighbor",
)


class WeightsConfigError(ValueError):
    """A weights profile is missing terms or has non-integer weights."""


def validate_weights(weights: Dict[str, int], profile: str = "default") -> Dict[str, int]:
    missing = [term for term in SCORING_TERMS if term not in weights]
    if missing:
        raise WeightsConfigError(f"Weights profile '{profile}' is missing: {', '.join(missing)}")
    for term, value in weights.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise WeightsConfigError(f"Weight '{term}' in profile '{profile}' must be an integer, got {value!r}")
    return dict(weights)

def load_weight_profiles(path=None) -> Dict[str, Dict[str, int]]:
    """Read every weights profile from the YAML config."""
    path = Path(path) if path else config_path
    with open(path, "r") as f:
        profiles = yaml.safe_load(f) or {}
    if "default" not in profiles:
        raise WeightsConfigError(f"No 'default' weights profile in {path}")
    return {name: validate_weights(w or {}, name) for name, w in profiles.items()}

CONFIG_WEIGHTS = load_weight_profiles()


def _as_tuple(values):
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class PatientPreferences:
    """A single client's matching query."""
    area_of_concern: tuple = ()
    treatment_modality: tuple = ()
    location: str = ""
    therapist_gender: str = NO_PREFERENCE
    therapist_ethnicity: str = NO_PREFERENCE
    therapist_religion: str = NO_PREFERENCE
    language: str = ""
    payment_method: str = ""
    availability: tuple = ()

    def __post_init__(self):
        for name in ("area_of_concern", "treatment_modality", "availability"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))
        for name in ("location", "therapist_gender", "therapist_ethnicity",
                     "therapist_religion", "language", "payment_method"):
            object.__setattr__(self, name, getattr(self, name) or "")


@dataclass(frozen=True)
class MatchResult:
    provider: object
    match_score: int
    breakdown: Dict[str, int] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return {**self.provider.to_dict(), "matchScore": self.match_score}


class Matcher:
    def __init__(self, preferences: PatientPreferences, providers, weights=None,
                 geography: Optional[Geography] = None):
        self.preferences = preferences
        self.providers = list(providers or [])
        self.weights = weights or self._select_weights()
        self.geography = geography or default_geography()

    def _select_weights(self):
        """Choose the weights profile for this query."""
        return CONFIG_WEIGHTS["default"]

    def run(self, top_n: int = DEFAULT_TOP_N) -> List[MatchResult]:
        candidates = filters.apply_all_filters(self.providers)

        if not candidates:
            log.warning("No providers with remaining capacity", total=len(self.providers))
            return []

        scored = [self.score(th) for th in candidates]
        # Stable: equal scores keep collection order
        scored.sort(key=lambda r: r.match_score, reverse=True)
        top = scored[:max(top_n, 0)]

        log.info("Top matches generated",
                 candidates=len(candidates),
                 matches=[(r.provider.name, r.match_score) for r in top])
        return top

    def score(self, th) -> MatchResult:
        breakdown = self.explain(th)
        return MatchResult(provider=th, match_score=sum(breakdown.values()), breakdown=breakdown)

    def explain(self, th) -> Dict[str, int]:
        """Weighted contribution of every scoring term."""
        fv = features.build_feature_vector(self.preferences, th, self.geography)
        return {k: v * self.weights.get(k, 0) for k, v in fv.items()}


def match(preferences: PatientPreferences, providers, *, geography: Optional[Geography] = None,
          weights=None, top_n: int = DEFAULT_TOP_N) -> List[MatchResult]:
    """Rank providers for a client, best first, at most ``top_n`` entries."""
    return Matcher(preferences, providers, weights=weights, geography=geography).run(top_n=top_n)

def score_provider(preferences: PatientPreferences, provider, *, geography: Optional[Geography] = None,
                   weights=None) -> int:
    """Match score of a single provider, without the eligibility filter."""
    return Matcher(preferences, [provider], weights=weights, geography=geography).score(provider).match_score
