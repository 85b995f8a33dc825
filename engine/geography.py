# 📦 engine/geography.py
# ─────────────────────────────
# Region lookup tables for location normalization and proximity scoring

from pathlib import Path
from typing import Iterable, Mapping, Optional

import structlog
import yaml

log = structlog.get_logger()

REGIONS_PATH = Path(__file__).resolve().parent.parent / "config" / "regions.yml"


class Geography:
    """Abbreviation table plus region adjacency.

    Comparisons go through ``canonical()`` so an abbreviation, its full name
    and any casing of either resolve to the same key.
    """

    def __init__(self, abbreviations: Optional[Mapping[str, str]] = None,
                 neighbors: Optional[Mapping[str, Iterable[str]]] = None):
        self.abbreviations = {
            str(code).strip().upper(): str(name).strip()
            for code, name in (abbreviations or {}).items()
        }
        self.neighbors = {}
        for region, adjacent in (neighbors or {}).items():
            key = self.canonical(region)
            self.neighbors[key] = frozenset(self.canonical(r) for r in adjacent or [])

    def expand(self, token: str) -> str:
        """Full region name for a known abbreviation, else the token unchanged."""
        token = str(token or "").strip()
        return self.abbreviations.get(token.upper(), token)

    def canonical(self, region: str) -> str:
        return self.expand(region).casefold()

    def neighbors_of(self, region: str) -> frozenset:
        return self.neighbors.get(self.canonical(region), frozenset())

    def same_region(self, a: str, b: str) -> bool:
        # Both sides are expanded first, so "NY" matches a loaded "New York".
        ca, cb = self.canonical(a), self.canonical(b)
        return bool(ca) and ca == cb

    def are_neighbors(self, requested: str, location: str) -> bool:
        return self.canonical(location) in self.neighbors_of(requested)


def load_geography(path=None) -> Geography:
    """Load abbreviation and adjacency tables from a YAML file."""
    path = Path(path) if path else REGIONS_PATH
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    geography = Geography(
        abbreviations=data.get("abbreviations", {}),
        neighbors=data.get("neighbors", {}),
    )
    log.info("Loaded region tables", path=str(path),
             abbreviations=len(geography.abbreviations), regions=len(geography.neighbors))
    return geography


_default = None

def default_geography() -> Geography:
    """Bundled US state tables, loaded once per process."""
    global _default
    if _default is None:
        _default = load_geography(REGIONS_PATH)
    return _default
