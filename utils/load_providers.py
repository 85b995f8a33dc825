# 📦 utils/load_providers.py
# ─────────────────────────────
# Provider catalog loader: tabular source -> canonical Provider records

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

import pandas as pd
import structlog
from prometheus_client import Counter

from engine.geography import Geography, default_geography

log = structlog.get_logger()

NOT_SPECIFIED = "Not specified"
NO_BIO = "No bio provided"

# Source column names
FIRST_NAME = "First Name"
LAST_NAME = "Last Name"
SPECIALTIES = "Areas of Specialization"
MODALITIES = "Treatment Modality"
LOCATION = "Location"
GENDER = "Gender Identity"
ETHNICITY = "Ethnic Identity"
RELIGION = "Religious Background"
CAPACITY = "No Of Clients Able To Take On"
LANGUAGE = "Language"
BIO = "Bio"
SEXUAL_ORIENTATION = "Sexual Orientation"
AVAILABLE_TIMES = "Available Times"
PAYMENT_METHODS = "Payment Methods"

ROWS_DROPPED_COUNTER = Counter(
    "coachmatch_catalog_rows_dropped", "Catalog rows dropped as invalid", ["reason"]
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class CatalogUnavailableError(Exception):
    """The catalog source could not be read or parsed as tabular data."""


@dataclass(frozen=True)
class Demographics:
    gender: str = NOT_SPECIFIED
    ethnicity: str = NOT_SPECIFIED
    religion: str = NOT_SPECIFIED


@dataclass(frozen=True)
class Provider:
    """Coaching provider available for matching.

    Multi-value fields are stored as tuples in source order.
    """
    name: str
    specialties: tuple = ()
    modalities: tuple = ()
    location: tuple = ()
    demographics: Demographics = field(default_factory=Demographics)
    availability: int = 0
    languages: tuple = ()
    bio: str = NO_BIO
    sexual_orientation: str = NOT_SPECIFIED
    available_times: tuple = ()
    payment_methods: tuple = ()

    def __post_init__(self):
        for name in ("specialties", "modalities", "location", "languages",
                     "available_times", "payment_methods"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "specialties": list(self.specialties),
            "modalities": list(self.modalities),
            "location": list(self.location),
            "demographics": {
                "gender": self.demographics.gender,
                "ethnicity": self.demographics.ethnicity,
                "religion": self.demographics.religion,
            },
            "availability": self.availability,
            "languages": list(self.languages),
            "bio": self.bio,
            "sexualOrientation": self.sexual_orientation,
            "availableTimes": list(self.available_times),
            "paymentMethods": list(self.payment_methods),
        }


# ─────────────────────────────
# Field cleaning

def _text(value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()

def _split(value) -> List[str]:
    """Comma-separated field -> trimmed, non-empty elements."""
    return [part.strip() for part in _text(value).split(",") if part.strip()]

def parse_capacity(value) -> int:
    """Leading integer of the capacity field, 0 when there is none."""
    m = _LEADING_INT.match(_text(value))
    return int(m.group(1)) if m else 0

def clean_record(record: Mapping, geography: Geography) -> dict:
    return {
        "first_name": _text(record.get(FIRST_NAME)),
        "last_name": _text(record.get(LAST_NAME)),
        "specialties": _split(record.get(SPECIALTIES)),
        "modalities": _split(record.get(MODALITIES)),
        "location": [geography.expand(loc) for loc in _split(record.get(LOCATION))],
        "gender": _text(record.get(GENDER)),
        "ethnicity": _text(record.get(ETHNICITY)),
        "religion": _text(record.get(RELIGION)),
        "availability": parse_capacity(record.get(CAPACITY)),
        "languages": _split(record.get(LANGUAGE)),
        "bio": _text(record.get(BIO)),
        "sexual_orientation": _text(record.get(SEXUAL_ORIENTATION)),
        "available_times": _split(record.get(AVAILABLE_TIMES)),
        "payment_methods": _split(record.get(PAYMENT_METHODS)),
    }

def invalid_reason(cleaned: dict) -> Optional[str]:
    """Why a cleaned record cannot become a Provider, or None if it can."""
    if cleaned["availability"] <= 0:
        return "no capacity"
    if not cleaned["first_name"] or not cleaned["last_name"]:
        return "missing name"
    if not cleaned["specialties"]:
        return "no specialties"
    return None

def to_provider(cleaned: dict) -> Provider:
    return Provider(
        name=f"{cleaned['first_name']} {cleaned['last_name']}",
        specialties=cleaned["specialties"],
        modalities=cleaned["modalities"],
        location=cleaned["location"],
        demographics=Demographics(
            gender=cleaned["gender"] or NOT_SPECIFIED,
            ethnicity=cleaned["ethnicity"] or NOT_SPECIFIED,
            religion=cleaned["religion"] or NOT_SPECIFIED,
        ),
        availability=cleaned["availability"],
        languages=cleaned["languages"],
        bio=cleaned["bio"] or NO_BIO,
        sexual_orientation=cleaned["sexual_orientation"] or NOT_SPECIFIED,
        available_times=cleaned["available_times"],
        payment_methods=cleaned["payment_methods"],
    )


# ─────────────────────────────
# Loading

def parse_catalog_rows(rows: Iterable[Mapping], geography: Optional[Geography] = None) -> List[Provider]:
    """Clean raw rows and keep only the ones that form a valid Provider."""
    geography = geography or default_geography()
    providers = []
    dropped = 0
    for index, row in enumerate(rows, start=1):
        cleaned = clean_record(row, geography)
        reason = invalid_reason(cleaned)
        if reason:
            dropped += 1
            ROWS_DROPPED_COUNTER.labels(reason).inc()
            log.debug("Dropped catalog row", row=index, reason=reason)
            continue
        providers.append(to_provider(cleaned))

    log.info("Parsed provider catalog", loaded=len(providers), dropped=dropped)
    return providers

def read_catalog_frame(path) -> pd.DataFrame:
    """Read the CSV source as strings, tolerating ragged rows."""
    path = Path(path)
    try:
        width = len(pd.read_csv(path, nrows=0, encoding="utf-8-sig").columns)
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
            engine="python",
            # Over-long rows are truncated to the header width
            on_bad_lines=lambda bad_line: bad_line[:width],
        )
    except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        log.error("Failed to read provider catalog", path=str(path), error=str(e))
        raise CatalogUnavailableError(f"Could not read provider catalog at {path}") from e

    df.columns = [str(c).strip() for c in df.columns]
    return df.fillna("")

def load_catalog(path, geography: Optional[Geography] = None) -> List[Provider]:
    """Load the provider catalog from a CSV file."""
    df = read_catalog_frame(path)
    log.info("Read provider catalog", path=str(path), rows=len(df))
    return parse_catalog_rows(df.to_dict("records"), geography)
