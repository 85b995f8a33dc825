import csv

from engine.geography import Geography
from engine.matcher import PatientPreferences
from utils.load_providers import Demographics, Provider

HEADER = [
    "First Name", "Last Name", "Areas of Specialization", "Treatment Modality",
    "Location", "Gender Identity", "Ethnic Identity", "Religious Background",
    "No Of Clients Able To Take On", "Language", "Bio", "Sexual Orientation",
    "Available Times", "Payment Methods",
]


def make_geography():
    """Small synthetic geography: A-B-C in a line, D isolated."""
    return Geography(
        abbreviations={"AA": "Alpha", "BB": "Bravo", "CC": "Charlie", "DD": "Delta"},
        neighbors={"AA": ["BB"], "BB": ["AA", "CC"], "CC": ["BB"], "DD": []},
    )


def make_provider(name="Test Provider", **overrides):
    """Provider that matches nothing in particular."""
    fields = dict(
        name=name,
        specialties=["General wellbeing"],
        modalities=[],
        location=["Delta"],
        demographics=Demographics(gender="Nonbinary", ethnicity="Other", religion="None"),
        availability=3,
        languages=["Esperanto"],
        bio="Test bio",
        sexual_orientation="Not specified",
        available_times=["Late nights"],
        payment_methods=["Barter"],
    )
    fields.update(overrides)
    return Provider(**fields)


def make_preferences(**overrides):
    """Preferences that score zero against make_provider() defaults, except the modality bonus."""
    fields = dict(
        area_of_concern=["Anxiety"],
        treatment_modality=[],
        location="Alpha",
        therapist_gender="Female",
        therapist_ethnicity="Asian",
        therapist_religion="Buddhist",
        language="English",
        payment_method="Aetna",
        availability=["Weekday Mornings"],
    )
    fields.update(overrides)
    return PatientPreferences(**fields)


def write_catalog(path, rows, header=HEADER):
    """Write rows (lists of raw cell strings) as a CSV catalog."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
    return path


def catalog_row(overrides=None):
    """A valid source row, with named cells overridden."""
    row = {
        "First Name": "Maya",
        "Last Name": "Chen",
        "Areas of Specialization": "Anxiety, Depression",
        "Treatment Modality": "CBT, DBT",
        "Location": "CA",
        "Gender Identity": "Female",
        "Ethnic Identity": "Asian",
        "Religious Background": "Buddhist",
        "No Of Clients Able To Take On": "5",
        "Language": "English, Mandarin",
        "Bio": "Test bio",
        "Sexual Orientation": "Straight / heterosexual",
        "Available Times": "Weekday Mornings, Weekday Afternoons",
        "Payment Methods": "Aetna, Self-pay",
    }
    row.update(overrides or {})
    return [row[col] for col in HEADER]
