# 📦 engine/features.py
# ─────────────────────────────
# Per-criterion scoring terms for a client/provider pair.
# Each term returns a raw integer (0/1 flag or a match count); weights
# are applied by the matcher.

NO_PREFERENCE = "No preference"


def _fold(value):
    return (value or "").casefold()

def _preference_ok(preference, value):
    """Sentinel or case-insensitive equality."""
    if preference == NO_PREFERENCE:
        return 1
    return int(_fold(value) == _fold(preference))

def _contained_count(wanted, offered):
    """Number of wanted terms found as a substring of any offered term."""
    offered = [_fold(o) for o in offered]
    return sum(1 for w in wanted if any(_fold(w) in o for o in offered))

# ─────────────────────────────
# Primary criteria

def specialty_matches(prefs, th):
    """Concerns covered by the provider's specialties."""
    return _contained_count(prefs.area_of_concern, th.specialties)

def payment_match(prefs, th):
    """Requested payment method accepted (exact, case-sensitive)."""
    return int(prefs.payment_method in th.payment_methods)

def timeslot_matches(prefs, th):
    """Requested time slots the provider offers."""
    offered = {_fold(t) for t in th.available_times}
    return sum(1 for slot in prefs.availability if _fold(slot) in offered)

def gender_ok(prefs, th):
    return _preference_ok(prefs.therapist_gender, th.demographics.gender)

# ─────────────────────────────
# Secondary criteria

def language_match(prefs, th):
    return int(any(_fold(lang) == _fold(prefs.language) for lang in th.languages))

def ethnicity_ok(prefs, th):
    return _preference_ok(prefs.therapist_ethnicity, th.demographics.ethnicity)

def religion_ok(prefs, th):
    return _preference_ok(prefs.therapist_religion, th.demographics.religion)

def modality_no_preference(prefs, th):
    """Bonus when the client expressed no modality preference."""
    return int(not prefs.treatment_modality)

def modality_matches(prefs, th):
    return _contained_count(prefs.treatment_modality, th.modalities)

def location_exact(prefs, th, geography):
    return int(any(geography.same_region(loc, prefs.location) for loc in th.location))

def location_neighbor(prefs, th, geography):
    """Neighboring region, only when there is no exact match."""
    if location_exact(prefs, th, geography):
        return 0
    return int(any(geography.are_neighbors(prefs.location, loc) for loc in th.location))

# ─────────────────────────────
# Full feature vector builder

def build_feature_vector(prefs, th, geography):
    """Assemble all raw scoring terms for a client/provider pair."""
    return {
        "specialty_matches": specialty_matches(prefs, th),
        "payment_match": payment_match(prefs, th),
        "timeslot_matches": timeslot_matches(prefs, th),
        "gender_ok": gender_ok(prefs, th),
        "language_match": language_match(prefs, th),
        "ethnicity_ok": ethnicity_ok(prefs, th),
        "religion_ok": religion_ok(prefs, th),
        "modality_no_preference": modality_no_preference(prefs, th),
        "modality_matches": modality_matches(prefs, th),
        "location_exact": location_exact(prefs, th, geography),
        "location_neighbor": location_neighbor(prefs, th, geography),
    }
