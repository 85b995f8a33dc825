# 📦 engine/filters.py
# ─────────────────────────────
# Hard filters applied before scoring

def filter_by_capacity(th):
    """Provider can still take on clients."""
    return (th.availability or 0) > 0

def apply_all_filters(providers):
    """Keep eligible providers, preserving collection order."""
    return [th for th in providers if filter_by_capacity(th)]
