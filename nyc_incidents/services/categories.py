# nyc_incidents/services/categories.py
from __future__ import annotations

from typing import List, Optional, Tuple

from nyc_incidents.models.incident import Category, SourceKind

# Checked top to bottom, first match wins. Order matters for ambiguous text
# (e.g. "ROBBERY OF VEHICLE" is ROBBERY, not VEHICLE).
CATEGORY_KEYWORDS: List[Tuple[Category, Tuple[str, ...]]] = [
    (Category.ASSAULT, ("ASSAULT", "ASSAULT 3", "ASSAULT 2", "ASSAULT 1")),
    (Category.THEFT, ("GRAND LARCENY", "PETIT LARCENY", "LARCENY", "THEFT")),
    (Category.BURGLARY, ("BURGLARY",)),
    (Category.ROBBERY, ("ROBBERY",)),
    (Category.VEHICLE, ("VEHICLE", "AUTO", "CAR")),
    (Category.DRUGS, ("DRUG", "NARCOTICS")),
    (Category.VANDALISM, ("VANDALISM", "CRIMINAL MISCHIEF")),
    (Category.HARASSMENT, ("HARASSMENT", "STALKING")),
    (Category.OTHER, ()),
]

# Dashboard palette
CATEGORY_COLORS: dict[Category, str] = {
    Category.ASSAULT: "#ef4444",
    Category.THEFT: "#f59e0b",
    Category.BURGLARY: "#dc2626",
    Category.ROBBERY: "#991b1b",
    Category.VEHICLE: "#3b82f6",
    Category.DRUGS: "#8b5cf6",
    Category.VANDALISM: "#ec4899",
    Category.HARASSMENT: "#f97316",
    Category.OTHER: "#6b7280",
}

SOURCE_COLORS: dict[SourceKind, str] = {
    SourceKind.NYPD: "red",
    SourceKind.THREE_ONE_ONE: "blue",
}


def categorize(text: Optional[str]) -> Category:
    """Case-insensitive substring match against CATEGORY_KEYWORDS; OTHER if nothing hits."""
    if not text:
        return Category.OTHER
    upper = text.upper()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in upper for k in keywords):
            return category
    return Category.OTHER
