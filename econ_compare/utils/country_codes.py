# econ_compare/utils/country_codes.py
from __future__ import annotations

from typing import Dict, Optional
import re

import pycountry

# Quick map from normalized input to the country name Trading Economics expects.
# pycountry covers the rest; its official names ("Korea, Republic of") are not
# always what the upstream accepts, so common aliases live here.
_BUILTIN: Dict[str, str] = {
    "mexico":               "Mexico",
    "united mexican states": "Mexico",
    "new zealand":          "New Zealand",
    "nz":                   "New Zealand",
    "sweden":               "Sweden",
    "thailand":             "Thailand",
    "united states":        "United States",
    "usa":                  "United States",
    "us":                   "United States",
    "united kingdom":       "United Kingdom",
    "uk":                   "United Kingdom",
    "great britain":        "United Kingdom",
    "south korea":          "South Korea",
    "korea, republic of":   "South Korea",
    "russia":               "Russia",
    "russian federation":   "Russia",
    "turkey":               "Turkey",
    "türkiye":              "Turkey",
    "euro area":            "Euro Area",
}


def _norm(text: str) -> str:
    t = re.sub(r"[\u200b\s]+", " ", (text or "")).strip().lower()
    return t.replace(".", "").replace("’", "'")


def resolve_country(country: Optional[str]) -> Optional[str]:
    """
    Canonical display name for ``country`` or None when it is blank or unknown.
    Never raises.
    """
    if not country or not country.strip():
        return None

    key = _norm(country)
    if key in _BUILTIN:
        return _BUILTIN[key]

    try:
        m = pycountry.countries.lookup(country.strip())
    except LookupError:
        return None
    return getattr(m, "common_name", None) or m.name

