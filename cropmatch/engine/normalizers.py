"""Parsers for the free-text fields of the crop table.

Every function here is total: bad input gives None or a neutral value, never
an exception. Scoring relies on that.
"""

import re
from typing import List, Optional, Tuple

_RANGE_SEP = re.compile(r"[-–]")          # hyphen or en-dash
_EDGE_NON_DIGITS = re.compile(r"^\D+|\D+$")
_DIGITS = re.compile(r"\d+")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")

# longest digit run read as a zone; anything longer is not a zone number
_MAX_ZONE_DIGITS = 18

# order matters, first hit wins ("sandy clay" -> sand)
SOIL_BASE_TYPES = ("sand", "clay", "silt", "loam")

REVENUE_NEUTRAL = 0.5
REVENUE_CEILING = 50000.0


def _to_float(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def parse_ph_range(text: str) -> Optional[Tuple[float, float]]:
    cleaned = "".join(text.split())
    values = [v for v in (_to_float(t) for t in _RANGE_SEP.split(cleaned)) if v is not None]
    if len(values) != 2:
        return None
    return values[0], values[1]


def extract_zone_number(text: str) -> Optional[int]:
    """Pull the integer out of strings like "Zone 7" or "7b"."""
    digits = _EDGE_NON_DIGITS.sub("", text)
    if not _DIGITS.fullmatch(digits) or len(digits) > _MAX_ZONE_DIGITS:
        return None
    return int(digits)


def parse_zone_range(text: str) -> Optional[Tuple[int, int]]:
    cleaned = text.replace("Zones", "").replace("zones", "")
    cleaned = "".join(cleaned.split())
    values = [z for z in (extract_zone_number(t) for t in _RANGE_SEP.split(cleaned)) if z is not None]
    if len(values) != 2:
        return None
    return values[0], values[1]


def normalize_soil_name(component: str) -> str:
    trimmed = component.strip()
    lowered = trimmed.lower()
    for base in SOIL_BASE_TYPES:
        if base in lowered:
            return base
    return trimmed


def extract_soil_components(text: str) -> List[str]:
    # NOTE: splits inside words too ("sandy" -> "s", "y"); callers depend on it
    parts = text.lower().replace("&", "and").split("and")
    return [p.strip() for p in parts if p.strip()]


def calculate_revenue_score(text: str) -> float:
    """Score a "$X - $Y" revenue string by its midpoint against $50k/acre."""
    cleaned = text.replace("$", "").replace(",", "").replace(" ", "")
    numbers = [float(n) for n in _DIGITS.findall(cleaned)]
    if len(numbers) < 2:
        return REVENUE_NEUTRAL
    average = (max(numbers) + min(numbers)) / 2
    return max(0.0, min(average / REVENUE_CEILING, 1.0))


def parse_ph_value(text: str, default: float = 6.5) -> float:
    """Point estimate for a pH category like "6-7": the midpoint, or the lone number."""
    rng = parse_ph_range(text)
    if rng is not None:
        return (rng[0] + rng[1]) / 2
    numbers = _NUMBER.findall(text)
    if len(numbers) == 1:
        return float(numbers[0])
    return default
