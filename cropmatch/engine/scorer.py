from typing import Dict, Iterable, List, Tuple

from .crops import CropRecord, QueryProfile, ScoredCrop
from .normalizers import (
    calculate_revenue_score,
    extract_soil_components,
    extract_zone_number,
    normalize_soil_name,
    parse_ph_range,
    parse_zone_range,
)

WEIGHTS: Dict[str, float] = {
    "ph": 0.35,
    "zone": 0.25,
    "soil": 0.20,
    "drainage": 0.10,
    "revenue": 0.10,
}

PH_DECAY_PER_UNIT = 0.5
ZONE_DECAY_PER_UNIT = 0.2
ZONE_SUBSTRING_SCORE = 0.8

SOIL_EXACT = 1.0
SOIL_OVERLAP = 0.9
SOIL_MISMATCH = 0.1

# first key contained in the text wins
DRAINAGE_CLASSES: Tuple[Tuple[str, float], ...] = (
    ("well-drained", 1.0),
    ("moderate", 0.7),
    ("poor", 0.3),
)
DRAINAGE_PARTIAL = 0.8
DRAINAGE_DEFAULT = 0.5


def _decay(distance: float, per_unit: float) -> float:
    return max(0.0, 1.0 - distance * per_unit)


def ph_score(crop_ph: str, target_ph: float) -> float:
    rng = parse_ph_range(crop_ph)
    if rng is None:
        return 0.0
    low, high = rng
    if low <= target_ph <= high:
        return 1.0
    if target_ph < low:
        return _decay(low - target_ph, PH_DECAY_PER_UNIT)
    return _decay(target_ph - high, PH_DECAY_PER_UNIT)


def zone_score(crop_zones: str, target_zone: str) -> float:
    target = extract_zone_number(target_zone)
    if target is None:
        return 0.0

    rng = parse_zone_range(crop_zones)
    if rng is not None:
        low, high = rng
        if low <= target <= high:
            return 1.0
        if target < low:
            return _decay(low - target, ZONE_DECAY_PER_UNIT)
        return _decay(target - high, ZONE_DECAY_PER_UNIT)

    # descriptive zone text, e.g. "Most zones (grown as annual)"
    if target_zone.lower() in crop_zones.lower():
        return ZONE_SUBSTRING_SCORE
    return 0.0


def _soil_tokens(text: str) -> List[str]:
    return [normalize_soil_name(c) for c in extract_soil_components(text.lower().strip())]


def soil_score(crop_soil: str, target_soil: str) -> float:
    crop_tokens = _soil_tokens(crop_soil)
    target_tokens = _soil_tokens(target_soil)
    if crop_tokens == target_tokens:
        return SOIL_EXACT
    if set(crop_tokens) & set(target_tokens):
        return SOIL_OVERLAP
    return SOIL_MISMATCH


def _drainage_class(text: str):
    for key, value in DRAINAGE_CLASSES:
        if key in text:
            return value
    return None


def drainage_score(crop_drainage: str, target_drainage: str) -> float:
    crop = crop_drainage.lower()
    target = target_drainage.lower()
    if crop == target:
        return 1.0
    if target in crop or crop in target:
        return DRAINAGE_PARTIAL

    crop_class = _drainage_class(crop)
    target_class = _drainage_class(target)
    if crop_class is not None and target_class is not None:
        return min(crop_class, target_class)
    return DRAINAGE_DEFAULT


def score_crop(crop: CropRecord, profile: QueryProfile) -> ScoredCrop:
    ph = ph_score(crop.preferred_ph, profile.ph)
    zone = zone_score(crop.usda_zones, profile.usda_zone)
    soil = soil_score(crop.soil_type, profile.soil_type)
    drainage = drainage_score(crop.preferred_soil_drainage, profile.drainage)
    revenue = calculate_revenue_score(crop.revenue_per_acre)

    match = (
        ph * WEIGHTS["ph"]
        + zone * WEIGHTS["zone"]
        + soil * WEIGHTS["soil"]
        + drainage * WEIGHTS["drainage"]
        + revenue * WEIGHTS["revenue"]
    )
    return ScoredCrop(
        crop=crop,
        match_score=match,
        revenue_score=revenue,
        ph_score=ph,
        zone_score=zone,
        soil_score=soil,
        drainage_score=drainage,
    )


def rank(crops: Iterable[CropRecord], profile: QueryProfile) -> List[ScoredCrop]:
    """Score every crop and order best first; ties go to the higher revenue score."""
    scored = [score_crop(c, profile) for c in crops]
    # stable, so full ties keep catalog order
    scored.sort(key=lambda s: (s.match_score, s.revenue_score), reverse=True)
    return scored


def to_items(scored: List[ScoredCrop]) -> List[dict]:
    return [{
        "commodity_type": s.crop.commodity_type,
        "genus": s.crop.genus,
        "revenue_per_acre": s.crop.revenue_per_acre,
        "usda_zones": s.crop.usda_zones,
        "preferred_soil_drainage": s.crop.preferred_soil_drainage,
        "preferred_ph": s.crop.preferred_ph,
        "soil_type": s.crop.soil_type,
        "match_score": round(s.match_score, 4),
        "revenue_score": round(s.revenue_score, 4),
        "ph_score": round(s.ph_score, 4),
        "zone_score": round(s.zone_score, 4),
        "soil_score": round(s.soil_score, 4),
        "drainage_score": round(s.drainage_score, 4),
    } for s in scored]
