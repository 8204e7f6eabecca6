from dataclasses import dataclass

# Column order of the crop dataset. Rows are mapped positionally.
CROP_COLUMNS = (
    "commodity_type",
    "genus",
    "revenue_per_acre",
    "usda_zones",
    "preferred_soil_drainage",
    "preferred_ph",
    "soil_type",
)


@dataclass(frozen=True)
class CropRecord:
    """One row of the crop reference table, kept as the raw text it was read as."""
    commodity_type: str
    genus: str
    revenue_per_acre: str
    usda_zones: str
    preferred_soil_drainage: str
    preferred_ph: str
    soil_type: str


@dataclass(frozen=True)
class QueryProfile:
    soil_type: str
    ph: float
    drainage: str
    usda_zone: str
    limit: int = 20


@dataclass(frozen=True)
class ScoredCrop:
    crop: CropRecord
    match_score: float
    revenue_score: float
    ph_score: float
    zone_score: float
    soil_score: float
    drainage_score: float
