from pydantic import BaseModel, Field
from typing import List, Optional
from cropmatch.config import settings

class RecommendRequest(BaseModel):
    soilType: str
    pH: float
    drainage: str
    usdaZone: str
    limit: int = Field(default=settings.default_limit, ge=1, le=500)

class CropItem(BaseModel):
    commodity_type: str
    genus: str
    revenue_per_acre: str
    usda_zones: str
    preferred_soil_drainage: str
    preferred_ph: str
    soil_type: str
    match_score: float
    revenue_score: float
    # per-factor breakdown
    ph_score: float
    zone_score: float
    soil_score: float
    drainage_score: float

class RecommendResponse(BaseModel):
    items: List[CropItem]

# 🧪 soil survey -> profile -> crops
class MapUnitIn(BaseModel):
    muname: str
    taxclname: str = "Unknown"
    component_pct_of_aoi: float = 0.0

class InterpretRequest(BaseModel):
    mapUnits: List[MapUnitIn] = Field(min_length=1)
    usdaZone: str
    limit: int = Field(default=settings.default_limit, ge=1, le=500)

class SoilOut(BaseModel):
    porosity: str = ""
    organic_matter: str = ""
    soil_texture: str = ""
    ph: str = ""
    drainage: str = ""
    color: str = ""

class ProfileOut(BaseModel):
    soilType: str
    pH: float
    drainage: str
    usdaZone: str
    limit: int

class InterpretResponse(BaseModel):
    soil: SoilOut
    profile: ProfileOut
    items: List[CropItem]

class ReloadResponse(BaseModel):
    crops: int
    source: Optional[str] = None
