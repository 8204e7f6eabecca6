"""Turn soil-survey map units into the soil profile the crop engine queries with.

An LLM reads the dominant soils of the area and picks one value per category
from fixed vocabularies. When it is unavailable, a keyword tally over the map
unit names stands in.
"""

import re
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Sequence

import structlog
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from cropmatch.config import settings
from .crops import QueryProfile
from .normalizers import SOIL_BASE_TYPES, parse_ph_value

log = structlog.get_logger("cropmatch.soil")

FALLBACK_PH = "6-7"
FALLBACK_DRAINAGE = "Moderate"
FALLBACK_TEXTURE = "Loam"

_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "/no_think"),
    ("user",
     """TASK:
- Determine the combined overall soil characteristics for the area based on the given data.

{soil_data}

OUTPUT FORMAT (strict - only provide the selected values):
- Porosity: [select one: Virtually none, Low, Medium Low, Medium, Medium High, High]
- Organic Matter: [select one: Very Low, Low, Medium Low, Medium, Medium High, High]
- Soil Texture: [select one: Sand, Sand and Loam, Loam, Loam and Clay, Clay, Clay and Loam, Sand and Clay]
- pH (estimated): [select one: 4.5-6, 6-7, 7-8.5]
- Drainage: [select one: Poor, Moderate, Well-drained, Excessive]
- Color (estimated): [select one: Black, Brown, Red-Brown, Yellow, Gray, Mixed]

RULES:
- Base the result on the dominant soils by percentage.
- Minor soils (under ~5%) may be excluded.
- Choose only one value per category.
- No explanations or commentary.
- No headings or extra lines.
- Output must contain exactly six lines matching the format above.
- ONLY choose from output values offered"""
    )
])

# output key (lowercased) -> SoilCharacteristics field
_KEYS: Dict[str, str] = {
    "porosity": "porosity",
    "organic matter": "organic_matter",
    "soil texture": "soil_texture",
    "ph (estimated)": "ph",
    "drainage": "drainage",
    "color (estimated)": "color",
}


@dataclass(frozen=True)
class MapUnit:
    muname: str
    taxclname: str
    component_pct_of_aoi: float


@dataclass
class SoilCharacteristics:
    porosity: str = ""
    organic_matter: str = ""
    soil_texture: str = ""
    ph: str = ""
    drainage: str = ""
    color: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def format_soil_summary(units: Sequence[MapUnit]) -> str:
    return "\n".join(
        f"Soil: {u.muname} | Taxonomy: {u.taxclname} | % composition: {u.component_pct_of_aoi:.1f}"
        for u in units
    )


def parse_interpretation(text: str) -> SoilCharacteristics:
    """Read the six "Key: value" lines the prompt asks for; anything else is ignored."""
    parsed = SoilCharacteristics()
    for line in text.splitlines():
        clean = re.sub(r"^- ", "", line.strip())
        key, sep, value = clean.partition(": ")
        if not sep:
            continue
        attr = _KEYS.get(key.strip().lower())
        if attr is None:
            continue
        value = value.replace("[select one: ", "").replace("]", "").strip()
        setattr(parsed, attr, value)
    return parsed


def fallback_characteristics(units: Sequence[MapUnit]) -> SoilCharacteristics:
    weights: Dict[str, float] = {}
    for u in units:
        name = u.muname.lower()
        for base in SOIL_BASE_TYPES:
            if base in name:
                weights[base] = weights.get(base, 0.0) + max(u.component_pct_of_aoi, 0.0)

    ranked = sorted(weights.items(), key=lambda kv: kv[1], reverse=True)
    if not ranked or ranked[0][1] <= 0:
        texture = FALLBACK_TEXTURE
    elif len(ranked) > 1 and ranked[1][1] >= ranked[0][1] / 2:
        texture = f"{ranked[0][0].title()} and {ranked[1][0].title()}"
    else:
        texture = ranked[0][0].title()

    return SoilCharacteristics(soil_texture=texture, ph=FALLBACK_PH, drainage=FALLBACK_DRAINAGE)


@lru_cache
def _get_llm() -> ChatOpenAI:
    return ChatOpenAI(
        model=settings.openai_model,
        temperature=0,
        api_key=settings.openai_api_key,
        timeout=settings.llm_timeout,
        max_retries=1,
    )


def interpret_soil(units: Sequence[MapUnit]) -> SoilCharacteristics:
    if not settings.openai_api_key:
        return fallback_characteristics(units)

    msg = _PROMPT.format_messages(soil_data=format_soil_summary(units))
    try:
        resp = _get_llm().invoke(msg)
        content = getattr(resp, "content", "") or ""
        parsed = parse_interpretation(content)
    except Exception as exc:
        log.warning("soil_interpretation_failed", error=str(exc))
        return fallback_characteristics(units)

    if not parsed.soil_texture:
        log.warning("soil_interpretation_incomplete", output=content[:200])
        return fallback_characteristics(units)

    # an empty drainage would partially match every crop
    parsed.ph = parsed.ph or FALLBACK_PH
    parsed.drainage = parsed.drainage or FALLBACK_DRAINAGE
    return parsed


def to_query_profile(soil: SoilCharacteristics, usda_zone: str, limit: int = 20) -> QueryProfile:
    return QueryProfile(
        soil_type=soil.soil_texture,
        ph=parse_ph_value(soil.ph),
        drainage=soil.drainage,
        usda_zone=usda_zone,
        limit=limit,
    )
