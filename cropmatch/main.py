from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from cropmatch.config import settings
from cropmatch.errors import InvalidFormatError, SourceNotFoundError
from cropmatch.logs import configure_logging
from cropmatch.schema import (
    InterpretRequest,
    InterpretResponse,
    RecommendRequest,
    RecommendResponse,
    ReloadResponse,
)
from cropmatch.engine.catalog import CropCatalog
from cropmatch.engine.crops import QueryProfile
from cropmatch.engine.scorer import to_items
from cropmatch.engine.soil_interpreter import MapUnit, interpret_soil, to_query_profile

log = structlog.get_logger("cropmatch")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    catalog = CropCatalog()
    catalog.load(settings.crops_source)
    app.state.catalog = catalog
    log.info("cropmatch_started", crops=len(catalog), source=settings.crops_source)
    yield


app = FastAPI(title="Crop Match Engine", version="0.1.0", lifespan=lifespan)
app.state.settings = settings
app.state.catalog = CropCatalog()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"]
)

def _catalog(request: Request) -> CropCatalog:
    return request.app.state.catalog

@app.get("/health")
def health(request: Request):
    return {"ok": True, "crops": len(_catalog(request))}

@app.post("/recommend", response_model=RecommendResponse)
def recommend(body: RecommendRequest, request: Request):
    profile = QueryProfile(
        soil_type=body.soilType,
        ph=body.pH,
        drainage=body.drainage,
        usda_zone=body.usdaZone,
        limit=body.limit,
    )
    return {"items": to_items(_catalog(request).query(profile))}

# plain def: the LLM call blocks, FastAPI runs it in the threadpool
@app.post("/interpret", response_model=InterpretResponse)
def interpret(body: InterpretRequest, request: Request):
    units = [MapUnit(**u.model_dump()) for u in body.mapUnits]
    soil = interpret_soil(units)
    profile = to_query_profile(soil, body.usdaZone, body.limit)
    ranked = _catalog(request).query(profile)
    return {
        "soil": soil.to_dict(),
        "profile": {
            "soilType": profile.soil_type,
            "pH": profile.ph,
            "drainage": profile.drainage,
            "usdaZone": profile.usda_zone,
            "limit": profile.limit,
        },
        "items": to_items(ranked),
    }

@app.post("/catalog/reload", response_model=ReloadResponse)
def reload_catalog(request: Request):
    # build a fresh catalog and swap it in; in-flight queries keep the old one
    catalog = CropCatalog()
    try:
        count = catalog.load(settings.crops_source)
    except SourceNotFoundError as exc:
        raise HTTPException(404, str(exc))
    except InvalidFormatError as exc:
        raise HTTPException(422, str(exc))
    request.app.state.catalog = catalog
    return {"crops": count, "source": catalog.source}
