"""Shared pytest fixtures: sample crop data, catalogs and an async API client."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from cropmatch.engine.catalog import CropCatalog
from cropmatch.engine.crops import QueryProfile
from cropmatch.main import app

SCENARIO_CSV = """Commodity Type,Genus,Revenue per Acre,USDA Zones,Preferred Soil Drainage,Preferred pH,Soil Type
Tomato,Solanum,"$20,000-$30,000",Zones 5-9,Well-drained,6.0-6.8,Sand
Lavender,Lavandula,"$40,000-$60,000",Zones 5-10,Well-drained,6.5-8.0,Sand and Clay
Rice,Oryza,"$10,000-$15,000",Zones 9-11,Poor,5.5-6.5,Clay
"""


@pytest.fixture
def scenario_csv() -> str:
    return SCENARIO_CSV


@pytest.fixture
def scenario_catalog() -> CropCatalog:
    return CropCatalog.from_text(SCENARIO_CSV)


@pytest.fixture
def sandy_profile() -> QueryProfile:
    return QueryProfile(soil_type="Sand", ph=6.7, drainage="Well-drained", usda_zone="7", limit=2)


@pytest.fixture
async def client(scenario_catalog: CropCatalog) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async client with lifespan disabled and the scenario catalog installed."""
    original_lifespan = app.router.lifespan_context
    original_catalog = app.state.catalog

    @asynccontextmanager
    async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
        yield

    app.router.lifespan_context = noop_lifespan
    app.state.catalog = scenario_catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.router.lifespan_context = original_lifespan
    app.state.catalog = original_catalog
