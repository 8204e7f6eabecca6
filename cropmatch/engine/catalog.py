"""In-memory crop catalog: the query entry point of the engine."""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import structlog

from cropmatch.config import settings
from cropmatch.errors import SourceNotFoundError
from .crops import CropRecord, QueryProfile, ScoredCrop
from .csv_reader import parse_crop_rows
from .scorer import rank

log = structlog.get_logger("cropmatch.catalog")

# how many ranked crops get a per-factor debug line
_BREAKDOWN_ROWS = 20


def resolve_source(name: str, fallback_dir: str | Path | None = None) -> Any:
    """Locate ``<name>.csv``: bundled package data first, then the fallback directory."""
    filename = f"{name}.csv"
    bundled = resources.files("cropmatch") / "data" / filename
    if bundled.is_file():
        return bundled

    directory = Path(fallback_dir if fallback_dir is not None else settings.crops_dir).expanduser()
    candidate = directory / filename
    if candidate.is_file():
        return candidate

    raise SourceNotFoundError(name, [f"cropmatch/data/{filename}", str(candidate)])


class CropCatalog:
    """Holds one immutable snapshot of crop records.

    ``load`` builds a complete new snapshot and publishes it with a single
    assignment, so a reader never sees a half-loaded catalog. If loading
    fails the previous snapshot is kept.
    """

    def __init__(self, fallback_dir: str | Path | None = None):
        self._crops: tuple[CropRecord, ...] = ()
        self.fallback_dir = fallback_dir
        self.source: str | None = None

    @classmethod
    def from_text(cls, text: str) -> "CropCatalog":
        catalog = cls()
        catalog.load_text(text)
        return catalog

    @property
    def records(self) -> tuple[CropRecord, ...]:
        return self._crops

    def __len__(self) -> int:
        return len(self._crops)

    def load(self, name: str) -> int:
        source = resolve_source(name, self.fallback_dir)
        log.info("crop_source_resolved", name=name, path=str(source))
        count = self.load_text(source.read_text(encoding="utf-8"))
        self.source = name
        return count

    def load_text(self, text: str) -> int:
        parsed = parse_crop_rows(text)
        self._crops = tuple(parsed.records)
        log.info("crops_loaded", count=len(parsed.records), skipped=len(parsed.skipped))
        for crop in parsed.records[:3]:
            log.debug(
                "crop_sample",
                crop=crop.commodity_type,
                ph=crop.preferred_ph,
                zones=crop.usda_zones,
                soil=crop.soil_type,
                drainage=crop.preferred_soil_drainage,
            )
        return len(parsed.records)

    def rank(self, profile: QueryProfile) -> list[ScoredCrop]:
        """Every crop in the snapshot, best match first."""
        crops = self._crops
        if not crops:
            log.warning("crop_query_empty_catalog")
            return []
        return rank(crops, profile)

    def query(self, profile: QueryProfile) -> list[ScoredCrop]:
        log.info(
            "crop_query",
            soil=profile.soil_type,
            ph=profile.ph,
            drainage=profile.drainage,
            zone=profile.usda_zone,
            limit=profile.limit,
        )
        top = self.rank(profile)[: max(profile.limit, 0)]
        for position, s in enumerate(top[:_BREAKDOWN_ROWS], start=1):
            log.debug(
                "crop_match",
                rank=position,
                crop=s.crop.commodity_type,
                total=round(s.match_score, 2),
                revenue=round(s.revenue_score, 2),
                ph=round(s.ph_score, 2),
                zone=round(s.zone_score, 2),
                soil=round(s.soil_score, 2),
                drainage=round(s.drainage_score, 2),
            )
        return top
