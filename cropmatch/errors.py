"""Errors raised while loading the crop catalog.

Query-time problems never raise: unparseable fields only lower a score.
"""


class CatalogError(Exception):
    """Base class for crop catalog load failures."""


class SourceNotFoundError(CatalogError, FileNotFoundError):
    """The dataset is in neither the bundled resources nor the fallback directory."""

    def __init__(self, name: str, tried: list[str]):
        self.name = name
        self.tried = tried
        super().__init__(f"crop source {name!r} not found (tried: {', '.join(tried)})")


class InvalidFormatError(CatalogError, ValueError):
    """The dataset is blank or only has a header line."""
