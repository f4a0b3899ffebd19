"""Domain models for artisans."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ArtisanProfile:
    """An artisan's listing in one service category."""

    identity: str
    name: str
    category: str
    rating: float | None
    is_available: bool
