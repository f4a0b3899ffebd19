"""Persistence interface for artisan profiles."""

from typing import Protocol

from artisan_dispatch.domain.artisans import ArtisanProfile


class ArtisanRepository(Protocol):
    """Read access to artisan listings plus the availability flag."""

    def list_available(self, category: str, limit: int) -> list[ArtisanProfile]:
        """Return up to limit available artisans in a category."""

    def get_profile(
        self, identity: str, category: str | None = None
    ) -> ArtisanProfile | None:
        """Return the identity's profile, in category when given."""

    def set_availability(self, identity: str, available: bool) -> None:
        """Set is_available on every profile of an identity."""
