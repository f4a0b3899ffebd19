"""Supabase-backed artisan repository."""

from dataclasses import dataclass

from supabase import Client

from artisan_dispatch.domain.artisans import ArtisanProfile
from artisan_dispatch.services.artisans import ArtisanRepository

_COLUMNS = "identity, name, category, rating, is_available"


@dataclass
class SupabaseArtisanRepository(ArtisanRepository):
    """Supabase implementation for artisan profiles."""

    client: Client

    def list_available(self, category: str, limit: int) -> list[ArtisanProfile]:
        """Return up to limit available artisans, in store order."""
        response = (
            self.client.table("artisans")
            .select(_COLUMNS)
            .eq("category", category)
            .eq("is_available", True)
            .limit(limit)
            .execute()
        )
        return [_parse_artisan(row) for row in response.data or []]

    def get_profile(
        self, identity: str, category: str | None = None
    ) -> ArtisanProfile | None:
        """Return one profile for an identity.

        An artisan may hold one row per category; pass the category to pick
        the listing that matches a job.
        """
        query = self.client.table("artisans").select(_COLUMNS).eq("identity", identity)
        if category is not None:
            query = query.eq("category", category)
        response = query.limit(1).execute()
        if not response.data:
            return None
        return _parse_artisan(response.data[0])

    def set_availability(self, identity: str, available: bool) -> None:
        """Flip is_available on every profile of the identity."""
        self.client.table("artisans").update({"is_available": available}).eq(
            "identity", identity
        ).execute()


def _parse_artisan(row: dict[str, object]) -> ArtisanProfile:
    rating = row.get("rating")
    return ArtisanProfile(
        identity=str(row["identity"]),
        name=str(row.get("name") or ""),
        category=str(row["category"]),
        rating=float(rating) if isinstance(rating, int | float) else None,
        is_available=bool(row.get("is_available")),
    )
