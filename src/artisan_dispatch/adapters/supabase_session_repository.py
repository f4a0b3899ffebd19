"""Supabase-backed actor session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from artisan_dispatch.domain.errors import StoreError
from artisan_dispatch.domain.sessions import SessionRecord
from artisan_dispatch.services.sessions import SessionRepository

SESSION_COLUMNS = "identity, status, context_json, last_message, updated_at"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for actor sessions."""

    client: Client

    def get_session(self, identity: str) -> SessionRecord | None:
        """Return the session for an identity, if present."""
        response = (
            self.client.table("actor_sessions")
            .select(SESSION_COLUMNS)
            .eq("identity", identity)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_session_row(response.data[0])

    def create_session(
        self, identity: str, status: str, context: dict[str, object]
    ) -> SessionRecord:
        """Create a session row and return it."""
        response = (
            self.client.table("actor_sessions")
            .insert(
                {
                    "identity": identity,
                    "status": status,
                    "context_json": context,
                    "updated_at": _now(),
                }
            )
            .execute()
        )
        if not response.data:
            raise StoreError("Failed to create session")
        return parse_session_row(response.data[0])

    def touch(self, identity: str, last_message: str) -> None:
        """Record the last inbound message."""
        self.client.table("actor_sessions").update(
            {"last_message": last_message, "updated_at": _now()}
        ).eq("identity", identity).execute()

    def save_state(
        self, identity: str, status: str, context: dict[str, object]
    ) -> None:
        """Upsert status and context for an identity."""
        self.client.table("actor_sessions").upsert(
            {
                "identity": identity,
                "status": status,
                "context_json": context,
                "updated_at": _now(),
            },
            on_conflict="identity",
        ).execute()


def parse_session_row(row: dict[str, object]) -> SessionRecord:
    """Build a SessionRecord from an actor_sessions row."""
    updated_raw = row.get("updated_at")
    context = row.get("context_json")
    return SessionRecord(
        identity=str(row["identity"]),
        status=str(row["status"]),
        context=context if isinstance(context, dict) else {},
        last_message=row.get("last_message"),
        updated_at=(
            datetime.fromisoformat(updated_raw)
            if isinstance(updated_raw, str) and updated_raw
            else None
        ),
    )


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()
