"""Session store adapter for per-actor conversation state."""

from dataclasses import dataclass
from typing import Protocol

from artisan_dispatch.domain.sessions import (
    SessionPhase,
    SessionRecord,
    SessionState,
    decode_state,
    encode_state,
)


class SessionRepository(Protocol):
    """Persistence interface for actor sessions."""

    def get_session(self, identity: str) -> SessionRecord | None:
        """Return the session for an identity, if present."""

    def create_session(
        self, identity: str, status: str, context: dict[str, object]
    ) -> SessionRecord:
        """Create a new session and return it."""

    def touch(self, identity: str, last_message: str) -> None:
        """Record the last inbound message and bump updated_at."""

    def save_state(
        self, identity: str, status: str, context: dict[str, object]
    ) -> None:
        """Persist a session status, creating the row if it does not exist."""


@dataclass
class SessionService:
    """Load, create and advance actor sessions."""

    repository: SessionRepository

    def load_or_create(self, identity: str, text: str) -> SessionRecord:
        """Return the identity's session, creating it in NEW on first contact."""
        existing = self.repository.get_session(identity)
        if existing is not None:
            self.repository.touch(identity, text)
            return existing
        return self.repository.create_session(
            identity, status=SessionPhase.NEW.value, context={}
        )

    def get_state(self, identity: str) -> SessionState | None:
        """Return the decoded state for an identity, if a session exists."""
        record = self.repository.get_session(identity)
        if record is None:
            return None
        return decode_state(record.status, record.context)

    def set_state(self, identity: str, state: SessionState) -> None:
        """Persist a new state for the identity."""
        status, context = encode_state(state)
        self.repository.save_state(identity, status=status, context=context)
