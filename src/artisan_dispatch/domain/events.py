"""Transport-neutral inbound events."""

from dataclasses import dataclass

from artisan_dispatch.domain.sessions import SessionState


@dataclass(frozen=True)
class InboundEvent:
    """A single message delivered by the transport."""

    sender_identity: str
    body: str
    is_group_or_status: bool = False
    message_id: str | None = None


@dataclass(frozen=True)
class Turn:
    """One accepted inbound message, paired with the sender's decoded state."""

    identity: str
    state: SessionState
    text: str
    command: str
