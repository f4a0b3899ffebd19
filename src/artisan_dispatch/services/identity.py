"""Screening of inbound events before any state is touched."""

import re
from enum import StrEnum

from artisan_dispatch.domain.events import InboundEvent

# A bare phone-number identity, optionally with the personal-chat suffix.
# Group ids (``123-456@g.us``), broadcast lists and ``status@broadcast`` fail.
_IDENTITY_PATTERN = re.compile(r"^\d{6,15}(@c\.us)?$")


class Verdict(StrEnum):
    """What the router should do with an inbound event."""

    ACCEPT = "ACCEPT"
    DROP = "DROP"
    GUIDE = "GUIDE"


def is_valid_identity(identity: str) -> bool:
    """Return true when the identity addresses exactly one person."""
    return bool(_IDENTITY_PATTERN.match(identity))


def screen(event: InboundEvent) -> Verdict:
    """Classify an inbound event."""
    if event.is_group_or_status:
        return Verdict.DROP
    if not is_valid_identity(event.sender_identity):
        return Verdict.DROP
    if not event.body.strip():
        return Verdict.GUIDE
    return Verdict.ACCEPT
