"""Suppression of redelivered transport messages."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


@dataclass
class RecentMessageCache:
    """Remember message ids for a TTL so redeliveries are processed once."""

    ttl_seconds: int = 600
    _expiry: dict[str, datetime] = field(default_factory=dict)

    def first_sighting(self, message_id: str | None) -> bool:
        """Return true the first time an id is seen within the TTL.

        Events without an id are always treated as new.
        """
        if not message_id:
            return True
        now = datetime.now(tz=UTC)
        self._evict(now)
        if message_id in self._expiry:
            return False
        self._expiry[message_id] = now + timedelta(seconds=self.ttl_seconds)
        return True

    def _evict(self, now: datetime) -> None:
        expired = [key for key, expires_at in self._expiry.items() if expires_at <= now]
        for key in expired:
            del self._expiry[key]
