"""WhatsApp Cloud API client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx

GRAPH_API_BASE = "https://graph.facebook.com"


class WhatsAppClient(Protocol):
    """Interface for outbound WhatsApp messages."""

    async def send_message(self, to: str, text: str) -> None:
        """Send a text message to a WhatsApp identity."""


@dataclass
class HttpxWhatsAppClient:
    """WhatsApp client implemented with httpx against the Graph API."""

    access_token: str
    phone_number_id: str
    graph_version: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, access_token: str, phone_number_id: str, graph_version: str
    ) -> "HttpxWhatsAppClient":
        """Create a WhatsApp client with a managed httpx session."""
        return cls(
            access_token=access_token,
            phone_number_id=phone_number_id,
            graph_version=graph_version,
            http_client=httpx.AsyncClient(),
        )

    async def send_message(self, to: str, text: str) -> None:
        """Send a text message; raises on any non-2xx response."""
        url = f"{GRAPH_API_BASE}/{self.graph_version}/{self.phone_number_id}/messages"
        payload: dict[str, object] = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": _recipient(to),
            "type": "text",
            "text": {"body": text},
        }
        headers = {"Authorization": f"Bearer {self.access_token}"}
        response = await self.http_client.post(
            url, json=payload, headers=headers, timeout=10
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()


def _recipient(identity: str) -> str:
    """The Graph API expects bare digits, without chat suffixes."""
    return identity.split("@", maxsplit=1)[0].lstrip("+")
