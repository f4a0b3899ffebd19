"""Free-text enquiries captured for human review."""

import logging
from dataclasses import dataclass
from typing import Protocol

from artisan_dispatch import replies
from artisan_dispatch.adapters.whatsapp_client import WhatsAppClient

logger = logging.getLogger(__name__)


class EnquiryRepository(Protocol):
    """Persistence interface for enquiries."""

    def create_enquiry(self, identity: str, body: str) -> None:
        """Store an enquiry."""


@dataclass
class EnquiryService:
    """Store enquiries and forward them to the support desk."""

    repository: EnquiryRepository
    whatsapp_client: WhatsAppClient
    support_identity: str | None = None

    async def submit(self, identity: str, body: str) -> None:
        """Persist the enquiry, then forward it when a support desk is set."""
        self.repository.create_enquiry(identity, body)
        if not self.support_identity:
            logger.info("Enquiry stored without forwarding", extra={"from": identity})
            return
        await self.whatsapp_client.send_message(
            self.support_identity, replies.enquiry_forward(identity, body)
        )
