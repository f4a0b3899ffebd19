"""Pydantic models for WhatsApp Cloud API webhook payloads."""

from pydantic import BaseModel, ConfigDict, Field

from artisan_dispatch.domain.events import InboundEvent


class WhatsAppText(BaseModel):
    """Text message body."""

    body: str = ""


class WhatsAppMessage(BaseModel):
    """Inbound message payload."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_number: str = Field(alias="from")
    type: str = "text"
    timestamp: str | None = None
    text: WhatsAppText | None = None


class WhatsAppStatus(BaseModel):
    """Delivery status update for a message we sent."""

    id: str | None = None
    recipient_id: str = ""
    status: str | None = None


class WhatsAppValue(BaseModel):
    """Change value carrying messages or statuses."""

    messaging_product: str | None = None
    messages: list[WhatsAppMessage] = Field(default_factory=list)
    statuses: list[WhatsAppStatus] = Field(default_factory=list)


class WhatsAppChange(BaseModel):
    """Single change notification."""

    field: str
    value: WhatsAppValue


class WhatsAppEntry(BaseModel):
    """Webhook entry for one business account."""

    id: str | None = None
    changes: list[WhatsAppChange] = Field(default_factory=list)


class WhatsAppWebhookPayload(BaseModel):
    """Top-level webhook payload."""

    model_config = ConfigDict(populate_by_name=True)

    object_type: str = Field(alias="object")
    entry: list[WhatsAppEntry] = Field(default_factory=list)

    def to_events(self) -> list[InboundEvent]:
        """Flatten the payload into transport-neutral events, in delivery order.

        Status updates are kept as status traffic so the screening step drops
        them; non-text messages arrive with an empty body.
        """
        if self.object_type != "whatsapp_business_account":
            return []
        events: list[InboundEvent] = []
        for entry in self.entry:
            for change in entry.changes:
                if change.field != "messages":
                    continue
                for message in change.value.messages:
                    body = message.text.body if message.text else ""
                    events.append(
                        InboundEvent(
                            sender_identity=message.from_number,
                            body=body if message.type == "text" else "",
                            message_id=message.id,
                        )
                    )
                for update in change.value.statuses:
                    events.append(
                        InboundEvent(
                            sender_identity=update.recipient_id,
                            body="",
                            is_group_or_status=True,
                            message_id=update.id,
                        )
                    )
        return events
