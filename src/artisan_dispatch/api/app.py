"""FastAPI application factory."""

import hashlib
import hmac
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from artisan_dispatch.api.admin import router as admin_router
from artisan_dispatch.api.whatsapp_models import WhatsAppWebhookPayload
from artisan_dispatch.app_logging import configure_logging
from artisan_dispatch.containers import AppContainer

SIGNATURE_HEADER = "X-Hub-Signature-256"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/whatsapp/webhook", response_class=PlainTextResponse)
    async def verify_webhook(request: Request) -> PlainTextResponse:
        """Answer the subscription handshake with the challenge."""
        state_container: AppContainer = request.app.state.container
        mode = request.query_params.get("hub.mode")
        token = request.query_params.get("hub.verify_token")
        challenge = request.query_params.get("hub.challenge") or ""
        expected = state_container.settings.whatsapp_verify_token
        if mode == "subscribe" and token and hmac.compare_digest(token, expected):
            logger.info("Webhook verification succeeded")
            return PlainTextResponse(challenge)
        logger.warning("Webhook verification failed", extra={"mode": mode})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

    @app.post("/whatsapp/webhook")
    async def whatsapp_webhook(request: Request) -> dict[str, str]:
        """Handle inbound WhatsApp messages and status updates."""
        state_container: AppContainer = request.app.state.container
        body = await request.body()
        app_secret = state_container.settings.whatsapp_app_secret
        if app_secret and not _signature_matches(
            app_secret, body, request.headers.get(SIGNATURE_HEADER)
        ):
            logger.warning("Webhook signature mismatch")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

        try:
            payload = WhatsAppWebhookPayload.model_validate_json(body)
        except ValidationError:
            # Acknowledge anyway so the platform stops redelivering it.
            logger.warning("Ignoring malformed webhook payload")
            return {"status": "ok"}

        for event in payload.to_events():
            await state_container.router.handle(event)
        return {"status": "ok"}

    return app


def _signature_matches(secret: str, body: bytes, header: str | None) -> bool:
    """Compare the sha256=<hex> header against an HMAC of the raw body."""
    if not header or not header.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(header.removeprefix("sha256="), expected)
