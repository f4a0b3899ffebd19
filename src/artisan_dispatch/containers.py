"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from artisan_dispatch.adapters.supabase_admin_repository import (
    SupabaseAdminRepository,
)
from artisan_dispatch.adapters.supabase_artisan_repository import (
    SupabaseArtisanRepository,
)
from artisan_dispatch.adapters.supabase_audit_repository import (
    SupabaseAuditRepository,
)
from artisan_dispatch.adapters.supabase_enquiry_repository import (
    SupabaseEnquiryRepository,
)
from artisan_dispatch.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from artisan_dispatch.adapters.supabase_ticket_repository import (
    SupabaseTicketRepository,
)
from artisan_dispatch.adapters.whatsapp_client import (
    HttpxWhatsAppClient,
    WhatsAppClient,
)
from artisan_dispatch.config import Settings, parse_categories
from artisan_dispatch.services.admin import AdminService
from artisan_dispatch.services.audit import AuditService
from artisan_dispatch.services.broadcast import DispatchBroadcaster
from artisan_dispatch.services.claims import ClaimArbitrator
from artisan_dispatch.services.dedupe import RecentMessageCache
from artisan_dispatch.services.enquiries import EnquiryService
from artisan_dispatch.services.intake import IntakeFunnel
from artisan_dispatch.services.router import MessageRouter
from artisan_dispatch.services.sessions import SessionService
from artisan_dispatch.services.workflow import JobWorkflow


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    whatsapp_client: WhatsAppClient
    session_service: SessionService
    router: MessageRouter
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    ticket_repository = SupabaseTicketRepository(supabase_client)
    artisan_repository = SupabaseArtisanRepository(supabase_client)
    enquiry_repository = SupabaseEnquiryRepository(supabase_client)
    audit_repository = SupabaseAuditRepository(supabase_client)
    admin_repository = SupabaseAdminRepository(supabase_client)
    whatsapp_client = HttpxWhatsAppClient.create(
        access_token=resolved_settings.whatsapp_access_token,
        phone_number_id=resolved_settings.whatsapp_phone_number_id,
        graph_version=resolved_settings.whatsapp_graph_version,
    )
    support_phone = resolved_settings.support_phone_display
    session_service = SessionService(session_repository)
    audit_service = AuditService(audit_repository)
    enquiry_service = EnquiryService(
        repository=enquiry_repository,
        whatsapp_client=whatsapp_client,
        support_identity=resolved_settings.support_identity,
    )
    broadcaster = DispatchBroadcaster(
        ticket_repository=ticket_repository,
        artisan_repository=artisan_repository,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
        support_phone=support_phone,
        limit=resolved_settings.broadcast_limit,
    )
    intake = IntakeFunnel(
        session_service=session_service,
        ticket_repository=ticket_repository,
        broadcaster=broadcaster,
        enquiry_service=enquiry_service,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
        categories=parse_categories(resolved_settings.service_categories),
        support_phone=support_phone,
    )
    claims = ClaimArbitrator(
        ticket_repository=ticket_repository,
        artisan_repository=artisan_repository,
        session_service=session_service,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
    )
    workflow = JobWorkflow(
        ticket_repository=ticket_repository,
        artisan_repository=artisan_repository,
        session_service=session_service,
        audit_service=audit_service,
        whatsapp_client=whatsapp_client,
        support_phone=support_phone,
        support_identity=resolved_settings.support_identity,
    )
    router = MessageRouter(
        session_service=session_service,
        intake=intake,
        claims=claims,
        workflow=workflow,
        whatsapp_client=whatsapp_client,
        recent_messages=RecentMessageCache(resolved_settings.dedupe_ttl_seconds),
    )
    admin_service = AdminService(
        admin_repository=admin_repository,
        ticket_repository=ticket_repository,
        stale_after_minutes=resolved_settings.stale_ticket_minutes,
    )

    async def close_resources() -> None:
        await whatsapp_client.close()

    return AppContainer(
        settings=resolved_settings,
        whatsapp_client=whatsapp_client,
        session_service=session_service,
        router=router,
        admin_service=admin_service,
        close_resources=close_resources,
    )
