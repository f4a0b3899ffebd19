"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from artisan_dispatch.domain.tickets import TicketStatus

if TYPE_CHECKING:
    from artisan_dispatch.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/tickets", dependencies=[Depends(require_admin)])
async def list_tickets(
    request: Request,
    ticket_status: TicketStatus | None = Query(default=None, alias="status"),
    limit: int = 50,
) -> dict[str, object]:
    """Return recent job tickets, optionally filtered by status."""
    container: AppContainer = request.app.state.container
    return {"tickets": container.admin_service.list_tickets(ticket_status, limit)}


@router.get("/tickets/stale", dependencies=[Depends(require_admin)])
async def list_stale_tickets(
    request: Request, minutes: int | None = None, limit: int = 50
) -> dict[str, object]:
    """Return tickets still waiting on an artisan or a client decision."""
    container: AppContainer = request.app.state.container
    return {"tickets": container.admin_service.list_stale_tickets(minutes, limit)}


@router.get("/tickets/{job_id}", dependencies=[Depends(require_admin)])
async def ticket_detail(job_id: int, request: Request) -> dict[str, object]:
    """Return a ticket with its audit trail."""
    container: AppContainer = request.app.state.container
    detail = container.admin_service.get_ticket_detail(job_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return detail


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(request: Request, limit: int = 20) -> dict[str, object]:
    """Return recently active conversations."""
    container: AppContainer = request.app.state.container
    return {"sessions": container.admin_service.list_sessions(limit)}


@router.get("/enquiries", dependencies=[Depends(require_admin)])
async def list_enquiries(request: Request, limit: int = 20) -> dict[str, object]:
    """Return recent free-text enquiries."""
    container: AppContainer = request.app.state.container
    return {"enquiries": container.admin_service.list_enquiries(limit)}
