"""Domain models for per-actor conversation sessions.

A session status is a tagged variant: each phase is its own frozen dataclass
carrying exactly the parameters that phase needs. Persistence stores the tag
and the parameters separately, so free text such as a location never has to be
squeezed into the tag.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import ClassVar

from artisan_dispatch.domain.errors import UnknownSessionStateError
from artisan_dispatch.domain.tickets import TicketStatus


class SessionPhase(StrEnum):
    """Phase tags persisted in the session status column."""

    NEW = "NEW"
    IDLE = "IDLE"
    AWAITING_INTAKE_TYPE = "AWAITING_INTAKE_TYPE"
    AWAITING_CATEGORY = "AWAITING_CATEGORY"
    AWAITING_LOCATION = "AWAITING_LOCATION"
    AWAITING_DESC = "AWAITING_DESC"
    ENQUIRY_MODE = "ENQUIRY_MODE"
    AWAITING_APPROVAL = "AWAITING_APPROVAL"
    VERIFYING_JOB = "VERIFYING_JOB"
    ACTIVE_JOB = "ACTIVE_JOB"


@dataclass(frozen=True)
class New:
    phase: ClassVar[SessionPhase] = SessionPhase.NEW


@dataclass(frozen=True)
class Idle:
    phase: ClassVar[SessionPhase] = SessionPhase.IDLE


@dataclass(frozen=True)
class AwaitingIntakeType:
    phase: ClassVar[SessionPhase] = SessionPhase.AWAITING_INTAKE_TYPE


@dataclass(frozen=True)
class AwaitingCategory:
    phase: ClassVar[SessionPhase] = SessionPhase.AWAITING_CATEGORY


@dataclass(frozen=True)
class AwaitingLocation:
    category: str
    phase: ClassVar[SessionPhase] = SessionPhase.AWAITING_LOCATION


@dataclass(frozen=True)
class AwaitingDescription:
    category: str
    location: str
    phase: ClassVar[SessionPhase] = SessionPhase.AWAITING_DESC


@dataclass(frozen=True)
class EnquiryMode:
    phase: ClassVar[SessionPhase] = SessionPhase.ENQUIRY_MODE


@dataclass(frozen=True)
class AwaitingApproval:
    """Client is deciding whether to accept the artisan who claimed the job."""

    job_id: int
    phase: ClassVar[SessionPhase] = SessionPhase.AWAITING_APPROVAL


@dataclass(frozen=True)
class VerifyingJob:
    """Client is confirming or disputing the artisan's reported outcome."""

    job_id: int
    reported_status: TicketStatus
    phase: ClassVar[SessionPhase] = SessionPhase.VERIFYING_JOB


@dataclass(frozen=True)
class ActiveJob:
    """Artisan is working a matched job and owes a completion report."""

    job_id: int
    phase: ClassVar[SessionPhase] = SessionPhase.ACTIVE_JOB


SessionState = (
    New
    | Idle
    | AwaitingIntakeType
    | AwaitingCategory
    | AwaitingLocation
    | AwaitingDescription
    | EnquiryMode
    | AwaitingApproval
    | VerifyingJob
    | ActiveJob
)

_SIMPLE_STATES: dict[SessionPhase, SessionState] = {
    SessionPhase.NEW: New(),
    SessionPhase.IDLE: Idle(),
    SessionPhase.AWAITING_INTAKE_TYPE: AwaitingIntakeType(),
    SessionPhase.AWAITING_CATEGORY: AwaitingCategory(),
    SessionPhase.ENQUIRY_MODE: EnquiryMode(),
}


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted actor session as stored."""

    identity: str
    status: str
    context: dict[str, object]
    last_message: str | None = None
    updated_at: datetime | None = None


def encode_state(state: SessionState) -> tuple[str, dict[str, object]]:
    """Split a session state into its status tag and context payload."""
    match state:
        case AwaitingLocation(category=category):
            context: dict[str, object] = {"category": category}
        case AwaitingDescription(category=category, location=location):
            context = {"category": category, "location": location}
        case AwaitingApproval(job_id=job_id) | ActiveJob(job_id=job_id):
            context = {"job_id": job_id}
        case VerifyingJob(job_id=job_id, reported_status=reported):
            context = {"job_id": job_id, "reported_status": reported.value}
        case _:
            context = {}
    return state.phase.value, context


def decode_state(status: str, context: dict[str, object] | None) -> SessionState:
    """Rebuild a session state from a stored status tag and context."""
    try:
        phase = SessionPhase(status)
    except ValueError as exc:
        raise UnknownSessionStateError(status) from exc

    simple = _SIMPLE_STATES.get(phase)
    if simple is not None:
        return simple

    payload = context or {}
    try:
        if phase is SessionPhase.AWAITING_LOCATION:
            return AwaitingLocation(category=str(payload["category"]))
        if phase is SessionPhase.AWAITING_DESC:
            return AwaitingDescription(
                category=str(payload["category"]),
                location=str(payload["location"]),
            )
        if phase is SessionPhase.AWAITING_APPROVAL:
            return AwaitingApproval(job_id=int(payload["job_id"]))
        if phase is SessionPhase.ACTIVE_JOB:
            return ActiveJob(job_id=int(payload["job_id"]))
        if phase is SessionPhase.VERIFYING_JOB:
            return VerifyingJob(
                job_id=int(payload["job_id"]),
                reported_status=TicketStatus(payload["reported_status"]),
            )
    except (KeyError, TypeError, ValueError) as exc:
        raise UnknownSessionStateError(status, payload) from exc
    raise UnknownSessionStateError(status, payload)
