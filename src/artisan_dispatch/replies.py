"""Outbound message texts.

WhatsApp renders ``*text*`` as bold; nothing else here is transport specific.
"""

from artisan_dispatch.domain.artisans import ArtisanProfile
from artisan_dispatch.domain.tickets import JobTicket, TicketStatus

EMPTY_BODY_GUIDANCE = (
    "Sorry, I can only read text messages. Reply *menu* to see what I can do."
)

SYSTEM_ERROR = 'The system encountered an error. Please reply "menu" to restart.'

INTAKE_MENU_OPTIONS = "Reply with a number:\n1. Service Call\n2. Make an Enquiry"


def main_menu() -> str:
    return f"*Main Menu*\n\n{INTAKE_MENU_OPTIONS}"


def welcome() -> str:
    return (
        "Welcome to *Artisan Dispatch*!\n\n"
        "Are you looking for a service or just asking a question?\n"
        f"{INTAKE_MENU_OPTIONS}"
    )


def invalid_intake_choice() -> str:
    return "Invalid choice. Please reply with just the number *1* or *2*."


def category_menu(categories: dict[str, str]) -> str:
    lines = [f"{code}. {name}" for code, name in categories.items()]
    options = "\n".join(lines)
    return f"Great. What type of artisan do you need right now?\n\n{options}"


def invalid_category_choice(categories: dict[str, str]) -> str:
    codes = [f"*{code}*" for code in categories]
    if len(codes) > 1:
        joined = ", ".join(codes[:-1]) + f", or {codes[-1]}"
    else:
        joined = "".join(codes)
    return f"Invalid choice. Please reply with {joined}."


def enquiry_prompt(support_phone: str) -> str:
    return (
        "Please type your enquiry below. An agent will review it shortly. "
        '(Reply "menu" at any time to go back).\n\n'
        f"*Direct Customer Service: {support_phone}*"
    )


def enquiry_received(support_phone: str) -> str:
    return (
        "*Your enquiry has been received!*\n\n"
        "A human agent will review this shortly. For immediate assistance or "
        f"complaints, chat with Customer Service at *{support_phone}*.\n\n"
        '(Reply "menu" anytime to start a new request).'
    )


def enquiry_forward(identity: str, body: str) -> str:
    return f"*New enquiry* from +{display_number(identity)}:\n\n{body}"


def location_prompt(category: str) -> str:
    return (
        f"You selected *{category}*.\n\n"
        "Please reply with your exact location/address "
        "(e.g., Block A, Campus Hostel)."
    )


def description_prompt() -> str:
    return (
        "Location saved.\n\nFinally, please briefly describe the issue "
        '(e.g., "Sparking wall socket" or "Broken pipe").'
    )


def request_received() -> str:
    return (
        "*Request received!* Processing your ticket...\n"
        "Searching for available artisans. "
        "We will notify you once a match is found."
    )


def no_artisans_available(support_phone: str) -> str:
    return (
        "We are sorry, but there are no available artisans in that category "
        "right now. Please try again later.\n\n"
        f"For further assistance, chat with Customer Service: {support_phone}"
    )


def job_alert(ticket: JobTicket) -> str:
    return (
        "*FAST MATCH ALERT!*\n\n"
        f"*Job ID:* #{ticket.job_id}\n"
        f"*Category:* {ticket.category}\n"
        f"*Location:* {ticket.location}\n"
        f"*Issue:* {ticket.description}\n\n"
        "(First to accept gets the client)\n"
        f"Reply *ACCEPT {ticket.job_id}* to claim this job."
    )


def invalid_job() -> str:
    return "Invalid Job ID."


def already_claimed() -> str:
    return (
        "Sorry, this job has already been claimed by another artisan "
        "or cancelled."
    )


def finish_current_job(job_id: int) -> str:
    return (
        f"You still have job #{job_id} in progress. Finish it before "
        "accepting another.\n\n"
        f"{report_prompt(job_id)}"
    )


def job_claimed() -> str:
    return (
        "*Job Claimed!*\n\n"
        "We are asking the client for final approval. Please stand by, we will "
        "send you their contact shortly."
    )


def approval_request(ticket: JobTicket, profile: ArtisanProfile | None) -> str:
    name = profile.name if profile else "An available artisan"
    rating = (
        f"{profile.rating:.1f}/5.0" if profile and profile.rating is not None else "New"
    )
    return (
        f"*Good news! We found an available {ticket.category} artisan.*\n\n"
        f"*Personnel:* {name}\n"
        f"*Rating:* {rating}\n\n"
        "Reply *YES* to approve and receive their contact details, "
        "or *NO* to cancel."
    )


def match_confirmed(ticket: JobTicket, support_phone: str) -> str:
    artisan = display_number(ticket.awarded_artisan or "")
    return (
        "*Match Confirmed!*\n\n"
        "Your artisan is ready. Please call or message them now:\n"
        f"*WhatsApp:* +{artisan}\n\n"
        f"Need help? Chat with Customer Service: {support_phone}"
    )


def job_approved(ticket: JobTicket) -> str:
    client = display_number(ticket.client_identity)
    return (
        f"*Job #{ticket.job_id} Approved!*\n\n"
        "The client is expecting you. Reach out to them immediately to arrange "
        "pricing and timing:\n"
        f"*Client Number:* +{client}\n"
        f"*Location:* {ticket.location}\n"
        f"*Issue:* {ticket.description}\n\n"
        f"{report_prompt(ticket.job_id)}"
    )


def approval_unavailable() -> str:
    return (
        "This job is no longer awaiting your approval. "
        'Reply "menu" to start a new search.'
    )


def approval_declined() -> str:
    return (
        "Approval cancelled. The job has been aborted. "
        'Reply "menu" to start a new search.'
    )


def report_prompt(job_id: int) -> str:
    return (
        f"When you are done with job #{job_id}, reply with:\n"
        "1. Job completed\n"
        "2. Job cancelled"
    )


def report_received(outcome: TicketStatus) -> str:
    return (
        f"Thanks! We recorded the job as *{_outcome_label(outcome)}* "
        "and asked the client to confirm. You are available for new jobs again."
    )


def report_rejected() -> str:
    return "This job is no longer active. You are available for new jobs again."


def verification_prompt(job_id: int, outcome: TicketStatus) -> str:
    return (
        f"Your artisan reported job #{job_id} as "
        f"*{_outcome_label(outcome)}*.\n\n"
        "Reply with:\n"
        "1. Confirm\n"
        "2. Dispute"
    )


def verification_confirmed(job_id: int, outcome: TicketStatus) -> str:
    return (
        f"Thank you! Job #{job_id} is closed as *{_outcome_label(outcome)}*.\n"
        'Reply "menu" anytime to start a new request.'
    )


def dispute_recorded(job_id: int, support_phone: str) -> str:
    return (
        f"We have recorded a dispute for job #{job_id}. A human agent will "
        f"follow up with you. Customer Service: {support_phone}"
    )


def dispute_alert(ticket: JobTicket) -> str:
    client = display_number(ticket.client_identity)
    artisan = display_number(ticket.awarded_artisan or "")
    return (
        f"*Dispute on job #{ticket.job_id}*\n"
        f"Client: +{client}\n"
        f"Artisan: +{artisan}\n"
        f"Reported: {ticket.reported_status or 'unknown'}"
    )


def verification_unavailable() -> str:
    return (
        "This job is no longer awaiting verification. "
        'Reply "menu" to start a new request.'
    )


def display_number(identity: str) -> str:
    """Strip transport suffixes so an identity reads as a phone number."""
    return identity.split("@", maxsplit=1)[0].lstrip("+")


def _outcome_label(outcome: TicketStatus) -> str:
    return "completed" if outcome == TicketStatus.COMPLETED else "cancelled"
