"""Tests for the client intake dialogue."""

from artisan_dispatch import replies
from artisan_dispatch.domain.sessions import (
    AwaitingCategory,
    AwaitingDescription,
    AwaitingIntakeType,
    AwaitingLocation,
    EnquiryMode,
    Idle,
)
from artisan_dispatch.domain.tickets import TicketStatus
from tests.conftest import (
    ARTISAN,
    CLIENT,
    OTHER_ARTISAN,
    SUPPORT,
    FakeWhatsAppClient,
    InMemoryArtisanRepository,
    InMemoryAuditRepository,
    InMemoryEnquiryRepository,
    InMemoryTicketRepository,
    send,
)


def test_first_contact_shows_welcome_menu(
    router, session_service, whatsapp_client: FakeWhatsAppClient
) -> None:
    send(router, CLIENT, "hello")

    assert session_service.get_state(CLIENT) == AwaitingIntakeType()
    assert whatsapp_client.last_text(CLIENT) == replies.welcome()


def test_service_call_walkthrough_creates_and_broadcasts_ticket(
    router,
    session_service,
    ticket_repository: InMemoryTicketRepository,
    audit_repository: InMemoryAuditRepository,
    whatsapp_client: FakeWhatsAppClient,
) -> None:
    send(router, CLIENT, "hi")
    send(router, CLIENT, "1")
    assert session_service.get_state(CLIENT) == AwaitingCategory()
    assert "1. Electrical" in whatsapp_client.last_text(CLIENT)

    send(router, CLIENT, "1")
    assert session_service.get_state(CLIENT) == AwaitingLocation(category="Electrical")
    assert "*Electrical*" in whatsapp_client.last_text(CLIENT)

    send(router, CLIENT, "Block A: Room 3, Campus Hostel")
    assert session_service.get_state(CLIENT) == AwaitingDescription(
        category="Electrical", location="Block A: Room 3, Campus Hostel"
    )
    assert whatsapp_client.last_text(CLIENT).startswith("Location saved.")

    send(router, CLIENT, "Sparking wall socket")

    assert session_service.get_state(CLIENT) == Idle()
    ticket = ticket_repository.get_ticket(1)
    assert ticket is not None
    assert ticket.status is TicketStatus.BROADCASTED
    assert ticket.location == "Block A: Room 3, Campus Hostel"
    assert ticket.description == "Sparking wall socket"
    assert ticket.notified_artisans == [ARTISAN, OTHER_ARTISAN]
    assert "*Request received!*" in whatsapp_client.texts_for(CLIENT)[-1]
    assert "Reply *ACCEPT 1*" in whatsapp_client.last_text(ARTISAN)
    assert "Reply *ACCEPT 1*" in whatsapp_client.last_text(OTHER_ARTISAN)
    assert audit_repository.event_types(1) == ["created", "broadcasted"]


def test_invalid_intake_choice_reprompts(
    router, session_service, whatsapp_client: FakeWhatsAppClient
) -> None:
    send(router, CLIENT, "hi")
    send(router, CLIENT, "3")

    assert session_service.get_state(CLIENT) == AwaitingIntakeType()
    assert whatsapp_client.last_text(CLIENT) == replies.invalid_intake_choice()


def test_invalid_category_choice_lists_codes(
    router, session_service, whatsapp_client: FakeWhatsAppClient
) -> None:
    send(router, CLIENT, "hi")
    send(router, CLIENT, "1")
    send(router, CLIENT, "9")

    assert session_service.get_state(CLIENT) == AwaitingCategory()
    assert (
        whatsapp_client.last_text(CLIENT)
        == "Invalid choice. Please reply with *1*, *2*, or *3*."
    )


def test_no_available_artisans_fails_ticket(
    router,
    ticket_repository: InMemoryTicketRepository,
    artisan_repository: InMemoryArtisanRepository,
    whatsapp_client: FakeWhatsAppClient,
) -> None:
    artisan_repository.profiles = []

    for body in ("hi", "1", "3", "Block C", "Door hinge broken"):
        send(router, CLIENT, body)

    ticket = ticket_repository.get_ticket(1)
    assert ticket is not None
    assert ticket.status is TicketStatus.FAILED_NO_ARTISANS
    assert ticket.notified_artisans == []
    assert "no available artisans" in whatsapp_client.last_text(CLIENT)


def test_enquiry_is_stored_and_forwarded(
    router,
    session_service,
    enquiry_repository: InMemoryEnquiryRepository,
    whatsapp_client: FakeWhatsAppClient,
) -> None:
    send(router, CLIENT, "hi")
    send(router, CLIENT, "2")
    assert session_service.get_state(CLIENT) == EnquiryMode()

    send(router, CLIENT, "Do you fix generators?")

    assert session_service.get_state(CLIENT) == Idle()
    assert enquiry_repository.enquiries[0]["body"] == "Do you fix generators?"
    assert "Do you fix generators?" in whatsapp_client.last_text(SUPPORT)
    assert "*Your enquiry has been received!*" in whatsapp_client.last_text(CLIENT)


def test_idle_client_gets_menu_again(
    router, session_service, whatsapp_client: FakeWhatsAppClient
) -> None:
    session_service.set_state(CLIENT, Idle())

    send(router, CLIENT, "thanks")

    assert session_service.get_state(CLIENT) == AwaitingIntakeType()
    assert whatsapp_client.last_text(CLIENT) == replies.welcome()
