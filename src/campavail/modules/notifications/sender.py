"""Fire-and-forget booking emails, driven by the event bus."""

from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Protocol

from jinja2 import DictLoader, Environment, select_autoescape

from campavail.config import get_env, section
from campavail.events import Event, EventBus, EventType
from campavail.store import SQLRecordStore

logger = logging.getLogger(__name__)

TEMPLATES = {
    "booking_confirmation.txt": (
        "Hello,\n\n"
        "Your booking at {{ camp_title }} on {{ date }} is {{ status }}.\n"
        "Check-in from {{ check_in_time }}; departure by {{ check_out_time }} the next morning.\n"
        "Guests: {{ guests }}\n\n"
        "Booking reference: {{ booking_id }}\n"
    ),
    "booking_notification_host.txt": (
        "New booking for {{ camp_title }} on {{ date }} ({{ guests }} guest(s)).\n"
        "Status: {{ status }}\n"
        "Booking reference: {{ booking_id }}\n"
    ),
    "cancellation.txt": (
        "The booking {{ booking_id }} at {{ camp_title }} on {{ date }} has been cancelled.\n"
        "The date is open for new bookings again.\n"
    ),
}


class NotificationSender(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> None: ...


class SMTPNotificationSender:
    """Send plain-text mail through the SMTP server configured in the environment."""

    def __init__(self, from_address: str | None = None) -> None:
        self._from = from_address or section("notifications").get("from_address")

    @property
    def is_configured(self) -> bool:
        return all([get_env("SMTP_HOST"), get_env("SMTP_USER"), get_env("SMTP_PASSWORD")])

    def send(self, recipient: str, subject: str, body: str) -> None:
        if not self.is_configured:
            logger.warning("SMTP not configured, cannot send email to %s", recipient)
            return

        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = self._from or get_env("SMTP_USER")
        msg["To"] = recipient

        with smtplib.SMTP(get_env("SMTP_HOST"), int(get_env("SMTP_PORT", "587"))) as server:
            server.starttls()
            server.login(get_env("SMTP_USER"), get_env("SMTP_PASSWORD"))
            server.send_message(msg)
        logger.info("Email sent to %s", recipient)


class BookingNotifier:
    """Turns booking events into guest and host emails.

    Runs as an event-bus subscriber, so a failed send is logged by the bus and
    never reaches the booking flow.
    """

    def __init__(self, store: SQLRecordStore, sender: NotificationSender) -> None:
        self._store = store
        self._sender = sender
        self._jinja_env = Environment(
            loader=DictLoader(TEMPLATES),
            autoescape=select_autoescape(default=False),
        )

    def setup_event_handlers(self, event_bus: EventBus) -> None:
        event_bus.subscribe(EventType.BOOKING_CREATED, self._on_booking_created)
        event_bus.subscribe(EventType.BOOKING_CANCELLED, self._on_booking_cancelled)

    def _context(self, booking_id: str) -> tuple[dict, str | None, str | None] | None:
        booking = self._store.get_booking(booking_id)
        if booking is None:
            logger.warning("Booking %s not found, skipping notification", booking_id)
            return None
        camp = self._store.get_camp(booking.camp_id)
        context = {
            "booking_id": booking.id,
            "camp_title": camp.title if camp else booking.camp_id,
            "date": booking.check_in_date.strftime("%B %d, %Y"),
            "status": booking.status,
            "guests": booking.guests,
            "check_in_time": camp.check_in_time if camp else "",
            "check_out_time": camp.check_out_time if camp else "",
        }
        return context, booking.guest_email, camp.host_email if camp else None

    def _render(self, template_name: str, context: dict) -> str:
        return self._jinja_env.get_template(template_name).render(**context)

    def _on_booking_created(self, event: Event) -> None:
        found = self._context(event.data["booking_id"])
        if found is None:
            return
        context, guest_email, host_email = found
        if guest_email:
            self._sender.send(
                guest_email,
                f"Booking {context['status']} - {context['camp_title']}",
                self._render("booking_confirmation.txt", context),
            )
        if host_email:
            self._sender.send(
                host_email,
                f"New booking - {context['camp_title']}",
                self._render("booking_notification_host.txt", context),
            )

    def _on_booking_cancelled(self, event: Event) -> None:
        found = self._context(event.data["booking_id"])
        if found is None:
            return
        context, guest_email, host_email = found
        body = self._render("cancellation.txt", context)
        for recipient in (guest_email, host_email):
            if recipient:
                self._sender.send(recipient, f"Booking cancelled - {context['camp_title']}", body)
