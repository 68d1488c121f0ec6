"""Wiring: one explicit object graph per process, built and torn down by the caller."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import Engine

from campavail.config import get_database_url, section
from campavail.database import create_engine_from_url, init_db, make_session_factory
from campavail.dates import Clock
from campavail.dates import today as business_today
from campavail.events import EventBus
from campavail.modules.availability import AvailabilityEvaluator, ConflictDetector
from campavail.modules.blocking import DateBlockingService
from campavail.modules.booking import BookingService
from campavail.modules.notifications import BookingNotifier, NotificationSender, SMTPNotificationSender
from campavail.store import SQLRecordStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    engine: Engine
    store: SQLRecordStore
    event_bus: EventBus
    evaluator: AvailabilityEvaluator
    detector: ConflictDetector
    blocking: DateBlockingService
    bookings: BookingService
    clock: Clock = business_today


def build_services(
    database_url: str | None = None,
    *,
    clock: Clock = business_today,
    sleep: Callable[[float], None] = time.sleep,
    sender: NotificationSender | None = None,
    create_tables: bool = True,
) -> Services:
    engine = create_engine_from_url(database_url or get_database_url())
    if create_tables:
        init_db(engine)
    store = SQLRecordStore(make_session_factory(engine))
    event_bus = EventBus()

    if sender is not None or section("notifications").get("enabled"):
        notifier = BookingNotifier(store, sender or SMTPNotificationSender())
        notifier.setup_event_handlers(event_bus)

    logger.info("Services ready on %s", engine.url.render_as_string(hide_password=True))
    return Services(
        engine=engine,
        store=store,
        event_bus=event_bus,
        evaluator=AvailabilityEvaluator(store, clock=clock),
        detector=ConflictDetector(store),
        blocking=DateBlockingService(store, event_bus),
        bookings=BookingService(store, event_bus, clock=clock, sleep=sleep),
        clock=clock,
    )


def close_services(services: Services) -> None:
    services.event_bus.clear()
    services.engine.dispose()
