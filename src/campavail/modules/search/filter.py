"""Date filter for camp listings."""

from __future__ import annotations

import logging
from datetime import date

from campavail.models.camp import Camp
from campavail.modules.availability.evaluator import AvailabilityEvaluator

logger = logging.getLogger(__name__)


def filter_available_camps(
    camps: list[Camp], day: date, evaluator: AvailabilityEvaluator
) -> list[Camp]:
    """Active camps that are free on ``day``.

    A camp whose availability cannot be read is left out, same as on the
    booking path: an uncertain day is never shown as free.
    """
    available = []
    for camp in camps:
        if not camp.is_bookable:
            continue
        try:
            result = evaluator.check_availability(camp.id, day)
        except Exception:
            logger.exception("Availability check failed for camp %s, excluding it", camp.id)
            continue
        if result.available:
            available.append(camp)
    logger.info("%d of %d camps available on %s", len(available), len(camps), day)
    return available
