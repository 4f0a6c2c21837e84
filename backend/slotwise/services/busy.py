# backend/slotwise/services/busy.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.errors import AuthorizationError, CalendarError, ProviderError
from .intervals import Interval
from .ports import AvailabilityStore, CalendarGateway

logger = logging.getLogger(__name__)


@dataclass
class BusyAggregate:
    conflicts: list = field(default_factory=list)
    calendar_source_degraded: bool = False
    # the CalendarError that triggered degraded mode, if any
    degraded_by: Optional[CalendarError] = None


def aggregate_busy_intervals(store: AvailabilityStore, calendar: CalendarGateway,
                             booking_link_id: int, host_id: int,
                             window_start: datetime, window_end: datetime) -> BusyAggregate:
    """
    Union of the link's blocked intervals and the host's external busy periods
    over [window_start, window_end).

    A failing calendar fetch is not propagated: the result falls back to blocked
    intervals only and `calendar_source_degraded` is set.
    """
    blocked = store.list_blocked_intervals(booking_link_id, window_start, window_end)
    conflicts: list[Interval] = [b.as_interval() for b in blocked]

    result = BusyAggregate()
    try:
        external = calendar.fetch_busy_intervals(host_id, window_start, window_end)
    except AuthorizationError as e:
        logger.warning("calendar authorization failed for host %s, using blocked times only: %s", host_id, e)
        result.calendar_source_degraded = True
        result.degraded_by = e
    except ProviderError as e:
        logger.warning("calendar provider error for host %s, using blocked times only: %s", host_id, e)
        result.calendar_source_degraded = True
        result.degraded_by = e
    else:
        conflicts.extend(external)

    result.conflicts = conflicts
    return result
