# backend/slotwise/core/errors.py


class SlotwiseError(Exception):
    """Base for every error raised by the scheduling core."""


class InvalidInputError(SlotwiseError):
    """Unknown/inactive booking link, unparseable date or bad slot parameters."""


class InvalidPolicyError(SlotwiseError):
    """A stored availability policy breaks its own invariants (server-side data)."""


class CalendarError(SlotwiseError):
    """Raised by the calendar gateway. Availability reads never let it escape."""


class AuthorizationError(CalendarError):
    """Missing, expired or insufficiently scoped calendar credential."""


class ProviderError(CalendarError):
    """Transient upstream failure: timeout, connection error, 5xx, bad payload."""


class SlotNoLongerAvailableError(SlotwiseError):
    def __init__(self, booking_link_id: int, start):
        self.booking_link_id = booking_link_id
        self.start = start
        super().__init__(f"Slot {start.isoformat()} is no longer available for link {booking_link_id}")
