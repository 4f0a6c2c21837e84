# backend/slotwise/services/google_calendar.py
import logging
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

from ..core.errors import AuthorizationError, ProviderError
from .google_oauth import READ_SCOPES, WRITE_SCOPES, get_access_token
from .intervals import Interval
from .ports import CredentialStore, EventRequest

logger = logging.getLogger(__name__)

CALENDAR_BASE = "https://www.googleapis.com/calendar/v3"
MAX_RESULTS = 2500
MAX_PAGES = 10


def _rfc3339(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_when(when: dict, zone: ZoneInfo) -> datetime | None:
    """dateTime -> aware instant; all-day `date` -> midnight in the calendar zone."""
    if when.get("dateTime"):
        dt = datetime.fromisoformat(when["dateTime"].replace("Z", "+00:00"))
        return dt if dt.tzinfo else dt.replace(tzinfo=zone)
    if when.get("date"):
        return datetime.combine(date.fromisoformat(when["date"]), time(0), tzinfo=zone)
    return None


def _zone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def events_to_busy(items: list[dict], zone: ZoneInfo) -> list[Interval]:
    busy: list[Interval] = []
    for ev in items:
        if ev.get("status") == "cancelled":
            continue
        # "show as available" events do not block the host
        if ev.get("transparency") == "transparent":
            continue
        start = _parse_when(ev.get("start") or {}, zone)
        end = _parse_when(ev.get("end") or {}, zone)
        if start is None or end is None or end <= start:
            continue
        busy.append(Interval(start, end))
    return busy


class GoogleCalendarGateway:
    """
    Reads busy periods from, and writes booked events to, the host's Google Calendar.
    Every failure surfaces as AuthorizationError or ProviderError; the HTTP timeout is owned here.
    """

    def __init__(self, credential_store: CredentialStore, *, http: requests.Session,
                 client_id: str | None, client_secret: str | None,
                 calendar_id: str = "primary", timeout: float = 10.0):
        self.credential_store = credential_store
        self.http = http
        self.client_id = client_id
        self.client_secret = client_secret
        self.calendar_id = calendar_id
        self.timeout = timeout

    def _token(self, host_id: int, scopes: set[str]) -> str:
        return get_access_token(
            self.credential_store,
            host_id,
            http=self.http,
            client_id=self.client_id,
            client_secret=self.client_secret,
            timeout=self.timeout,
            required_scopes=scopes,
        )

    def _send(self, method: str, url: str, token: str, **kw) -> dict:
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        try:
            r = self.http.request(method, url, headers=headers, timeout=self.timeout, **kw)
        except requests.Timeout as e:
            raise ProviderError(f"Google Calendar timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ProviderError(f"Google Calendar unreachable: {e}") from e

        if r.status_code in (401, 403):
            raise AuthorizationError(f"Google Calendar refused access ({r.status_code})")
        if r.status_code >= 300:
            raise ProviderError(f"Google Calendar error {r.status_code}: {r.text[:200]}")
        try:
            return r.json()
        except ValueError as e:
            logger.error("non-JSON response from %s", url)
            raise ProviderError("Google Calendar returned invalid JSON") from e

    def fetch_busy_intervals(self, host_id: int, range_start: datetime,
                             range_end: datetime) -> list[Interval]:
        token = self._token(host_id, READ_SCOPES)
        url = f"{CALENDAR_BASE}/calendars/{self.calendar_id}/events"
        params = {
            "timeMin": _rfc3339(range_start),
            "timeMax": _rfc3339(range_end),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": MAX_RESULTS,
        }

        busy: list[Interval] = []
        for _ in range(MAX_PAGES):
            payload = self._send("GET", url, token, params=params)
            try:
                busy.extend(events_to_busy(payload.get("items") or [], _zone(payload.get("timeZone"))))
            except (TypeError, ValueError, AttributeError) as e:
                logger.error("unexpected events payload for host %s: %s", host_id, e)
                raise ProviderError("malformed events payload") from e
            page = payload.get("nextPageToken")
            if not page:
                break
            params = dict(params, pageToken=page)
        return busy

    def create_event(self, host_id: int, event: EventRequest) -> str:
        token = self._token(host_id, WRITE_SCOPES)

        attendees = [{"email": event.guest_email, "displayName": event.guest_name}]
        if event.host_email:
            attendees.append({"email": event.host_email, "displayName": "Host"})

        payload = {
            "summary": event.summary,
            "start": {"dateTime": event.start.isoformat(), "timeZone": event.time_zone},
            "end": {"dateTime": event.end.isoformat(), "timeZone": event.time_zone},
            "attendees": attendees,
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 15},
                ],
            },
        }
        if event.description:
            payload["description"] = event.description

        url = f"{CALENDAR_BASE}/calendars/{self.calendar_id}/events"
        created = self._send("POST", url, token, json=payload, params={"sendUpdates": "all"})
        event_id = created.get("id")
        if not event_id:
            raise ProviderError("Google Calendar did not return an event id")
        return event_id
