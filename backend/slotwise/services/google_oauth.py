# backend/slotwise/services/google_oauth.py
import logging
from datetime import datetime, timedelta, timezone

import requests

from ..core.errors import AuthorizationError, ProviderError
from .ports import CredentialStore

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"

CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"
READ_SCOPES = {
    CALENDAR_SCOPE,
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.events.readonly",
}
WRITE_SCOPES = {
    CALENDAR_SCOPE,
    "https://www.googleapis.com/auth/calendar.events",
}

# refresh a little before Google actually rejects the token
EXPIRY_SKEW = timedelta(seconds=60)


def check_scope(scope: str | None, required: set[str]) -> None:
    """Raise AuthorizationError unless one of `required` was granted. No scope recorded -> trust the token."""
    if scope is None:
        return
    granted = set(scope.split())
    if not granted & required:
        raise AuthorizationError(f"calendar scope not granted (have: {sorted(granted) or 'none'})")


def _utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def get_access_token(credential_store: CredentialStore, host_id: int, *, http: requests.Session,
                     client_id: str | None, client_secret: str | None,
                     timeout: float, required_scopes: set[str] = READ_SCOPES) -> str:
    """
    Valid access token for the host's calendar account, refreshing it through the
    refresh token when expired. The refreshed token is written back to the store.
    """
    creds = credential_store.get_calendar_credentials(host_id)
    if creds is None:
        raise AuthorizationError(f"host {host_id} has no connected calendar")
    check_scope(creds.scope, required_scopes)

    now = datetime.now(timezone.utc)
    if creds.access_token and (creds.expires_at is None or _utc(creds.expires_at) > now + EXPIRY_SKEW):
        return creds.access_token

    if not creds.refresh_token:
        raise AuthorizationError(f"access token expired for host {host_id} and no refresh token stored")
    if not (client_id and client_secret):
        raise AuthorizationError("Google OAuth client is not configured")

    data = {
        "client_id": client_id,
        "client_secret": client_secret,
        "refresh_token": creds.refresh_token,
        "grant_type": "refresh_token",
    }
    try:
        resp = http.post(TOKEN_URL, data=data, timeout=timeout)
    except requests.Timeout as e:
        raise ProviderError(f"token refresh timed out: {e}") from e
    except requests.RequestException as e:
        raise ProviderError(f"token refresh failed: {e}") from e

    # 400 invalid_grant / 401: the refresh token was revoked or is unknown
    if resp.status_code in (400, 401, 403):
        raise AuthorizationError(f"token refresh rejected ({resp.status_code})")
    if resp.status_code >= 300:
        raise ProviderError(f"token refresh failed ({resp.status_code})")

    try:
        j = resp.json()
    except ValueError as e:
        raise ProviderError("token refresh returned invalid JSON") from e
    token = j.get("access_token")
    if not token:
        raise AuthorizationError("token refresh returned no access token")

    expires_at = None
    expires_in = j.get("expires_in")
    if expires_in:
        try:
            expires_at = now + timedelta(seconds=int(float(expires_in)))
        except (TypeError, ValueError) as e:
            raise ProviderError(f"token refresh returned bad expires_in {expires_in!r}") from e
    credential_store.save_access_token(host_id, token, expires_at)
    logger.info("refreshed Google access token for host %s", host_id)
    return token
