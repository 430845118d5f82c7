"""
Minimal Supabase client — PostgREST rows + GoTrue auth over plain HTTP.

Only what the service consumes: select, insert, password sign-in, sign-up,
sign-out and user lookup. Every failure surfaces as RemoteError so call
sites can decide between falling back and reporting.
"""

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from .config import settings, remote_configured

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """Network or backend error talking to Supabase."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SupabaseClient:

    def __init__(self, url: str, anon_key: str, timeout: float = 10.0):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout

    # --- Rows ---

    def select(self, table: str, columns: str = "*", filters: Optional[dict] = None) -> list:
        """
        GET /rest/v1/<table>?select=<columns>&<col>=eq.<value>

        filters: {column: value} — equality only.
        """
        params = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = "eq.%s" % value
        path = "/rest/v1/%s?%s" % (table, urllib.parse.urlencode(params))
        rows = self._request("GET", path)
        return rows or []

    def insert(self, table: str, row: dict, access_token: Optional[str] = None) -> None:
        """POST /rest/v1/<table>. Returns nothing (Prefer: return=minimal)."""
        self._request(
            "POST", "/rest/v1/%s" % table, body=row, access_token=access_token,
            extra_headers={"Prefer": "return=minimal"},
        )

    # --- Auth ---

    def sign_in_with_password(self, email: str, password: str) -> dict:
        """Returns the GoTrue session: access_token, refresh_token, user."""
        return self._request(
            "POST", "/auth/v1/token?grant_type=password",
            body={"email": email, "password": password},
        )

    def sign_up(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/v1/signup", body={"email": email, "password": password})

    def sign_out(self, access_token: str) -> None:
        self._request("POST", "/auth/v1/logout", access_token=access_token)

    def get_user(self, access_token: str) -> dict:
        return self._request("GET", "/auth/v1/user", access_token=access_token)

    # --- Transport ---

    def _request(self, method: str, path: str, body: Optional[dict] = None,
                 access_token: Optional[str] = None, extra_headers: Optional[dict] = None):
        headers = {
            "apikey": self.anon_key,
            "Authorization": "Bearer %s" % (access_token or self.anon_key),
            "Content-Type": "application/json",
        }
        headers.update(extra_headers or {})
        data = json.dumps(body).encode("utf-8") if body is not None else None

        req = urllib.request.Request(self.url + path, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            raise RemoteError("Supabase %s %s failed: %s" % (method, path, detail), status=e.code)
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise RemoteError("Supabase %s %s unreachable: %s" % (method, path, e))

        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise RemoteError("Supabase %s %s returned invalid JSON" % (method, path))


def get_remote_client() -> Optional[SupabaseClient]:
    """Client built from settings, or None when Supabase is not configured."""
    if not remote_configured():
        return None
    return SupabaseClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        timeout=settings.REMOTE_TIMEOUT_SECONDS,
    )
