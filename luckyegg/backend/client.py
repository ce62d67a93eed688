"""
Hosted backend client.

Thin async wrapper over the backend-as-a-service REST endpoints:
- Rows:    /rest/v1/<table>            (PostgREST filter syntax)
- Files:   /storage/v1/object/<bucket>/<path>
- Auth:    /auth/v1/signup, /auth/v1/token, /auth/v1/logout, /auth/v1/user

Every non-2xx response or network failure raises BackendError. Requests
are not retried.
"""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from luckyegg.backend.realtime import ChangeEvent, ChangeFeed
from luckyegg.config import settings
from luckyegg.models.failure import AuthError, BackendError

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@dataclass(frozen=True, slots=True)
class AuthSession:
    """
    Result of a sign-up or sign-in.

    Attributes:
        user_id: Backend user id
        email: Account email
        access_token: Bearer token for later calls. None when the backend
            created the account but did not start a session.
    """

    user_id: str
    email: str
    access_token: str | None = None
    refresh_token: str | None = None


def _filter_value(value: Any) -> str:
    """Render a Python value as a PostgREST `eq.` operand."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _filter_params(filters: dict[str, Any] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for column, value in (filters or {}).items():
        op = "is" if value is None else "eq"
        params[column] = f"{op}.{_filter_value(value)}"
    return params


def _error_from_response(response: httpx.Response, action: str) -> BackendError:
    code: str | None = None
    payload: Any = None
    message = response.text
    try:
        payload = response.json()
    except json.JSONDecodeError:
        payload = None
    if isinstance(payload, dict):
        raw_code = payload.get("code") or payload.get("error_code") or payload.get("error")
        code = str(raw_code) if raw_code is not None else None
        message = str(
            payload.get("message") or payload.get("msg") or payload.get("error_description") or message
        )
    return BackendError(
        f"{action} failed: HTTP {response.status_code} - {message}",
        status=response.status_code,
        code=code,
        payload=payload,
    )


def _json(response: httpx.Response, action: str) -> Any:
    """Decode a successful response body; a body that is not JSON is a backend failure."""
    try:
        return response.json()
    except ValueError as e:
        raise BackendError(
            f"{action} failed: HTTP {response.status_code} body is not JSON: {response.text[:200]!r}",
            status=response.status_code,
        ) from e


class BackendClient:
    """
    Async client for the hosted backend.

    One instance owns one httpx.AsyncClient. `as_user()` returns a view of
    the same connection pool that sends a user's access token instead of
    the anonymous key.

    Usage:
        async with BackendClient.from_settings() as client:
            rows = await client.select("cards", filters={"is_active": True})
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float | None = None,
        access_token: str | None = None,
        changes: ChangeFeed | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.changes = changes or ChangeFeed()
        self._http = http or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, changes: ChangeFeed | None = None) -> "BackendClient":
        return cls(
            settings.backend_url,
            settings.backend_anon_key,
            timeout=settings.backend_timeout,
            changes=changes,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def as_user(self, access_token: str) -> "BackendClient":
        """Get a client that authenticates as the given user."""
        clone = copy.copy(self)
        clone.access_token = access_token
        return clone

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json_body,
                content=content,
                headers=self._headers(headers),
            )
        except httpx.RequestError as exc:
            logger.error("%s failed: network error: %s", action, exc)
            raise BackendError(f"{action} failed: network error: {exc}") from exc

        if not response.is_success:
            error = _error_from_response(response, action)
            logger.error("%s", error.detail)
            raise error
        return response

    @staticmethod
    def _rows(response: httpx.Response, action: str) -> list[Row]:
        if not response.content:
            return []
        data = _json(response, action)
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise BackendError(f"{action} failed: expected JSON rows, got {type(data).__name__}")
        return data

    # --- Rows ---

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[Row]:
        """
        Read rows matching all equality filters.

        Args:
            table: Table name (e.g. "cards")
            filters: Column -> value equality filters
            order: Column to order by
            descending: Order direction
            limit: Max rows
            columns: PostgREST select list
        """
        params = {"select": columns, **_filter_params(filters)}
        if order:
            params["order"] = f"{order}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)

        response = await self._request("GET", f"/rest/v1/{table}", f"select {table}", params=params)
        return self._rows(response, f"select {table}")

    async def select_one(self, table: str, filters: dict[str, Any]) -> Row | None:
        """Get the first row matching the filters, or None."""
        rows = await self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None

    async def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count rows using the exact-count Content-Range header."""
        params = {"select": "id", **_filter_params(filters)}
        response = await self._request(
            "HEAD",
            f"/rest/v1/{table}",
            f"count {table}",
            params=params,
            headers={"Prefer": "count=exact"},
        )
        content_range = response.headers.get("content-range", "")
        _, _, total = content_range.partition("/")
        if not total or total == "*":
            raise BackendError(f"count {table} failed: missing Content-Range total")
        return int(total)

    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        """Insert one or more rows and return them as stored."""
        body = rows if isinstance(rows, list) else [rows]
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            f"insert {table}",
            json_body=body,
            headers={"Prefer": "return=representation"},
        )
        await self._publish(table, "INSERT")
        return self._rows(response, f"insert {table}")

    async def insert_one(self, table: str, row: Row) -> Row:
        """Insert one row and return it with backend-generated columns."""
        stored = await self.insert(table, row)
        if not stored:
            raise BackendError(f"insert {table} failed: no row returned")
        return stored[0]

    async def update(self, table: str, values: Row, *, filters: dict[str, Any]) -> list[Row]:
        """Update rows matching the filters. Filters are required."""
        if not filters:
            raise ValueError("update requires at least one filter")
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            f"update {table}",
            params=_filter_params(filters),
            json_body=values,
            headers={"Prefer": "return=representation"},
        )
        await self._publish(table, "UPDATE")
        return self._rows(response, f"update {table}")

    async def delete(self, table: str, *, filters: dict[str, Any]) -> list[Row]:
        """Delete rows matching the filters. Filters are required."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        response = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            f"delete {table}",
            params=_filter_params(filters),
            headers={"Prefer": "return=representation"},
        )
        await self._publish(table, "DELETE")
        return self._rows(response, f"delete {table}")

    async def _publish(self, table: str, event: ChangeEvent) -> None:
        await self.changes.publish(table, event)

    # --- Files ---

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        """Upload a file object; fails if the path already exists."""
        await self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{path}",
            f"upload {bucket}/{path}",
            content=content,
            headers={"Content-Type": content_type},
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def ping(self) -> None:
        """
        Check that the REST endpoint answers.

        Raises:
            BackendError: If the backend is unreachable or returns an error status
        """
        await self._request("GET", "/rest/v1/", "ping backend")

    # --- Auth ---

    @staticmethod
    def _session_from(data: Any) -> AuthSession:
        if not isinstance(data, dict):
            raise AuthError("Authentication failed", detail="backend returned no user")
        user = data.get("user") or data
        user_id = user.get("id")
        if not user_id:
            raise AuthError("Authentication failed", detail="backend returned no user")
        return AuthSession(
            user_id=str(user_id),
            email=str(user.get("email", "")),
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthSession:
        response = await self._request(
            "POST",
            "/auth/v1/signup",
            "sign up",
            json_body={"email": email, "password": password, "data": metadata or {}},
        )
        return self._session_from(_json(response, "sign up"))

    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = await self._request(
                "POST",
                "/auth/v1/token",
                "sign in",
                params={"grant_type": "password"},
                json_body={"email": email, "password": password},
            )
        except BackendError as e:
            if e.status in (400, 401):
                raise AuthError("Invalid email or password", detail=e.detail) from e
            raise
        return self._session_from(_json(response, "sign in"))

    async def sign_out(self) -> None:
        """End the session of the client's access token."""
        if not self.access_token:
            return
        await self._request("POST", "/auth/v1/logout", "sign out")

    async def get_user(self) -> AuthSession:
        """Resolve the client's access token to a user."""
        if not self.access_token:
            raise AuthError("Not signed in")
        try:
            response = await self._request("GET", "/auth/v1/user", "get user")
        except BackendError as e:
            if e.status in (401, 403):
                raise AuthError("Session expired or invalid", detail=e.detail) from e
            raise
        session = self._session_from(_json(response, "get user"))
        return AuthSession(
            user_id=session.user_id, email=session.email, access_token=self.access_token
        )
