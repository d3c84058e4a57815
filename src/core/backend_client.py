"""
Data backend client (PostgREST-style REST API) with lazy initialization.

Every table is reached at {BACKEND_URL}/rest/v1/{table}. Row-level security
is enforced by the backend, so this client only forwards the API key.
"""

from typing import Any

import httpx

from core.config import BACKEND_API_KEY, BACKEND_TIMEOUT_SECONDS, BACKEND_URL

Filter = tuple[str, str, Any]  # (column, operator, value), e.g. ("due_date", "gte", "2024-03-01")

FILTER_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "is", "in"}


class BackendError(Exception):
    """Raised when the data backend rejects or fails a request."""

    def __init__(self, table: str, message: str, status_code: int | None = None):
        self.table = table
        self.message = message
        self.status_code = status_code
        super().__init__(f"{table}: {message}" + (f" (HTTP {status_code})" if status_code else ""))


def build_query_params(
    filters: list[Filter] | None = None,
    columns: str = "*",
    order: str | None = None,
    ascending: bool = True,
) -> list[tuple[str, str]]:
    """
    Render select arguments as PostgREST query parameters.

    The same column may appear more than once (range filters), so a list of
    pairs is returned rather than a dict.
    """
    params = [("select", columns)]
    for column, operator, value in filters or []:
        if operator not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator '{operator}'")
        params.append((column, f"{operator}.{value}"))
    if order:
        params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))
    return params


class BackendClient:
    """Table-scoped select/insert/update over the hosted data backend."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = BACKEND_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=f"{base_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def select(
        self,
        table: str,
        filters: list[Filter] | None = None,
        columns: str = "*",
        order: str | None = None,
        ascending: bool = True,
    ) -> list[dict]:
        """Fetch rows from a table, in the order the backend returns them."""
        params = build_query_params(filters, columns, order, ascending)
        response = await self._request("GET", table, params=params)
        rows = response.json()
        if not isinstance(rows, list):
            raise BackendError(table, "Expected a list of rows")
        return rows

    async def insert(self, table: str, row: dict) -> dict:
        """Insert one row and return it as stored."""
        response = await self._request(
            "POST",
            table,
            json=row,
            headers={"Prefer": "return=representation"},
        )
        return _first_row(table, response.json())

    async def update(self, table: str, row_id: Any, values: dict) -> dict:
        """Update one row by id and return it as stored."""
        response = await self._request(
            "PATCH",
            table,
            params=[("id", f"eq.{row_id}")],
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return _first_row(table, response.json())

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, table: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, f"/{table}", **kwargs)
        except httpx.HTTPError as e:
            raise BackendError(table, f"Request failed: {e}") from e

        if response.is_error:
            raise BackendError(table, _error_message(response), response.status_code)
        return response


def _error_message(response: httpx.Response) -> str:
    """Pull the backend's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or str(body)
    return str(body)


def _first_row(table: str, body) -> dict:
    if isinstance(body, list):
        if not body:
            raise BackendError(table, "No row returned")
        return body[0]
    return body


_backend_client: BackendClient | None = None


def get_backend_client() -> BackendClient:
    """Get or create the backend client (lazy initialization)."""
    global _backend_client
    if _backend_client is None:
        if not BACKEND_URL:
            raise BackendError("config", "BACKEND_URL is not configured")
        _backend_client = BackendClient(BACKEND_URL, BACKEND_API_KEY)
    return _backend_client


async def close_backend_client() -> None:
    """Close the shared client, if one was created."""
    global _backend_client
    if _backend_client is not None:
        await _backend_client.aclose()
        _backend_client = None
