"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.backend_client import BackendClient  # noqa: E402

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """
    In-memory stand-in for the PostgREST-style data backend.

    Applies eq/gte/gt/lte/lt filters by string comparison (ISO dates sort
    lexically) and honours `order`. Tables listed in `fail_tables` answer 500.
    """

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.fail_tables: set[str] = set()
        self.requests: list[tuple[str, str, list[tuple[str, str]]]] = []
        self._next_id = 1000

    def selects(self, table: str) -> list[list[tuple[str, str]]]:
        """Query params of every GET issued against `table`."""
        return [params for method, name, params in self.requests if method == "GET" and name == table]

    def handle(self, request: httpx.Request) -> httpx.Response:
        table = request.url.path.rsplit("/", 1)[-1]
        params = list(request.url.params.multi_items())
        self.requests.append((request.method, table, params))

        if table in self.fail_tables:
            return httpx.Response(500, json={"message": f"relation {table} unavailable"})

        rows = self.tables.setdefault(table, [])
        if request.method == "GET":
            return httpx.Response(200, json=self._query(rows, params))
        if request.method == "POST":
            row = json.loads(request.content)
            row.setdefault("id", self._next_id)
            self._next_id += 1
            rows.append(row)
            return httpx.Response(201, json=[row])
        if request.method == "PATCH":
            row_id = dict(params)["id"].split(".", 1)[1]
            for row in rows:
                if str(row.get("id")) == row_id:
                    row.update(json.loads(request.content))
                    return httpx.Response(200, json=[row])
            return httpx.Response(200, json=[])
        return httpx.Response(405, json={"message": "method not allowed"})

    @staticmethod
    def _query(rows: list[dict], params: list[tuple[str, str]]) -> list[dict]:
        result = list(rows)
        order = None
        for key, raw in params:
            if key == "select":
                continue
            if key == "order":
                order = raw
                continue
            op, value = raw.split(".", 1)
            result = [row for row in result if _matches(row.get(key), op, value)]
        if order:
            column, direction = order.rsplit(".", 1)
            result.sort(key=lambda r: str(r.get(column) or ""), reverse=direction == "desc")
        return result


def _matches(field, op: str, value: str) -> bool:
    if field is None:
        return False
    field = str(field)
    return {
        "eq": field == value,
        "neq": field != value,
        "gte": field >= value,
        "gt": field > value,
        "lte": field <= value,
        "lt": field < value,
    }[op]


def make_client(backend: FakeBackend) -> BackendClient:
    return BackendClient(BACKEND_URL, "test-key", transport=httpx.MockTransport(backend.handle))


@pytest.fixture
def fake_backend():
    """Backend seeded with a few March 2024 tasks and leave requests."""
    return FakeBackend(
        {
            "tasks": [
                {"id": 1, "title": "Call Acme", "due_date": "2024-03-07T00:00:00Z", "status": "todo"},
                {"id": 2, "title": "Send proposal", "due_date": "2024-03-07", "status": "todo"},
                {"id": 3, "title": "Month end", "due_date": "2024-03-31T16:30:00+00:00"},
                {"id": 4, "title": "April kickoff", "due_date": "2024-04-02"},
                {"id": 5, "title": "Late February", "due_date": "2024-02-29"},
            ],
            "leave_requests": [
                {
                    "id": 10,
                    "employee_id": 7,
                    "start_date": "2024-03-05",
                    "end_date": "2024-03-08",
                    "leave_type": "vacation",
                    "status": "approved",
                    "employee": {"full_name": "Dana Reyes"},
                },
                {
                    "id": 11,
                    "employee_id": 8,
                    "start_date": "2024-02-27",
                    "end_date": "2024-03-02",
                    "leave_type": "sick",
                },
                {
                    "id": 12,
                    "employee_id": 9,
                    "start_date": "2024-04-10",
                    "end_date": "2024-04-12",
                },
            ],
        }
    )


@pytest.fixture
def backend_client(fake_backend):
    """BackendClient wired to the in-memory fake backend."""
    return make_client(fake_backend)


@pytest.fixture
def request_log_db(tmp_path):
    """Temporary request-log database with the schema applied."""
    from core.database import create_schema, get_connection

    db_path = tmp_path / "requests.db"
    conn = get_connection(db_path)
    create_schema(conn)
    conn.close()
    return db_path
