from __future__ import annotations

from typing import Any, Optional

import pytest

from registros_system import create_app
from registros_system.container import build_container_for
from registros_system.core.enums import ActiveStatus
from registros_system.records.model import Record, RecordDraft

BASE_URL = "http://testserver"


class InMemoryRecords:
    def __init__(self):
        self.rows: dict[int, Record] = {}
        self._id = 0
        self.down = False

    def list_all(self):
        self._check()
        return sorted(self.rows.values(), key=lambda r: r.record_id, reverse=True)

    def create(self, *, project, operation_center, role, national_id, full_name, phone_number, status) -> int:
        self._check()
        self._id += 1
        self.rows[self._id] = Record(
            record_id=self._id,
            project=project,
            national_id=national_id,
            full_name=full_name,
            operation_center=operation_center,
            role=role,
            phone_number=phone_number,
            status=status,
        )
        return self._id

    def delete_by_id(self, record_id: int) -> int:
        self._check()
        return 1 if self.rows.pop(int(record_id), None) else 0

    def delete_all(self) -> int:
        self._check()
        removed = len(self.rows)
        self.rows.clear()
        return removed

    def ping(self) -> None:
        self._check()

    def _check(self) -> None:
        if self.down:
            raise ConnectionError("MySQL no disponible")


class FakeResponse:
    def __init__(self, status_code: int, body: Optional[Any] = None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class ScriptedSession:
    """Answers requests from a fixed list (a response or an exception to raise)."""

    def __init__(self, responses=()):
        self._responses = list(responses)
        self.calls: list[tuple[str, str, Optional[dict]]] = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FlaskSession:
    """requests-like session that forwards to a Flask test client."""

    def __init__(self, client, base_url: str = BASE_URL):
        self._client = client
        self._base_url = base_url
        self.calls: list[tuple[str, str, Optional[dict]]] = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        resp = self._client.open(url[len(self._base_url):], method=method, json=json)
        return FakeResponse(resp.status_code, resp.get_json(silent=True))


@pytest.fixture
def records_repo():
    return InMemoryRecords()


@pytest.fixture
def app(records_repo, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=build_container_for(records_repo))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def flask_session(client):
    return FlaskSession(client)


@pytest.fixture
def make_draft():
    def _make(**overrides) -> RecordDraft:
        values = dict(
            project="Proyecto Norte",
            operation_center="Cali",
            role="Operario",
            national_id="12345678",
            full_name="Juan Pérez",
            phone_number="3001234567",
            status=ActiveStatus.ACTIVE,
        )
        values.update(overrides)
        return RecordDraft(**values)

    return _make


@pytest.fixture
def scripted_session():
    return ScriptedSession


@pytest.fixture
def response():
    return FakeResponse
