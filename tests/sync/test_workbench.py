from __future__ import annotations

import io

import pytest
import requests
from openpyxl import Workbook, load_workbook

from registros_system.auth.service import StaticCredentialAuthenticator
from registros_system.core.enums import NoticeLevel
from registros_system.core.exceptions import AuthenticationError
from registros_system.records.model import RecordDraft
from registros_system.staging.cache import StagingCache
from registros_system.staging.identifiers import AuthoritativeId, TemporaryId
from registros_system.staging.model import StagedRecord
from registros_system.staging.slot import JsonFileSlot
from registros_system.sync.client import SyncClient
from registros_system.sync.settings import ClientSettings
from registros_system.sync.workbench import Workbench

BASE = "http://testserver"


def _xlsx(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def bench(flask_session):
    return Workbench(SyncClient(BASE, session=flask_session), StagingCache())


def test_submit_incomplete_draft_notifies_and_stays_offline(bench, flask_session):
    assert bench.submit(RecordDraft(project="P", full_name="Ana")) is None

    assert bench.records == []
    assert flask_session.calls == []
    assert bench.drain_notices()[-1].message == "Por favor complete los campos requeridos"


def test_import_then_process_persists_and_reloads(bench, records_repo):
    payload = _xlsx(
        [
            ["Proyecto", "Centro de Operación", "Cargo", "Cédula", "Nombre", "Número", "Status"],
            ["Norte", "Cali", "Operario", 111, "Ana", 3001112233, "SI"],
            ["Sur", None, None, None, "Sin cédula", None, None],
            ["Este", "Bogotá", "Líder", 222, "Luis", None, "NO"],
        ]
    )

    assert bench.import_workbook(payload) == 2
    assert all(r.is_temporary for r in bench.records)

    result = bench.start_process()

    assert (result.accepted, result.total) == (2, 2)
    assert len(records_repo.rows) == 2
    assert all(isinstance(r.identifier, AuthoritativeId) for r in bench.records)
    assert {r.draft.full_name for r in bench.records} == {"Ana", "Luis"}
    messages = [n.message for n in bench.drain_notices()]
    assert "1 filas omitidas por campos obligatorios vacíos" in messages
    assert "Se guardaron 2 de 2 registros" in messages


def test_process_with_nothing_staged(bench, flask_session):
    result = bench.start_process()

    assert result.total == 0
    assert flask_session.calls == []
    assert bench.notices[-1].message == "No hay registros pendientes por procesar"


def test_process_keeps_rejected_records_staged(make_draft, scripted_session, response):
    session = scripted_session(
        [
            requests.ConnectionError("down"),
            response(201, {"ok": True, "id": 7}),
            response(200, {"ok": True, "data": [{"id": 7, "proyecto": "P", "cedula": "2", "nombre": "B"}]}),
        ]
    )
    bench = Workbench(SyncClient(BASE, session=session), StagingCache())
    bench.submit(make_draft(full_name="A"))
    bench.submit(make_draft(full_name="B"))

    result = bench.start_process()

    assert (result.accepted, result.total) == (1, 2)
    assert [r.draft.full_name for r in bench.records] == ["B", "A"]
    assert bench.records[1].is_temporary
    assert any(n.level is NoticeLevel.WARNING and "Fila 1 (A)" in n.message for n in bench.notices)


def test_delete_temporary_record_is_local(bench, flask_session, make_draft):
    record = bench.submit(make_draft())

    assert bench.delete(record.identifier) is True
    assert bench.records == []
    assert flask_session.calls == []


def test_delete_stored_record(bench, records_repo, make_draft):
    bench.submit(make_draft())
    bench.start_process()
    [stored] = bench.records

    assert bench.delete(stored.identifier) is True
    assert records_repo.rows == {}
    assert bench.records == []


def test_delete_unknown_record(bench):
    assert bench.delete(TemporaryId("zzzzzzzzz")) is False
    assert bench.notices[-1].message == "El registro ya no existe"


def test_refresh_keeps_staged_records(bench, records_repo, make_draft):
    records_repo.create(
        project="Viejo", operation_center=None, role=None, national_id="1", full_name="Z", phone_number=None,
        status=make_draft().status,
    )
    staged = bench.submit(make_draft())

    assert bench.refresh() is True
    assert [r.identifier for r in bench.records] == [AuthoritativeId(1), staged.identifier]


def test_open_restores_slot_without_fetching(tmp_path, flask_session, make_draft):
    slot = JsonFileSlot(tmp_path / "staging.json")
    slot.write([StagedRecord(TemporaryId("abc123xyz"), make_draft()).to_dict()])
    bench = Workbench(SyncClient(BASE, session=flask_session), StagingCache(slot))

    assert bench.open() is True
    assert flask_session.calls == []
    assert [r.identifier for r in bench.records] == [TemporaryId("abc123xyz")]


def test_open_fetches_when_slot_empty(tmp_path, flask_session):
    bench = Workbench(SyncClient(BASE, session=flask_session), StagingCache(JsonFileSlot(tmp_path / "s.json")))

    assert bench.open() is True
    assert flask_session.calls == [("GET", f"{BASE}/api/registros", None)]


def test_clear_all_failure_keeps_cache(bench, records_repo, make_draft):
    bench.submit(make_draft())
    records_repo.down = True

    assert bench.clear_all() is False
    assert len(bench.records) == 1
    assert bench.notices[-1].level is NoticeLevel.ERROR


def test_clear_all(bench, records_repo, make_draft):
    bench.submit(make_draft())
    bench.start_process()

    assert bench.clear_all() is True
    assert bench.records == []
    assert records_repo.rows == {}


def test_refresh_failure_reports_warning(bench, records_repo, make_draft):
    bench.submit(make_draft())
    records_repo.down = True

    assert bench.refresh() is False
    assert len(bench.records) == 1
    assert bench.notices[-1].level is NoticeLevel.WARNING


def test_export_writes_workbook(bench, make_draft, tmp_path):
    staged = bench.submit(make_draft())
    target = tmp_path / "out.xlsx"

    assert bench.export(target) is True

    ws = load_workbook(target).active
    header, row = list(ws.iter_rows(values_only=True))
    assert header[0] == "ID"
    assert row[0] == staged.identifier.text
    assert row[5] == "Juan Pérez"


def test_export_empty_set(bench, tmp_path):
    target = tmp_path / "out.xlsx"

    assert bench.export(target) is False
    assert not target.exists()
    assert bench.notices[-1].message == "No hay datos para exportar"


def test_write_template(bench, tmp_path):
    target = tmp_path / "plantilla.xlsx"
    bench.write_template(target)

    ws = load_workbook(target).active
    assert next(ws.iter_rows(values_only=True))[0] == "PROYECTO"


def test_login_required_when_authenticator_configured(flask_session, make_draft):
    bench = Workbench(
        SyncClient(BASE, session=flask_session),
        StagingCache(),
        authenticator=StaticCredentialAuthenticator.from_plain("admin", "s3cret"),
    )

    with pytest.raises(AuthenticationError):
        bench.submit(make_draft())

    assert bench.login("admin", "wrong") is False
    assert bench.login("admin", "s3cret") is True
    assert bench.current_user == "admin"
    assert bench.submit(make_draft()) is not None

    bench.logout()
    with pytest.raises(AuthenticationError):
        bench.refresh()


def test_from_settings_wires_slot_and_authenticator(tmp_path):
    settings = ClientSettings.from_env(
        {
            "REGISTROS_API_URL": "http://api.local:3001",
            "REGISTROS_CACHE_PATH": str(tmp_path / "cache.json"),
            "APP_USERNAME": "admin",
            "APP_PASSWORD": "s3cret",
        }
    )

    bench = Workbench.from_settings(settings)

    assert bench.cache.durable is True
    with pytest.raises(AuthenticationError):
        bench.open()


def test_process_again_after_failed_reload_does_not_resend(flask_session, records_repo, make_draft):
    class ReloadDown:
        def __init__(self, inner):
            self._inner = inner

        def request(self, method, url, json=None, timeout=None):
            if method == "GET":
                raise requests.ConnectionError("down")
            return self._inner.request(method, url, json=json, timeout=timeout)

    bench = Workbench(SyncClient(BASE, session=ReloadDown(flask_session)), StagingCache())
    bench.submit(make_draft(full_name="Ana"))

    first = bench.start_process()
    second = bench.start_process()

    assert (first.accepted, first.refreshed) == (1, False)
    assert second.total == 0
    assert len(records_repo.rows) == 1
    assert [r.identifier for r in bench.records] == [AuthoritativeId(1)]


def test_import_legacy_xls_notifies(bench):
    assert bench.import_workbook(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64) == 0

    notice = bench.notices[-1]
    assert notice.level is NoticeLevel.ERROR
    assert ".xlsx" in notice.message
