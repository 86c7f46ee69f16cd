from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional, Sequence

import requests

from ..core.constants import DEFAULT_API_PORT, DEFAULT_HTTP_TIMEOUT
from ..core.exceptions import PersistenceError, SyncError, TransportError
from ..records.model import RecordDraft
from ..records.wire import draft_to_wire, record_from_row
from ..staging.cache import StagingCache
from ..staging.identifiers import AuthoritativeId, Identifier, TemporaryId
from ..staging.model import StagedRecord
from .results import BulkSaveResult, CommitResult, DeleteOutcome, FetchResult, ItemFailure, SaveOutcome

logger = logging.getLogger(__name__)

API_URL_ENV = "REGISTROS_API_URL"


def _promote_saved(pending: Sequence[StagedRecord], saved: BulkSaveResult) -> dict[Identifier, StagedRecord]:
    """Map each accepted temporary id to the record under its new storage id."""
    failed = {f.index for f in saved.failures}
    accepted = [r for i, r in enumerate(pending) if i not in failed]
    return {
        r.identifier: StagedRecord(identifier=AuthoritativeId(record_id), draft=r.draft)
        for r, record_id in zip(accepted, saved.saved_ids)
    }


def resolve_api_url(env: Optional[Mapping[str, str]] = None, hostname: Optional[str] = None) -> str:
    """Base URL of the records API.

    REGISTROS_API_URL wins; otherwise the API is assumed to run on the same
    host as the client, on port 3001.
    """
    env = os.environ if env is None else env
    configured = (env.get(API_URL_ENV) or "").strip()
    if configured:
        return configured.rstrip("/")
    return f"http://{hostname or 'localhost'}:{DEFAULT_API_PORT}"


class SyncClient:
    """Talks to the records API and reconciles the staging cache with it.

    No method raises on network or API failures: each one returns a result
    object carrying the error, and logs it.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        self._base_url = (base_url or resolve_api_url()).rstrip("/")
        self._session = session or requests.Session()
        self._timeout = float(timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(self, method: str, path: str, *, payload: Optional[dict] = None) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path}: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise PersistenceError(
                f"{method} {path}: respuesta inválida (HTTP {resp.status_code})", status_code=resp.status_code
            ) from e

        if not isinstance(body, dict) or not body.get("ok"):
            message = body.get("error") if isinstance(body, dict) else None
            raise PersistenceError(message or f"HTTP {resp.status_code}", status_code=resp.status_code)
        return body

    def fetch_all(self) -> FetchResult:
        try:
            body = self._request("GET", "/api/registros")
            records = [record_from_row(row) for row in body.get("data") or []]
        except SyncError as e:
            logger.warning("Error obteniendo registros: %s", e)
            return FetchResult(error=e)
        except (KeyError, TypeError, ValueError) as e:
            error = PersistenceError(f"Registro mal formado: {e}")
            logger.warning("Error obteniendo registros: %s", error)
            return FetchResult(error=error)
        return FetchResult(records=records)

    def save_one(self, draft: RecordDraft) -> SaveOutcome:
        try:
            body = self._request("POST", "/api/registros", payload=draft_to_wire(draft))
            record_id = int(body["id"])
        except SyncError as e:
            logger.warning("Error guardando registro (cedula=%s): %s", draft.national_id, e)
            return SaveOutcome(ok=False, error=e)
        except (KeyError, TypeError, ValueError) as e:
            error = PersistenceError(f"Respuesta sin id: {e}")
            logger.warning("Error guardando registro (cedula=%s): %s", draft.national_id, error)
            return SaveOutcome(ok=False, error=error)
        return SaveOutcome(ok=True, record_id=record_id)

    def save_many(self, drafts: Sequence[RecordDraft]) -> BulkSaveResult:
        """Save one draft at a time; a failed item is recorded and skipped, never retried."""
        saved_ids: list[int] = []
        failures: list[ItemFailure] = []

        for index, draft in enumerate(drafts):
            outcome = self.save_one(draft)
            if outcome.ok and outcome.record_id is not None:
                saved_ids.append(outcome.record_id)
            else:
                failures.append(ItemFailure(index=index, draft=draft, reason=str(outcome.error)))

        result = BulkSaveResult(accepted=len(saved_ids), total=len(drafts), failures=failures, saved_ids=saved_ids)
        logger.info("save_many: %d/%d guardados", result.accepted, result.total)
        return result

    def delete_one(self, identifier: Identifier) -> DeleteOutcome:
        if isinstance(identifier, TemporaryId):
            # Never persisted; removing it from the cache is enough.
            return DeleteOutcome(ok=True, skipped=True)
        if not isinstance(identifier, AuthoritativeId):
            raise TypeError(f"Unsupported identifier: {identifier!r}")

        try:
            self._request("DELETE", f"/api/registros/{identifier.value}")
        except SyncError as e:
            logger.warning("Error eliminando registro %s: %s", identifier, e)
            return DeleteOutcome(ok=False, error=e)
        return DeleteOutcome(ok=True)

    def delete_all(self) -> DeleteOutcome:
        try:
            self._request("DELETE", "/api/registros")
        except SyncError as e:
            logger.warning("Error limpiando registros: %s", e)
            return DeleteOutcome(ok=False, error=e)
        return DeleteOutcome(ok=True)

    def commit_staged(self, records: Sequence[StagedRecord], *, cache: Optional[StagingCache] = None) -> CommitResult:
        """Persist the temporary records, then reload the authoritative list.

        Records that already carry an authoritative id are not sent again.
        When a cache is given and the reload succeeds, the cache becomes the
        authoritative set plus the records of this batch that failed to save.
        When the reload fails, the records that were saved switch to their
        storage ids in place, so committing again never sends them twice.
        """
        pending = [r for r in records if r.is_temporary]
        if not pending:
            return CommitResult(accepted=0, total=0)

        saved = self.save_many([r.draft for r in pending])
        fetched = self.fetch_all()

        if cache is not None:
            if fetched.ok:
                unsaved = [pending[f.index] for f in saved.failures]
                cache.replace_all([*(StagedRecord.from_record(r) for r in fetched.records), *unsaved])
            else:
                # Accepted records take their storage id even without the reload.
                promoted = _promote_saved(pending, saved)
                cache.replace_all([promoted.get(r.identifier, r) for r in cache.records])

        return CommitResult(
            accepted=saved.accepted,
            total=saved.total,
            failures=saved.failures,
            refreshed=fetched.ok,
            refresh_error=fetched.error,
        )

    def health(self) -> bool:
        try:
            resp = self._session.request("GET", f"{self._base_url}/health", timeout=self._timeout)
            body = resp.json()
            return resp.ok and isinstance(body, dict) and body.get("status") == "ok"
        except (requests.RequestException, ValueError) as e:
            logger.warning("Health check failed: %s", e)
            return False

    def test_database(self) -> tuple[bool, str]:
        try:
            body = self._request("GET", "/api/test-db")
        except SyncError as e:
            return False, str(e)
        return True, str(body.get("message") or "")
