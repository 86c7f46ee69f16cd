from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests

from ..auth.service import Authenticator, StaticCredentialAuthenticator
from ..core.enums import NoticeLevel
from ..core.exceptions import AuthenticationError, EmptyExportError, ImportFileError, ValidationError
from ..importer.exporter import build_template, export_records, export_row
from ..importer.parser import WorkbookSource, parse_workbook
from ..records.model import RecordDraft
from ..staging.cache import StagingCache
from ..staging.identifiers import Identifier
from ..staging.model import StagedRecord
from ..staging.slot import JsonFileSlot
from .client import SyncClient
from .results import CommitResult
from .settings import ClientSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


class Workbench:
    """What the user does on the records screen, without the screen.

    Every action reports to the user through notices and returns a plain
    result; sync failures never propagate. The one exception is
    AuthenticationError when an authenticator is configured and nobody has
    logged in yet.
    """

    def __init__(
        self,
        client: SyncClient,
        cache: StagingCache,
        *,
        authenticator: Optional[Authenticator] = None,
    ):
        self._client = client
        self._cache = cache
        self._authenticator = authenticator
        self._user: Optional[str] = None
        self._notices: list[Notice] = []

    @classmethod
    def from_settings(cls, settings: ClientSettings, *, session: Optional[requests.Session] = None) -> "Workbench":
        slot = JsonFileSlot(settings.cache_path) if settings.cache_path else None
        authenticator = StaticCredentialAuthenticator.from_settings(
            settings.username,
            password_hash=settings.password_hash,
            password=settings.password,
        )
        return cls(
            SyncClient(settings.api_url, session=session, timeout=settings.timeout),
            StagingCache(slot),
            authenticator=authenticator,
        )

    @property
    def cache(self) -> StagingCache:
        return self._cache

    @property
    def records(self) -> list[StagedRecord]:
        return self._cache.records

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    @property
    def current_user(self) -> Optional[str]:
        return self._user

    def drain_notices(self) -> list[Notice]:
        out, self._notices = self._notices, []
        return out

    def _notify(self, level: NoticeLevel, message: str) -> None:
        self._notices.append(Notice(level, message))
        if level in (NoticeLevel.WARNING, NoticeLevel.ERROR):
            logger.warning(message)

    def _require_login(self) -> None:
        if self._authenticator is not None and self._user is None:
            raise AuthenticationError("Inicie sesión para continuar")

    def login(self, username: str, password: str) -> bool:
        if self._authenticator is None:
            self._user = username
            return True
        try:
            self._user = self._authenticator.authenticate(username, password)
        except AuthenticationError as e:
            self._notify(NoticeLevel.ERROR, str(e))
            return False
        self._notify(NoticeLevel.SUCCESS, "Bienvenido al sistema")
        return True

    def logout(self) -> None:
        self._user = None

    def open(self) -> bool:
        """Restore the saved working set, or load it from the API when there is none."""
        self._require_login()
        if self._cache.restore():
            self._notify(NoticeLevel.INFO, f"{len(self._cache)} registros restaurados")
            return True
        return self.refresh()

    def refresh(self) -> bool:
        """Reload stored records; records not yet processed stay staged."""
        self._require_login()
        fetched = self._client.fetch_all()
        if not fetched.ok:
            self._notify(NoticeLevel.WARNING, f"No se pudieron cargar los registros: {fetched.error}")
            return False

        staged = self._cache.staged()
        self._cache.replace_all([*(StagedRecord.from_record(r) for r in fetched.records), *staged])
        return True

    def submit(self, draft: RecordDraft) -> Optional[StagedRecord]:
        self._require_login()
        try:
            record = self._cache.add_one(draft)
        except ValidationError:
            self._notify(NoticeLevel.ERROR, "Por favor complete los campos requeridos")
            return None
        self._notify(NoticeLevel.SUCCESS, "Registro agregado exitosamente")
        return record

    def import_workbook(self, source: WorkbookSource) -> int:
        self._require_login()
        try:
            drafts = parse_workbook(source)
        except ImportFileError as e:
            self._notify(NoticeLevel.ERROR, str(e))
            return 0

        result = self._cache.add_many(drafts)
        if result.rejected:
            self._notify(NoticeLevel.WARNING, f"{len(result.rejected)} filas omitidas por campos obligatorios vacíos")
        if result.added:
            self._notify(NoticeLevel.SUCCESS, f"{len(result.added)} registros cargados exitosamente")
        return len(result.added)

    def start_process(self) -> CommitResult:
        """Send every staged record to the API and reload the stored list."""
        self._require_login()
        staged = self._cache.staged()
        if not staged:
            self._notify(NoticeLevel.INFO, "No hay registros pendientes por procesar")
            return CommitResult(accepted=0, total=0)

        result = self._client.commit_staged(staged, cache=self._cache)
        level = NoticeLevel.SUCCESS if result.accepted == result.total else NoticeLevel.WARNING
        self._notify(level, f"Se guardaron {result.accepted} de {result.total} registros")
        for failure in result.failures:
            self._notify(NoticeLevel.WARNING, f"Fila {failure.index + 1} ({failure.draft.full_name}): {failure.reason}")
        if not result.refreshed:
            self._notify(NoticeLevel.WARNING, f"No se pudo recargar la lista: {result.refresh_error}")
        return result

    def delete(self, identifier: Identifier) -> bool:
        self._require_login()
        if self._cache.get(identifier) is None:
            self._notify(NoticeLevel.WARNING, "El registro ya no existe")
            return False

        outcome = self._client.delete_one(identifier)
        if not outcome.ok:
            self._notify(NoticeLevel.ERROR, f"No se pudo eliminar el registro: {outcome.error}")
            return False

        self._cache.remove(identifier)
        self._notify(NoticeLevel.SUCCESS, "Registro eliminado")
        return True

    def clear_all(self) -> bool:
        """Wipe the stored table and the working set. Confirmation is the caller's job."""
        self._require_login()
        outcome = self._client.delete_all()
        if not outcome.ok:
            self._notify(NoticeLevel.ERROR, f"No se pudieron eliminar los registros: {outcome.error}")
            return False

        self._cache.clear()
        self._notify(NoticeLevel.SUCCESS, "Todos los registros han sido eliminados")
        return True

    def export(self, path: str | Path) -> bool:
        self._require_login()
        rows = [export_row(r.identifier.text, r.draft) for r in self._cache]
        try:
            payload = export_records(rows)
        except EmptyExportError as e:
            self._notify(NoticeLevel.ERROR, str(e))
            return False

        Path(path).write_bytes(payload)
        self._notify(NoticeLevel.SUCCESS, "Archivo exportado exitosamente")
        return True

    def write_template(self, path: str | Path) -> None:
        Path(path).write_bytes(build_template())
        self._notify(NoticeLevel.SUCCESS, "Plantilla descargada exitosamente")
