"""Bulk import: spreadsheet rows -> record drafts.

Row 0 holds the headers. Each field is located by case-insensitive
substring match of its candidate names against the headers; the leftmost
matching column wins. Drafts are not validated here, the staging cache
decides which ones it accepts.
"""
from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import IO, Any, Optional, Sequence, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..core.enums import ActiveStatus
from ..core.exceptions import EmptyFileError, ImportFileError, NoValidRowsError, UnsupportedFormatError
from ..records.model import RecordDraft

logger = logging.getLogger(__name__)

WorkbookSource = Union[str, Path, bytes, IO[bytes]]

COLUMN_CANDIDATES: dict[str, tuple[str, ...]] = {
    "project": ("proyecto",),
    "operation_center": ("centro", "operacion", "operación"),
    "role": ("cargo",),
    "national_id": ("cedula", "cédula"),
    "full_name": ("nombre",),
    "phone_number": ("numero", "número", "telefono", "teléfono"),
    "status": ("status", "estado"),
}


def normalize_header(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def cell_text(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Excel stores numeric ids and phones as floats.
        return str(int(value))
    return str(value).strip()


def match_columns(headers: Sequence[str]) -> dict[str, Optional[int]]:
    columns: dict[str, Optional[int]] = {}
    for field, names in COLUMN_CANDIDATES.items():
        columns[field] = next(
            (i for i, header in enumerate(headers) if any(name in header for name in names)),
            None,
        )
    return columns


def parse_rows(rows: Sequence[Sequence[Any]]) -> list[RecordDraft]:
    rows = list(rows)
    if len(rows) < 2:
        raise EmptyFileError("El archivo está vacío o no tiene datos")

    columns = match_columns([normalize_header(h) for h in rows[0]])

    drafts: list[RecordDraft] = []
    for row in rows[1:]:
        cells = list(row or ())
        if not any(cells):
            continue

        def value_of(field: str) -> str:
            idx = columns[field]
            if idx is None or idx >= len(cells):
                return ""
            return cell_text(cells[idx])

        drafts.append(
            RecordDraft(
                project=value_of("project"),
                operation_center=value_of("operation_center"),
                role=value_of("role"),
                national_id=value_of("national_id"),
                full_name=value_of("full_name"),
                phone_number=value_of("phone_number"),
                status=ActiveStatus.parse(value_of("status")),
            )
        )

    if not drafts:
        raise NoValidRowsError("No se encontraron datos válidos en el archivo")
    return drafts


# Compound File header of the binary Excel 97-2003 format.
LEGACY_XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def _is_legacy_xls(source: WorkbookSource) -> bool:
    if isinstance(source, (str, Path)):
        if Path(source).suffix.lower() == ".xls":
            return True
        try:
            with open(source, "rb") as fh:
                return fh.read(len(LEGACY_XLS_MAGIC)) == LEGACY_XLS_MAGIC
        except OSError:
            return False
    if isinstance(source, (bytes, bytearray)):
        return bytes(source[: len(LEGACY_XLS_MAGIC)]) == LEGACY_XLS_MAGIC
    if hasattr(source, "seekable") and source.seekable():
        pos = source.tell()
        head = source.read(len(LEGACY_XLS_MAGIC))
        source.seek(pos)
        return head == LEGACY_XLS_MAGIC
    return False


def read_workbook(source: WorkbookSource) -> list[list[Any]]:
    """Cell values of the first worksheet, row by row. Only .xlsx is supported."""
    if _is_legacy_xls(source):
        raise UnsupportedFormatError("Formato .xls no soportado: guarde el archivo como .xlsx e intente de nuevo")
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        wb = load_workbook(filename=source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        logger.warning("Error parsing Excel: %s", e)
        raise ImportFileError("Error al procesar el archivo Excel") from e

    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]
        return [list(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def parse_workbook(source: WorkbookSource) -> list[RecordDraft]:
    return parse_rows(read_workbook(source))
