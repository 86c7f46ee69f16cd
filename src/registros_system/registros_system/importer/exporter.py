from __future__ import annotations

import io
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from ..core.constants import (
    EXPORT_SHEET_NAME,
    PROJECTS,
    PROJECTS_SHEET_NAME,
    TEMPLATE_FILENAME,
    TEMPLATE_SHEET_NAME,
)
from ..core.enums import ActiveStatus
from ..core.exceptions import EmptyExportError
from ..records.model import RecordDraft

TEMPLATE_COLUMNS = ["PROYECTO", "CENTRO DE OPERACIÓN", "CARGO", "CEDULA", "NOMBRE", "NUMERO", "STATUS"]
EXPORT_COLUMNS = ["ID", *TEMPLATE_COLUMNS]

TEMPLATE_WIDTHS = [30, 25, 15, 15, 30, 15, 10]
EXPORT_WIDTHS = [8, *TEMPLATE_WIDTHS]

TEMPLATE_EXAMPLE = {
    "PROYECTO": "Ejemplo: Proyecto Norte",
    "CENTRO DE OPERACIÓN": "Ejemplo: Cali",
    "CARGO": "Ejemplo: Operario",
    "CEDULA": "12345678",
    "NOMBRE": "Ejemplo: Juan Pérez",
    "NUMERO": "3001234567",
    "STATUS": ActiveStatus.ACTIVE.value,
}


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"datos_empleados_{today.isoformat()}.xlsx"


def template_filename() -> str:
    return TEMPLATE_FILENAME


def export_row(record_id: Any, draft: RecordDraft) -> dict[str, Any]:
    return {
        "ID": record_id,
        "PROYECTO": draft.project,
        "CENTRO DE OPERACIÓN": draft.operation_center,
        "CARGO": draft.role,
        "CEDULA": draft.national_id,
        "NOMBRE": draft.full_name,
        "NUMERO": draft.phone_number,
        "STATUS": draft.status.value,
    }


def _fill_sheet(writer, rows: Iterable[Mapping[str, Any]], *, columns: Sequence[str], widths: Sequence[int], sheet: str) -> None:
    pd.DataFrame(list(rows), columns=list(columns)).to_excel(writer, index=False, sheet_name=sheet)
    ws = writer.sheets[sheet]
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def _write_sheet(rows: Iterable[Mapping[str, Any]], *, columns: Sequence[str], widths: Sequence[int], sheet: str) -> bytes:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        _fill_sheet(writer, rows, columns=columns, widths=widths, sheet=sheet)
    return out.getvalue()


def export_records(rows: Sequence[Mapping[str, Any]]) -> bytes:
    """Serialize export rows (see export_row) into an .xlsx workbook."""
    if not rows:
        raise EmptyExportError("No hay datos para exportar")
    return _write_sheet(rows, columns=EXPORT_COLUMNS, widths=EXPORT_WIDTHS, sheet=EXPORT_SHEET_NAME)


def build_template() -> bytes:
    """Import template: example row first, then the project catalog on its own sheet."""
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        _fill_sheet(writer, [TEMPLATE_EXAMPLE], columns=TEMPLATE_COLUMNS, widths=TEMPLATE_WIDTHS, sheet=TEMPLATE_SHEET_NAME)
        _fill_sheet(
            writer,
            [{"PROYECTO": name} for name in PROJECTS],
            columns=["PROYECTO"],
            widths=[40],
            sheet=PROJECTS_SHEET_NAME,
        )
    return out.getvalue()
