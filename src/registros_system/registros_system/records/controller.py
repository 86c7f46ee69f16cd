from __future__ import annotations

import io
import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request, send_file

from ..container import Container
from ..core.exceptions import EmptyExportError, ValidationError
from ..importer.exporter import build_template, export_filename, export_records, export_row, template_filename
from .wire import draft_from_wire, record_to_wire

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def _error(message: str, status: int):
        return jsonify({"ok": False, "error": message}), status

    def _xlsx(payload: bytes, filename: str):
        return send_file(io.BytesIO(payload), mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    @app.route("/api/test-db", methods=["GET"], endpoint="test_db")
    def test_db():
        try:
            container.record_service.check_database()
            return jsonify({"ok": True, "message": "Conectado a MySQL"})
        except Exception as e:
            logger.error("Error DB: %s", e)
            return _error(str(e), 500)

    @app.route("/api/registros", methods=["GET"], endpoint="list_records")
    def list_records():
        try:
            records = container.record_service.list_records()
            return jsonify({"ok": True, "data": [record_to_wire(r) for r in records]})
        except Exception:
            logger.exception("Error obteniendo registros")
            return _error("Error obteniendo registros", 500)

    @app.route("/api/registros", methods=["POST"], endpoint="create_record")
    def create_record():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _error("Campos obligatorios faltantes", 400)

        try:
            record_id = container.record_service.create_record(draft_from_wire(payload))
            return jsonify({"ok": True, "id": record_id}), 201
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Error guardando registro")
            return _error("Error guardando registro", 500)

    @app.route("/api/registros/<record_id>", methods=["DELETE"], endpoint="delete_record")
    def delete_record(record_id: str):
        if not record_id.isdigit():
            # Never stored, so there is nothing to delete.
            return jsonify({"ok": True, "message": "Registro eliminado"})
        try:
            container.record_service.delete_record(int(record_id))
            return jsonify({"ok": True, "message": "Registro eliminado"})
        except Exception:
            logger.exception("Error eliminando registro %s", record_id)
            return _error("Error eliminando registro", 500)

    @app.route("/api/registros", methods=["DELETE"], endpoint="delete_all_records")
    def delete_all_records():
        try:
            container.record_service.delete_all()
            return jsonify({"ok": True, "message": "Todos los registros eliminados"})
        except Exception:
            logger.exception("Error limpiando registros")
            return _error("Error limpiando registros", 500)

    @app.route("/api/registros/export", methods=["GET"], endpoint="export_records")
    def export_all():
        try:
            records = container.record_service.list_records()
            payload = export_records([export_row(r.record_id, r.to_draft()) for r in records])
        except EmptyExportError as e:
            return _error(str(e), 404)
        except Exception:
            logger.exception("Error exportando registros")
            return _error("Error exportando registros", 500)
        return _xlsx(payload, export_filename())

    @app.route("/api/registros/plantilla", methods=["GET"], endpoint="records_template")
    def template():
        return _xlsx(build_template(), template_filename())
