from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "registros_system"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from registros_system.database.bootstrap import apply_schema, count_records, list_tables
from registros_system.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{DBConfig.from_dict(db_config).describe()} "
        f"(tables={len(tables)}, registros={count_records(db_config)})"
    )


if __name__ == "__main__":
    main()
