"""Dump the registros table to backups/registros_<timestamp>.sql.

Needs `mysqldump` on PATH. The password reaches mysqldump through
MYSQL_PWD, never on the command line.
"""

from __future__ import annotations

import argparse
import importlib
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

DEFAULT_TABLES = ("registros",)


def dump_command(db: Mapping, tables=DEFAULT_TABLES) -> list[str]:
    return [
        "mysqldump",
        "--single-transaction",
        f"--host={db.get('host') or 'localhost'}",
        f"--port={int(db.get('port') or 3306)}",
        f"--user={db.get('user') or 'root'}",
        str(db["database"]),
        *tables,
    ]


def dump_env(db: Mapping, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    if db.get("password"):
        env["MYSQL_PWD"] = str(db["password"])
    else:
        env.pop("MYSQL_PWD", None)
    return env


def backup_path(out_dir: Path, now: Optional[datetime] = None) -> Path:
    ts = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return out_dir / f"registros_{ts}.sql"


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--out-dir", type=Path, default=REPO_ROOT / "backups")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    db = importlib.import_module(get_settings_module()).DB_CONFIG

    args.out_dir.mkdir(parents=True, exist_ok=True)
    out_file = backup_path(args.out_dir)

    try:
        with out_file.open("wb") as f:
            subprocess.run(dump_command(db), stdout=f, stderr=subprocess.PIPE, env=dump_env(db), check=True)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools.")
    except subprocess.CalledProcessError as e:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump failed: {e.stderr.decode(errors='replace').strip()}")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
