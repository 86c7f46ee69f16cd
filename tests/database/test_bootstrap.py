from registros_system.database.bootstrap import DEFAULT_SCHEMA_PATH, _strip_create_db_and_use, iter_sql_statements
from registros_system.database.connection import DBConfig


def test_split_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");\n  ;\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_split_handles_escaped_quote():
    assert list(iter_sql_statements("SELECT 'it\\'s;fine'; SELECT 2;")) == ["SELECT 'it\\'s;fine'", "SELECT 2"]


def test_schema_creates_registros_table():
    sql = _strip_create_db_and_use(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    assert any("CREATE TABLE IF NOT EXISTS registros" in s for s in statements)


def test_db_config_from_dict_defaults():
    cfg = DBConfig.from_dict({"user": "root", "database": "registros_db"})

    assert cfg.port == 3306
    assert cfg.connect_timeout == 5
    assert "registros_db" in cfg.describe()
