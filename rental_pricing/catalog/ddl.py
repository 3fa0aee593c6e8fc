"""DDL helpers for the catalog tables."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine

PROJECT_ROOT = Path(__file__).resolve().parents[2]

CATALOG_DDL_PATH = PROJECT_ROOT / "sql/ddl/catalog_tables.sql"


def split_statements(sql_text: str) -> list[str]:
    statements = []
    for chunk in sql_text.split(";"):
        lines = [line for line in chunk.splitlines() if not line.strip().startswith("--")]
        statement = "\n".join(lines).strip()
        if statement:
            statements.append(statement)
    return statements


def apply_catalog_ddl(engine: Engine, ddl_path: Path | None = None) -> None:
    """Apply the catalog DDL one statement at a time inside a single transaction."""

    path = ddl_path or CATALOG_DDL_PATH
    if not path.exists():
        raise FileNotFoundError(f"No DDL file found at {path}")
    sql_text = path.read_text(encoding="utf-8")
    with engine.begin() as connection:
        for statement in split_statements(sql_text):
            connection.exec_driver_sql(statement)
