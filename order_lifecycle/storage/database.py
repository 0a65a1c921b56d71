"""SQLite connections for the document store, plus numbered schema migrations."""

import importlib
import sqlite3
from pathlib import Path

MIGRATIONS_PACKAGE = "order_lifecycle.storage.migrations"


def connect(db_path: str | Path, busy_timeout: float = 5.0) -> sqlite3.Connection:
    """Open a WAL-mode connection whose rows are addressable by column name.

    Parent directories are created as needed. ``busy_timeout`` is how many
    seconds a writer waits on another connection's lock before failing.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=busy_timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def applied_migrations(conn: sqlite3.Connection) -> set[str]:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()
    return {row["version"] for row in conn.execute("SELECT version FROM schema_versions")}


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending ``v###_*`` modules in name order; return the names applied."""
    done = applied_migrations(conn)
    newly_applied = []
    for name in _discover_migrations():
        if name in done:
            continue
        module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        module.up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()
        newly_applied.append(name)
    return newly_applied


def _discover_migrations() -> list[str]:
    migrations_dir = Path(__file__).parent / "migrations"
    return sorted(p.stem for p in migrations_dir.glob("v[0-9]*_*.py"))
