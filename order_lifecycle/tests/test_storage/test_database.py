"""Tests for database connection settings and migrations."""

from pathlib import Path

from order_lifecycle.config.schema import ServiceConfig, StorageConfig
from order_lifecycle.service.factory import open_store
from order_lifecycle.storage.database import applied_migrations, connect, run_migrations


class TestConnect:
    def test_wal_mode(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        mode = db.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"
        db.close()

    def test_creates_parent_directory(self, tmp_path: Path):
        db = connect(tmp_path / "nested" / "dir" / "test.db")
        assert (tmp_path / "nested" / "dir").is_dir()
        db.close()

    def test_row_factory(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        db.execute("CREATE TABLE t (x TEXT)")
        db.execute("INSERT INTO t VALUES ('hello')")
        row = db.execute("SELECT x FROM t").fetchone()
        assert row["x"] == "hello"
        db.close()


class TestMigrations:
    def test_creates_documents_table(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied = run_migrations(db)
        assert "v001_initial" in applied

        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert {"schema_versions", "documents"}.issubset(tables)
        db.close()

    def test_idempotent(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied1 = run_migrations(db)
        applied2 = run_migrations(db)
        assert len(applied1) > 0
        assert len(applied2) == 0
        db.close()


class TestBusyTimeout:
    def test_passed_to_sqlite(self, tmp_path: Path):
        db = connect(tmp_path / "test.db", busy_timeout=0.25)
        assert db.execute("PRAGMA busy_timeout").fetchone()[0] == 250
        db.close()

    def test_open_store_uses_config(self, tmp_path: Path):
        config = ServiceConfig(
            storage=StorageConfig(db_path=str(tmp_path / "cfg.db"), busy_timeout=1.5)
        )
        store = open_store(config)
        assert store.conn.execute("PRAGMA busy_timeout").fetchone()[0] == 1500
        store.close()


class TestAppliedMigrations:
    def test_empty_before_migrating(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        assert applied_migrations(db) == set()
        db.close()

    def test_records_applied(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied = run_migrations(db)
        assert applied_migrations(db) == set(applied)
        db.close()
