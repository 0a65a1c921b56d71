"""SQLite-backed document store: one JSON row per document."""

import json
import re
import sqlite3
from typing import Any

from order_lifecycle.models.common import to_iso
from order_lifecycle.storage.document_store import (
    Document,
    DocumentNotFound,
    DocumentStore,
    PreconditionFailed,
    ServerClock,
    new_document_id,
    resolve_server_values,
)

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _path(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Unsupported field name: {field!r}")
    return f"'$.{field}'"


class SqliteDocumentStore(DocumentStore):
    def __init__(self, conn: sqlite3.Connection, clock: ServerClock | None = None):
        self.conn = conn
        self.clock = clock or ServerClock()

    def add(self, collection: str, data: dict[str, Any]) -> Document:
        doc_id = new_document_id()
        stored = resolve_server_values(data, to_iso(self.clock.now()))
        self.conn.execute(
            "INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)",
            (collection, doc_id, json.dumps(stored)),
        )
        self.conn.commit()
        return Document(doc_id, stored)

    def get(self, collection: str, doc_id: str) -> Document | None:
        row = self.conn.execute(
            "SELECT data FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        ).fetchone()
        if row is None:
            return None
        return Document(doc_id, json.loads(row[0]))

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        where: tuple[str, Any] | None = None,
    ) -> Document:
        resolved = resolve_server_values(fields, to_iso(self.clock.now()))
        set_args: list[str] = []
        params: list[Any] = []
        for key, value in resolved.items():
            set_args.append(f"{_path(key)}, json(?)")
            params.append(json.dumps(value))

        sql = (
            f"UPDATE documents SET data = json_set(data, {', '.join(set_args)}) "
            "WHERE collection = ? AND id = ?"
        )
        params.extend([collection, doc_id])
        if where is not None:
            field, expected = where
            sql += f" AND json_extract(data, {_path(field)}) IS ?"
            params.append(expected)

        # Single statement, so the check and the write are atomic
        cursor = self.conn.execute(sql, params)
        self.conn.commit()

        if cursor.rowcount == 0:
            current = self.get(collection, doc_id)
            if current is None or where is None:
                raise DocumentNotFound(collection, doc_id)
            raise PreconditionFailed(where[0], where[1], current.data.get(where[0]))

        updated = self.get(collection, doc_id)
        if updated is None:
            raise DocumentNotFound(collection, doc_id)
        return updated

    def query(self, collection: str, field: str, value: Any) -> list[Document]:
        rows = self.conn.execute(
            "SELECT id, data FROM documents "
            f"WHERE collection = ? AND json_extract(data, {_path(field)}) = ?",
            (collection, value),
        ).fetchall()
        return [Document(r[0], json.loads(r[1])) for r in rows]

    def close(self) -> None:
        self.conn.close()
