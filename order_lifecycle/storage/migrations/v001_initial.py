"""Initial schema: a single JSON document table keyed by collection and id."""

import sqlite3

DDL = [
    """
    CREATE TABLE IF NOT EXISTS documents (
        collection TEXT NOT NULL,
        id TEXT NOT NULL,
        data TEXT NOT NULL,
        PRIMARY KEY (collection, id)
    )
    """,
    # Participant lookups for order listings
    (
        "CREATE INDEX IF NOT EXISTS idx_documents_buyer "
        "ON documents(collection, json_extract(data, '$.buyerId'))"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_documents_seller "
        "ON documents(collection, json_extract(data, '$.sellerId'))"
    ),
    # Transition history per order
    (
        "CREATE INDEX IF NOT EXISTS idx_documents_order "
        "ON documents(collection, json_extract(data, '$.orderId'))"
    ),
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
