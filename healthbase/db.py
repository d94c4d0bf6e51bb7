import sqlite3
from pathlib import Path

SCHEMA_SQL = """\
-- User-entered dashboard settings (opaque key/value pairs)
CREATE TABLE IF NOT EXISTS settings (
    key                 TEXT PRIMARY KEY,
    value               TEXT NOT NULL,
    updated_at          TEXT DEFAULT (datetime('now'))
);
"""

DEFAULT_DB_PATH = Path.home() / "healthbase" / "data" / "healthbase.db"


def get_db_path(config=None):
    """Resolve the database path from config or fall back to default."""
    if config and "paths" in config and "db" in config["paths"]:
        return Path(config["paths"]["db"])
    return DEFAULT_DB_PATH


def get_connection(config=None):
    """Return a sqlite3 connection using the configured db path."""
    db_path = get_db_path(config)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.executescript(SCHEMA_SQL)
    return conn


def init_db(config=None):
    """Create all tables."""
    conn = get_connection(config)
    conn.close()
    db_path = get_db_path(config)
    print(f"Database initialized at {db_path}")
    return db_path


def get_value(conn, key: str) -> str | None:
    row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None


def set_value(conn, key: str, value: str) -> None:
    conn.execute(
        """INSERT INTO settings (key, value, updated_at)
           VALUES (?, ?, datetime('now'))
           ON CONFLICT(key)
           DO UPDATE SET value=excluded.value,
                         updated_at=excluded.updated_at""",
        (key, value),
    )
    conn.commit()
