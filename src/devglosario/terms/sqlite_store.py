"""SQLite term store: the persistent glossary the translator reads from."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sqlite3
from pathlib import Path

from devglosario.terms.base import DictionaryEntry, DictionaryLoadError, TermProvider

logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = Path.home() / ".devglosario"
DEFAULT_STORE_DB = DEFAULT_STORE_DIR / "terms.db"
DB_ENV_VAR = "DEVGLOSARIO_DB"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS terms (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    term TEXT NOT NULL UNIQUE,
    translation TEXT NOT NULL,
    aliases TEXT NOT NULL DEFAULT '[]',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def default_db_path() -> Path:
    """Store location: $DEVGLOSARIO_DB if set, else ~/.devglosario/terms.db."""
    env = os.environ.get(DB_ENV_VAR)
    return Path(env) if env else DEFAULT_STORE_DB


class SqliteTermStore(TermProvider):
    """Persistent SQLite store of glossary terms.

    Rows are returned in insertion order, so the oldest term claims a
    conflicting alias.
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        if db_path is None:
            db_path = default_db_path()
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            # Loads run in a worker thread via asyncio.to_thread
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise DictionaryLoadError(f"Cannot open term store {self._db_path}: {e}") from e

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def load_all_terms(self) -> list[DictionaryEntry]:
        return await asyncio.to_thread(self.all_terms)

    def all_terms(self) -> list[DictionaryEntry]:
        """Read every stored term, oldest first."""
        try:
            cursor = self._conn.execute(
                "SELECT term, translation, aliases FROM terms ORDER BY id",
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise DictionaryLoadError(f"Cannot read term store {self._db_path}: {e}") from e

        entries: list[DictionaryEntry] = []
        for term, translation, aliases_json in rows:
            entries.append(
                DictionaryEntry(
                    term=term,
                    translation=translation,
                    aliases=self._decode_aliases(term, aliases_json),
                )
            )
        return entries

    @staticmethod
    def _decode_aliases(term: str, raw: str | None) -> tuple[str, ...]:
        if not raw:
            return ()
        try:
            aliases = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed aliases for term %r: %r", term, raw)
            return ()
        if not isinstance(aliases, list):
            logger.warning("Ignoring non-list aliases for term %r: %r", term, raw)
            return ()
        return tuple(a for a in aliases if isinstance(a, str))

    def put(self, entry: DictionaryEntry) -> None:
        """Insert or update a term, keeping its original position."""
        self.put_batch([entry])

    def put_batch(self, entries: list[DictionaryEntry]) -> None:
        """Insert or update several terms."""
        self._conn.executemany(
            "INSERT INTO terms (term, translation, aliases) VALUES (?, ?, ?) "
            "ON CONFLICT(term) DO UPDATE SET "
            "translation = excluded.translation, aliases = excluded.aliases",
            [
                (e.term, e.translation, json.dumps(list(e.aliases), ensure_ascii=False))
                for e in entries
            ],
        )
        self._conn.commit()

    def count(self) -> int:
        """Return total number of stored terms."""
        cursor = self._conn.execute("SELECT COUNT(*) FROM terms")
        return cursor.fetchone()[0]  # type: ignore[return-value]

    def clear(self) -> int:
        """Delete all terms. Returns number of entries deleted."""
        cursor = self._conn.execute("DELETE FROM terms")
        self._conn.commit()
        return cursor.rowcount

    def close(self) -> None:
        self._conn.close()
