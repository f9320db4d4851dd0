"""Shared test fixtures for devglosario tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from devglosario.terms.base import DictionaryEntry, TermProvider
from devglosario.terms.static import StaticTermProvider
from devglosario.translation.cache import DictionaryCache
from devglosario.translation.dictionary import DictionaryIndex

SAMPLE_TERMS: list[dict] = [
    {"term": "fetch", "translation": "obtener", "aliases": ["request"]},
    {"term": "user", "translation": "usuario", "aliases": []},
    {"term": "welcome", "translation": "bienvenido", "aliases": []},
    {"term": "state", "translation": "estado", "aliases": []},
]

FETCH_USER = {"term": "fetch user", "translation": "obtener usuario", "aliases": []}


def make_index(*terms: dict | DictionaryEntry) -> DictionaryIndex:
    """Build an index from raw term dicts (defaults: SAMPLE_TERMS + "fetch user")."""
    provider = StaticTermProvider(terms or [*SAMPLE_TERMS, FETCH_USER])
    return DictionaryIndex.from_entries(asyncio.run(provider.load_all_terms()))


class SlowProvider(TermProvider):
    """Provider that yields to the event loop before answering."""

    def __init__(self, entries: list[dict], delay: float = 0.01) -> None:
        self._inner = StaticTermProvider(entries)
        self._delay = delay
        self.calls = 0

    async def load_all_terms(self) -> list[DictionaryEntry]:
        self.calls += 1
        await asyncio.sleep(self._delay)
        return await self._inner.load_all_terms()


class FailingProvider(TermProvider):
    """Provider whose store is unreachable."""

    def __init__(self, exc: Exception | None = None) -> None:
        self._exc = exc or ConnectionError("database unreachable")
        self.calls = 0

    async def load_all_terms(self) -> list[DictionaryEntry]:
        self.calls += 1
        raise self._exc


@pytest.fixture
def index() -> DictionaryIndex:
    """Sample dictionary including the multi-word "fetch user" entry."""
    return make_index()


@pytest.fixture
def provider() -> StaticTermProvider:
    return StaticTermProvider(SAMPLE_TERMS)


@pytest.fixture
def cache(provider: StaticTermProvider) -> DictionaryCache:
    """Fresh cache over SAMPLE_TERMS, without the built-in vocabulary."""
    return DictionaryCache(provider, include_defaults=False)


@pytest.fixture
def glossary_file(tmp_path: Path) -> Path:
    path = tmp_path / "glossary.toml"
    path.write_text(
        """
[terms]
welcome = "bienvenido"
user = "usuario"

[[entries]]
term = "fetch"
translation = "obtener"
aliases = ["request"]
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def tmp_store(tmp_path: Path):
    """Create a temporary SQLite term store."""
    from devglosario.terms.sqlite_store import SqliteTermStore
    store = SqliteTermStore(db_path=tmp_path / "terms.db")
    yield store
    store.close()
