"""In-memory term provider, used for built-in defaults and tests."""

from __future__ import annotations

from collections.abc import Iterable

from devglosario.terms.base import DictionaryEntry, TermProvider, coerce_entry


class StaticTermProvider(TermProvider):
    """Provider backed by a fixed list of entries.

    Example: StaticTermProvider([{"term": "user", "translation": "usuario"}])
    """

    def __init__(self, entries: Iterable[DictionaryEntry | dict] = ()) -> None:
        self._entries = [coerce_entry(e) for e in entries]
        self.calls = 0

    async def load_all_terms(self) -> list[DictionaryEntry]:
        self.calls += 1
        return list(self._entries)
