"""Abstract base class for term dictionary providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


class DictionaryLoadError(Exception):
    """Raised when the term store is unreachable or returns malformed data."""


@dataclass(frozen=True)
class DictionaryEntry:
    """A glossary term with its Spanish translation and alternative spellings."""

    term: str
    translation: str
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def keys(self) -> list[str]:
        """Return the term followed by its aliases (raw, not normalized)."""
        return [self.term, *self.aliases]


def coerce_entry(raw: object) -> DictionaryEntry:
    """Build a DictionaryEntry from an entry or a ``{term, translation, aliases}`` mapping.

    Raises:
        DictionaryLoadError: If a field is missing or has the wrong type.
    """
    if isinstance(raw, DictionaryEntry):
        return raw
    if not isinstance(raw, Mapping):
        raise DictionaryLoadError(f"Malformed term entry: {raw!r}")

    term = raw.get("term")
    translation = raw.get("translation")
    aliases = raw.get("aliases") or ()
    if not isinstance(term, str) or not isinstance(translation, str):
        raise DictionaryLoadError(f"Term entry needs string 'term' and 'translation': {raw!r}")
    if isinstance(aliases, str) or not isinstance(aliases, Iterable):
        raise DictionaryLoadError(f"Term aliases must be a list of strings: {raw!r}")
    # Non-string aliases are dropped rather than rejected, same as the web app
    return DictionaryEntry(
        term=term,
        translation=translation,
        aliases=tuple(a for a in aliases if isinstance(a, str)),
    )


class TermProvider(ABC):
    """Interface for term stores."""

    @abstractmethod
    async def load_all_terms(self) -> list[DictionaryEntry]:
        """Fetch every term with its translation and aliases.

        Returns:
            All entries in store order. Order matters: on key conflicts the
            first entry wins.

        Raises:
            DictionaryLoadError: If the store cannot be read.
        """
        ...
