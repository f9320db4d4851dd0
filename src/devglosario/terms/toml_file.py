"""TOML glossary files as term providers."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from devglosario.terms.base import DictionaryEntry, DictionaryLoadError, TermProvider, coerce_entry

logger = logging.getLogger(__name__)

# Lazy-loaded built-in vocabulary (data/default_terms.toml)
_default_entries: tuple[DictionaryEntry, ...] | None = None


def parse_glossary(data: dict) -> list[DictionaryEntry]:
    """Turn a parsed glossary document into entries.

    Expected format:
        [terms]
        welcome = "bienvenido"

        [[entries]]
        term = "fetch"
        translation = "obtener"
        aliases = ["request"]

    ``[[entries]]`` come first, then the ``[terms]`` shorthand table.
    """
    entries: list[DictionaryEntry] = []

    raw_entries = data.get("entries", [])
    if not isinstance(raw_entries, list):
        raise DictionaryLoadError("'entries' must be an array of tables")
    for raw in raw_entries:
        entries.append(coerce_entry(raw))

    terms = data.get("terms", {})
    if not isinstance(terms, dict):
        raise DictionaryLoadError("'terms' must be a table")
    for term, translation in terms.items():
        if not isinstance(translation, str):
            raise DictionaryLoadError(f"Translation for {term!r} must be a string")
        entries.append(DictionaryEntry(term=term, translation=translation))

    return entries


def read_glossary(path: str | Path) -> list[DictionaryEntry]:
    """Load entries from a glossary TOML file.

    Raises:
        DictionaryLoadError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise DictionaryLoadError(f"Cannot read glossary {path}: {e}") from e
    return parse_glossary(data)


def load_default_entries() -> tuple[DictionaryEntry, ...]:
    """Load the packaged developer vocabulary. Loaded once, then cached."""
    global _default_entries
    if _default_entries is not None:
        return _default_entries

    # Try importlib.resources first (works with installed packages)
    try:
        from importlib.resources import files

        text = files("devglosario.data").joinpath("default_terms.toml").read_text(
            encoding="utf-8",
        )
    except (ImportError, FileNotFoundError, TypeError):
        fallback = Path(__file__).resolve().parent.parent / "data" / "default_terms.toml"
        text = fallback.read_text(encoding="utf-8")

    _default_entries = tuple(parse_glossary(tomllib.loads(text)))
    return _default_entries


class TomlTermProvider(TermProvider):
    """Provider reading one or more glossary TOML files.

    Files are read in order, so on key conflicts earlier files win.
    """

    def __init__(self, *paths: str | Path) -> None:
        self._paths = [Path(p) for p in paths]

    async def load_all_terms(self) -> list[DictionaryEntry]:
        return await asyncio.to_thread(self._read_all)

    def _read_all(self) -> list[DictionaryEntry]:
        entries: list[DictionaryEntry] = []
        for path in self._paths:
            loaded = read_glossary(path)
            logger.debug("Read %d terms from %s", len(loaded), path)
            entries.extend(loaded)
        return entries
