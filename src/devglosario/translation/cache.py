"""Process-wide memoized dictionary, loaded once from the term store."""

from __future__ import annotations

import asyncio
import logging

from devglosario.terms.base import DictionaryLoadError, TermProvider, coerce_entry
from devglosario.terms.toml_file import load_default_entries
from devglosario.translation.dictionary import DictionaryIndex

logger = logging.getLogger(__name__)


class DictionaryCache:
    """Memoizes the DictionaryIndex built from a TermProvider.

    Concurrent ``get()`` calls on a cold cache share one in-flight load, so
    the provider is fetched once. ``invalidate()`` drops both the cached
    index and the in-flight handle; a load that finishes after an
    invalidation still answers its waiters but is not stored.
    """

    def __init__(self, provider: TermProvider, *, include_defaults: bool = True) -> None:
        self._provider = provider
        self._include_defaults = include_defaults
        self._index: DictionaryIndex | None = None
        self._pending: asyncio.Task[DictionaryIndex] | None = None
        self._generation = 0

    @property
    def loaded(self) -> bool:
        return self._index is not None

    async def get(self) -> DictionaryIndex:
        """Return the cached index, loading it from the provider if needed.

        Raises:
            DictionaryLoadError: If the provider fails. Failures are not cached.
        """
        if self._index is not None:
            return self._index

        loop = asyncio.get_running_loop()
        if self._pending is None or self._pending.get_loop() is not loop:
            self._pending = loop.create_task(self._load(self._generation))
        # A cancelled waiter must not cancel the load the others are sharing
        return await asyncio.shield(self._pending)

    def invalidate(self) -> None:
        """Forget the cached index; the next ``get()`` refetches."""
        self._generation += 1
        self._index = None
        self._pending = None
        logger.debug("Dictionary cache invalidated (generation %d)", self._generation)

    async def _load(self, generation: int) -> DictionaryIndex:
        try:
            raw = await self._provider.load_all_terms()
            entries = [coerce_entry(e) for e in raw]
            if self._include_defaults:
                entries.extend(load_default_entries())
            index = DictionaryIndex.from_entries(entries)
        except DictionaryLoadError:
            self._forget_pending(generation)
            raise
        except Exception as e:
            self._forget_pending(generation)
            raise DictionaryLoadError(f"Dictionary load failed: {e}") from e

        logger.info("Loaded dictionary: %d terms, %d lookup keys", len(entries), len(index))

        if generation == self._generation:
            self._index = index
            self._pending = None
        return index

    def _forget_pending(self, generation: int) -> None:
        if generation == self._generation:
            self._pending = None
