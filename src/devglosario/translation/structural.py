"""Structural translation: translate only the strings and comments of a snippet.

Entry point used by the surrounding application. The dictionary comes from
a DictionaryCache; everything after loading it is synchronous, in-memory
work that never fails on malformed source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from devglosario.scanning.registry import get_registration, normalize_language
from devglosario.translation.cache import DictionaryCache
from devglosario.translation.dictionary import DictionaryIndex
from devglosario.translation.fallback import translate_fallback
from devglosario.translation.segments import TranslationSegment, translate_spans

logger = logging.getLogger(__name__)


class InvalidTranslationRequest(ValueError):
    """Raised when the code to translate is missing or blank."""


@dataclass
class TranslationResult:
    """Translated snippet plus per-segment detail."""

    language: str
    fallback_applied: bool
    code: str
    segments: list[TranslationSegment] = field(default_factory=list)
    replaced_strings: int = 0
    replaced_comments: int = 0

    def to_dict(self) -> dict:
        """JSON shape consumed by the web client."""
        return {
            "language": self.language,
            "fallbackApplied": self.fallback_applied,
            "code": self.code,
            "segments": [s.to_dict() for s in self.segments],
            "replacedStrings": self.replaced_strings,
            "replacedComments": self.replaced_comments,
        }


def _validate(code: object) -> str:
    if not isinstance(code, str) or not code.strip():
        raise InvalidTranslationRequest("code must be a non-empty string")
    return code


def translate_with_index(
    code: str,
    language: str | None,
    index: DictionaryIndex,
) -> TranslationResult:
    """Translate *code* with an already loaded dictionary."""
    code = _validate(code)
    tag = normalize_language(language)
    registration = get_registration(tag)

    if registration is None:
        fallback = translate_fallback(code, index)
        logger.debug(
            "No scanner for %r, fallback replaced %d phrases", tag, fallback.replaced_strings,
        )
        return TranslationResult(
            language=tag,
            fallback_applied=True,
            code=fallback.code,
            segments=[],
            replaced_strings=fallback.replaced_strings,
            replaced_comments=0,
        )

    spans = registration.scanner(code)
    outcome = translate_spans(spans, index)
    logger.debug(
        "Translated %s snippet: %d spans, %d strings, %d comments",
        registration.language, len(spans), outcome.replaced_strings, outcome.replaced_comments,
    )
    return TranslationResult(
        language=registration.language,
        fallback_applied=False,
        code=outcome.code,
        segments=outcome.segments,
        replaced_strings=outcome.replaced_strings,
        replaced_comments=outcome.replaced_comments,
    )


class StructuralTranslator:
    """Binds a dictionary cache to the translation pipeline."""

    def __init__(self, cache: DictionaryCache) -> None:
        self.cache = cache

    async def translate(self, code: str, language: str | None = None) -> TranslationResult:
        """Translate a snippet.

        Raises:
            InvalidTranslationRequest: If *code* is empty (checked before loading).
            DictionaryLoadError: If the dictionary cannot be loaded.
        """
        _validate(code)
        index = await self.cache.get()
        return translate_with_index(code, language, index)

    def reset_cache(self) -> None:
        self.cache.invalidate()


async def translate_structural(
    code: str,
    language: str | None = None,
    *,
    cache: DictionaryCache,
) -> TranslationResult:
    """Translate the strings and comments of *code* using *cache*'s dictionary."""
    return await StructuralTranslator(cache).translate(code, language)
