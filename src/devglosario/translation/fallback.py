"""Whole-text translation for languages without a scanner.

Nothing distinguishes code from strings and comments here, so identifiers
that happen to be dictionary words ("user", "state") are translated too.
That imprecision is accepted in exchange for covering every language.
"""

from __future__ import annotations

from dataclasses import dataclass

from devglosario.translation.dictionary import DictionaryIndex


@dataclass
class FallbackOutcome:
    code: str
    replaced_strings: int  # number of phrases replaced


def translate_fallback(text: str, index: DictionaryIndex) -> FallbackOutcome:
    """Translate every dictionary phrase in *text*, ignoring code structure."""
    code, count = index.translate_text(text)
    return FallbackOutcome(code=code, replaced_strings=count)
