"""Dictionary index: normalized term lookup and longest-match substitution."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from devglosario.terms.base import DictionaryEntry

logger = logging.getLogger(__name__)

# Letters, digits, underscore and hyphen glue words together: "user" must
# not match inside "user_id", "superuser" or "user-agent".
_WORD_CHAR = r"[\w-]"
_STARTS_WITH_WORD = re.compile(_WORD_CHAR)
_ENDS_WITH_WORD = re.compile(_WORD_CHAR + "$")


def normalize_key(phrase: str) -> str:
    """Trim, collapse inner whitespace and lowercase a lookup key."""
    return " ".join(phrase.split()).lower()


def match_case(translation: str, sample: str) -> str:
    """Shape *translation* after the capitalization of the matched *sample*.

    - ``FETCH USER`` → ``OBTENER USUARIO``
    - ``Fetch User`` → ``Obtener Usuario``
    - ``Welcome`` / ``Fetch user`` → ``Bienvenido`` / ``Obtener usuario``
    - anything else → lowercase
    """
    letters = [c for c in sample if c.isalpha()]
    if not letters:
        return translation
    if len(letters) > 1 and all(c.isupper() for c in letters):
        return translation.upper()

    lowered = translation.lower()
    words = sample.split()
    if len(words) > 1 and all(not w[0].isalpha() or w[0].isupper() for w in words):
        return " ".join(w[:1].upper() + w[1:] for w in lowered.split(" "))
    if letters[0].isupper():
        return lowered[:1].upper() + lowered[1:]
    return lowered


def _key_pattern(key: str) -> str:
    """Regex source for one normalized key, with word boundaries.

    Boundaries are only added where the key starts/ends with a word
    character, so keys like ".net" or "c++" still match.
    """
    body = r"\s+".join(re.escape(part) for part in key.split(" "))
    prefix = rf"(?<!{_WORD_CHAR})" if _STARTS_WITH_WORD.match(key) else ""
    suffix = rf"(?!{_WORD_CHAR})" if _ENDS_WITH_WORD.search(key) else ""
    return prefix + body + suffix


class DictionaryIndex:
    """Immutable mapping of normalized term/alias keys to Spanish translations.

    All keys are combined into one alternation, longest first, so at every
    position the longest known phrase wins and replaced text is never
    scanned again.
    """

    def __init__(self, mapping: dict[str, str]) -> None:
        self._mapping = dict(mapping)
        self._pattern: re.Pattern[str] | None = None
        if self._mapping:
            keys = sorted(self._mapping, key=lambda k: (-len(k), k))
            self._pattern = re.compile(
                "|".join(_key_pattern(k) for k in keys),
                re.IGNORECASE,
            )

    @classmethod
    def from_entries(cls, entries: Iterable[DictionaryEntry]) -> DictionaryIndex:
        """Build the index. The first entry claiming a key keeps it."""
        mapping: dict[str, str] = {}
        skipped = 0
        for entry in entries:
            translation = entry.translation.strip()
            if not translation:
                continue
            for raw_key in entry.keys():
                key = normalize_key(raw_key)
                if not key:
                    continue
                if key in mapping:
                    skipped += 1
                    logger.debug("Ignoring duplicate key %r from term %r", key, entry.term)
                    continue
                mapping[key] = translation
        logger.debug("Built dictionary index: %d keys, %d duplicates ignored", len(mapping), skipped)
        return cls(mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, phrase: object) -> bool:
        return isinstance(phrase, str) and normalize_key(phrase) in self._mapping

    def lookup(self, phrase: str) -> str | None:
        """Return the stored translation for *phrase*, or None."""
        return self._mapping.get(normalize_key(phrase))

    def translate_text(
        self,
        text: str,
        escape: Callable[[str], str] | None = None,
    ) -> tuple[str, int]:
        """Replace every known phrase in *text*.

        Args:
            text: Free text (a string body, a comment, or a whole snippet).
            escape: Applied to each inserted translation, e.g. to escape
                the quote character of the surrounding literal.

        Returns:
            (translated_text, number_of_phrases_replaced)
        """
        if self._pattern is None or not text:
            return text, 0

        def _replace(m: re.Match[str]) -> str:
            sample = m.group(0)
            target = self._mapping.get(normalize_key(sample))
            if target is None:
                # IGNORECASE folds a few letters (e.g. "K" and the Kelvin sign)
                # that lower() keeps apart
                return sample
            translated = match_case(target, sample)
            return escape(translated) if escape is not None else translated

        return self._pattern.subn(_replace, text)
