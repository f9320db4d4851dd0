"""Translate the string and comment spans of scanned source."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass, field

from devglosario.scanning.spans import Span, SpanKind
from devglosario.translation.dictionary import DictionaryIndex

_JSX_TEXT_ENTITIES = str.maketrans({"{": "&#123;", "}": "&#125;", "<": "&lt;", ">": "&gt;"})


@dataclass
class TranslationSegment:
    """One string, comment, or template/f-string text part that was translated."""

    type: str  # "string" or "comment"
    original: str
    translated: str
    start: int
    end: int
    replacements: int = 0  # phrases replaced inside this segment

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SegmentOutcome:
    code: str
    segments: list[TranslationSegment] = field(default_factory=list)
    replaced_strings: int = 0
    replaced_comments: int = 0


def _escaper(span: Span, *, in_parts: bool = False) -> Callable[[str], str]:
    """Escape function keeping an inserted translation valid inside *span*."""
    if span.kind == SpanKind.comment:
        if span.opener == "/*":
            return lambda t: t.replace("*/", "* /")
        return lambda t: t.replace("\r", " ").replace("\n", " ")

    if not span.opener:
        # JSX text has no escapes; markup characters become entities
        return lambda t: t.translate(_JSX_TEXT_ENTITIES)

    delimiter = span.delimiter
    prefix = span.opener[: len(span.opener) - len(delimiter)].lower()
    raw = "r" in prefix

    def escape(text: str) -> str:
        if not raw:
            text = text.replace("\\", "\\\\")
        if delimiter == "`":
            return text.replace("`", "\\`").replace("${", "\\${")
        text = text.replace(delimiter[0], "\\" + delimiter[0])
        if in_parts:
            # f-string text: literal braces must be doubled
            text = text.replace("{", "{{").replace("}", "}}")
        return text

    return escape


def translate_spans(spans: list[Span], index: DictionaryIndex) -> SegmentOutcome:
    """Translate every string/comment span and reassemble the source.

    Code spans, delimiters and embedded expressions are copied verbatim.
    Counters grow by one per segment whose text changed.
    """
    out: list[str] = []
    outcome = SegmentOutcome(code="")

    for span in spans:
        if span.kind == SpanKind.code:
            out.append(span.original)
            continue

        if span.parts:
            out.append(span.opener)
            escape = _escaper(span, in_parts=True)
            for part in span.parts:
                if part.kind == SpanKind.code:
                    out.append(part.original)
                    continue
                translated, count = index.translate_text(part.original, escape)
                out.append(translated)
                if translated != part.original:
                    outcome.segments.append(
                        TranslationSegment(
                            type=SpanKind.string.value,
                            original=part.original,
                            translated=translated,
                            start=part.start,
                            end=part.end,
                            replacements=count,
                        )
                    )
                    outcome.replaced_strings += 1
            out.append(span.closer)
            continue

        body = span.body
        translated_body, count = index.translate_text(body, _escaper(span))
        if translated_body == body:
            out.append(span.original)
            continue

        translated = f"{span.opener}{translated_body}{span.closer}"
        out.append(translated)
        outcome.segments.append(
            TranslationSegment(
                type=span.kind.value,
                original=span.original,
                translated=translated,
                start=span.start,
                end=span.end,
                replacements=count,
            )
        )
        if span.kind == SpanKind.comment:
            outcome.replaced_comments += 1
        else:
            outcome.replaced_strings += 1

    outcome.code = "".join(out)
    return outcome
