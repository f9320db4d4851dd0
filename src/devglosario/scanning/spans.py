"""Span model shared by every lexical scanner."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class SpanKind(str, Enum):
    """Classification of a slice of source text."""
    code = "code"
    string = "string"
    comment = "comment"


@dataclass(frozen=True)
class Span:
    """A contiguous slice ``source[start:end]`` of scanned source.

    ``opener`` and ``closer`` are the delimiters around the translatable
    body: a quote, a prefixed triple quote, ``//`` or ``/*``. ``closer`` is empty
    when the literal or comment runs to the end of input unterminated, and
    both are empty for JSX text.
    Template literals and f-strings carry ``parts``: alternating text
    (``string``) and embedded-expression (``code``) sub-spans that exactly
    cover the body.
    """

    kind: SpanKind
    original: str
    start: int
    end: int
    opener: str = ""
    closer: str = ""
    parts: tuple[Span, ...] = ()

    @property
    def body(self) -> str:
        return self.original[len(self.opener) : len(self.original) - len(self.closer)]

    @property
    def body_start(self) -> int:
        return self.start + len(self.opener)

    @property
    def delimiter(self) -> str:
        """Opener without string prefix letters (``rb"`` gives ``"``)."""
        return self.opener.lstrip("rRbBuUfF")


# A scanner turns source text into spans covering all of it, in order.
Scanner = Callable[[str], list[Span]]


def make_span(
    kind: SpanKind,
    source: str,
    start: int,
    end: int,
    opener: str = "",
    closer: str = "",
    parts: tuple[Span, ...] = (),
) -> Span:
    return Span(kind, source[start:end], start, end, opener, closer, parts)


def append_code(spans: list[Span], source: str, start: int, end: int) -> None:
    """Append ``source[start:end]`` as a code span, unless it is empty.

    Extends the last span instead when it is code ending at *start*.
    """
    if end <= start:
        return
    if spans and spans[-1].kind == SpanKind.code and spans[-1].end == start:
        start = spans.pop().start
    spans.append(make_span(SpanKind.code, source, start, end))


def find_closing(source: str, pos: int, quote: str, limit: int | None = None) -> int | None:
    """Index of the first unescaped *quote* at or after *pos*, or None.

    A backslash escapes the next character; a backslash that is the very
    last character is literal and ends the search.
    """
    n = len(source) if limit is None else limit
    i = pos
    while i < n:
        c = source[i]
        if c == "\\":
            i += 2
            continue
        if source.startswith(quote, i) and i + len(quote) <= n:
            return i
        i += 1
    return None


def scan_plain(source: str) -> list[Span]:
    """Generic scanner: the whole text is one code span."""
    spans: list[Span] = []
    append_code(spans, source, 0, len(source))
    return spans
