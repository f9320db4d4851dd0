"""Lexical scanner for Python source."""

from __future__ import annotations

import re

from devglosario.scanning.spans import (
    Span,
    SpanKind,
    append_code,
    find_closing,
    make_span,
)

_NAME = re.compile(r"\w+")
_STRING_PREFIXES = {"r", "u", "b", "f", "br", "rb", "fr", "rf"}


def scan_python(source: str) -> list[Span]:
    """Split Python source into code, string and comment spans.

    String prefixes (``r``, ``b``, ``f``...) belong to the string's opener.
    f-strings are split into text parts and ``{...}`` replacement fields.
    """
    n = len(source)
    spans: list[Span] = []
    code_start = i = 0

    while i < n:
        c = source[i]

        if c == "#":
            newline = source.find("\n", i + 1)
            end = n if newline == -1 else newline
            append_code(spans, source, code_start, i)
            spans.append(make_span(SpanKind.comment, source, i, end, "#"))
            i = code_start = end
            continue

        prefix = ""
        m = _NAME.match(source, i)
        if m:
            name_end = m.end()
            if name_end < n and source[name_end] in "\"'" and m.group(0).lower() in _STRING_PREFIXES:
                prefix = m.group(0)
            else:
                # Identifiers and numbers are code, even when a quote follows
                i = name_end
                continue

        quote_at = i + len(prefix)
        if quote_at < n and source[quote_at] in "\"'":
            append_code(spans, source, code_start, i)
            literal = _read_string(source, i, prefix)
            spans.append(literal)
            i = code_start = literal.end
            continue

        i += 1

    append_code(spans, source, code_start, n)
    return spans


def _read_string(source: str, start: int, prefix: str) -> Span:
    n = len(source)
    q = source[start + len(prefix)]
    quote = q * 3 if source.startswith(q * 3, start + len(prefix)) else q
    opener = prefix + quote
    body_start = start + len(opener)

    close = find_closing(source, body_start, quote)
    if close is None:
        body_end = end = n
        closer = ""
    else:
        body_end = close
        end = close + len(quote)
        closer = quote

    parts: tuple[Span, ...] = ()
    if "f" in prefix.lower():
        parts = tuple(_fstring_parts(source, body_start, body_end))
    return make_span(SpanKind.string, source, start, end, opener, closer, parts)


def _fstring_parts(source: str, start: int, end: int) -> list[Span]:
    """Split an f-string body into text and ``{...}`` replacement fields."""
    parts: list[Span] = []
    i = text_start = start

    while i < end:
        c = source[i]
        if c == "\\":
            i += 2
            continue
        if c in "{}" and i + 1 < end and source[i + 1] == c:
            # {{ and }} are literal braces
            i += 2
            continue
        if c == "{":
            if i > text_start:
                parts.append(make_span(SpanKind.string, source, text_start, i))
            field_end = _field_end(source, i + 1, end)
            parts.append(make_span(SpanKind.code, source, i, field_end))
            i = text_start = field_end
            continue
        i += 1

    if end > text_start:
        parts.append(make_span(SpanKind.string, source, text_start, end))
    return parts


def _field_end(source: str, pos: int, limit: int) -> int:
    """Index just past the ``}`` closing a replacement field (or *limit*)."""
    depth = 0
    i = pos
    while i < limit:
        c = source[i]
        if c in "\"'":
            close = find_closing(source, i + 1, c, limit)
            i = limit if close is None else close + 1
            continue
        if c in "([{":
            depth += 1
        elif c in ")]}":
            if c == "}" and depth == 0:
                return i + 1
            depth -= 1
        i += 1
    return limit
