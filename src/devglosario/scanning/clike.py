"""Lexical scanner for C-style languages: JavaScript, TypeScript, JSX/TSX."""

from __future__ import annotations

import re

from devglosario.scanning.spans import (
    Span,
    SpanKind,
    append_code,
    find_closing,
    make_span,
)

_IDENT = re.compile(r"[\w$]+")

# After one of these a "/" opens a regex literal rather than dividing.
_REGEX_PRECEDERS = set("(,=:[!&|?{};~+-*%<>^")
_REGEX_KEYWORDS = {
    "return", "typeof", "case", "do", "else", "in", "of", "new", "delete",
    "void", "throw", "yield", "await", "instanceof",
}

# Marks an operand (identifier, number, literal, closing bracket) in prev
_OPERAND = "a"

# "<" opening a JSX element or fragment. "<T," and "<T extends" are TSX generics.
_JSX_OPEN = re.compile(
    r"<(?:>|[A-Za-z_$][\w$.:-]*(?![\w$.:-])(?!\s*(?:,|extends\b)))"
)
_JSX_TEXT_END = re.compile(r"[<{]")


class _CLikeScanner:
    def __init__(self, source: str, *, jsx: bool = False) -> None:
        self.src = source
        self.n = len(source)
        self.jsx = jsx

    def scan(self, pos: int = 0, *, in_expression: bool = False) -> tuple[list[Span], int]:
        """Scan from *pos*.

        With ``in_expression`` the scan stops at the ``}`` closing a
        template ``${`` and returns its index (or ``n`` if unterminated).
        """
        src, n = self.src, self.n
        spans: list[Span] = []
        code_start = i = pos
        depth = 0
        prev = ""
        word = ""

        while i < n:
            c = src[i]
            nxt = src[i + 1] if i + 1 < n else ""

            if c in "\"'":
                close = find_closing(src, i + 1, c)
                end = n if close is None else close + 1
                append_code(spans, src, code_start, i)
                spans.append(
                    make_span(SpanKind.string, src, i, end, c, "" if close is None else c)
                )
                i = code_start = end
                prev, word = _OPERAND, ""
                continue

            if c == "`":
                append_code(spans, src, code_start, i)
                template = self._template(i)
                spans.append(template)
                i = code_start = template.end
                prev, word = _OPERAND, ""
                continue

            if c == "/" and nxt == "/":
                newline = src.find("\n", i + 2)
                end = n if newline == -1 else newline
                append_code(spans, src, code_start, i)
                spans.append(make_span(SpanKind.comment, src, i, end, "//"))
                i = code_start = end
                continue

            if c == "/" and nxt == "*":
                close_at = src.find("*/", i + 2)
                end = n if close_at == -1 else close_at + 2
                append_code(spans, src, code_start, i)
                spans.append(
                    make_span(SpanKind.comment, src, i, end, "/*", "" if close_at == -1 else "*/")
                )
                i = code_start = end
                continue

            expects_operand = prev in _REGEX_PRECEDERS or prev == "" or word in _REGEX_KEYWORDS

            if c == "<" and self.jsx and expects_operand and _JSX_OPEN.match(src, i):
                append_code(spans, src, code_start, i)
                i = code_start = self._jsx_element(i, spans)
                prev, word = _OPERAND, ""
                continue

            if c == "/" and expects_operand:
                end = self._regex_end(i)
                if end is not None:
                    # Regex literals stay inside the surrounding code span
                    i = end
                    prev, word = _OPERAND, ""
                    continue

            if in_expression:
                if c == "{":
                    depth += 1
                elif c == "}":
                    if depth == 0:
                        append_code(spans, src, code_start, i)
                        return spans, i
                    depth -= 1

            m = _IDENT.match(src, i)
            if m:
                word = m.group(0)
                prev = _OPERAND
                i = m.end()
                continue

            if not c.isspace():
                prev = _OPERAND if c in ")]" else c
                word = ""
            i += 1

        append_code(spans, src, code_start, n)
        return spans, n

    def _template(self, start: int) -> Span:
        """Scan a backtick template literal into text and ``${...}`` parts."""
        src, n = self.src, self.n
        parts: list[Span] = []
        i = text_start = start + 1

        while i < n:
            c = src[i]
            if c == "\\":
                i = min(i + 2, n)
                continue
            if c == "`":
                if i > text_start:
                    parts.append(make_span(SpanKind.string, src, text_start, i))
                return make_span(SpanKind.string, src, start, i + 1, "`", "`", tuple(parts))
            if c == "$" and src.startswith("${", i):
                if i > text_start:
                    parts.append(make_span(SpanKind.string, src, text_start, i))
                _, close = self.scan(i + 2, in_expression=True)
                end = min(close + 1, n)
                parts.append(make_span(SpanKind.code, src, i, end))
                i = text_start = end
                continue
            i += 1

        if n > text_start:
            parts.append(make_span(SpanKind.string, src, text_start, n))
        return make_span(SpanKind.string, src, start, n, "`", "", tuple(parts))

    def _jsx_element(self, start: int, spans: list[Span]) -> int:
        """Scan the JSX element or fragment opening at *start*; return its end.

        Tags are code except for quoted attribute values, ``{...}`` holds
        ordinary script, and the text between tags becomes a string span
        without delimiters.
        """
        src, n = self.src, self.n
        depth = 0
        i = start
        while i < n:
            c = src[i]
            if c == "<":
                closing = src.startswith("</", i)
                i, self_closing = self._jsx_tag(i, spans)
                if closing:
                    depth -= 1
                elif not self_closing:
                    depth += 1
                if depth <= 0:
                    return i
                continue
            if c == "{":
                i = self._jsx_expression(i, spans)
                continue

            m = _JSX_TEXT_END.search(src, i)
            end = n if m is None else m.start()
            if src[i:end].strip():
                spans.append(make_span(SpanKind.string, src, i, end))
            else:
                append_code(spans, src, i, end)
            i = end
        return n

    def _jsx_tag(self, start: int, spans: list[Span]) -> tuple[int, bool]:
        """Scan one tag; return its end and whether it closes itself."""
        src, n = self.src, self.n
        code_start, i = start, start + 1
        while i < n:
            c = src[i]
            if c in "\"'":
                close = src.find(c, i + 1)
                end = n if close == -1 else close + 1
                append_code(spans, src, code_start, i)
                spans.append(
                    make_span(SpanKind.string, src, i, end, c, "" if close == -1 else c)
                )
                i = code_start = end
                continue
            if c == "{":
                append_code(spans, src, code_start, i)
                i = code_start = self._jsx_expression(i, spans)
                continue
            if c == ">":
                append_code(spans, src, code_start, i + 1)
                return i + 1, src[i - 1] == "/"
            i += 1
        append_code(spans, src, code_start, n)
        return n, True

    def _jsx_expression(self, start: int, spans: list[Span]) -> int:
        """Scan a ``{...}`` JSX expression container; return its end."""
        inner, close = self.scan(start + 1, in_expression=True)
        end = min(close + 1, self.n)
        append_code(spans, self.src, start, start + 1)
        for span in inner:
            if span.kind == SpanKind.code:
                append_code(spans, self.src, span.start, span.end)
            else:
                spans.append(span)
        append_code(spans, self.src, close, end)
        return end

    def _regex_end(self, start: int) -> int | None:
        """End index of a regex literal starting at *start*, or None if it is not one."""
        src, n = self.src, self.n
        i = start + 1
        in_class = False
        while i < n:
            c = src[i]
            if c == "\n":
                return None
            if c == "\\":
                i += 2
                continue
            if c == "[":
                in_class = True
            elif c == "]":
                in_class = False
            elif c == "/" and not in_class:
                if i == start + 1:
                    return None
                i += 1
                while i < n and (src[i].isalnum() or src[i] == "_"):
                    i += 1
                return i
            i += 1
        return None


def scan_clike(source: str) -> list[Span]:
    """Split JS/TS source into code, string and comment spans."""
    spans, _ = _CLikeScanner(source).scan()
    return spans


def scan_jsx(source: str) -> list[Span]:
    """Like :func:`scan_clike`, also reading JSX elements and their text."""
    spans, _ = _CLikeScanner(source, jsx=True).scan()
    return spans
