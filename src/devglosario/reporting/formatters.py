"""Output formatters for translation results."""

from __future__ import annotations

import json
from pathlib import Path

from devglosario.translation.structural import TranslationResult


def to_json(result: TranslationResult, indent: int = 2) -> str:
    """Format result as JSON string."""
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)


def _md_cell(text: str, limit: int = 60) -> str:
    flat = text.replace("\n", "⏎").replace("|", "\\|")
    if len(flat) > limit:
        flat = flat[: limit - 1] + "…"
    return f"`{flat}`"


def to_markdown(result: TranslationResult) -> str:
    """Format result as Markdown."""
    fence = "```"
    lines = [
        "# Translation Report",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| Language | {result.language} |",
        f"| Fallback applied | {result.fallback_applied} |",
        f"| Strings translated | {result.replaced_strings} |",
        f"| Comments translated | {result.replaced_comments} |",
        "",
        "## Code",
        "",
        f"{fence}{result.language}",
        result.code.rstrip("\n"),
        fence,
    ]

    if result.segments:
        lines.extend([
            "",
            "## Segments",
            "",
            "| Type | Offsets | Original | Translated |",
            "|------|---------|----------|------------|",
        ])
        for seg in result.segments:
            lines.append(
                f"| {seg.type} | {seg.start}-{seg.end} "
                f"| {_md_cell(seg.original)} | {_md_cell(seg.translated)} |"
            )

    return "\n".join(lines) + "\n"


def save_result(result: TranslationResult, path: str | Path) -> None:
    """Save result to file, auto-detecting format from extension.

    ``.md``/``.markdown`` get the Markdown report, ``.json`` the JSON
    result; any other suffix receives just the translated code.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        content = to_json(result)
    elif suffix in (".md", ".markdown"):
        content = to_markdown(result)
    else:
        content = result.code

    path.write_text(content, encoding="utf-8")
