"""Registry mapping language tags → lexical scanner.

Tags without an entry have no scanner and go through whole-text fallback
translation (Go, Java, Rust, plain text...).
"""

from __future__ import annotations

from dataclasses import dataclass

from devglosario.scanning.clike import scan_clike, scan_jsx
from devglosario.scanning.python import scan_python
from devglosario.scanning.spans import Scanner

# Tag used when the caller gives no language at all
PLAIN = "plain"


@dataclass(frozen=True)
class Registration:
    """A scanner registered for a language, under its canonical name."""
    language: str  # canonical name reported in results, e.g. "ts"
    scanner: Scanner


_REGISTRY: dict[str, Registration] = {}


def normalize_language(tag: str | None) -> str:
    """Lowercase and trim a language tag. None or blank means plain text."""
    if tag is None:
        return PLAIN
    return tag.strip().lower() or PLAIN


def register_scanner(language: str, scanner: Scanner, aliases: tuple[str, ...] = ()) -> None:
    """Register *scanner* for *language* and each of its alias tags.

    Re-registering a tag replaces the previous scanner.
    """
    registration = Registration(language=language, scanner=scanner)
    for tag in (language, *aliases):
        _REGISTRY[normalize_language(tag)] = registration


def unregister(tag: str) -> None:
    _REGISTRY.pop(normalize_language(tag), None)


def get_registration(tag: str | None) -> Registration | None:
    """Return the registration for a tag, or None if it has no scanner."""
    return _REGISTRY.get(normalize_language(tag))


def registered_tags() -> dict[str, Registration]:
    """All registered tags, sorted."""
    return dict(sorted(_REGISTRY.items()))


register_scanner("js", scan_clike, ("javascript", "node", "mjs", "cjs"))
register_scanner("ts", scan_clike, ("typescript",))
register_scanner("jsx", scan_jsx, ("react",))
register_scanner("tsx", scan_jsx)
register_scanner("python", scan_python, ("py", "python3"))
