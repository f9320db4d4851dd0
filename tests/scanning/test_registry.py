"""Tests for the language → scanner registry."""

from devglosario.scanning import registry
from devglosario.scanning.clike import scan_clike, scan_jsx
from devglosario.scanning.python import scan_python
from devglosario.scanning.registry import (
    get_registration,
    normalize_language,
    register_scanner,
    registered_tags,
)
from devglosario.scanning.spans import scan_plain


class TestNormalizeLanguage:
    def test_trim_and_lowercase(self):
        assert normalize_language("  TypeScript ") == "typescript"

    def test_missing_is_plain(self):
        assert normalize_language(None) == "plain"
        assert normalize_language("   ") == "plain"


class TestRegistry:
    def test_js_family(self):
        for tag in ("js", "javascript", "node", "ts", "typescript"):
            assert get_registration(tag).scanner is scan_clike, tag

    def test_jsx_family(self):
        for tag in ("jsx", "tsx", "react"):
            assert get_registration(tag).scanner is scan_jsx, tag

    def test_python_aliases(self):
        for tag in ("python", "py", "Python3"):
            reg = get_registration(tag)
            assert reg.scanner is scan_python
            assert reg.language == "python"

    def test_canonical_names(self):
        assert get_registration("javascript").language == "js"
        assert get_registration("TypeScript").language == "ts"

    def test_unregistered_languages(self):
        for tag in ("go", "rust", "java", "plain", None):
            assert get_registration(tag) is None

    def test_register_new_language(self):
        try:
            register_scanner("text", scan_plain, ("txt",))
            assert get_registration("TXT").language == "text"
            assert "txt" in registered_tags()
        finally:
            registry.unregister("text")
            registry.unregister("txt")
        assert get_registration("txt") is None

    def test_registered_tags_sorted(self):
        tags = list(registered_tags())
        assert tags == sorted(tags)
