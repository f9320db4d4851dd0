"""End-to-end tests for structural translation."""

import asyncio

import pytest

from devglosario.terms.base import DictionaryLoadError
from devglosario.terms.static import StaticTermProvider
from devglosario.translation.cache import DictionaryCache
from devglosario.translation.structural import (
    InvalidTranslationRequest,
    StructuralTranslator,
    translate_structural,
    translate_with_index,
)
from tests.conftest import FETCH_USER, SAMPLE_TERMS, FailingProvider, SlowProvider


def _translate(cache, code, language):
    return asyncio.run(translate_structural(code, language, cache=cache))


class TestTranslateStructural:
    def test_js_string_literal(self, cache):
        result = _translate(cache, 'const label = "fetch user";', "js")
        assert '"obtener usuario"' in result.code
        assert result.code.startswith("const label = ")
        assert result.fallback_applied is False
        assert result.replaced_strings > 0

    def test_template_literal_preserves_expression(self, cache):
        result = _translate(cache, "const view = `Welcome ${user.name}`;", "js")
        assert "`Bienvenido ${user.name}`" in result.code
        assert result.replaced_strings == 1

    def test_comment_isolation(self, cache):
        result = _translate(cache, '// fetch user\nconst name = "user";', "ts")
        assert result.code.startswith("// obtener usuario")
        assert result.code == '// obtener usuario\nconst name = "usuario";'
        assert result.replaced_comments == 1
        assert result.replaced_strings == 1
        assert result.language == "ts"

    def test_python_strings(self, cache):
        result = _translate(cache, 'def example():\n    greeting = "welcome user"\n', "python")
        assert '"bienvenido usuario"' in result.code
        assert result.replaced_strings == 1
        assert result.language == "python"

    def test_jsx_text_and_code(self, cache):
        code = (
            "const App = () => (\n"
            "  <main>\n"
            "    <h1>Welcome user</h1>\n"
            "    <p>Don't refresh</p>\n"
            "  </main>\n"
            ");\n"
            "const state = fetch(user);\n"
        )
        result = _translate(cache, code, "React")
        assert "<h1>Bienvenido usuario</h1>" in result.code
        assert "<p>Don't refresh</p>" in result.code
        assert result.code.endswith("const state = fetch(user);\n")
        assert result.replaced_strings == 1
        assert result.language == "jsx"

    def test_unsupported_language_falls_back(self, cache):
        result = _translate(cache, "FETCH USER", "go")
        assert result.fallback_applied is True
        assert "OBTENER USUARIO" in result.code
        assert result.segments == []
        assert result.language == "go"

    def test_fallback_rewrites_identifiers(self, cache):
        result = _translate(cache, "user := fetch()", "go")
        assert result.code == "usuario := obtener()"
        assert result.replaced_strings == 2
        assert result.replaced_comments == 0

    def test_registered_language_never_falls_back(self, cache):
        for tag in ("js", "javascript", "ts", "TypeScript ", "jsx", "tsx", "py", "python"):
            result = _translate(cache, "x = 1", tag)
            assert result.fallback_applied is False, tag

    def test_missing_language_is_plain_fallback(self, cache):
        result = _translate(cache, "welcome", None)
        assert result.language == "plain"
        assert result.fallback_applied is True
        assert result.code == "bienvenido"

    def test_tag_normalized_to_canonical_name(self, cache):
        result = _translate(cache, "// user", "  TypeScript")
        assert result.language == "ts"
        assert result.code == "// usuario"

    def test_unterminated_string_does_not_raise(self, cache):
        result = _translate(cache, 'const x = "unterminated user', "js")
        assert result.code == 'const x = "unterminated usuario'

    def test_longest_match_with_phrase_entry(self):
        cache = DictionaryCache(
            StaticTermProvider([*SAMPLE_TERMS, FETCH_USER]), include_defaults=False,
        )
        result = _translate(cache, 'x = "fetch user"', "js")
        assert result.code == 'x = "obtener usuario"'
        assert result.segments[0].replacements == 1

    def test_to_dict_uses_wire_names(self, cache):
        data = _translate(cache, '// user\nx = "state"', "js").to_dict()
        assert set(data) == {
            "language", "fallbackApplied", "code", "segments",
            "replacedStrings", "replacedComments",
        }
        assert data["segments"][0] == {
            "type": "comment",
            "original": "// user",
            "translated": "// usuario",
            "start": 0,
            "end": 7,
            "replacements": 1,
        }


class TestInvalidInput:
    @pytest.mark.parametrize("code", ["", "   \n\t", None])
    def test_empty_code_rejected_before_loading(self, code):
        provider = StaticTermProvider(SAMPLE_TERMS)
        cache = DictionaryCache(provider, include_defaults=False)
        with pytest.raises(InvalidTranslationRequest):
            _translate(cache, code, "js")
        assert provider.calls == 0

    def test_invalid_request_is_value_error(self, index):
        with pytest.raises(ValueError):
            translate_with_index("", "js", index)


class TestDictionaryFailures:
    def test_load_failure_propagates(self):
        cache = DictionaryCache(FailingProvider(), include_defaults=False)
        with pytest.raises(DictionaryLoadError, match="database unreachable"):
            _translate(cache, 'x = "user"', "js")

    def test_failure_keeps_original_cause(self):
        cause = TimeoutError("slow store")
        cache = DictionaryCache(FailingProvider(cause), include_defaults=False)
        with pytest.raises(DictionaryLoadError) as exc_info:
            _translate(cache, "user", "go")
        assert exc_info.value.__cause__ is cause


class TestDefaults:
    def test_builtin_vocabulary_included(self):
        cache = DictionaryCache(StaticTermProvider([]))
        result = _translate(cache, "const msg = 'loading...';", "js")
        assert result.code == "const msg = 'cargando...';"

    def test_store_terms_override_defaults(self):
        cache = DictionaryCache(StaticTermProvider([{"term": "fetch", "translation": "traer"}]))
        result = _translate(cache, "// fetch", "js")
        assert result.code == "// traer"


class TestConcurrency:
    def test_concurrent_cold_calls_fetch_once(self):
        provider = SlowProvider(SAMPLE_TERMS)
        translator = StructuralTranslator(DictionaryCache(provider, include_defaults=False))

        async def run():
            return await asyncio.gather(*(
                translator.translate(f'x = "user {i}"', "js") for i in range(10)
            ))

        results = asyncio.run(run())
        assert provider.calls == 1
        assert [r.code for r in results] == [f'x = "usuario {i}"' for i in range(10)]

    def test_reset_cache_forces_refetch(self):
        provider = StaticTermProvider(SAMPLE_TERMS)
        translator = StructuralTranslator(DictionaryCache(provider, include_defaults=False))

        async def run():
            await translator.translate("// user", "js")
            await translator.translate("// user", "js")
            translator.reset_cache()
            await translator.translate("// user", "js")

        asyncio.run(run())
        assert provider.calls == 2
