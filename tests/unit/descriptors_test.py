"""Unit tests for legacy descriptor normalization."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from codex_highlight.core.descriptors import (
    GRAMMAR_ROOT,
    is_bundled_grammar,
    language_id,
    normalize_language,
    resolve_grammar_path,
)
from codex_highlight.core.errors import GrammarLoadError
from codex_highlight.models import LanguageName, LanguageSentinel, RawLanguage, SpecialLanguage


async def _normalize(descriptor: dict[str, object]) -> dict[str, object]:
    result = await normalize_language(RawLanguage(descriptor))
    assert isinstance(result, RawLanguage)
    return result.descriptor


class TestLegacyFields:
    @pytest.mark.asyncio
    async def test_id_becomes_name(self) -> None:
        descriptor = await _normalize({"id": "mylang", "patterns": []})
        assert descriptor["name"] == "mylang"
        assert "id" not in descriptor

    @pytest.mark.asyncio
    async def test_id_overrides_existing_name(self) -> None:
        descriptor = await _normalize({"id": "mylang", "name": "other", "patterns": []})
        assert descriptor["name"] == "mylang"

    @pytest.mark.asyncio
    async def test_grammar_is_flattened(self) -> None:
        patterns = [{"match": "x", "name": "keyword"}]
        descriptor = await _normalize(
            {"name": "flat", "grammar": {"patterns": patterns, "scopeName": "source.flat", "repository": {}}}
        )
        assert "grammar" not in descriptor
        assert descriptor["patterns"] == patterns
        assert descriptor["scopeName"] == "source.flat"
        assert descriptor["repository"] == {}

    @pytest.mark.asyncio
    async def test_grammar_name_does_not_override_id(self) -> None:
        descriptor = await _normalize({"id": "from-id", "grammar": {"name": "from-grammar", "patterns": []}})
        assert descriptor["name"] == "from-id"

    @pytest.mark.asyncio
    async def test_grammar_name_fills_missing_name(self) -> None:
        descriptor = await _normalize({"grammar": {"name": "from-grammar", "patterns": []}})
        assert descriptor["name"] == "from-grammar"

    @pytest.mark.asyncio
    async def test_caller_descriptor_is_not_mutated(self) -> None:
        original = {"id": "mylang", "grammar": {"patterns": []}}
        await normalize_language(RawLanguage(original))
        assert original == {"id": "mylang", "grammar": {"patterns": []}}

    @pytest.mark.asyncio
    async def test_canonical_descriptor_is_unchanged(self) -> None:
        descriptor = await _normalize({"name": "plain", "patterns": [], "aliases": ["p"]})
        assert descriptor == {"name": "plain", "patterns": [], "aliases": ["p"]}


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_name_is_returned_as_is(self) -> None:
        spec = LanguageName("python")
        assert await normalize_language(spec) is spec

    @pytest.mark.asyncio
    async def test_sentinel_is_returned_as_is(self) -> None:
        spec = LanguageSentinel(SpecialLanguage.PLAINTEXT)
        assert await normalize_language(spec) is spec


class TestGrammarFiles:
    @pytest.mark.asyncio
    async def test_absolute_path_is_loaded_and_merged(self, tmp_path: Path) -> None:
        grammar_file = tmp_path / "custom.json"
        grammar_file.write_text(
            json.dumps({"name": "custom", "patterns": [{"match": "a", "name": "keyword"}]}),
            encoding="utf-8",
        )

        descriptor = await _normalize({"path": str(grammar_file), "aliases": ["cst"]})

        assert descriptor["name"] == "custom"
        assert descriptor["aliases"] == ["cst"]
        assert descriptor["patterns"] == [{"match": "a", "name": "keyword"}]
        assert "path" not in descriptor

    @pytest.mark.asyncio
    async def test_inline_fields_win_over_file(self, tmp_path: Path) -> None:
        grammar_file = tmp_path / "custom.json"
        grammar_file.write_text(json.dumps({"name": "from-file", "patterns": []}), encoding="utf-8")

        descriptor = await _normalize({"path": str(grammar_file), "name": "inline"})

        assert descriptor["name"] == "inline"

    @pytest.mark.asyncio
    async def test_file_id_and_grammar_are_normalized(self, tmp_path: Path) -> None:
        grammar_file = tmp_path / "legacy.json"
        grammar_file.write_text(json.dumps({"id": "legacy", "grammar": {"patterns": []}}), encoding="utf-8")

        descriptor = await _normalize({"path": str(grammar_file)})

        assert descriptor == {"name": "legacy", "patterns": []}

    @pytest.mark.asyncio
    async def test_relative_path_resolves_against_grammar_root(self) -> None:
        descriptor = await _normalize({"path": "dotenv.tmLanguage.json"})
        assert descriptor["name"] == "dotenv"
        assert "env" in descriptor["aliases"]

    @pytest.mark.asyncio
    async def test_missing_file_raises_with_resolved_path(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope.json"
        with pytest.raises(GrammarLoadError) as exc_info:
            await normalize_language(RawLanguage({"path": str(missing)}))
        assert exc_info.value.path == missing
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_missing_relative_file_reports_root_path(self) -> None:
        with pytest.raises(GrammarLoadError) as exc_info:
            await normalize_language(RawLanguage({"path": "does-not-exist.json"}))
        assert exc_info.value.path == GRAMMAR_ROOT / "does-not-exist.json"

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with pytest.raises(GrammarLoadError) as exc_info:
            await normalize_language(RawLanguage({"path": str(broken)}))
        assert isinstance(exc_info.value.cause, json.JSONDecodeError)
        assert str(broken) in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_object_json_raises(self, tmp_path: Path) -> None:
        listing = tmp_path / "list.json"
        listing.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(GrammarLoadError):
            await normalize_language(RawLanguage({"path": str(listing)}))


def test_resolve_grammar_path_keeps_absolute_paths(tmp_path: Path) -> None:
    assert resolve_grammar_path(tmp_path / "g.json") == tmp_path / "g.json"


def test_resolve_grammar_path_ignores_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert resolve_grammar_path("g.json") == GRAMMAR_ROOT / "g.json"


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("dotenv.tmLanguage.json", True),
        ("nested/grammar.json", True),
        ("../core/errors.py", False),
        ("nested/../../x.json", False),
        ("/etc/hostname", False),
        ("", False),
        (None, False),
    ],
)
def test_is_bundled_grammar(reference: object, expected: bool) -> None:
    assert is_bundled_grammar(reference) is expected


def test_language_id_for_each_variant() -> None:
    assert language_id(LanguageName("python")) == "python"
    assert language_id(LanguageSentinel(SpecialLanguage.PLAINTEXT)) == "plaintext"
    assert language_id(LanguageSentinel(SpecialLanguage.AUTO)) == "auto"
    assert language_id(RawLanguage({"name": "mini"})) == "mini"


def test_language_id_rejects_unknown_values() -> None:
    with pytest.raises(TypeError):
        language_id("python")  # type: ignore[arg-type]
