"""Normalization of legacy language descriptor shapes.

Raw descriptors arrive in several historical shapes: ``id`` instead of
``name``, the grammar body nested under ``grammar``, or a ``path`` pointing at
a JSON grammar file. ``normalize_language`` folds all of them into the single
flat shape the engine consumes.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

from codex_highlight.core.errors import GrammarLoadError
from codex_highlight.models import LanguageName, LanguageSentinel, LanguageSpec, RawLanguage

# Relative grammar references resolve here, never against the working directory.
GRAMMAR_ROOT = Path(__file__).parent.parent / "grammars"


def resolve_grammar_path(reference: str | Path) -> Path:
    path = Path(reference)
    if path.is_absolute():
        return path
    return GRAMMAR_ROOT / path


def is_bundled_grammar(reference: Any) -> bool:
    """True when ``reference`` is a relative name that stays inside ``GRAMMAR_ROOT``."""
    if not isinstance(reference, str) or not reference:
        return False
    path = Path(reference)
    if path.is_absolute():
        return False
    root = GRAMMAR_ROOT.resolve()
    return (root / path).resolve().is_relative_to(root)


async def load_grammar_file(path: Path) -> dict[str, Any]:
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise GrammarLoadError(path, exc) from exc

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GrammarLoadError(path, exc) from exc

    if not isinstance(parsed, dict):
        raise GrammarLoadError(path, ValueError(f"expected a JSON object, got {type(parsed).__name__}"))
    return parsed


async def normalize_language(spec: LanguageSpec) -> LanguageSpec:
    if isinstance(spec, (LanguageName, LanguageSentinel)):
        return spec
    if not isinstance(spec, RawLanguage):
        raise TypeError(f"Unsupported language spec: {spec!r}")

    descriptor = dict(spec.descriptor)

    reference = descriptor.pop("path", None)
    if reference is not None:
        loaded = await load_grammar_file(resolve_grammar_path(reference))
        loaded.pop("path", None)
        descriptor = {**loaded, **descriptor}

    if "id" in descriptor:
        descriptor["name"] = descriptor.pop("id")

    grammar = descriptor.pop("grammar", None)
    if isinstance(grammar, dict):
        for key, value in grammar.items():
            if key == "name" and "name" in descriptor:
                continue
            descriptor[key] = value

    return RawLanguage(descriptor)


def language_id(spec: LanguageSpec) -> str:
    """Return the identifier the engine knows ``spec`` by."""
    if isinstance(spec, LanguageName):
        return spec.name
    if isinstance(spec, LanguageSentinel):
        return spec.kind.value
    if isinstance(spec, RawLanguage):
        return str(spec.descriptor.get("name", ""))
    raise TypeError(f"Unsupported language spec: {spec!r}")
