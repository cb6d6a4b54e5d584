"""Language tag normalization for fenced code blocks."""

from __future__ import annotations

from typing import Dict, List, Mapping

from .errors import ConfigError
from .models import ClassifiedBlock, CodeBlock, Language

_BUILTIN_ALIASES: Dict[str, Language] = {
    "css": Language.CSS,
    "scss": Language.CSS,
    "sass": Language.CSS,
    "less": Language.CSS,
    "postcss": Language.CSS,
    "html": Language.HTML,
    "htm": Language.HTML,
    "xhtml": Language.HTML,
    "html5": Language.HTML,
    "js": Language.JAVASCRIPT,
    "javascript": Language.JAVASCRIPT,
    "node": Language.JAVASCRIPT,
    "nodejs": Language.JAVASCRIPT,
    "mjs": Language.JAVASCRIPT,
    "cjs": Language.JAVASCRIPT,
    "ecmascript": Language.JAVASCRIPT,
    "ts": Language.TYPESCRIPT,
    "typescript": Language.TYPESCRIPT,
    "mts": Language.TYPESCRIPT,
    "cts": Language.TYPESCRIPT,
    "json": Language.JSON,
    "jsonc": Language.JSON,
    "json5": Language.JSON,
    "bash": Language.BASH,
    "sh": Language.BASH,
    "shell": Language.BASH,
    "zsh": Language.BASH,
    "console": Language.BASH,
    "shell session": Language.BASH,
    "shell-session": Language.BASH,
    "jsx": Language.JSX,
    "tsx": Language.JSX,
    "javascriptreact": Language.JSX,
    "typescriptreact": Language.JSX,
    "javascript jsx": Language.JSX,
    "react": Language.JSX,
}

_LANGUAGE_PREFIX = "language-"


def normalize_tag(tag: str) -> str:
    """Case-fold a fence info string and strip Pandoc-style decorations."""
    cleaned = tag.strip().strip("{}").strip()
    if cleaned.startswith("."):
        cleaned = cleaned[1:]
    cleaned = " ".join(cleaned.casefold().split())
    if cleaned.startswith(_LANGUAGE_PREFIX):
        cleaned = cleaned[len(_LANGUAGE_PREFIX) :]
    return cleaned


def _candidates(normalized: str) -> List[str]:
    """Return word-prefix candidates, longest first."""
    words = normalized.split(" ")
    return [" ".join(words[:count]) for count in range(len(words), 0, -1)]


class LanguageClassifier:
    """Maps fence tags to the closed ``Language`` set via an explicit alias table."""

    def __init__(self, extra_aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: Dict[str, Language] = dict(_BUILTIN_ALIASES)
        for alias, target in (extra_aliases or {}).items():
            language = _coerce_language(alias, target)
            key = normalize_tag(str(alias))
            if not key or key in _BUILTIN_ALIASES:
                continue
            self._aliases[key] = language

    def classify(self, tag: str | None) -> Language:
        """Return the language for ``tag``; unknown and empty tags map to ``unknown``."""
        if not tag:
            return Language.UNKNOWN
        normalized = normalize_tag(tag)
        if not normalized:
            return Language.UNKNOWN
        # Longest exact word-prefix match wins.
        for candidate in _candidates(normalized):
            language = self._aliases.get(candidate)
            if language is not None:
                return language
        return Language.UNKNOWN

    def classify_block(self, block: CodeBlock) -> ClassifiedBlock:
        return ClassifiedBlock(block=block, language=self.classify(block.tag))


def _coerce_language(alias: str, target: object) -> Language:
    value = str(target).strip().casefold()
    try:
        return Language(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in Language)
        raise ConfigError(
            f"Alias '{alias}' targets unknown language '{target}' (expected one of: {allowed})"
        ) from exc


_DEFAULT = LanguageClassifier()


def classify(tag: str | None) -> Language:
    """Classify ``tag`` with the built-in alias table."""
    return _DEFAULT.classify(tag)


__all__ = ["LanguageClassifier", "classify", "normalize_tag"]
