"""Corpus discovery: walk a root directory for Markdown documents."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .errors import InvalidRoot

DEFAULT_EXTENSIONS: tuple[str, ...] = (".md", ".markdown")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".vscode",
}


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .mdscan.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            pattern_parts = self.pattern.split("/")
            path_parts = rel_path.split("/")
            if _match_segments(pattern_parts, path_parts):
                return True
            if self.directory_only:
                return any(
                    _match_segments(pattern_parts, path_parts[:count])
                    for count in range(1, len(path_parts))
                )
            return False

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def _match_segments(pattern: Sequence[str], parts: Sequence[str]) -> bool:
    """Match path segments gitignore-style: ``*`` stays within a segment, ``**`` spans any."""
    if not pattern:
        return not parts
    head = pattern[0]
    if head == "**":
        return any(_match_segments(pattern[1:], parts[index:]) for index in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatchcase(parts[0], head) and _match_segments(pattern[1:], parts[1:])


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.is_file():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def resolve_root(root: str | Path) -> Path:
    """Return the absolute scan root or raise :class:`InvalidRoot`."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise InvalidRoot(f"Scan root not found: {root}")
    if not root_path.is_dir():
        raise InvalidRoot(f"Scan root is not a directory: {root}")
    return root_path


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in dirnames:
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in filenames:
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path


def discover_documents(
    root: str | Path,
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    exclude_paths: Sequence[str] = (),
    respect_gitignore: bool = True,
) -> List[str]:
    """Return the sorted relative paths of every Markdown document under ``root``."""
    root_path = resolve_root(root)

    rules: List[IgnoreRule] = []
    if respect_gitignore:
        rules.extend(parse_gitignore(root_path / ".gitignore"))
    for pattern in exclude_paths:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)

    suffixes = tuple(_normalise_extension(ext) for ext in extensions if ext)
    documents = [
        rel_path
        for rel_path in _iter_files(root_path, rules)
        if rel_path.lower().endswith(suffixes)
    ]
    return sorted(documents)


def _normalise_extension(extension: str) -> str:
    extension = extension.strip().lower()
    return extension if extension.startswith(".") else f".{extension}"


__all__ = [
    "DEFAULT_EXTENSIONS",
    "IgnoreRule",
    "build_ignore_rule",
    "discover_documents",
    "parse_gitignore",
    "resolve_root",
]
