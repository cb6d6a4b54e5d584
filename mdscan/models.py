"""Core data models shared across mdscan components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Language(str, Enum):
    """Closed set of normalized code block languages."""

    CSS = "css"
    HTML = "html"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JSON = "json"
    BASH = "bash"
    JSX = "jsx"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Document:
    """A single Markdown file read from the corpus."""

    path: str
    text: str


@dataclass(frozen=True)
class CodeBlock:
    """Fenced region within a document, delimited by its fence lines."""

    path: str
    tag: str
    start_line: int
    end_line: int
    content: str
    fence_length: int = 3


@dataclass(frozen=True)
class ClassifiedBlock:
    """Code block annotated with its normalized language."""

    block: CodeBlock
    language: Language

    @property
    def path(self) -> str:
        return self.block.path


@dataclass(frozen=True)
class MalformedBlock:
    """Opening fence that never found a matching closing fence."""

    path: str
    line: int


@dataclass(frozen=True)
class UnreadableDocument:
    """Document that could not be read or decoded."""

    path: str
    error: str


@dataclass
class DocumentResult:
    """Partial scan result for one document."""

    path: str
    blocks: List[ClassifiedBlock] = field(default_factory=list)
    malformed: Optional[MalformedBlock] = None
    unreadable: Optional[UnreadableDocument] = None


__all__ = [
    "ClassifiedBlock",
    "CodeBlock",
    "Document",
    "DocumentResult",
    "Language",
    "MalformedBlock",
    "UnreadableDocument",
]
