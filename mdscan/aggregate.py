"""Corpus-wide aggregation of per-document scan results."""

from __future__ import annotations

import posixpath
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple

from .models import DocumentResult, MalformedBlock, UnreadableDocument

_ROOT_DIRECTORY = "."


@dataclass(frozen=True)
class CorpusSummary:
    """Aggregated counts for a set of documents.

    Summaries are partial results that combine with :meth:`merge`; merging is
    associative and commutative, so documents may be folded in any order.
    """

    total_documents: int = 0
    total_blocks: int = 0
    by_language: Mapping[str, int] = field(default_factory=dict)
    by_document: Mapping[str, int] = field(default_factory=dict)
    by_directory: Mapping[str, int] = field(default_factory=dict)
    malformed: Tuple[MalformedBlock, ...] = ()
    unreadable: Tuple[UnreadableDocument, ...] = ()
    cancelled: bool = False

    def merge(self, other: "CorpusSummary") -> "CorpusSummary":
        return CorpusSummary(
            total_documents=self.total_documents + other.total_documents,
            total_blocks=self.total_blocks + other.total_blocks,
            by_language=_sum_counts(self.by_language, other.by_language),
            by_document=_sum_counts(self.by_document, other.by_document),
            by_directory=_sum_counts(self.by_directory, other.by_directory),
            malformed=_sorted_malformed(self.malformed + other.malformed),
            unreadable=_sorted_unreadable(self.unreadable + other.unreadable),
            cancelled=self.cancelled or other.cancelled,
        )

    @classmethod
    def from_result(cls, result: DocumentResult) -> "CorpusSummary":
        """Build the partial summary contributed by a single document."""
        if result.unreadable is not None:
            return cls(total_documents=1, unreadable=(result.unreadable,))

        languages = Counter(block.language.value for block in result.blocks)
        count = len(result.blocks)
        directory = document_directory(result.path)
        return cls(
            total_documents=1,
            total_blocks=count,
            by_language=dict(languages),
            by_document={result.path: count},
            by_directory={directory: count},
            malformed=(result.malformed,) if result.malformed is not None else (),
        )

    @classmethod
    def combine(cls, summaries: Iterable["CorpusSummary"]) -> "CorpusSummary":
        combined = cls()
        for summary in summaries:
            combined = combined.merge(summary)
        return combined

    @property
    def has_errors(self) -> bool:
        return bool(self.malformed or self.unreadable)


class Aggregator:
    """Single-writer accumulator that owns the running corpus totals."""

    def __init__(self) -> None:
        self._documents = 0
        self._blocks = 0
        self._languages: Counter[str] = Counter()
        self._per_document: Dict[str, int] = {}
        self._per_directory: Counter[str] = Counter()
        self._malformed: List[MalformedBlock] = []
        self._unreadable: List[UnreadableDocument] = []
        self._cancelled = False

    def add(self, result: DocumentResult) -> None:
        """Fold one document's result into the totals."""
        self._documents += 1
        if result.unreadable is not None:
            self._unreadable.append(result.unreadable)
            return

        count = len(result.blocks)
        self._blocks += count
        self._per_document[result.path] = self._per_document.get(result.path, 0) + count
        self._per_directory[document_directory(result.path)] += count
        for block in result.blocks:
            self._languages[block.language.value] += 1
        if result.malformed is not None:
            self._malformed.append(result.malformed)

    def add_all(self, results: Iterable[DocumentResult]) -> None:
        for result in results:
            self.add(result)

    def mark_cancelled(self) -> None:
        self._cancelled = True

    def summary(self) -> CorpusSummary:
        return CorpusSummary(
            total_documents=self._documents,
            total_blocks=self._blocks,
            by_language=dict(sorted(self._languages.items())),
            by_document=dict(sorted(self._per_document.items())),
            by_directory=dict(sorted(self._per_directory.items())),
            malformed=_sorted_malformed(self._malformed),
            unreadable=_sorted_unreadable(self._unreadable),
            cancelled=self._cancelled,
        )


def document_directory(path: str) -> str:
    """Return the POSIX parent directory of a document path ('.' at the root)."""
    parent = posixpath.dirname(path)
    return parent or _ROOT_DIRECTORY


def _sum_counts(left: Mapping[str, int], right: Mapping[str, int]) -> Dict[str, int]:
    totals: Counter[str] = Counter()
    totals.update(left)
    totals.update(right)
    return dict(sorted(totals.items()))


def _sorted_malformed(items: Iterable[MalformedBlock]) -> Tuple[MalformedBlock, ...]:
    return tuple(sorted(items, key=lambda item: (item.path, item.line)))


def _sorted_unreadable(items: Iterable[UnreadableDocument]) -> Tuple[UnreadableDocument, ...]:
    return tuple(sorted(items, key=lambda item: (item.path, item.error)))


__all__ = ["Aggregator", "CorpusSummary", "document_directory"]
