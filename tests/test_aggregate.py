"""Tests for mdscan.aggregate."""

from __future__ import annotations

import itertools

from mdscan.aggregate import Aggregator, CorpusSummary, document_directory
from mdscan.classifier import LanguageClassifier
from mdscan.models import Document, DocumentResult, MalformedBlock, UnreadableDocument
from mdscan.pipeline import scan_document

_CLASSIFIER = LanguageClassifier()


def _result(path: str, *tags: str, unterminated: bool = False) -> DocumentResult:
    lines = []
    for tag in tags:
        lines.extend([f"```{tag}", "body", "```"])
    if unterminated:
        lines.extend(["```js", "never closed"])
    return scan_document(Document(path=path, text="\n".join(lines)), _CLASSIFIER)


def _documents() -> list[DocumentResult]:
    return [
        _result("errors/css/card/README.md", "css", "html"),
        _result("errors/nextjs/middleware/README.md", "js", "JavaScript", "ts"),
        _result("errors/mern/index/README.md", "bash", unterminated=True),
        DocumentResult(
            path="errors/broken/README.md",
            unreadable=UnreadableDocument(path="errors/broken/README.md", error="denied"),
        ),
    ]


def test_aggregator_counts_languages_documents_and_directories() -> None:
    aggregator = Aggregator()
    aggregator.add_all(_documents())

    summary = aggregator.summary()

    assert summary.total_documents == 4
    assert summary.total_blocks == 6
    assert summary.by_language == {
        "bash": 1,
        "css": 1,
        "html": 1,
        "javascript": 2,
        "typescript": 1,
    }
    assert summary.by_document == {
        "errors/css/card/README.md": 2,
        "errors/mern/index/README.md": 1,
        "errors/nextjs/middleware/README.md": 3,
    }
    assert summary.by_directory["errors/nextjs/middleware"] == 3
    assert summary.malformed == (MalformedBlock(path="errors/mern/index/README.md", line=4),)
    assert [item.path for item in summary.unreadable] == ["errors/broken/README.md"]
    assert summary.has_errors


def test_zero_block_document_is_listed_without_malformed_entry() -> None:
    aggregator = Aggregator()
    aggregator.add(_result("empty.md"))

    summary = aggregator.summary()

    assert summary.total_blocks == 0
    assert summary.by_document == {"empty.md": 0}
    assert summary.malformed == ()
    assert not summary.has_errors


def test_merge_is_order_independent() -> None:
    partials = [CorpusSummary.from_result(result) for result in _documents()]
    expected = CorpusSummary.combine(partials)

    for order in itertools.permutations(partials):
        assert CorpusSummary.combine(order) == expected


def test_merge_is_associative() -> None:
    a, b, c, d = (CorpusSummary.from_result(result) for result in _documents())

    assert a.merge(b).merge(c).merge(d) == a.merge(b.merge(c.merge(d)))


def test_partial_merge_matches_single_aggregator() -> None:
    aggregator = Aggregator()
    aggregator.add_all(_documents())

    merged = CorpusSummary.combine(CorpusSummary.from_result(r) for r in _documents())

    assert merged == aggregator.summary()


def test_cancelled_flag_propagates_through_merge() -> None:
    assert CorpusSummary(cancelled=True).merge(CorpusSummary()).cancelled
    assert not CorpusSummary().merge(CorpusSummary()).cancelled


def test_document_directory() -> None:
    assert document_directory("README.md") == "."
    assert document_directory("errors/css/card/README.md") == "errors/css/card"
