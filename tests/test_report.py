"""Tests for mdscan.report."""

from __future__ import annotations

import json

from mdscan.aggregate import CorpusSummary
from mdscan.models import MalformedBlock, UnreadableDocument
from mdscan.report import error_lines, render_text, to_dict, to_json


def _summary(**overrides) -> CorpusSummary:
    values = dict(
        total_documents=3,
        total_blocks=4,
        by_language={"javascript": 2, "css": 1, "bash": 1},
        by_document={"b.md": 3, "a.md": 1},
        by_directory={".": 4},
        malformed=(MalformedBlock(path="b.md", line=9),),
        unreadable=(UnreadableDocument(path="c.md", error="Permission denied"),),
    )
    values.update(overrides)
    return CorpusSummary(**values)


def test_to_json_has_stable_shape_and_sorted_keys() -> None:
    payload = json.loads(to_json(_summary()))

    assert list(payload) == [
        "totalDocuments",
        "totalBlocks",
        "byLanguage",
        "byDocument",
        "byDirectory",
        "malformed",
        "unreadable",
    ]
    assert list(payload["byLanguage"]) == ["bash", "css", "javascript"]
    assert list(payload["byDocument"]) == ["a.md", "b.md"]
    assert payload["malformed"] == [{"path": "b.md", "line": 9}]
    assert payload["unreadable"] == [{"path": "c.md", "error": "Permission denied"}]


def test_to_json_is_independent_of_input_order() -> None:
    reordered = _summary(
        by_language={"bash": 1, "javascript": 2, "css": 1},
        by_document={"a.md": 1, "b.md": 3},
    )

    assert to_json(reordered) == to_json(_summary())


def test_cancelled_flag_only_appears_when_set() -> None:
    assert "cancelled" not in to_dict(_summary())
    assert to_dict(_summary(cancelled=True))["cancelled"] is True


def test_empty_summary_serializes_zero_counts() -> None:
    payload = json.loads(to_json(CorpusSummary()))

    assert payload["totalDocuments"] == 0
    assert payload["totalBlocks"] == 0
    assert payload["malformed"] == []


def test_render_text_lists_languages_and_errors() -> None:
    text = render_text(_summary())

    assert text.startswith("mdscan report")
    assert "Documents: 3" in text
    assert "Blocks:    4" in text
    assert "javascript" in text
    assert "b.md:9 unterminated fence" in text
    assert "c.md: Permission denied" in text


def test_render_text_without_blocks() -> None:
    text = render_text(CorpusSummary())

    assert "(none)" in text
    assert "Malformed" not in text


def test_error_lines_one_per_error() -> None:
    assert error_lines(_summary()) == [
        "b.md:9: unterminated code fence",
        "c.md: unreadable (Permission denied)",
    ]
