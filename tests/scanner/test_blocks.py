"""Tests for mdscan.scanner.blocks."""

from __future__ import annotations

from mdscan.models import CodeBlock, MalformedBlock
from mdscan.scanner import is_closing_fence, iter_blocks, parse_opening_fence


def _doc(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def test_single_css_block_is_extracted_with_lines_and_content() -> None:
    text = _doc("# Card", "", "```css", ".card{}", "```", "done")

    items = list(iter_blocks(text, "errors/css/card/README.md"))

    assert items == [
        CodeBlock(
            path="errors/css/card/README.md",
            tag="css",
            start_line=3,
            end_line=5,
            content=".card{}",
            fence_length=3,
        )
    ]


def test_block_count_matches_fence_pairs_in_source_order() -> None:
    text = _doc(
        "```js",
        "const a = 1;",
        "```",
        "Some prose.",
        "```bash",
        "npm install",
        "```",
        "```",
        "untagged",
        "```",
    )

    items = list(iter_blocks(text))

    assert all(isinstance(item, CodeBlock) for item in items)
    assert [item.tag for item in items] == ["js", "bash", ""]
    assert [item.start_line for item in items] == [1, 5, 8]
    assert all(item.start_line < item.end_line for item in items)


def test_document_without_fences_yields_nothing() -> None:
    assert list(iter_blocks("# Title\n\nJust prose with `inline` code.\n")) == []


def test_empty_block_has_empty_content() -> None:
    items = list(iter_blocks(_doc("```json", "```")))

    assert len(items) == 1
    assert items[0].content == ""
    assert (items[0].start_line, items[0].end_line) == (1, 2)


def test_unterminated_fence_reports_malformed_and_stops() -> None:
    text = _doc("```js", "const ok = true;", "```", "", "```css", ".x {}", "```html")

    items = list(iter_blocks(text, "doc.md"))

    assert len(items) == 2
    assert isinstance(items[0], CodeBlock)
    assert items[1] == MalformedBlock(path="doc.md", line=5)


def test_unterminated_region_does_not_emit_inner_blocks() -> None:
    text = _doc("````", "```js", "inner", "```", "still open")

    items = list(iter_blocks(text, "doc.md"))

    assert items == [MalformedBlock(path="doc.md", line=1)]


def test_shorter_fence_inside_longer_block_is_literal_content() -> None:
    text = _doc("````markdown", "```js", "console.log(1)", "```", "````")

    items = list(iter_blocks(text))

    assert len(items) == 1
    block = items[0]
    assert block.tag == "markdown"
    assert block.fence_length == 4
    assert block.content == "```js\nconsole.log(1)\n```"
    assert block.end_line == 5


def test_longer_closing_fence_terminates_block() -> None:
    items = list(iter_blocks(_doc("```ts", "let x: number;", "`````")))

    assert len(items) == 1
    assert items[0].end_line == 3


def test_tagged_fence_inside_block_does_not_close_it() -> None:
    items = list(iter_blocks(_doc("```", "```python", "print()", "```")))

    assert len(items) == 1
    assert items[0].content == "```python\nprint()"


def test_indented_fences_and_crlf_line_endings() -> None:
    text = "1. Step\r\n   ```bash\r\n   npm run dev\r\n   ```\r\n"

    items = list(iter_blocks(text))

    assert len(items) == 1
    assert items[0].tag == "bash"
    assert items[0].content == "   npm run dev"


def test_iter_blocks_is_lazy() -> None:
    iterator = iter_blocks(_doc("```css", "a{}", "```", "```js"))

    first = next(iterator)
    assert isinstance(first, CodeBlock)
    assert isinstance(next(iterator), MalformedBlock)


def test_fence_helpers() -> None:
    assert parse_opening_fence("```js title=app.js") == (3, "js title=app.js")
    assert parse_opening_fence("``not a fence") is None
    assert parse_opening_fence("``` has `backtick`") is None
    assert is_closing_fence("  ````  ", 3)
    assert not is_closing_fence("``", 2)
    assert not is_closing_fence("```", 4)
    assert not is_closing_fence("```js", 3)
