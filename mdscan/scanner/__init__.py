"""Markdown scanning primitives."""

from .blocks import ScanItem, is_closing_fence, iter_blocks, parse_opening_fence

__all__ = ["ScanItem", "is_closing_fence", "iter_blocks", "parse_opening_fence"]
