"""Report serialization for corpus summaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader

from .aggregate import CorpusSummary

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_TEXT_TEMPLATE = "report.txt.j2"


def to_dict(summary: CorpusSummary) -> Dict[str, Any]:
    """Return the report payload with a stable key order."""
    payload: Dict[str, Any] = {
        "totalDocuments": summary.total_documents,
        "totalBlocks": summary.total_blocks,
        "byLanguage": dict(sorted(summary.by_language.items())),
        "byDocument": dict(sorted(summary.by_document.items())),
        "byDirectory": dict(sorted(summary.by_directory.items())),
        "malformed": [
            {"path": item.path, "line": item.line}
            for item in sorted(summary.malformed, key=lambda item: (item.path, item.line))
        ],
        "unreadable": [
            {"path": item.path, "error": item.error}
            for item in sorted(summary.unreadable, key=lambda item: (item.path, item.error))
        ],
    }
    if summary.cancelled:
        payload["cancelled"] = True
    return payload


def to_json(summary: CorpusSummary) -> str:
    """Serialize deterministically; unchanged input yields byte-identical output."""
    return json.dumps(to_dict(summary), indent=2, ensure_ascii=False) + "\n"


def render_text(summary: CorpusSummary, templates_dir: Path | None = None) -> str:
    env = _create_env(templates_dir or _TEMPLATES_DIR)
    template = env.get_template(_TEXT_TEMPLATE)
    return template.render(summary=summary).rstrip() + "\n"


def error_lines(summary: CorpusSummary) -> List[str]:
    """Return one human-readable line per recorded per-document error."""
    lines = [
        f"{item.path}:{item.line}: unterminated code fence" for item in summary.malformed
    ]
    lines.extend(f"{item.path}: unreadable ({item.error})" for item in summary.unreadable)
    return lines


def _create_env(templates_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


__all__ = ["error_lines", "render_text", "to_dict", "to_json"]
