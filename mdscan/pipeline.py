"""Scan pipeline: discovery, per-document extraction, and aggregation."""

from __future__ import annotations

import os
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Set

from .aggregate import Aggregator, CorpusSummary
from .classifier import LanguageClassifier
from .config import MdscanConfig, load_config
from .discovery import discover_documents, resolve_root
from .logging import get_logger
from .models import CodeBlock, Document, DocumentResult, MalformedBlock, UnreadableDocument
from .scanner import iter_blocks

logger = get_logger("pipeline")


def display_path(rel_path: str) -> str:
    """Return ``rel_path`` with undecodable filename bytes rendered as ``\\xNN`` escapes."""
    return os.fsencode(rel_path).decode("utf-8", "backslashreplace")


def read_document(root: Path, rel_path: str) -> Document | UnreadableDocument:
    """Read one document, returning an ``UnreadableDocument`` on I/O or decode failure.

    Records carry the display form of the path so reports stay encodable even
    when a filename is not valid UTF-8.
    """
    path = display_path(rel_path)
    try:
        text = (root / rel_path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        return UnreadableDocument(path=path, error=f"not valid UTF-8: {exc.reason}")
    except OSError as exc:
        return UnreadableDocument(path=path, error=exc.strerror or str(exc))
    return Document(path=path, text=text)


def scan_document(document: Document, classifier: LanguageClassifier) -> DocumentResult:
    """Extract and classify every block of a document, preserving source order."""
    result = DocumentResult(path=document.path)
    for item in iter_blocks(document.text, document.path):
        if isinstance(item, MalformedBlock):
            result.malformed = item
        elif isinstance(item, CodeBlock):
            result.blocks.append(classifier.classify_block(item))
    return result


class CorpusScanner:
    """Coordinates discovery, a bounded worker pool, and single-writer aggregation."""

    def __init__(
        self,
        config: MdscanConfig | None = None,
        classifier: LanguageClassifier | None = None,
    ) -> None:
        self._config = config
        self._classifier = classifier

    def scan(
        self,
        root: str | Path,
        *,
        workers: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> CorpusSummary:
        """Scan every Markdown document below ``root`` and return the corpus summary."""
        root_path = resolve_root(root)
        config = self._config or load_config(root_path)
        classifier = self._classifier or LanguageClassifier(config.aliases)
        max_workers = workers if workers is not None else config.scan.workers

        paths = discover_documents(
            root_path,
            extensions=config.scan.extensions,
            exclude_paths=config.exclude_paths,
            respect_gitignore=config.scan.respect_gitignore,
        )
        logger.info("Scanning %d documents under %s", len(paths), root_path)

        aggregator = Aggregator()
        if max_workers == 1:
            results: Iterable[DocumentResult] = self._run_sequential(
                root_path, paths, classifier, cancel, aggregator
            )
        else:
            results = self._run_parallel(
                root_path, paths, classifier, cancel, aggregator, max_workers
            )
        for result in results:
            _log_result(result)
            aggregator.add(result)

        summary = aggregator.summary()
        logger.info(
            "Found %d blocks in %d documents (%d malformed, %d unreadable)",
            summary.total_blocks,
            summary.total_documents,
            len(summary.malformed),
            len(summary.unreadable),
        )
        return summary

    def _run_sequential(
        self,
        root: Path,
        paths: Sequence[str],
        classifier: LanguageClassifier,
        cancel: Optional[threading.Event],
        aggregator: Aggregator,
    ) -> Iterator[DocumentResult]:
        for rel_path in paths:
            if cancel is not None and cancel.is_set():
                logger.info("Scan cancelled before %s", display_path(rel_path))
                aggregator.mark_cancelled()
                return
            yield _process(root, rel_path, classifier)

    def _run_parallel(
        self,
        root: Path,
        paths: Sequence[str],
        classifier: LanguageClassifier,
        cancel: Optional[threading.Event],
        aggregator: Aggregator,
        max_workers: Optional[int],
    ) -> Iterator[DocumentResult]:
        # Workers return partial results; only this generator's consumer merges them.
        limit = max_workers or default_worker_count()
        with ThreadPoolExecutor(max_workers=limit, thread_name_prefix="mdscan") as pool:
            pending: Set[Future[DocumentResult]] = set()
            queue: List[str] = list(reversed(paths))

            while queue or pending:
                while queue and len(pending) < limit * 2:
                    if cancel is not None and cancel.is_set():
                        logger.info("Scan cancelled with %d documents left", len(queue))
                        aggregator.mark_cancelled()
                        queue.clear()
                        break
                    pending.add(pool.submit(_process, root, queue.pop(), classifier))
                if not pending:
                    break
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    yield future.result()


def default_worker_count() -> int:
    """Match the ThreadPoolExecutor default pool size."""
    return min(32, (os.cpu_count() or 1) + 4)


def _process(root: Path, rel_path: str, classifier: LanguageClassifier) -> DocumentResult:
    loaded = read_document(root, rel_path)
    if isinstance(loaded, UnreadableDocument):
        return DocumentResult(path=loaded.path, unreadable=loaded)
    return scan_document(loaded, classifier)


def _log_result(result: DocumentResult) -> None:
    if result.unreadable is not None:
        logger.debug("Unreadable document %s: %s", result.path, result.unreadable.error)
    elif result.malformed is not None:
        logger.debug(
            "Unterminated fence in %s at line %d", result.path, result.malformed.line
        )


def scan_corpus(
    root: str | Path,
    *,
    workers: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
) -> CorpusSummary:
    """Convenience wrapper around :class:`CorpusScanner`."""
    return CorpusScanner().scan(root, workers=workers, cancel=cancel)


__all__ = ["CorpusScanner", "display_path", "read_document", "scan_corpus", "scan_document"]
