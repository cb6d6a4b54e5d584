"""Markdown code block extraction and classification."""

from .aggregate import Aggregator, CorpusSummary
from .classifier import LanguageClassifier, classify
from .errors import ConfigError, InvalidRoot, MdscanError
from .models import ClassifiedBlock, CodeBlock, Document, Language, MalformedBlock
from .pipeline import CorpusScanner, scan_corpus

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "ClassifiedBlock",
    "CodeBlock",
    "ConfigError",
    "CorpusScanner",
    "CorpusSummary",
    "Document",
    "InvalidRoot",
    "Language",
    "LanguageClassifier",
    "MalformedBlock",
    "MdscanError",
    "classify",
    "scan_corpus",
]
