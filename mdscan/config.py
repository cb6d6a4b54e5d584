"""Configuration loading for mdscan (.mdscan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .discovery import DEFAULT_EXTENSIONS
from .errors import ConfigError

CONFIG_FILENAME = ".mdscan.yml"
REPORT_FORMATS = ("json", "text")


@dataclass
class ScanConfig:
    """Discovery and worker pool settings."""

    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    workers: Optional[int] = None
    respect_gitignore: bool = True


@dataclass
class ReportConfig:
    """Default report options; CLI flags take precedence."""

    format: str = "json"
    fail_on_malformed: bool = False


@dataclass
class MdscanConfig:
    """Represents the settings defined in .mdscan.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    aliases: Dict[str, str] = field(default_factory=dict)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> MdscanConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MdscanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        extensions = _as_str_list(scan_data.get("extensions"))
        if extensions:
            scan.extensions = extensions
        workers = _as_int(scan_data.get("workers"))
        if workers is not None:
            if workers < 1:
                raise ConfigError("scan.workers must be a positive integer")
            scan.workers = workers
        respect = _as_bool(scan_data.get("respect_gitignore"))
        if respect is not None:
            scan.respect_gitignore = respect

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    if report_data:
        fmt = _as_str(report_data.get("format"))
        if fmt is not None:
            fmt = fmt.lower()
            if fmt not in REPORT_FORMATS:
                raise ConfigError(
                    f"report.format must be one of {', '.join(REPORT_FORMATS)} (got '{fmt}')"
                )
            report.format = fmt
        report.fail_on_malformed = _as_bool(report_data.get("fail_on_malformed")) or False

    languages_data = _as_dict(data.get("languages"))
    aliases: Dict[str, str] = {}
    for alias, target in _as_dict(languages_data.get("aliases")).items():
        target_str = _as_str(target)
        if target_str is None:
            raise ConfigError(f"languages.aliases.{alias} must be a language name")
        aliases[str(alias)] = target_str

    return MdscanConfig(
        root=root,
        scan=scan,
        report=report,
        aliases=aliases,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "MdscanConfig",
    "REPORT_FORMATS",
    "ReportConfig",
    "ScanConfig",
    "load_config",
]
