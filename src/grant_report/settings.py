from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .reporting import REPORT_FORMATS

DEFAULT_REPORT_NAMES = {"markdown": "report.md", "md": "report.md", "json": "report-view.json"}
SOURCE_REPORT_NAME = "report.json"


@dataclass
class ConverterSettings:
    """Options shared by the CLI and YAML config files."""

    format: str = "markdown"
    report_name: Optional[str] = None
    fail_on_denied: bool = False
    fail_on_unlicensed: bool = False

    @property
    def output_name(self) -> str:
        return self.report_name or DEFAULT_REPORT_NAMES[self.format]

    def merged(self, **overrides) -> "ConverterSettings":
        """Return a copy with every non-None override applied."""

        values = {
            "format": self.format,
            "report_name": self.report_name,
            "fail_on_denied": self.fail_on_denied,
            "fail_on_unlicensed": self.fail_on_unlicensed,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return _validated(ConverterSettings(**values))


def _validated(settings: ConverterSettings) -> ConverterSettings:
    settings.format = str(settings.format).lower()
    if settings.format not in REPORT_FORMATS:
        raise ValueError(f"Unknown report format: {settings.format}")
    if settings.report_name is not None and not isinstance(settings.report_name, str):
        raise ValueError(f"report_name must be a string, got {settings.report_name!r}")
    for key in ("fail_on_denied", "fail_on_unlicensed"):
        if not isinstance(getattr(settings, key), bool):
            raise ValueError(f"{key} must be true or false, got {getattr(settings, key)!r}")
    return settings


def load_settings(path: Path) -> ConverterSettings:
    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping of settings")

    return _validated(
        ConverterSettings(
            format=raw.get("format") or "markdown",
            report_name=raw.get("report_name"),
            fail_on_denied=raw.get("fail_on_denied") or False,
            fail_on_unlicensed=raw.get("fail_on_unlicensed") or False,
        )
    )
