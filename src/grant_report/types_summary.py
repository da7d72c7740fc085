from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PackageSummary:
    total: int = 0
    allowed: int = 0
    denied: int = 0
    ignored: int = 0
    unlicensed: int = 0


@dataclass
class LicenseSummary:
    unique: int = 0
    allowed: int = 0
    denied: int = 0
    non_spdx: int = 0
