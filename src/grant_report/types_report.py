from __future__ import annotations

from dataclasses import dataclass, field

from .types_findings import PackageFinding
from .types_summary import LicenseSummary, PackageSummary


@dataclass
class Target:
    source_type: str = ""
    source_ref: str = ""
    status: str = ""
    packages: PackageSummary = field(default_factory=PackageSummary)
    licenses: LicenseSummary = field(default_factory=LicenseSummary)
    findings: list[PackageFinding] = field(default_factory=list)


@dataclass
class GrantReport:
    """Decoded `grant check --output json` document."""

    tool: str = ""
    version: str = ""
    targets: list[Target] = field(default_factory=list)

    @property
    def primary_target(self) -> Target | None:
        return self.targets[0] if self.targets else None
