from __future__ import annotations

from dataclasses import dataclass, field

from .types_summary import LicenseSummary, PackageSummary


@dataclass
class LicenseAggregate:
    id: str
    risk_category: str
    count: int = 0


@dataclass
class DeniedPackageRow:
    name: str
    version: str
    type: str
    license_list: str
    license_sort_key: str

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.license_sort_key, self.name)


@dataclass
class UnlicensedPackageRow:
    name: str
    version: str
    type: str

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.type, self.name)


@dataclass
class ReportView:
    """Everything the report templates need, already aggregated and sorted."""

    tool: str
    version: str
    status: str
    target_ref: str
    packages: PackageSummary = field(default_factory=PackageSummary)
    licenses: LicenseSummary = field(default_factory=LicenseSummary)
    license_summary: list[LicenseAggregate] = field(default_factory=list)
    denied_packages: list[DeniedPackageRow] = field(default_factory=list)
    unlicensed_packages: list[UnlicensedPackageRow] = field(default_factory=list)

    @property
    def license_summary_count(self) -> int:
        return len(self.license_summary)

    @property
    def denied_count(self) -> int:
        return len(self.denied_packages)

    @property
    def unlicensed_count(self) -> int:
        return len(self.unlicensed_packages)
