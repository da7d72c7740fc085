from __future__ import annotations

import logging
from typing import Iterable

from .errors import EmptyTargetsError
from .types import (
    RISK_PLACEHOLDER,
    DeniedPackageRow,
    GrantReport,
    LicenseAggregate,
    PackageFinding,
    ReportView,
    UnlicensedPackageRow,
)

logger = logging.getLogger(__name__)

UNLICENSED = "unlicensed"
DENIED = "denied"
SKIPPED = "skipped"


def classify_finding(finding: PackageFinding) -> str:
    if finding.is_unlicensed:
        return UNLICENSED
    if finding.is_denied:
        return DENIED
    return SKIPPED


def _denied(findings: Iterable[PackageFinding]) -> Iterable[PackageFinding]:
    return (finding for finding in findings if classify_finding(finding) == DENIED)


def aggregate_licenses(findings: Iterable[PackageFinding]) -> list[LicenseAggregate]:
    """Count license occurrences across denied findings, sorted by license id.

    The risk category recorded for a license is the one seen on its first
    occurrence. A license listed twice on the same finding counts twice.
    """

    aggregates: dict[str, LicenseAggregate] = {}
    for finding in _denied(findings):
        for ref in finding.licenses:
            entry = aggregates.get(ref.id)
            if entry is None:
                entry = aggregates[ref.id] = LicenseAggregate(id=ref.id, risk_category=ref.risk_label)
            entry.count += 1
    return sorted(aggregates.values(), key=lambda entry: entry.id)


def _denied_row(finding: PackageFinding) -> DeniedPackageRow:
    license_list = ", ".join(ref.display for ref in finding.licenses) or RISK_PLACEHOLDER
    sort_key = " ".join(sorted(ref.id for ref in finding.licenses)) or " "
    return DeniedPackageRow(
        name=finding.name,
        version=finding.version,
        type=finding.type,
        license_list=license_list,
        license_sort_key=sort_key,
    )


def denied_rows(findings: Iterable[PackageFinding]) -> list[DeniedPackageRow]:
    rows = [_denied_row(finding) for finding in _denied(findings)]
    return sorted(rows, key=lambda row: row.sort_key)


def unlicensed_rows(findings: Iterable[PackageFinding]) -> list[UnlicensedPackageRow]:
    rows = [
        UnlicensedPackageRow(name=finding.name, version=finding.version, type=finding.type)
        for finding in findings
        if classify_finding(finding) == UNLICENSED
    ]
    return sorted(rows, key=lambda row: row.sort_key)


def build_view(report: GrantReport) -> ReportView:
    target = report.primary_target
    if target is None:
        raise EmptyTargetsError()
    if len(report.targets) > 1:
        logger.debug("Ignoring %d additional target(s)", len(report.targets) - 1)

    findings = target.findings
    view = ReportView(
        tool=report.tool,
        version=report.version,
        status=target.status,
        target_ref=target.source_ref,
        packages=target.packages,
        licenses=target.licenses,
        license_summary=aggregate_licenses(findings),
        denied_packages=denied_rows(findings),
        unlicensed_packages=unlicensed_rows(findings),
    )
    logger.debug(
        "Aggregated %d finding(s): %d denied license(s), %d denied package(s), %d unlicensed package(s)",
        len(findings),
        view.license_summary_count,
        view.denied_count,
        view.unlicensed_count,
    )
    return view
