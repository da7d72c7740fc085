from __future__ import annotations

"""Shared data structures for Grant report conversion.

The decoded input document and the derived, render-ready view live in
separate modules; this module keeps a single import path for both.
"""

from .types_findings import DENY_DECISIONS, RISK_PLACEHOLDER, LicenseRef, PackageFinding
from .types_report import GrantReport, Target
from .types_summary import LicenseSummary, PackageSummary
from .types_view import DeniedPackageRow, LicenseAggregate, ReportView, UnlicensedPackageRow

__all__ = [
    "DENY_DECISIONS",
    "RISK_PLACEHOLDER",
    "DeniedPackageRow",
    "GrantReport",
    "LicenseAggregate",
    "LicenseRef",
    "LicenseSummary",
    "PackageFinding",
    "PackageSummary",
    "ReportView",
    "Target",
    "UnlicensedPackageRow",
]
