from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

DENY_DECISIONS = ("deny", "denied")
RISK_PLACEHOLDER = "-"


@dataclass
class LicenseRef:
    id: str = ""
    risk_category: str = ""

    @property
    def risk_label(self) -> str:
        return self.risk_category or RISK_PLACEHOLDER

    @property
    def display(self) -> str:
        return f"{self.id} ({self.risk_label})"


@dataclass
class PackageFinding:
    id: str = ""
    name: str = ""
    type: str = ""
    version: str = ""
    decision: str = ""
    licenses: List[LicenseRef] = field(default_factory=list)

    @property
    def is_unlicensed(self) -> bool:
        return not self.licenses

    @property
    def is_denied(self) -> bool:
        """Return True for findings that belong in the denied table.

        The decision match is exact and case-sensitive. A finding without any
        license information is never denied, it is reported as unlicensed.
        """

        return bool(self.licenses) and self.decision in DENY_DECISIONS
