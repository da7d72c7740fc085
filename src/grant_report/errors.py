from __future__ import annotations


class GrantReportError(Exception):
    """Base class for failures while converting a Grant report."""


class ParseError(GrantReportError, ValueError):
    """The input bytes are not a well-formed Grant JSON report."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"parse grant report json: {detail}")
        self.detail = detail


class EmptyTargetsError(GrantReportError, ValueError):
    def __init__(self) -> None:
        super().__init__("grant report has no targets")


class RenderError(GrantReportError, RuntimeError):
    """The report template could not be applied to the derived data."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"execute template: {detail}")
        self.detail = detail
