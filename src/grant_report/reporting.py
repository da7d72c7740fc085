from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

from jinja2 import Environment, StrictUndefined, TemplateError, select_autoescape
from markupsafe import Markup, escape

from .aggregation import build_view
from .errors import RenderError
from .parser import parse_grant_report
from .types import ReportView

logger = logging.getLogger(__name__)


def _escape_value(value) -> Markup:
    # "+" is encoded as well, e.g. GPL-2.0+ -> GPL-2.0&#43;
    return Markup(str(escape(value)).replace("+", "&#43;"))


# Interpolated values are HTML-escaped; literal template text is not.
env = Environment(
    autoescape=select_autoescape(["html", "xml"], default_for_string=True),
    finalize=_escape_value,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)

MARKDOWN_TEMPLATE = """\
# Grant License Report

- **Tool:** {{ view.tool }} {{ view.version }}
- **Status:** {{ view.status }}
- **Target:** {{ view.target_ref }}

<details>
<summary><strong>Summary</strong> – packages & licenses counts</summary>

| | Packages | Licenses |
|--|----------|----------|
| Total | {{ view.packages.total }} | {{ view.licenses.unique }} unique |
| Allowed | {{ view.packages.allowed }} | {{ view.licenses.allowed }} |
| Denied | {{ view.packages.denied }} | {{ view.licenses.denied }} |
| Ignored | {{ view.packages.ignored }} | - |
| Unlicensed | {{ view.packages.unlicensed }} | {{ view.licenses.non_spdx }} non-SPDX |

</details>

<details>
<summary><strong>Licenses (summary)</strong> – {{ view.license_summary_count }} unique licenses in denied packages</summary>

| License | Risk | Denied packages |
|---------|------|-----------------|
{% for row in view.license_summary %}| {{ row.id }} | {{ row.risk_category }} | {{ row.count }} |
{% endfor %}

</details>

<details>
<summary><strong>Denied / non-compliant packages</strong> ({{ view.denied_count }}), sorted by license</summary>

| Name | Version | Type | Licenses |
|------|---------|------|----------|
{% for row in view.denied_packages %}| {{ row.name }} | {{ row.version }} | {{ row.type }} | {{ row.license_list }} |
{% endfor %}

</details>

<details>
<summary><strong>Unlicensed packages</strong> ({{ view.unlicensed_count }}) – no license info; review or add to policy</summary>

| Name | Version | Type |
|------|---------|------|
{% for row in view.unlicensed_packages %}| {{ row.name }} | {{ row.version }} | {{ row.type }} |
{% endfor %}

</details>
"""

REPORT_FORMATS = ("markdown", "md", "json")


def render_markdown(view: ReportView) -> str:
    try:
        template = env.from_string(MARKDOWN_TEMPLATE)
        return template.render(view=view)
    except TemplateError as exc:
        raise RenderError(str(exc)) from exc


def render_json(view: ReportView) -> str:
    payload = {
        "tool": view.tool,
        "version": view.version,
        "status": view.status,
        "target": view.target_ref,
        "summary": {"packages": asdict(view.packages), "licenses": asdict(view.licenses)},
        "license_summary": [asdict(row) for row in view.license_summary],
        "denied_packages": [asdict(row) for row in view.denied_packages],
        "unlicensed_packages": [asdict(row) for row in view.unlicensed_packages],
        "counts": {
            "licenses": view.license_summary_count,
            "denied": view.denied_count,
            "unlicensed": view.unlicensed_count,
        },
    }
    return json.dumps(payload, indent=2)


def render_report(view: ReportView, fmt: str) -> str:
    fmt = fmt.lower()
    if fmt in {"md", "markdown"}:
        return render_markdown(view)
    if fmt == "json":
        return render_json(view)
    raise ValueError(f"Unknown report format: {fmt}")


def to_markdown(data: bytes | str) -> str:
    """Convert a Grant JSON report (``--output json``) to Markdown.

    Only the first target is rendered. Raises :class:`ParseError` for
    malformed input, :class:`EmptyTargetsError` when the report has no
    targets and :class:`RenderError` if the template cannot be applied.
    """

    return render_markdown(build_view(parse_grant_report(data)))


def convert(data: bytes | str, fmt: str = "markdown") -> str:
    return render_report(build_view(parse_grant_report(data)), fmt)


def write_report(data: bytes | str, destination: Path | None, fmt: str = "markdown") -> str:
    output = convert(data, fmt)
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output, encoding="utf-8")
        logger.info("Wrote %s report to %s", fmt, destination)
    return output
