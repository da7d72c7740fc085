import json
from pathlib import Path

import pytest

from conftest import finding, grant_document
from grant_report.errors import EmptyTargetsError, ParseError, RenderError
from grant_report.reporting import convert, render_markdown, render_report, to_markdown, write_report

EXPECTED_MINIMAL_MARKDOWN = """\
# Grant License Report

- **Tool:** grant 0.6.2
- **Status:** noncompliant
- **Target:** sbom.json

<details>
<summary><strong>Summary</strong> – packages & licenses counts</summary>

| | Packages | Licenses |
|--|----------|----------|
| Total | 2 | 1 unique |
| Allowed | 0 | 0 |
| Denied | 1 | 1 |
| Ignored | 0 | - |
| Unlicensed | 1 | 0 non-SPDX |

</details>

<details>
<summary><strong>Licenses (summary)</strong> – 1 unique licenses in denied packages</summary>

| License | Risk | Denied packages |
|---------|------|-----------------|
| GPL-2.0-only | Strong Copyleft (High Risk) | 1 |


</details>

<details>
<summary><strong>Denied / non-compliant packages</strong> (1), sorted by license</summary>

| Name | Version | Type | Licenses |
|------|---------|------|----------|
| pkg-a | 1.0 | apk | GPL-2.0-only (Strong Copyleft (High Risk)) |


</details>

<details>
<summary><strong>Unlicensed packages</strong> (1) – no license info; review or add to policy</summary>

| Name | Version | Type |
|------|---------|------|
| foo/bar | v1.0.0 | go-module |


</details>
"""


def _section(markdown: str, title: str) -> str:
    start = markdown.index(f"<strong>{title}</strong>")
    return markdown[start : markdown.index("</details>", start)]


def test_minimal_report_matches_layout(minimal_grant_json):
    assert to_markdown(minimal_grant_json) == EXPECTED_MINIMAL_MARKDOWN


def test_output_is_deterministic(minimal_grant_json):
    assert to_markdown(minimal_grant_json) == to_markdown(minimal_grant_json)


def test_unlicensed_package_never_listed_as_denied(minimal_grant_json):
    markdown = to_markdown(minimal_grant_json)

    assert "foo/bar" in _section(markdown, "Unlicensed packages")
    assert "foo/bar" not in _section(markdown, "Denied / non-compliant packages")
    assert "pkg-a" in _section(markdown, "Denied / non-compliant packages")


def test_multiple_licenses_per_package():
    markdown = to_markdown(
        grant_document([finding("pkg", licenses=[("MIT", "Permissive"), ("GPL-2.0", "Copyleft")])])
    )

    licenses = _section(markdown, "Licenses (summary)")
    assert "| GPL-2.0 | Copyleft | 1 |" in licenses
    assert "| MIT | Permissive | 1 |" in licenses
    assert licenses.index("GPL-2.0") < licenses.index("MIT")
    assert "| pkg | 1.0 | apk | MIT (Permissive), GPL-2.0 (Copyleft) |" in markdown


def test_license_summary_sorted_by_id():
    markdown = to_markdown(
        grant_document(
            [
                finding("m", licenses=[("MIT", "Permissive")]),
                finding("g", decision="denied", licenses=[("GPL-2.0-only", "Strong Copyleft (High Risk)")]),
            ]
        )
    )

    licenses = _section(markdown, "Licenses (summary)")
    assert "2 unique licenses in denied packages" in licenses
    assert licenses.index("| GPL-2.0-only |") < licenses.index("| MIT |")


def test_non_matching_decision_is_dropped_from_tables():
    markdown = to_markdown(grant_document([finding("quiet", decision="Deny", licenses=[("MIT", "")])]))

    assert "quiet" not in markdown
    assert "(0), sorted by license" in markdown


def test_empty_risk_renders_dash():
    markdown = to_markdown(grant_document([finding("pkg", licenses=[("Unknown-1", "")])]))

    assert "| Unknown-1 | - | 1 |" in markdown
    assert "| pkg | 1.0 | apk | Unknown-1 (-) |" in markdown


def test_values_are_html_escaped():
    markdown = to_markdown(grant_document([finding("<script>", licenses=[("A&B", "x")])]))

    assert "&lt;script&gt;" in markdown
    assert "A&amp;B (x)" in markdown
    # literal template text is left alone
    assert "packages & licenses counts" in markdown


def test_errors_propagate():
    with pytest.raises(ParseError):
        to_markdown(b"not json")
    with pytest.raises(EmptyTargetsError):
        to_markdown(b'{"run": {"targets": []}}')


def test_render_error_wraps_template_failures():
    with pytest.raises(RenderError) as excinfo:
        render_markdown(object())

    assert "execute template" in str(excinfo.value)


def test_json_format_keeps_sorted_tables():
    payload = json.loads(
        convert(
            grant_document(
                [
                    finding("b", licenses=[("MIT", "Permissive")]),
                    finding("a", licenses=[("MIT", "Permissive")]),
                    finding("none", decision="allow", pkg_type="npm"),
                ]
            ),
            "json",
        )
    )

    assert [row["name"] for row in payload["denied_packages"]] == ["a", "b"]
    assert payload["license_summary"] == [{"id": "MIT", "risk_category": "Permissive", "count": 2}]
    assert payload["unlicensed_packages"] == [{"name": "none", "version": "1.0", "type": "npm"}]
    assert payload["counts"] == {"licenses": 1, "denied": 2, "unlicensed": 1}


def test_unknown_format_rejected(minimal_grant_json):
    with pytest.raises(ValueError):
        convert(minimal_grant_json, "html")


def test_render_report_accepts_md_alias(minimal_grant_json):
    from grant_report.aggregation import build_view
    from grant_report.parser import parse_grant_report

    view = build_view(parse_grant_report(minimal_grant_json))
    assert render_report(view, "MD") == EXPECTED_MINIMAL_MARKDOWN


def test_write_report_creates_parent_directories(tmp_path: Path, minimal_grant_json):
    destination = tmp_path / "out" / "report.md"

    rendered = write_report(minimal_grant_json, destination)

    assert destination.read_text(encoding="utf-8") == rendered == EXPECTED_MINIMAL_MARKDOWN


def test_plus_sign_in_values_is_encoded():
    markdown = to_markdown(grant_document([finding("pkg", licenses=[("GPL-2.0+", "Strong Copyleft")])]))

    assert "| GPL-2.0&#43; | Strong Copyleft | 1 |" in markdown
    assert "| pkg | 1.0 | apk | GPL-2.0&#43; (Strong Copyleft) |" in markdown
    assert "GPL-2.0+" not in markdown
