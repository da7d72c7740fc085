from __future__ import annotations

import json
import logging
from typing import Any

from .errors import ParseError
from .types import (
    GrantReport,
    LicenseRef,
    LicenseSummary,
    PackageFinding,
    PackageSummary,
    Target,
)

logger = logging.getLogger(__name__)


def _expect_object(value: Any, path: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(f"{path}: expected object, got {_json_type(value)}")
    return value


def _expect_list(value: Any, path: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(f"{path}: expected array, got {_json_type(value)}")
    return value


def _string(obj: dict, key: str, path: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(f"{path}.{key}: expected string, got {_json_type(value)}")
    return value


def _integer(obj: dict, key: str, path: str) -> int:
    value = obj.get(key)
    if value is None:
        return 0
    # bool is an int subclass but JSON true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"{path}.{key}: expected integer, got {_json_type(value)}")
    return value


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _parse_license(raw: Any, path: str) -> LicenseRef:
    obj = _expect_object(raw, path)
    return LicenseRef(id=_string(obj, "id", path), risk_category=_string(obj, "riskCategory", path))


def _parse_finding(raw: Any, path: str) -> PackageFinding:
    obj = _expect_object(raw, path)
    licenses = [
        _parse_license(entry, f"{path}.licenses[{idx}]")
        for idx, entry in enumerate(_expect_list(obj.get("licenses"), f"{path}.licenses"))
    ]
    return PackageFinding(
        id=_string(obj, "id", path),
        name=_string(obj, "name", path),
        type=_string(obj, "type", path),
        version=_string(obj, "version", path),
        decision=_string(obj, "decision", path),
        licenses=licenses,
    )


def _parse_package_summary(raw: Any, path: str) -> PackageSummary:
    obj = _expect_object(raw, path)
    return PackageSummary(
        total=_integer(obj, "total", path),
        allowed=_integer(obj, "allowed", path),
        denied=_integer(obj, "denied", path),
        ignored=_integer(obj, "ignored", path),
        unlicensed=_integer(obj, "unlicensed", path),
    )


def _parse_license_summary(raw: Any, path: str) -> LicenseSummary:
    obj = _expect_object(raw, path)
    return LicenseSummary(
        unique=_integer(obj, "unique", path),
        allowed=_integer(obj, "allowed", path),
        denied=_integer(obj, "denied", path),
        non_spdx=_integer(obj, "nonSPDX", path),
    )


def _parse_target(raw: Any, path: str) -> Target:
    obj = _expect_object(raw, path)
    source = _expect_object(obj.get("source"), f"{path}.source")
    evaluation = _expect_object(obj.get("evaluation"), f"{path}.evaluation")
    summary = _expect_object(evaluation.get("summary"), f"{path}.evaluation.summary")
    findings = _expect_object(evaluation.get("findings"), f"{path}.evaluation.findings")
    packages_path = f"{path}.evaluation.findings.packages"

    return Target(
        source_type=_string(source, "type", f"{path}.source"),
        source_ref=_string(source, "ref", f"{path}.source"),
        status=_string(evaluation, "status", f"{path}.evaluation"),
        packages=_parse_package_summary(
            summary.get("packages"), f"{path}.evaluation.summary.packages"
        ),
        licenses=_parse_license_summary(
            summary.get("licenses"), f"{path}.evaluation.summary.licenses"
        ),
        findings=[
            _parse_finding(entry, f"{packages_path}[{idx}]")
            for idx, entry in enumerate(_expect_list(findings.get("packages"), packages_path))
        ],
    )


def _reject_constant(name: str) -> Any:
    raise ParseError(f"invalid JSON constant {name}")


def parse_grant_report(data: bytes | str) -> GrantReport:
    """Decode the JSON written by ``grant check --output json``.

    Decoding is structural: unknown keys are ignored and missing keys or
    ``null`` values fall back to empty strings, zero counts and empty lists.
    A value of the wrong JSON type is rejected with :class:`ParseError`.
    """

    text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise ParseError(str(exc)) from exc
    except RecursionError as exc:
        raise ParseError("exceeded max depth") from exc

    root = _expect_object(raw, "$")
    run = _expect_object(root.get("run"), "$.run")
    targets = [
        _parse_target(entry, f"$.run.targets[{idx}]")
        for idx, entry in enumerate(_expect_list(run.get("targets"), "$.run.targets"))
    ]
    report = GrantReport(
        tool=_string(root, "tool", "$"),
        version=_string(root, "version", "$"),
        targets=targets,
    )
    logger.debug("Decoded %s %s report with %d target(s)", report.tool, report.version, len(targets))
    return report
