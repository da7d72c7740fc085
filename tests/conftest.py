import json
import sys
from pathlib import Path

import pytest

# Ensure src package is importable without installation
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))


MINIMAL_GRANT_JSON = """{
  "tool": "grant",
  "version": "0.6.2",
  "run": {
    "targets": [
      {
        "source": { "type": "file", "ref": "sbom.json" },
        "evaluation": {
          "status": "noncompliant",
          "summary": {
            "packages": { "total": 2, "allowed": 0, "denied": 1, "ignored": 0, "unlicensed": 1 },
            "licenses": { "unique": 1, "allowed": 0, "denied": 1, "nonSPDX": 0 }
          },
          "findings": {
            "packages": [
              {
                "id": "apk:pkg-a@1.0",
                "name": "pkg-a",
                "type": "apk",
                "version": "1.0",
                "decision": "deny",
                "licenses": [
                  { "id": "GPL-2.0-only", "riskCategory": "Strong Copyleft (High Risk)" }
                ]
              },
              {
                "id": "go-module:foo/bar@v1.0.0",
                "name": "foo/bar",
                "type": "go-module",
                "version": "v1.0.0",
                "decision": "allow",
                "licenses": []
              }
            ]
          }
        }
      }
    ]
  }
}"""


def grant_document(packages, status="noncompliant", ref="sbom.json", extra_targets=()):
    """Build a Grant JSON payload around a list of finding dicts."""

    target = {
        "source": {"type": "file", "ref": ref},
        "evaluation": {
            "status": status,
            "summary": {
                "packages": {"total": len(packages), "allowed": 0, "denied": 0, "ignored": 0, "unlicensed": 0},
                "licenses": {"unique": 0, "allowed": 0, "denied": 0, "nonSPDX": 0},
            },
            "findings": {"packages": packages},
        },
    }
    return json.dumps({"tool": "grant", "version": "0.6.2", "run": {"targets": [target, *extra_targets]}})


def finding(name, decision="deny", licenses=(), pkg_type="apk", version="1.0"):
    return {
        "id": f"{pkg_type}:{name}@{version}",
        "name": name,
        "type": pkg_type,
        "version": version,
        "decision": decision,
        "licenses": [{"id": lic, "riskCategory": risk} for lic, risk in licenses],
    }


@pytest.fixture
def minimal_grant_json() -> bytes:
    return MINIMAL_GRANT_JSON.encode()
