#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""Scan report loading – decoding the JSON report produced by ``klar``
into a :class:`ScanReport` and deriving the short repository name used
for team lookups and tickets.
"""

from __future__ import annotations

import json
import os
from typing import Any

from .common import load_json_file, vprint, warn
from .models import Feature, FeatureKey, ReportKey, ScanReport

REPO_SEPARATOR = "/"


def repo_name(identifier: str) -> str:
    """Return the part of *identifier* after the first ``/``.

    ``"acme/widgets"`` becomes ``"widgets"``. An identifier without a
    separator is returned unchanged.
    """
    if REPO_SEPARATOR not in identifier:
        warn(f"repository {identifier!r} has no {REPO_SEPARATOR!r} separator; using it as-is")
        return identifier
    return identifier.split(REPO_SEPARATOR, 1)[1]


def parse_feature(obj: Any) -> Feature:
    if not isinstance(obj, dict):
        raise ValueError(f"vulnerability entry must be an object, got {type(obj).__name__}")
    return Feature(
        name=str(obj.get(FeatureKey.NAME) or ""),
        severity=str(obj.get(FeatureKey.SEVERITY) or ""),
        raw=obj,
    )


def parse_scan_report(data: Any) -> ScanReport:
    """Decode an already-loaded ``klar`` report document.

    Raises ``ValueError`` when the document does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ValueError("report must be a JSON object")

    repo = str(data.get(ReportKey.REPO) or "").strip()
    if not repo:
        raise ValueError(f"{ReportKey.REPO.value!r} is missing or empty")

    raw_vulns = data.get(ReportKey.VULNERABILITIES)
    if raw_vulns is None:
        raw_vulns = {}
    if not isinstance(raw_vulns, dict):
        raise ValueError(f"{ReportKey.VULNERABILITIES.value!r} must be an object keyed by package")

    vulnerabilities: dict[str, list[Feature]] = {}
    for package, features in raw_vulns.items():
        if features is None:
            features = []
        if not isinstance(features, list):
            raise ValueError(f"vulnerabilities of package {package!r} must be a list")
        vulnerabilities[str(package)] = [parse_feature(f) for f in features]

    return ScanReport(repo=repo, vulnerabilities=vulnerabilities)


def load_scan_report(path: str) -> ScanReport:
    """Read the ``klar`` JSON report at *path*; any failure is fatal."""
    data = load_json_file(path, what="scan report")
    try:
        report = parse_scan_report(data)
    except ValueError as exc:
        raise SystemExit(f"ERROR: invalid scan report {path}: {exc}") from exc

    print(f"Loaded {len(report.vulnerabilities)} vulnerable packages from {path} (repo={report.repo})")

    if os.getenv("DEBUG_REPORT") == "1":
        print("DEBUG: full report payload:\n" + json.dumps(data, indent=2, sort_keys=True))
    else:
        for package, features in report.vulnerabilities.items():
            vprint(f"  {package}: {len(features)} vulnerabilities")

    return report
