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

"""Severity-to-priority classification of a package's vulnerabilities.

Only two tiers exist: a package with any critical finding is triaged as
P1 / Sev-1, everything else as P2 / Sev-2.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Feature

PRIORITY_CRITICAL = "P1"
SEVERITY_CRITICAL = "Sev-1"
PRIORITY_DEFAULT = "P2"
SEVERITY_DEFAULT = "Sev-2"

# Clair severity labels, matched case-sensitively.
CRITICAL_SEVERITIES: frozenset[str] = frozenset({"Critical", "Defcon1"})


def is_critical(feature: Feature) -> bool:
    return feature.severity in CRITICAL_SEVERITIES


def classify_severity(features: Iterable[Feature]) -> tuple[str, str]:
    """Return the ``(priority, severity)`` pair for one package's findings."""
    for feature in features:
        if is_critical(feature):
            return PRIORITY_CRITICAL, SEVERITY_CRITICAL
    return PRIORITY_DEFAULT, SEVERITY_DEFAULT
