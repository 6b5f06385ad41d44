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

"""Scan report, team mapping and ticket data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ReportKey(StrEnum):
    """Top-level keys of the ``klar`` JSON report."""
    REPO = "Repo"
    VULNERABILITIES = "Vulnerabilities"


class FeatureKey(StrEnum):
    """Keys of a single vulnerability entry inside the ``klar`` report."""
    NAME = "Name"
    SEVERITY = "Severity"


class TeamKey(StrEnum):
    """Keys of a repository-team mapping entry."""
    REPO = "Repo"
    TEAM = "Team"
    ASSIGNEE = "Assignee"


@dataclass(frozen=True)
class Feature:
    """One vulnerability finding attached to a package.

    ``raw`` is the decoded JSON object as found in the report; every
    field other than name and severity is carried through untouched.
    """
    name: str
    severity: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ScanReport:
    repo: str
    vulnerabilities: dict[str, list[Feature]]


@dataclass(frozen=True)
class TeamRepository:
    repo: str
    team: str
    assignee: str


@dataclass(frozen=True)
class Ticket:
    """A record handed to a reporter backend for filing."""
    repo: str
    package: str
    description: str
    dev_team: str
    assignee: str
    priority: str
    severity: str
    version: str


@dataclass(frozen=True)
class Config:
    """Run configuration, built once from the command line."""
    file_path: str
    team_path: str
    default_team: str = "Review"
    default_assignee: str = ""
    default_version: str = "master"
    reporters: tuple[str, ...] = ("jira",)
    dry_run: bool = False
    verbose: bool = False


@dataclass
class ReportResult:
    """Per-reporter outcome counts of a run."""
    filed: dict[str, int] = field(default_factory=dict)
    failed: dict[str, int] = field(default_factory=dict)
