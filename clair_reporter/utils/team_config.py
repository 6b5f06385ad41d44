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

"""Repository-to-team mapping – loading the team config JSON and
resolving the owning team / assignee of a repository with fallbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .common import load_json_file, vprint
from .models import TeamKey, TeamRepository


@dataclass(frozen=True)
class TeamLookups:
    teams: dict[str, str]
    assignees: dict[str, str]


def parse_team_config(data: Any) -> list[TeamRepository]:
    """Decode an already-loaded team mapping array.

    Missing fields decode to ``""``. Raises ``ValueError`` on a wrong shape.
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("team config must be a JSON array")

    entries: list[TeamRepository] = []
    for i, obj in enumerate(data):
        if not isinstance(obj, dict):
            raise ValueError(f"team config entry #{i} must be an object")
        entries.append(
            TeamRepository(
                repo=str(obj.get(TeamKey.REPO) or ""),
                team=str(obj.get(TeamKey.TEAM) or ""),
                assignee=str(obj.get(TeamKey.ASSIGNEE) or ""),
            )
        )
    return entries


def load_team_config(path: str) -> list[TeamRepository]:
    if not path:
        raise SystemExit("ERROR: missing path to team config JSON, pass --team-path <path to json file>")

    data = load_json_file(path, what="team config")
    try:
        entries = parse_team_config(data)
    except ValueError as exc:
        raise SystemExit(f"ERROR: invalid team config {path}: {exc}") from exc

    print(f"Loaded {len(entries)} repository-team mappings from {path}")
    return entries


def build_team_lookups(entries: list[TeamRepository]) -> TeamLookups:
    """Index *entries* by repository; a repeated repository keeps the last entry."""
    teams: dict[str, str] = {}
    assignees: dict[str, str] = {}
    for entry in entries:
        if entry.repo in teams:
            vprint(f"Team mapping for {entry.repo!r} appears more than once; last entry wins")
        teams[entry.repo] = entry.team
        assignees[entry.repo] = entry.assignee
    return TeamLookups(teams=teams, assignees=assignees)


def resolve_owner(lookup: dict[str, str], repo: str, default: str) -> str:
    """Return ``lookup[repo]`` when present and non-empty, else *default*."""
    return lookup.get(repo) or default
