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

"""Ticket construction from a scan report, the team lookups and the run
configuration.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from ..shared.templates import render_markdown_template
from .common import warn
from .models import Config, Feature, FeatureKey, ScanReport, Ticket
from .priority import classify_severity
from .report_loader import repo_name
from .team_config import TeamLookups, resolve_owner
from .templates import TICKET_BODY_TEMPLATE

# Literal two-backslash delimiter; downstream description parsers split on it.
DESCRIPTION_SEPARATOR = "\\\\"


def feature_to_json(feature: Feature) -> str:
    """Serialize *feature* in compact form, keeping the report's key order."""
    return json.dumps(feature.raw, separators=(",", ":"), ensure_ascii=False)


def features_to_description(features: list[Feature]) -> str:
    fragments: list[str] = []
    for feature in features:
        try:
            fragments.append(feature_to_json(feature))
        except (TypeError, ValueError) as exc:
            warn(f"cannot serialize vulnerability {feature.name!r}, leaving it out of the description: {exc}")
    return DESCRIPTION_SEPARATOR.join(fragments)


def split_description(description: str) -> list[str]:
    """Return the JSON fragments of a description built by :func:`features_to_description`.

    Fragments are located by decoding each JSON object in turn, since a
    backslash inside a field value serializes to the same text as the
    separator.
    """
    fragments: list[str] = []
    decoder = json.JSONDecoder()
    idx = 0
    while idx < len(description):
        try:
            _, end = decoder.raw_decode(description, idx)
        except json.JSONDecodeError:
            fragments.extend(description[idx:].split(DESCRIPTION_SEPARATOR))
            break
        fragments.append(description[idx:end])
        idx = end
        if description.startswith(DESCRIPTION_SEPARATOR, idx):
            idx += len(DESCRIPTION_SEPARATOR)
    return fragments


def build_ticket(
    repo: str,
    package: str,
    features: list[Feature],
    *,
    dev_team: str,
    assignee: str,
    version: str,
) -> Ticket:
    priority, severity = classify_severity(features)
    return Ticket(
        repo=repo,
        package=package,
        description=features_to_description(features),
        dev_team=dev_team,
        assignee=assignee,
        priority=priority,
        severity=severity,
        version=version,
    )


@dataclass(frozen=True)
class TicketOwner:
    """Repository name and resolved owners shared by every ticket of a report."""
    repo: str
    dev_team: str
    assignee: str


def resolve_ticket_owner(report: ScanReport, lookups: TeamLookups, config: Config) -> TicketOwner:
    repo = repo_name(report.repo)
    return TicketOwner(
        repo=repo,
        dev_team=resolve_owner(lookups.teams, repo, config.default_team),
        assignee=resolve_owner(lookups.assignees, repo, config.default_assignee),
    )


def build_tickets(report: ScanReport, owner: TicketOwner, version: str) -> Iterator[Ticket]:
    """Yield one ticket per vulnerable package of *report*."""
    for package, features in report.vulnerabilities.items():
        yield build_ticket(
            owner.repo,
            package,
            features,
            dev_team=owner.dev_team,
            assignee=owner.assignee,
            version=version,
        )


def build_ticket_title(ticket: Ticket) -> str:
    """Build the one-line summary used by trackers that need a title."""
    return f"[{ticket.priority}] Security Alert – {ticket.package} in {ticket.repo}"


def _finding_line(fragment: str) -> str:
    """Summarise one serialized vulnerability as a Markdown bullet text."""
    try:
        obj = json.loads(fragment)
    except json.JSONDecodeError:
        return f"`{fragment}`"
    if not isinstance(obj, dict):
        return f"`{fragment}`"

    name = str(obj.get(FeatureKey.NAME) or "unknown")
    severity = str(obj.get(FeatureKey.SEVERITY) or "Unknown")
    line = f"**{name}** ({severity})"

    installed = " ".join(
        str(obj.get(k) or "").strip() for k in ("FeatureName", "FeatureVersion")
    ).strip()
    if installed:
        line += f" in `{installed}`"
    fixed_by = str(obj.get("FixedBy") or "").strip()
    if fixed_by:
        line += f", fixed by `{fixed_by}`"
    link = str(obj.get("Link") or "").strip()
    if link:
        line += f" – {link}"
    return line


def build_ticket_template_values(ticket: Ticket) -> dict[str, Any]:
    findings = [_finding_line(f) for f in split_description(ticket.description)]
    return {
        "repo": ticket.repo,
        "package": ticket.package,
        "version": ticket.version or "N/A",
        "priority": ticket.priority,
        "severity": ticket.severity,
        "dev_team": ticket.dev_team or "N/A",
        "assignee": ticket.assignee or "unassigned",
        "finding_count": len(findings),
        "findings": findings,
        "description": ticket.description,
    }


def build_ticket_body(ticket: Ticket) -> str:
    """Render the Markdown body of *ticket*."""
    values = build_ticket_template_values(ticket)
    return render_markdown_template(TICKET_BODY_TEMPLATE, values).strip() + "\n"
