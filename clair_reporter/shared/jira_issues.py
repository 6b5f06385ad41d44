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

"""Jira reporter – files one Jira issue per ticket through the Jira REST
API (``POST /rest/api/2/issue``).

Environment variables
---------------------
JIRA_URL      Base URL of the Jira instance.
JIRA_USER     User for basic authentication (omit to use a bearer token).
JIRA_TOKEN    API token / password, or personal access token.
JIRA_PROJECT  Project key the issues are created in.
"""

from __future__ import annotations

import argparse
import os
from typing import Any

import requests

from ..utils.common import vprint
from ..utils.models import Ticket
from ..utils.ticket_builder import build_ticket_title
from .reporter import Reporter, ReporterError, ReporterMaker, register_maker

REPORTER_NAME = "jira"
DEFAULT_ISSUE_TYPE = "Bug"
JIRA_LABEL_SECURITY = "security"


def build_jira_fields(
    ticket: Ticket,
    *,
    project: str,
    issue_type: str = DEFAULT_ISSUE_TYPE,
    team_field: str = "",
    severity_field: str = "",
) -> dict[str, Any]:
    """Map *ticket* onto the ``fields`` object of a Jira create-issue request.

    The team goes to *team_field* when configured, otherwise to a component
    of the same name. The severity goes to *severity_field* when configured,
    otherwise to a label.
    """
    labels = [JIRA_LABEL_SECURITY, ticket.repo.replace(" ", "-")]
    fields: dict[str, Any] = {
        "project": {"key": project},
        "summary": build_ticket_title(ticket),
        "description": ticket.description,
        "issuetype": {"name": issue_type},
        "priority": {"name": ticket.priority},
    }

    if ticket.dev_team:
        if team_field:
            fields[team_field] = {"value": ticket.dev_team}
        else:
            fields["components"] = [{"name": ticket.dev_team}]

    if severity_field:
        fields[severity_field] = {"value": ticket.severity}
    else:
        labels.append(ticket.severity)

    if ticket.assignee:
        fields["assignee"] = {"name": ticket.assignee}
    if ticket.version:
        fields["versions"] = [{"name": ticket.version}]

    fields["labels"] = labels
    return fields


class JiraReporter(Reporter):
    def __init__(
        self,
        base_url: str,
        project: str,
        *,
        user: str = "",
        token: str = "",
        issue_type: str = DEFAULT_ISSUE_TYPE,
        team_field: str = "",
        severity_field: str = "",
        session: requests.Session | None = None,
        timeout: int = 30,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.project = project
        self.issue_type = issue_type
        self.team_field = team_field
        self.severity_field = severity_field
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})
        if user:
            self.session.auth = (user, token)
        elif token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def report(self, ticket: Ticket) -> str | None:
        fields = build_jira_fields(
            ticket,
            project=self.project,
            issue_type=self.issue_type,
            team_field=self.team_field,
            severity_field=self.severity_field,
        )
        try:
            resp = self.session.post(
                f"{self.base_url}/rest/api/2/issue",
                json={"fields": fields},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ReporterError(f"Jira request failed: {exc}") from exc

        if resp.status_code not in (200, 201):
            raise ReporterError(
                f"Jira rejected issue for package {ticket.package!r}.\n"
                f"  Status : {resp.status_code}\n"
                f"  Body   : {resp.text}"
            )

        try:
            payload = resp.json()
        except ValueError:
            payload = None
        key = None
        if isinstance(payload, dict):
            key = str(payload.get("key") or "") or None

        print(f"Created Jira issue {key or '(unknown key)'} for package {ticket.package} ({ticket.priority})")
        return key


class JiraReporterMaker(ReporterMaker):
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("jira reporter")
        group.add_argument(
            "--jira-url",
            default=os.environ.get("JIRA_URL", ""),
            help="Jira base URL (default: $JIRA_URL).",
        )
        group.add_argument(
            "--jira-user",
            default=os.environ.get("JIRA_USER", ""),
            help="Jira user for basic auth; leave empty for bearer-token auth (default: $JIRA_USER).",
        )
        group.add_argument(
            "--jira-token",
            default=os.environ.get("JIRA_TOKEN", ""),
            help="Jira API token or password (default: $JIRA_TOKEN).",
        )
        group.add_argument(
            "--jira-project",
            default=os.environ.get("JIRA_PROJECT", ""),
            help="Jira project key (default: $JIRA_PROJECT).",
        )
        group.add_argument(
            "--jira-issue-type",
            default=DEFAULT_ISSUE_TYPE,
            help=f"Jira issue type (default: {DEFAULT_ISSUE_TYPE}).",
        )
        group.add_argument(
            "--jira-team-field",
            default="",
            help="Custom field id (e.g. customfield_10100) holding the team; components are used when empty.",
        )
        group.add_argument(
            "--jira-severity-field",
            default="",
            help="Custom field id holding the severity; a label is used when empty.",
        )

    def make(self, args: argparse.Namespace) -> Reporter:
        missing = [
            flag
            for flag, value in (
                ("--jira-url", args.jira_url),
                ("--jira-token", args.jira_token),
                ("--jira-project", args.jira_project),
            )
            if not value
        ]
        if missing:
            if not getattr(args, "dry_run", False):
                raise ReporterError(f"missing {', '.join(missing)}")
            vprint(f"DRY-RUN: jira reporter configured without {', '.join(missing)}")

        return JiraReporter(
            args.jira_url,
            args.jira_project,
            user=args.jira_user,
            token=args.jira_token,
            issue_type=args.jira_issue_type,
            team_field=args.jira_team_field,
            severity_field=args.jira_severity_field,
        )


register_maker(REPORTER_NAME, JiraReporterMaker())
