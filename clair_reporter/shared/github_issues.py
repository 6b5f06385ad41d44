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

"""GitHub Issues reporter – files one issue per ticket in the scanned
repository of a GitHub organisation, using PyGithub.

Environment variables
---------------------
GITHUB_TOKEN  Token with ``issues: write`` on the target repositories.
GITHUB_ORG    Organisation (or user) that owns the scanned repositories.
"""

from __future__ import annotations

import argparse
import os
from typing import Any

import requests
from github import Github, GithubException

from ..utils.common import vprint
from ..utils.models import Ticket
from ..utils.ticket_builder import build_ticket_body, build_ticket_title
from .reporter import Reporter, ReporterError, ReporterMaker, register_maker

REPORTER_NAME = "github"
LABEL_SCOPE_SECURITY = "scope:Security"
LABEL_TYPE_TECH_DEBT = "type:Tech-debt"
DEFAULT_LABELS = [LABEL_SCOPE_SECURITY, LABEL_TYPE_TECH_DEBT]


def build_issue_labels(ticket: Ticket, base_labels: list[str]) -> list[str]:
    labels = list(base_labels)
    labels.append(f"priority:{ticket.priority}")
    labels.append(f"severity:{ticket.severity}")
    if ticket.dev_team:
        labels.append(f"team:{ticket.dev_team}")
    return labels


class GithubIssueReporter(Reporter):
    def __init__(self, client: Github, org: str, *, labels: list[str] | None = None) -> None:
        self.client = client
        self.org = org
        self.labels = list(DEFAULT_LABELS if labels is None else labels)
        self._repos: dict[str, Any] = {}

    def _get_repo(self, full_name: str) -> Any:
        if full_name not in self._repos:
            self._repos[full_name] = self.client.get_repo(full_name)
        return self._repos[full_name]

    def report(self, ticket: Ticket) -> str | None:
        full_name = f"{self.org}/{ticket.repo}"
        kwargs: dict[str, Any] = {
            "title": build_ticket_title(ticket),
            "body": build_ticket_body(ticket),
            "labels": build_issue_labels(ticket, self.labels),
        }
        if ticket.assignee:
            kwargs["assignees"] = [ticket.assignee]

        try:
            issue = self._get_repo(full_name).create_issue(**kwargs)
        except GithubException as exc:
            raise ReporterError(f"GitHub issue creation in {full_name} failed: {exc}") from exc
        except requests.RequestException as exc:
            raise ReporterError(f"GitHub request for {full_name} failed: {exc}") from exc

        ref = f"{full_name}#{issue.number}"
        print(f"Created issue {ref} for package {ticket.package} ({ticket.priority})")
        return ref


class GithubIssueReporterMaker(ReporterMaker):
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("github reporter")
        group.add_argument(
            "--github-token",
            default=os.environ.get("GITHUB_TOKEN", ""),
            help="GitHub token (default: $GITHUB_TOKEN).",
        )
        group.add_argument(
            "--github-org",
            default=os.environ.get("GITHUB_ORG", ""),
            help="Organisation owning the scanned repositories (default: $GITHUB_ORG).",
        )
        group.add_argument(
            "--github-label",
            action="append",
            default=None,
            help=f"Label added to every issue; repeatable (default: {', '.join(DEFAULT_LABELS)}).",
        )

    def make(self, args: argparse.Namespace) -> Reporter:
        if not args.github_org:
            raise ReporterError("missing --github-org")
        if not args.github_token:
            if not getattr(args, "dry_run", False):
                raise ReporterError("missing --github-token")
            vprint("DRY-RUN: github reporter configured without --github-token")

        return GithubIssueReporter(
            Github(args.github_token or None),
            args.github_org,
            labels=args.github_label,
        )


register_maker(REPORTER_NAME, GithubIssueReporterMaker())
