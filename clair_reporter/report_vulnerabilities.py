#!/usr/bin/env python3
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

"""File issue-tracker tickets for the vulnerable packages of a ``klar`` scan report.

Input:
- JSON report produced by ``klar`` (``--file-path``)
- JSON repository-team mapping (``--team-path``)

Design intent:
- One ticket per vulnerable package, per selected reporter.
- Priority is P1 / Sev-1 when any finding is Critical or Defcon1, else P2 / Sev-2.
- Owning team and assignee come from the team mapping, with configurable defaults.
- A failed ticket is logged and the run continues; the exit code stays 0.

Known limitation:
- Tickets are not de-duplicated. Running the same report twice files every
  ticket twice.

Draft / debug (no writes):
    `python3 -m clair_reporter.report_vulnerabilities --file-path report.json --team-path teams.json --dry-run`

Environment variables:
- `RUNNER_DEBUG=1` enables verbose logs, like `--verbose` (must be `0` or `1` when set).
- `DEBUG_REPORT=1` prints the full decoded scan report after loading.
"""

from __future__ import annotations

import argparse
import sys

from .shared import github_issues, jira_issues, teams_webhook  # noqa: F401 - registers reporters
from .shared.reporter import Reporter, ReporterError, make_reporters, register_arguments, registered_names
from .utils.common import is_verbose, parse_runner_debug, set_verbose_enabled, vprint
from .utils.models import Config, ReportResult, ScanReport
from .utils.report_loader import load_scan_report
from .utils.team_config import TeamLookups, build_team_lookups, load_team_config
from .utils.ticket_builder import build_ticket_body, build_ticket_title, build_tickets, resolve_ticket_owner

DEFAULT_REPORTER = jira_issues.REPORTER_NAME


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="File tickets for vulnerable packages found by klar/Clair")
    p.add_argument("--file-path", default="", help="path to the JSON report from klar")
    p.add_argument("--team-path", default="", help="path to the JSON repository-team mapping")
    p.add_argument("--default-team", default="Review", help="default team to assign tickets (default: Review)")
    p.add_argument("--default-assignee", default="", help="default assignee for tickets (default: unassigned)")
    p.add_argument("--default-version", default="master", help="default version for tickets (default: master)")
    p.add_argument(
        "--reporter",
        action="append",
        default=None,
        help=f"reporter to file tickets with; repeatable (default: {DEFAULT_REPORTER}, "
             f"available: {', '.join(registered_names())})",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not file tickets; only read the inputs and print intended tickets",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    register_arguments(p)
    return p


def build_config(args: argparse.Namespace) -> Config:
    if not args.file_path:
        raise SystemExit("ERROR: You must specify a path to the JSON file, pass --file-path <path to json file>")

    return Config(
        file_path=args.file_path,
        team_path=args.team_path,
        default_team=args.default_team,
        default_assignee=args.default_assignee,
        default_version=args.default_version,
        reporters=tuple(args.reporter or [DEFAULT_REPORTER]),
        dry_run=bool(args.dry_run),
        verbose=bool(args.verbose),
    )


def report_findings(
    report: ScanReport,
    lookups: TeamLookups,
    reporters: dict[str, Reporter],
    config: Config,
) -> ReportResult:
    """Build a ticket per vulnerable package and hand it to every reporter.

    A reporter failure is logged and does not stop the batch.
    """
    result = ReportResult()
    owner = resolve_ticket_owner(report, lookups, config)

    for name, reporter in reporters.items():
        result.filed[name] = 0
        result.failed[name] = 0

        for ticket in build_tickets(report, owner, config.default_version):
            if config.dry_run:
                print(
                    f"DRY-RUN: would report with {name}: repo={ticket.repo} package={ticket.package} "
                    f"team={ticket.dev_team} assignee={ticket.assignee or '-'} "
                    f"priority={ticket.priority} severity={ticket.severity} version={ticket.version} "
                    f"title={build_ticket_title(ticket)!r}"
                )
                if is_verbose():
                    print("DRY-RUN: body_preview_begin")
                    print(build_ticket_body(ticket))
                    print("DRY-RUN: body_preview_end")
                continue

            try:
                reporter.report(ticket)
            except ReporterError as exc:
                result.failed[name] += 1
                print(f"WARN: Cannot generate report with {name} for package {ticket.package}: {exc}", file=sys.stderr)
                continue
            result.filed[name] += 1

    return result


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())

    config = build_config(args)
    vprint(f"Scan report: {config.file_path}")

    lookups = build_team_lookups(load_team_config(config.team_path))

    try:
        reporters = make_reporters(config.reporters, args)
    except ReporterError as exc:
        raise SystemExit(f"ERROR: Cannot create requested reporters: {exc}") from exc

    report = load_scan_report(config.file_path)
    result = report_findings(report, lookups, reporters, config)

    if config.dry_run:
        print("DRY-RUN: no tickets were filed")
        return

    for name in reporters:
        print(f"Reporter {name}: filed {result.filed[name]} ticket(s), {result.failed[name]} failure(s)")


if __name__ == "__main__":
    main()
