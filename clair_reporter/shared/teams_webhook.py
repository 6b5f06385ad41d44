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

"""Microsoft Teams reporter – posts each ticket as an Adaptive Card to a
Teams channel Incoming Webhook.

The card body is the Markdown ticket body. Teams renders only a limited
Markdown subset in a ``TextBlock`` (bold, italic, links, simple lists);
headings and code fences are delivered as plain text.

Environment variables
---------------------
TEAMS_WEBHOOK_URL  The Incoming Webhook URL for the target Teams channel.
"""

from __future__ import annotations

import argparse
import os
from typing import Any, Dict, List

import requests

from ..utils.common import vprint
from ..utils.models import Ticket
from ..utils.ticket_builder import build_ticket_body, build_ticket_title
from .reporter import Reporter, ReporterError, ReporterMaker, register_maker

REPORTER_NAME = "teams"


# ---------------------------------------------------------------------------
# Adaptive Card helpers
# ---------------------------------------------------------------------------

def _text_block(text: str, **kwargs: Any) -> Dict[str, Any]:
    block: Dict[str, Any] = {
        "type": "TextBlock",
        "text": text,
        "wrap": True,
    }
    block.update(kwargs)
    return block


def _build_card_body(ticket: Ticket) -> List[Dict[str, Any]]:
    subtitle = f"{ticket.priority} / {ticket.severity} – team {ticket.dev_team or 'N/A'}"
    return [
        {
            "type": "Container",
            "style": "attention" if ticket.priority == "P1" else "accent",
            "bleed": True,
            "items": [
                _text_block(build_ticket_title(ticket), weight="Bolder", size="Large"),
                _text_block(subtitle, isSubtle=True, spacing="None"),
            ],
        },
        {
            "type": "Container",
            "separator": True,
            "items": [_text_block(build_ticket_body(ticket))],
        },
    ]


def build_payload(ticket: Ticket) -> Dict[str, Any]:
    """Build the full webhook JSON payload (Adaptive Card message) for *ticket*."""
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "contentUrl": None,
                "content": {
                    "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
                    "type": "AdaptiveCard",
                    "version": "1.5",
                    "body": _build_card_body(ticket),
                },
            }
        ],
    }


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------

class TeamsWebhookReporter(Reporter):
    def __init__(self, webhook_url: str, *, session: requests.Session | None = None, timeout: int = 30) -> None:
        self.webhook_url = webhook_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def report(self, ticket: Ticket) -> str | None:
        try:
            resp = self.session.post(
                self.webhook_url,
                json=build_payload(ticket),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ReporterError(f"Teams webhook request failed: {exc}") from exc

        # Teams webhooks return 200 with body "1" on success.
        if resp.status_code != 200 or resp.text.strip() not in ("1", ""):
            raise ReporterError(
                f"Teams webhook request failed.\n"
                f"  Status : {resp.status_code}\n"
                f"  Body   : {resp.text}"
            )
        vprint(f"Posted package {ticket.package} to Teams")
        return None


class TeamsWebhookReporterMaker(ReporterMaker):
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("teams reporter")
        group.add_argument(
            "--teams-webhook-url",
            default=os.environ.get("TEAMS_WEBHOOK_URL", ""),
            help="Teams Incoming Webhook URL (default: $TEAMS_WEBHOOK_URL).",
        )

    def make(self, args: argparse.Namespace) -> Reporter:
        if not args.teams_webhook_url and not getattr(args, "dry_run", False):
            raise ReporterError("no webhook URL provided, set TEAMS_WEBHOOK_URL or pass --teams-webhook-url")
        return TeamsWebhookReporter(args.teams_webhook_url)


register_maker(REPORTER_NAME, TeamsWebhookReporterMaker())
