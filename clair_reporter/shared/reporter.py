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

"""Reporter registry – named ticket-filing backends.

A backend registers a :class:`ReporterMaker` under a name. The maker adds
the backend's own command-line flags and builds a :class:`Reporter` from
the parsed arguments. Reporters are not idempotent: running the same scan
report twice files every ticket twice.
"""

from __future__ import annotations

import argparse

from ..utils.common import vprint
from ..utils.models import Ticket


class ReporterError(Exception):
    """A reporter could not be created or failed to file a ticket."""


class Reporter:
    """Files a :class:`Ticket` into an external tracking system."""

    def report(self, ticket: Ticket) -> str | None:
        """File *ticket*; return the created ticket reference when known.

        Raises :class:`ReporterError` on failure.
        """
        raise NotImplementedError


class ReporterMaker:
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Register backend-specific flags on *parser*."""

    def make(self, args: argparse.Namespace) -> Reporter:
        raise NotImplementedError


_makers: dict[str, ReporterMaker] = {}


def register_maker(name: str, maker: ReporterMaker) -> None:
    if name in _makers:
        raise ValueError(f"reporter {name!r} is already registered")
    _makers[name] = maker


def registered_names() -> list[str]:
    return sorted(_makers)


def maker_by_name(name: str) -> ReporterMaker:
    try:
        return _makers[name]
    except KeyError:
        known = ", ".join(registered_names()) or "none"
        raise ReporterError(f"unknown reporter {name!r} (registered: {known})") from None


def register_arguments(parser: argparse.ArgumentParser) -> None:
    """Let every registered backend add its flags to *parser*."""
    for name in registered_names():
        _makers[name].add_arguments(parser)


def make_reporters(names: tuple[str, ...] | list[str], args: argparse.Namespace) -> dict[str, Reporter]:
    """Build one reporter per name, in order; the first failure aborts."""
    reporters: dict[str, Reporter] = {}
    for name in names:
        if name in reporters:
            continue
        maker = maker_by_name(name)
        try:
            reporters[name] = maker.make(args)
        except ReporterError as exc:
            raise ReporterError(f"cannot create reporter {name!r}: {exc}") from exc
        vprint(f"Created reporter {name!r}")
    return reporters
