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

"""Scan report processing utilities.

Modules
-------
common          Shared low-level utilities (verbose logging, warnings, JSON file loading).
models          Core dataclass definitions (ScanReport, Feature, TeamRepository, Ticket, Config).
report_loader   ``klar`` report decoding and repository-name derivation.
team_config     Repository-team mapping loading and owner resolution.
priority        Two-tier severity-to-priority classification.
templates       Markdown ticket body template.
ticket_builder  Ticket, description, title and body construction.
"""
