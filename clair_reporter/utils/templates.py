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

"""Markdown body template for tickets filed on trackers that render Markdown."""

TICKET_BODY_TEMPLATE = """# Security Alert – {{ package }}

## General Information

- **Repository:** {{ repo }}
- **Package:** {{ package }}
- **Version:** {{ version }}
- **Priority:** {{ priority }}
- **Severity:** {{ severity }}

## Ownership

- **Team:** {{ dev_team }}
- **Assignee:** {{ assignee }}

## Vulnerabilities ({{ finding_count }})

{{ findings }}

## Raw Scanner Output

```
{{ description }}
```
"""
