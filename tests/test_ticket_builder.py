import json

from clair_reporter.utils.models import Config, Feature, ScanReport, TeamRepository, Ticket
from clair_reporter.utils.team_config import build_team_lookups
from clair_reporter.utils.ticket_builder import (
    DESCRIPTION_SEPARATOR,
    build_ticket,
    build_ticket_body,
    build_ticket_title,
    build_tickets,
    resolve_ticket_owner,
    features_to_description,
    split_description,
)


def _feature(name: str, severity: str, **extra) -> Feature:
    raw = {"Name": name, "Severity": severity, **extra}
    return Feature(name=name, severity=severity, raw=raw)


def test_separator_is_two_backslashes():
    assert DESCRIPTION_SEPARATOR == "\\" * 2


def test_description_joins_compact_json_fragments():
    features = [_feature("CVE-1", "Critical"), _feature("CVE-2", "Low", Link="https://example.com/CVE-2")]

    description = features_to_description(features)

    assert description == (
        '{"Name":"CVE-1","Severity":"Critical"}'
        "\\\\"
        '{"Name":"CVE-2","Severity":"Low","Link":"https://example.com/CVE-2"}'
    )
    fragments = split_description(description)
    assert [json.loads(f) for f in fragments] == [f.raw for f in features]


def test_backslash_in_field_does_not_break_fragments():
    features = [_feature("CVE-1", "High", Description="C:\\path\\to\\lib"), _feature("CVE-2", "Low")]

    description = features_to_description(features)
    fragments = split_description(description)

    assert len(fragments) == 2
    assert [json.loads(f) for f in fragments] == [f.raw for f in features]
    assert json.loads(fragments[0])["Description"] == "C:\\path\\to\\lib"


def test_body_lists_each_finding_once_with_backslash_fields():
    features = [_feature("CVE-1", "High", Description="C:\\path"), _feature("CVE-2", "Low")]
    ticket = build_ticket("widgets", "libfoo", features, dev_team="Core", assignee="", version="master")

    body = build_ticket_body(ticket)

    assert "## Vulnerabilities (2)" in body
    assert "- **CVE-1** (High)" in body
    assert "- **CVE-2** (Low)" in body


def test_unserializable_feature_is_skipped(capsys):
    bad = Feature(name="CVE-X", severity="Low", raw={"Name": "CVE-X", "When": object()})
    description = features_to_description([_feature("CVE-1", "High"), bad])

    assert split_description(description) == ['{"Name":"CVE-1","Severity":"High"}']
    assert "CVE-X" in capsys.readouterr().err


def test_empty_feature_list_has_empty_description():
    assert features_to_description([]) == ""
    assert split_description("") == []


def test_build_ticket_sets_priority_and_fields():
    ticket = build_ticket(
        "widgets",
        "libfoo",
        [_feature("CVE-1", "Medium"), _feature("CVE-2", "Defcon1")],
        dev_team="Core",
        assignee="alice",
        version="master",
    )
    assert ticket.repo == "widgets"
    assert ticket.package == "libfoo"
    assert ticket.dev_team == "Core"
    assert ticket.assignee == "alice"
    assert (ticket.priority, ticket.severity) == ("P1", "Sev-1")
    assert ticket.version == "master"
    assert len(split_description(ticket.description)) == 2


def test_build_tickets_resolves_owner_and_short_repo():
    report = ScanReport(
        repo="acme/widgets",
        vulnerabilities={"libfoo": [_feature("CVE-1", "High")], "libbar": [_feature("CVE-2", "Low")]},
    )
    lookups = build_team_lookups([TeamRepository(repo="widgets", team="Core", assignee="")])
    config = Config(file_path="r.json", team_path="t.json", default_assignee="bob", default_version="1.0")

    owner = resolve_ticket_owner(report, lookups, config)
    tickets = {t.package: t for t in build_tickets(report, owner, config.default_version)}

    assert set(tickets) == {"libfoo", "libbar"}
    for ticket in tickets.values():
        assert ticket.repo == "widgets"
        assert ticket.dev_team == "Core"
        assert ticket.assignee == "bob"
        assert ticket.version == "1.0"
        assert ticket.priority == "P2"


def test_title_and_body_render_ticket():
    ticket = Ticket(
        repo="widgets",
        package="libfoo",
        description=features_to_description(
            [_feature("CVE-1", "Critical", FeatureName="libfoo", FeatureVersion="1.0", FixedBy="1.1")]
        ),
        dev_team="Core",
        assignee="",
        priority="P1",
        severity="Sev-1",
        version="master",
    )

    assert build_ticket_title(ticket) == "[P1] Security Alert – libfoo in widgets"

    body = build_ticket_body(ticket)
    assert "- **Team:** Core" in body
    assert "- **Assignee:** unassigned" in body
    assert "## Vulnerabilities (1)" in body
    assert "- **CVE-1** (Critical) in `libfoo 1.0`, fixed by `1.1`" in body
    assert ticket.description in body
