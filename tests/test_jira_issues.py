import argparse

import pytest
import requests

from clair_reporter.shared.jira_issues import JiraReporter, JiraReporterMaker, build_jira_fields
from clair_reporter.shared.reporter import ReporterError
from clair_reporter.utils.models import Ticket


class _Response:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


class _Session:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.auth = None
        self.calls = []
        self.response = response
        self.error = error

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _ticket(**overrides) -> Ticket:
    values = dict(
        repo="widgets",
        package="libfoo",
        description='{"Name":"CVE-1","Severity":"Critical"}',
        dev_team="Core",
        assignee="alice",
        priority="P1",
        severity="Sev-1",
        version="master",
    )
    values.update(overrides)
    return Ticket(**values)


def test_build_jira_fields_defaults_to_components_and_labels():
    fields = build_jira_fields(_ticket(), project="SEC")

    assert fields["project"] == {"key": "SEC"}
    assert fields["issuetype"] == {"name": "Bug"}
    assert fields["priority"] == {"name": "P1"}
    assert fields["components"] == [{"name": "Core"}]
    assert fields["assignee"] == {"name": "alice"}
    assert fields["versions"] == [{"name": "master"}]
    assert fields["labels"] == ["security", "widgets", "Sev-1"]
    assert fields["description"] == '{"Name":"CVE-1","Severity":"Critical"}'


def test_build_jira_fields_uses_custom_fields_and_skips_unassigned():
    fields = build_jira_fields(
        _ticket(assignee=""),
        project="SEC",
        team_field="customfield_1",
        severity_field="customfield_2",
    )

    assert fields["customfield_1"] == {"value": "Core"}
    assert fields["customfield_2"] == {"value": "Sev-1"}
    assert "components" not in fields
    assert "assignee" not in fields
    assert fields["labels"] == ["security", "widgets"]


def test_report_posts_issue_and_returns_key():
    session = _Session(_Response(201, {"key": "SEC-12"}))
    reporter = JiraReporter("https://jira.example.com/", "SEC", user="bot", token="t0k", session=session)

    assert reporter.report(_ticket()) == "SEC-12"

    url, kwargs = session.calls[0]
    assert url == "https://jira.example.com/rest/api/2/issue"
    assert kwargs["json"]["fields"]["summary"] == "[P1] Security Alert – libfoo in widgets"
    assert kwargs["timeout"] == 30
    assert session.auth == ("bot", "t0k")


def test_bearer_token_without_user():
    session = _Session(_Response(201, {"key": "SEC-1"}))
    JiraReporter("https://jira.example.com", "SEC", token="pat", session=session)
    assert session.headers["Authorization"] == "Bearer pat"
    assert session.auth is None


def test_report_raises_on_rejected_issue():
    session = _Session(_Response(400, text='{"errors":{"priority":"invalid"}}'))
    reporter = JiraReporter("https://jira.example.com", "SEC", token="pat", session=session)

    with pytest.raises(ReporterError) as exc:
        reporter.report(_ticket())
    assert "400" in str(exc.value)


def test_report_wraps_transport_errors():
    session = _Session(error=requests.ConnectionError("refused"))
    reporter = JiraReporter("https://jira.example.com", "SEC", token="pat", session=session)

    with pytest.raises(ReporterError):
        reporter.report(_ticket())


def _args(**overrides) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    JiraReporterMaker().add_arguments(parser)
    args = parser.parse_args([])
    for key, value in overrides.items():
        setattr(args, key, value)
    return args


def test_maker_requires_credentials(monkeypatch):
    for var in ("JIRA_URL", "JIRA_USER", "JIRA_TOKEN", "JIRA_PROJECT"):
        monkeypatch.delenv(var, raising=False)

    with pytest.raises(ReporterError) as exc:
        JiraReporterMaker().make(_args(dry_run=False))
    assert "--jira-url" in str(exc.value)

    # Dry runs never post, so missing credentials are tolerated.
    assert isinstance(JiraReporterMaker().make(_args(dry_run=True)), JiraReporter)


def test_maker_reads_environment(monkeypatch):
    monkeypatch.setenv("JIRA_URL", "https://jira.example.com")
    monkeypatch.setenv("JIRA_TOKEN", "pat")
    monkeypatch.setenv("JIRA_PROJECT", "SEC")
    monkeypatch.delenv("JIRA_USER", raising=False)

    reporter = JiraReporterMaker().make(_args())
    assert reporter.base_url == "https://jira.example.com"
    assert reporter.project == "SEC"


def test_report_tolerates_non_object_response_body():
    session = _Session(_Response(201, ["unexpected"]))
    reporter = JiraReporter("https://jira.example.com", "SEC", token="pat", session=session)

    assert reporter.report(_ticket()) is None
