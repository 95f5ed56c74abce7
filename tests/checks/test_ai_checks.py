from __future__ import annotations

import json

from fsct.ai.client import AIClient, ClientConfig
from fsct.ai.errors import APIError
from fsct.checks.ai import AI_CHECKS, PolicyComplianceCheck, ai_checks
from fsct.checks.android import DebuggableCheck
from fsct.executor import run_checks
from fsct.project import MANIFEST_PATH
from tests._fixtures.fake_provider import FakeProvider
from tests._fixtures.project_builder import ProjectBuilder, manifest_xml

FAST = ClientConfig(max_retries=0, retry_delay=0.01)

ANALYSIS = json.dumps(
    {
        "risk_level": "high",
        "store_readiness": {"app_store": False, "play_store": False},
        "insights": [
            {"severity": "high", "title": "No privacy policy", "description": "Add one"},
            {"severity": "warning", "title": "Backup enabled", "description": "Disable it"},
        ],
        "suggestions": [{"priority": 1, "issue": "privacy", "action": "Publish a policy"}],
    }
)


def _client(outcomes) -> AIClient:
    return AIClient(FakeProvider(outcomes), FAST)


def test_ai_checks_need_a_client() -> None:
    assert ai_checks(None) == []
    checks = ai_checks(_client(["{}"]))
    assert [check.id for check in checks] == [factory.id for factory in AI_CHECKS]
    assert all(check.deferred for check in checks)


def test_insights_become_numbered_findings(project_builder: ProjectBuilder) -> None:
    check = PolicyComplianceCheck(_client([ANALYSIS]))

    findings = check.run(project_builder.build())

    assert [(f.id, f.severity) for f in findings] == [
        ("AI-002-001", "HIGH"),
        ("AI-002-002", "WARNING"),
    ]
    assert findings[0].title == "[AI Policy Compliance Analysis] No privacy policy"
    assert findings[0].suggestion == "Publish a policy"
    assert findings[1].suggestion == ""


def test_suggestions_only_response(project_builder: ProjectBuilder) -> None:
    content = json.dumps({"suggestions": [{"issue": "Add terms", "action": "Link ToS"}]})

    findings = PolicyComplianceCheck(_client([content])).run(project_builder.build())

    assert [(f.id, f.severity, f.message, f.suggestion) for f in findings] == [
        ("AI-002-001", "INFO", "Add terms", "Link ToS")
    ]


def test_empty_analysis_reports_completion(project_builder: ProjectBuilder) -> None:
    content = json.dumps({"risk_level": "low", "store_readiness": {"app_store": True}})

    findings = PolicyComplianceCheck(_client([content])).run(project_builder.build())

    assert len(findings) == 1
    assert findings[0].id == "AI-002-001"
    assert findings[0].message == "AI analysis completed with risk level: low"
    assert findings[0].suggestion == "Store readiness - App Store: true, Play Store: false"


def test_provider_failure_becomes_info_finding(project_builder: ProjectBuilder) -> None:
    check = PolicyComplianceCheck(_client([APIError("fake", 401, "bad key")]))

    findings = check.run(project_builder.build())

    assert [(f.id, f.severity) for f in findings] == [("AI-002", "INFO")]
    assert "bad key" in findings[0].message
    assert "--format prompt" in findings[0].suggestion


def test_ai_checks_run_after_static_checks_and_see_their_findings(
    project_builder: ProjectBuilder,
) -> None:
    project_builder.write({MANIFEST_PATH: manifest_xml('android:debuggable="true"')})
    provider = FakeProvider([ANALYSIS])
    ai_check = PolicyComplianceCheck(AIClient(provider, FAST))

    result = run_checks(project_builder.build(), [ai_check, DebuggableCheck()])

    prompt = provider.requests[0].user_prompt
    assert "AND-005: Debuggable Check (Android)" in prompt
    assert "- Debuggable: true" in prompt
    assert "- Checks Passed: 1/2" in prompt
    assert [f.id for f in result.findings] == ["AI-002-001", "AND-005", "AI-002-002"]
    assert result.checks_run == 2


def test_standalone_run_omits_check_totals(project_builder: ProjectBuilder) -> None:
    provider = FakeProvider([ANALYSIS])

    PolicyComplianceCheck(AIClient(provider, FAST)).run(project_builder.build())

    assert "- Checks Passed:" not in provider.requests[0].user_prompt
