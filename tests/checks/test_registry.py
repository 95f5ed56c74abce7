from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from fsct.checks import (
    CATEGORY_PREFIXES,
    Check,
    CheckRegistry,
    build_registry,
    catalog,
    select_checks,
)
from fsct.checks import _coerce_check
from fsct.config import FsctConfig, ReviewerConfig
from fsct.executor import run_checks
from fsct.models import Finding
from fsct.project import INFO_PLIST_PATH, MANIFEST_PATH
from tests._fixtures.project_builder import ProjectBuilder, info_plist, manifest_xml

# Checks that report the absence of an artifact on an empty directory.
ABSENCE_CHECKS = {
    "POL-001",
    "POL-002",
    "POL-003",
    "POL-004",
    "POL-005",
    "TST-001",
    "TST-003",
    "TST-004",
    "TST-005",
    "TST-006",
    "LINT-001",
    "LINT-002",
    "LINT-003",
    "LINT-004",
    "LINT-005",
    "LINT-006",
    "DOC-001",
    "DOC-002",
    "DOC-003",
    "DOC-004",
}


class _StubCheck(Check):
    id = "EXT-001"
    name = "Stub"

    def run(self, project) -> List[Finding]:
        return []


def test_empty_project_only_fails_absence_checks(project_builder: ProjectBuilder) -> None:
    checks = build_registry().all()

    result = run_checks(project_builder.build(), checks)

    assert {finding.id for finding in result.findings} == ABSENCE_CHECKS
    assert len(result.findings) == len(ABSENCE_CHECKS)
    assert result.checks_run == len(checks)
    assert result.summary.passed == len(checks) - len(ABSENCE_CHECKS)


def test_static_catalog_size_and_unique_ids() -> None:
    registry = build_registry()

    assert len(registry) == 75
    assert len(set(registry.ids())) == len(registry)
    assert len(registry.by_prefix("AND")) == 12
    assert len(registry.by_prefix("IOS-")) == 12
    assert registry.by_prefix("REV") == []
    assert registry.by_prefix("AI") == []


def test_reviewer_checks_need_reviewer_block(tmp_path: Path) -> None:
    without = build_registry(FsctConfig(root=tmp_path))
    with_reviewer = build_registry(FsctConfig(root=tmp_path, reviewer=ReviewerConfig()))

    assert "REV-001" not in without
    assert [check.id for check in with_reviewer.by_prefix("REV")] == [
        "REV-001",
        "REV-002",
        "REV-003",
        "REV-004",
    ]


def test_select_checks_by_platform_and_lists() -> None:
    registry = build_registry()

    android_only = select_checks(registry, ios=False)
    assert not any(check.id.startswith("IOS-") for check in android_only)
    assert any(check.id.startswith("AND-") for check in android_only)

    included = select_checks(registry, include=["AND-001", "SEC-003"])
    assert [check.id for check in included] == ["AND-001", "SEC-003"]

    skipped = select_checks(registry, skip=["AND-001"])
    assert "AND-001" not in [check.id for check in skipped]
    assert len(skipped) == len(registry) - 1


def test_register_replaces_existing_id() -> None:
    registry = CheckRegistry()
    first, second = _StubCheck(), _StubCheck()

    registry.register(first)
    registry.register(second)

    assert len(registry) == 1
    assert registry.get("EXT-001") is second


def test_register_rejects_non_checks() -> None:
    registry = CheckRegistry()

    with pytest.raises(TypeError):
        registry.register(object())  # type: ignore[arg-type]


def test_coerce_check_accepts_classes_instances_and_factories() -> None:
    assert isinstance(_coerce_check(_StubCheck), _StubCheck)
    instance = _StubCheck()
    assert _coerce_check(instance) is instance
    assert isinstance(_coerce_check(lambda: _StubCheck()), _StubCheck)
    with pytest.raises(TypeError):
        _coerce_check(lambda: "nope")


def test_catalog_lists_every_family() -> None:
    rows = catalog()
    prefixes = {check_id.split("-", 1)[0] for check_id, _, _ in rows}

    assert prefixes == set(CATEGORY_PREFIXES)
    assert ("AND-005", "Debuggable Check", "Android") in rows
    assert ("REV-002", "Placeholder Reviewer Email Detected", "Reviewer") in rows
    assert ("AI-005", "AI Reviewer Notes Generation", "AI Analysis") in rows
    assert len(rows) == 75 + 4 + 5


def test_every_check_is_deterministic_on_a_populated_project(
    project_builder: ProjectBuilder, tmp_path: Path
) -> None:
    project_builder.write(
        {
            MANIFEST_PATH: manifest_xml(
                'android:debuggable="true"',
                '  <uses-permission android:name="android.permission.CAMERA"/>',
            ),
            "android/app/build.gradle": 'applicationId "com.example.app"\ntargetSdkVersion 33\n',
            INFO_PLIST_PATH: info_plist({"CFBundleIdentifier": "com.example.app"}),
            "pubspec.yaml": "name: app\ndependencies:\n  http: ^1.1.0\n  image_picker: ^1.0.0\n",
            "lib/main.dart": (
                "const apiKey = 'abcdef123456';\n"
                "void main() { print('http://api.acme.io'); login(); }\n"
                "// TODO: remove\n"
            ),
            "test/widget_test.dart": "void main() {}\n",
        }
    )
    project = project_builder.build()
    config = FsctConfig(root=tmp_path, reviewer=ReviewerConfig(email="test@example.com", password="password"))

    for check in build_registry(config).all():
        assert check.run(project) == check.run(project), check.id
