"""Test-suite presence checks (TST-*)."""

from __future__ import annotations

import re
from typing import List

from ..models import SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..project import Project
from .base import Check

MIN_TEST_FILES = 3
_WIDGET_TEST = re.compile(r"(?i)testWidgets")
_MOCK = re.compile(r"(?i)(mockito|mocktail|Mock|when|verify)")
_GOLDEN = re.compile(r"(?i)matchesGoldenFile")


def _tests_mention(project: Project, pattern: "re.Pattern[str]") -> bool:
    return any(pattern.search(source.read_text()) for source in project.test_files)


class TestDirectoryCheck(Check):
    id = "TST-001"
    name = "Test Directory Existence"

    def run(self, project: Project) -> List[Finding]:
        if project.test_files:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "No test directory found in project",
                file="project root",
                suggestion="Add a test/ directory with unit and widget tests",
            )
        ]


class TestFileNamingCheck(Check):
    id = "TST-002"
    name = "Test File Naming Convention"

    def run(self, project: Project) -> List[Finding]:
        return [
            self.finding(
                SEVERITY_WARNING,
                f"Test file should end with _test.dart: {source.relative}",
                file=source.relative,
                suggestion="Rename file to follow Flutter test naming conventions",
            )
            for source in project.test_files
            if source.relative.startswith("test/")
            and not source.relative.endswith("_test.dart")
        ]


class TestCoverageCheck(Check):
    id = "TST-003"
    name = "Test Coverage Check"

    def run(self, project: Project) -> List[Finding]:
        count = len(project.test_files)
        if count == 0:
            message = "No test files found"
            suggestion = "Add unit and widget tests for better code coverage"
        elif count < MIN_TEST_FILES:
            message = f"Low number of test files: {count}"
            suggestion = "Consider adding more tests for better coverage"
        else:
            return []
        return [self.finding(SEVERITY_WARNING, message, file="test/", suggestion=suggestion)]


class WidgetTestCheck(Check):
    id = "TST-004"
    name = "Widget Test Presence"

    def run(self, project: Project) -> List[Finding]:
        if _tests_mention(project, _WIDGET_TEST):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "No widget tests found",
                file="test/",
                suggestion="Add widget tests (testWidgets) for UI components",
            )
        ]


class MockDependenciesCheck(Check):
    id = "TST-005"
    name = "Mock Dependencies Usage"

    def run(self, project: Project) -> List[Finding]:
        if _tests_mention(project, _MOCK):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "No mock dependencies found in tests",
                file="test/",
                suggestion="Consider using mockito for mocking dependencies in tests",
            )
        ]


class GoldenTestCheck(Check):
    id = "TST-006"
    name = "Golden Test Presence"

    def run(self, project: Project) -> List[Finding]:
        if _tests_mention(project, _GOLDEN):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "No golden tests found",
                file="test/",
                suggestion="Consider adding golden tests for UI regression testing",
            )
        ]


TESTING_CHECKS = (
    TestDirectoryCheck,
    TestFileNamingCheck,
    TestCoverageCheck,
    WidgetTestCheck,
    MockDependenciesCheck,
    GoldenTestCheck,
)

__all__ = [
    "GoldenTestCheck",
    "MockDependenciesCheck",
    "TESTING_CHECKS",
    "TestCoverageCheck",
    "TestDirectoryCheck",
    "TestFileNamingCheck",
    "WidgetTestCheck",
]
