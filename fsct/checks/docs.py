"""Project documentation checks (DOC-*)."""

from __future__ import annotations

import re
from typing import List

from ..models import SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..project import README_NAMES, Project
from .base import Check

CHANGELOG_NAMES = ("CHANGELOG.md", "CHANGELOG", "CHANGES.md", "CHANGES")
LICENSE_NAMES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING")
MAX_UNDOCUMENTED_FILES = 10

_README_SECTIONS = re.compile(r"(?i)(install|setup|usage|example|feature)")
_DOC_COMMENT = re.compile(r"///")
_TODO_OR_FIXME = re.compile(r"TODO|FIXME")


class ReadmePresenceCheck(Check):
    id = "DOC-001"
    name = "README.md Presence"

    def run(self, project: Project) -> List[Finding]:
        if project.has_root_file(*README_NAMES):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "README.md not found",
                file="project root",
                suggestion="Add README.md with project description, setup instructions, "
                "and usage examples",
            )
        ]


class ReadmeContentCheck(Check):
    id = "DOC-002"
    name = "README.md Content Quality"

    def run(self, project: Project) -> List[Finding]:
        if project.readme and _README_SECTIONS.search(project.readme):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "README.md may be missing content",
                file="README.md",
                suggestion="Add sections for installation, usage, and examples",
            )
        ]


class ChangelogPresenceCheck(Check):
    id = "DOC-003"
    name = "CHANGELOG.md Presence"

    def run(self, project: Project) -> List[Finding]:
        if project.has_root_file(*CHANGELOG_NAMES):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "CHANGELOG.md not found",
                file="project root",
                suggestion="Add CHANGELOG.md to track version changes",
            )
        ]


class LicensePresenceCheck(Check):
    id = "DOC-004"
    name = "LICENSE File Presence"

    def run(self, project: Project) -> List[Finding]:
        if project.has_root_file(*LICENSE_NAMES):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "LICENSE file not found",
                file="project root",
                suggestion="Add LICENSE file (MIT, Apache 2.0, etc.)",
            )
        ]


class ApiDocumentationCheck(Check):
    id = "DOC-005"
    name = "API Documentation"

    def run(self, project: Project) -> List[Finding]:
        undocumented = [
            source
            for source in project.app_files
            if not _DOC_COMMENT.search(source.read_text())
        ]
        if len(undocumented) <= MAX_UNDOCUMENTED_FILES:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "Many files lack documentation comments",
                file="lib/",
                suggestion="Add /// documentation comments for public APIs",
            )
        ]


class CodeCommentsCheck(Check):
    id = "DOC-006"
    name = "Code Comment Quality"

    def run(self, project: Project) -> List[Finding]:
        if not project.scanner.any_match((_TODO_OR_FIXME,)):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "TODO/FIXME comments found in code",
                file="source files",
                suggestion="Review and address TODO items or create issues",
            )
        ]


DOCS_CHECKS = (
    ReadmePresenceCheck,
    ReadmeContentCheck,
    ChangelogPresenceCheck,
    LicensePresenceCheck,
    ApiDocumentationCheck,
    CodeCommentsCheck,
)

__all__ = [
    "ApiDocumentationCheck",
    "ChangelogPresenceCheck",
    "CodeCommentsCheck",
    "DOCS_CHECKS",
    "LicensePresenceCheck",
    "ReadmeContentCheck",
    "ReadmePresenceCheck",
]
