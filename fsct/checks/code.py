"""Heuristic Dart code-quality checks (COD-*).

These are shallow text passes over each application source file; they do
not parse Dart.
"""

from __future__ import annotations

import hashlib
import re
from typing import Dict, List, Tuple

from ..models import SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..parsers import SourceFile
from ..project import Project
from .base import Check

MAX_FILE_LINES = 400
MAX_CLASSES = 10
MAX_FUNCTIONS = 20
MAX_NESTING = 5
MAX_IMPORTS = 15
MAX_TODOS = 5
MAX_FIXMES = 3
UNCOMMENTED_FILE_LINES = 50
MAX_COMPLEXITY = 15
DUPLICATE_WINDOW = 6

_CLASS = re.compile(r"(?i)class\s+\w+")
_FUNCTION = re.compile(r"(?i)(void|String|int|bool|List|Map)\s+\w+\s*\(")
_LOWER_CLASS = re.compile(r"\bclass\s+[a-z]")
_UPPER_VARIABLE = re.compile(r"\b(?:final|const|var|int|String|bool)\s+[A-Z]\w*\s*[=;]")
_IMPORT = re.compile(r"^import\s+['\"][^'\"]+['\"];", re.MULTILINE)
_TODO = re.compile(r"(?i)//\s*TODO")
_FIXME = re.compile(r"(?i)//\s*FIXME")
_COMMENT = re.compile(r"//")
_BRANCHES = (
    re.compile(r"(?i)\bif\s*\("),
    re.compile(r"(?i)\bfor\s*\("),
    re.compile(r"(?i)\bwhile\s*\("),
    re.compile(r"(?i)\bcase\s+"),
    re.compile(r"\?[^:]+:"),
)


def _line_count(text: str) -> int:
    return text.count("\n")


class SourceTextCheck(Check):
    """Runs :meth:`inspect` on the full text of every application source file."""

    def run(self, project: Project) -> List[Finding]:
        findings: List[Finding] = []
        for source in project.app_files:
            findings.extend(self.inspect(source, source.read_text()))
        return findings

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        raise NotImplementedError


class FileLengthCheck(SourceTextCheck):
    id = "COD-001"
    name = "File Length Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        if _line_count(text) <= MAX_FILE_LINES:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                f"File exceeds {MAX_FILE_LINES} lines: {source.relative}",
                file=source.relative,
                suggestion="Consider splitting this file into smaller, focused modules",
            )
        ]


class ClassLengthCheck(SourceTextCheck):
    id = "COD-002"
    name = "Class Length Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        findings = []
        if len(_CLASS.findall(text)) > MAX_CLASSES:
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"File may have too many classes: {source.relative}",
                    file=source.relative,
                    suggestion="Consider separating classes into different files",
                )
            )
        if len(_FUNCTION.findall(text)) > MAX_FUNCTIONS:
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"File may have too many functions: {source.relative}",
                    file=source.relative,
                    suggestion="Consider grouping related functions or extracting to separate classes",
                )
            )
        return findings


class MethodComplexityCheck(SourceTextCheck):
    id = "COD-003"
    name = "Method Complexity Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        depth = 0
        for char in text:
            if char == "{":
                depth += 1
                if depth > MAX_NESTING:
                    return [
                        self.finding(
                            SEVERITY_WARNING,
                            f"Deep nesting detected in file: {source.relative}",
                            file=source.relative,
                            suggestion="Consider extracting nested code into separate methods",
                        )
                    ]
            elif char == "}":
                depth -= 1
        return []


class NamingConventionCheck(SourceTextCheck):
    id = "COD-004"
    name = "Naming Convention Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        findings = []
        if _LOWER_CLASS.search(text):
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"Class name should start with capital letter in: {source.relative}",
                    file=source.relative,
                    suggestion="Follow Dart naming conventions (PascalCase for classes)",
                )
            )
        if _UPPER_VARIABLE.search(text):
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"Variable name should start with lowercase in: {source.relative}",
                    file=source.relative,
                    suggestion="Follow Dart naming conventions (camelCase for variables)",
                )
            )
        return findings


class ImportOrganizationCheck(SourceTextCheck):
    id = "COD-005"
    name = "Import Organization Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        if len(_IMPORT.findall(text)) <= MAX_IMPORTS:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                f"Too many imports in file: {source.relative}",
                file=source.relative,
                suggestion="Consider using package: imports and consolidating related imports",
            )
        ]


class CommentQualityCheck(SourceTextCheck):
    id = "COD-006"
    name = "Comment Quality Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        findings = []
        if len(_TODO.findall(text)) > MAX_TODOS:
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"Many TODO comments found in: {source.relative}",
                    file=source.relative,
                    suggestion="Address TODO items or create issues for tracking",
                )
            )
        if len(_FIXME.findall(text)) > MAX_FIXMES:
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"Many FIXME comments found in: {source.relative}",
                    file=source.relative,
                    suggestion="Fixme items indicate technical debt that should be addressed",
                )
            )
        if _line_count(text) > UNCOMMENTED_FILE_LINES and not _COMMENT.search(text):
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    f"No comments found in large file: {source.relative}",
                    file=source.relative,
                    suggestion="Consider adding documentation comments for public APIs",
                )
            )
        return findings


class CyclomaticComplexityCheck(SourceTextCheck):
    id = "COD-007"
    name = "Cyclomatic Complexity Check"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        complexity = sum(len(pattern.findall(text)) for pattern in _BRANCHES)
        if complexity <= MAX_COMPLEXITY:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                f"High cyclomatic complexity detected in: {source.relative}",
                file=source.relative,
                suggestion="Consider extracting complex logic into separate functions",
            )
        ]


class DuplicateCodeCheck(Check):
    """Reports files sharing a block of identical non-trivial lines."""

    id = "COD-008"
    name = "Duplicate Code Detection"

    def run(self, project: Project) -> List[Finding]:
        first_seen: Dict[str, Tuple[str, int]] = {}
        reported = set()
        findings: List[Finding] = []
        for source in project.app_files:
            for digest, line in _windows(source):
                origin = first_seen.setdefault(digest, (source.relative, line))
                if origin[0] == source.relative or source.relative in reported:
                    continue
                reported.add(source.relative)
                findings.append(
                    self.finding(
                        SEVERITY_INFO,
                        f"Duplicate code block in {source.relative} "
                        f"(also in {origin[0]}:{origin[1]})",
                        file=source.relative,
                        line=line,
                        suggestion="Extract the shared code into a reusable function or widget",
                    )
                )
        return findings


def _windows(source: SourceFile):
    lines: List[Tuple[int, str]] = []
    for number, raw in enumerate(source.lines(), start=1):
        stripped = raw.strip()
        if len(stripped) > 3 and not stripped.startswith(("//", "import ", "export ")):
            lines.append((number, stripped))
    seen = set()
    for index in range(len(lines) - DUPLICATE_WINDOW + 1):
        block = "\n".join(text for _, text in lines[index : index + DUPLICATE_WINDOW])
        digest = hashlib.sha1(block.encode("utf-8")).hexdigest()
        if digest in seen:
            continue
        seen.add(digest)
        yield digest, lines[index][0]


CODE_CHECKS = (
    FileLengthCheck,
    ClassLengthCheck,
    MethodComplexityCheck,
    NamingConventionCheck,
    ImportOrganizationCheck,
    CommentQualityCheck,
    CyclomaticComplexityCheck,
    DuplicateCodeCheck,
)

__all__ = [
    "CODE_CHECKS",
    "ClassLengthCheck",
    "CommentQualityCheck",
    "CyclomaticComplexityCheck",
    "DuplicateCodeCheck",
    "FileLengthCheck",
    "ImportOrganizationCheck",
    "MethodComplexityCheck",
    "NamingConventionCheck",
    "SourceTextCheck",
]
