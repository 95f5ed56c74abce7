"""Flutter performance heuristics (PERF-*).

Widget-level checks look at each application source file as a whole.
"""

from __future__ import annotations

import re
from typing import List

from ..logging import get_logger
from ..models import SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..parsers import SourceFile
from ..project import PUBSPEC_PATH, Project
from .base import Check
from .code import SourceTextCheck

_LOGGER = get_logger("checks.perf")

MAX_SET_STATE = 15
MIN_FILES_FOR_DEPENDENCY_HINT = 5

_CONST_CONSTRUCTOR = re.compile(r"(?i)class\s+\w+\s*\{[^}]*const\s+\w+\(")
_HEAVY_OPERATION = re.compile(r"(?i)(JSON\.decode|HttpClient|File\.read|Database\.query)")
_CHILDREN_LIST = re.compile(r"children:\s*\[")
_MAPPED_WIDGETS = re.compile(r"\.map\s*\(\s*\w+\s*=>\s*[A-Z]")
_FOR_LOOP = re.compile(r"(?i)for\s*\(")
_IMAGE_LOAD = re.compile(r"(?i)Image\.(asset|network|file)")
_IMAGE_CACHE = re.compile(r"(?i)precacheImage|CacheManager")
_SET_STATE = re.compile(r"setState\(\s*\(\)\s*=>\s*\{")
STATE_MANAGEMENT_PATTERNS = (
    re.compile(r"(?i)Provider|Consumer|Selector"),
    re.compile(r"(?i)Riverpod|useProvider|StateProvider"),
    re.compile(r"(?i)Bloc|BlocProvider|BlocBuilder"),
)
HEAVY_DEPENDENCY_PATTERNS = (
    re.compile(r"(?i)firebase_?auth"),
    re.compile(r"(?i)cloud_?firestore"),
    re.compile(r"(?i)dio|http"),
    re.compile(r"(?i)shared_?preferences"),
)


class ConstConstructorCheck(SourceTextCheck):
    id = "PERF-001"
    name = "Const Constructor Usage"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        if not _CONST_CONSTRUCTOR.search(text):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "Consider using const constructors for immutable widgets",
                file=source.relative,
                suggestion="Add 'const' keyword to constructors for better performance",
            )
        ]


class BuildOptimizationCheck(SourceTextCheck):
    id = "PERF-002"
    name = "Build Method Optimization"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        if not _HEAVY_OPERATION.search(text) or "async" in text:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "Heavy operations detected in file",
                file=source.relative,
                suggestion="Move heavy operations out of build method, use async/await",
            )
        ]


class ListBuilderCheck(SourceTextCheck):
    id = "PERF-003"
    name = "List Builder Usage"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        if not _CHILDREN_LIST.search(text):
            return []
        if not (_MAPPED_WIDGETS.search(text) or _FOR_LOOP.search(text)):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "Consider using ListView.builder for dynamic lists",
                file=source.relative,
                suggestion="Use ListView.builder instead of .map/.for for better performance",
            )
        ]


class ImageOptimizationCheck(SourceTextCheck):
    id = "PERF-004"
    name = "Image Caching"

    def inspect(self, source: SourceFile, text: str) -> List[Finding]:
        if not _IMAGE_LOAD.search(text) or _IMAGE_CACHE.search(text):
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "Image loading without explicit caching",
                file=source.relative,
                suggestion="Consider using cached_network_image or precaching",
            )
        ]


class StateManagementCheck(Check):
    id = "PERF-005"
    name = "State Management Optimization"

    def run(self, project: Project) -> List[Finding]:
        if project.scanner.any_match(STATE_MANAGEMENT_PATTERNS):
            return []
        findings: List[Finding] = []
        for source in project.app_files:
            if len(_SET_STATE.findall(source.read_text())) <= MAX_SET_STATE:
                continue
            findings.append(
                self.finding(
                    SEVERITY_WARNING,
                    "Excessive setState usage detected",
                    file=source.relative,
                    suggestion="Consider using Provider, Riverpod, or BLoc for complex state",
                )
            )
        return findings


class DependencyOptimizationCheck(Check):
    """Flags sizeable apps whose pubspec declares none of the usual heavy packages."""

    id = "PERF-006"
    name = "Dependency Optimization"

    def run(self, project: Project) -> List[Finding]:
        names = project.dependency_names
        heavy = [
            name
            for name in names
            if any(pattern.search(name) for pattern in HEAVY_DEPENDENCY_PATTERNS)
        ]
        if heavy:
            _LOGGER.debug("%s: heavy dependencies present: %s", self.id, ", ".join(heavy))
            return []
        if len(project.source_files) <= MIN_FILES_FOR_DEPENDENCY_HINT:
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "No heavy dependencies found",
                file=PUBSPEC_PATH,
                suggestion="Consider if this is intentional for a lightweight app",
            )
        ]


PERF_CHECKS = (
    ConstConstructorCheck,
    BuildOptimizationCheck,
    ListBuilderCheck,
    ImageOptimizationCheck,
    StateManagementCheck,
    DependencyOptimizationCheck,
)

__all__ = [
    "BuildOptimizationCheck",
    "ConstConstructorCheck",
    "DependencyOptimizationCheck",
    "HEAVY_DEPENDENCY_PATTERNS",
    "ImageOptimizationCheck",
    "ListBuilderCheck",
    "PERF_CHECKS",
    "STATE_MANAGEMENT_PATTERNS",
    "StateManagementCheck",
]
