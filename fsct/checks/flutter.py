"""pubspec.yaml and Flutter project layout checks (FLT-*)."""

from __future__ import annotations

import re
from typing import List

from ..models import SEVERITY_HIGH, SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..project import PUBSPEC_PATH, Project
from .base import Check

RECOMMENDED_MIN_SDK = 21
UNPINNED_THRESHOLD = 3
_PACKAGE_NAME = re.compile(r"^[a-z][a-z0-9_]*$")


class FlutterSdkConstraintCheck(Check):
    id = "FLT-001"
    name = "Flutter SDK Version Constraint"

    def run(self, project: Project) -> List[Finding]:
        if project.pubspec is None or not project.pubspec.dependencies:
            return []
        if project.has_dependency_containing("flutter"):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "Flutter SDK version constraint not found in pubspec.yaml",
                file=PUBSPEC_PATH,
                suggestion="Add sdk: flutter constraint to dependencies section",
            )
        ]


class MaterialDesignCheck(Check):
    id = "FLT-002"
    name = "Flutter Use Material Design 3"

    def run(self, project: Project) -> List[Finding]:
        pubspec = project.pubspec
        if pubspec is None or not pubspec.has_flutter_section or pubspec.uses_material_design:
            return []
        return [
            self.finding(
                SEVERITY_INFO,
                "uses-material-design is not enabled in the flutter section of pubspec.yaml",
                file=PUBSPEC_PATH,
                suggestion="Set uses-material-design: true so Material icons are bundled",
            )
        ]


class FlutterMinSdkCheck(Check):
    id = "FLT-003"
    name = "Flutter Min SDK Version"

    def run(self, project: Project) -> List[Finding]:
        if project.gradle is None or not project.gradle.min_sdk_version.isdigit():
            return []
        minimum = project.gradle.min_sdk_version
        if int(minimum) >= RECOMMENDED_MIN_SDK:
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"Minimum SDK version {minimum} is too low (recommended: {RECOMMENDED_MIN_SDK}+)",
                file=project.gradle_file,
                suggestion=f"Consider raising minSdkVersion to {RECOMMENDED_MIN_SDK} or higher "
                "for better compatibility",
            )
        ]


class PackageNameCheck(Check):
    id = "FLT-004"
    name = "Flutter Package Name Validation"

    def run(self, project: Project) -> List[Finding]:
        if project.pubspec is None or not project.pubspec.name:
            return []
        name = project.pubspec.name
        if _PACKAGE_NAME.match(name):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"Invalid package name format: {name}",
                file=PUBSPEC_PATH,
                suggestion="Package names must be lowercase_with_underscores "
                "(letters, digits and underscores, starting with a letter)",
            )
        ]


class VersionCheck(Check):
    id = "FLT-005"
    name = "Flutter Version Management"

    def run(self, project: Project) -> List[Finding]:
        if project.pubspec is None or project.pubspec.version:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "Version not specified in pubspec.yaml",
                file=PUBSPEC_PATH,
                suggestion="Add version field in format: 1.0.0+1",
            )
        ]


class DependencyConstraintCheck(Check):
    id = "FLT-006"
    name = "Flutter Dependency Version Constraints"

    def run(self, project: Project) -> List[Finding]:
        if project.pubspec is None:
            return []
        unpinned = [
            name
            for name, version in project.pubspec.dependencies.items()
            if version in ("", "any")
        ]
        if len(unpinned) <= UNPINNED_THRESHOLD:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "Multiple dependencies without version constraints",
                file=PUBSPEC_PATH,
                suggestion="Use version constraints (^) to ensure reproducible builds",
            )
        ]


class DeprecatedPackageCheck(Check):
    id = "FLT-007"
    name = "Flutter Deprecated Package Usage"

    def run(self, project: Project) -> List[Finding]:
        if project.pubspec is None or not project.pubspec.has_deprecated_package:
            return []
        names = ", ".join(project.pubspec.deprecated_packages)
        return [
            self.finding(
                SEVERITY_HIGH,
                f"Potentially deprecated packages found: {names}",
                file=PUBSPEC_PATH,
                suggestion="Check for latest FlutterFire packages and migration guides",
            )
        ]


class ProjectStructureCheck(Check):
    id = "FLT-008"
    name = "Flutter Project Structure"

    def run(self, project: Project) -> List[Finding]:
        if project.pubspec is None:
            return []
        if any(source.relative == "lib/main.dart" for source in project.source_files):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "lib/main.dart not found; the app entry point is missing or misplaced",
                file="lib/main.dart",
                suggestion="Keep the application entry point in lib/main.dart",
            )
        ]


FLUTTER_CHECKS = (
    FlutterSdkConstraintCheck,
    MaterialDesignCheck,
    FlutterMinSdkCheck,
    PackageNameCheck,
    VersionCheck,
    DependencyConstraintCheck,
    DeprecatedPackageCheck,
    ProjectStructureCheck,
)

__all__ = [
    "DependencyConstraintCheck",
    "DeprecatedPackageCheck",
    "FLUTTER_CHECKS",
    "FlutterMinSdkCheck",
    "FlutterSdkConstraintCheck",
    "MaterialDesignCheck",
    "PackageNameCheck",
    "ProjectStructureCheck",
    "VersionCheck",
]
