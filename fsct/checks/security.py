"""Source and manifest security checks (SEC-*)."""

from __future__ import annotations

import re
from typing import List

from ..models import SEVERITY_HIGH, SEVERITY_WARNING, Finding
from ..project import MANIFEST_PATH, Project
from .base import Check

CREDENTIAL_PATTERNS = (
    re.compile(r"(?i)api_?key['\"]?\s*[:=]\s*['\"]?[a-zA-Z0-9_-]{20,}['\"]?"),
    re.compile(r"(?i)secret['\"]?\s*[:=]\s*['\"]?[a-zA-Z0-9_\-+=/]{16,}['\"]?"),
    re.compile(r"(?i)password['\"]?\s*[:=]\s*['\"]?[^'\"]{8,}['\"]?"),
    re.compile(r"(?i)auth_?token['\"]?\s*[:=]\s*['\"]?[a-zA-Z0-9_\-\.]{20,}['\"]?"),
)
DEBUG_PRINT_PATTERN = re.compile(r"\b(?:print|debugPrint)\(")
HTTP_URL_PATTERN = re.compile(r"(?i)http://[^\s\"'<>]+")
LOCAL_HOSTS = ("localhost", "127.0.0.1")
RAW_SQL_PATTERN = re.compile(
    r"(?i)rawQuery\s*\(\s*[\"']\s*(?:SELECT|INSERT|UPDATE|DELETE).*[\"']\s*\)"
)


class HardcodedCredentialsCheck(Check):
    id = "SEC-001"
    name = "Hardcoded Credentials Detection"

    def run(self, project: Project) -> List[Finding]:
        findings: List[Finding] = []
        seen = set()
        for match in project.scanner.scan_multi(CREDENTIAL_PATTERNS):
            key = (match.file, match.line)
            if key in seen:
                continue
            seen.add(key)
            findings.append(
                self.finding(
                    SEVERITY_HIGH,
                    "Potential hardcoded credentials found in file",
                    file=match.file,
                    line=match.line,
                    suggestion="Use environment variables or secure configuration storage",
                )
            )
        return findings


class DebugModeCheck(Check):
    id = "SEC-002"
    name = "Debug Mode Check"

    def run(self, project: Project) -> List[Finding]:
        findings: List[Finding] = []
        for source in project.app_files:
            hits = project.scanner.scan_file(source, DEBUG_PRINT_PATTERN)
            if hits:
                findings.append(
                    self.finding(
                        SEVERITY_WARNING,
                        "Debug statements found in file",
                        file=source.relative,
                        line=hits[0].line,
                        suggestion="Remove debug print statements or use logger that "
                        "respects build mode",
                    )
                )
        return findings


class InsecureHttpCheck(Check):
    id = "SEC-003"
    name = "Insecure HTTP URL Usage"

    def run(self, project: Project) -> List[Finding]:
        findings: List[Finding] = []
        for match in project.scanner.scan(HTTP_URL_PATTERN):
            for url in HTTP_URL_PATTERN.findall(match.content):
                if any(host in url for host in LOCAL_HOSTS):
                    continue
                findings.append(
                    self.finding(
                        SEVERITY_HIGH,
                        f"Found insecure HTTP URL: {url}",
                        file=match.file,
                        line=match.line,
                        suggestion="Replace HTTP URLs with HTTPS for secure communication",
                    )
                )
        return findings


class ExportedActivityCheck(Check):
    id = "SEC-004"
    name = "Android Exportable Activity Security"

    def run(self, project: Project) -> List[Finding]:
        manifest = project.android_manifest
        if manifest is None:
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"Exported activity without intent filter: {activity.name}",
                file=MANIFEST_PATH,
                suggestion="Set android:exported=\"false\" for activities that don't need "
                "external access",
            )
            for activity in manifest.activities
            if activity.exported is True and not activity.has_intent_filter
        ]


class SqlInjectionCheck(Check):
    id = "SEC-005"
    name = "SQL Injection Prevention"

    def run(self, project: Project) -> List[Finding]:
        return [
            self.finding(
                SEVERITY_HIGH,
                "Potential SQL injection vulnerability in file",
                file=match.file,
                line=match.line,
                suggestion="Use parameterized queries instead of string concatenation",
            )
            for match in project.scanner.scan(RAW_SQL_PATTERN)
        ]


SECURITY_CHECKS = (
    HardcodedCredentialsCheck,
    DebugModeCheck,
    InsecureHttpCheck,
    ExportedActivityCheck,
    SqlInjectionCheck,
)

__all__ = [
    "DebugModeCheck",
    "ExportedActivityCheck",
    "HardcodedCredentialsCheck",
    "InsecureHttpCheck",
    "SECURITY_CHECKS",
    "SqlInjectionCheck",
]
