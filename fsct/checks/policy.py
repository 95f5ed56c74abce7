"""Store policy checks driven by source-code keywords (POL-*)."""

from __future__ import annotations

import re
from typing import List, Sequence

from ..models import SEVERITY_HIGH, SEVERITY_WARNING, Finding
from ..project import Project
from .base import Check

PRIVACY_URL_PATTERNS = (re.compile(r"(?i)(privacy|policy)[^\s]*\.?(com|org|net|io)"),)
TERMS_URL_PATTERNS = (re.compile(r"(?i)(terms|service|conditions)[^\s]*\.?(com|org|net|io)"),)
DELETION_PATTERNS = (
    re.compile(r"(?i)delete.*data"),
    re.compile(r"(?i)data.*deletion"),
    re.compile(r"(?i)remove.*account"),
    re.compile(r"(?i)gdpr"),
    re.compile(r"(?i)ccpa"),
)
LOGOUT_PATTERNS = (
    re.compile(r"(?i)signOut"),
    re.compile(r"(?i)logout"),
    re.compile(r"(?i)sign_?out"),
    re.compile(r"(?i)log_?out"),
)
RECOVERY_PATTERNS = (
    re.compile(r"(?i)resetPassword"),
    re.compile(r"(?i)forgotPassword"),
    re.compile(r"(?i)recoverAccount"),
    re.compile(r"(?i)passwordReset"),
)


class KeywordPresenceCheck(Check):
    """Emits a single finding when none of ``patterns`` occurs in the sources."""

    patterns: Sequence["re.Pattern[str]"] = ()
    severity = SEVERITY_WARNING
    message = ""
    location = "source files"
    suggestion = ""

    def run(self, project: Project) -> List[Finding]:
        if project.scanner.any_match(self.patterns):
            return []
        return [
            self.finding(
                self.severity,
                self.message,
                file=self.location,
                suggestion=self.suggestion,
            )
        ]


class PrivacyPolicyCheck(KeywordPresenceCheck):
    id = "POL-001"
    name = "Privacy Policy URL"
    patterns = PRIVACY_URL_PATTERNS
    severity = SEVERITY_HIGH
    message = "Privacy policy URL not found"
    location = "Info.plist or source files"
    suggestion = "Add privacy policy URL to Info.plist (NSPrivacyPolicyURL) or in-app settings"


class TermsOfServiceCheck(KeywordPresenceCheck):
    id = "POL-002"
    name = "Terms of Service URL"
    patterns = TERMS_URL_PATTERNS
    message = "Terms of Service URL not found"
    suggestion = "Add Terms of Service URL for compliance"


class DataDeletionCheck(KeywordPresenceCheck):
    id = "POL-003"
    name = "Data Deletion Contact"
    patterns = DELETION_PATTERNS
    severity = SEVERITY_HIGH
    message = "Data deletion contact URL not found"
    suggestion = (
        "Add data deletion contact URL (required for App Store compliance under GDPR/CCPA)"
    )


class LogoutCheck(KeywordPresenceCheck):
    id = "POL-004"
    name = "Logout Functionality"
    patterns = LOGOUT_PATTERNS
    message = "Logout functionality not detected"
    suggestion = "Implement logout functionality for user account management"


class AccountRecoveryCheck(KeywordPresenceCheck):
    id = "POL-005"
    name = "Account Recovery Options"
    patterns = RECOVERY_PATTERNS
    message = "Account recovery options not detected"
    suggestion = "Implement password reset or account recovery functionality"


POLICY_CHECKS = (
    PrivacyPolicyCheck,
    TermsOfServiceCheck,
    DataDeletionCheck,
    LogoutCheck,
    AccountRecoveryCheck,
)

__all__ = [
    "AccountRecoveryCheck",
    "DataDeletionCheck",
    "KeywordPresenceCheck",
    "LogoutCheck",
    "POLICY_CHECKS",
    "PrivacyPolicyCheck",
    "TermsOfServiceCheck",
]
