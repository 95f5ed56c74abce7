"""App-store reviewer test account checks (REV-*).

The credential checks only inspect configuration. ``LoginVerificationCheck``
is the one check here that performs network I/O, and only when the
``reviewer.verification`` block enables it.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import ReviewerConfig, VerificationConfig
from ..logging import get_logger
from ..models import SEVERITY_HIGH, SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..project import Project
from .base import Check

_LOGGER = get_logger("checks.reviewer")

MIN_PASSWORD_LENGTH = 8
REPEATED_CHAR_THRESHOLD = 3
VERIFICATION_TIMEOUT = 30.0

PLACEHOLDER_EMAIL_PATTERNS = (
    "test@",
    "example.com",
    "your-email@",
    "user@example",
    "email@example",
    "test@example.com",
    "admin@example",
    "demo@",
    "sample@",
)
WEAK_PASSWORD_PATTERNS = (
    "password",
    "123456",
    "qwerty",
    "admin",
    "test",
    "flutter",
    "app",
    "reviewer",
    "login",
    "user",
    "abc123",
    "welcome",
    "monkey",
    "dragon",
    "master",
)
EXPIRED_INDICATORS = (
    "expired",
    "invalid_token",
    "token_expired",
    "session_expired",
    "unauthorized",
    "401",
)


def mask_email(email: str) -> str:
    """Hide most of the local part: ``reviewer@acme.io`` -> ``re***@acme.io``."""
    if not email:
        return ""
    parts = email.split("@")
    if len(parts) != 2:
        return "***"
    local, domain = parts
    if len(local) <= 2:
        return f"***@{domain}"
    return f"{local[:2]}***@{domain}"


def has_repeated_chars(value: str, threshold: int = REPEATED_CHAR_THRESHOLD) -> bool:
    """Return True when a character repeats ``threshold`` times right after itself.

    ``aaa`` repeats ``a`` twice, ``aaaa`` three times.
    """
    repeats = 0
    for previous, current in zip(value, value[1:]):
        repeats = repeats + 1 if current == previous else 0
        if repeats >= threshold:
            return True
    return False


class ReviewerCheck(Check):
    """Base for checks that read the reviewer account configuration."""

    def __init__(self, config: Optional[ReviewerConfig] = None) -> None:
        self.config = config if config is not None else ReviewerConfig()

    @property
    def email(self) -> str:
        return self.config.resolve_email()

    @property
    def password(self) -> str:
        return self.config.resolve_password()


class NoCredentialsCheck(ReviewerCheck):
    id = "REV-001"
    name = "No Reviewer Credentials Configured"

    def run(self, project: Project) -> List[Finding]:
        if self.email and self.password:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "No reviewer test account is configured. App reviewers may reject the "
                "submission if they cannot test login functionality or access premium "
                "features.",
                suggestion="Add reviewer account configuration to .fsct.yaml:\n"
                "  reviewer:\n"
                "    email_env: REVIEWER_EMAIL\n"
                "    password_env: REVIEWER_PASSWORD\n"
                "Or set environment variables: REVIEWER_EMAIL and REVIEWER_PASSWORD",
            )
        ]


class PlaceholderEmailCheck(ReviewerCheck):
    id = "REV-002"
    name = "Placeholder Reviewer Email Detected"

    def run(self, project: Project) -> List[Finding]:
        email = self.email
        lowered = email.lower()
        if not email or not any(pattern in lowered for pattern in PLACEHOLDER_EMAIL_PATTERNS):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"The reviewer email '{mask_email(email)}' appears to be a placeholder.",
                suggestion="Use a real email address for reviewer testing. Create a dedicated "
                "test account (e.g., reviewer@yourcompany.com).",
            )
        ]


class WeakPasswordCheck(ReviewerCheck):
    id = "REV-003"
    name = "Weak Reviewer Password Detected"

    def run(self, project: Project) -> List[Finding]:
        password = self.password
        if not password:
            return []
        if len(password) < MIN_PASSWORD_LENGTH:
            return [
                self.finding(
                    SEVERITY_HIGH,
                    f"The reviewer password is less than {MIN_PASSWORD_LENGTH} characters long.",
                    title="Reviewer Password Too Short",
                    suggestion="Use a stronger password with at least 8 characters, including "
                    "uppercase, lowercase, numbers, and special characters.",
                )
            ]
        lowered = password.lower()
        if any(pattern in lowered for pattern in WEAK_PASSWORD_PATTERNS):
            return [
                self.finding(
                    SEVERITY_HIGH,
                    "The reviewer password contains a common weak pattern.",
                    suggestion="Use a unique, strong password that doesn't contain common "
                    "words or patterns. Consider using a password generator.",
                )
            ]
        if has_repeated_chars(password):
            return [
                self.finding(
                    SEVERITY_WARNING,
                    "The reviewer password contains repeated characters.",
                    title="Reviewer Password Has Repeated Characters",
                    suggestion="Avoid using repeated characters in passwords for better "
                    "security.",
                )
            ]
        return []


@dataclass
class VerificationResult:
    """Outcome of one login probe."""

    success: bool = False
    token_expired: bool = False
    timed_out: bool = False
    error: Optional[str] = None
    status: int = 0
    body: str = ""


class LoginVerificationCheck(ReviewerCheck):
    """Logs in with the reviewer account; reports REV-004 or REV-005 depending on outcome."""

    id = "REV-004"
    name = "Reviewer Login Verification"
    failure_id = "REV-005"

    def __init__(
        self, config: Optional[ReviewerConfig] = None, *, timeout: float = VERIFICATION_TIMEOUT
    ) -> None:
        super().__init__(config)
        self.timeout = timeout

    def run(self, project: Project) -> List[Finding]:
        verification = self.config.verification
        if verification is None or not verification.enabled:
            return []

        email, password = self.email, self.password
        if not email or not password:
            return [
                self.finding(
                    SEVERITY_WARNING,
                    "Login verification is enabled but credentials are missing.",
                    title="Cannot Verify Login - Missing Credentials",
                    suggestion="Set REVIEWER_EMAIL and REVIEWER_PASSWORD environment variables.",
                )
            ]

        result = self.verify(verification, email, password)
        if result.timed_out:
            return [
                self.finding(
                    SEVERITY_HIGH,
                    f"Login request timed out after {self.timeout:g}s.",
                    title="Login Verification Timed Out",
                    finding_id=self.failure_id,
                    suggestion="Check that the auth endpoint is reachable and responsive "
                    "from this environment.",
                )
            ]
        if result.error is not None:
            return [
                self.finding(
                    SEVERITY_HIGH,
                    f"Could not verify login: {result.error}",
                    title="Login Verification Failed",
                    finding_id=self.failure_id,
                    suggestion="Check the auth endpoint URL and network connectivity. "
                    "Ensure the endpoint is accessible from this environment.",
                )
            ]
        if result.token_expired:
            return [
                self.finding(
                    SEVERITY_HIGH,
                    "The authentication token for the reviewer account has expired.",
                    title="Reviewer Token Expired",
                    suggestion="Generate fresh credentials for app reviewers. Update the "
                    "REVIEWER_EMAIL and REVIEWER_PASSWORD environment variables.",
                )
            ]
        if not result.success:
            return [
                self.finding(
                    SEVERITY_HIGH,
                    "The provided reviewer credentials could not authenticate successfully.",
                    title="Reviewer Login Failed",
                    finding_id=self.failure_id,
                    suggestion="Verify the email and password are correct. Try logging in "
                    "manually to confirm the credentials work.",
                )
            ]
        return [
            self.finding(
                SEVERITY_INFO,
                "Reviewer credentials are valid and working.",
                title="Reviewer Login Verified",
                suggestion="The test account is ready for app reviewers.",
            )
        ]

    def verify(
        self, verification: VerificationConfig, email: str, password: str
    ) -> VerificationResult:
        """Send the templated login request and classify the response."""
        if not verification.auth_endpoint:
            return VerificationResult(error="no auth_endpoint configured")

        body = verification.body_template.replace("{{email}}", email).replace(
            "{{password}}", password
        )
        headers = {"Content-Type": "application/json"}
        headers.update(verification.headers)
        request = Request(
            verification.auth_endpoint,
            data=body.encode("utf-8"),
            headers=headers,
            method=verification.method or "POST",
        )
        _LOGGER.debug("Verifying reviewer login against %s", verification.auth_endpoint)

        try:
            with urlopen(request, timeout=self.timeout) as response:  # type: ignore[arg-type]
                status = getattr(response, "status", 200)
                raw = response.read()
        except HTTPError as exc:
            status = exc.code
            raw = exc.read() if hasattr(exc, "read") else b""
        except (socket.timeout, TimeoutError):
            return VerificationResult(timed_out=True)
        except URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                return VerificationResult(timed_out=True)
            return VerificationResult(error=f"request failed: {exc.reason}")
        except ValueError as exc:
            return VerificationResult(error=f"failed to create request: {exc}")

        text = raw.decode("utf-8", errors="replace") if raw else ""
        return classify_response(status, text, verification.success_indicator)


def classify_response(status: int, body: str, success_indicator: str) -> VerificationResult:
    result = VerificationResult(status=status, body=body)
    result.success = (success_indicator or "token") in body
    lowered = body.lower()
    if any(indicator in lowered for indicator in EXPIRED_INDICATORS):
        result.token_expired = True
        result.success = False
    if status >= 400:
        result.success = False
        if status == 401:
            result.token_expired = True
    return result


def generate_reviewer_instructions(config: Optional[ReviewerConfig]) -> str:
    """Render the reviewer account notes pasted into App Store Connect or Play Console."""
    if config is None:
        return ""
    rule = "=" * 67
    email = config.resolve_email()
    lines = [
        rule,
        "REVIEWER TEST ACCOUNT INFORMATION",
        rule,
        "",
        "App Store Connect / Play Console Reviewer Information:",
        "",
        "Test Account Credentials:",
        f"- Email: {mask_email(email) if email else '[Not configured]'}",
        "- Password: [REDACTED - provided separately]",
        "",
        "Test Account Setup:",
        "- Account has pre-populated data for testing",
        "- All app features are accessible",
        "- No 2FA required on this account",
        "",
        "Special Instructions for Reviewers:",
        "1. Login with provided credentials",
        "2. Main features are available immediately after login",
        "3. Test data is clearly marked as 'Demo' or 'Test'",
        "",
        "If you encounter any issues:",
        "- Contact: developer@example.com",
        "- Reference: Reviewer Account for App Submission",
        "",
        rule,
    ]
    return "\n".join(lines) + "\n"


def reviewer_checks(config: Optional[ReviewerConfig]) -> List[Check]:
    return [
        NoCredentialsCheck(config),
        PlaceholderEmailCheck(config),
        WeakPasswordCheck(config),
        LoginVerificationCheck(config),
    ]


__all__ = [
    "EXPIRED_INDICATORS",
    "LoginVerificationCheck",
    "NoCredentialsCheck",
    "PLACEHOLDER_EMAIL_PATTERNS",
    "PlaceholderEmailCheck",
    "ReviewerCheck",
    "VerificationResult",
    "WEAK_PASSWORD_PATTERNS",
    "WeakPasswordCheck",
    "classify_response",
    "generate_reviewer_instructions",
    "has_repeated_chars",
    "mask_email",
    "reviewer_checks",
]
