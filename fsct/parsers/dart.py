"""Dart source discovery and line-oriented pattern scanning."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence, Union

from ..logging import get_logger
from ._io import read_text

_LOGGER = get_logger("parsers.dart")

SOURCE_EXTENSION = ".dart"
EXCLUDED_DIRS = frozenset(
    {
        ".dart_tool",
        ".git",
        ".idea",
        ".pub-cache",
        ".symlinks",
        "Pods",
        "build",
        "node_modules",
    }
)

PatternLike = Union[str, Pattern[str]]


def _compile_all(*patterns: str) -> tuple:
    return tuple(re.compile(pattern) for pattern in patterns)


API_KEY_PATTERNS = _compile_all(
    r"api[_]?key\s*[:=]\s*[\"']?[a-zA-Z0-9_-]+",
    r"apiKey\s*[:=]\s*[\"']?[a-zA-Z0-9_-]+",
    r"API[_]?KEY\s*[:=]\s*[\"']?[a-zA-Z0-9_-]+",
    r"sk-[a-zA-Z0-9]{20,}",
    r"pk_live_[a-zA-Z0-9]{20,}",
)
PASSWORD_PATTERNS = _compile_all(
    r"password\s*[:=]\s*[\"'][^\"']+",
    r"\"password123\"",
)
PRINT_PATTERNS = _compile_all(
    r"\bprint\s*\(",
    r"\bdebugPrint\s*\(",
    r"\bdeveloper\.log\s*\(",
)
HTTP_URL_PATTERNS = _compile_all(
    r"http://[a-zA-Z0-9][-a-zA-Z0-9]*(\.[a-zA-Z0-9][-a-zA-Z0-9]*)+",
)
PRIVACY_PATTERNS = _compile_all("privacy", "privacyPolicy", "privacy_policy")
TERMS_PATTERNS = _compile_all("terms", "termsOfService", "tos")
LOGIN_PATTERNS = _compile_all("login", "signIn", "sign_in", "authenticate")
DELETE_ACCOUNT_PATTERNS = _compile_all("deleteAccount", "delete_account", "removeAccount")
LOGOUT_PATTERNS = _compile_all("signOut", "logout", "logOut")
PASSWORD_RECOVERY_PATTERNS = _compile_all("forgotPassword", "resetPassword", "forgot_password")
TEST_EMAIL_PATTERNS = _compile_all("test@", r"example\.com", r"@example\.org")


@dataclass(frozen=True)
class Match:
    """A single matching line: project-relative file, 1-based line, trimmed text."""

    file: str
    line: int
    content: str
    pattern: str


@dataclass(frozen=True)
class SourceFile:
    """Handle to a source file; contents are read lazily on demand."""

    path: Path
    relative: str

    def lines(self) -> Iterator[str]:
        try:
            with self.path.open(encoding="utf-8", errors="replace") as handle:
                for line in handle:
                    yield line.rstrip("\r\n")
        except FileNotFoundError:
            _LOGGER.debug("Source file disappeared: %s", self.path)
        except OSError as exc:
            _LOGGER.warning("Unable to read %s: %s", self.path, exc)

    def read_text(self) -> str:
        return read_text(self.path, _LOGGER) or ""

    @property
    def name(self) -> str:
        return self.path.name


def discover_source_files(base_path: Path) -> List[SourceFile]:
    """Return every ``.dart`` file below ``base_path`` in a stable order."""
    if not base_path.is_dir():
        return []

    found: List[SourceFile] = []
    for current, dirnames, filenames in os.walk(base_path):
        dirnames[:] = sorted(name for name in dirnames if name not in EXCLUDED_DIRS)
        current_path = Path(current)
        for filename in sorted(filenames):
            if not filename.endswith(SOURCE_EXTENSION):
                continue
            path = current_path / filename
            relative = path.relative_to(base_path).as_posix()
            found.append(SourceFile(path=path, relative=relative))
    return found


class SourceScanner:
    """Runs compiled regular expressions over a fixed set of source files.

    Each file is walked once per scan no matter how many patterns are
    supplied, and one :class:`Match` is produced per matching (line, pattern).
    """

    def __init__(self, base_path: Path, files: Optional[Sequence[SourceFile]] = None) -> None:
        self.base_path = base_path
        self._files: Sequence[SourceFile] = (
            files if files is not None else discover_source_files(base_path)
        )

    @property
    def files(self) -> Sequence[SourceFile]:
        return self._files

    def scan(self, pattern: PatternLike) -> List[Match]:
        return self.scan_multi([pattern])

    def scan_multi(self, patterns: Iterable[PatternLike]) -> List[Match]:
        compiled = _compile(patterns)
        matches: List[Match] = []
        for source in self._files:
            matches.extend(_scan_file(source, compiled))
        return matches

    def scan_file(self, source: SourceFile, pattern: PatternLike) -> List[Match]:
        return _scan_file(source, _compile([pattern]))

    def any_match(self, patterns: Iterable[PatternLike]) -> bool:
        compiled = _compile(patterns)
        for source in self._files:
            for line in source.lines():
                if any(regex.search(line) for regex in compiled):
                    return True
        return False

    def find_api_keys(self) -> List[Match]:
        return self.scan_multi(API_KEY_PATTERNS)

    def find_hardcoded_passwords(self) -> List[Match]:
        return self.scan_multi(PASSWORD_PATTERNS)

    def find_print_statements(self) -> List[Match]:
        return self.scan_multi(PRINT_PATTERNS)

    def find_http_urls(self) -> List[Match]:
        return self.scan_multi(HTTP_URL_PATTERNS)

    def find_privacy_patterns(self) -> List[Match]:
        return self.scan_multi(PRIVACY_PATTERNS)

    def find_terms_patterns(self) -> List[Match]:
        return self.scan_multi(TERMS_PATTERNS)

    def find_login_patterns(self) -> List[Match]:
        return self.scan_multi(LOGIN_PATTERNS)

    def find_delete_account_patterns(self) -> List[Match]:
        return self.scan_multi(DELETE_ACCOUNT_PATTERNS)

    def find_logout_patterns(self) -> List[Match]:
        return self.scan_multi(LOGOUT_PATTERNS)

    def find_password_recovery_patterns(self) -> List[Match]:
        return self.scan_multi(PASSWORD_RECOVERY_PATTERNS)

    def find_test_email_patterns(self) -> List[Match]:
        return self.scan_multi(TEST_EMAIL_PATTERNS)


def _compile(patterns: Iterable[PatternLike]) -> List[Pattern[str]]:
    return [re.compile(pattern) if isinstance(pattern, str) else pattern for pattern in patterns]


def _scan_file(source: SourceFile, compiled: Sequence[Pattern[str]]) -> List[Match]:
    matches: List[Match] = []
    for number, line in enumerate(source.lines(), start=1):
        for regex in compiled:
            if regex.search(line):
                matches.append(
                    Match(
                        file=source.relative,
                        line=number,
                        content=line.strip(),
                        pattern=regex.pattern,
                    )
                )
    return matches


__all__ = [
    "API_KEY_PATTERNS",
    "EXCLUDED_DIRS",
    "HTTP_URL_PATTERNS",
    "Match",
    "SOURCE_EXTENSION",
    "SourceFile",
    "SourceScanner",
    "discover_source_files",
]
