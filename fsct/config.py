"""Configuration loading for fsct (.fsct.yaml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .logging import get_logger

CONFIG_FILENAME = ".fsct.yaml"
DEFAULT_BODY_TEMPLATE = '{"email":"{{email}}","password":"{{password}}"}'
DEFAULT_SUCCESS_INDICATOR = "token"
DEFAULT_EMAIL_ENV = "REVIEWER_EMAIL"
DEFAULT_PASSWORD_ENV = "REVIEWER_PASSWORD"

_LOGGER = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be read or parsed."""


@dataclass
class AISettings:
    """AI integration settings from the ``ai`` block."""

    enabled: bool = False
    url: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None
    api_key: Optional[str] = None
    api_key_env: Optional[str] = None
    offline: bool = False
    timeout: Optional[float] = None
    max_retries: Optional[int] = None


@dataclass
class VerificationConfig:
    """Live login probe against the reviewer authentication endpoint."""

    enabled: bool = False
    auth_endpoint: str = ""
    method: str = "POST"
    body_template: str = DEFAULT_BODY_TEMPLATE
    success_indicator: str = DEFAULT_SUCCESS_INDICATOR
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class ReviewerConfig:
    """App-store reviewer test account settings."""

    email: Optional[str] = None
    email_env: Optional[str] = None
    password: Optional[str] = None
    password_env: Optional[str] = None
    verification: Optional[VerificationConfig] = None

    def resolve_email(self, environ: Optional[Mapping[str, str]] = None) -> str:
        """Return the direct email, else the named env var, else ``REVIEWER_EMAIL``."""
        return _resolve_credential(self.email, self.email_env, DEFAULT_EMAIL_ENV, environ)

    def resolve_password(self, environ: Optional[Mapping[str, str]] = None) -> str:
        return _resolve_credential(
            self.password, self.password_env, DEFAULT_PASSWORD_ENV, environ
        )

    @property
    def verification_enabled(self) -> bool:
        return self.verification is not None and self.verification.enabled


@dataclass
class ChecksConfig:
    """Check selection: ``skip`` removes ids, ``include`` is an allow-list."""

    skip: List[str] = field(default_factory=list)
    include: List[str] = field(default_factory=list)


@dataclass
class PlatformsConfig:
    """Platforms to scan; both are enabled unless switched off."""

    android: bool = True
    ios: bool = True


@dataclass
class FsctConfig:
    """Represents the settings defined in .fsct.yaml."""

    root: Path
    ai: AISettings = field(default_factory=AISettings)
    reviewer: Optional[ReviewerConfig] = None
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    platforms: PlatformsConfig = field(default_factory=PlatformsConfig)
    ignore: List[str] = field(default_factory=list)


def load_config(project_path: Path) -> FsctConfig:
    """Load ``.fsct.yaml`` from the project root; a missing file yields defaults."""
    config_file = _resolve_config_path(project_path)
    root = config_file.parent

    if not config_file.exists():
        _LOGGER.debug("No %s found under %s; using defaults", CONFIG_FILENAME, root)
        return FsctConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    ai_data = _as_dict(data.get("ai"))
    ai = AISettings(
        enabled=_as_bool(ai_data.get("enabled")) or False,
        url=_as_str(ai_data.get("url")),
        model=_as_str(ai_data.get("model")),
        provider=_as_str(ai_data.get("provider")),
        api_key=_as_str(ai_data.get("api_key")),
        api_key_env=_as_str(ai_data.get("api_key_env")),
        offline=_as_bool(ai_data.get("offline")) or False,
        timeout=_as_float(ai_data.get("timeout")),
        max_retries=_as_int(ai_data.get("max_retries")),
    )

    reviewer = None
    reviewer_data = _as_dict(data.get("reviewer"))
    if reviewer_data:
        reviewer = ReviewerConfig(
            email=_as_str(reviewer_data.get("email")),
            email_env=_as_str(reviewer_data.get("email_env")),
            password=_as_str(reviewer_data.get("password")),
            password_env=_as_str(reviewer_data.get("password_env")),
            verification=_parse_verification(_as_dict(reviewer_data.get("verification"))),
        )

    checks_data = _as_dict(data.get("checks"))
    checks = ChecksConfig(
        skip=_as_str_list(checks_data.get("skip")),
        include=_as_str_list(checks_data.get("include")),
    )

    platforms_data = _as_dict(data.get("platforms"))
    platforms = PlatformsConfig()
    if platforms_data:
        android = _as_bool(platforms_data.get("android"))
        ios = _as_bool(platforms_data.get("ios"))
        platforms.android = True if android is None else android
        platforms.ios = True if ios is None else ios

    return FsctConfig(
        root=root,
        ai=ai,
        reviewer=reviewer,
        checks=checks,
        platforms=platforms,
        ignore=_as_str_list(data.get("ignore")),
    )


def _parse_verification(data: Dict[str, Any]) -> Optional[VerificationConfig]:
    if not data:
        return None
    headers_data = _as_dict(data.get("headers"))
    return VerificationConfig(
        enabled=_as_bool(data.get("enabled")) or False,
        auth_endpoint=_as_str(data.get("auth_endpoint")) or "",
        method=(_as_str(data.get("method")) or "POST").upper(),
        body_template=_as_str(data.get("body_template")) or DEFAULT_BODY_TEMPLATE,
        success_indicator=_as_str(data.get("success_indicator")) or DEFAULT_SUCCESS_INDICATOR,
        headers={str(key): str(value) for key, value in headers_data.items()},
    )


def _resolve_credential(
    value: Optional[str],
    env_name: Optional[str],
    default_env: str,
    environ: Optional[Mapping[str, str]],
) -> str:
    if value:
        return value
    env = os.environ if environ is None else environ
    if env_name:
        return env.get(env_name, "")
    return env.get(default_env, "")


def _resolve_config_path(project_path: Path) -> Path:
    project_path = project_path.expanduser()
    if project_path.is_dir():
        return project_path / CONFIG_FILENAME
    return project_path


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip().lower().rstrip("s")
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AISettings",
    "CONFIG_FILENAME",
    "ChecksConfig",
    "ConfigError",
    "DEFAULT_EMAIL_ENV",
    "DEFAULT_PASSWORD_ENV",
    "FsctConfig",
    "PlatformsConfig",
    "ReviewerConfig",
    "VerificationConfig",
    "load_config",
]
