"""Tests for fsct.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from fsct.config import (
    AISettings,
    ChecksConfig,
    ConfigError,
    FsctConfig,
    PlatformsConfig,
    ReviewerConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, FsctConfig)
    assert config.root == tmp_path
    assert config.ai == AISettings()
    assert config.reviewer is None
    assert config.checks == ChecksConfig()
    assert config.platforms == PlatformsConfig(android=True, ios=True)
    assert config.ignore == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".fsct.yaml").write_text(
        """
ai:
  enabled: true
  provider: openai
  model: gpt-4o-mini
  url: https://llm.internal/v1
  api_key_env: TEAM_AI_KEY
  timeout: 45s
  max_retries: "5"
reviewer:
  email: reviewer@acme.io
  password_env: ACME_REVIEWER_PASSWORD
  verification:
    enabled: yes
    auth_endpoint: https://api.acme.io/login
    method: put
    headers:
      X-Client: fsct
checks:
  skip: [AND-003, DOC-004]
  include: COD-001
platforms:
  ios: false
ignore:
  - lib/generated/
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.ai.enabled is True
    assert config.ai.provider == "openai"
    assert config.ai.model == "gpt-4o-mini"
    assert config.ai.url == "https://llm.internal/v1"
    assert config.ai.api_key_env == "TEAM_AI_KEY"
    assert config.ai.timeout == 45.0
    assert config.ai.max_retries == 5

    reviewer = config.reviewer
    assert reviewer is not None
    assert reviewer.email == "reviewer@acme.io"
    assert reviewer.password_env == "ACME_REVIEWER_PASSWORD"
    assert reviewer.verification_enabled
    assert reviewer.verification is not None
    assert reviewer.verification.auth_endpoint == "https://api.acme.io/login"
    assert reviewer.verification.method == "PUT"
    assert reviewer.verification.success_indicator == "token"
    assert reviewer.verification.headers == {"X-Client": "fsct"}

    assert config.checks.skip == ["AND-003", "DOC-004"]
    assert config.checks.include == ["COD-001"]
    assert config.platforms.android is True
    assert config.platforms.ios is False
    assert config.ignore == ["lib/generated/"]


def test_load_config_accepts_direct_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("ignore: build/\n", encoding="utf-8")

    config = load_config(config_file)

    assert config.root == tmp_path
    assert config.ignore == ["build/"]


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".fsct.yaml").write_text("   \n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.reviewer is None
    assert config.checks.skip == []


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".fsct.yaml").write_text("checks: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".fsct.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_malformed_sections_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / ".fsct.yaml").write_text(
        """
ai: nope
checks:
  skip: {not: a list}
platforms:
  android: maybe
ai_extra: 1
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.ai == AISettings()
    assert config.checks.skip == []
    assert config.platforms.android is True


def test_verification_block_absent_means_disabled(tmp_path: Path) -> None:
    (tmp_path / ".fsct.yaml").write_text(
        "reviewer:\n  email: reviewer@acme.io\n", encoding="utf-8"
    )

    reviewer = load_config(tmp_path).reviewer

    assert reviewer is not None
    assert reviewer.verification is None
    assert not reviewer.verification_enabled


def test_reviewer_credentials_resolve_from_environment() -> None:
    environ = {"ACME_PASSWORD": "from-env", "REVIEWER_EMAIL": "default@acme.io"}

    named = ReviewerConfig(password_env="ACME_PASSWORD")
    assert named.resolve_password(environ) == "from-env"
    assert named.resolve_email(environ) == "default@acme.io"

    direct = ReviewerConfig(email="direct@acme.io", email_env="IGNORED")
    assert direct.resolve_email(environ) == "direct@acme.io"

    missing = ReviewerConfig(password_env="NOT_SET")
    assert missing.resolve_password(environ) == ""
