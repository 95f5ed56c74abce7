from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable Flutter project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment credentials out of reviewer and AI tests."""
    for name in (
        "REVIEWER_EMAIL",
        "REVIEWER_PASSWORD",
        "AI_API_KEY",
        "OPENAI_API_KEY",
        "MINIMAX_API_KEY",
        "AI_PROVIDER",
        "AI_BASE_URL",
        "AI_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
