import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from llm_cli.config import AppConfig  # noqa: E402
from llm_cli.models import ProviderId  # noqa: E402


@pytest.fixture
def data_dir(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("LLM_CLI_DATA_DIR", str(tmp_path / "data"))
    return tmp_path / "data"


@pytest.fixture
def config() -> AppConfig:
    config = AppConfig()
    config.providers[ProviderId.OPENAI].api_key = "sk-openai"
    config.providers[ProviderId.ANTHROPIC].api_key = "sk-ant"
    config.providers[ProviderId.GOOGLE].api_key = "google-key"
    return config
