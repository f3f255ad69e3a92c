import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from click.testing import CliRunner

# Ensure local source package (src/discovery_client) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from discovery_client import Api, DiscoveryClient, load_discovery  # noqa: E402

FIXTURES: Path = Path(__file__).resolve().parent / "fixtures"
DISCOVERY_DIR: Path = FIXTURES / "discovery"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("DISCOVERY_API_KEY", raising=False)
    monkeypatch.delenv("DISCOVERY_ROOT_URL", raising=False)


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def discovery_path() -> Callable[[str], Path]:
    def _path(name: str) -> Path:
        return DISCOVERY_DIR / f"{name}.json"

    return _path


@pytest.fixture
def discovery_document() -> Callable[[str], Dict[str, Any]]:
    def _load(name: str) -> Dict[str, Any]:
        return json.loads((DISCOVERY_DIR / f"{name}.json").read_text(encoding="utf-8"))

    return _load


@pytest.fixture
def client() -> DiscoveryClient:
    return DiscoveryClient()


@pytest.fixture
def drive(client: DiscoveryClient) -> Api:
    return client.api(load_discovery(DISCOVERY_DIR / "drive-v2.json"))


@pytest.fixture
def gmail(client: DiscoveryClient) -> Api:
    return client.api(load_discovery(DISCOVERY_DIR / "gmail-v1.json"))


@pytest.fixture
def compute(client: DiscoveryClient) -> Api:
    return client.api(load_discovery(DISCOVERY_DIR / "compute-v1.json"))


@pytest.fixture
def plus(client: DiscoveryClient) -> Api:
    return client.api(load_discovery(DISCOVERY_DIR / "plus-v1.json"))


@pytest.fixture
def oauth2(client: DiscoveryClient) -> Api:
    return client.api(load_discovery(DISCOVERY_DIR / "oauth2-v2.json"))


@pytest.fixture
def media_body_path() -> Path:
    return FIXTURES / "mediabody.txt"
