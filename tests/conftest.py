from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "src"

sys.path.insert(0, str(SDK_SRC))

from restoran_client_sdk.config import ClientConfig  # noqa: E402
from restoran_client_sdk.http_client import HttpClient  # noqa: E402

BASE_URL = "https://api.example.com/api"


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        env_name="test",
        api_base_url=BASE_URL,
        retries=0,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def make_http(config: ClientConfig) -> Callable[..., HttpClient]:
    def _make(handler, **overrides) -> HttpClient:
        cfg = ClientConfig(**{**config.__dict__, **overrides}) if overrides else config
        return HttpClient(cfg, transport=httpx.MockTransport(handler))

    return _make
