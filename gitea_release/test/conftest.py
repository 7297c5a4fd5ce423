from __future__ import annotations

import pytest

from gitea_release.api.gitea import GiteaClient
from gitea_release.api.http import MockHttpClient
from gitea_release.core.config import ActionInputs
from gitea_release.output.console import MockConsole
from gitea_release.output.sink import MockOutputSink


API_URL = "https://git.example.com/api/v1"
REPO_URL = f"{API_URL}/repos/acme/widgets"
HEAD_SHA = "abc1234" + "0" * 33


@pytest.fixture
def http() -> MockHttpClient:
    return MockHttpClient()


@pytest.fixture
def client(http: MockHttpClient) -> GiteaClient:
    return GiteaClient(http, api_url=API_URL, owner="acme", repo="widgets")


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def sink() -> MockOutputSink:
    return MockOutputSink()


@pytest.fixture
def inputs() -> ActionInputs:
    return ActionInputs(token="t0ken", api_url=API_URL, owner="acme", repo="widgets")
