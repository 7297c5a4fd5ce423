from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import gitea_release.cli.app as app_mod
from gitea_release import __version__
from gitea_release.api.http import MockHttpClient

from conftest import API_URL, HEAD_SHA, REPO_URL


runner = CliRunner()


@pytest.fixture
def action_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INPUT_TOKEN", "secret")
    monkeypatch.setenv("INPUT_API_URL", API_URL)
    monkeypatch.setenv("INPUT_OWNER", "acme")
    monkeypatch.setenv("INPUT_REPO", "widgets")
    monkeypatch.setenv("INPUT_SKIP_GITEA_PULL_REQUEST", "true")


def _install_http(monkeypatch: pytest.MonkeyPatch, http: MockHttpClient) -> None:
    def fake_client(token: str, *, proxy_server: str | None = None) -> MockHttpClient:
        assert token == "secret"
        return http

    monkeypatch.setattr(app_mod, "RealHttpClient", fake_client)


def test_version() -> None:
    result = runner.invoke(app_mod.app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_next_version() -> None:
    result = runner.invoke(
        app_mod.app, ["next-version", "--latest", "v1.2.3", "--strategy", "always-bump-minor"]
    )
    assert result.exit_code == 0
    assert result.output.strip() == "1.3.0"


def test_next_version_without_latest() -> None:
    result = runner.invoke(app_mod.app, ["next-version", "--strategy", "always-bump-major"])
    assert result.output.strip() == "1.0.0"


def test_run_reports_missing_inputs(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("INPUT_TOKEN", "INPUT_API_URL", "INPUT_OWNER", "INPUT_REPO"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.replace("_URL", "-URL"), raising=False)

    result = runner.invoke(app_mod.app, ["run"])

    assert result.exit_code == 1
    assert "missing required inputs" in result.output


def test_run_writes_outputs(
    action_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    http = MockHttpClient()
    http.fail("GET", f"{REPO_URL}/releases/latest", 404)
    http.set("GET", f"{REPO_URL}/branches/main", {"commit": {"id": HEAD_SHA}})
    http.set(
        "GET",
        f"{REPO_URL}/commits?sha={HEAD_SHA}&page=1&limit=100&per_page=100",
        [{"sha": HEAD_SHA, "commit": {"message": "initial import"}}],
    )
    http.set("POST", f"{REPO_URL}/releases", {"id": 1, "html_url": "https://git.example.com/r/1"})
    _install_http(monkeypatch, http)
    out = tmp_path / "outputs"

    result = runner.invoke(app_mod.app, ["run", "--output-file", str(out)])

    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert "releases_created=true\n" in text
    assert "tag_name=v1.0.0\n" in text
    assert "* initial import (abc1234)\n" in text
    assert "prs_created=false\n" in text
    assert "secret" not in result.output


def test_run_fails_on_api_error(
    action_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    http = MockHttpClient()
    http.fail("GET", f"{REPO_URL}/releases/latest", 401, "token is required")
    _install_http(monkeypatch, http)

    result = runner.invoke(app_mod.app, ["run", "--output-file", str(tmp_path / "o")])

    assert result.exit_code == 4
    assert "failed to fetch latest release" in result.output


def test_dry_run_flag(action_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    http = MockHttpClient()
    http.fail("GET", f"{REPO_URL}/releases/latest", 404)
    http.set("GET", f"{REPO_URL}/branches/main", {"commit": {"id": HEAD_SHA}})
    http.set("GET", f"{REPO_URL}/commits?sha={HEAD_SHA}&page=1&limit=100&per_page=100", [])
    _install_http(monkeypatch, http)

    result = runner.invoke(app_mod.app, ["run", "--dry-run", "--output-file", str(tmp_path / "o")])

    assert result.exit_code == 0, result.output
    assert all(c.method == "GET" for c in http.calls)
