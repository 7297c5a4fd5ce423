"""Tests for gitea_release.core.config."""

from __future__ import annotations

from gitea_release.core.config import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_MANIFEST_FILE,
    ActionInputs,
    load_inputs,
    parse_bool,
)
from gitea_release.core.result import Err, Ok
from gitea_release.release.model import VersioningStrategy


REQUIRED = {
    "INPUT_TOKEN": "secret",
    "INPUT_API-URL": "https://git.example.com/api/v1/",
    "INPUT_OWNER": "acme",
    "INPUT_REPO": "widgets",
}


def _load(**extra: str) -> ActionInputs:
    result = load_inputs({**REQUIRED, **extra})
    assert isinstance(result, Ok), result
    return result.value


class TestLoadInputs:
    def test_defaults(self) -> None:
        inputs = _load()

        assert inputs.api_url == "https://git.example.com/api/v1"
        assert inputs.repo_slug == "acme/widgets"
        assert inputs.path == "."
        assert inputs.target_branch == "main"
        assert inputs.config_file == DEFAULT_CONFIG_FILE
        assert inputs.manifest_file == DEFAULT_MANIFEST_FILE
        assert inputs.versioning_strategy is VersioningStrategy.ALWAYS_BUMP_PATCH
        assert inputs.release_as is None
        assert inputs.max_commit_pages == 1
        assert not inputs.skip_gitea_release
        assert not inputs.skip_gitea_pull_request
        assert not inputs.skip_labeling
        assert not inputs.include_component_in_tag
        assert not inputs.update_manifest
        assert not inputs.dry_run

    def test_missing_required_inputs_are_all_reported(self) -> None:
        result = load_inputs({"INPUT_TOKEN": "secret", "INPUT_OWNER": "  "})

        assert isinstance(result, Err)
        assert result.error.inputs == ("api-url", "owner", "repo")
        assert "api-url, owner, repo" in result.error.message

    def test_hyphen_and_underscore_spellings(self) -> None:
        inputs = _load(
            **{
                "INPUT_TARGET-BRANCH": "develop",
                "INPUT_SKIP_GITEA_PULL_REQUEST": "true",
                "INPUT_VERSIONING-STRATEGY": "always-bump-minor",
            }
        )
        assert inputs.target_branch == "develop"
        assert inputs.skip_gitea_pull_request
        assert inputs.versioning_strategy is VersioningStrategy.ALWAYS_BUMP_MINOR

    def test_release_as_drops_leading_v(self) -> None:
        assert _load(**{"INPUT_RELEASE-AS": "v3.0.0"}).release_as == "3.0.0"
        assert _load(**{"INPUT_RELEASE-AS": "3.1.0"}).release_as == "3.1.0"

    def test_invalid_boolean(self) -> None:
        result = load_inputs({**REQUIRED, "INPUT_SKIP-LABELING": "maybe"})
        assert isinstance(result, Err)
        assert result.error.inputs == ("skip-labeling",)

    def test_invalid_max_commit_pages(self) -> None:
        for bad in ("0", "-1", "lots"):
            result = load_inputs({**REQUIRED, "INPUT_MAX-COMMIT-PAGES": bad})
            assert isinstance(result, Err)
            assert result.error.inputs == ("max-commit-pages",)

    def test_component_and_proxy(self) -> None:
        inputs = _load(
            **{
                "INPUT_PATH": "pkgA",
                "INPUT_INCLUDE-COMPONENT-IN-TAG": "yes",
                "INPUT_PROXY-SERVER": "proxy.local:3128",
                "INPUT_CHANGELOG-HOST": "https://git.example.com",
                "INPUT_MAX-COMMIT-PAGES": "5",
            }
        )
        assert inputs.path == "pkgA"
        assert inputs.include_component_in_tag
        assert inputs.proxy_server == "proxy.local:3128"
        assert inputs.changelog_host == "https://git.example.com"
        assert inputs.max_commit_pages == 5

    def test_repr_hides_token(self) -> None:
        assert "secret" not in repr(_load())


def test_parse_bool() -> None:
    assert parse_bool("TRUE") is True
    assert parse_bool(" on ") is True
    assert parse_bool("0") is False
    assert parse_bool("") is False
    assert parse_bool("nah") is None
