"""Typed loading of action inputs.

Inputs reach the process the way Actions runners pass them: one environment
variable per input, ``INPUT_<NAME>`` with the input name upper-cased. Runners
keep hyphens (``INPUT_TARGET-BRANCH``); the underscore spelling
(``INPUT_TARGET_BRANCH``) is accepted too so the step can be driven from a
plain shell.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from gitea_release.release.model import ROOT_PATH, VersioningStrategy

from .result import Err, Ok, Result

__all__ = [
    "ActionInputs",
    "ConfigError",
    "load_inputs",
    "parse_bool",
    "DEFAULT_TARGET_BRANCH",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_MANIFEST_FILE",
    "ROOT_PATH",
]

DEFAULT_TARGET_BRANCH = "main"
DEFAULT_CONFIG_FILE = "release-please-config.json"
DEFAULT_MANIFEST_FILE = ".release-please-manifest.json"

_REQUIRED = ("token", "api-url", "owner", "repo")

_TRUE = frozenset({"true", "yes", "1", "on"})
_FALSE = frozenset({"false", "no", "0", "off", ""})


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when inputs are missing or malformed."""

    message: str
    inputs: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ActionInputs:
    """Configuration for one invocation.

    ``release_type`` and ``config_file`` are accepted for compatibility with
    release-please workflows and reported in the run header; they do not change
    behaviour. ``manifest_file`` is only written when ``update_manifest`` is set.
    """

    token: str
    api_url: str
    owner: str
    repo: str
    release_type: str | None = None
    path: str = ROOT_PATH
    target_branch: str = DEFAULT_TARGET_BRANCH
    config_file: str = DEFAULT_CONFIG_FILE
    manifest_file: str = DEFAULT_MANIFEST_FILE
    proxy_server: str | None = None
    skip_gitea_release: bool = False
    skip_gitea_pull_request: bool = False
    skip_labeling: bool = False
    include_component_in_tag: bool = False
    changelog_host: str | None = None
    versioning_strategy: VersioningStrategy = VersioningStrategy.ALWAYS_BUMP_PATCH
    release_as: str | None = None
    max_commit_pages: int = 1
    update_manifest: bool = False
    dry_run: bool = False

    @property
    def repo_slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __repr__(self) -> str:
        # Keep the token out of tracebacks and debug prints.
        return f"ActionInputs(repo={self.repo_slug!r}, api_url={self.api_url!r}, path={self.path!r})"


def parse_bool(value: str) -> bool | None:
    """Parse an input boolean; None when the text is not a recognised boolean."""
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


def _get(environ: Mapping[str, str], name: str) -> str | None:
    upper = name.upper()
    for key in (f"INPUT_{upper}", f"INPUT_{upper.replace('-', '_')}"):
        value = environ.get(key)
        if value is not None and value.strip():
            return value.strip()
    return None


def load_inputs(environ: Mapping[str, str]) -> Result[ActionInputs, ConfigError]:
    """Build ActionInputs from ``INPUT_*`` environment variables.

    Args:
        environ: Environment mapping (usually ``os.environ``)

    Returns:
        Ok(ActionInputs) on success, Err(ConfigError) naming every bad input
    """
    missing = tuple(name for name in _REQUIRED if _get(environ, name) is None)
    if missing:
        return Err(
            ConfigError(f"missing required inputs: {', '.join(missing)}", inputs=missing)
        )

    flags: dict[str, bool] = {}
    invalid: list[str] = []
    for name in (
        "skip-gitea-release",
        "skip-gitea-pull-request",
        "skip-labeling",
        "include-component-in-tag",
        "update-manifest",
        "dry-run",
    ):
        raw = _get(environ, name)
        parsed = False if raw is None else parse_bool(raw)
        if parsed is None:
            invalid.append(name)
            continue
        flags[name] = parsed

    max_pages = 1
    raw_pages = _get(environ, "max-commit-pages")
    if raw_pages is not None:
        try:
            max_pages = int(raw_pages)
        except ValueError:
            max_pages = 0
        if max_pages < 1:
            invalid.append("max-commit-pages")

    if invalid:
        return Err(ConfigError(f"invalid inputs: {', '.join(invalid)}", inputs=tuple(invalid)))

    release_as = _get(environ, "release-as")
    strategy = _get(environ, "versioning-strategy")

    return Ok(
        ActionInputs(
            token=_get(environ, "token") or "",
            api_url=(_get(environ, "api-url") or "").rstrip("/"),
            owner=_get(environ, "owner") or "",
            repo=_get(environ, "repo") or "",
            release_type=_get(environ, "release-type"),
            path=_get(environ, "path") or ROOT_PATH,
            target_branch=_get(environ, "target-branch") or DEFAULT_TARGET_BRANCH,
            config_file=_get(environ, "config-file") or DEFAULT_CONFIG_FILE,
            manifest_file=_get(environ, "manifest-file") or DEFAULT_MANIFEST_FILE,
            proxy_server=_get(environ, "proxy-server"),
            skip_gitea_release=flags["skip-gitea-release"],
            skip_gitea_pull_request=flags["skip-gitea-pull-request"],
            skip_labeling=flags["skip-labeling"],
            include_component_in_tag=flags["include-component-in-tag"],
            changelog_host=_get(environ, "changelog-host"),
            versioning_strategy=VersioningStrategy.from_input(strategy),
            release_as=release_as.removeprefix("v") if release_as else None,
            max_commit_pages=max_pages,
            update_manifest=flags["update-manifest"],
            dry_run=flags["dry-run"],
        )
    )
