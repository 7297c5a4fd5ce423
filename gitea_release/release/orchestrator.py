"""Release orchestration: one version, then a release and/or a release PR.

The next version is computed once in ``prepare_plan`` and shared by both
branches, so a release and a PR opened in the same invocation always agree
even if another release is published meanwhile.

Failures are fatal and abort the invocation, with one exception: creating
the release branch when the server reports a conflict (the branch appeared
between the existence check and the create call) only warns.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace

from gitea_release.api.gitea import ApiError, GiteaClient
from gitea_release.core.config import ActionInputs
from gitea_release.core.result import Err, Ok, Result
from gitea_release.output.console import ConsoleProtocol, Style
from gitea_release.output.sink import OutputSink
from gitea_release.release.changelog import commit_url_builder, generate_changelog
from gitea_release.release.errors import ReleaseError, ReleaseErrorKind
from gitea_release.release.model import (
    PENDING_LABEL,
    LatestRelease,
    PullRequest,
    Release,
    release_branch_name,
    tag_name,
)
from gitea_release.release.outputs import pull_request_outputs, release_outputs
from gitea_release.release.versioning import resolve_next_version


PR_BODY_TEMPLATE = (
    ":robot: Release {version} is pending.\n"
    "\n"
    "---\n"
    "This pull request was opened by gitea-release. "
    "Merge it to complete release {version}.\n"
)


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    version: str
    head_sha: str
    latest: LatestRelease | None


@dataclass(frozen=True, slots=True)
class RunResult:
    releases: tuple[Release, ...]
    pull_requests: tuple[PullRequest, ...]


def _fail(kind: ReleaseErrorKind, message: str, error: ApiError) -> Err[ReleaseError]:
    return Err(ReleaseError(kind=kind, message=message, hint=str(error)))


def _emit(sink: OutputSink, values: Mapping[str, str]) -> Result[None, ReleaseError]:
    written = sink.set_outputs(values)
    if isinstance(written, Err):
        return Err(ReleaseError(kind="outputs_failed", message=written.error.message))
    return Ok(None)


def prepare_plan(
    *,
    inputs: ActionInputs,
    client: GiteaClient,
    console: ConsoleProtocol,
) -> Result[ReleasePlan, ReleaseError]:
    latest = client.get_latest_release()
    if isinstance(latest, Err):
        return _fail("latest_release_failed", "failed to fetch latest release", latest.error)

    head = client.get_branch_head(inputs.target_branch)
    if isinstance(head, Err):
        return _fail(
            "branch_lookup_failed",
            f"failed to resolve head of {inputs.target_branch}",
            head.error,
        )

    if inputs.release_as is not None:
        version = inputs.release_as
        console.print(f"version: {version} (release-as)", Style.DIM)
    else:
        latest_tag = latest.value.tag_name if latest.value is not None else None
        version = str(resolve_next_version(latest_tag, inputs.versioning_strategy))
        console.print(
            f"version: {version} (latest: {latest_tag or 'none'}, {inputs.versioning_strategy})",
            Style.DIM,
        )

    return Ok(ReleasePlan(version=version, head_sha=head.value, latest=latest.value))


def _previous_release_sha(
    client: GiteaClient, latest: LatestRelease | None
) -> Result[str | None, ReleaseError]:
    if latest is None:
        return Ok(None)
    sha = client.get_tag_commit_sha(latest.tag_name)
    if isinstance(sha, Err):
        return _fail("latest_release_failed", f"failed to resolve tag {latest.tag_name}", sha.error)
    return Ok(sha.value or latest.target_commitish)


def publish_release(
    *,
    inputs: ActionInputs,
    client: GiteaClient,
    console: ConsoleProtocol,
    plan: ReleasePlan,
) -> Result[Release | None, ReleaseError]:
    stop_at = _previous_release_sha(client, plan.latest)
    if isinstance(stop_at, Err):
        return stop_at

    commits = client.list_commits(
        plan.head_sha,
        max_pages=inputs.max_commit_pages,
        stop_at_sha=stop_at.value,
    )
    if isinstance(commits, Err):
        return _fail("commit_listing_failed", "failed to list commits", commits.error)

    commit_url = None
    if inputs.changelog_host:
        commit_url = commit_url_builder(inputs.changelog_host, inputs.repo_slug)

    release = Release(
        tag_name=tag_name(
            plan.version,
            path=inputs.path,
            include_component_in_tag=inputs.include_component_in_tag,
        ),
        name=f"Release {plan.version}",
        body=generate_changelog(commits.value, stop_at.value, commit_url=commit_url),
        version=plan.version,
        path=inputs.path,
    )

    if inputs.dry_run:
        console.print(f"would create release {release.tag_name} at {plan.head_sha[:7]}", Style.DIM)
        console.print(release.body, Style.DIM)
        return Ok(None)

    created = client.create_release(release, target_commitish=plan.head_sha)
    if isinstance(created, Err):
        return _fail("release_failed", f"failed to create release {release.tag_name}", created.error)

    console.success(f"release {release.tag_name}: {created.value.url or '(no url)'}")
    return Ok(created.value)


def _ensure_release_branch(
    *,
    client: GiteaClient,
    console: ConsoleProtocol,
    branch: str,
    head_sha: str,
) -> Result[None, ReleaseError]:
    exists = client.branch_exists(branch)
    if isinstance(exists, Err):
        return _fail("ref_failed", f"failed to look up branch {branch}", exists.error)
    if exists.value:
        console.print(f"branch {branch} already exists", Style.DIM)
        return Ok(None)

    created = client.create_branch_ref(branch, head_sha)
    if isinstance(created, Err):
        if created.error.kind != "conflict":
            return _fail("ref_failed", f"failed to create branch {branch}", created.error)
        console.warning(f"branch {branch} could not be created, assuming it exists: {created.error}")
    return Ok(None)


def open_release_pull_request(
    *,
    inputs: ActionInputs,
    client: GiteaClient,
    console: ConsoleProtocol,
    plan: ReleasePlan,
) -> Result[PullRequest | None, ReleaseError]:
    branch = release_branch_name(inputs.target_branch, plan.version)
    pr = PullRequest(
        title=f"chore: release {plan.version}",
        body=PR_BODY_TEMPLATE.format(version=plan.version),
        head_branch_name=branch,
        base_branch_name=inputs.target_branch,
    )

    if inputs.dry_run:
        console.print(f"would open '{pr.title}' from {branch} into {inputs.target_branch}", Style.DIM)
        return Ok(None)

    ensured = _ensure_release_branch(
        client=client, console=console, branch=branch, head_sha=plan.head_sha
    )
    if isinstance(ensured, Err):
        return ensured

    if inputs.update_manifest:
        manifest = json.dumps({inputs.path: plan.version}, indent=2) + "\n"
        written = client.create_or_update_file(
            inputs.manifest_file,
            manifest,
            branch=branch,
            message=f"chore: release {plan.version}",
        )
        if isinstance(written, Err):
            return _fail("manifest_failed", f"failed to update {inputs.manifest_file}", written.error)

    created = client.create_pull_request(pr)
    if isinstance(created, Err):
        return _fail("pull_request_failed", f"failed to open pull request from {branch}", created.error)
    opened = created.value

    if not inputs.skip_labeling and opened.number is not None:
        labels = (PENDING_LABEL,)
        labeled = client.add_labels(opened.number, labels)
        if isinstance(labeled, Err):
            return _fail("labeling_failed", f"failed to label pull request #{opened.number}", labeled.error)
        opened = replace(opened, labels=labels)

    console.success(f"pull request #{opened.number}: {opened.url or '(no url)'}")
    return Ok(opened)


def _print_header(inputs: ActionInputs, console: ConsoleProtocol) -> None:
    console.header(f"{inputs.repo_slug} ({inputs.target_branch})")
    console.print(f"path: {inputs.path}", Style.DIM)
    if inputs.release_type:
        console.print(f"release-type: {inputs.release_type} (reported only)", Style.DIM)
    if inputs.config_file:
        console.print(f"config-file: {inputs.config_file} (reported only)", Style.DIM)
    if inputs.dry_run:
        console.info("dry run: no release, branch or pull request will be created")


def run_release(
    *,
    inputs: ActionInputs,
    client: GiteaClient,
    console: ConsoleProtocol,
    sink: OutputSink,
) -> Result[RunResult, ReleaseError]:
    """Run the release branch, then the pull request branch.

    Release outputs are written as soon as the release branch finishes, so
    they survive a later failure of the pull request branch.
    """
    _print_header(inputs, console)

    if inputs.skip_gitea_release and inputs.skip_gitea_pull_request:
        console.info("release and pull request both skipped")
        emitted = _emit(sink, {**release_outputs(()), **pull_request_outputs(())})
        if isinstance(emitted, Err):
            return emitted
        return Ok(RunResult(releases=(), pull_requests=()))

    plan = prepare_plan(inputs=inputs, client=client, console=console)
    if isinstance(plan, Err):
        return plan

    releases: tuple[Release, ...] = ()
    if inputs.skip_gitea_release:
        console.print("release: skipped", Style.DIM)
    else:
        release = publish_release(inputs=inputs, client=client, console=console, plan=plan.value)
        if isinstance(release, Err):
            return release
        if release.value is not None:
            releases = (release.value,)

    emitted = _emit(sink, release_outputs(releases))
    if isinstance(emitted, Err):
        return emitted

    pull_requests: tuple[PullRequest, ...] = ()
    if inputs.skip_gitea_pull_request:
        console.print("pull request: skipped", Style.DIM)
    else:
        pr = open_release_pull_request(inputs=inputs, client=client, console=console, plan=plan.value)
        if isinstance(pr, Err):
            return pr
        if pr.value is not None:
            pull_requests = (pr.value,)

    emitted = _emit(sink, pull_request_outputs(pull_requests))
    if isinstance(emitted, Err):
        return emitted

    return Ok(RunResult(releases=releases, pull_requests=pull_requests))
