from __future__ import annotations

from gitea_release.release.changelog import commit_url_builder, generate_changelog
from gitea_release.release.model import CommitSummary


def _commits(n: int) -> list[CommitSummary]:
    # Newest first, like the commits endpoint.
    return [
        CommitSummary(sha=f"{i:07d}" + "f" * 33, message=f"change {i}\n\nlonger body {i}")
        for i in range(n, 0, -1)
    ]


def test_empty_commit_list() -> None:
    assert generate_changelog([], None) == "## Changes\n\n"


def test_lists_subject_and_short_sha() -> None:
    commits = [
        CommitSummary(sha="1111111aaaa", message="fix: crash on start\n\ndetails"),
        CommitSummary(sha="2222222bbbb", message="feat: add widgets"),
    ]
    assert generate_changelog(commits, None) == (
        "## Changes\n\n* fix: crash on start (1111111)\n* feat: add widgets (2222222)\n"
    )


def test_stops_before_stop_sha() -> None:
    commits = _commits(5)
    stop = commits[2].sha

    text = generate_changelog(commits, stop)

    lines = text.splitlines()[2:]
    assert lines == [
        f"* change 5 ({commits[0].sha[:7]})",
        f"* change 4 ({commits[1].sha[:7]})",
    ]


def test_stop_sha_on_first_commit_gives_empty_list() -> None:
    commits = _commits(3)
    assert generate_changelog(commits, commits[0].sha) == "## Changes\n\n"


def test_no_stop_sha_includes_every_commit() -> None:
    commits = _commits(100)
    text = generate_changelog(commits, None)
    assert text.count("\n* ") == 100


def test_truncated_page_silently_misses_older_commits() -> None:
    # The stop sha is commit 1, but only the newest 100 of 150 were fetched.
    history = _commits(150)
    page = history[:100]

    text = generate_changelog(page, history[-1].sha)

    assert text.count("\n* ") == 100
    assert "change 50 " not in text
    assert "change 51 " in text


def test_deterministic() -> None:
    commits = _commits(7)
    assert generate_changelog(commits, commits[4].sha) == generate_changelog(commits, commits[4].sha)


def test_commit_links_with_changelog_host() -> None:
    commits = [CommitSummary(sha="abcdef0123456789", message="docs: readme")]
    url = commit_url_builder("https://git.example.com/", "acme/widgets")

    text = generate_changelog(commits, None, commit_url=url)

    assert text == (
        "## Changes\n\n"
        "* docs: readme ([abcdef0](https://git.example.com/acme/widgets/commit/abcdef0123456789))\n"
    )


def test_empty_message_renders_blank_subject() -> None:
    assert CommitSummary(sha="abc", message="").subject == ""
