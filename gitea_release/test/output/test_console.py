"""Tests for gitea_release.output.console module."""

from __future__ import annotations

import pytest

from gitea_release.output.console import (
    ActionsConsole,
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_shorthands(self) -> None:
        console = MockConsole()
        console.success("done")
        console.warning("careful")
        console.error("broken")
        console.info("fyi")

        assert console.messages == ["OK done", "warning: careful", "error: broken", "info: fyi"]
        assert console.has_warning()
        assert console.has_error()

    def test_find(self) -> None:
        console = MockConsole()
        console.print("release v1.0.0")
        console.print("pull request #3")
        assert [o.message for o in console.find("#3")] == ["pull request #3"]

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.newline()


class TestRichConsole:
    def test_markup_in_messages_is_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().info("label [autorelease: pending]")
        assert "[autorelease: pending]" in capsys.readouterr().out


class TestActionsConsole:
    def test_warning_is_workflow_annotation(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().warning("branch exists\nsecond line")
        assert "::warning::branch exists%0Asecond line" in capsys.readouterr().out

    def test_error_is_workflow_annotation(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().error("100% broken")
        assert "::error::100%25 broken" in capsys.readouterr().out


def test_style_str() -> None:
    assert str(Style.WARNING) == "warning"
