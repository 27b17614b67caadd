"""Tests for CommandRunner result classification and quoting."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hexhost.drivers.shell import CommandRunner
from hexhost.kernel.config.models import ShellConfig
from hexhost.kernel.exceptions import RemoteCommandError
from hexhost.kernel.ports.shell import CancellationToken

if TYPE_CHECKING:
    from conftest import FakeShell


@pytest.fixture
def runner(fake_shell: FakeShell) -> CommandRunner:
    return CommandRunner(fake_shell, "web01")


class TestQuote:
    def test_quotes_by_default(self, runner: CommandRunner) -> None:
        assert runner.quote("/srv/my file") == "'/srv/my file'"
        assert runner.quote("/srv/plain") == "/srv/plain"

    def test_raw_interpolation_when_disabled(self, fake_shell: FakeShell) -> None:
        runner = CommandRunner(fake_shell, "web01", ShellConfig(quote_paths=False))

        assert runner.quote("/srv/my file") == "/srv/my file"


class TestRun:
    def test_ok_strips_output(self, fake_shell: FakeShell, runner: CommandRunner) -> None:
        fake_shell.on("hostname", "web01\n")

        result = runner.run("hostname")

        assert result.succeeded
        assert result.value == "web01"
        assert result.text == "web01\n"

    def test_unstripped(self, fake_shell: FakeShell, runner: CommandRunner) -> None:
        fake_shell.on("cat", "  padded\n")

        assert runner.run("cat /x", strip=False).value == "  padded\n"

    def test_failure_carries_stderr(self, fake_shell: FakeShell, runner: CommandRunner) -> None:
        fake_shell.on("rm", "", exit_status=2, stderr="rm: denied\n")

        result = runner.run("rm /etc/hosts")

        assert result.failed
        assert result.exit_status == 2
        assert isinstance(result.value, RemoteCommandError)
        assert result.value.exit_status == 2
        assert "rm: denied" in str(result.value)

    def test_failure_falls_back_to_stdout(
        self, fake_shell: FakeShell, runner: CommandRunner
    ) -> None:
        fake_shell.on("yum", "No package nope available.\n", exit_status=1)

        assert "No package nope" in str(runner.run("yum install -y nope").value)


class TestHelpers:
    def test_test_builds_bracket_probe(self, fake_shell: FakeShell, runner: CommandRunner) -> None:
        fake_shell.on("[ -d '/srv/a b' ]")

        assert runner.test("d", "/srv/a b")
        assert not runner.test("f", "/srv/a b")

    def test_output(self, fake_shell: FakeShell, runner: CommandRunner) -> None:
        fake_shell.on("whoami", "deploy\n").on("true")

        assert runner.output("whoami") == "deploy"
        assert runner.output("true") is None
        assert runner.output("false") is None


class TestTimeoutsAndCancellation:
    def test_timeout_defaults_from_config(self, fake_shell: FakeShell) -> None:
        runner = CommandRunner(fake_shell, "web01", ShellConfig(command_timeout=5))

        runner.run("true")
        runner.run("true", timeout=1.5)

        assert fake_shell.timeouts == [5, 1.5]

    def test_token_is_passed_through(self, fake_shell: FakeShell) -> None:
        token = CancellationToken()
        runner = CommandRunner(fake_shell, "web01", cancel_token=token)

        runner.execute("true")

        assert fake_shell.tokens == [token]
