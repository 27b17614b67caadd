"""Shared fixtures for the hexhost test suite.

- fake_shell: scripted in-memory shell for the remote backend
- log_messages: loguru records captured as plain messages
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from loguru import logger

from hexhost.kernel.config import clear_config_cache
from hexhost.kernel.ports.shell import CancellationToken, ShellOutput

Reply = ShellOutput | Callable[[str], ShellOutput]


class FakeShell:
    """Answers commands from rules matched by substring and records every command.

    Later rules win over earlier ones; unmatched commands exit 1 with no output.
    """

    def __init__(self) -> None:
        self.rules: list[tuple[str, Reply]] = []
        self.commands: list[str] = []
        self.timeouts: list[float | None] = []
        self.tokens: list[CancellationToken | None] = []

    def on(
        self, fragment: str, stdout: str = "", exit_status: int = 0, stderr: str = ""
    ) -> FakeShell:
        output = ShellOutput(stdout=stdout, exit_status=exit_status, stderr=stderr)
        self.rules.append((fragment, output))
        return self

    def on_call(self, fragment: str, reply: Callable[[str], ShellOutput]) -> FakeShell:
        self.rules.append((fragment, reply))
        return self

    def execute(
        self,
        command: str,
        *,
        timeout: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> ShellOutput:
        self.commands.append(command)
        self.timeouts.append(timeout)
        self.tokens.append(cancel)
        for fragment, reply in reversed(self.rules):
            if fragment in command:
                return reply(command) if callable(reply) else reply
        return ShellOutput(stdout="", exit_status=1)

    def ran(self, fragment: str) -> list[str]:
        return [command for command in self.commands if fragment in command]


@pytest.fixture
def fake_shell() -> FakeShell:
    """A fresh scripted shell whose working directory is ``/``."""
    return FakeShell().on("pwd", "/\n")


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages at DEBUG and above."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
        format="{message}",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterator[None]:
    clear_config_cache()
    yield
    clear_config_cache()
