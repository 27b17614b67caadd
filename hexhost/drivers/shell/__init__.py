"""Shell drivers."""

from hexhost.drivers.shell.local import LocalShell
from hexhost.drivers.shell.runner import CommandRunner

__all__ = ["CommandRunner", "LocalShell"]
