"""Per-host session state.

Root directory, working directory and umask live on a :class:`HostSession`
owned by one backend, never in process-wide state, so several managers can
work against different hosts (or different views of the same host) side by
side.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field

from hexhost.kernel.ports.shell import CancellationToken


@dataclass(slots=True)
class HostSession:
    """Mutable session context of one host.

    Attributes
    ----------
    host : str
        Host identity the session belongs to.
    root_directory : str
        Logical root; every path is resolved beneath it.
    working_directory : str | None
        Directory relative paths are expanded against; None until known.
    umask : int | None
        Session umask applied when creating resources; None means the
        host's own default.
    cancel_token : CancellationToken
        Token checked by every running shell command of the session.
    """

    host: str
    root_directory: str = "/"
    working_directory: str | None = None
    umask: int | None = None
    cancel_token: CancellationToken = field(default_factory=CancellationToken)

    def expand(self, path: str, working_directory: str | None = None) -> str:
        """Absolute, normalised form of ``path`` as seen inside the session."""
        cwd = working_directory or self.working_directory or "/"
        joined = path if posixpath.isabs(path) else posixpath.join(cwd, path)
        return posixpath.normpath(joined).replace("//", "/")

    def host_path(self, path: str) -> str:
        """Translate a session path to the path on the host (applies the root)."""
        absolute = self.expand(path)
        if self.root_directory in ("", "/"):
            return absolute
        return posixpath.normpath(self.root_directory.rstrip("/") + absolute)


__all__ = ["HostSession"]
