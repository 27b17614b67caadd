"""File-system backends and the factory that picks one for a host.

Example
-------
.. code-block:: python

    backend = select_backend("localhost")            # LocalBackend
    backend = select_backend("web01", shell=ssh)     # RemoteBackend
    backend = select_backend("localhost", shell=LocalShell(), remote=True)
"""

from __future__ import annotations

import socket
from functools import lru_cache

from hexhost.drivers.file_system.local import LocalBackend
from hexhost.drivers.file_system.remote import RemoteBackend
from hexhost.drivers.file_system.remote_stat import RemoteStat, stat_command
from hexhost.kernel.config.models import ShellConfig
from hexhost.kernel.context.session import HostSession
from hexhost.kernel.exceptions import ConfigurationError
from hexhost.kernel.logging import get_logger
from hexhost.kernel.ports.shell import ShellExecutor

logger = get_logger(__name__)

Backend = LocalBackend | RemoteBackend

_LOOPBACK_NAMES = frozenset({"localhost", "localhost.localdomain", "127.0.0.1", "::1"})


@lru_cache(maxsize=1)
def _own_names() -> frozenset[str]:
    names = set(_LOOPBACK_NAMES)
    try:
        names.add(socket.gethostname().lower())
        names.add(socket.getfqdn().lower())
    except OSError as exc:
        logger.debug("Could not resolve this machine's names: {error}", error=exc)
    return frozenset(names)


def is_local_host(host: str) -> bool:
    """Whether ``host`` names this machine."""
    return host.strip().lower() in _own_names()


def select_backend(
    host: str = "localhost",
    shell: ShellExecutor | None = None,
    *,
    platform: str | None = None,
    config: ShellConfig | None = None,
    session: HostSession | None = None,
    remote: bool | None = None,
) -> Backend:
    """Choose the backend for ``host``.

    Args
    ----
        host: Host identity.
        shell: Shell for remote hosts; required unless the host is local.
        platform: Platform tag; detected when omitted.
        config: Shell timeout and quoting settings for the remote backend.
        session: Existing session state to reuse.
        remote: Force the remote (``True``) or local (``False``) variant;
            by default it follows :func:`is_local_host`.

    Returns
    -------
        A ``LocalBackend`` or a ``RemoteBackend``.

    Raises
    ------
    ConfigurationError
        If a remote backend is needed and no shell was given, or a local
        backend is forced for another host.
    """
    local = is_local_host(host)
    use_remote = (not local) if remote is None else remote

    if not use_remote:
        if not local:
            msg = f"cannot use local calls for remote host {host!r}"
            raise ConfigurationError("file_system", msg)
        logger.debug("Using local backend for {host}", host=host)
        return LocalBackend(host, session=session, platform=platform)

    if shell is None:
        raise ConfigurationError("file_system", f"host {host!r} needs a shell to run commands")
    logger.debug("Using remote backend for {host}", host=host)
    return RemoteBackend(host, shell, session=session, platform=platform, config=config)


__all__ = [
    "Backend",
    "LocalBackend",
    "RemoteBackend",
    "RemoteStat",
    "is_local_host",
    "select_backend",
    "stat_command",
]
