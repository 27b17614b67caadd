"""Session context for hexhost backends."""

from hexhost.kernel.context.session import HostSession

__all__ = ["HostSession"]
