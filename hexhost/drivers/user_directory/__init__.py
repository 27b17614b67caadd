"""User directory drivers."""

from hexhost.drivers.user_directory.getent import GetentUserDirectory
from hexhost.drivers.user_directory.local import LocalUserDirectory

__all__ = ["GetentUserDirectory", "LocalUserDirectory"]
