"""Normalise textual stat and listing output into :class:`StatAttributes`.

Two raw formats are understood:

1. A single-line ``key: value`` dump produced by ``stat`` with a custom
   format string, e.g.::

       dev: 16777217 ino: 4408160 mode: 100644 nlink: 1 uid: 501 gid: 20 rdev: 0
       size: 1067 blksize: 4096 blocks: 8 atime: 1379742799 mtime: 1375936779
       ctime: 1375936779

   GNU and BSD ``stat`` disagree on field order, on numeric bases (GNU
   prints mode and device numbers in hexadecimal, BSD in octal/decimal) and
   on whether a birth time exists, so each platform has a
   :class:`StatLayout`. Bare values without keys are read positionally in
   the layout's field order.

2. A long-listing line (``ls -ld``) starting with a ten-character
   permission string, from which only the kind and permission bits are
   derived.

Anything that cannot be parsed becomes ``None`` in the result rather than
an exception.
"""

from __future__ import annotations

import re
import stat as stat_module
from dataclasses import dataclass
from datetime import UTC, datetime

from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.domain.stat import StatAttributes, hex_device, kind_from_mode
from hexhost.kernel.logging import get_logger

logger = get_logger(__name__)

_KEY_VALUE = re.compile(r"([A-Za-z_]+):\s*(\S+)")
_LISTING = re.compile(r"^[-bcdlpsD][-rwxsStTlL]{9}[.@+]?(?:\s|$)")

_LETTER_VALUES = {"r": 4, "w": 2, "x": 1, "s": 1, "t": 1, "-": 0, "S": 0, "T": 0, "l": 0, "L": 0}

_TYPE_BITS = {
    "-": stat_module.S_IFREG,
    "d": stat_module.S_IFDIR,
    "l": stat_module.S_IFLNK,
    "c": stat_module.S_IFCHR,
    "b": stat_module.S_IFBLK,
    "p": stat_module.S_IFIFO,
    "s": stat_module.S_IFSOCK,
}


@dataclass(frozen=True, slots=True)
class StatLayout:
    """How one platform's ``stat`` renders a resource.

    Attributes
    ----------
    name : str
        Layout name (``linux`` or ``bsd``).
    fields : tuple[str, ...]
        Field keys in the order the format string prints them.
    format : str
        Format string handed to ``stat``.
    format_flag : str
        ``stat`` option introducing the format (``-c`` or ``-f``).
    mode_base : int
        Numeric base of the printed mode.
    device_base : int
        Numeric base of printed device numbers.
    major_format, minor_format : str
        Format strings printing a device's major and minor number.
    """

    name: str
    fields: tuple[str, ...]
    format: str
    format_flag: str
    mode_base: int
    device_base: int
    major_format: str
    minor_format: str

    def _invoke(self, template: str, quoted_path: str, follow: bool) -> str:
        program = "stat -L" if follow else "stat"
        return f"{program} {self.format_flag} '{template}' {quoted_path}"

    def command(self, quoted_path: str, follow: bool = False) -> str:
        """``stat`` of the path itself, or of its link target when ``follow``."""
        return self._invoke(self.format, quoted_path, follow)

    def major_command(self, quoted_path: str, follow: bool = False) -> str:
        return self._invoke(self.major_format, quoted_path, follow)

    def minor_command(self, quoted_path: str, follow: bool = False) -> str:
        return self._invoke(self.minor_format, quoted_path, follow)


LINUX_LAYOUT = StatLayout(
    name="linux",
    fields=(
        "dev", "ino", "mode", "nlink", "uid", "gid", "rdev",
        "size", "blksize", "blocks", "atime", "mtime", "ctime",
    ),
    format=(
        "dev: %D ino: %i mode: %f nlink: %h uid: %u gid: %g rdev: %t "
        "size: %s blksize: %o blocks: %b atime: %X mtime: %Y ctime: %Z"
    ),
    format_flag="-c",
    mode_base=16,
    device_base=16,
    major_format="%t",
    minor_format="%T",
)

BSD_LAYOUT = StatLayout(
    name="bsd",
    fields=(
        "dev", "ino", "mode", "nlink", "uid", "gid", "rdev",
        "atime", "mtime", "ctime", "birthtime", "size", "blocks", "blksize",
    ),
    format=(
        "dev: %d ino: %i mode: %p nlink: %l uid: %u gid: %g rdev: %r "
        "atime: %a mtime: %m ctime: %c birthtime: %B size: %z blocks: %b blksize: %k"
    ),
    format_flag="-f",
    mode_base=8,
    device_base=10,
    major_format="%Hr",
    minor_format="%Lr",
)

_PLATFORM_LAYOUTS: dict[str, StatLayout] = {
    "linux": LINUX_LAYOUT,
    "gnu": LINUX_LAYOUT,
    "bsd": BSD_LAYOUT,
    "darwin": BSD_LAYOUT,
    "macos": BSD_LAYOUT,
    "freebsd": BSD_LAYOUT,
    "openbsd": BSD_LAYOUT,
    "netbsd": BSD_LAYOUT,
}


def layout_for(platform: str | None) -> StatLayout:
    """Select the stat layout for a platform tag.

    ``None`` means "not known" and silently uses the Linux layout; an
    unrecognised tag also uses it but logs a warning.
    """
    if platform is None:
        return LINUX_LAYOUT
    layout = _PLATFORM_LAYOUTS.get(platform.strip().lower())
    if layout is None:
        logger.warning(
            "Unrecognised platform {platform!r}; falling back to the linux stat layout",
            platform=platform,
        )
        return LINUX_LAYOUT
    return layout


def mode_to_i(letter_mode: str) -> int | None:
    """Convert a permission string (``-rwxr--r--``) to octal digits (``744``).

    A leading type character and trailing ACL/xattr markers are ignored.
    Returns None when the string cannot be split into three 3-character
    groups of permission letters.

    Examples
    --------
    >>> mode_to_i("-rwxr--r--")
    744
    >>> mode_to_i("drwxr-xr-x")
    755
    >>> mode_to_i("") is None
    True
    """
    tokens = letter_mode.split()
    if not tokens:
        return None

    letters = tokens[0].rstrip(".@+")
    if len(letters) == 10:
        letters = letters[1:]
    if len(letters) != 9:
        return None

    digits = ""
    for start in (0, 3, 6):
        value = 0
        for char in letters[start : start + 3]:
            if char not in _LETTER_VALUES:
                return None
            value += _LETTER_VALUES[char]
        digits += str(value)

    return int(digits)


def parse_listing(line: str) -> StatAttributes:
    """Derive kind and permission bits from a long-listing line."""
    token = line.split()[0] if line.split() else ""
    type_bits = _TYPE_BITS.get(token[:1])
    permissions = mode_to_i(token)

    if type_bits is None or permissions is None:
        return StatAttributes()

    mode = type_bits | int(str(permissions), 8)
    return StatAttributes(kind=kind_from_mode(mode), mode=mode)


def parse_stat(raw: str, platform: str | None = None) -> StatAttributes:
    """Parse raw ``stat`` or ``ls -l`` output into :class:`StatAttributes`.

    Parameters
    ----------
    raw : str
        Output of the stat command (one line) or a long-listing line.
    platform : str | None
        Platform tag selecting the field layout (``linux``, ``darwin`` ...).

    Returns
    -------
    StatAttributes
        Parsed attributes; unparseable fields are None.
    """
    text = raw.strip()
    if not text:
        return StatAttributes()

    if _LISTING.match(text):
        return parse_listing(text)

    layout = layout_for(platform)
    fields = _tokenize(text, layout)

    mode = _to_int(fields.get("mode"), layout.mode_base)
    return StatAttributes(
        kind=kind_from_mode(mode) if mode is not None else ResourceKind.OBJECT,
        mode=mode,
        inode=_to_int(fields.get("ino")),
        owner_id=_to_int(fields.get("uid")),
        group_id=_to_int(fields.get("gid")),
        device=_to_device(fields.get("dev"), layout.device_base),
        special_device=_to_device(fields.get("rdev"), layout.device_base),
        size=_to_int(fields.get("size")),
        block_size=_to_int(fields.get("blksize")),
        block_count=_to_int(fields.get("blocks")),
        link_count=_to_int(fields.get("nlink")),
        access_time=_to_time(fields.get("atime")),
        modify_time=_to_time(fields.get("mtime")),
        change_time=_to_time(fields.get("ctime")),
        birth_time=_to_time(fields.get("birthtime")),
    )


def parse_device_number(raw: str, platform: str | None = None) -> int | None:
    """Parse the output of a major/minor device number probe."""
    return _to_int(raw.strip(), layout_for(platform).device_base)


def _tokenize(text: str, layout: StatLayout) -> dict[str, str]:
    pairs = _KEY_VALUE.findall(text)
    if pairs:
        return {key.lower(): value for key, value in pairs}
    return dict(zip(layout.fields, text.split(), strict=False))


def _to_int(value: str | None, base: int = 10) -> int | None:
    if value is None:
        return None
    try:
        return int(value, base)
    except ValueError:
        return None


def _to_device(value: str | None, base: int) -> str | None:
    number = _to_int(value, base)
    return None if number is None else hex_device(number)


def _to_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    # BSD reports a birth time of 0 or -1 when the file system has none
    if seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=UTC)


__all__ = [
    "BSD_LAYOUT",
    "LINUX_LAYOUT",
    "StatLayout",
    "layout_for",
    "mode_to_i",
    "parse_device_number",
    "parse_listing",
    "parse_stat",
]
