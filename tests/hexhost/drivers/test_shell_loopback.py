"""The remote backend driven through a real local shell, compared with the local backend.

Both file systems look at the same ``tmp_path``: one with direct OS calls,
one with the POSIX commands a remote host would receive.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from hexhost.drivers.file_system import LocalBackend, RemoteBackend
from hexhost.drivers.shell import LocalShell
from hexhost.kernel import FileSystem, ResourceChanged, get_default_config
from hexhost.kernel.changeable import NO_CHANGE

pytestmark = pytest.mark.skipif(
    sys.platform not in ("linux", "darwin"), reason="needs a POSIX shell with stat and ls"
)


@pytest.fixture
def local_fs() -> FileSystem:
    return FileSystem(config=get_default_config())


@pytest.fixture
def loopback_fs() -> FileSystem:
    return FileSystem(shell=LocalShell(), remote=True, config=get_default_config())


@pytest.fixture(params=["local", "loopback"])
def any_fs(
    request: pytest.FixtureRequest, local_fs: FileSystem, loopback_fs: FileSystem
) -> FileSystem:
    return local_fs if request.param == "local" else loopback_fs


@pytest.fixture
def events(any_fs: FileSystem) -> list[ResourceChanged]:
    seen: list[ResourceChanged] = []
    any_fs.add_observer(seen.append)
    return seen


@pytest.fixture
def linked_file(tmp_path: Path) -> Path:
    (tmp_path / "real.conf").write_text("port = 80\n")
    os.chmod(tmp_path / "real.conf", 0o600)
    (tmp_path / "current.conf").symlink_to(tmp_path / "real.conf")
    return tmp_path / "current.conf"


class TestBackends:
    def test_fixtures_pick_both_variants(
        self, local_fs: FileSystem, loopback_fs: FileSystem
    ) -> None:
        assert isinstance(local_fs.backend, LocalBackend)
        assert isinstance(loopback_fs.backend, RemoteBackend)


class TestAttributeParity:
    """The same path answers the same way through either backend."""

    def test_mode_owner_group_size(
        self, local_fs: FileSystem, loopback_fs: FileSystem, tmp_path: Path
    ) -> None:
        (tmp_path / "plain").write_text("twelve bytes")
        os.chmod(tmp_path / "plain", 0o640)
        path = str(tmp_path / "plain")

        local, remote = local_fs.file(path), loopback_fs.file(path)

        assert remote.mode == local.mode == 640
        assert remote.owner == local.owner
        assert remote.group == local.group
        assert remote.size == local.size == 12

    def test_file_through_link_reports_target(
        self, local_fs: FileSystem, loopback_fs: FileSystem, linked_file: Path
    ) -> None:
        local, remote = local_fs.file(str(linked_file)), loopback_fs.file(str(linked_file))

        assert remote.mode == local.mode == 600
        assert remote.size == local.size == 10
        assert remote.stat().value.kind == local.stat().value.kind

    def test_symbolic_link_reports_itself(
        self, local_fs: FileSystem, loopback_fs: FileSystem, linked_file: Path
    ) -> None:
        local = local_fs.symbolic_link(str(linked_file))
        remote = loopback_fs.symbolic_link(str(linked_file))

        assert remote.mode == local.mode
        assert remote.target == local.target == str(linked_file.parent / "real.conf")

    def test_reads_count_bytes(
        self, local_fs: FileSystem, loopback_fs: FileSystem, tmp_path: Path
    ) -> None:
        (tmp_path / "menu").write_bytes("café au lait\n".encode())
        path = str(tmp_path / "menu")

        local, remote = local_fs.file(path), loopback_fs.file(path)

        assert remote.read(2, 6).value == local.read(2, 6).value == "au"
        assert remote.read(3).value == local.read(3).value == "caf"
        assert remote.contents == local.contents == "café au lait\n"

    def test_non_utf8_contents(
        self, local_fs: FileSystem, loopback_fs: FileSystem, tmp_path: Path
    ) -> None:
        (tmp_path / "legacy").write_bytes(b"caf\xe9\nna\xefve\n")
        path = str(tmp_path / "legacy")

        local, remote = local_fs.file(path), loopback_fs.file(path)

        assert remote.contents == local.contents == "caf\udce9\nna\udcefve\n"
        assert remote.readlines().value == local.readlines().value
        assert remote.read(1, 3).value == local.read(1, 3).value == "\udce9"


class TestIdempotence:
    """A repeated mutation changes nothing and notifies nothing."""

    def test_chmod_through_link(
        self, any_fs: FileSystem, events: list[ResourceChanged], linked_file: Path
    ) -> None:
        target = any_fs.file(str(linked_file))

        first = target.chmod(644)
        second = target.chmod(644)

        assert first.succeeded
        assert second is NO_CHANGE
        assert [(e.attribute, e.old, e.new) for e in events] == [("mode", 600, 644)]
        assert (os.stat(linked_file).st_mode & 0o777) == 0o644

    def test_write(
        self, any_fs: FileSystem, events: list[ResourceChanged], tmp_path: Path
    ) -> None:
        target = any_fs.file(str(tmp_path / "motd"))

        assert target.write("it's up\n").succeeded
        assert target.write("it's up\n") is NO_CHANGE
        assert (tmp_path / "motd").read_text() == "it's up\n"
        assert [e.attribute for e in events] == ["contents"]

    def test_write_back_non_utf8_contents(
        self, any_fs: FileSystem, events: list[ResourceChanged], tmp_path: Path
    ) -> None:
        (tmp_path / "legacy").write_bytes(b"caf\xe9\n")
        source = any_fs.file(str(tmp_path / "legacy"))

        assert source.write(source.contents) is NO_CHANGE
        assert any_fs.file(str(tmp_path / "again")).write(source.contents).succeeded
        assert (tmp_path / "again").read_bytes() == b"caf\xe9\n"
        assert [e.attribute for e in events] == ["contents"]

    def test_copy_to(
        self, any_fs: FileSystem, events: list[ResourceChanged], tmp_path: Path
    ) -> None:
        (tmp_path / "a.conf").write_text("x = 1\n")
        source = any_fs.file(str(tmp_path / "a.conf"))

        assert source.copy_to(str(tmp_path / "b.conf")).succeeded
        assert source.copy_to(str(tmp_path / "b.conf")) is NO_CHANGE
        assert (tmp_path / "b.conf").read_text() == "x = 1\n"
        assert [(e.attribute, e.new) for e in events] == [("exists", True)]
