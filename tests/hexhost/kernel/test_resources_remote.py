"""Tests for resources on a remote host, driven through a scripted shell."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hexhost.drivers.file_system import RemoteBackend
from hexhost.kernel import (
    Directory,
    File,
    FileSystem,
    ResourceChanged,
    ResourceKind,
    SymbolicLink,
    get_default_config,
)
from hexhost.kernel.changeable import NO_CHANGE
from hexhost.kernel.config import HexHostConfig, ShellConfig
from hexhost.kernel.exceptions import RemoteCommandError
from hexhost.kernel.ports.shell import ShellOutput

if TYPE_CHECKING:
    from collections.abc import Callable

    from conftest import FakeShell

LINUX_STAT = (
    "dev: 801 ino: 131 mode: 81a4 nlink: 1 uid: 0 gid: 0 rdev: 0 "
    "size: 220 blksize: 4096 blocks: 8 atime: 1700000000 mtime: 1700000000 ctime: 1700000000"
)


@pytest.fixture
def backend(fake_shell: FakeShell) -> RemoteBackend:
    return RemoteBackend("web01", fake_shell, platform="linux")


@pytest.fixture
def remote_fs(fake_shell: FakeShell) -> FileSystem:
    return FileSystem("web01", shell=fake_shell, platform="linux", config=get_default_config())


class TestOwnerNotification:
    """chown reports a change only when the owner really moved."""

    @pytest.fixture
    def owner(self) -> dict[str, str]:
        return {"name": "person"}

    @pytest.fixture
    def app_conf(
        self, fake_shell: FakeShell, backend: RemoteBackend, owner: dict[str, str]
    ) -> File:
        fake_shell.on_call(
            "awk '{print $3}'", lambda _: ShellOutput(stdout=owner["name"] + "\n", exit_status=0)
        )
        return File("/etc/app.conf", "web01", backend=backend)

    def test_same_owner_is_no_change(self, app_conf: File, fake_shell: FakeShell) -> None:
        seen: list[ResourceChanged] = []
        app_conf.add_observer(seen.append)

        result = app_conf.chown("person")

        assert result is NO_CHANGE
        assert seen == []
        assert fake_shell.ran("chown") == []

    def test_new_owner_notifies_once(
        self, app_conf: File, fake_shell: FakeShell, owner: dict[str, str]
    ) -> None:
        def chown(command: str) -> ShellOutput:
            owner["name"] = command.split()[1]
            return ShellOutput(stdout="", exit_status=0)

        fake_shell.on_call("chown", chown)
        seen: list[ResourceChanged] = []
        app_conf.add_observer(seen.append)

        result = app_conf.chown("someone")
        again = app_conf.chown("someone")

        assert result.succeeded
        assert again is NO_CHANGE
        assert [(e.attribute, e.old, e.new) for e in seen] == [("owner", "person", "someone")]
        assert fake_shell.ran("chown") == ["chown someone /etc/app.conf"]

    def test_chown_to_same_account_by_id_is_silent(
        self, app_conf: File, fake_shell: FakeShell
    ) -> None:
        fake_shell.on("chown", "")
        seen: list[ResourceChanged] = []
        app_conf.add_observer(seen.append)

        result = app_conf.chown("1000")

        assert result.succeeded
        assert seen == []

    def test_failed_chown_is_silent(self, app_conf: File, fake_shell: FakeShell) -> None:
        fake_shell.on("chown", "", exit_status=1, stderr="chown: Operation not permitted\n")
        seen: list[ResourceChanged] = []
        app_conf.add_observer(seen.append)

        result = app_conf.chown("someone")

        assert result.failed
        assert isinstance(result.value, RemoteCommandError)
        assert "Operation not permitted" in str(result.value)
        assert seen == []


class TestRemoteQueries:
    def test_mode_from_listing(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("awk '{print $1}'", "-rw-r-----\n")

        assert File("/etc/shadow", "web01", backend=backend).mode == 640

    def test_unreadable_listing(self, backend: RemoteBackend) -> None:
        assert File("/nope", "web01", backend=backend).mode is None

    def test_stat(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("stat -L -c", LINUX_STAT + "\n")

        attributes = File("/etc/hosts", "web01", backend=backend).stat().value

        assert attributes.kind is ResourceKind.FILE
        assert attributes.size == 220
        assert fake_shell.ran("stat -L -c")[0].endswith(" /etc/hosts")

    def test_is_zero_reads_non_empty_probe_inverted(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        empty = File("/tmp/empty", "web01", backend=backend)
        assert empty.is_zero()

        fake_shell.on("[ -s /tmp/empty ]")
        assert not empty.is_zero()

    def test_contents(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("cat /etc/motd", "welcome\n\n")

        assert File("/etc/motd", "web01", backend=backend).contents == "welcome\n\n"

    def test_read_slice(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("tail -c", "two")

        File("/tmp/lines", "web01", backend=backend).read(3, 4)

        assert fake_shell.ran("tail -c") == ["tail -c +5 /tmp/lines | head -c 3"]

    def test_directory_entries(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("ls -A /var/log", "messages\nboot.log\n")

        assert Directory("/var/log", "web01", backend=backend).entries().value == [
            "boot.log",
            "messages",
        ]

    def test_symbolic_link_target(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("readlink /opt/current", "/opt/releases/7\n")

        assert SymbolicLink("/opt/current", "web01", backend=backend).target == "/opt/releases/7"


class TestRemoteLinks:
    """Attribute queries on a File follow links; a SymbolicLink reports itself."""

    @staticmethod
    def _listing(state: dict[str, str]) -> Callable[[str], ShellOutput]:
        def reply(command: str) -> ShellOutput:
            letters = state["bits"] if command.startswith("ls -ldL ") else "lrwxrwxrwx"
            return ShellOutput(stdout=letters + "\n", exit_status=0)

        return reply

    def test_file_queries_dereference(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on_call("awk '{print $1}'", self._listing({"bits": "-rw-r-----"}))
        fake_shell.on("stat -L -c", LINUX_STAT + "\n")
        target = File("/etc/localtime", "web01", backend=backend)

        assert target.mode == 640
        assert target.size == 220
        assert fake_shell.ran("ls ") == ["ls -ldL /etc/localtime | awk '{print $1}'"]

    def test_symbolic_link_queries_the_link(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        fake_shell.on_call("awk '{print $1}'", self._listing({"bits": "-rw-r-----"}))
        fake_shell.on("stat -c", LINUX_STAT + "\n")
        link = SymbolicLink("/etc/localtime", "web01", backend=backend)

        assert link.mode == 777
        assert link.stat().succeeded
        assert fake_shell.ran("ls ") == ["ls -ld /etc/localtime | awk '{print $1}'"]
        assert fake_shell.ran("stat -L") == []

    def test_repeated_chmod_through_link_notifies_once(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        state = {"bits": "-rw-r-----"}

        def chmod(command: str) -> ShellOutput:
            state["bits"] = "-rw-r--r--"
            return ShellOutput(stdout="", exit_status=0)

        fake_shell.on_call("awk '{print $1}'", self._listing(state)).on_call("chmod", chmod)
        seen: list[ResourceChanged] = []
        target = File("/etc/localtime", "web01", backend=backend, observers=(seen.append,))

        first = target.chmod(644)
        second = target.chmod(644)

        assert first.succeeded
        assert second is NO_CHANGE
        assert [(e.old, e.new) for e in seen] == [(640, 644)]
        assert fake_shell.ran("chmod") == ["chmod 644 /etc/localtime"]


class TestRemoteMutations:
    def test_write_quotes_content(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("printf")
        target = File("/tmp/note", "web01", backend=backend)

        assert target.write("it's done").succeeded
        assert fake_shell.ran("printf") == ["printf '%s' 'it'\"'\"'s done' > /tmp/note"]

    def test_chmod_sends_octal_bits(self, fake_shell: FakeShell, backend: RemoteBackend) -> None:
        fake_shell.on("awk '{print $1}'", "-rw-r--r--\n").on("chmod")

        File("/srv/run.sh", "web01", backend=backend).chmod(755)

        assert fake_shell.ran("chmod") == ["chmod 755 /srv/run.sh"]

    def test_session_umask_prefixes_creating_commands(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        fake_shell.on("touch").on("mkdir")
        backend.set_umask(0o027)

        File("/srv/new", "web01", backend=backend).create()
        Directory("/srv/dir", "web01", backend=backend).create()

        assert fake_shell.ran("touch") == ["umask 027 && touch /srv/new"]
        assert fake_shell.ran("mkdir") == ["umask 027 && mkdir -p /srv/dir"]

    def test_copy_to_missing_destination(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        fake_shell.on("[ -e /srv/a ]").on("cp ")
        seen: list[ResourceChanged] = []
        source = File("/srv/a", "web01", backend=backend, observers=(seen.append,))

        assert source.copy_to("/srv/b").succeeded
        assert fake_shell.ran("cp ") == ["cp /srv/a /srv/b"]
        assert [(e.attribute, e.new) for e in seen] == [("exists", True)]

    def test_copy_short_circuits_on_size(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        sizes = {"/srv/a": "10", "/srv/b": "12"}

        def stat(command: str) -> ShellOutput:
            path = command.rsplit(" ", 1)[-1]
            return ShellOutput(stdout=f"size: {sizes[path]}\n", exit_status=0)

        fake_shell.on("[ -e /srv/b ]").on_call("stat -L -c", stat).on("cp ")

        File("/srv/a", "web01", backend=backend).copy_to("/srv/b")

        assert fake_shell.ran("cat /srv/a") == []
        assert fake_shell.ran("cp ") == ["cp /srv/a /srv/b"]

    def test_remove_missing_is_no_change(self, backend: RemoteBackend) -> None:
        assert File("/tmp/gone", "web01", backend=backend).remove() is NO_CHANGE

    def test_link_to_existing_elsewhere_fails(
        self, fake_shell: FakeShell, backend: RemoteBackend
    ) -> None:
        fake_shell.on("readlink", "/opt/releases/6\n").on("[ -L").on(
            "ln -s", "", exit_status=1, stderr="ln: File exists"
        )
        seen: list[ResourceChanged] = []
        link = SymbolicLink("/opt/current", "web01", backend=backend, observers=(seen.append,))

        assert link.link_to("/opt/releases/7").failed
        assert seen == []


class TestRemoteManager:
    def test_classification_probes_in_order(
        self, fake_shell: FakeShell, remote_fs: FileSystem
    ) -> None:
        fake_shell.on("[ -L /dev/stdin ]")

        assert remote_fs.classify("/dev/stdin") is ResourceKind.SYMBOLIC_LINK
        probes = [command for command in fake_shell.commands if command.startswith("[ -")]
        assert probes == ["[ -f /dev/stdin ]", "[ -d /dev/stdin ]", "[ -L /dev/stdin ]"]

    def test_nothing_matches(self, remote_fs: FileSystem) -> None:
        assert remote_fs.classify("/missing") is ResourceKind.OBJECT

    def test_paths_are_quoted(self, fake_shell: FakeShell, remote_fs: FileSystem) -> None:
        remote_fs.classify("/srv/my file; rm -rf /")

        assert fake_shell.commands[1] == "[ -f '/srv/my file; rm -rf /' ]"

    def test_quoting_can_be_disabled(self, fake_shell: FakeShell) -> None:
        config = HexHostConfig(shell=ShellConfig(quote_paths=False))
        fs = FileSystem("web01", shell=fake_shell, platform="linux", config=config)

        fs.classify("/srv/a*")

        assert "[ -f /srv/a* ]" in fake_shell.commands

    def test_relative_paths_use_remote_working_directory(self, fake_shell: FakeShell) -> None:
        fake_shell.on("pwd", "/home/deploy\n").on("[ -f /home/deploy/app.ini ]")
        fs = FileSystem("web01", shell=fake_shell, platform="linux", config=get_default_config())

        resource = fs["app.ini"]

        assert isinstance(resource, File)
        assert resource.path == "/home/deploy/app.ini"

    def test_chroot_and_cd(self, fake_shell: FakeShell, remote_fs: FileSystem) -> None:
        fake_shell.on("[ -d /srv/jail ]").on("[ -d /srv/jail/etc ]")
        fake_shell.on("cat /srv/jail/etc/hosts", "x")

        assert remote_fs.chroot("/srv/jail").succeeded
        assert remote_fs.cd("/etc").succeeded
        assert remote_fs.working_directory == "/etc"
        assert remote_fs.file("hosts").contents == "x"

    def test_umask_read_from_host(self, fake_shell: FakeShell, remote_fs: FileSystem) -> None:
        fake_shell.on("umask", "0002\n")

        assert remote_fs.umask == 0o002

    def test_unreadable_umask_defaults(
        self, fake_shell: FakeShell, remote_fs: FileSystem, log_messages: list[str]
    ) -> None:
        fake_shell.on("umask", "weird\n")

        assert remote_fs.umask == 0o022
        assert any("Unreadable umask" in message for message in log_messages)

    def test_commands_carry_timeout_and_session_token(
        self, fake_shell: FakeShell, remote_fs: FileSystem
    ) -> None:
        remote_fs.classify("/etc")

        assert set(fake_shell.timeouts) == {30.0}
        assert all(token is remote_fs.backend.session.cancel_token for token in fake_shell.tokens)

    def test_platform_detected_once(self, fake_shell: FakeShell) -> None:
        fake_shell.on("uname -s", "Darwin\n").on("stat -L -f", "mode: 100644 size: 3\n")
        fs = FileSystem("mac01", shell=fake_shell, config=get_default_config())
        target = fs.file("/tmp/x")

        target.stat()
        target.stat()

        assert fs.backend.platform == "darwin"
        assert len(fake_shell.ran("uname -s")) == 1

    def test_home(self, fake_shell: FakeShell, remote_fs: FileSystem) -> None:
        fake_shell.on("echo $HOME", "/home/deploy\n")

        assert remote_fs.home == "/home/deploy"
