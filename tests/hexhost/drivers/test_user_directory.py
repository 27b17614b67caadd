"""Tests for the user directory drivers."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from hexhost.drivers.shell import CommandRunner
from hexhost.drivers.user_directory import GetentUserDirectory, LocalUserDirectory
from hexhost.drivers.user_directory.getent import parse_group_line, parse_passwd_line
from hexhost.kernel.domain.users import GroupRecord, UserRecord
from hexhost.kernel.exceptions import ValidationError
from hexhost.kernel.ports.user_directory import UserDirectory

if TYPE_CHECKING:
    from conftest import FakeShell


class TestParsing:
    def test_passwd_line(self) -> None:
        record = parse_passwd_line("deploy:x:1001:1001:Deploy User:/home/deploy:/bin/bash\n")

        assert record == UserRecord(
            name="deploy",
            uid=1001,
            gid=1001,
            gecos="Deploy User",
            home="/home/deploy",
            shell="/bin/bash",
        )

    def test_empty_gecos_is_none(self) -> None:
        assert parse_passwd_line("daemon:x:2:2::/:/usr/sbin/nologin").gecos is None

    def test_short_passwd_line(self) -> None:
        with pytest.raises(ValidationError):
            parse_passwd_line("deploy:x:1001")

    def test_group_line(self) -> None:
        assert parse_group_line("wheel:x:10:alice,bob") == GroupRecord(
            name="wheel", gid=10, members=("alice", "bob")
        )

    def test_group_without_members(self) -> None:
        assert parse_group_line("staff:x:50:").members == ()

    def test_short_group_line(self) -> None:
        with pytest.raises(ValidationError):
            parse_group_line("staff")


class TestGetentUserDirectory:
    @pytest.fixture
    def users(self, fake_shell: FakeShell) -> GetentUserDirectory:
        fake_shell.on("getent passwd deploy", "deploy:x:1001:1001::/home/deploy:/bin/sh\n")
        fake_shell.on("getent passwd 1001", "deploy:x:1001:1001::/home/deploy:/bin/sh\n")
        fake_shell.on("getent group wheel", "wheel:x:10:deploy\n")
        fake_shell.on("getent group 10", "wheel:x:10:deploy\n")
        fake_shell.on("getent passwd broken", "broken:x:notanumber\n")
        return GetentUserDirectory(CommandRunner(fake_shell, "web01"))

    def test_satisfies_port(self, users: GetentUserDirectory) -> None:
        assert isinstance(users, UserDirectory)

    def test_user(self, users: GetentUserDirectory) -> None:
        record = users.user("deploy").value

        assert record.uid == 1001
        assert record.home == "/home/deploy"

    def test_unknown_user(self, users: GetentUserDirectory) -> None:
        assert users.user("ghost").failed

    def test_malformed_record(self, users: GetentUserDirectory) -> None:
        result = users.user("broken")

        assert result.failed
        assert isinstance(result.value, ValidationError)

    def test_group(self, users: GetentUserDirectory) -> None:
        assert users.group("wheel").value.members == ("deploy",)

    def test_id_lookups(self, users: GetentUserDirectory) -> None:
        assert users.user_name(1001) == "deploy"
        assert users.group_name(10) == "wheel"
        assert users.user_name(4242) is None


class TestLocalUserDirectory:
    def test_current_user(self) -> None:
        users = LocalUserDirectory()
        name = users.user_name(os.getuid())

        assert name is not None
        assert users.user(name).value.uid == os.getuid()

    def test_current_group(self) -> None:
        users = LocalUserDirectory()
        name = users.group_name(os.getgid())

        assert name is not None
        assert users.group(name).value.gid == os.getgid()

    def test_unknown_names(self) -> None:
        users = LocalUserDirectory()

        assert users.user("no-such-user-hexhost").failed
        assert users.group("no-such-group-hexhost").failed
