"""Tests for the Homebrew driver."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hexhost.drivers.package_managers import BrewPackageManager
from hexhost.drivers.package_managers.brew import (
    parse_current_version,
    parse_info,
    parse_installed_versions,
)
from hexhost.drivers.shell import CommandRunner
from hexhost.kernel.ports.package_manager import PackageManager

if TYPE_CHECKING:
    from conftest import FakeShell

GIT_INFO = """\
git: stable 1.8.3.4, HEAD
http://git-scm.com
/usr/local/Cellar/git/1.8.3.1 (1324 files, 28M)
  Built from source
/usr/local/Cellar/git/1.8.3.3 (1326 files, 29M) *
  Built from source
From: https://github.com/mxcl/homebrew/commits/master/Library/Formula/git.rb
"""

PINNED_INFO = """\
node: stable 22.1.0, HEAD
https://nodejs.org/
/opt/homebrew/Cellar/node/20.11.1 (2012 files, 61MB) *
  Poured from bottle
/opt/homebrew/Cellar/node/22.1.0 (2330 files, 71MB)
  Poured from bottle
"""

WGET_INFO = """\
wget: stable 1.14
http://www.gnu.org/software/wget/
Not installed
From: https://github.com/mxcl/homebrew/commits/master/Library/Formula/wget.rb
"""


@pytest.fixture
def brew(fake_shell: FakeShell) -> BrewPackageManager:
    return BrewPackageManager(CommandRunner(fake_shell, "mac01"))


class TestParsing:
    def test_header_and_homepage(self) -> None:
        assert parse_info(GIT_INFO) == {
            "package": "git",
            "spec": "stable",
            "version": "1.8.3.4, HEAD",
            "homepage": "http://git-scm.com",
        }

    def test_installed_versions_in_listed_order(self) -> None:
        assert parse_installed_versions(GIT_INFO) == ["1.8.3.1", "1.8.3.3"]

    def test_not_installed(self) -> None:
        assert parse_installed_versions(WGET_INFO) == []

    def test_current_version_is_the_linked_one(self) -> None:
        assert parse_current_version(GIT_INFO) == "1.8.3.3"
        assert parse_current_version(PINNED_INFO) == "20.11.1"

    def test_current_version_without_marker_is_last_listed(self) -> None:
        assert parse_current_version(GIT_INFO.replace(" *", "")) == "1.8.3.3"
        assert parse_current_version(WGET_INFO) is None

    def test_unrecognised_output(self) -> None:
        assert parse_info("Error: No available formula") == {}
        assert parse_info("") == {}


class TestBrewPackageManager:
    def test_satisfies_port(self, brew: BrewPackageManager) -> None:
        assert isinstance(brew, PackageManager)

    def test_install_with_version(self, fake_shell: FakeShell, brew: BrewPackageManager) -> None:
        fake_shell.on("brew install")

        assert brew.install("git").succeeded
        assert brew.install("python", "3.12").succeeded
        assert fake_shell.ran("brew install") == ["brew install git", "brew install python@3.12"]

    def test_remove_and_upgrade(self, fake_shell: FakeShell, brew: BrewPackageManager) -> None:
        fake_shell.on("brew remove").on("brew upgrade")

        brew.remove("git")
        brew.upgrade("git")

        assert fake_shell.commands == ["brew remove git", "brew upgrade git"]

    def test_installed_state(self, fake_shell: FakeShell, brew: BrewPackageManager) -> None:
        fake_shell.on("brew info git", GIT_INFO).on("brew info wget", WGET_INFO)

        assert brew.is_installed("git")
        assert not brew.is_installed("wget")
        assert not brew.is_installed("nope")
        assert brew.current_version("git") == "1.8.3.3"
        assert brew.current_version("wget") is None

    def test_current_version_runs_info_once(
        self, fake_shell: FakeShell, brew: BrewPackageManager
    ) -> None:
        fake_shell.on("brew info node", PINNED_INFO)

        assert brew.current_version("node") == "20.11.1"
        assert fake_shell.ran("brew info") == ["brew info node"]

    def test_info(self, fake_shell: FakeShell, brew: BrewPackageManager) -> None:
        fake_shell.on("brew info git", GIT_INFO).on("brew info odd", "???")

        assert brew.info("git").value["homepage"] == "http://git-scm.com"
        assert brew.info("odd").failed
        assert brew.info("missing").failed

    def test_list_packages(self, fake_shell: FakeShell, brew: BrewPackageManager) -> None:
        fake_shell.on("brew list", "git\nwget  openssl\n")

        assert brew.list_packages().value == ["git", "wget", "openssl"]
