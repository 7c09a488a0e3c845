"""Shared fixtures: builders for listing rows and scripted listing commands."""

from __future__ import annotations

import sys

import pytest

from proctree.platforms import ListingPlatform, parse_linux_line


def _linux_row(pid: int | str, ppid: int | str, comm: str, command: str) -> str:
    return f"{pid:>5} {ppid:>5} {comm[:20]:<20} {command}"


def _darwin_row(pid: int | str, ppid: int | str, comm: str, command: str) -> str:
    return f"{pid:>5} {ppid:>5} {comm[:256]:<256} {command}"


@pytest.fixture
def linux_row():
    return _linux_row


@pytest.fixture
def darwin_row():
    return _darwin_row


@pytest.fixture
def script_platform():
    """Build a listing platform that runs a Python snippet and parses linux rows."""

    def build(code: str) -> ListingPlatform:
        return ListingPlatform(
            name="script",
            argv=(sys.executable, "-c", code),
            parse_line=parse_linux_line,
        )

    return build


@pytest.fixture
def listing_output():
    """Linux ps style output for a small process table, header included."""
    rows = [
        _linux_row("PID", "PPID", "COMMAND", "COMMAND"),
        _linux_row(1, 0, "systemd", "/sbin/init splash"),
        _linux_row(412, 1, "sshd", "/usr/sbin/sshd -D"),
        _linux_row(2048, 1, "node", "/usr/bin/node --inspect=127.0.0.1:9229 server.js"),
        _linux_row(2051, 2048, "node", "/usr/bin/node worker.js"),
    ]
    return "\n".join(rows) + "\n"


CONFIG_ENV_VARS = (
    "WINDIR",
    "PROCTREE_PLATFORM",
    "PROCTREE_PS",
    "PROCTREE_ENCODING",
    "PROCTREE_LOG_LEVEL",
    "PROCTREE_PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every configuration variable for the duration of a test."""
    for name in CONFIG_ENV_VARS:
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
