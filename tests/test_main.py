from __future__ import annotations

import json

import proctree.__main__ as cli
from proctree.errors import ListingExitError
from proctree.models import ProcessRecord

RECORDS = [
    ProcessRecord(pid=1, ppid=0, command="/sbin/init", args=""),
    ProcessRecord(pid=2048, ppid=1, command="/usr/bin/node", args="--inspect=9229 server.js"),
    ProcessRecord(pid=2051, ppid=2048, command="/usr/bin/node", args="worker.js"),
]


def _fake_listing(monkeypatch, records=RECORDS, error=None):
    async def fake_list_processes(**kwargs):
        if error is not None:
            raise error
        return list(records)

    monkeypatch.setattr(cli, "list_processes", fake_list_processes)


def test_analyse(capsys):
    assert cli.main(["analyse", "--inspect=localhost:9229"]) == 0
    assert json.loads(capsys.readouterr().out) == {"address": "localhost", "port": 9229}


def test_list_json_with_filter(monkeypatch, capsys):
    _fake_listing(monkeypatch)

    assert cli.main(["list", "--json", "--filter", "node"]) == 0

    rows = json.loads(capsys.readouterr().out)
    assert [row["pid"] for row in rows] == [2048, 2051]


def test_list_tree(monkeypatch, capsys):
    _fake_listing(monkeypatch)

    assert cli.main(["list", "--tree"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["1", "/sbin/init"]
    assert lines[2].startswith("    ")
    assert lines[2].split()[0] == "2051"


def test_debuggable(monkeypatch, capsys):
    _fake_listing(monkeypatch)

    assert cli.main(["debuggable", "--json"]) == 0

    rows = json.loads(capsys.readouterr().out)
    assert len(rows) == 1
    assert rows[0]["pid"] == 2048
    assert rows[0]["port"] == 9229
    assert rows[0]["address"] is None


def test_listing_failure_exits_nonzero(monkeypatch):
    _fake_listing(monkeypatch, error=ListingExitError(1))

    assert cli.main(["list"]) == 1
