"""Per-platform process listing commands and their row parsers.

None of the listing formats delimits the executable from its arguments when
the executable path contains spaces, so every platform has its own layout
heuristic:

  windows  WMIC prints CommandLine, CreationDate, ParentProcessId, ProcessId
           (attribute columns come out in alphabetic order, whitespace padded)
  darwin   ps with a 256-character wide ``comm`` column followed by the full
           command line
  linux    ps with a 20-character ``comm`` column, refined against the full
           command line because ``comm`` may be truncated
"""

from __future__ import annotations

import ntpath
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass

from proctree.config import Config
from proctree.models import ProcessRecord

LineParser = Callable[[str], ProcessRecord | None]

# Fixed-width pid/ppid columns shared by both ps layouts
PID_OFFSET, PPID_OFFSET, ID_WIDTH = 0, 6, 5
COMM_OFFSET = 12

DARWIN_COMM_WIDTH = 256
DARWIN_ARGS_OFFSET = 269

LINUX_COMM_WIDTH = 20
LINUX_ARGS_OFFSET = 33

# CommandLine blob, CreationDate seconds (fraction and UTC offset dropped), ppid, pid
WMIC_ROW = re.compile(r"^(.*)\s+([0-9]+)\.[0-9]+[+-][0-9]+\s+([0-9]+)\s+([0-9]+)$")


def _parse_id(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _fixed_ids(line: str) -> tuple[int | None, int | None]:
    pid = _parse_id(line[PID_OFFSET:PID_OFFSET + ID_WIDTH])
    ppid = _parse_id(line[PPID_OFFSET:PPID_OFFSET + ID_WIDTH])
    return pid, ppid


# ---------------------------------------------------------------------------
# Row parsers
# ---------------------------------------------------------------------------

def split_command_line(blob: str) -> tuple[str, str]:
    """Split a Windows command line into (command, args).

    "C:\\Program Files\\node.exe" app.js  ->  C:\\Program Files\\node.exe, app.js
    C:\\node.exe app.js                   ->  C:\\node.exe, app.js
    C:\\node.exe                          ->  C:\\node.exe, ""
    """
    if blob.startswith('"'):
        end = blob.find('"', 1)
        if end > 0:
            return blob[1:end], blob[end + 2:]
        # Unterminated quote: keep the whole blob as both
        return blob, blob

    end = blob.find(" ")
    if end > 0:
        return blob[:end], blob[end + 1:]
    return blob, ""


def parse_windows_line(line: str) -> ProcessRecord | None:
    match = WMIC_ROW.match(line.strip())
    if match is None:
        return None

    blob = match.group(1).strip()
    pid = _parse_id(match.group(4))
    ppid = _parse_id(match.group(3))
    if pid is None or ppid is None or not blob:
        return None

    command, args = split_command_line(blob)
    return ProcessRecord(
        pid=pid,
        ppid=ppid,
        command=command,
        args=args,
        date=int(match.group(2)),
    )


def parse_darwin_line(line: str) -> ProcessRecord | None:
    pid, ppid = _fixed_ids(line)
    if pid is None or ppid is None:
        return None

    command = line[COMM_OFFSET:COMM_OFFSET + DARWIN_COMM_WIDTH].strip()
    args = line[DARWIN_ARGS_OFFSET + len(command):]
    return ProcessRecord(pid=pid, ppid=ppid, command=command, args=args)


def parse_linux_line(line: str) -> ProcessRecord | None:
    pid, ppid = _fixed_ids(line)
    if pid is None or ppid is None:
        return None

    command = line[COMM_OFFSET:COMM_OFFSET + LINUX_COMM_WIDTH].strip()
    args = line[LINUX_ARGS_OFFSET:]

    # comm may be truncated; recover the full executable from the command line
    pos = args.find(command)
    if pos >= 0:
        pos += len(command)
        while pos < len(args) and args[pos] != " ":
            pos += 1
        command, args = args[:pos], args[pos + 1:]

    return ProcessRecord(pid=pid, ppid=ppid, command=command, args=args)


# ---------------------------------------------------------------------------
# Listing commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ListingPlatform:
    """A process listing command paired with the parser for its rows."""

    name: str
    argv: tuple[str, ...]
    parse_line: LineParser


def windows_platform(config: Config) -> ListingPlatform:
    wmic = ntpath.join(config.windir, "System32", "wbem", "WMIC.exe")
    return ListingPlatform(
        name="windows",
        argv=(wmic, "process", "get", "CommandLine,CreationDate,ParentProcessId,ProcessId"),
        parse_line=parse_windows_line,
    )


def darwin_platform(config: Config) -> ListingPlatform:
    # The header text sets the comm column width
    comm = "comm=" + "a" * DARWIN_COMM_WIDTH
    return ListingPlatform(
        name="darwin",
        argv=(config.ps_path, "-x", "-o", f"pid,ppid,{comm},command"),
        parse_line=parse_darwin_line,
    )


def linux_platform(config: Config) -> ListingPlatform:
    return ListingPlatform(
        name="linux",
        argv=(config.ps_path, "-ax", "-o", f"pid,ppid,comm:{LINUX_COMM_WIDTH},command"),
        parse_line=parse_linux_line,
    )


_FACTORIES: dict[str, Callable[[Config], ListingPlatform]] = {
    "windows": windows_platform,
    "darwin": darwin_platform,
    "linux": linux_platform,
}


def detect_platform(system: str | None = None) -> str:
    system = system or sys.platform
    if system == "win32":
        return "windows"
    if system == "darwin":
        return "darwin"
    return "linux"


def select_platform(config: Config | None = None, system: str | None = None) -> ListingPlatform:
    """Pick the listing command for this host (or the configured override)."""
    config = config or Config.from_env()
    name = config.platform or detect_platform(system)
    return _FACTORIES[name](config)
