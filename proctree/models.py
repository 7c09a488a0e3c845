from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# ProcessRecord: one decoded row of the platform process listing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProcessRecord:
    pid: int
    ppid: int
    command: str
    args: str = ""
    # Only reported by the Windows listing (CreationDate, whole seconds part)
    date: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pid": self.pid,
            "ppid": self.ppid,
            "command": self.command,
            "args": self.args,
            "date": self.date,
        }


# ---------------------------------------------------------------------------
# DebugTarget: address/port pair extracted from a command line
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebugTarget:
    address: str | None = None
    port: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "port": self.port}


# ---------------------------------------------------------------------------
# Process tree
# ---------------------------------------------------------------------------

@dataclass
class ProcessTreeNode:
    record: ProcessRecord
    children: list[ProcessTreeNode] = field(default_factory=list)

    @property
    def pid(self) -> int:
        return self.record.pid
