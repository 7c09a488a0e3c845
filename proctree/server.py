"""MCP server exposing read-only process discovery tools over HTTP."""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from proctree.config import Config
from proctree.debug_args import analyse_arguments as _analyse_arguments
from proctree.enumerator import list_processes as _list_processes
from proctree.errors import ListingError
from proctree.models import ProcessRecord
from proctree.tree import find_debuggable

log = logging.getLogger(__name__)


def matches_filter(record: ProcessRecord, text: str | None) -> bool:
    if not text:
        return True
    return text in record.command or text in record.args


def create_server(config: Config | None = None) -> FastMCP:
    """Create and configure the process discovery MCP server."""

    cfg = config or Config.from_env()

    mcp = FastMCP(
        name="proctree",
        instructions=(
            "Discovers processes running on this host. "
            "Use list_processes to search the process table, "
            "list_debuggable_processes to find processes with an open debug listener, "
            "and analyse_arguments to read the debug address/port from a command line."
        ),
        host="127.0.0.1",
        port=cfg.port,
        stateless_http=True,
    )

    # ------------------------------------------------------------------
    # Tool: list_processes
    # ------------------------------------------------------------------
    @mcp.tool()
    async def list_processes(filter: str | None = None) -> dict:
        """List processes running on this host.

        Args:
            filter: Only return processes whose command or arguments contain
                    this text (e.g. "node", "--inspect").
        """
        try:
            records = await _list_processes(config=cfg)
        except ListingError as exc:
            log.warning("Process listing failed: %s", exc)
            return {"status": "error", "error": str(exc)}

        selected = [r.to_dict() for r in records if matches_filter(r, filter)]
        return {"count": len(selected), "processes": selected}

    # ------------------------------------------------------------------
    # Tool: list_debuggable_processes
    # ------------------------------------------------------------------
    @mcp.tool()
    async def list_debuggable_processes() -> dict:
        """List processes started with --inspect style debug flags.

        Returns pid, command, arguments and the debug address/port (either
        may be null when the flag does not specify it).
        """
        try:
            records = await _list_processes(config=cfg)
        except ListingError as exc:
            log.warning("Process listing failed: %s", exc)
            return {"status": "error", "error": str(exc)}

        processes: list[dict[str, Any]] = []
        for record, target in find_debuggable(records):
            processes.append({**record.to_dict(), **target.to_dict()})
        return {"count": len(processes), "processes": processes}

    # ------------------------------------------------------------------
    # Tool: analyse_arguments
    # ------------------------------------------------------------------
    @mcp.tool()
    async def analyse_arguments(args: str) -> dict:
        """Extract the debug address and port from a command line.

        Args:
            args: Command-line arguments, e.g. "--inspect=127.0.0.1:9229 app.js".
        """
        return _analyse_arguments(args).to_dict()

    return mcp
