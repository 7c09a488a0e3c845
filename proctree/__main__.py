"""Command line for process discovery.

Usage:
    python -m proctree list [--filter TEXT] [--tree] [--json]
    python -m proctree debuggable [--json]
    python -m proctree analyse ARGS
    python -m proctree serve [--port PORT]

``serve`` runs the MCP tool server over streamable HTTP.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys

import uvicorn

from proctree.config import Config
from proctree.debug_args import analyse_arguments
from proctree.enumerator import list_processes
from proctree.errors import ListingError
from proctree.server import create_server, matches_filter
from proctree.tree import build_tree, find_debuggable, walk

log = logging.getLogger(__name__)


def _format_target(address: str | None, port: int | None) -> str:
    return f"{address or '-'}:{port if port is not None else '-'}"


async def _list(config: Config, args: argparse.Namespace) -> None:
    records = [r for r in await list_processes(config=config) if matches_filter(r, args.filter)]

    if args.json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if args.tree:
        roots = build_tree({r.pid: r for r in records})
        for depth, node in walk(roots):
            print(f"{'  ' * depth}{node.pid:>7} {node.record.command} {node.record.args}".rstrip())
        return

    for r in records:
        print(f"{r.pid:>7} {r.ppid:>7} {r.command} {r.args}".rstrip())


async def _debuggable(config: Config, args: argparse.Namespace) -> None:
    found = find_debuggable(await list_processes(config=config))

    if args.json:
        print(json.dumps(
            [{**record.to_dict(), **target.to_dict()} for record, target in found],
            indent=2,
        ))
        return

    for record, target in found:
        print(f"{record.pid:>7} {_format_target(target.address, target.port):<24} {record.command}")


async def _serve(config: Config, port: int) -> None:
    server = create_server(config)

    app = server.streamable_http_app()
    uvi_config = uvicorn.Config(
        app, host="127.0.0.1", port=port, log_level=config.log_level.lower(),
    )
    uvi = uvicorn.Server(uvi_config)

    # Use _serve() instead of serve() so uvicorn does not install its own
    # signal handlers over ours.
    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    serve_task = asyncio.create_task(uvi._serve())

    await shutdown.wait()
    log.info("Signal received, shutting down")

    uvi.should_exit = True
    await serve_task


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="proctree", description="Discover running processes")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List running processes")
    p_list.add_argument("--filter", help="Only show processes whose command line contains TEXT")
    p_list.add_argument("--tree", action="store_true", help="Show parent/child structure")
    p_list.add_argument("--json", action="store_true", help="Print JSON")

    p_debug = sub.add_parser("debuggable", help="List processes started with debug flags")
    p_debug.add_argument("--json", action="store_true", help="Print JSON")

    p_analyse = sub.add_parser("analyse", help="Extract debug address/port from arguments")
    p_analyse.add_argument("args", help="Command-line arguments to analyse")

    p_serve = sub.add_parser("serve", help="Run the MCP server over HTTP")
    p_serve.add_argument(
        "--port", type=int, default=config.port,
        help=f"Port to listen on (default: {config.port})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    config = Config.from_env()
    args = build_parser(config).parse_args(argv)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    if args.command == "analyse":
        target = analyse_arguments(args.args)
        print(json.dumps(target.to_dict()))
        return 0

    if args.command == "serve":
        log.info("Starting proctree MCP server on http://127.0.0.1:%d/mcp", args.port)
        asyncio.run(_serve(config, args.port))
        return 0

    handler = _list if args.command == "list" else _debuggable
    try:
        asyncio.run(handler(config, args))
    except ListingError as exc:
        log.error("Process listing failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
