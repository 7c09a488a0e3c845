"""Extract the debug listener address/port from a command line."""

from __future__ import annotations

import re

from proctree.models import DebugTarget

# --inspect, --inspect-brk, each optionally followed by =[host:]port where host
# is a bracketed IPv6 literal, a dotted IPv4 literal or a plain hostname
DEBUG_FLAGS_PATTERN = re.compile(
    r"--inspect(-brk)?"
    r"(=((?P<host>\[[0-9a-fA-F:]*\]|[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+|[a-zA-Z0-9.]*):)?(?P<port>\d+))?"
)

# --inspect-port=1234 always wins over a port given with --inspect
DEBUG_PORT_PATTERN = re.compile(r"--inspect-port=(\d+)")


def analyse_arguments(args: str) -> DebugTarget:
    """Return the debug address and port found in ``args``.

    --inspect                          ->  (None, None)
    --inspect=9229                     ->  (None, 9229)
    --inspect-brk=localhost:9229       ->  ("localhost", 9229)
    --inspect=9229 --inspect-port=9230 ->  (None, 9230)
    """
    address: str | None = None
    port: int | None = None

    match = DEBUG_FLAGS_PATTERN.search(args)
    if match:
        address = match.group("host") or None
        if match.group("port"):
            port = int(match.group("port"))

    override = DEBUG_PORT_PATTERN.search(args)
    if override:
        port = int(override.group(1))

    return DebugTarget(address=address, port=port)


def is_debuggable(args: str) -> bool:
    return DEBUG_FLAGS_PATTERN.search(args) is not None
