"""Parent/child view of the process table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from proctree.config import Config
from proctree.debug_args import analyse_arguments, is_debuggable
from proctree.enumerator import get_processes
from proctree.models import DebugTarget, ProcessRecord, ProcessTreeNode
from proctree.platforms import ListingPlatform


def index_by_pid(record: ProcessRecord, by_pid: dict[int, ProcessRecord]) -> dict[int, ProcessRecord]:
    """Combining function for :func:`get_processes` that indexes records by pid."""
    by_pid[record.pid] = record
    return by_pid


def build_tree(by_pid: Mapping[int, ProcessRecord]) -> list[ProcessTreeNode]:
    """Link records into trees.

    A record is a root when its parent is not in the table (exited, or hidden
    from the listing) or when it is its own parent (pid 0 on some systems).
    Roots and children are ordered by pid.
    """
    nodes = {pid: ProcessTreeNode(record) for pid, record in by_pid.items()}
    roots: list[ProcessTreeNode] = []

    for pid in sorted(nodes):
        node = nodes[pid]
        parent = nodes.get(node.record.ppid)
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)

    return roots


def walk(roots: Iterable[ProcessTreeNode], depth: int = 0) -> Iterable[tuple[int, ProcessTreeNode]]:
    """Yield (depth, node) pairs in depth-first order."""
    for node in roots:
        yield depth, node
        yield from walk(node.children, depth + 1)


def find_debuggable(records: Iterable[ProcessRecord]) -> list[tuple[ProcessRecord, DebugTarget]]:
    """Return the processes started with debug flags, with their address/port."""
    return [
        (record, analyse_arguments(record.args))
        for record in records
        if is_debuggable(record.args)
    ]


async def get_process_tree(
    *,
    platform: ListingPlatform | None = None,
    config: Config | None = None,
) -> list[ProcessTreeNode]:
    by_pid = await get_processes(index_by_pid, {}, platform=platform, config=config)
    return build_tree(by_pid)
