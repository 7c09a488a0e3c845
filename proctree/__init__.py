"""proctree: platform-portable process enumeration and debug port discovery.

Lists running processes by running the platform's own listing command
(WMIC on Windows, ps on macOS and linux) and decoding its rows:

  - get_processes:     fold every process record into a caller-supplied accumulator
  - list_processes:    the same, collected into a list
  - analyse_arguments: extract the --inspect address/port from a command line

Can run standalone:
    python -m proctree list
"""

from proctree.debug_args import analyse_arguments, is_debuggable
from proctree.enumerator import get_processes, list_processes
from proctree.errors import (
    ListingError,
    ListingExitError,
    ListingSignalError,
    ListingStderrError,
    ProcessLaunchError,
)
from proctree.lines import LineReassembler
from proctree.models import DebugTarget, ProcessRecord, ProcessTreeNode
from proctree.platforms import ListingPlatform, select_platform
from proctree.tree import build_tree, get_process_tree

__all__ = [
    "DebugTarget",
    "LineReassembler",
    "ListingError",
    "ListingExitError",
    "ListingPlatform",
    "ListingSignalError",
    "ListingStderrError",
    "ProcessLaunchError",
    "ProcessRecord",
    "ProcessTreeNode",
    "analyse_arguments",
    "build_tree",
    "get_process_tree",
    "get_processes",
    "is_debuggable",
    "list_processes",
    "select_platform",
]
