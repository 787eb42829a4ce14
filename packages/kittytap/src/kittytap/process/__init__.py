"""Process inspection for endpoint discovery.

PUBLIC API:
  - ProcessRecord: Minimal process information
  - read_cmdline: Read a process command line
  - get_parent_pid: Get the parent PID of a process
  - matches_signature: Pure signature predicate
  - is_target_process: Check a live process against a signature
  - scan_processes: Scan all processes from /proc
  - has_children: Check whether a process has live children
  - find_ancestor: First ancestor matching a predicate
"""

from .ancestry import find_ancestor
from .introspect import (
    ProcessRecord,
    get_parent_pid,
    has_children,
    is_target_process,
    matches_signature,
    read_cmdline,
    scan_processes,
)

__all__ = [
    "ProcessRecord",
    "read_cmdline",
    "get_parent_pid",
    "matches_signature",
    "is_target_process",
    "scan_processes",
    "has_children",
    "find_ancestor",
]
