"""Process introspection using the /proc filesystem.

Every read here races with process exit, so a missing or unreadable /proc
entry is reported as "no match" or "no parent" rather than raised.

PUBLIC API:
  - ProcessRecord: Minimal process information (dataclass)
  - read_cmdline: Read a process command line
  - get_parent_pid: Get the parent PID of a process
  - matches_signature: Pure signature predicate on a command line
  - is_target_process: Check a live process against a signature
  - scan_processes: Scan all processes from /proc
  - has_children: Check whether a process has live children
"""

import logging
from dataclasses import dataclass

import aiofiles
import aiofiles.os

from ..types import ProcessId

logger = logging.getLogger(__name__)

PROC_ROOT = "/proc"


@dataclass(frozen=True)
class ProcessRecord:
    """Minimal process information.

    Attributes:
        pid: Process ID.
        ppid: Parent process ID.
        cmdline: Full command line with NULs replaced by spaces.
    """

    pid: ProcessId
    ppid: ProcessId
    cmdline: str


async def _read_proc_file_bytes(path: str) -> bytes | None:
    """Read a /proc file as bytes, None if it is gone or unreadable."""
    try:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()
    except (IOError, OSError) as e:
        logger.debug(f"Could not read {path}: {e}")
        return None


async def read_cmdline(pid: ProcessId) -> str | None:
    """Read the command line of a process.

    Args:
        pid: Process ID.

    Returns:
        Command line with arguments joined by spaces, or None if the
        process has no readable metadata.
    """
    if pid <= 0:
        return None

    data = await _read_proc_file_bytes(f"{PROC_ROOT}/{pid}/cmdline")
    if data is None:
        return None
    return data.decode("utf-8", "replace").replace("\x00", " ").strip()


def _parse_ppid(stat_data: str) -> ProcessId | None:
    # comm may contain spaces and parentheses, fields start after the last )
    right_paren = stat_data.rfind(")")
    if right_paren == -1:
        return None

    stat_fields = stat_data[right_paren + 1 :].split()
    if len(stat_fields) < 2:
        return None

    try:
        return int(stat_fields[1])
    except ValueError:
        return None


async def get_parent_pid(pid: ProcessId) -> ProcessId | None:
    """Get the parent PID of a process.

    Args:
        pid: Process ID.

    Returns:
        Parent PID, or None when the process is gone, its stat file does not
        parse, or the parent is init/the kernel (ppid <= 1).
    """
    if pid <= 1:
        return None

    data = await _read_proc_file_bytes(f"{PROC_ROOT}/{pid}/stat")
    if data is None:
        return None

    ppid = _parse_ppid(data.decode("utf-8", "replace"))
    if ppid is None or ppid <= 1:
        return None
    return ppid


def matches_signature(cmdline: str, signature: str, exclude: str) -> bool:
    """Check a command line for the target signature.

    Args:
        cmdline: Command line text.
        signature: Substring identifying the target application.
        exclude: Substring identifying our own binary (never a match).
    """
    if exclude and exclude in cmdline:
        return False
    return signature in cmdline


async def is_target_process(pid: ProcessId, signature: str, exclude: str) -> bool:
    """Check whether a live process matches the target signature.

    Args:
        pid: Process ID to inspect.
        signature: Substring identifying the target application.
        exclude: Substring identifying our own binary.

    Returns:
        True if the process exists and its command line matches.
    """
    cmdline = await read_cmdline(pid)
    if cmdline is None:
        logger.debug(f"PID {pid} does not exist")
        return False

    if not matches_signature(cmdline, signature, exclude):
        logger.debug(f"PID {pid} command: {cmdline[:50]}")
        return False
    return True


async def _get_process_record(pid: ProcessId) -> ProcessRecord | None:
    cmdline = await read_cmdline(pid)
    if cmdline is None:
        return None

    data = await _read_proc_file_bytes(f"{PROC_ROOT}/{pid}/stat")
    if data is None:
        return None

    ppid = _parse_ppid(data.decode("utf-8", "replace"))
    if ppid is None:
        return None

    return ProcessRecord(pid=pid, ppid=ppid, cmdline=cmdline)


async def scan_processes() -> dict[ProcessId, ProcessRecord]:
    """Scan all processes and extract their information.

    Returns:
        Dict mapping PID to ProcessRecord. Processes that exit during the
        scan are skipped.
    """
    processes: dict[ProcessId, ProcessRecord] = {}

    try:
        entries = await aiofiles.os.listdir(PROC_ROOT)
    except OSError as e:
        logger.error(f"Error scanning {PROC_ROOT}: {e}")
        return processes

    for entry in entries:
        if not entry.isdigit():
            continue

        record = await _get_process_record(int(entry))
        if record:
            processes[record.pid] = record

    return processes


def has_children(pid: ProcessId, processes: dict[ProcessId, ProcessRecord]) -> bool:
    """Check if a process has at least one child in a scan.

    Args:
        pid: Candidate parent PID.
        processes: Result of scan_processes().
    """
    return any(record.ppid == pid for record in processes.values())
