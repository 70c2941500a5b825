"""Default process tree source built on psutil."""

import asyncio
import logging
from dataclasses import dataclass

import psutil

from shelltitle.errors import TreeFetchError
from shelltitle.models import ProcessNode

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ProcessInfo:
    """Flat process table entry."""

    pid: int
    ppid: int
    name: str
    create_time: float


def scan_processes() -> dict[int, ProcessInfo]:
    """
    Snapshot every visible process.

    Processes that exit mid-scan or deny access are skipped.

    Returns:
        Dict mapping PID to its table entry.
    """
    processes: dict[int, ProcessInfo] = {}

    for proc in psutil.process_iter(attrs=["pid", "ppid", "name", "create_time"]):
        try:
            info = proc.info
            pid = info.get("pid")
            if pid is None:
                continue
            processes[pid] = ProcessInfo(
                pid=pid,
                ppid=info.get("ppid") or 0,
                name=info.get("name") or "",
                create_time=info.get("create_time") or 0.0,
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
            logger.debug(f"Skipping process during scan: {e}")
            continue

    return processes


def build_tree(processes: dict[int, ProcessInfo], root_pid: int) -> ProcessNode | None:
    """
    Build a tree from a flat process table.

    Siblings are ordered by creation time, then PID, which is the order the
    OS spawned them in.

    Args:
        processes: Dict mapping PID to table entry.
        root_pid: PID to use as tree root.

    Returns:
        ProcessNode tree or None if the root is not in the table.
    """
    if root_pid not in processes:
        return None

    children_map: dict[int, list[ProcessInfo]] = {}
    for info in processes.values():
        # PID 0 on some platforms reports itself as its own parent
        if info.ppid == info.pid:
            continue
        children_map.setdefault(info.ppid, []).append(info)
    for siblings in children_map.values():
        siblings.sort(key=lambda p: (p.create_time, p.pid))

    visited: set[int] = set()

    def _build(info: ProcessInfo) -> ProcessNode:
        visited.add(info.pid)
        children = tuple(
            _build(child) for child in children_map.get(info.pid, []) if child.pid not in visited
        )
        return ProcessNode(name=info.name, children=children, pid=info.pid)

    return _build(processes[root_pid])


def get_process_tree(root_pid: int) -> ProcessNode | None:
    """
    Build the live process tree below ``root_pid``.

    Returns:
        ProcessNode for the root with all descendants, or None if the
        process doesn't exist.
    """
    return build_tree(scan_processes(), root_pid)


async def fetch_process_tree(root_pid: int) -> ProcessNode | None:
    """
    Fetch the process tree without blocking the event loop.

    The scan runs in a worker thread. Cancelling the returned coroutine
    abandons the result.

    Raises:
        TreeFetchError: If the process table could not be read.
    """
    try:
        tree = await asyncio.to_thread(get_process_tree, root_pid)
    except (psutil.Error, OSError) as e:
        raise TreeFetchError(root_pid, str(e)) from e

    if tree is None:
        logger.debug(f"Process {root_pid} not found")
    return tree
