"""Find the innermost program running inside a shell's process tree."""

from collections.abc import Collection

from shelltitle.config import CONSOLE_HOST, SHELL_EXECUTABLES
from shelltitle.models import ProcessNode, Resolution


def _favourite_child(node: ProcessNode, console_host: str) -> ProcessNode | None:
    """
    Pick the first child that is not just a console host wrapper.

    A child qualifies when it has no children of its own, or when its first
    child is something other than the console host. Scanning is left to right
    and the first match wins.
    """
    for child in node.children:
        if not child.has_children:
            return child
        if child.children[0].name != console_host:
            return child
    return None


def resolve(
    tree: ProcessNode,
    shell_executables: Collection[str] = SHELL_EXECUTABLES,
    console_host: str = CONSOLE_HOST,
) -> Resolution:
    """
    Walk a process tree down to the innermost program.

    Starting at the root, each shell node is descended into through its
    favourite child until a non-shell process is reached, or a shell with
    nothing meaningful running inside it.

    Args:
        tree: Snapshot rooted at the tracked shell process.
        shell_executables: Process names treated as shells.
        console_host: Name of the console host wrapper process.

    Returns:
        The deepest shell seen (None if the root is not a shell) and the
        innermost program name.
    """
    shell_name: str | None = None
    node = tree
    while node.name in shell_executables:
        shell_name = node.name
        child = _favourite_child(node, console_host)
        if child is None:
            break
        node = child
    return Resolution(shell_name=shell_name, program_name=node.name)


def resolve_program_name(tree: ProcessNode) -> str:
    """Return only the innermost program name of ``tree``."""
    return resolve(tree).program_name
