"""Data models for shelltitle."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class ProcessNode:
    """Immutable snapshot of a process and its direct children."""

    name: str
    children: tuple["ProcessNode", ...] = ()
    pid: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessNode":
        """
        Build a tree from a ``{"name": ..., "children": [...]}`` mapping.

        Missing or ``None`` children mean the process has no children.
        """
        children = data.get("children") or ()
        return cls(
            name=data["name"],
            children=tuple(cls.from_dict(child) for child in children),
            pid=data.get("pid"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the tree back to its mapping form."""
        d: dict[str, Any] = {"name": self.name}
        if self.pid is not None:
            d["pid"] = self.pid
        d["children"] = [child.to_dict() for child in self.children]
        return d

    @property
    def has_children(self) -> bool:
        """Check if the process has any children."""
        return bool(self.children)


@dataclass(slots=True, frozen=True)
class Resolution:
    """Result of walking a process tree."""

    shell_name: str | None  # None when the root is not a known shell
    program_name: str
