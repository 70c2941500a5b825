"""Exceptions raised by shelltitle."""


class ShellTitleError(Exception):
    """Base class for shelltitle errors."""


class UnsupportedPlatformError(ShellTitleError, RuntimeError):
    """Raised when a ShellHelper is created on a platform it cannot track."""

    def __init__(self, platform: str) -> None:
        super().__init__(f"ShellHelper cannot be instantiated on {platform}")
        self.platform = platform


class TreeFetchError(ShellTitleError):
    """Raised by a tree fetcher when the process table could not be read."""

    def __init__(self, root_pid: int, reason: str) -> None:
        super().__init__(f"Could not fetch process tree for PID {root_pid}: {reason}")
        self.root_pid = root_pid
        self.reason = reason
