"""Tunables for shelltitle."""

from dataclasses import dataclass

SHELL_EXECUTABLES: frozenset[str] = frozenset({"cmd.exe", "powershell.exe", "bash.exe"})
CONSOLE_HOST = "conhost.exe"

# sys.platform values where the shell and console host names above apply
SUPPORTED_PLATFORMS: frozenset[str] = frozenset({"win32"})

DEFAULT_DEBOUNCE_DELAY = 0.15
DEFAULT_SETTLE_DELAY = 0.05


@dataclass(slots=True, frozen=True)
class HelperConfig:
    """
    Settings for a ShellHelper.

    Delays are in seconds. The debounce delay is the quiet period that must
    follow activity before a recheck is scheduled; the settle delay is the
    extra wait that lets a freshly spawned child show up in the process table.
    """

    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY
    settle_delay: float = DEFAULT_SETTLE_DELAY
    shell_executables: frozenset[str] = SHELL_EXECUTABLES
    console_host: str = CONSOLE_HOST
    supported_platforms: frozenset[str] = SUPPORTED_PLATFORMS

    def __post_init__(self) -> None:
        if self.debounce_delay < 0:
            raise ValueError(f"debounce_delay must be >= 0, got {self.debounce_delay}")
        if self.settle_delay < 0:
            raise ValueError(f"settle_delay must be >= 0, got {self.settle_delay}")

    def supports(self, platform: str) -> bool:
        """Check if shell tracking works on the given sys.platform value."""
        return platform in self.supported_platforms
