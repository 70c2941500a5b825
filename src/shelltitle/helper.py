"""Keep a terminal title in sync with the innermost program of a shell."""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Protocol

from shelltitle.config import HelperConfig
from shelltitle.debounce import ActivityDebouncer
from shelltitle.errors import TreeFetchError, UnsupportedPlatformError
from shelltitle.models import ProcessNode, Resolution
from shelltitle.resolver import resolve
from shelltitle.tree import fetch_process_tree

logger = logging.getLogger(__name__)

TreeFetcher = Callable[[int], Awaitable[ProcessNode | None]]


class TerminalSurface(Protocol):
    """Terminal display that reports activity."""

    def on_line_feed(self, listener: Callable[..., None]) -> None: ...

    def on_key_press(self, listener: Callable[..., None]) -> None: ...


class HostSession(Protocol):
    """Terminal session that owns the title."""

    @property
    def is_title_set_by_process(self) -> bool: ...

    def set_title(self, title: str, is_process_derived: bool) -> None: ...


class ShellHelper:
    """
    Tracks the innermost program running in a shell session.

    Line feeds and keypresses on the terminal are debounced into a recheck.
    Each recheck fetches the process tree below the shell, resolves the
    innermost program and, when the session lets processes set its title,
    pushes the program name as the new title.
    """

    def __init__(
        self,
        root_pid: int,
        root_shell_executable: str,
        session: HostSession,
        terminal: TerminalSurface,
        *,
        fetch_tree: TreeFetcher = fetch_process_tree,
        config: HelperConfig | None = None,
        platform: str | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        Initialize the ShellHelper.

        Args:
            root_pid: PID of the shell process to track.
            root_shell_executable: Executable name the shell was started with.
            session: Host session whose title is kept in sync.
            terminal: Terminal surface to listen to for activity.
            fetch_tree: Async callable returning the tree below a PID.
            config: Delays and process names. Default HelperConfig().
            platform: sys.platform value to validate. Default sys.platform.
            loop: Event loop for debounce timers. Default: the running loop.

        Raises:
            UnsupportedPlatformError: If the platform is not supported.
        """
        self._config = config or HelperConfig()
        platform = platform or sys.platform
        if not self._config.supports(platform):
            raise UnsupportedPlatformError(platform)

        self._root_pid = root_pid
        self._root_shell_executable = root_shell_executable
        self._session = session
        self._fetch_tree = fetch_tree
        self._shell_name: str | None = None
        self._program_name: str | None = None
        self._disposed = False
        # Outstanding tree queries; all of them are cancelled on dispose
        self._queries: set[asyncio.Future[ProcessNode | None]] = set()
        self._recheck: asyncio.Task[None] | None = None
        self._recheck_pending = False

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None  # bound on the first signal instead
        self._debouncer = ActivityDebouncer(
            self._on_recheck,
            debounce_delay=self._config.debounce_delay,
            settle_delay=self._config.settle_delay,
            loop=loop,
        )
        terminal.on_line_feed(self._on_activity)
        terminal.on_key_press(self._on_activity)

    @property
    def root_pid(self) -> int:
        """Get the PID of the tracked shell."""
        return self._root_pid

    @property
    def root_shell_executable(self) -> str:
        """Get the executable the shell was started with."""
        return self._root_shell_executable

    @property
    def disposed(self) -> bool:
        """Check if the helper has been disposed."""
        return self._disposed

    @property
    def program_name(self) -> str | None:
        """Innermost program from the last successful walk."""
        return self._program_name

    @property
    def shell_name(self) -> str | None:
        """Innermost shell from the last successful walk."""
        return self._shell_name

    def get_program_name(self) -> str | None:
        """Return the innermost program executable running in the terminal."""
        return self._program_name

    def get_shell_name(self) -> str | None:
        """Return the innermost shell executable running in the terminal."""
        return self._shell_name

    def _on_activity(self, *args: object) -> None:
        try:
            self._debouncer.signal()
        except RuntimeError as e:
            logger.warning(f"Ignoring activity for shell {self._root_pid} outside an event loop: {e}")

    def _on_recheck(self) -> None:
        if self._disposed:
            return
        if self._recheck is not None and not self._recheck.done():
            # One recheck at a time; activity seen meanwhile gets one more cycle
            self._recheck_pending = True
            return
        self._recheck = asyncio.get_running_loop().create_task(self.check_shell())
        self._recheck.add_done_callback(self._on_recheck_done)

    def _on_recheck_done(self, task: asyncio.Task[None]) -> None:
        if self._recheck is task:
            self._recheck = None
        if self._recheck_pending and not self._disposed:
            self._recheck_pending = False
            self._debouncer.signal()

    async def check_shell(self) -> None:
        """Refresh the program name and push it as the session title."""
        if self._disposed or not self._session.is_title_set_by_process:
            return
        await self.update_program_name()
        if self._disposed or self._program_name is None:
            return
        logger.debug(f"Setting title of shell {self._root_pid} to {self._program_name!r}")
        try:
            self._session.set_title(self._program_name, True)
        except Exception:
            logger.exception(f"Failed to set title of shell {self._root_pid}")

    async def update_program_name(self) -> Resolution | None:
        """
        Update the innermost shell and program running in the terminal.

        Any error raised by the tree fetcher is logged and treated as a
        failed fetch.

        Returns:
            The new resolution, or None if the fetch came back empty, failed,
            or the helper was disposed before it completed. State is left
            unchanged in all of those cases.
        """
        if self._disposed:
            return None

        query = asyncio.ensure_future(self._fetch_tree(self._root_pid))
        self._queries.add(query)
        try:
            tree = await query
        except asyncio.CancelledError:
            if self._disposed:
                logger.debug(f"Discarding tree query for {self._root_pid} after dispose")
                return None
            raise
        except TreeFetchError as e:
            logger.warning(str(e))
            return None
        except Exception:
            logger.exception(f"Tree query for {self._root_pid} failed")
            return None
        finally:
            self._queries.discard(query)

        if self._disposed:
            return None
        if tree is None:
            logger.debug(f"Empty process tree for {self._root_pid}")
            return None

        resolution = resolve(tree, self._config.shell_executables, self._config.console_host)
        if resolution.shell_name is not None:
            self._shell_name = resolution.shell_name
        self._program_name = resolution.program_name
        return resolution

    def dispose(self) -> None:
        """Stop further updates and cancel every outstanding tree query."""
        if self._disposed:
            return
        self._disposed = True
        self._recheck_pending = False
        for query in list(self._queries):
            if not query.done():
                query.cancel()
        self._queries.clear()

    def __enter__(self) -> "ShellHelper":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()
