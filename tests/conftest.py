"""Shared fixtures for shelltitle tests."""

import asyncio
from collections.abc import Callable

import pytest

from shelltitle.config import HelperConfig
from shelltitle.models import ProcessNode


def node(name: str, *children: ProcessNode) -> ProcessNode:
    """Shorthand for building process trees in tests."""
    return ProcessNode(name=name, children=children)


class FakeTerminal:
    """Terminal surface that lets tests fire activity by hand."""

    def __init__(self) -> None:
        self.line_feed_listeners: list[Callable[..., None]] = []
        self.key_press_listeners: list[Callable[..., None]] = []

    def on_line_feed(self, listener: Callable[..., None]) -> None:
        self.line_feed_listeners.append(listener)

    def on_key_press(self, listener: Callable[..., None]) -> None:
        self.key_press_listeners.append(listener)

    def line_feed(self) -> None:
        for listener in self.line_feed_listeners:
            listener()

    def key_press(self, key: str = "a") -> None:
        for listener in self.key_press_listeners:
            listener(key)


class FakeSession:
    """Host session that records title changes."""

    def __init__(self, is_title_set_by_process: bool = True) -> None:
        self.is_title_set_by_process = is_title_set_by_process
        self.titles: list[tuple[str, bool]] = []

    def set_title(self, title: str, is_process_derived: bool) -> None:
        self.titles.append((title, is_process_derived))


class FakeFetcher:
    """Tree fetcher that serves a fixed tree and counts calls."""

    def __init__(self, tree: ProcessNode | None = None, delay: float = 0.0) -> None:
        self.tree = tree
        self.delay = delay
        self.calls: list[int] = []

    async def __call__(self, root_pid: int) -> ProcessNode | None:
        self.calls.append(root_pid)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.tree


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fast_config() -> HelperConfig:
    """Config with short delays so debounce tests run quickly."""
    return HelperConfig(debounce_delay=0.05, settle_delay=0.02)
