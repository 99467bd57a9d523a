"""
================================================================================
Unit Test Fixtures
================================================================================

In-memory stand-ins for the browser so collections, tables and pagination
can be exercised without launching one.

    - FakeEngine: a DOM keyed by engine query string
    - FakeClock: a monotonic clock advanced only by ``sleep``

================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import pytest

from pagewalk.common import GlobalConfig
from pagewalk.framework.engine import ElementEngine
from pagewalk.framework.locators import LocatorExpression, to_locator


@dataclass
class FakeNode:
    text: str = ""
    enabled: bool = True
    visible: bool = True
    on_click: Optional[Callable[[], None]] = None


class FakeEngine(ElementEngine):
    """
    Engine over a dictionary of nodes.

    References are the query strings themselves, so every state read looks
    the node up again and sees DOM changes made between two reads.
    """

    def __init__(self):
        self.nodes: Dict[str, FakeNode] = {}
        self.clicks: List[str] = []
        self.resolved: List[str] = []

    # -- building the page ----------------------------------------------------

    def add(self, locator, text: str = "", **attrs) -> FakeNode:
        node = FakeNode(text=text, **attrs)
        self.nodes[to_locator(locator).query] = node
        return node

    def add_list(self, locator, texts: Iterable[str], **attrs) -> None:
        base = to_locator(locator)
        for index, text in enumerate(texts):
            self.add(base.nth(index), text, **attrs)

    def add_rows(self, rows_locator, rows: Sequence[Sequence[str]]) -> None:
        base = to_locator(rows_locator)
        for index, cells in enumerate(rows):
            row = base.nth(index)
            self.add(row, " ".join(cells))
            for position, value in enumerate(cells, start=1):
                self.add(row.child(LocatorExpression.by_xpath(f"./td[{position}]")), value)

    def add_table(
        self,
        base_xpath: str,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        hidden_headers: Sequence[str] = (),
    ) -> None:
        header_cells = LocatorExpression.by_xpath(base_xpath + "/thead/tr/th")
        for index, header in enumerate(headers):
            self.add(header_cells.nth(index), header, visible=header not in hidden_headers)
        self.add_rows(base_xpath + "/tbody/tr", rows)

    def count_clicks(self, locator) -> int:
        return self.clicks.count(to_locator(locator).query)

    # -- ElementEngine --------------------------------------------------------

    def resolve(self, query: str) -> str:
        self.resolved.append(query)
        return query

    def is_present(self, element: str) -> bool:
        return element in self.nodes

    def is_enabled(self, element: str) -> bool:
        node = self.nodes.get(element)
        return node is not None and node.enabled

    def is_displayed(self, element: str) -> bool:
        node = self.nodes.get(element)
        return node is not None and node.visible

    def get_text(self, element: str) -> str:
        if element not in self.nodes:
            raise LookupError(f"No node for {element}")
        return self.nodes[element].text

    def click(self, element: str) -> None:
        if element not in self.nodes:
            raise LookupError(f"No node for {element}")
        self.clicks.append(element)
        node = self.nodes[element]
        if node.on_click is not None:
            node.on_click()


class FakeClock:
    """Replacement for the ``time`` module used by the wait helpers."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.start = start
        self.sleeps = 0

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps += 1
        self.now += seconds

    @property
    def elapsed(self) -> float:
        return self.now - self.start


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Every test starts from built-in configuration defaults."""
    for key in list(os.environ):
        if key.startswith("PAGEWALK__"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PAGEWALK_CONFIG", str(tmp_path / "absent.yaml"))
    GlobalConfig.reset()
    yield
    GlobalConfig.reset()


@pytest.fixture
def fake_clock(monkeypatch) -> FakeClock:
    clock = FakeClock()
    monkeypatch.setattr("pagewalk.framework.wait_helpers.time", clock)
    return clock


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()
