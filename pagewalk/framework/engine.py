"""
================================================================================
Element Engine
================================================================================

The boundary between pagewalk and the browser-automation engine.

The core only needs a handful of operations: resolve a query string into an
element reference, read its presence/enabled/displayed state, read its text
and click it. ``PlaywrightEngine`` implements them over a Playwright
(sync API) ``Page``.

Engine faults (closed page, detached frame, stale element) are never caught
here; they propagate to the caller.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger
from playwright.sync_api import Locator, Page


class ElementEngine(ABC):
    """
    Operations consumed from the automation engine.

    ``resolve`` must not wait or fail for missing elements: it only builds a
    reference that is re-queried by every state read.
    """

    @abstractmethod
    def resolve(self, query: str) -> Any:
        """Build an element reference for an engine query string."""

    @abstractmethod
    def is_present(self, element: Any) -> bool:
        """Whether the element is attached to the DOM."""

    @abstractmethod
    def is_enabled(self, element: Any) -> bool:
        """Whether the element is present and enabled."""

    @abstractmethod
    def is_displayed(self, element: Any) -> bool:
        """Whether the element is present and visible."""

    @abstractmethod
    def get_text(self, element: Any) -> str:
        """Visible text of the element."""

    @abstractmethod
    def click(self, element: Any) -> None:
        """Click the element."""


class PlaywrightEngine(ElementEngine):
    """
    ``ElementEngine`` backed by a Playwright sync ``Page``.

    Usage:
        with sync_playwright() as p:
            page = p.chromium.launch().new_page()
            engine = PlaywrightEngine(page)
            rows = WebList("Rows", engine, "//table//tr")

    Args:
        page: Playwright Page object
        action_timeout: Timeout for clicks in milliseconds
        state_timeout: Timeout for enabled and text reads in milliseconds.
            Callers poll these reads themselves, so it stays short.
    """

    def __init__(self, page: Page, action_timeout: int = 30000, state_timeout: int = 1000):
        self.page = page
        self.action_timeout = action_timeout
        self.state_timeout = state_timeout

    def resolve(self, query: str) -> Locator:
        return self.page.locator(query).first

    def is_present(self, element: Locator) -> bool:
        return element.count() > 0

    def is_enabled(self, element: Locator) -> bool:
        if element.count() == 0:
            return False
        return element.is_enabled(timeout=self.state_timeout)

    def is_displayed(self, element: Locator) -> bool:
        # is_visible() does not wait and is False for missing elements
        return element.is_visible()

    def get_text(self, element: Locator) -> str:
        return element.inner_text(timeout=self.state_timeout) or ""

    def click(self, element: Locator) -> None:
        logger.debug(f"Clicking: {element}")
        element.click(timeout=self.action_timeout)


__all__ = [
    "ElementEngine",
    "PlaywrightEngine",
]
