"""
================================================================================
Web Elements and State Probes
================================================================================

A ``WebElement`` is an addressable element: a name, an engine and a
locator. It never caches the engine reference; every probe resolves the
locator again and reads live state.

Each element exposes four probes:
    - present:   attached to the DOM
    - enabled:   present and enabled
    - displayed: present and visible
    - clickable: displayed and enabled

Every probe supports an immediate read (``get``) and a bounded poll
(``wait_is_true`` / ``wait_is_false``). A timed-out poll returns False.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from loguru import logger

from .engine import ElementEngine
from .errors import InvalidArgumentError
from .locators import LocatorExpression, to_locator
from .wait_helpers import DEFAULT_POLL_INTERVAL_MS, poll_until, poll_until_async


class ElementProbe:
    """
    One boolean state of an element.

    Args:
        name: State name used in logs (e.g. "Present")
        owner: The element the state belongs to
        read: Zero-argument callable performing the immediate read
    """

    def __init__(self, name: str, owner: "WebElement", read: Callable[[], bool]):
        self.name = name
        self.owner = owner
        self._read = read

    def get(self) -> bool:
        """Immediate, non-blocking read of the current state."""
        return bool(self._read())

    def is_true(self) -> bool:
        return self.get()

    def is_false(self) -> bool:
        return not self.get()

    def wait_is_true(
        self,
        timeout_seconds: float,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> bool:
        """
        Poll until the state is true or the timeout elapses.

        Returns:
            True if the state became true, False on timeout
        """
        return poll_until(
            self.get,
            timeout_seconds,
            poll_interval_ms,
            description=f"{self.owner.name} {self.name}",
        )

    def wait_is_false(
        self,
        timeout_seconds: float,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> bool:
        """Poll until the state is false or the timeout elapses."""
        return poll_until(
            self.is_false,
            timeout_seconds,
            poll_interval_ms,
            description=f"{self.owner.name} not {self.name}",
        )

    async def await_is_true(
        self,
        timeout_seconds: float,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> bool:
        """Awaitable form of :meth:`wait_is_true`."""
        return await poll_until_async(
            self.get,
            timeout_seconds,
            poll_interval_ms,
            description=f"{self.owner.name} {self.name}",
        )

    def __repr__(self) -> str:
        return f"<ElementProbe {self.owner.name}.{self.name}>"


class WebElement:
    """
    A named element addressed through the automation engine.

    Usage:
        >>> next_link = WebElement("Next", engine, LocatorExpression.by_id("next"))
        >>> if next_link.clickable.get():
        ...     next_link.click()

    Args:
        name: Human-readable name used in logs and reports
        engine: Automation engine
        locator: LocatorExpression, or a raw XPath/CSS string
    """

    def __init__(
        self,
        name: str,
        engine: ElementEngine,
        locator: Union[LocatorExpression, str, None] = None,
    ):
        if engine is None:
            raise InvalidArgumentError(f"Element '{name}' requires an engine")
        self.name = name
        self.engine = engine
        self._locator = to_locator(locator) if locator is not None else None

        self.present = ElementProbe("Present", self, self._is_present)
        self.enabled = ElementProbe("Enabled", self, self._is_enabled)
        self.displayed = ElementProbe("Displayed", self, self._is_displayed)
        self.clickable = ElementProbe("Clickable", self, self._is_clickable)

    @property
    def locator(self) -> LocatorExpression:
        return self._locator

    def resolve(self) -> Any:
        """Resolve a fresh engine reference for this element."""
        return self.engine.resolve(self.locator.query)

    def _is_present(self) -> bool:
        return self.engine.is_present(self.resolve())

    def _is_enabled(self) -> bool:
        return self.engine.is_enabled(self.resolve())

    def _is_displayed(self) -> bool:
        return self.engine.is_displayed(self.resolve())

    def _is_clickable(self) -> bool:
        element = self.resolve()
        return self.engine.is_displayed(element) and self.engine.is_enabled(element)

    def is_clickable(self, wait_sec: float = 0) -> bool:
        """Whether the element becomes clickable within ``wait_sec`` seconds."""
        return self.clickable.wait_is_true(wait_sec)

    @property
    def text(self) -> str:
        """Immediate read of the element text."""
        return self.engine.get_text(self.resolve())

    def get_text(self, wait_sec: float = 0) -> str:
        """
        Element text, or an empty string when the element is not present
        within ``wait_sec`` seconds.
        """
        if not self.present.wait_is_true(wait_sec):
            return ""
        return self.text

    def click(self) -> None:
        logger.debug(f"Click: {self.name}")
        self.engine.click(self.resolve())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self.locator}>"


class IndexedElement(WebElement):
    """
    The element at ``index`` of a collection sharing ``base_locator``.

    The value is the ``(base_locator, index)`` pair; the positional locator
    is rebuilt on every access.
    """

    def __init__(
        self,
        name: str,
        engine: ElementEngine,
        base_locator: Union[LocatorExpression, str],
        index: int,
    ):
        if index < 0:
            raise InvalidArgumentError(f"Element index must not be negative: {index}")
        self.base_locator = to_locator(base_locator)
        self.index = index
        super().__init__(name, engine)

    @property
    def locator(self) -> LocatorExpression:
        return self.base_locator.nth(self.index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedElement):
            return NotImplemented
        return (self.base_locator, self.index) == (other.base_locator, other.index)

    def __hash__(self) -> int:
        return hash((self.base_locator, self.index))


def optional_element(
    name: str,
    engine: ElementEngine,
    locator: Union[LocatorExpression, str, None],
) -> Optional[WebElement]:
    """Build a ``WebElement`` or return None when no locator is given."""
    if locator is None:
        return None
    return WebElement(name, engine, locator)


__all__ = [
    "ElementProbe",
    "IndexedElement",
    "WebElement",
    "optional_element",
]
