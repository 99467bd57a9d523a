"""
================================================================================
Web List
================================================================================

A lazy, wait-aware, index-addressable view over a family of elements
sharing one locator pattern.

Nothing is materialized up front. ``get_record(i)`` only builds the
positional handle ``(locator)[i + 1]``; ``has_record(i)`` waits for it to be
present. The first element gets the long ``first_timeout_seconds`` wait so
the page can render; every sibling after that gets the short
``other_timeout_seconds`` wait, so the end of the list is detected quickly.

Usage:
    >>> results = WebList("Search Results", engine, "//div[@class='results']/article")
    >>> results.count()
    12
    >>> for result in results:
    ...     print(result.text)
    >>> results.on_first_match(lambda r: "Invoice" in r.text, lambda r: r.click())

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar, Union

from loguru import logger

from .element import IndexedElement
from .engine import ElementEngine
from .errors import InvalidArgumentError, NoSuchElementError, UnsupportedOperationError
from .locators import LocatorExpression, to_locator
from .wait_helpers import WaitPolicy


E = TypeVar("E")

# (index, positional locator) -> record
RecordFactory = Callable[[int, LocatorExpression], E]

# index -> whether a record is ready at that index
RecordProbe = Callable[[int], bool]


class WebListIterator(Generic[E]):
    """
    Single-page iterator over a :class:`WebList`.

    Supports both the explicit ``has_next()``/``next()`` protocol and the
    Python iterator protocol.
    """

    def __init__(self, collection: "WebList[E]", probe: Optional[RecordProbe] = None):
        self._collection = collection
        self._probe = probe or collection.has_record
        self.cursor = 0

    def has_next(self) -> bool:
        return self._probe(self.cursor)

    def next(self) -> E:
        """
        Return the record at the cursor and advance.

        Raises:
            NoSuchElementError: When no record is present at the cursor
        """
        if not self.has_next():
            raise NoSuchElementError(
                f"{self._collection.name} has no record at index {self.cursor}"
            )
        return self._advance()

    def remove(self) -> None:
        raise UnsupportedOperationError(
            f"{self._collection.name} is a read-only view over the page"
        )

    def _advance(self) -> E:
        record = self._collection.get_record(self.cursor)
        self.cursor += 1
        return record

    def __iter__(self) -> "WebListIterator[E]":
        return self

    def __next__(self) -> E:
        if not self.has_next():
            raise StopIteration
        return self._advance()


class WebList(Generic[E]):
    """
    Lazy indexed collection of elements.

    Args:
        name: Human-readable name used in logs and reports
        engine: Automation engine
        locator: Locator matching every element of the collection
        wait_policy: First/other element timeouts. Defaults to configuration.
        record_factory: Builds a record from ``(index, positional_locator)``.
            Defaults to :class:`IndexedElement`.
    """

    def __init__(
        self,
        name: str,
        engine: ElementEngine,
        locator: Union[LocatorExpression, str],
        wait_policy: Optional[WaitPolicy] = None,
        record_factory: Optional[RecordFactory] = None,
    ):
        if not name or not str(name).strip():
            raise InvalidArgumentError("A collection requires a non-blank name")
        if engine is None:
            raise InvalidArgumentError(f"Collection '{name}' requires an engine")
        if record_factory is not None and not callable(record_factory):
            raise InvalidArgumentError(f"Record factory of '{name}' is not callable")

        self.name = name
        self.engine = engine
        self.locator = to_locator(locator)
        self.wait_policy = wait_policy or WaitPolicy.from_config()
        self._record_factory = record_factory

    # =========================================================================
    # Indexed access
    # =========================================================================

    def get_record(self, index: int) -> E:
        """
        Build the record at ``index``. Does not wait or check existence.

        Raises:
            InvalidArgumentError: For a negative index
        """
        if index < 0:
            raise InvalidArgumentError(f"Record index must not be negative: {index}")
        if self._record_factory is not None:
            return self._record_factory(index, self.locator.nth(index))
        return IndexedElement(f"{self.name}[{index}]", self.engine, self.locator, index)

    def has_record(self, index: int) -> bool:
        """
        Whether the record at ``index`` is present within the policy timeout.

        Index 0 waits ``first_timeout_seconds``; all others wait
        ``other_timeout_seconds``.
        """
        return self.get_record(index).present.wait_is_true(
            self.wait_policy.timeout_for(index),
            self.wait_policy.poll_interval_ms,
        )

    # =========================================================================
    # Iteration
    # =========================================================================

    def iterator(self, probe: Optional[RecordProbe] = None) -> WebListIterator[E]:
        """Iterator over the records; ``probe`` overrides ``has_record``."""
        return WebListIterator(self, probe)

    def __iter__(self):
        return self.iterator()

    def _timeouts(
        self,
        first_wait_secs: Optional[float],
        wait_secs: Optional[float],
    ) -> Tuple[float, float]:
        first = self.wait_policy.first_timeout_seconds if first_wait_secs is None else first_wait_secs
        other = self.wait_policy.other_timeout_seconds if wait_secs is None else wait_secs
        return first, other

    def _is_present_within(self, record: Any, timeout: float) -> bool:
        return record.present.wait_is_true(timeout, self.wait_policy.poll_interval_ms)

    def _is_enabled_or_present_within(self, record: Any, timeout: float) -> bool:
        poll = self.wait_policy.poll_interval_ms
        return record.enabled.wait_is_true(timeout, poll) or record.present.wait_is_true(1, poll)

    def _walk(
        self,
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
        check: Optional[Callable[[Any, float], bool]] = None,
    ):
        """Iterate with explicit timeouts and an optional readiness check."""
        first, other = self._timeouts(first_wait_secs, wait_secs)
        check = check or self._is_present_within

        def probe(index: int) -> bool:
            return check(self.get_record(index), first if index == 0 else other)

        return self.iterator(probe)

    # =========================================================================
    # Aggregations
    # =========================================================================

    def for_each(
        self,
        action: Callable[[E], Any],
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> None:
        """Invoke ``action`` on every record until one is not present in time."""
        for record in self._walk(first_wait_secs, wait_secs):
            action(record)

    def on_match(
        self,
        predicate: Callable[[E], bool],
        action: Callable[[E], Any],
        stop_after_first_match: bool = False,
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> None:
        """
        Invoke ``action`` on every record satisfying ``predicate``.

        A record is tested only if it is enabled within the relevant timeout
        or present within one second; the walk ends at the first record that
        is neither.
        """
        for record in self._walk(first_wait_secs, wait_secs, self._is_enabled_or_present_within):
            if predicate(record):
                action(record)
                if stop_after_first_match:
                    break

    def on_first_match(
        self,
        predicate: Callable[[E], bool],
        action: Callable[[E], Any],
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> None:
        self.on_match(predicate, action, True, first_wait_secs, wait_secs)

    def get_first(
        self,
        predicate: Optional[Callable[[E], bool]] = None,
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> Optional[E]:
        """First record satisfying ``predicate`` (or the first record), else None."""
        found: List[E] = []
        self.on_first_match(predicate or (lambda _: True), found.append, first_wait_secs, wait_secs)
        return found[0] if found else None

    def test_all(
        self,
        predicate: Callable[[E], bool],
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> bool:
        """True iff every record satisfies ``predicate``. Vacuously true when empty."""
        for record in self._walk(first_wait_secs, wait_secs):
            if not predicate(record):
                logger.debug(f"{self.name}: {getattr(record, 'name', record)} failed predicate")
                return False
        return True

    def test_any(
        self,
        predicate: Callable[[E], bool],
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> bool:
        """True iff at least one record satisfies ``predicate``. Stops at the first match."""
        return self.get_first(predicate, first_wait_secs, wait_secs) is not None

    def test_exactly_one(
        self,
        predicate: Callable[[E], bool],
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> bool:
        """True iff exactly one record satisfies ``predicate``. Scans every record."""
        matches: List[E] = []
        self.on_match(predicate, matches.append, False, first_wait_secs, wait_secs)
        return len(matches) == 1

    def get_elements(
        self,
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> List[E]:
        """
        Every present record, as positional handles.

        A handle reads the element at its index each time it is used, not
        the one seen during the walk.
        """
        output: List[E] = []
        self.for_each(output.append, first_wait_secs, wait_secs)
        return output

    def get_texts(
        self,
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> List[str]:
        output: List[str] = []
        self.for_each(lambda record: output.append(record.text), first_wait_secs, wait_secs)
        return output

    def count(
        self,
        first_wait_secs: Optional[float] = None,
        wait_secs: Optional[float] = None,
    ) -> int:
        return len(self.get_elements(first_wait_secs, wait_secs))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self.locator}>"


__all__ = [
    "RecordFactory",
    "RecordProbe",
    "WebList",
    "WebListIterator",
]
