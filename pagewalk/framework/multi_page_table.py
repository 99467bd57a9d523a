"""
================================================================================
Multi-Page Table
================================================================================

A :class:`WebTable` spread over several pages, navigated through up to four
controls (first, previous, next, last). Iterating the table walks every
row of every page as one sequence.

Termination:
    - Each navigation returns False when its control is absent, disabled,
      or when clicking it does not change the page token.
    - The number of page changes per traversal is bounded by
      ``max_page_iterations``.

Single-page iteration is requested explicitly, either with
``iterator(single_page=True)`` or through the ``current_page()`` view. No
thread-local or global mode flag is involved.

Usage:
    >>> orders = MultiPageTable(
    ...     "Orders", engine, "//table[@id='orders']",
    ...     first_locator=LocatorExpression.by_id("first"),
    ...     previous_locator=LocatorExpression.by_id("prev"),
    ...     next_locator=LocatorExpression.by_id("next"),
    ...     last_locator=LocatorExpression.by_id("last"),
    ...     page_token_locator=LocatorExpression.by_class_name("current-page"),
    ... )
    >>> orders.get_total_record_count()
    57
    >>> orders.get_current_page_record_count()
    20

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar, Union

import allure
from loguru import logger

from pagewalk.common import get_int_config

from .element import WebElement, optional_element
from .engine import ElementEngine
from .errors import InvalidArgumentError, NoSuchElementError, UnsupportedOperationError
from .locators import LocatorExpression
from .wait_helpers import WaitPolicy, poll_until
from .web_list import RecordProbe
from .web_table import RowFactory, TableRow, WebTable


R = TypeVar("R", bound=TableRow)
T = TypeVar("T")

LocatorLike = Union[LocatorExpression, str, None]


@dataclass
class PaginationState:
    """
    Position of one traversal.

    Attributes:
        page_token: Token of the page being read ("" when unavailable)
        cursor: Row index within the current page
        remaining_page_budget: Page changes still allowed
        single_page_mode: When True the traversal never leaves the page
    """
    page_token: str
    cursor: int
    remaining_page_budget: int
    single_page_mode: bool = False


class PaginatedIterator:
    """
    Iterator walking the rows of every page of a :class:`MultiPageTable`.

    ``has_next()`` looks for a row at the cursor; when none is found it
    moves to the next page and retries from row 0, until navigation fails
    or the page budget is spent. ``next()`` returns the row found by the
    last successful ``has_next()``.
    """

    def __init__(
        self,
        table: "MultiPageTable",
        probe: Optional[RecordProbe] = None,
        single_page: bool = False,
    ):
        self._table = table
        self._probe = probe or table.has_record
        self._record = None
        if not single_page:
            table.goto_first_page()
        self.state = PaginationState(
            page_token=table.get_current_page_token(),
            cursor=0,
            remaining_page_budget=table.max_page_iterations,
            single_page_mode=single_page,
        )

    def has_next(self) -> bool:
        self._record = None
        state = self.state

        if state.single_page_mode:
            if self._probe(state.cursor):
                self._record = self._table.get_record(state.cursor)
            return self._record is not None

        while state.remaining_page_budget > 0:
            if self._probe(state.cursor):
                self._record = self._table.get_record(state.cursor)
                return True

            if not self._table.goto_next_page():
                return False

            state.remaining_page_budget -= 1
            state.cursor = 0
            state.page_token = self._table.get_current_page_token()

        logger.warning(
            f"{self._table.name}: stopped after {self._table.max_page_iterations} page(s), "
            f"page budget exhausted"
        )
        return False

    def next(self):
        """
        Return the row found by the last ``has_next()`` and advance.

        Raises:
            NoSuchElementError: Without a prior successful ``has_next()``
        """
        if self._record is None:
            raise NoSuchElementError(
                f"{self._table.name} has no record ready at index {self.state.cursor}"
            )
        record, self._record = self._record, None
        self.state.cursor += 1
        return record

    def remove(self) -> None:
        raise UnsupportedOperationError(
            f"{self._table.name} is a read-only view over the page"
        )

    def __iter__(self) -> "PaginatedIterator":
        return self

    def __next__(self):
        if not self.has_next():
            raise StopIteration
        return self.next()


class MultiPageTable(WebTable[R]):
    """
    Table whose rows span several pages.

    Rows are positional handles on the page displayed when they are read.
    Rows returned by ``find_all`` or ``get_elements`` after a traversal all
    read from the page the traversal ended on. Use ``read_rows`` to keep
    the cell values of every page, or act on each row inside ``for_each``
    and ``on_match``.

    Args:
        name: Table name used in logs and reports
        engine: Automation engine
        base_xpath: XPath of the ``<table>`` element
        first_locator: "First page" control, or None when absent
        previous_locator: "Previous page" control, or None when absent
        next_locator: "Next page" control, or None when absent
        last_locator: "Last page" control, or None when absent
        page_token_locator: Element whose text identifies the current page
        wait_policy: First/other row timeouts. Defaults to configuration.
        max_page_iterations: Upper bound on page changes per traversal.
            Defaults to ``pagination.max_page_iterations``.
        row_factory: Builds a row from ``(table, index)``
        single_page: Restrict iteration to the page currently displayed
    """

    def __init__(
        self,
        name: str,
        engine: ElementEngine,
        base_xpath: str,
        first_locator: LocatorLike = None,
        previous_locator: LocatorLike = None,
        next_locator: LocatorLike = None,
        last_locator: LocatorLike = None,
        page_token_locator: LocatorLike = None,
        wait_policy: Optional[WaitPolicy] = None,
        max_page_iterations: Optional[int] = None,
        row_factory: Optional[RowFactory] = None,
        single_page: bool = False,
    ):
        super().__init__(name, engine, base_xpath, wait_policy, row_factory)

        if max_page_iterations is None:
            max_page_iterations = get_int_config("pagination.max_page_iterations", 100)
        if max_page_iterations < 1:
            raise InvalidArgumentError(
                f"max_page_iterations of '{name}' must be positive: {max_page_iterations}"
            )
        self.max_page_iterations = max_page_iterations
        self.single_page = single_page

        self.first_link: Optional[WebElement] = optional_element("First", engine, first_locator)
        self.previous_link: Optional[WebElement] = optional_element("Previous", engine, previous_locator)
        self.next_link: Optional[WebElement] = optional_element("Next", engine, next_locator)
        self.last_link: Optional[WebElement] = optional_element("Last", engine, last_locator)
        self.page_token: Optional[WebElement] = optional_element("Page Token", engine, page_token_locator)

    # =========================================================================
    # Page token
    # =========================================================================

    def get_current_page_token(self) -> str:
        """
        Text identifying the page currently displayed.

        Returns an empty string when no token element is configured or it is
        not rendered. Override for tables exposing the page number differently.
        """
        if self.page_token is None:
            return ""
        return self.page_token.get_text(0).strip()

    # =========================================================================
    # Navigation
    # =========================================================================

    def goto_first_page(self) -> bool:
        """
        Go to the first page.

        Clicks the "first" control when it is clickable right away, otherwise
        steps back one page at a time. After a direct click the page token is
        given the same time to change as for a single step.

        Returns:
            False only if the page budget ran out before reaching the first page
        """
        with allure.step(f"Go to first page of {self.name}"):
            if self.first_link is not None and self.first_link.clickable.get():
                self._click_and_wait(self.first_link, "first")
                return True
            return self._repeat(self.goto_previous_page, "first")

    def goto_last_page(self) -> bool:
        """
        Go to the last page.

        Clicks the "last" control when it is clickable right away, otherwise
        steps forward one page at a time. After a direct click the page token
        is given the same time to change as for a single step.

        Returns:
            False only if the page budget ran out before reaching the last page
        """
        with allure.step(f"Go to last page of {self.name}"):
            if self.last_link is not None and self.last_link.clickable.get():
                self._click_and_wait(self.last_link, "last")
                return True
            return self._repeat(self.goto_next_page, "last")

    def goto_previous_page(self) -> bool:
        """Step back one page. False when there is no previous page."""
        return self._navigate(self.previous_link, "previous")

    def goto_next_page(self) -> bool:
        """Step forward one page. False when there is no next page."""
        return self._navigate(self.next_link, "next")

    def _repeat(self, step: Callable[[], bool], target: str) -> bool:
        for _ in range(self.max_page_iterations):
            if not step():
                return True
        logger.warning(
            f"{self.name}: {target} page not reached after {self.max_page_iterations} page(s)"
        )
        return False

    def _navigate(self, control: Optional[WebElement], direction: str) -> bool:
        if control is None or not control.present.get() or not control.enabled.get():
            logger.debug(f"{self.name}: no {direction} page control available")
            return False
        return self._click_and_wait(control, direction)

    def _click_and_wait(self, control: WebElement, direction: str) -> bool:
        """Click ``control`` and wait for the page token to change."""
        token = self.get_current_page_token()
        if token:
            logger.debug(f"{self.name}: go to {direction} page from page {token}")
        else:
            logger.debug(f"{self.name}: go to {direction} page from current page")

        control.click()

        if not token:
            # Nothing to compare against, the click is trusted
            return True

        changed = poll_until(
            lambda: self.get_current_page_token() != token,
            self.wait_policy.other_timeout_seconds,
            self.wait_policy.poll_interval_ms,
            description=f"{self.name} page token to change from {token}",
        )
        if changed:
            logger.info(f"{self.name}: moved to {direction} page {self.get_current_page_token()}")
        else:
            logger.debug(f"{self.name}: page token still {token}, no {direction} page")
        return changed

    # =========================================================================
    # Iteration
    # =========================================================================

    def iterator(
        self,
        probe: Optional[RecordProbe] = None,
        single_page: Optional[bool] = None,
    ) -> PaginatedIterator:
        """
        Iterator over the rows.

        Args:
            probe: Overrides ``has_record`` as the per-row readiness check
            single_page: Restrict to the current page; defaults to the
                table's own ``single_page`` setting
        """
        if single_page is None:
            single_page = self.single_page
        return PaginatedIterator(self, probe, single_page)

    def iterate_with_pagination(self, probe: Optional[RecordProbe] = None) -> PaginatedIterator:
        """Iterator over the rows of every page, starting from the first page."""
        return PaginatedIterator(self, probe, single_page=False)

    def current_page(self) -> "MultiPageTable[R]":
        """A view of this table restricted to the page currently displayed."""
        view = copy.copy(self)
        view.single_page = True
        return view

    def perform_action_on_current_page(self, action: Callable[["MultiPageTable[R]"], T]) -> T:
        """Run ``action`` against the current-page view and return its result."""
        return action(self.current_page())

    def get_total_record_count(self) -> int:
        """Number of rows across all pages."""
        with allure.step(f"Count all rows of {self.name}"):
            total = self.count()
            logger.info(f"{self.name}: {total} row(s) across all pages")
            return total

    def get_current_page_record_count(self) -> int:
        """Number of rows on the page currently displayed."""
        return self.perform_action_on_current_page(lambda page: page.count())


__all__ = [
    "MultiPageTable",
    "PaginatedIterator",
    "PaginationState",
]
