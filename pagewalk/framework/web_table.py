"""
================================================================================
Web Table
================================================================================

A :class:`WebList` over the body rows of an HTML table, with header lookup,
cell access and header/value search criteria.

Layout (all fragments are XPath and can be overridden per subclass):

    base_xpath + thead_xpath + header_row_xpath + header_cell_xpath   -> headers
    base_xpath + tbody_xpath + row_xpath                               -> rows
    row + cell_xpath[n]                                                -> cells

Search criteria never mutate the table: ``with_criteria`` returns a
filtered view sharing the same engine and wait policy.

Usage:
    >>> users = WebTable("Users", engine, "//table[@id='users']")
    >>> users.get_headers_map()
    {1: 'Name', 2: 'Email', 3: 'Status'}
    >>> [row.get_value("Email") for row in users.find_all({"Status": "Active"})]

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, TypeVar, Union

import allure
from loguru import logger

from .element import IndexedElement, WebElement
from .engine import ElementEngine
from .errors import InvalidArgumentError
from .locators import LocatorExpression, normalize_space, xpath_literal
from .wait_helpers import WaitPolicy
from .web_list import WebList


@dataclass(frozen=True)
class TableHeader:
    """A header cell. ``index`` is 1-based, matching XPath positions."""
    index: int
    header: str
    visible: bool


@dataclass(frozen=True)
class TableCell:
    """A snapshot of one cell value."""
    index: int
    header: str
    value: str
    visible: bool


def same_header(left: str, right: str) -> bool:
    """Header texts match case-insensitively after whitespace normalization."""
    return normalize_space(left).lower() == normalize_space(right).lower()


class TableRow(IndexedElement):
    """
    A body row of a :class:`WebTable`.

    Args:
        name: Row name used in logs
        table: Parent table
        index: Zero-based row index within the (filtered) table
    """

    def __init__(self, name: str, table: "WebTable", index: int):
        self.table = table
        super().__init__(name, table.engine, table.locator, index)

    @property
    def row_index(self) -> int:
        return self.index

    def get_cell_locator(
        self,
        header: str,
        index: int = 0,
        child_locator: str = "",
    ) -> LocatorExpression:
        """
        Locator of the cell under ``header``.

        Args:
            header: Header text (case-insensitive, whitespace normalized)
            index: Which occurrence to use when several headers share the text
            child_locator: Optional relative XPath appended inside the cell

        Raises:
            InvalidArgumentError: When the header (occurrence) does not exist
        """
        positions = sorted(
            idx for idx, text in self.table.get_headers_map().items() if same_header(text, header)
        )
        if index < 0 or index >= len(positions):
            raise InvalidArgumentError(
                f"Header not found in {self.table.name}, header:'{header}', index:{index}"
            )
        return self._cell_locator(positions[index], child_locator)

    def _cell_locator(self, position: int, child_locator: str = "") -> LocatorExpression:
        cell = f"{self.table.cell_xpath}[{position}]{child_locator}"
        return self.locator.child(LocatorExpression.by_xpath(f".{cell}"))

    def get_cell(self, header: str, index: int = 0, child_locator: str = "") -> WebElement:
        return WebElement(
            f"{self.name} / {header}",
            self.engine,
            self.get_cell_locator(header, index, child_locator),
        )

    def get_value(self, header: str, index: int = 0) -> str:
        """Text of the cell under ``header`` (empty when the cell is missing)."""
        return normalize_space(self.get_cell(header, index).get_text(0))

    def read_row_cells(self) -> List[TableCell]:
        """Snapshot every cell of the row, one per header."""
        cells: List[TableCell] = []
        for position, header in sorted(self.table.get_headers_map().items()):
            cell = WebElement(f"{self.name} / {header}", self.engine, self._cell_locator(position))
            cells.append(
                TableCell(
                    index=position,
                    header=header,
                    value=normalize_space(cell.get_text(0)),
                    visible=cell.displayed.get(),
                )
            )
        return cells


R = TypeVar("R", bound=TableRow)

# (table, index) -> row
RowFactory = Callable[["WebTable", int], TableRow]


class WebTable(WebList[R]):
    """
    Lazy collection of table rows.

    Args:
        name: Table name used in logs and reports
        engine: Automation engine
        base_xpath: XPath of the ``<table>`` element
        wait_policy: First/other row timeouts. Defaults to configuration.
        row_factory: Builds a row from ``(table, index)``. Defaults to
            :class:`TableRow`.
    """

    thead_xpath: str = "/thead"
    header_row_xpath: str = "/tr"
    header_cell_xpath: str = "/th"

    tbody_xpath: str = "/tbody"
    row_xpath: str = "/tr"
    cell_xpath: str = "/td"

    def __init__(
        self,
        name: str,
        engine: ElementEngine,
        base_xpath: str,
        wait_policy: Optional[WaitPolicy] = None,
        row_factory: Optional[RowFactory] = None,
    ):
        if not base_xpath or not str(base_xpath).strip():
            raise InvalidArgumentError(f"Table '{name}' requires a base xpath")
        self.base_xpath = str(base_xpath).strip()
        self.criteria: Dict[str, str] = {}
        self._row_factory = row_factory
        self._headers: Optional[List[TableHeader]] = None
        super().__init__(name, engine, self._rows_locator(), wait_policy)

    # =========================================================================
    # Locators
    # =========================================================================

    @property
    def headers_xpath(self) -> str:
        return self.base_xpath + self.thead_xpath + self.header_row_xpath + self.header_cell_xpath

    @property
    def rows_xpath(self) -> str:
        return self.base_xpath + self.tbody_xpath + self.row_xpath

    def _criteria_xpath(self, criteria: Mapping[str, str]) -> str:
        cell = self.cell_xpath.lstrip("/")
        parts = []
        for header, value in criteria.items():
            position = self.get_header_index(header)
            if position < 0:
                raise InvalidArgumentError(
                    f"Cannot search {self.name} by unknown header '{header}'"
                )
            parts.append(f"[{cell}[{position}][contains(., {xpath_literal(str(value))})]]")
        return "".join(parts)

    def _rows_locator(self, criteria: Optional[Mapping[str, str]] = None) -> LocatorExpression:
        search = self._criteria_xpath(criteria) if criteria else ""
        return LocatorExpression.by_xpath(self.rows_xpath + search)

    def get_row_xpath(self, index: int, criteria: Optional[Mapping[str, str]] = None) -> str:
        """Positional XPath of the row at ``index``, optionally filtered by criteria."""
        return self._rows_locator(criteria).nth(index).selector

    # =========================================================================
    # Headers
    # =========================================================================

    def get_headers(self, reset: bool = False) -> List[TableHeader]:
        """Header cells, read once and memoized until ``reset``."""
        if self._headers is None or reset:
            headers: List[TableHeader] = []
            header_cells = WebList(f"{self.name} Headers", self.engine, self.headers_xpath, self.wait_policy)
            header_cells.for_each(
                lambda h: headers.append(
                    TableHeader(len(headers) + 1, normalize_space(h.text), h.displayed.get())
                )
            )
            logger.debug(f"{self.name} headers: {[h.header for h in headers]}")
            self._headers = headers
        return self._headers

    def get_headers_map(self, reset: bool = False) -> Dict[int, str]:
        return {h.index: h.header for h in self.get_headers(reset)}

    def get_visible_headers_map(self) -> Dict[int, str]:
        return {h.index: h.header for h in self.get_headers() if h.visible}

    def get_header_index(self, header: str) -> int:
        """1-based position of ``header`` (case-insensitive), or -1."""
        for h in self.get_headers():
            if same_header(h.header, header):
                return h.index
        return -1

    def get_header(self, header: Union[str, int]) -> WebElement:
        position = header if isinstance(header, int) else self.get_header_index(header)
        if position < 1:
            raise InvalidArgumentError(f"Header not found in {self.name}: '{header}'")
        return WebElement(
            f"{self.name} Header {position}",
            self.engine,
            LocatorExpression.by_xpath(self.headers_xpath).nth(position - 1),
        )

    # =========================================================================
    # Rows
    # =========================================================================

    def get_record(self, index: int) -> R:
        if index < 0:
            raise InvalidArgumentError(f"Row index must not be negative: {index}")
        if self._row_factory is not None:
            return self._row_factory(self, index)
        return TableRow(f"{self.name} Row {index}", self, index)

    def is_data_available(self) -> bool:
        """Whether the first body row renders within the first-row timeout."""
        first_row = WebElement(
            f"{self.name} first row",
            self.engine,
            LocatorExpression.by_xpath(self.rows_xpath).nth(0),
        )
        return first_row.present.wait_is_true(
            self.wait_policy.first_timeout_seconds,
            self.wait_policy.poll_interval_ms,
        )

    def with_criteria(self, criteria: Optional[Mapping[str, str]]) -> "WebTable[R]":
        """
        A view of this table restricted to rows whose cells contain the
        given ``{header: value}`` pairs.
        """
        view = copy.copy(self)
        view.criteria = dict(criteria or {})
        view.locator = self._rows_locator(view.criteria)
        logger.debug(f"{self.name} search criteria set to {view.criteria}")
        return view

    def find_all(
        self,
        criteria: Optional[Mapping[str, str]] = None,
        predicate: Optional[Callable[[R], bool]] = None,
    ) -> List[R]:
        """
        Rows matching ``criteria`` (through XPath) and ``predicate``.

        The rows are positional handles: each one reads whatever row sits at
        its index when it is used. On a :class:`MultiPageTable` that is the
        page displayed at that time, so use :meth:`read_rows` to keep the
        values of rows spread over several pages.
        """
        with allure.step(f"Find all rows of {self.name} matching {dict(criteria or {})}"):
            view = self.with_criteria(criteria) if criteria else self
            rows: List[R] = []
            view.on_match(predicate or (lambda _: True), rows.append)
            logger.info(f"{self.name}: {len(rows)} row(s) matched {dict(criteria or {})}")
            return rows

    def read_rows(
        self,
        criteria: Optional[Mapping[str, str]] = None,
        predicate: Optional[Callable[[R], bool]] = None,
    ) -> List[List[TableCell]]:
        """
        Cell snapshots of the rows matching ``criteria`` and ``predicate``.

        Each row is read while it is displayed, so the values stay valid after
        a multi-page traversal has moved on to another page.
        """
        with allure.step(f"Read rows of {self.name} matching {dict(criteria or {})}"):
            view = self.with_criteria(criteria) if criteria else self
            rows: List[List[TableCell]] = []
            view.on_match(
                predicate or (lambda _: True),
                lambda row: rows.append(row.read_row_cells()),
            )
            logger.info(f"{self.name}: read {len(rows)} row(s) matching {dict(criteria or {})}")
            return rows

    def find_first(
        self,
        criteria: Optional[Mapping[str, str]] = None,
        predicate: Optional[Callable[[R], bool]] = None,
    ) -> Optional[R]:
        """First row matching ``criteria`` and ``predicate``, or None."""
        with allure.step(f"Find first row of {self.name} matching {dict(criteria or {})}"):
            view = self.with_criteria(criteria) if criteria else self
            return view.get_first(predicate)


__all__ = [
    "RowFactory",
    "TableCell",
    "TableHeader",
    "TableRow",
    "WebTable",
]
