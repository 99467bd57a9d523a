"""
================================================================================
Pagewalk Framework
================================================================================

Wait-aware element collections for browser UI automation.

Components:
    - locators: Logical locators resolved into engine query strings
    - element: Elements and their present/enabled/displayed/clickable probes
    - web_list: Lazy indexed collections with bounded per-element waits
    - web_table: Table rows, headers, cells and search criteria
    - multi_page_table: Tables walked across pagination controls
    - engine: Boundary to the automation engine (Playwright)

Author: Automation Team
License: MIT
================================================================================
"""

from .errors import (
    InvalidArgumentError,
    InvalidLocatorError,
    NoSuchElementError,
    PagewalkError,
    UnsupportedOperationError,
)
from .locators import LocatorExpression, normalize_space, to_locator, xpath_literal
from .wait_helpers import WaitPolicy, poll_until, poll_until_async
from .engine import ElementEngine, PlaywrightEngine
from .element import ElementProbe, IndexedElement, WebElement, optional_element
from .web_list import WebList, WebListIterator
from .web_table import TableCell, TableHeader, TableRow, WebTable
from .multi_page_table import MultiPageTable, PaginatedIterator, PaginationState

__all__ = [
    "PagewalkError",
    "InvalidArgumentError",
    "InvalidLocatorError",
    "NoSuchElementError",
    "UnsupportedOperationError",
    "LocatorExpression",
    "normalize_space",
    "to_locator",
    "xpath_literal",
    "WaitPolicy",
    "poll_until",
    "poll_until_async",
    "ElementEngine",
    "PlaywrightEngine",
    "ElementProbe",
    "IndexedElement",
    "WebElement",
    "optional_element",
    "WebList",
    "WebListIterator",
    "TableCell",
    "TableHeader",
    "TableRow",
    "WebTable",
    "MultiPageTable",
    "PaginatedIterator",
    "PaginationState",
]
