"""
Pagewalk: lazy, wait-aware element collections and paginated tables for
browser UI automation.
"""

from pagewalk.framework import (
    LocatorExpression,
    MultiPageTable,
    PlaywrightEngine,
    WaitPolicy,
    WebElement,
    WebList,
    WebTable,
)

__version__ = "1.0.0"

__all__ = [
    "LocatorExpression",
    "MultiPageTable",
    "PlaywrightEngine",
    "WaitPolicy",
    "WebElement",
    "WebList",
    "WebTable",
    "__version__",
]
