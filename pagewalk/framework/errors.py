"""
================================================================================
Pagewalk Exceptions
================================================================================

Construction errors fail fast. Navigation outcomes and wait timeouts are
booleans, never exceptions. Faults raised by the automation engine are not
wrapped: they propagate to the caller unmodified.

================================================================================
"""


class PagewalkError(Exception):
    """Base class for all errors raised by the pagewalk framework."""
    pass


class InvalidLocatorError(PagewalkError, ValueError):
    """Raised when a locator value is blank or locators of different families are chained."""
    pass


class InvalidArgumentError(PagewalkError, ValueError):
    """Raised when a collection or table is built or addressed with invalid arguments."""
    pass


class NoSuchElementError(PagewalkError, LookupError):
    """Raised by ``next()`` once an element iterator is exhausted."""
    pass


class UnsupportedOperationError(PagewalkError):
    """Raised when trying to mutate a read-only view over live page state."""
    pass


__all__ = [
    "PagewalkError",
    "InvalidLocatorError",
    "InvalidArgumentError",
    "NoSuchElementError",
    "UnsupportedOperationError",
]
