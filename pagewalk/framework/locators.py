"""
================================================================================
Locator Expressions
================================================================================

Resolves logical locators (by id, name, class, tag, text, raw XPath or CSS)
into the single query string consumed by the automation engine.

Families:
    - xpath: id, name, class name, tag name, xpath, link text, partial link text
    - css:   css selector

Locators can only be chained within one family. Positional access
(``nth``) produces ``(xpath)[n + 1]`` for XPath and ``css >> nth=n`` for CSS.

Usage:
    >>> rows = LocatorExpression.by_xpath("//table[@id='users']/tbody/tr")
    >>> rows.nth(0).query
    "xpath=(//table[@id='users']/tbody/tr)[1]"

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .errors import InvalidLocatorError


XPATH = "xpath"
CSS = "css"


def xpath_literal(value: str) -> str:
    """
    Quote a string as an XPath 1.0 literal.

    XPath 1.0 has no escape sequence, so values containing both quote
    characters are split and joined with ``concat()``.
    """
    if value is None:
        raise InvalidLocatorError("Cannot quote None as an XPath literal")
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'

    parts = []
    for i, chunk in enumerate(value.split("'")):
        if i > 0:
            parts.append('"\'"')
        if chunk:
            parts.append(f"'{chunk}'")
    return "concat(" + ", ".join(parts) + ")"


def normalize_space(value: str) -> str:
    """Collapse whitespace runs the same way XPath ``normalize-space()`` does."""
    return " ".join(value.split())


def _require_value(kind: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise InvalidLocatorError(f"Cannot build a '{kind}' locator from a blank value")
    return str(value).strip()


@dataclass(frozen=True)
class LocatorExpression:
    """
    An immutable, resolved locator.

    Attributes:
        kind: Logical locator kind (id, name, class_name, ...)
        selector: Resolved XPath or CSS expression
        family: Either ``xpath`` or ``css``
    """
    kind: str
    selector: str
    family: str

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def by_id(cls, value: str) -> "LocatorExpression":
        value = _require_value("id", value)
        return cls("id", f"//*[@id={xpath_literal(value)}]", XPATH)

    @classmethod
    def by_name(cls, value: str) -> "LocatorExpression":
        value = _require_value("name", value)
        return cls("name", f"//*[@name={xpath_literal(value)}]", XPATH)

    @classmethod
    def by_class_name(cls, value: str) -> "LocatorExpression":
        """
        Match elements carrying ``value`` as one of their class tokens.

        Raises:
            InvalidLocatorError: For compound class names such as "btn primary"
        """
        value = _require_value("class_name", value)
        if len(value.split()) > 1:
            raise InvalidLocatorError(
                f"Compound class names are not permitted: '{value}'"
            )
        token = xpath_literal(f" {value} ")
        return cls(
            "class_name",
            f"//*[contains(concat(' ', normalize-space(@class), ' '), {token})]",
            XPATH,
        )

    @classmethod
    def by_tag_name(cls, value: str) -> "LocatorExpression":
        value = _require_value("tag_name", value)
        if len(value.split()) > 1:
            raise InvalidLocatorError(f"Invalid tag name: '{value}'")
        return cls("tag_name", f"//{value}", XPATH)

    @classmethod
    def by_xpath(cls, value: str) -> "LocatorExpression":
        return cls("xpath", _require_value("xpath", value), XPATH)

    @classmethod
    def by_css_selector(cls, value: str) -> "LocatorExpression":
        return cls("css_selector", _require_value("css_selector", value), CSS)

    @classmethod
    def by_link_text(cls, value: str) -> "LocatorExpression":
        text = normalize_space(_require_value("link_text", value))
        return cls("link_text", f"//a[normalize-space(.)={xpath_literal(text)}]", XPATH)

    @classmethod
    def by_partial_link_text(cls, value: str) -> "LocatorExpression":
        text = normalize_space(_require_value("partial_link_text", value))
        return cls(
            "partial_link_text",
            f"//a[contains(normalize-space(.), {xpath_literal(text)})]",
            XPATH,
        )

    @classmethod
    def of(cls, kind: str, value: str) -> "LocatorExpression":
        """
        Build a locator from a kind name such as ``"id"`` or ``"link_text"``.

        Raises:
            InvalidLocatorError: For an unknown kind or a blank value
        """
        factory = _FACTORIES.get(str(kind).strip().lower())
        if factory is None:
            raise InvalidLocatorError(f"Unknown locator kind: '{kind}'")
        return factory(cls, value)

    @classmethod
    def chain(cls, *locators: "LocatorExpression") -> "LocatorExpression":
        """
        Chain locators into one path, each searched inside the previous one.

        Raises:
            InvalidLocatorError: When no locator is given or families are mixed
        """
        if not locators:
            raise InvalidLocatorError("Cannot chain an empty sequence of locators")
        result = locators[0]
        for locator in locators[1:]:
            result = result.child(locator)
        return result

    # =========================================================================
    # Derived locators
    # =========================================================================

    def child(self, other: "LocatorExpression") -> "LocatorExpression":
        """Return a locator for ``other`` searched inside this locator."""
        if not isinstance(other, LocatorExpression):
            raise InvalidLocatorError(f"Cannot chain non-locator value: {other!r}")
        if other.family != self.family:
            raise InvalidLocatorError(
                f"Cannot chain {other.family} locator '{other.selector}' "
                f"onto {self.family} locator '{self.selector}'"
            )

        if self.family == CSS:
            selector = f"{self.selector} >> {other.selector}"
        else:
            step = other.selector
            if step.startswith("("):
                raise InvalidLocatorError(
                    f"Cannot chain a grouped xpath expression: '{step}'"
                )
            # "./x" and ".//x" are relative to the parent; "../x" keeps its axis
            if step.startswith("./"):
                step = step[1:]
            if not step.startswith("/"):
                step = "/" + step
            selector = f"{self.selector}{step}"

        logger.trace(f"Chained locator resolved to: {selector}")
        return LocatorExpression("chained", selector, self.family)

    def nth(self, index: int) -> "LocatorExpression":
        """Return the positional locator for the zero-based ``index``."""
        if self.family == CSS:
            return LocatorExpression(self.kind, f"{self.selector} >> nth={index}", CSS)
        return LocatorExpression(self.kind, f"({self.selector})[{index + 1}]", XPATH)

    @property
    def query(self) -> str:
        """Engine query string, prefixed with the selector engine name."""
        return f"{self.family}={self.selector}"

    def __str__(self) -> str:
        return f"By.{self.kind}: {self.selector}"


_FACTORIES = {
    "id": LocatorExpression.by_id.__func__,
    "name": LocatorExpression.by_name.__func__,
    "class_name": LocatorExpression.by_class_name.__func__,
    "tag_name": LocatorExpression.by_tag_name.__func__,
    "xpath": LocatorExpression.by_xpath.__func__,
    "css_selector": LocatorExpression.by_css_selector.__func__,
    "link_text": LocatorExpression.by_link_text.__func__,
    "partial_link_text": LocatorExpression.by_partial_link_text.__func__,
}


def to_locator(value) -> LocatorExpression:
    """
    Coerce a raw value into a locator.

    Strings starting with ``/``, ``./`` or ``(`` are treated as XPath;
    other strings as CSS selectors.
    """
    if isinstance(value, LocatorExpression):
        return value
    if not isinstance(value, str):
        raise InvalidLocatorError(f"Unsupported locator value: {value!r}")
    stripped = value.strip()
    if stripped.startswith(("/", "./", "(")):
        return LocatorExpression.by_xpath(stripped)
    return LocatorExpression.by_css_selector(stripped)


__all__ = [
    "CSS",
    "XPATH",
    "LocatorExpression",
    "normalize_space",
    "to_locator",
    "xpath_literal",
]
