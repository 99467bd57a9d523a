"""
================================================================================
Web List Test Cases
================================================================================

Lazy indexed collections: indexed access, bounded waits, iteration and
aggregations. Waiting runs against a fake clock.

================================================================================
"""

import allure
import pytest

from pagewalk.framework.element import IndexedElement
from pagewalk.framework.errors import (
    InvalidArgumentError,
    NoSuchElementError,
    UnsupportedOperationError,
)
from pagewalk.framework.locators import LocatorExpression
from pagewalk.framework.wait_helpers import WaitPolicy
from pagewalk.framework.web_list import WebList


pytestmark = pytest.mark.usefixtures("fake_clock")

MENU = LocatorExpression.by_xpath("//ul[@id='menu']/li")
EMPTY_MENU = LocatorExpression.by_xpath("//ul[@id='empty']/li")


@pytest.fixture
def menu(engine) -> WebList:
    engine.add_list(MENU, ["Home", "Products", "About", "Contact"])
    return WebList("Menu", engine, MENU, WaitPolicy())


@pytest.fixture
def empty_menu(engine) -> WebList:
    return WebList("Menu", engine, EMPTY_MENU, WaitPolicy())


@allure.epic("Collections")
@allure.feature("Web List")
class TestConstruction:

    def test_blank_name_is_rejected(self, engine):
        with pytest.raises(InvalidArgumentError):
            WebList("  ", engine, MENU)

    def test_missing_engine_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            WebList("Menu", None, MENU)

    def test_non_callable_factory_is_rejected(self, engine):
        with pytest.raises(InvalidArgumentError):
            WebList("Menu", engine, MENU, record_factory="not callable")

    def test_default_wait_policy_comes_from_config(self, engine, monkeypatch):
        monkeypatch.setenv("PAGEWALK__WAIT__FIRST_TIMEOUT", "7")
        menu = WebList("Menu", engine, "//ul/li")
        assert menu.wait_policy.first_timeout_seconds == 7
        assert menu.wait_policy.other_timeout_seconds == 1


@allure.epic("Collections")
@allure.feature("Web List")
class TestIndexedAccess:

    def test_get_record_builds_positional_handle(self, menu):
        record = menu.get_record(2)
        assert isinstance(record, IndexedElement)
        assert record.locator.selector == "(//ul[@id='menu']/li)[3]"
        assert record.name == "Menu[2]"
        assert record.text == "About"

    def test_get_record_does_not_touch_the_page(self, menu, engine):
        menu.get_record(99)
        assert engine.resolved == []

    def test_negative_index_is_rejected(self, menu):
        with pytest.raises(InvalidArgumentError):
            menu.get_record(-1)

    def test_record_factory(self, engine):
        engine.add_list(MENU, ["Home"])
        menu = WebList("Menu", engine, MENU, WaitPolicy(), record_factory=lambda i, loc: (i, loc.selector))
        assert menu.get_record(0) == (0, "(//ul[@id='menu']/li)[1]")

    def test_has_record(self, menu):
        assert menu.has_record(0) is True
        assert menu.has_record(3) is True
        assert menu.has_record(4) is False

    def test_first_index_waits_first_timeout(self, empty_menu, fake_clock):
        assert empty_menu.has_record(0) is False
        assert fake_clock.elapsed == pytest.approx(10.0, abs=1e-6)

    def test_later_index_waits_other_timeout(self, empty_menu, fake_clock):
        assert empty_menu.has_record(5) is False
        assert fake_clock.elapsed == pytest.approx(1.0, abs=1e-6)

    def test_late_rendering_first_record_is_found(self, engine, fake_clock):
        menu = WebList("Menu", engine, MENU, WaitPolicy())
        original_sleep = fake_clock.sleep

        def sleep(seconds):
            original_sleep(seconds)
            if fake_clock.elapsed >= 3:
                engine.add_list(MENU, ["Home"])

        fake_clock.sleep = sleep
        assert menu.has_record(0) is True
        assert fake_clock.elapsed == pytest.approx(3.0, abs=0.11)


@allure.epic("Collections")
@allure.feature("Web List")
class TestIteration:

    def test_python_iteration(self, menu):
        assert [item.text for item in menu] == ["Home", "Products", "About", "Contact"]

    def test_explicit_iterator_protocol(self, menu):
        iterator = menu.iterator()
        texts = []
        while iterator.has_next():
            texts.append(iterator.next().text)
        assert texts == ["Home", "Products", "About", "Contact"]

        with pytest.raises(NoSuchElementError):
            iterator.next()

    def test_iterator_remove_is_unsupported(self, menu):
        with pytest.raises(UnsupportedOperationError):
            menu.iterator().remove()

    def test_iterators_are_independent(self, menu):
        first, second = iter(menu), iter(menu)
        next(first)
        next(first)
        assert next(second).text == "Home"

    def test_empty_collection_ends_after_first_timeout(self, empty_menu, fake_clock):
        assert list(empty_menu) == []
        assert fake_clock.elapsed == pytest.approx(10.0, abs=1e-6)


@allure.epic("Collections")
@allure.feature("Web List")
class TestAggregations:

    def test_count_and_texts(self, menu):
        assert menu.count() == 4
        assert menu.get_texts() == ["Home", "Products", "About", "Contact"]
        assert [e.index for e in menu.get_elements()] == [0, 1, 2, 3]

    def test_for_each_uses_first_timeout_for_first_record(self, empty_menu, fake_clock):
        seen = []
        empty_menu.for_each(seen.append)
        assert seen == []
        assert fake_clock.elapsed == pytest.approx(10.0, abs=1e-6)

    def test_for_each_with_explicit_timeouts(self, menu, fake_clock):
        seen = []
        menu.for_each(seen.append, first_wait_secs=3, wait_secs=2)
        assert len(seen) == 4
        # only the end-of-list probe waits
        assert fake_clock.elapsed == pytest.approx(2.0, abs=1e-6)

    def test_on_match_and_on_first_match(self, menu):
        matched = []
        menu.on_match(lambda e: "o" in e.text, lambda e: matched.append(e.text))
        assert matched == ["Home", "Products", "About", "Contact"]

        first = []
        menu.on_first_match(lambda e: e.text.startswith("P"), lambda e: first.append(e.text))
        assert first == ["Products"]

    def test_on_match_walks_disabled_but_present_records(self, engine):
        engine.add_list(MENU, ["Home", "Products"], enabled=False)
        menu = WebList("Menu", engine, MENU, WaitPolicy())
        matched = []
        menu.on_match(lambda e: True, lambda e: matched.append(e.text))
        assert matched == ["Home", "Products"]

    def test_get_first(self, menu, empty_menu):
        assert menu.get_first().text == "Home"
        assert menu.get_first(lambda e: e.text == "About").index == 2
        assert menu.get_first(lambda e: e.text == "Blog") is None
        assert empty_menu.get_first() is None

    def test_test_all(self, menu, empty_menu):
        assert menu.test_all(lambda e: len(e.text) > 3) is True
        assert menu.test_all(lambda e: e.text != "About") is False
        assert empty_menu.test_all(lambda e: False) is True

    def test_test_all_stops_at_first_failure(self, menu):
        tested = []

        def predicate(e):
            tested.append(e.index)
            return e.index != 1

        assert menu.test_all(predicate) is False
        assert tested == [0, 1]

    def test_test_any_stops_at_first_match(self, menu, empty_menu):
        tested = []

        def predicate(e):
            tested.append(e.index)
            return e.text.startswith("P")

        assert menu.test_any(predicate) is True
        assert tested == [0, 1]
        assert menu.test_any(lambda e: e.text == "Blog") is False
        assert empty_menu.test_any(lambda e: True) is False

    def test_test_exactly_one(self, menu):
        assert menu.test_exactly_one(lambda e: e.text == "About") is True
        assert menu.test_exactly_one(lambda e: "o" in e.text) is False
        assert menu.test_exactly_one(lambda e: e.text == "Blog") is False

    def test_repr(self, menu):
        assert "Menu" in repr(menu)
