"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and tags tests by the component they exercise.

================================================================================
"""

import pytest


# test module -> component marker
COMPONENT_MARKERS = {
    "test_locators": "locators",
    "test_element": "element",
    "test_wait_helpers": "element",
    "test_web_list": "collection",
    "test_web_table": "table",
    "test_multi_page_table": "pagination",
    "test_engine": "engine",
    "test_global_config": "config",
}


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "unit: Tests running without a browser"
    )

    # Component markers
    config.addinivalue_line(
        "markers", "locators: Tests related to locator resolution"
    )
    config.addinivalue_line(
        "markers", "element: Tests related to element state probes and waits"
    )
    config.addinivalue_line(
        "markers", "collection: Tests related to lazy element collections"
    )
    config.addinivalue_line(
        "markers", "table: Tests related to table rows, headers and cells"
    )
    config.addinivalue_line(
        "markers", "pagination: Tests related to multi-page traversal"
    )
    config.addinivalue_line(
        "markers", "engine: Tests related to the automation engine adapter"
    )
    config.addinivalue_line(
        "markers", "config: Tests related to configuration loading"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds the 'unit' marker to everything under testsuites/unit and a
    component marker derived from the test module name.
    """
    for item in items:
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)

        component = COMPONENT_MARKERS.get(item.path.stem)
        if component:
            item.add_marker(getattr(pytest.mark, component))


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Pagewalk UI Automation Framework",
        "=" * 60,
        "",
    ]
