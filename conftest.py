"""
Repository-level pytest configuration.

Why this exists:
  - Point the framework at the repository configuration file when the
    user/CI did not choose one
  - Route framework logs through the standard loguru setup once per session
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from pagewalk.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _pagewalk_env_defaults(project_root: Path) -> Generator[None, None, None]:
    """
    Set environment defaults if not already provided by the user/CI.

    Keeps local runs independent of the working directory.
    """
    os.environ.setdefault("PAGEWALK_CONFIG", str(project_root / "config" / "pagewalk.yaml"))
    init_logger()

    yield
