"""Make the ``src`` layout importable without installing the package."""

from __future__ import annotations

import pathlib
import sys

import pytest

SRC = pathlib.Path(__file__).resolve().parents[1] / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _fresh_compile_cache():
    from segmatch.engine.parser import clear_cache

    clear_cache()
    yield
