from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Allow `pytest` to import the package directly from the src layout
# without requiring an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from algebraic_matroids import (  # noqa: E402
    AlgebraicMatroid,
    SympyEngine,
    two_point_interpolation_ideal,
    twisted_cubic_ideal,
)


class CountingEngine(SympyEngine):
    """SympyEngine that records how often each primitive is called."""

    def __init__(self):
        super().__init__()
        self.calls = {"eliminate": 0, "codimension": 0, "generators": 0, "degree": 0}

    def eliminate(self, ideal, variables):
        self.calls["eliminate"] += 1
        return super().eliminate(ideal, variables)

    def codimension(self, ideal):
        self.calls["codimension"] += 1
        return super().codimension(ideal)

    def generators(self, ideal):
        self.calls["generators"] += 1
        return super().generators(ideal)

    def degree(self, ideal):
        self.calls["degree"] += 1
        return super().degree(ideal)


@pytest.fixture
def counting_engine():
    return CountingEngine()


@pytest.fixture
def cubic():
    P, xyz = twisted_cubic_ideal()
    return AlgebraicMatroid(P), xyz


@pytest.fixture(scope="session")
def two_point():
    """The worked example: points A, B with the line C and quadratic D through them."""
    P, blocks = two_point_interpolation_ideal()
    return AlgebraicMatroid(P), blocks
