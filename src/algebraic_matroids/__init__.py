"""Top-level package API for algebraic_matroids.

This package implements the **algebraic matroid** of a prime ideal P in a
polynomial ring: the ground set is the set of ring variables, and a subset S
is independent when its coordinates are algebraically independent on the
variety of P. Ranks, circuits and circuit polynomials are read off from the
elimination ideals P ∩ K[S], which are cached per subset.

Public API:
- PolynomialRing, Ideal
- AlgebraicMatroid, CircuitCheck, CircuitStatus
- SympyEngine, SingularEngine (algebra backends)
- Reporting helpers and built-in example ideals
"""

from .ring import Ideal, PolynomialRing
from .engine import AlgebraEngine, SympyEngine
from .singular import SingularEngine, SingularIdeal
from .matroid import AlgebraicMatroid, CircuitCheck, CircuitStatus, ProjectionCache
from .circuits import fundamental_circuit, powerset
from .degree import base_degree, generic_point_ideal
from .exceptions import (
    AlgebraicMatroidError,
    DegreeMismatchError,
    EngineError,
    InvalidSubsetError,
    NoCircuitFoundError,
    NotPrimeError,
    PrimalityUndecidedError,
    SingularError,
)
from .report import RankReportOptions, format_circuit, format_rank_table, rank_table
from .examples import (
    two_point_interpolation_ideal,
    two_point_interpolation_system,
    twisted_cubic_ideal,
)

__all__ = [
    "PolynomialRing",
    "Ideal",
    "AlgebraEngine",
    "SympyEngine",
    "SingularEngine",
    "SingularIdeal",
    "AlgebraicMatroid",
    "CircuitCheck",
    "CircuitStatus",
    "ProjectionCache",
    "fundamental_circuit",
    "powerset",
    "base_degree",
    "generic_point_ideal",
    "AlgebraicMatroidError",
    "DegreeMismatchError",
    "EngineError",
    "InvalidSubsetError",
    "NoCircuitFoundError",
    "NotPrimeError",
    "PrimalityUndecidedError",
    "SingularError",
    "RankReportOptions",
    "format_rank_table",
    "format_circuit",
    "rank_table",
    "two_point_interpolation_ideal",
    "two_point_interpolation_system",
    "twisted_cubic_ideal",
]
