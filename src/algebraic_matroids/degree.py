"""The base degree of a basis.

For a basis B, fixing the B-coordinates at a generic point leaves a finite
fiber over the remaining coordinates. Its number of points (with
multiplicity) does not depend on the point chosen, outside a measure-zero set.

This is a Monte-Carlo computation: the point is drawn at random from a huge
range, so an unlucky draw is possible but extremely unlikely. Pass
``trials > 1`` to repeat with independent points and require agreement.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Iterable, Optional

import sympy as sp

from .exceptions import DegreeMismatchError
from .ring import Ideal

if TYPE_CHECKING:
    from .matroid import AlgebraicMatroid

_logger = logging.getLogger(__name__)

LOWER = 1
UPPER = 2**100


def generic_point_ideal(
    matroid: "AlgebraicMatroid",
    basis: Iterable[sp.Symbol],
    *,
    rng: Optional[random.Random] = None,
    lower: int = LOWER,
    upper: int = UPPER,
) -> Ideal:
    """The ideal <x - r_x : x in basis> for independent random r_x."""
    engine = matroid.engine
    ring = matroid.polynomial_ring
    K = engine.coefficient_field(ring)
    gens = [x - engine.random_field_element(K, lower, upper, rng) for x in matroid.sorted(basis)]
    return engine.make_ideal(ring, gens)


def base_degree(
    matroid: "AlgebraicMatroid",
    basis: Iterable[sp.Symbol],
    *,
    rng: Optional[random.Random] = None,
    trials: int = 1,
    lower: int = LOWER,
    upper: int = UPPER,
) -> int:
    """Degree of P + <x - r_x : x in basis> for a random point r.

    Raises
    ------
    AssertionError
        If `basis` is not a basis of `matroid`.
    DegreeMismatchError
        If ``trials > 1`` and the random points give different degrees.
    """
    B = matroid.subset(basis)
    if not matroid.is_basis(B):
        raise AssertionError(f"{matroid.format_subset(B)} is not a basis")
    if trials < 1:
        raise ValueError(f"trials must be positive; got {trials}")

    engine = matroid.engine
    degrees = []
    for _ in range(int(trials)):
        point = generic_point_ideal(matroid, B, rng=rng, lower=lower, upper=upper)
        degrees.append(engine.degree(engine.add_ideals(point, matroid.prime_ideal)))

    _logger.debug("base degree of %s: %s", matroid.format_subset(B), degrees)
    if len(set(degrees)) != 1:
        raise DegreeMismatchError(degrees)
    return degrees[0]
