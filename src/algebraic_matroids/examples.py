from __future__ import annotations

from typing import Dict, Tuple

import sympy as sp

from .ring import Ideal, PolynomialRing


def two_point_interpolation_system() -> Tuple[Ideal, Dict[str, Tuple[sp.Symbol, ...]]]:
    """Line and quadratic through two points, as raw equations (not prime).

    Variables: points A = (A1, A2), B = (B1, B2); line y = C1*x + C2;
    quadratic y = D1*x^2 + D2*x + D3. Both curves pass through A and B.

    The ideal has a second component where the two points coincide; use
    `two_point_interpolation_ideal` for the prime component.
    """
    ring, v = PolynomialRing.from_blocks({"A": 2, "B": 2, "C": 2, "D": 3})
    A, B, C, D = v["A"], v["B"], v["C"], v["D"]
    I = ring.ideal([
        C[0] * A[0] + C[1] - A[1],
        C[0] * B[0] + C[1] - B[1],
        D[0] * A[0] ** 2 + D[1] * A[0] + D[2] - A[1],
        D[0] * B[0] ** 2 + D[1] * B[0] + D[2] - B[1],
    ])
    return I, v


def two_point_interpolation_ideal() -> Tuple[Ideal, Dict[str, Tuple[sp.Symbol, ...]]]:
    """Prime component of `two_point_interpolation_system` (distinct points).

    Saturating by A1 - B1 adds the relation D1*(A1 + B1) + D2 = C1: the
    slope of the chord equals the difference quotient of the quadratic.

    Ranks: {A, B} -> 4, {A, B, C} -> 4, everything -> 5 (one quadratic
    coefficient stays free).
    """
    I, v = two_point_interpolation_system()
    A, B, C, D = v["A"], v["B"], v["C"], v["D"]
    P = I.ring.ideal(list(I.generators) + [D[0] * (A[0] + B[0]) + D[1] - C[0]])
    return P, v


def twisted_cubic_ideal() -> Tuple[Ideal, Tuple[sp.Symbol, sp.Symbol, sp.Symbol]]:
    """The twisted cubic (t, t^2, t^3) in variables x, y, z.

    Rank 1; every pair is a circuit; base degrees 1, 2, 3 for {x}, {y}, {z}.
    """
    ring = PolynomialRing.from_names(["x", "y", "z"])
    x, y, z = ring.symbols
    return ring.ideal([y - x**2, z - x**3]), (x, y, z)
