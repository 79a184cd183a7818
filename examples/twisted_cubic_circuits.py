"""Circuits and base degrees of the twisted cubic (t, t^2, t^3).

Every pair of coordinates is a circuit; the base degree of {x}, {y}, {z} is
the degree of the corresponding coordinate as a function of t.

Run:
    python examples/twisted_cubic_circuits.py
"""

from __future__ import annotations

import random
from itertools import combinations

from algebraic_matroids import AlgebraicMatroid, format_circuit, twisted_cubic_ideal


def main() -> None:
    P, (x, y, z) = twisted_cubic_ideal()
    M = AlgebraicMatroid(P)

    print("rank:", M.rank())
    for pair in combinations((x, y, z), 2):
        print(" ", format_circuit(M, pair))

    rng = random.Random(2024)
    for v in (x, y, z):
        print(f"base degree of {{{v}}}:", M.base_degree({v}, rng=rng))


if __name__ == "__main__":
    main()
