"""Ranks of block unions for the two-point interpolation example.

A line y = C1*x + C2 and a quadratic y = D1*x^2 + D2*x + D3 both pass
through the points A = (A1, A2) and B = (B1, B2). The script prints the rank
of the union of every combination of the blocks A, B, C, D, then a basis,
a fundamental circuit and its circuit polynomial.

Run:
    python examples/two_point_rank_table.py
"""

from __future__ import annotations

import logging
import random

from algebraic_matroids import (
    AlgebraicMatroid,
    format_circuit,
    format_rank_table,
    rank_table,
    two_point_interpolation_ideal,
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    P, blocks = two_point_interpolation_ideal()
    M = AlgebraicMatroid(P)
    print(M)
    print("Prime ideal:", P)

    print("\nRanks of block unions:")
    print(format_rank_table(rank_table(M, blocks)))

    A, B, C, D = blocks["A"], blocks["B"], blocks["C"], blocks["D"]
    basis = {*A, *B, D[0]}
    print("Basis", [str(s) for s in M.sorted(basis)], "->", M.is_basis(basis))

    circuit = M.fundamental_circuit(basis, C[0])
    print("Fundamental circuit of", C[0], ":", format_circuit(M, circuit))

    # Monte-Carlo: two independent draws must agree.
    print("Base degree:", M.base_degree(basis, rng=random.Random(0), trials=2))


if __name__ == "__main__":
    main()
