"""Fundamental-circuit search.

Given a basis B and an element x, the set B ∪ {x} contains exactly one
circuit. We find it by testing subsets of B ∪ {x} from smallest to largest:
small subsets have small coordinate ideals, so the cheap tests come first.
"""

from __future__ import annotations

import logging
from itertools import chain, combinations
from typing import TYPE_CHECKING, FrozenSet, Iterable, Iterator, Sequence

import sympy as sp

from .exceptions import InvalidSubsetError, NoCircuitFoundError

if TYPE_CHECKING:
    from .matroid import AlgebraicMatroid

_logger = logging.getLogger(__name__)


def powerset(elements: Sequence[sp.Symbol]) -> Iterator[FrozenSet[sp.Symbol]]:
    """All subsets of `elements`, by increasing size, combinations in input order."""
    items = list(elements)
    return (
        frozenset(c)
        for c in chain.from_iterable(combinations(items, k) for k in range(len(items) + 1))
    )


def fundamental_circuit(
    matroid: "AlgebraicMatroid",
    basis: Iterable[sp.Symbol],
    x: sp.Symbol,
) -> FrozenSet[sp.Symbol]:
    """Return the unique circuit contained in `basis` ∪ {x}.

    Raises
    ------
    InvalidSubsetError
        If `x` is not in the ground set or already belongs to `basis`.
    NoCircuitFoundError
        If no subset of `basis` ∪ {x} is a circuit (e.g. `basis` is not a
        basis of the matroid).
    """
    B = matroid.subset(basis)
    if x not in matroid.ground_set:
        raise InvalidSubsetError(f"not in the ground set: {x}")
    if x in B:
        raise InvalidSubsetError(f"{x} belongs to the basis; fundamental circuits need x outside B")

    elements = [x] + matroid.sorted(B)
    for tested, S in enumerate(powerset(elements), start=1):
        if matroid.is_circuit(S):
            _logger.debug("fundamental circuit of %s found after %d subsets", x, tested)
            return S

    raise NoCircuitFoundError(
        f"no circuit in B ∪ {{{x}}} with B = {matroid.format_subset(B)}; is B a basis?"
    )
