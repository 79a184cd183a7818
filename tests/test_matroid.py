from itertools import chain, combinations

import pytest
import sympy as sp

from algebraic_matroids import (
    AlgebraicMatroid,
    CircuitStatus,
    InvalidSubsetError,
    NoCircuitFoundError,
    NotPrimeError,
    PolynomialRing,
    SympyEngine,
    twisted_cubic_ideal,
)


def same_up_to_scalar(f, g):
    q = sp.cancel(sp.sympify(f) / sp.sympify(g))
    return q.is_number and q != 0


def all_subsets(elements):
    items = list(elements)
    return [frozenset(c) for c in chain.from_iterable(combinations(items, k) for k in range(len(items) + 1))]


@pytest.fixture
def parabola_and_loop():
    """y = x^2 together with a loop z = 0."""
    ring = PolynomialRing.from_names(["x", "y", "z"])
    x, y, z = ring.symbols
    return AlgebraicMatroid(ring.ideal([y - x**2, z])), (x, y, z)


def test_construction_rejects_non_prime_ideal():
    ring = PolynomialRing.from_names(["x", "y"])
    x, y = ring.symbols
    with pytest.raises(NotPrimeError):
        AlgebraicMatroid(ring.ideal([x * y]))


@pytest.mark.parametrize("domain", [sp.GF(2), sp.QQ.algebraic_field(sp.I)])
def test_construction_rejects_ideal_reducible_over_coefficient_field(domain):
    ring = PolynomialRing.from_names(["x", "y"], domain=domain)
    x, y = ring.symbols
    with pytest.raises(NotPrimeError):
        AlgebraicMatroid(ring.ideal([x**2 + 1]))


def test_structure_accessors(cubic):
    M, (x, y, z) = cubic
    P, _ = twisted_cubic_ideal()
    assert M.ground_set == frozenset({x, y, z})
    assert M.prime_ideal == P
    assert M.ideal() is M.prime_ideal
    assert M.polynomial_ring == P.ring
    assert M.base_ring == P.ring
    assert M.coefficient_ring == sp.QQ
    assert M.coefficient_field == sp.QQ
    assert "x, y, z" in repr(M)


def test_coordinate_ideal_is_computed_once_per_subset(counting_engine):
    P, (x, y, z) = twisted_cubic_ideal()
    M = AlgebraicMatroid(P, engine=counting_engine)

    first = M.coordinate_ideal({x, y})
    assert counting_engine.calls["eliminate"] == 1
    second = M.coordinate_ideal([y, x])
    assert second is first
    assert counting_engine.calls["eliminate"] == 1

    # The ground set is seeded with the prime ideal itself.
    assert M.coordinate_ideal([z, y, x]) is P
    assert counting_engine.calls["eliminate"] == 1
    assert frozenset({x, y}) in M.ideal_cache


def test_failed_elimination_does_not_populate_cache():
    class Failing(SympyEngine):
        def eliminate(self, ideal, variables):
            raise RuntimeError("out of memory")

    P, (x, y, z) = twisted_cubic_ideal()
    M = AlgebraicMatroid(P, engine=Failing())
    with pytest.raises(RuntimeError):
        M.coordinate_ideal({x})
    assert frozenset({x}) not in M.ideal_cache
    assert len(M.ideal_cache) == 1


def test_subsets_outside_ground_set_are_rejected(cubic):
    M, (x, y, z) = cubic
    outside = {x, sp.Symbol("w")}
    for query in (M.rank, M.coordinate_ideal, M.ideal, M.is_independent, M.is_basis, M.is_circuit, M.circuit_check):
        with pytest.raises(InvalidSubsetError):
            query(outside)
    with pytest.raises(TypeError):
        M.rank(x)


def test_ranks_of_twisted_cubic(cubic):
    M, (x, y, z) = cubic
    assert M.rank() == 1
    assert M.rank(set()) == 0
    assert M.rank({x}) == 1
    assert M.rank({y, z}) == 1


def test_rank_axioms_hold_on_every_subset(cubic):
    M, _ = cubic
    subsets = all_subsets(M.sorted(M.ground_set))
    total = M.rank()
    for S in subsets:
        assert M.rank(S) <= len(S)
        assert M.rank(S) <= total
    for S in subsets:
        for T in subsets:
            if S <= T:
                assert M.rank(S) <= M.rank(T)


def test_independence_and_bases(cubic):
    M, (x, y, z) = cubic
    assert M.is_independent(set())
    assert not M.is_basis(set())
    for v in (x, y, z):
        assert M.is_basis({v})
        assert M.is_independent({v})
    assert not M.is_independent({x, y})
    assert not M.is_basis({x, y})


def test_every_pair_of_the_twisted_cubic_is_a_circuit(cubic):
    M, (x, y, z) = cubic
    for C in ({x, y}, {x, z}, {y, z}):
        assert M.is_circuit(C)
        assert not M.is_independent(C)
        for v in C:
            assert M.is_independent(set(C) - {v})
    assert not M.is_circuit({x})
    assert not M.is_circuit({x, y, z})


def test_circuit_check_statuses(parabola_and_loop):
    M, (x, y, z) = parabola_and_loop
    assert M.rank() == 1

    check = M.circuit_check({x, y})
    assert check.status is CircuitStatus.CIRCUIT
    assert same_up_to_scalar(check.polynomial, y - x**2)

    # Principal, but the generator only involves z: {z} is the circuit.
    mismatch = M.circuit_check({x, z})
    assert mismatch.status is CircuitStatus.VARIABLES_MISMATCH
    assert same_up_to_scalar(mismatch.polynomial, z)
    assert not mismatch

    assert M.circuit_check({x}).status is CircuitStatus.NOT_PRINCIPAL
    assert M.circuit_check({x, y, z}).status is CircuitStatus.NOT_PRINCIPAL
    assert M.is_circuit({z})


def test_fundamental_circuit(cubic):
    M, (x, y, z) = cubic
    C = M.fundamental_circuit({x}, y)
    assert C == frozenset({x, y})
    assert M.fundamental_circuit({y}, z) == frozenset({y, z})


def test_fundamental_circuit_of_a_loop(parabola_and_loop):
    M, (x, y, z) = parabola_and_loop
    assert M.fundamental_circuit({x}, z) == frozenset({z})


def test_fundamental_circuit_rejects_bad_input(cubic):
    M, (x, y, z) = cubic
    with pytest.raises(InvalidSubsetError):
        M.fundamental_circuit({x}, x)
    with pytest.raises(InvalidSubsetError):
        M.fundamental_circuit({x}, sp.Symbol("w"))
    with pytest.raises(NoCircuitFoundError):
        M.fundamental_circuit(set(), x)


def test_circuit_polynomials(cubic):
    M, (x, y, z) = cubic
    assert same_up_to_scalar(M.circuit_polynomial({x, y}), y - x**2)
    assert same_up_to_scalar(M.circuit_polynomial({x, z}), z - x**3)
    assert same_up_to_scalar(M.circuit_polynomial({y, z}), y**3 - z**2)
    with pytest.raises(AssertionError):
        M.circuit_polynomial({x})


def test_circuit_polynomial_of_fundamental_circuit_round_trip(cubic):
    M, (x, y, z) = cubic
    via_basis = M.circuit_polynomial({x}, z)
    via_circuit = M.circuit_polynomial(M.fundamental_circuit({x}, z))
    assert same_up_to_scalar(via_basis, via_circuit)
    assert same_up_to_scalar(via_basis, z - x**3)
