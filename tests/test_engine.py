import random

import pytest
import sympy as sp

from algebraic_matroids import PolynomialRing, PrimalityUndecidedError, SympyEngine, twisted_cubic_ideal


def same_up_to_scalar(f, g):
    q = sp.cancel(sp.sympify(f) / sp.sympify(g))
    return q.is_number and q != 0


@pytest.fixture
def engine():
    return SympyEngine()


@pytest.fixture
def xy():
    ring = PolynomialRing.from_names(["x", "y"])
    return ring, ring.symbols


def test_eliminate_twisted_cubic_onto_each_pair(engine):
    P, (x, y, z) = twisted_cubic_ideal()
    (f,) = engine.eliminate(P, [z]).generators
    assert same_up_to_scalar(f, y - x**2)
    (g,) = engine.eliminate(P, [x]).generators
    assert same_up_to_scalar(g, y**3 - z**2)
    assert engine.eliminate(P, [y, z]).is_zero()


def test_eliminate_nothing_returns_the_ideal(engine):
    P, _ = twisted_cubic_ideal()
    assert engine.eliminate(P, []) is P


def test_codimension_and_dimension(engine, xy):
    P, _ = twisted_cubic_ideal()
    assert engine.codimension(P) == 2
    assert engine.dimension(P) == 1

    ring, (x, y) = xy
    assert engine.codimension(ring.ideal([])) == 0
    assert engine.dimension(ring.ideal([x - 1, x])) == -1


def test_independent_variables_of_twisted_cubic(engine):
    P, (x, y, z) = twisted_cubic_ideal()
    U = engine.independent_variables(P)
    assert len(U) == 1


def test_generators_are_a_reduced_basis(engine, xy):
    ring, (x, y) = xy
    (f,) = engine.generators(ring.ideal([x**2 * y, x * y**2, x * y]))
    assert same_up_to_scalar(f, x * y)
    assert engine.generators(ring.ideal([])) == ()


def test_degree_counts_points_with_multiplicity(engine, xy):
    ring, (x, y) = xy
    assert engine.degree(ring.ideal([x**2 - 1, y - x])) == 2
    assert engine.degree(ring.ideal([x**2, y**2])) == 4
    assert engine.degree(ring.ideal([x, x - 1])) == 0
    with pytest.raises(ValueError):
        engine.degree(ring.ideal([x]))


@pytest.mark.parametrize(
    "gens, expected",
    [
        (lambda x, y: [x * y], False),
        (lambda x, y: [x**2], False),
        (lambda x, y: [x - 1, x], False),
        (lambda x, y: [y - x**2], True),
        (lambda x, y: [x**2 + 1, y], True),  # prime over QQ, not absolutely prime
        (lambda x, y: [], True),
    ],
)
def test_is_prime_small_ideals(engine, xy, gens, expected):
    ring, (x, y) = xy
    assert engine.is_prime(ring.ideal(gens(x, y))) is expected


@pytest.mark.parametrize(
    "domain, expected",
    [
        (sp.GF(2), False),  # x^2 + 1 = (x + 1)^2
        (sp.QQ.algebraic_field(sp.I), False),  # (x - i)(x + i)
        (sp.GF(3), True),
    ],
)
def test_is_prime_factors_over_the_coefficient_field(engine, domain, expected):
    ring = PolynomialRing.from_names(["x", "y"], domain=domain)
    x, y = ring.symbols
    assert engine.is_prime(ring.ideal([x**2 + 1])) is expected


def test_is_prime_twisted_cubic(engine):
    P, _ = twisted_cubic_ideal()
    assert engine.is_prime(P) is True


def test_is_prime_detects_non_saturated_ideal(engine):
    ring = PolynomialRing.from_names(["x", "y", "z"])
    x, y, z = ring.symbols
    # Union of the plane x = 0 and the line x = 1, y = z is not prime.
    assert engine.is_prime(ring.ideal([x * (x - 1), x * (y - z)])) is False


def test_is_prime_reports_undecided_ideals(engine, xy):
    ring, (x, y) = xy
    # Q(sqrt 2, sqrt 3) is a field, but no coordinate generates it.
    with pytest.raises(PrimalityUndecidedError):
        engine.is_prime(ring.ideal([x**2 - 2, y**2 - 3]))


def test_random_field_element_is_in_range(engine):
    rng = random.Random(7)
    for _ in range(20):
        r = engine.random_field_element(sp.QQ, 1, 10, rng)
        assert isinstance(r, sp.Rational)
        assert 1 <= r <= 10
    with pytest.raises(ValueError):
        engine.random_field_element(sp.QQ, 5, 1)
