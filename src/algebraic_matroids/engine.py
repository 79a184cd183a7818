from __future__ import annotations

"""Algebra engines: the commutative-algebra primitives behind the matroid.

`AlgebraicMatroid` never computes Groebner bases itself. It asks an
`AlgebraEngine` for elimination ideals, codimensions, generators, primality
and degrees. Two engines ship with the package:

- `SympyEngine` (this module): pure SymPy, always available. Good for small
  and medium examples.
- `SingularEngine` (:mod:`algebraic_matroids.singular`): delegates to the
  Singular executable, which is much faster and decides primality in general.

Notes
-----
`SympyEngine.is_prime` is a *sound* decision procedure for a large, practical
class of ideals (principal ideals, ideals that factor visibly, and ideals that
become a field extension of degree given by a single irreducible polynomial
over a transcendence basis). Outside that class it raises
`PrimalityUndecidedError` instead of guessing.
"""

import logging
import random
from abc import ABC, abstractmethod
from itertools import combinations, product
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import sympy as sp

from .exceptions import PrimalityUndecidedError
from .ring import Ideal, PolynomialRing, symbols_of

_logger = logging.getLogger(__name__)


class AlgebraEngine(ABC):
    """Interface between the matroid layer and a computer algebra backend."""

    @abstractmethod
    def is_prime(self, ideal: Ideal) -> bool:
        ...

    @abstractmethod
    def eliminate(self, ideal: Ideal, variables: Iterable[sp.Symbol]) -> Ideal:
        """Return ideal ∩ K[remaining variables], as an ideal of the same ring."""

    @abstractmethod
    def codimension(self, ideal: Ideal) -> int:
        ...

    @abstractmethod
    def generators(self, ideal: Ideal) -> Tuple[sp.Expr, ...]:
        """Return a canonical generating set (a reduced Groebner basis)."""

    @abstractmethod
    def degree(self, ideal: Ideal) -> int:
        """Return the degree (vector space dimension) of a zero-dimensional ideal."""

    def variables(self, polynomial: sp.Expr) -> FrozenSet[sp.Symbol]:
        return symbols_of(polynomial)

    def ambient_ring(self, ideal: Ideal) -> PolynomialRing:
        return ideal.ring

    def coefficient_field(self, ring: PolynomialRing) -> Any:
        return ring.domain

    def make_ideal(self, ring: PolynomialRing, generators: Iterable[sp.Expr]) -> Ideal:
        return Ideal.from_generators(ring, generators)

    def add_ideals(self, a: Ideal, b: Ideal) -> Ideal:
        return a + b

    def random_field_element(
        self,
        field: Any,
        lower: int,
        upper: int,
        rng: Optional[random.Random] = None,
    ) -> sp.Expr:
        """Draw a uniformly random integer in [lower, upper] as an element of `field`."""
        if lower > upper:
            raise ValueError(f"empty sampling range [{lower}, {upper}]")
        r = (rng or random).randint(int(lower), int(upper))
        return field.to_sympy(field.convert(r))


# ---------------------------------------------------------------------
# Monomial ideal helpers
# ---------------------------------------------------------------------


def _leading_supports(monomials: Sequence[Tuple[int, ...]]) -> List[FrozenSet[int]]:
    return [frozenset(i for i, e in enumerate(m) if e > 0) for m in monomials]


def _independent_sets(monomials: Sequence[Tuple[int, ...]], n: int) -> List[Tuple[int, ...]]:
    """All largest sets U of variable indices with no leading monomial supported in U.

    Empty for the unit ideal (a constant leading monomial).
    """
    supports = _leading_supports(monomials)
    for k in range(n, -1, -1):
        found = [U for U in combinations(range(n), k) if all(not s <= set(U) for s in supports)]
        if found:
            return found
    return []


def _max_independent_set(monomials: Sequence[Tuple[int, ...]], n: int) -> Optional[Tuple[int, ...]]:
    sets = _independent_sets(monomials, n)
    return sets[0] if sets else None


def _divides(a: Tuple[int, ...], b: Tuple[int, ...]) -> bool:
    return all(x <= y for x, y in zip(a, b))


def _minimal_monomials(monomials: Iterable[Tuple[int, ...]]) -> List[Tuple[int, ...]]:
    uniq = list(dict.fromkeys(monomials))
    return [m for m in uniq if not any(o != m and _divides(o, m) for o in uniq)]


def _count_standard_monomials(monomials: Sequence[Tuple[int, ...]], n: int) -> int:
    """Number of monomials outside a zero-dimensional monomial ideal."""
    bounds: List[int] = []
    for i in range(n):
        pure = [m[i] for m in monomials if m[i] > 0 and all(e == 0 for j, e in enumerate(m) if j != i)]
        if not pure:
            raise ValueError("ideal is not zero-dimensional")
        bounds.append(min(pure))
    count = 0
    for exps in product(*(range(b) for b in bounds)):
        if not any(_divides(m, exps) for m in monomials):
            count += 1
    return count


class SympyEngine(AlgebraEngine):
    """Algebra engine built on `sympy.groebner`.

    Groebner bases are memoized per (ideal, order), so repeated codimension,
    generator and degree queries on the same ideal cost one basis computation.
    """

    def __init__(self, order: str = "grevlex"):
        self.order = order
        self._bases: Dict[Tuple[Ideal, str], sp.GroebnerBasis] = {}

    # -----------------------------
    # Groebner bases
    # -----------------------------

    def groebner(self, ideal: Ideal, order: Optional[str] = None, gens: Optional[Sequence[sp.Symbol]] = None):
        """Reduced Groebner basis of a nonzero ideal."""
        if ideal.is_zero():
            raise ValueError("the zero ideal has no Groebner basis to compute")
        order = order or self.order
        gens = tuple(gens) if gens is not None else ideal.ring.symbols
        key = (ideal, f"{order}:{','.join(str(s) for s in gens)}")
        G = self._bases.get(key)
        if G is None:
            _logger.debug("groebner basis (%s) of %d generators", order, len(ideal.generators))
            G = sp.groebner(list(ideal.generators), *gens, order=order, domain=ideal.ring.domain)
            self._bases[key] = G
        return G

    def _leading_monomials(self, ideal: Ideal) -> List[Tuple[int, ...]]:
        G = self.groebner(ideal)
        syms = ideal.ring.symbols
        return [sp.Poly(g, *syms).monoms(order=self.order)[0] for g in G.exprs]

    def dimension(self, ideal: Ideal) -> int:
        """Krull dimension of R/I; -1 for the unit ideal."""
        n = ideal.ring.nvars
        if ideal.is_zero():
            return n
        U = _max_independent_set(self._leading_monomials(ideal), n)
        return -1 if U is None else len(U)

    def independent_variables(self, ideal: Ideal) -> Tuple[sp.Symbol, ...]:
        """A maximal set of variables algebraically independent modulo `ideal`."""
        syms = ideal.ring.symbols
        if ideal.is_zero():
            return syms
        U = _max_independent_set(self._leading_monomials(ideal), len(syms))
        if U is None:
            return ()
        return tuple(syms[i] for i in U)

    # -----------------------------
    # AlgebraEngine interface
    # -----------------------------

    def eliminate(self, ideal: Ideal, variables: Iterable[sp.Symbol]) -> Ideal:
        ring = ideal.ring
        elim = ring.sorted(set(variables))
        if not elim or ideal.is_zero():
            return ideal
        keep = [s for s in ring.symbols if s not in set(elim)]
        G = self.groebner(ideal, order="lex", gens=elim + keep)
        elim_set = set(elim)
        kept = [g for g in G.exprs if not (g.free_symbols & elim_set)]
        _logger.debug("eliminated %d variables: %d of %d basis elements kept", len(elim), len(kept), len(G.exprs))
        return Ideal.from_generators(ring, kept)

    def codimension(self, ideal: Ideal) -> int:
        return ideal.ring.nvars - self.dimension(ideal)

    def generators(self, ideal: Ideal) -> Tuple[sp.Expr, ...]:
        if ideal.is_zero():
            return ()
        return tuple(self.groebner(ideal).exprs)

    def degree(self, ideal: Ideal) -> int:
        if ideal.is_zero():
            raise ValueError("the zero ideal is not zero-dimensional")
        lms = self._leading_monomials(ideal)
        if any(not any(m) for m in lms):
            return 0
        return _count_standard_monomials(lms, ideal.ring.nvars)

    # -----------------------------
    # Primality
    # -----------------------------

    def _factor(self, expr: sp.Expr, ring: PolynomialRing) -> List[Tuple[sp.Poly, int]]:
        """Irreducible factors of `expr` over the coefficient field of `ring`."""
        gens = ring.sorted(symbols_of(expr, ring))
        if not gens:
            return []
        try:
            _, factors = sp.Poly(expr, *gens, domain=ring.domain).factor_list()
        except NotImplementedError as exc:
            # SymPy has no multivariate factorization over finite fields.
            raise PrimalityUndecidedError(
                f"cannot factor {expr} over {ring.domain} with SymPy; use SingularEngine"
            ) from exc
        return [(f, k) for f, k in factors if not f.is_ground]

    def _factor_witness(self, ideal: Ideal) -> bool:
        """True if some basis element factors as a*b with a, b not in the ideal."""
        G = self.groebner(ideal)
        for g in G.exprs:
            factors = self._factor(g, ideal.ring)
            if sum(m for _, m in factors) < 2:
                continue
            for pf, _m in factors:
                f = pf.as_expr()
                cofactor = sp.Poly(g, *pf.gens, domain=pf.domain).exquo(pf).as_expr()
                if not G.contains(f) and not G.contains(cofactor):
                    _logger.debug("zero divisor witness: %s", f)
                    return True
        return False

    def _is_saturated(self, ideal: Ideal, h: sp.Expr) -> bool:
        """Check I : h^∞ == I."""
        t = sp.Dummy("t")
        syms = ideal.ring.symbols
        S = sp.groebner(
            list(ideal.generators) + [1 - t * h], t, *syms, order="lex", domain=ideal.ring.domain
        )
        G = self.groebner(ideal)
        return all(G.contains(s) for s in S.exprs if t not in s.free_symbols)

    def _decide_over(self, ideal: Ideal, U: Sequence[sp.Symbol]) -> Optional[bool]:
        """Decide primality through the extension of `ideal` to K(U)[y].

        Returns None when, for every choice of the last dependent variable,
        the extension is neither given by linear equations nor in shape
        position.
        """
        dependent = [s for s in ideal.ring.symbols if s not in set(U)]
        for last in reversed(dependent):
            ys = [s for s in dependent if s != last] + [last]
            decided = self._decide_with_order(ideal, ys, U)
            if decided is not None:
                return decided
        return None

    def _decide_with_order(self, ideal: Ideal, ys: Sequence[sp.Symbol], U: Sequence[sp.Symbol]) -> Optional[bool]:
        lex = self.groebner(ideal, order="lex", gens=list(ys) + list(U))

        # Leading terms with respect to the dependent variables, coefficients in K[U].
        y_polys = [sp.Poly(g, *ys) for g in lex.exprs]
        y_lms = [p.monoms(order="lex")[0] for p in y_polys]
        minimal = set(_minimal_monomials(y_lms))
        m = len(ys)
        units = [tuple(1 if j == i else 0 for j in range(m)) for i in range(m)]

        if minimal != set(units):
            last = ys[-1]
            powers = [mono for mono in minimal if mono not in units]
            if len(powers) != 1 or minimal != set(units[:-1]) | set(powers) or powers[0][-1] < 2:
                return None
            # Shape position: K(U)[y]/I^e = K(U)[last]/(g).
            g = next(
                e
                for e, mono in zip(lex.exprs, y_lms)
                if mono == powers[0] and (e.free_symbols & set(ys)) == {last}
            )
            factors = self._factor(g, ideal.ring)
            in_last = [(f, k) for f, k in factors if last in f.free_symbols]
            if len(in_last) != 1 or in_last[0][1] != 1:
                return False

        # I^e is maximal in K(U)[y]; I is prime iff I is its contraction.
        h_factors = set()
        for p in y_polys:
            lc = p.domain.to_sympy(p.LC(order="lex"))
            if lc.free_symbols:
                h_factors.update(f.as_expr() for f, _ in self._factor(lc, ideal.ring))
        if not h_factors:
            return True
        h = sp.Mul(*sorted(h_factors, key=sp.default_sort_key))
        return self._is_saturated(ideal, h)

    def is_prime(self, ideal: Ideal) -> bool:
        if ideal.is_zero():
            return True
        G = self.groebner(ideal)
        if any(g.is_number for g in G.exprs):
            return False
        if self._factor_witness(ideal):
            return False
        if len(G.exprs) == 1:
            # A single irreducible generator.
            return True

        syms = ideal.ring.symbols
        for U in _independent_sets(self._leading_monomials(ideal), len(syms)):
            decided = self._decide_over(ideal, [syms[i] for i in U])
            if decided is not None:
                return decided
        raise PrimalityUndecidedError(
            "cannot decide primality with SymPy; use SingularEngine for this ideal"
        )
