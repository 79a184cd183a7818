from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional

import sympy as sp

from .engine import AlgebraEngine, SympyEngine
from .exceptions import InvalidSubsetError, NotPrimeError
from .ring import Ideal, PolynomialRing

_logger = logging.getLogger(__name__)

Subset = FrozenSet[sp.Symbol]


class ProjectionCache:
    """Projection ideals keyed by the (unordered) subset of coordinates kept.

    Entries are never evicted: each one is a fact about the fixed prime ideal.
    `get_or_compute` computes a missing entry at most once even when several
    threads ask for the same subset; a failed computation stores nothing.
    """

    def __init__(self, seed: Optional[Mapping[Subset, Ideal]] = None):
        self._ideals: Dict[Subset, Ideal] = dict(seed or {})
        self._lock = threading.Lock()
        self._pending: Dict[Subset, threading.Lock] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._ideals

    def __len__(self) -> int:
        return len(self._ideals)

    def get(self, key: Subset) -> Optional[Ideal]:
        return self._ideals.get(key)

    def keys(self):
        return list(self._ideals)

    def get_or_compute(self, key: Subset, compute: Callable[[], Ideal]) -> Ideal:
        with self._lock:
            hit = self._ideals.get(key)
            if hit is not None:
                return hit
            key_lock = self._pending.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                hit = self._ideals.get(key)
            if hit is not None:
                # Computed by another thread while we waited.
                return hit
            try:
                value = compute()
            except BaseException:
                with self._lock:
                    self._pending.pop(key, None)
                raise
            with self._lock:
                self._ideals[key] = value
                self._pending.pop(key, None)
            return value


class CircuitStatus(Enum):
    NOT_PRINCIPAL = "not_principal"
    VARIABLES_MISMATCH = "variables_mismatch"
    CIRCUIT = "circuit"


@dataclass(frozen=True)
class CircuitCheck:
    """Outcome of testing whether a subset is a circuit.

    `polynomial` is set whenever the coordinate ideal is principal, including
    the mismatch case where the generator omits some variable of the subset.
    """

    status: CircuitStatus
    polynomial: Optional[sp.Expr] = None

    def __bool__(self) -> bool:
        return self.status is CircuitStatus.CIRCUIT


class AlgebraicMatroid:
    """The algebraic matroid of a prime ideal.

    The ground set is the set of ring variables. A subset S is independent
    when the coordinates in S are algebraically independent on the variety of
    the prime ideal P, i.e. when the projection ideal P ∩ K[S] is zero. Ranks
    come from codimensions:

        rank(S) = |S| - codim(P ∩ K[S]).

    Parameters
    ----------
    prime_ideal:
        A prime `Ideal`. Construction raises `NotPrimeError` otherwise.
    engine:
        The `AlgebraEngine` used for all ideal computations (default
        `SympyEngine()`).

    Notes
    -----
    Projection ideals are cached per subset for the lifetime of the matroid;
    repeated queries on the same subset (as in circuit search) never call
    the engine again.
    """

    def __init__(self, prime_ideal: Ideal, engine: Optional[AlgebraEngine] = None):
        self.engine = engine if engine is not None else SympyEngine()
        if not self.engine.is_prime(prime_ideal):
            raise NotPrimeError(f"ideal of an algebraic matroid must be prime: {prime_ideal}")

        self._ring = self.engine.ambient_ring(prime_ideal)
        self._ground_set: Subset = frozenset(self._ring.symbols)
        self._cache = ProjectionCache({self._ground_set: prime_ideal})
        self._ranks: Dict[Subset, int] = {}
        _logger.info("algebraic matroid on %d variables", len(self._ground_set))

    def __repr__(self) -> str:
        names = ", ".join(str(s) for s in self._ring.symbols)
        return f"AlgebraicMatroid(ground_set={{{names}}})"

    # -----------------------------
    # Structure
    # -----------------------------

    @property
    def ground_set(self) -> Subset:
        return self._ground_set

    @property
    def prime_ideal(self) -> Ideal:
        return self._cache.get(self._ground_set)

    @property
    def polynomial_ring(self) -> PolynomialRing:
        return self._ring

    base_ring = polynomial_ring

    @property
    def coefficient_ring(self) -> Any:
        """The coefficient field of the ring, e.g. ``QQ``."""
        return self.engine.coefficient_field(self._ring)

    coefficient_field = coefficient_ring

    @property
    def ideal_cache(self) -> ProjectionCache:
        return self._cache

    def subset(self, S: Iterable[sp.Symbol]) -> Subset:
        """Normalize `S` to a frozenset and check that it lies in the ground set."""
        if isinstance(S, sp.Basic):
            raise TypeError(f"expected a collection of variables, got {S}")
        out = frozenset(S)
        extra = out - self._ground_set
        if extra:
            names = ", ".join(sorted(str(s) for s in extra))
            raise InvalidSubsetError(f"not in the ground set: {names}")
        return out

    def sorted(self, S: Iterable[sp.Symbol]):
        """Elements of `S` in ring order."""
        return self._ring.sorted(S)

    # -----------------------------
    # Projection ideals and ranks
    # -----------------------------

    def coordinate_ideal(self, S: Iterable[sp.Symbol]) -> Ideal:
        """Return the elimination ideal of P in which only coordinates in `S` are present."""
        key = self.subset(S)

        def compute() -> Ideal:
            _logger.debug("projection onto %s: cache miss", self.format_subset(key))
            return self.engine.eliminate(self.prime_ideal, self._ground_set - key)

        return self._cache.get_or_compute(key, compute)

    def ideal(self, S: Optional[Iterable[sp.Symbol]] = None) -> Ideal:
        if S is None:
            return self.prime_ideal
        return self.coordinate_ideal(S)

    def rank(self, S: Optional[Iterable[sp.Symbol]] = None) -> int:
        """Rank of `S` (of the whole matroid when `S` is None)."""
        key = self._ground_set if S is None else self.subset(S)
        r = self._ranks.get(key)
        if r is None:
            r = len(key) - self.engine.codimension(self.coordinate_ideal(key))
            self._ranks[key] = r
        return r

    def is_independent(self, S: Iterable[sp.Symbol]) -> bool:
        key = self.subset(S)
        return self.rank(key) == len(key)

    def is_basis(self, S: Iterable[sp.Symbol]) -> bool:
        key = self.subset(S)
        return self.rank() == len(key) and self.is_independent(key)

    def circuit_check(self, S: Iterable[sp.Symbol]) -> CircuitCheck:
        """Classify `S` by the shape of its coordinate ideal.

        `S` is a circuit iff its coordinate ideal is principal with a
        generator f in which every variable of `S` occurs.
        """
        key = self.subset(S)
        gens = self.engine.generators(self.coordinate_ideal(key))
        if len(gens) != 1:
            return CircuitCheck(CircuitStatus.NOT_PRINCIPAL)
        f = gens[0]
        if self.engine.variables(f) != key:
            return CircuitCheck(CircuitStatus.VARIABLES_MISMATCH, f)
        return CircuitCheck(CircuitStatus.CIRCUIT, f)

    def is_circuit(self, S: Iterable[sp.Symbol]) -> bool:
        return bool(self.circuit_check(S))

    # -----------------------------
    # Circuits and degrees
    # -----------------------------

    def fundamental_circuit(self, B: Iterable[sp.Symbol], x: sp.Symbol) -> Subset:
        from .circuits import fundamental_circuit

        return fundamental_circuit(self, B, x)

    def circuit_polynomial(self, C: Iterable[sp.Symbol], x: Optional[sp.Symbol] = None) -> sp.Expr:
        """Circuit polynomial of the circuit `C`, or of the fundamental circuit of `x` w.r.t. basis `C`.

        The polynomial is unique up to a nonzero scalar; the engine's
        normalized generator is returned unchanged.
        """
        if x is not None:
            C = self.fundamental_circuit(C, x)
        check = self.circuit_check(C)
        if not check:
            raise AssertionError(f"{self.format_subset(self.subset(C))} is not a circuit ({check.status.value})")
        return check.polynomial

    def base_degree(
        self,
        B: Iterable[sp.Symbol],
        *,
        rng: Optional[random.Random] = None,
        trials: int = 1,
    ) -> int:
        from .degree import base_degree

        return base_degree(self, B, rng=rng, trials=trials)

    def format_subset(self, S: Iterable[sp.Symbol]) -> str:
        """Format `S` as ``{x, y}`` in ring order."""
        return "{" + ", ".join(str(s) for s in self.sorted(S)) + "}"
