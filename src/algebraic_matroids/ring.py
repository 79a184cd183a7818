from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import sympy as sp


def _sanitize_symbol_name(name: str) -> str:
    # SymPy symbols may include many characters, but we keep a conservative subset
    allowed = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")
    if not name:
        return "x"
    cleaned = "".join(ch if ch in allowed else "_" for ch in name)
    if cleaned[0].isdigit():
        cleaned = "x_" + cleaned
    return cleaned


@dataclass(frozen=True)
class PolynomialRing:
    """A multivariate polynomial ring K[x_1, ..., x_n].

    Parameters
    ----------
    symbols:
        The ring variables, in ring order. Ring order is used wherever a
        deterministic ordering of variables is needed (elimination orders,
        subset enumeration, reports).
    domain:
        The coefficient field as a SymPy domain, e.g. ``sp.QQ``.
    """

    symbols: Tuple[sp.Symbol, ...]
    domain: Any = sp.QQ

    def __post_init__(self) -> None:
        if not self.symbols:
            raise ValueError("a polynomial ring needs at least one variable")
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError("ring variables must be distinct")
        if not getattr(self.domain, "is_Field", False):
            raise ValueError(f"coefficient domain must be a field; got {self.domain}")

    @property
    def gens(self) -> Tuple[sp.Symbol, ...]:
        return self.symbols

    @property
    def nvars(self) -> int:
        return len(self.symbols)

    @property
    def coefficient_field(self) -> Any:
        return self.domain

    def index(self, sym: sp.Symbol) -> int:
        return self.symbols.index(sym)

    def sorted(self, syms: Iterable[sp.Symbol]) -> List[sp.Symbol]:
        """Return `syms` sorted by ring order."""
        order = {s: i for i, s in enumerate(self.symbols)}
        return sorted(syms, key=lambda s: order[s])

    def ideal(self, generators: Iterable[sp.Expr]) -> "Ideal":
        return Ideal.from_generators(self, generators)

    def __contains__(self, sym: object) -> bool:
        return sym in self.symbols

    # -----------------------------
    # Constructors
    # -----------------------------

    @classmethod
    def from_names(cls, names: Sequence[str], domain: Any = sp.QQ) -> "PolynomialRing":
        syms = sp.symbols(" ".join(_sanitize_symbol_name(str(n)) for n in names), seq=True)
        return cls(tuple(syms), domain)

    @classmethod
    def from_blocks(
        cls,
        blocks: Mapping[str, int],
        domain: Any = sp.QQ,
    ) -> Tuple["PolynomialRing", Dict[str, Tuple[sp.Symbol, ...]]]:
        """Build a ring from named blocks of indexed variables.

        ``{"A": 2, "C": 3}`` creates the variables ``A1, A2, C1, C2, C3`` (in
        that order) and returns the ring together with the mapping
        ``{"A": (A1, A2), "C": (C1, C2, C3)}``.
        """
        names: List[str] = []
        sizes: List[Tuple[str, int]] = []
        for prefix, size in blocks.items():
            if int(size) <= 0:
                raise ValueError(f"block '{prefix}' must have positive size; got {size}")
            base = _sanitize_symbol_name(str(prefix))
            sizes.append((str(prefix), int(size)))
            names.extend(f"{base}{i+1}" for i in range(int(size)))

        ring = cls.from_names(names, domain)
        out: Dict[str, Tuple[sp.Symbol, ...]] = {}
        pos = 0
        for prefix, size in sizes:
            out[prefix] = ring.symbols[pos : pos + size]
            pos += size
        return ring, out


@dataclass(frozen=True)
class Ideal:
    """An ideal of a `PolynomialRing`, given by a tuple of generators.

    Two `Ideal` objects compare equal when they have the same ring and the same
    generators; equality as mathematical objects is decided by an algebra
    engine (compare reduced Groebner bases).
    """

    ring: PolynomialRing
    generators: Tuple[sp.Expr, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        ring_syms = set(self.ring.symbols)
        for g in self.generators:
            extra = set(g.free_symbols) - ring_syms
            if extra:
                names = ", ".join(sorted(str(s) for s in extra))
                raise ValueError(f"generator {g} uses symbols outside the ring: {names}")

    @classmethod
    def from_generators(cls, ring: PolynomialRing, generators: Iterable[sp.Expr]) -> "Ideal":
        gens: List[sp.Expr] = []
        for g in generators:
            gg = sp.expand(sp.sympify(g))
            if gg != 0:
                gens.append(gg)
        return cls(ring, tuple(gens))

    @property
    def base_ring(self) -> PolynomialRing:
        return self.ring

    def is_zero(self) -> bool:
        return not self.generators

    def __add__(self, other: "Ideal") -> "Ideal":
        if not isinstance(other, Ideal):
            return NotImplemented
        if other.ring != self.ring:
            raise ValueError("cannot add ideals of different rings")
        return Ideal(self.ring, self.generators + other.generators)

    def __str__(self) -> str:
        gens = ", ".join(sp.sstr(g) for g in self.generators) or "0"
        return f"<{gens}>"


def symbols_of(expr: sp.Expr, ring: Optional[PolynomialRing] = None) -> frozenset:
    """Return the ring variables occurring in `expr`."""
    syms = frozenset(sp.sympify(expr).free_symbols)
    if ring is not None:
        syms = syms & frozenset(ring.symbols)
    return syms
