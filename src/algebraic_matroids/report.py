"""Human-readable reporting utilities.

Lightweight helpers to tabulate ranks of unions of named variable blocks and
to print circuit polynomials. Nothing here is required for the core algebra;
it is strictly presentation.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import sympy as sp

from .matroid import AlgebraicMatroid

RankRow = Tuple[Tuple[str, ...], int, int]


def _expr_to_str(e: sp.Expr) -> str:
    """Stable string for SymPy expressions in reports."""
    return sp.sstr(sp.factor(e))


def rank_table(
    matroid: AlgebraicMatroid,
    blocks: Mapping[str, Sequence[sp.Symbol]],
    *,
    include_empty: bool = False,
) -> List[RankRow]:
    """Rank of the union of every combination of blocks.

    Returns rows ``(block_names, size, rank)`` ordered by number of blocks,
    then by the order of `blocks`.
    """
    names = list(blocks)
    rows: List[RankRow] = []
    start = 0 if include_empty else 1
    for k in range(start, len(names) + 1):
        for combo in combinations(names, k):
            S = frozenset(s for name in combo for s in blocks[name])
            rows.append((combo, len(S), matroid.rank(S)))
    return rows


@dataclass
class RankReportOptions:
    """Tunable knobs for report output."""

    markdown: bool = True
    max_rows: Optional[int] = None
    empty_label: str = "∅"


def format_rank_table(rows: Iterable[RankRow], *, options: Optional[RankReportOptions] = None) -> str:
    opt = options or RankReportOptions()
    rows = list(rows)
    shown = rows if opt.max_rows is None else rows[: int(opt.max_rows)]

    lines: List[str] = []
    if opt.markdown:
        lines.append("| blocks | size | rank |")
        lines.append("|---|---|---|")
    for combo, size, r in shown:
        label = ", ".join(combo) if combo else opt.empty_label
        if opt.markdown:
            lines.append(f"| {label} | {size} | {r} |")
        else:
            lines.append(f"{label:<20} size={size:<3} rank={r}")
    if len(shown) < len(rows):
        lines.append(f"... ({len(rows) - len(shown)} more)")
    return "\n".join(lines) + "\n"


def format_circuit(matroid: AlgebraicMatroid, circuit: Iterable[sp.Symbol]) -> str:
    """Format a circuit and its polynomial as ``{x, y}: f = 0``."""
    C = matroid.subset(circuit)
    f = matroid.circuit_polynomial(C)
    return f"{matroid.format_subset(C)}: {_expr_to_str(f)} = 0"
