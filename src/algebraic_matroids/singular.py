from __future__ import annotations

"""Interoperability with the computer algebra system **Singular**.

All matroid logic stays in Python/SymPy, but the heavy ideal operations
(elimination, Groebner bases and especially primality via primary
decomposition) can be delegated to Singular, which is far faster than SymPy
and decides primality for every ideal.

This module provides:

- a small `SingularIdeal` data structure,
- conversion of SymPy polynomials into Singular syntax and back,
- `SingularEngine`, an `AlgebraEngine` that runs Singular via subprocess.

Nothing in this module requires Singular at *import time*; only
`SingularIdeal.run()` (and therefore `SingularEngine`) assumes a `Singular`
executable is available.

Notes
-----
- Singular variable names must be valid identifiers. If your SymPy symbols
  contain characters like braces or minus signs (e.g. `k_{-1}`), we sanitize
  names deterministically during export and map them back on import.
- Results are printed between marker lines (``==section``) so that several
  computations can share one Singular run.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from tokenize import TokenError
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import sympy as sp
from sympy.parsing.sympy_parser import parse_expr

from .engine import AlgebraEngine
from .exceptions import SingularError
from .ring import Ideal

_logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^==(\w+)$")


def _sanitize_var_name(name: str) -> str:
    """Convert an arbitrary string into a safe Singular identifier."""
    # Keep only alphanumeric + underscore.
    s = re.sub(r"[^0-9A-Za-z_]", "_", name)
    s = re.sub(r"_+", "_", s).strip("_")
    if not s:
        s = "v"
    if s[0].isdigit():
        s = f"v_{s}"
    return s


def make_symbol_name_map(symbols: Sequence[sp.Symbol]) -> Dict[sp.Symbol, str]:
    """Create a deterministic, collision-free mapping sympy Symbol -> Singular name."""
    used: Dict[str, int] = {}
    out: Dict[sp.Symbol, str] = {}

    # Deterministic order by string representation.
    for sym in sorted(symbols, key=lambda s: str(s)):
        base = _sanitize_var_name(str(sym))
        if base not in used:
            used[base] = 0
            out[sym] = base
        else:
            used[base] += 1
            out[sym] = f"{base}_{used[base]}"

    return out


def sympy_to_singular(expr: sp.Expr, name_map: Dict[sp.Symbol, str]) -> str:
    """Convert a SymPy polynomial to Singular syntax."""
    # Replace symbols with safe names by xreplace.
    repl = {s: sp.Symbol(name_map[s]) for s in name_map}
    expr2 = sp.expand(expr).xreplace(repl)

    s = sp.sstr(expr2)

    # Singular uses '^' for exponentiation.
    s = s.replace("**", "^")
    # Remove spaces to keep scripts compact.
    s = s.replace(" ", "")
    return s


def singular_to_sympy(text: str, name_map: Dict[sp.Symbol, str]) -> sp.Expr:
    """Parse a polynomial printed by Singular (with ``short=0``) into SymPy."""
    local_dict = {name: sym for sym, name in name_map.items()}
    s = text.strip().replace("^", "**")
    if not s:
        raise SingularError("empty polynomial in Singular output")
    try:
        return sp.expand(parse_expr(s, local_dict=local_dict, evaluate=True))
    except (SyntaxError, TokenError, TypeError, sp.SympifyError) as exc:
        raise SingularError(f"could not parse Singular polynomial '{s}'") from exc


def parse_sections(output: str) -> Dict[str, List[str]]:
    """Split marker-delimited Singular output into ``{section: lines}``."""
    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for raw in output.splitlines():
        line = raw.strip()
        if line.startswith("// STDERR"):
            break
        m = _SECTION_RE.match(line)
        if m:
            current = m.group(1)
            sections[current] = []
        elif current is not None and line:
            sections[current].append(line)
    return sections


@dataclass(frozen=True)
class SingularIdeal:
    """A polynomial ideal intended for export to Singular."""

    generators: Tuple[sp.Expr, ...]
    variables: Tuple[sp.Symbol, ...]
    characteristic: int = 0
    monomial_order: str = "dp"  # 'dp' = degree reverse lexicographic (global order)

    @classmethod
    def from_ideal(cls, ideal: Ideal, *, monomial_order: str = "dp") -> "SingularIdeal":
        domain = ideal.ring.domain
        if not (getattr(domain, "is_QQ", False) or getattr(domain, "is_FiniteField", False)):
            # Only prime fields are exported; an extension would need a minpoly.
            raise SingularError(f"cannot export coefficient field {domain} to Singular; use QQ or GF(p)")
        characteristic = int(domain.characteristic())
        return cls(tuple(ideal.generators), tuple(ideal.ring.symbols), characteristic, str(monomial_order))

    def name_map(self) -> Dict[sp.Symbol, str]:
        return make_symbol_name_map(list(self.variables))

    def to_singular_script(
        self,
        *,
        ring_name: str = "R",
        ideal_name: str = "I",
        eliminate: Optional[Sequence[sp.Symbol]] = None,
        reduced_basis: bool = False,
        dimension: bool = False,
        vector_space_dimension: bool = False,
        primality: bool = False,
        comment: Optional[str] = None,
    ) -> str:
        """Render a Singular script defining the ring and ideal.

        Each requested computation prints a ``==name`` marker followed by its
        result, one polynomial or integer per line.

        Parameters
        ----------
        eliminate:
            If provided, print the reduced standard basis of the elimination
            ideal (section ``elim``). Singular's `eliminate` expects the
            *product* of variables to eliminate.
        reduced_basis:
            Print the reduced standard basis of the ideal (section ``basis``).
        dimension:
            Print the Krull dimension, -1 for the unit ideal (section ``dim``).
        vector_space_dimension:
            Print ``vdim``, -1 if the ideal is not zero-dimensional (section ``vdim``).
        primality:
            Load `primdec.lib` and print 1 if the ideal is prime, else 0
            (section ``prime``). This can be expensive.
        comment:
            Optional comment header (will be prefixed with `// ` on each line).
        """
        nm = self.name_map()
        vars_sing = [nm[s] for s in self.variables]
        gens_sing = [sympy_to_singular(g, nm) for g in self.generators]

        lines: List[str] = []
        if comment:
            for ln in str(comment).splitlines():
                lines.append(f"// {ln}")
        lines.append(f"ring {ring_name} = {self.characteristic},({','.join(vars_sing)}),{self.monomial_order};")
        lines.append("short = 0;")
        lines.append("option(redSB);")
        if not gens_sing:
            lines.append(f"ideal {ideal_name} = 0;")
        else:
            lines.append(f"ideal {ideal_name} = {','.join(gens_sing)};")
        lines.append(f"ideal {ideal_name}_std = std({ideal_name});")
        lines.append("int i;")
        lines.append("")  # spacer

        if eliminate:
            elim_names = [nm.get(v, _sanitize_var_name(str(v))) for v in eliminate]
            # eliminate(I, x*y*z) eliminates x,y,z
            prod = "*".join(elim_names)
            lines.append(f"ideal {ideal_name}_elim = std(eliminate({ideal_name}, {prod}));")
            lines.append('print("==elim");')
            lines.append(f"for (i = 1; i <= size({ideal_name}_elim); i++) {{ print({ideal_name}_elim[i]); }}")
            lines.append("")

        if reduced_basis:
            lines.append('print("==basis");')
            lines.append(f"for (i = 1; i <= size({ideal_name}_std); i++) {{ print({ideal_name}_std[i]); }}")
            lines.append("")

        if dimension:
            lines.append('print("==dim");')
            lines.append(f"print(dim({ideal_name}_std));")
            lines.append("")

        if vector_space_dimension:
            lines.append('print("==vdim");')
            lines.append(f"print(vdim({ideal_name}_std));")
            lines.append("")

        if primality:
            lines.append('LIB "primdec.lib";')
            lines.append(f"int {ideal_name}_prime = 0;")
            lines.append(f"if (dim({ideal_name}_std) >= 0) {{")
            lines.append(f"  list {ideal_name}_pd = primdecGTZ({ideal_name});")
            lines.append(f"  if (size({ideal_name}_pd) == 1) {{")
            lines.append(
                f"    {ideal_name}_prime = (size(reduce({ideal_name}_pd[1][2], std({ideal_name}_pd[1][1]))) == 0);"
            )
            lines.append("  }")
            lines.append("}")
            lines.append('print("==prime");')
            lines.append(f"print({ideal_name}_prime);")
            lines.append("")

        lines.append("quit;")
        return "\n".join(lines)

    def run(
        self,
        *,
        singular_executable: str = "Singular",
        script: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> str:
        """Run Singular on the given script and return stdout.

        Parameters
        ----------
        singular_executable:
            Name or path of the Singular binary.
        script:
            If provided, run this script instead of `to_singular_script()`.
        timeout:
            Timeout in seconds; None waits for Singular to finish.

        Returns
        -------
        stdout as a string.
        """
        if script is None:
            script = self.to_singular_script()

        try:
            proc = subprocess.run(
                [singular_executable, "-q"],
                input=script.encode("utf-8"),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise SingularError(f"Singular executable '{singular_executable}' not found") from exc
        out = proc.stdout.decode("utf-8", errors="replace")
        err = proc.stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise SingularError(
                f"Singular exited with code {proc.returncode}.\nSTDERR:\n{err}\nSTDOUT:\n{out}"
            )
        # Some Singular warnings are printed on stderr even on success; append them.
        if err.strip():
            out = out + "\n\n// STDERR\n" + err
        return out


class SingularEngine(AlgebraEngine):
    """`AlgebraEngine` that delegates every computation to Singular.

    Parameters
    ----------
    executable:
        Name or path of the Singular binary.
    timeout:
        Per-run timeout in seconds. None (the default) never interrupts
        Singular.
    """

    def __init__(self, executable: str = "Singular", timeout: Optional[int] = None):
        self.executable = executable
        self.timeout = timeout

    def _run(self, ideal: Ideal, **requests) -> Tuple[Dict[str, List[str]], Dict[sp.Symbol, str]]:
        si = SingularIdeal.from_ideal(ideal)
        script = si.to_singular_script(**requests)
        _logger.debug("running Singular: %s", ", ".join(k for k, v in requests.items() if v))
        out = si.run(singular_executable=self.executable, script=script, timeout=self.timeout)
        return parse_sections(out), si.name_map()

    @staticmethod
    def _section(sections: Dict[str, List[str]], name: str) -> List[str]:
        if name not in sections:
            raise SingularError(f"Singular output lacks section '{name}'")
        return sections[name]

    @classmethod
    def _integer(cls, sections: Dict[str, List[str]], name: str) -> int:
        lines = cls._section(sections, name)
        try:
            return int(lines[0])
        except (IndexError, ValueError) as exc:
            raise SingularError(f"expected an integer in section '{name}'; got {lines}") from exc

    def _polynomials(self, sections, name: str, name_map) -> List[sp.Expr]:
        return [p for p in (singular_to_sympy(s, name_map) for s in self._section(sections, name)) if p != 0]

    def is_prime(self, ideal: Ideal) -> bool:
        if ideal.is_zero():
            return True
        sections, _ = self._run(ideal, primality=True)
        return self._integer(sections, "prime") == 1

    def eliminate(self, ideal: Ideal, variables: Iterable[sp.Symbol]) -> Ideal:
        elim = ideal.ring.sorted(set(variables))
        if not elim or ideal.is_zero():
            return ideal
        sections, nm = self._run(ideal, eliminate=elim)
        return Ideal.from_generators(ideal.ring, self._polynomials(sections, "elim", nm))

    def codimension(self, ideal: Ideal) -> int:
        if ideal.is_zero():
            return 0
        sections, _ = self._run(ideal, dimension=True)
        return ideal.ring.nvars - self._integer(sections, "dim")

    def generators(self, ideal: Ideal) -> Tuple[sp.Expr, ...]:
        if ideal.is_zero():
            return ()
        sections, nm = self._run(ideal, reduced_basis=True)
        return tuple(self._polynomials(sections, "basis", nm))

    def degree(self, ideal: Ideal) -> int:
        if ideal.is_zero():
            raise ValueError("the zero ideal is not zero-dimensional")
        sections, _ = self._run(ideal, vector_space_dimension=True)
        d = self._integer(sections, "vdim")
        if d < 0:
            raise ValueError("ideal is not zero-dimensional")
        return d
