from __future__ import annotations
from typing import Dict, Iterator, List, Mapping, Optional, Tuple
from monomial import Signature, VariableOrder, format_number, signature_to_string


class Coefficients(Mapping[Signature, float]):
    """Coefficient map: monomial signature -> scalar coefficient.

    Signatures are tuples of ``VariableOrder``, so exponents compare by bit
    pattern. ``()`` holds the constant term.
    """

    def __init__(self, terms: Mapping[Signature, float] | None = None) -> None:
        self._terms: Dict[Signature, float] = {}
        for sig, c in (terms or {}).items():
            self._terms[tuple(sig)] = float(c)

    @staticmethod
    def constant(value: float) -> "Coefficients":
        return Coefficients({(): value})

    @staticmethod
    def variable(name: str) -> "Coefficients":
        return Coefficients({(VariableOrder(name, 1.0),): 1.0})

    def __getitem__(self, sig: Signature) -> float:
        if not isinstance(sig, tuple):
            raise KeyError(sig)
        return self._terms[sig]

    def __iter__(self) -> Iterator[Signature]:
        return iter(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def constant_term(self) -> Optional[float]:
        return self._terms.get(())

    def variables(self) -> List[str]:
        seen: List[str] = []
        for sig in self._terms:
            for vo in sig:
                if vo.variable not in seen:
                    seen.append(vo.variable)
        return seen

    def as_pairs(self) -> List[Tuple[Tuple[Tuple[str, float], ...], float]]:
        """Plain ``((name, order), ...) -> coefficient`` view, in insertion order."""
        return [
            (tuple((vo.variable, vo.order) for vo in sig), c)
            for sig, c in self._terms.items()
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coefficients):
            return NotImplemented
        return self._terms == other._terms

    def __repr__(self) -> str:
        return f"Coefficients({self._terms!r})"

    def to_string(self) -> str:
        # one line per term: coefficient(var^order + ...)
        lines: List[str] = []
        for sig, c in self._terms.items():
            lines.append(f"{format_number(c)}({signature_to_string(sig)})")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()
