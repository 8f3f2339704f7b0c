from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

def exponent_bits(order: float) -> int:
	"""Bit pattern of ``order`` as an IEEE-754 double.

	Keys compare exactly: 2.0 and 2.0000000000000004 differ, so do 0.0 and -0.0,
	and a NaN matches only a NaN with the same payload.
	"""
	return int(np.array(order, dtype=np.float64).view(np.uint64))

def format_number(value: float) -> str:
	# shortest round-trip digits, never scientific notation: 7.0 -> "7"
	return np.format_float_positional(np.float64(value), trim='-')

@dataclass(frozen=True, eq=False)
class VariableOrder:
	variable: str
	order: float
	def _key(self) -> Tuple[str, int]:
		return (self.variable, exponent_bits(self.order))
	def __eq__(self, other: object) -> bool:
		if not isinstance(other, VariableOrder):
			return NotImplemented
		return self._key() == other._key()
	def __hash__(self) -> int:
		return hash(self._key())
	def to_string(self) -> str:
		return f"{self.variable}^{format_number(self.order)}"
	def __str__(self) -> str:
		return self.to_string()

# ordered; the empty signature is the constant term
Signature = Tuple[VariableOrder, ...]

def signature(*pairs: Tuple[str, float]) -> Signature:
	return tuple(VariableOrder(v, float(o)) for v, o in pairs)

def signature_to_string(sig: Signature) -> str:
	return " + ".join(vo.to_string() for vo in sig)
