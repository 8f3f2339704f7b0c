from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, ClassVar, Iterable, Mapping, Optional, Tuple
import operator
import numpy as np
from errors import InvalidExpression, MissingVariable, Unimplemented
from monomial import format_number
from polynomial import Coefficients

Bindings = Mapping[str, float]

# Read-only and empty: any variable lookup against it raises MissingVariable.
NO_BINDINGS: Bindings = MappingProxyType({})


class Expr(ABC):
    """Expression tree node.

    The variants are fixed: Constant, Variable, Add, Mul and Pow. Nodes are
    immutable; differentiate() and simplify() build new trees and never share
    subtrees with their input.
    """

    @abstractmethod
    def string(self) -> str: ...

    @abstractmethod
    def latex(self) -> str: ...

    @abstractmethod
    def evaluate(self, bindings: Bindings) -> float: ...

    @abstractmethod
    def differentiate(self, name: str) -> "Expr": ...

    @abstractmethod
    def simplify(self) -> "Expr": ...

    @abstractmethod
    def coefficients(self) -> Coefficients: ...

    @abstractmethod
    def clone(self) -> "Expr": ...

    def get_constant_value(self) -> Optional[float]:
        """Constant term of coefficients(), or None when the node has none.

        Variants whose coefficient extraction is unimplemented have no
        statically known value.
        """
        try:
            coeffs = self.coefficients()
        except Unimplemented:
            return None
        return coeffs.constant_term()

    def fold(self) -> "Constant":
        # raises MissingVariable if the subtree still has a free variable
        return Constant(self.evaluate(NO_BINDINGS))

    def __str__(self) -> str:
        return self.string()


@dataclass(frozen=True)
class Constant(Expr):
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def string(self) -> str:
        text = format_number(self.value)
        # nan carries an arbitrary sign bit; only numbers get parentheses
        if np.signbit(self.value) and not np.isnan(self.value):
            return f"({text})"
        return text

    def latex(self) -> str:
        return self.string()

    def evaluate(self, bindings: Bindings) -> float:
        return self.value

    def differentiate(self, name: str) -> Expr:
        return Constant(0.0)

    def simplify(self) -> Expr:
        return self.clone()

    def coefficients(self) -> Coefficients:
        return Coefficients.constant(self.value)

    def clone(self) -> Expr:
        return Constant(self.value)


@dataclass(frozen=True)
class Variable(Expr):
    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidExpression("variable name must be a non-empty string")

    def string(self) -> str:
        return self.name

    def latex(self) -> str:
        return self.name

    def evaluate(self, bindings: Bindings) -> float:
        if self.name not in bindings:
            raise MissingVariable(self.name)
        return float(bindings[self.name])

    def differentiate(self, name: str) -> Expr:
        return Constant(1.0 if name == self.name else 0.0)

    def simplify(self) -> Expr:
        return self.clone()

    def coefficients(self) -> Coefficients:
        return Coefficients.variable(self.name)

    def clone(self) -> Expr:
        return Variable(self.name)


@dataclass(frozen=True, init=False)
class _NAry(Expr):
    # shared body of Add and Mul
    children: Tuple[Expr, ...]

    plain_op: ClassVar[str] = ""
    latex_op: ClassVar[str] = ""
    combine: ClassVar[Callable[[float, float], float]]

    def __init__(self, children: Iterable[Expr]) -> None:
        children = tuple(children)
        if len(children) == 0:
            raise InvalidExpression(f"{type(self).__name__} requires at least one child")
        object.__setattr__(self, "children", children)

    def string(self) -> str:
        return "(" + self.plain_op.join(c.string() for c in self.children) + ")"

    def latex(self) -> str:
        return "(" + self.latex_op.join(c.latex() for c in self.children) + ")"

    def evaluate(self, bindings: Bindings) -> float:
        # unreachable through __init__; guards instances built around it
        if len(self.children) == 0:
            raise InvalidExpression(f"cannot evaluate an empty {type(self).__name__}")
        acc = self.children[0].evaluate(bindings)
        for child in self.children[1:]:
            acc = type(self).combine(acc, child.evaluate(bindings))
        return acc

    def simplify(self) -> Expr:
        children = [c.simplify() for c in self.children]
        node = type(self)(children)
        if all(c.get_constant_value() is not None for c in children):
            return node.fold()
        return node

    def coefficients(self) -> Coefficients:
        raise Unimplemented(f"coefficient extraction for {type(self).__name__}")

    def clone(self) -> Expr:
        return type(self)(c.clone() for c in self.children)


@dataclass(frozen=True, init=False)
class Add(_NAry):
    plain_op: ClassVar[str] = " + "
    latex_op: ClassVar[str] = " + "
    combine = staticmethod(operator.add)

    def differentiate(self, name: str) -> Expr:
        # sum rule
        return Add(c.differentiate(name) for c in self.children)


@dataclass(frozen=True, init=False)
class Mul(_NAry):
    plain_op: ClassVar[str] = " × "
    latex_op: ClassVar[str] = r" \times "
    combine = staticmethod(operator.mul)

    def differentiate(self, name: str) -> Expr:
        # product rule over n factors: one term per differentiated factor
        terms = []
        for i, child in enumerate(self.children):
            factors = [c.clone() for c in self.children]
            factors[i] = child.differentiate(name)
            terms.append(Mul(factors))
        return Add(terms)


@dataclass(frozen=True)
class Pow(Expr):
    base: Expr
    exponent: Expr

    def string(self) -> str:
        return f"({self.base.string()} ^ {self.exponent.string()})"

    def latex(self) -> str:
        return f"({self.base.latex()}^{{{self.exponent.latex()}}})"

    def evaluate(self, bindings: Bindings) -> float:
        b = self.base.evaluate(bindings)
        e = self.exponent.evaluate(bindings)
        # IEEE semantics: (-8)^(1/3) is nan, 0^-1 is inf
        with np.errstate(all="ignore"):
            return float(np.power(np.float64(b), np.float64(e)))

    def differentiate(self, name: str) -> Expr:
        n = self.exponent.get_constant_value()
        if n is None:
            raise Unimplemented(
                f"derivative of {self.string()}: exponent is not a known constant"
            )
        return Mul([
            self.exponent.clone(),
            Pow(self.base.clone(), Constant(n - 1.0)),
            self.base.differentiate(name),
        ])

    def simplify(self) -> Expr:
        node = Pow(self.base.simplify(), self.exponent.simplify())
        if node.base.get_constant_value() is not None and node.exponent.get_constant_value() is not None:
            return node.fold()
        return node

    def coefficients(self) -> Coefficients:
        raise Unimplemented("coefficient extraction for Pow")

    def clone(self) -> Expr:
        return Pow(self.base.clone(), self.exponent.clone())
