"""
Tests for coefficient maps and monomial signatures (monomial.py, polynomial.py)
"""

import math

import pytest

from errors import Unimplemented
from expr import Add, Constant, Mul, Pow, Variable
from monomial import VariableOrder, exponent_bits, format_number, signature
from polynomial import Coefficients


class TestExponentBits:
    def test_known_pattern(self) -> None:
        assert exponent_bits(1.0) == 0x3FF0000000000000
        assert exponent_bits(0.0) == 0

    def test_signed_zero_differs(self) -> None:
        assert exponent_bits(-0.0) == 0x8000000000000000
        assert exponent_bits(0.0) != exponent_bits(-0.0)

    def test_adjacent_doubles_differ(self) -> None:
        assert exponent_bits(2.0) != exponent_bits(math.nextafter(2.0, 3.0))


class TestVariableOrder:
    def test_equal_when_bits_equal(self) -> None:
        assert VariableOrder("x", 2.0) == VariableOrder("x", 2)
        assert hash(VariableOrder("x", 2.0)) == hash(VariableOrder("x", 2))

    def test_exact_not_tolerant(self) -> None:
        a = VariableOrder("x", 0.1 + 0.2)
        b = VariableOrder("x", 0.3)
        assert a != b
        assert len({a, b}) == 2

    def test_signed_zero_keys_distinct(self) -> None:
        assert VariableOrder("x", 0.0) != VariableOrder("x", -0.0)

    def test_nan_matches_itself(self) -> None:
        assert VariableOrder("x", math.nan) == VariableOrder("x", math.nan)

    def test_variable_name_matters(self) -> None:
        assert VariableOrder("x", 1.0) != VariableOrder("y", 1.0)

    def test_to_string(self) -> None:
        assert str(VariableOrder("x", 2.0)) == "x^2"
        assert str(VariableOrder("x", 0.5)) == "x^0.5"


class TestCoefficients:
    def test_constant_term(self) -> None:
        c = Coefficients.constant(3.0)
        assert c[()] == 3.0
        assert c.constant_term() == 3.0
        assert len(c) == 1

    def test_variable_term(self) -> None:
        c = Coefficients.variable("x")
        assert c[signature(("x", 1))] == 1.0
        assert c.constant_term() is None
        assert c.variables() == ["x"]

    def test_lookup_is_exact(self) -> None:
        c = Coefficients.variable("x")
        assert signature(("x", 1.0)) in c
        assert signature(("x", math.nextafter(1.0, 2.0))) not in c

    @pytest.mark.parametrize("key", [5, None, "x", [()]])
    def test_non_tuple_keys_are_absent(self, key) -> None:
        c = Coefficients.constant(1.0)
        assert key not in c
        assert c.get(key) is None
        with pytest.raises(KeyError):
            c[key]

    def test_signature_order_matters(self) -> None:
        c = Coefficients({signature(("x", 1), ("y", 2)): 4.0})
        assert signature(("y", 2), ("x", 1)) not in c

    def test_equality(self) -> None:
        assert Coefficients.constant(2) == Coefficients({(): 2.0})
        assert Coefficients.constant(2) != Coefficients.constant(3)

    def test_as_pairs(self) -> None:
        c = Coefficients({(): 1.0, signature(("x", 2)): 5.0})
        assert c.as_pairs() == [((), 1.0), ((("x", 2.0),), 5.0)]

    def test_to_string(self) -> None:
        assert Coefficients.variable("x").to_string() == "1(x^1)"
        assert Coefficients.constant(3.0).to_string() == "3()"
        two = Coefficients({signature(("x", 1), ("y", 2)): 4.0, (): -1.0})
        assert str(two) == "4(x^1 + y^2)\n-1()"


class TestExtraction:
    def test_constant(self) -> None:
        assert Constant(2.5).coefficients() == Coefficients({(): 2.5})

    def test_variable(self) -> None:
        assert Variable("x").coefficients() == Coefficients({signature(("x", 1.0)): 1.0})

    @pytest.mark.parametrize(
        "node",
        [
            Add([Variable("x"), Constant(1)]),
            Mul([Constant(2), Variable("x")]),
            Pow(Variable("x"), Constant(2)),
        ],
    )
    def test_composites_unimplemented(self, node) -> None:
        with pytest.raises(Unimplemented):
            node.coefficients()

    def test_unimplemented_is_not_implemented_error(self) -> None:
        with pytest.raises(NotImplementedError):
            Add([Constant(1)]).coefficients()


class TestFormatNumber:
    @pytest.mark.parametrize(
        "value, text",
        [(7.0, "7"), (2.5, "2.5"), (-3.0, "-3"), (1e21, "1000000000000000000000")],
    )
    def test_positional(self, value: float, text: str) -> None:
        assert format_number(value) == text
