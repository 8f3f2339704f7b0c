from __future__ import annotations


class ExprError(Exception):
    """Base class for every error raised by the expression kernel."""


class MissingVariable(ExprError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Variable '{name}' not in bindings")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidExpression(ExprError, ValueError):
    pass


class Unimplemented(ExprError, NotImplementedError):
    pass


class ParseError(ExprError, ValueError):
    pass
