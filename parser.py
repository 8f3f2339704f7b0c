from __future__ import annotations
from typing import Iterable, List, Optional, Union
import logging
import re
from errors import ParseError
from expr import Add, Constant, Expr, Mul, Pow, Variable

logger = logging.getLogger(__name__)

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_ARITY = re.compile(r"[0-9]+\Z")


# =====================
# Postfix tokens
# =====================


class PostfixTok:
    def __init__(self, kind: str, lex: str = "", num: Optional[float] = None, arity: int = 0):
        self.kind = kind  # 'NUM','ID','ADD','MUL','POW'
        self.lex = lex
        self.num = num
        self.arity = arity

    def __repr__(self) -> str:
        return f"PostfixTok({self.kind!r}, {self.lex!r})"


def classify(lex: str) -> PostfixTok:
    """Turn one whitespace-free token into a PostfixTok.

    Numbers start with a digit, '.', or '-'; '+N' and '*N' are N-ary sum and
    product; '^' is power; identifiers are variables.
    """
    if not lex:
        raise ParseError("empty token")
    head = lex[0]
    if head.isdigit() or head in ".-":
        try:
            return PostfixTok("NUM", lex, num=float(lex))
        except ValueError:
            raise ParseError(f"invalid number '{lex}'") from None
    if head in "+*":
        if not _ARITY.match(lex[1:]):
            raise ParseError(f"operator '{lex}' needs an integer arity, e.g. '{head}2'")
        return PostfixTok("ADD" if head == "+" else "MUL", lex, arity=int(lex[1:]))
    if lex == "^":
        return PostfixTok("POW", lex)
    if _IDENT.match(lex):
        return PostfixTok("ID", lex)
    raise ParseError(f"unknown token '{lex}'")


def tokenize(src: Union[str, Iterable[str]]) -> List[PostfixTok]:
    lexemes = src.split() if isinstance(src, str) else list(src)
    return [classify(lex) for lex in lexemes]


def postfix_to_ast(toks: List[PostfixTok]) -> Expr:
    stack: List[Expr] = []
    for t in toks:
        if t.kind == "NUM":
            stack.append(Constant(t.num))
        elif t.kind == "ID":
            stack.append(Variable(t.lex))
        elif t.kind in ("ADD", "MUL"):
            if t.arity > len(stack):
                raise ParseError(
                    f"'{t.lex}' needs {t.arity} operands, only {len(stack)} available"
                )
            args = stack[len(stack) - t.arity:]
            del stack[len(stack) - t.arity:]
            # arity 0 is rejected by the node constructor
            stack.append(Add(args) if t.kind == "ADD" else Mul(args))
        elif t.kind == "POW":
            if len(stack) < 2:
                raise ParseError("'^' missing operands")
            exponent = stack.pop()
            base = stack.pop()
            stack.append(Pow(base, exponent))
        else:
            raise ParseError("Unknown postfix token")
    if len(stack) != 1:
        raise ParseError(f"Invalid expression: {len(stack)} values left on the stack")
    return stack[-1]


def parse_postfix(src: Union[str, Iterable[str]]) -> Expr:
    toks = tokenize(src)
    logger.debug("parsed %d postfix tokens", len(toks))
    return postfix_to_ast(toks)
