#!/usr/bin/env python3
from __future__ import annotations
from typing import Dict, List, Optional
import argparse
import logging
import sys
from cas import CAS, LOG_LEVELS, log_level_from_env
from errors import ExprError

def parse_binding(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    try:
        return name, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number") from None

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="exprkernel",
        description="Render, simplify and differentiate a postfix arithmetic expression.",
    )
    ap.add_argument("expression", help="postfix tokens, e.g. \"x 2 ^ 3 +2\"")
    ap.add_argument("--eval", dest="bindings", metavar="NAME=VALUE", action="append",
                    type=parse_binding, default=[], help="bind a variable and evaluate")
    ap.add_argument("--diff", metavar="NAME", help="differentiate with respect to NAME")
    ap.add_argument("--stats", action="store_true", help="print node count and depth")
    ap.add_argument("--log-level", default=log_level_from_env(), type=str.upper,
                    choices=LOG_LEVELS, help="default: $EXPR_LOG_LEVEL or WARNING")
    return ap

def run(args: argparse.Namespace) -> None:
    cas = CAS()
    f = cas.parse(args.expression)
    print(f"String: {f.string()}")
    print(f"LaTeX:  {f.latex()}")
    if args.stats:
        size, depth = f.stats()
        print(f"Nodes:  {size}")
        print(f"Depth:  {depth}")
    print(f"Coefficients: {f.coefficients()}")
    print(f"Simplified: {f.simplify().string()}")
    if args.bindings:
        env: Dict[str, float] = dict(args.bindings)
        print(f"Evaluated:  {f.eval(env)}")
    if args.diff:
        print(f"Derivative: {f.derivative(args.diff).string()}")

def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(args.log_level)
    try:
        run(args)
    except ExprError as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except RecursionError:
        print(f"Error: RecursionError: expression nests deeper than the recursion limit "
              f"({sys.getrecursionlimit()})", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
