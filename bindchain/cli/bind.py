"""Bind the operand chain of a request JSON file and print the result."""

from __future__ import annotations

import argparse
import os

from bindchain.core.binder import Failed
from bindchain.core.binding_trace import BindingTrace
from bindchain.core.expr import render_expr
from bindchain.core.host import ExprBinder
from bindchain.core.models import build_request, load_request
from bindchain.solve.sympy_bridge import expr_to_sympy
from bindchain.trace import TraceLogger


def main(argv: list[str] | None = None) -> int:
    """Run the binding CLI; exit 0 when the chain binds, 1 otherwise."""

    parser = argparse.ArgumentParser(description="Bind an operand chain using type reactions.")
    parser.add_argument("path", help="Path to binding request JSON file.")
    parser.add_argument(
        "--no-normalize",
        action="store_true",
        help="Skip left-association of implicit reactions.",
    )
    parser.add_argument(
        "--trace-jsonl",
        default=os.getenv("BINDCHAIN_TRACE_JSONL"),
        help="Append binding trace events to this JSONL file (env: BINDCHAIN_TRACE_JSONL).",
    )
    parser.add_argument(
        "--sympy",
        action="store_true",
        help="Also print the bound expression as SymPy.",
    )
    args = parser.parse_args(argv)

    try:
        built = build_request(load_request(args.path))
        trace = BindingTrace() if args.trace_jsonl else None
        binder = ExprBinder(
            type_system=built.type_system,
            trace=trace,
            normalize=not args.no_normalize,
        )
        result = binder.bind(built.chain)

        if trace is not None:
            with TraceLogger(args.trace_jsonl) as logger:
                logger.write_trace(trace)
    except Exception as exc:  # noqa: BLE001 - CLI boundary
        print(f"ERROR: {exc}")
        return 1

    if isinstance(result, Failed):
        print(f"ERROR: {result.message}")
        return 1

    print(f"OK: {render_expr(result.expr)} : {result.result_type}")
    if args.sympy:
        converted, warnings, _env = expr_to_sympy(result.expr)
        if converted is None:
            print(f"SYMPY: unavailable ({'; '.join(warnings)})")
        else:
            print(f"SYMPY: {converted}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
