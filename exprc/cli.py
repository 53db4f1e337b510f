"""Command-line entry point: compile an expression, run it, check the contract."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from . import constants
from .api import compile_source, execute_source
from .errors import ConfigurationError, PreconditionViolation, UnsupportedSyntaxError
from .program_stats import format_program
from .run_types import CompileConfig

logger = logging.getLogger(__name__)


def _parse_binding(text: str) -> tuple[str, int]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=INT, got '{text}'")
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected NAME=INT, got '{text}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"value must be non-negative in '{text}'")
    return name.strip(), number


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exprc",
        description="Compile sum expressions to accumulator-machine code",
    )
    parser.add_argument("expr", nargs="?",
                        help="Expression text, e.g. '(x + 3) + y'")
    parser.add_argument("--map", "-m", dest="bindings", action="append",
                        type=_parse_binding, default=None, metavar="NAME=REG",
                        help="Register for an identifier (repeatable; "
                             "default: allocate from r0)")
    parser.add_argument("--env", "-e", dest="env", action="append",
                        type=_parse_binding, default=[], metavar="NAME=VALUE",
                        help="Runtime value for an identifier (repeatable)")
    parser.add_argument("--watermark", "-t", type=int, default=None,
                        help="First temporary register (default: one past "
                             "the highest variable register)")
    parser.add_argument("--asm-only", action="store_true",
                        help="Only print the compiled program (no execution)")
    parser.add_argument("--trace", action="store_true",
                        help="Print the machine state after every instruction")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Debug logging, program listing and statistics")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.expr is None:
        source = constants.DEMO_SOURCE
        bindings: dict[str, int] | None = dict(constants.DEMO_BINDINGS)
        env = dict(constants.DEMO_ENVIRONMENT)
        watermark = constants.DEMO_WATERMARK
        print(f"No expression provided. Using built-in demo: {source}\n")
    else:
        source = args.expr
        bindings = dict(args.bindings) if args.bindings else None
        env = dict(args.env)
        watermark = args.watermark

    config = CompileConfig(watermark=watermark, verbose=args.verbose)

    try:
        if args.asm_only:
            result = compile_source(source, bindings, config)
            if not args.verbose:
                print(format_program(result.instructions))
            return 0
        report = execute_source(source, env, bindings, config)
    except (ConfigurationError, PreconditionViolation, UnsupportedSyntaxError) as exc:
        logger.debug("Rejected %r: %s", source, type(exc).__name__)
        print(f"error: {exc}", file=sys.stderr)
        return constants.EXIT_USAGE_ERROR
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return constants.EXIT_USAGE_ERROR

    if not args.verbose:
        print("═══ Program ═══")
        print(format_program(report.result.instructions))
        print()
        if args.trace:
            print("═══ Trace ═══")
            print(report.trace.format())
            print()

    print("═══ Final Machine State ═══")
    print(json.dumps(report.trace.final_state.to_dict(), indent=2))
    print(report.contract.summary())
    return 0 if report.contract.holds else constants.EXIT_CONTRACT_FAILED


if __name__ == "__main__":
    sys.exit(main())
