"""Composable API functions for the expression compiler pipeline.

Each function corresponds to a CLI workflow (--asm-only, full run) but is
callable programmatically without argparse.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from .compiler import checked_compile, registers_required
from .contract import ContractReport, initial_state_for, verify_postcondition
from .expr import Expr, depth, identifiers, size
from .frontend import parse_expr
from .isa import Instruction
from .machine import run_traced
from .program_stats import count_opcodes, format_program
from .run_types import CompileConfig, CompileStats
from .trace_types import ExecutionTrace
from .variable_map import VariableMap, allocate_registers

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    expr: Expr
    variable_map: VariableMap
    watermark: int
    instructions: list[Instruction] = field(default_factory=list)
    stats: CompileStats = field(default_factory=CompileStats)


@dataclass
class ExecutionReport:
    result: CompilationResult
    trace: ExecutionTrace
    contract: ContractReport | None = None


def lower_source(source: str) -> Expr:
    """Parse expression text into an Expr tree.

    Raises:
        UnsupportedSyntaxError: The text is not a single sum of literals and identifiers.
    """
    logger.info("Lowering source (%d bytes)", len(source.encode("utf-8")))
    return parse_expr(source)


def compile_source(
    source: str,
    bindings: Mapping[str, int] | None = None,
    config: CompileConfig = CompileConfig(),
) -> CompilationResult:
    """Parse, resolve identifiers to registers and compile.

    Args:
        source: Expression text, e.g. ``"(x + 3) + y"``.
        bindings: Identifier → register map. When omitted, registers are
            allocated from r0 in first-occurrence order.
        config: Watermark override and verbosity.

    Returns:
        A CompilationResult with the program and pipeline statistics.

    Raises:
        ConfigurationError: *bindings* misses an identifier of the expression.
        PreconditionViolation: The watermark overlaps variable storage.
    """
    pipeline_start = time.perf_counter()
    stats = CompileStats(source_bytes=len(source.encode("utf-8")))

    t0 = time.perf_counter()
    expr = lower_source(source)
    stats.parse_time = time.perf_counter() - t0

    if bindings is None:
        vmap = allocate_registers(expr)
    else:
        vmap = VariableMap.for_expr(bindings, expr)
    watermark = config.watermark if config.watermark is not None else vmap.min_watermark(expr)

    t0 = time.perf_counter()
    instructions = checked_compile(vmap, expr, watermark)
    stats.compile_time = time.perf_counter() - t0

    stats.node_count = size(expr)
    stats.nesting_depth = depth(expr)
    stats.identifier_count = len(identifiers(expr))
    stats.watermark = watermark
    stats.registers_required = registers_required(expr, watermark)
    stats.instruction_count = len(instructions)
    stats.total_time = time.perf_counter() - pipeline_start

    if config.verbose:
        print("═══ Program ═══")
        print(format_program(instructions))
        print()

    return CompilationResult(
        expr=expr,
        variable_map=vmap,
        watermark=watermark,
        instructions=instructions,
        stats=stats,
    )


def dump_program(
    source: str,
    bindings: Mapping[str, int] | None = None,
    config: CompileConfig = CompileConfig(),
) -> str:
    """Compile *source* and return a human-readable listing, one instruction per line."""
    return format_program(compile_source(source, bindings, config).instructions)


def program_stats(
    source: str,
    bindings: Mapping[str, int] | None = None,
    config: CompileConfig = CompileConfig(),
) -> dict[str, int]:
    """Compile *source* and return opcode frequency counts."""
    return count_opcodes(compile_source(source, bindings, config).instructions)


def execute_source(
    source: str,
    env: Mapping[str, int],
    bindings: Mapping[str, int] | None = None,
    config: CompileConfig = CompileConfig(),
) -> ExecutionReport:
    """Compile, pre-load registers from *env*, execute with tracing, check the contract.

    Args:
        source: Expression text.
        env: Identifier → value environment, total over the expression.
        bindings: Identifier → register map (allocated when omitted).
        config: Watermark override, verbosity, contract checking.

    Returns:
        An ExecutionReport with the compilation, the trace and, when
        ``config.check_contract`` is set, the contract verdict.
    """
    result = compile_source(source, bindings, config)
    unbound = [name for name in identifiers(result.expr) if name not in env]
    if unbound:
        raise ValueError(f"No value given for identifier(s): {', '.join(unbound)}")
    logger.info(
        "execute_source: %d instructions, watermark=%d",
        len(result.instructions),
        result.watermark,
    )
    state = initial_state_for(result.variable_map, env, result.expr)

    t0 = time.perf_counter()
    trace = run_traced(result.instructions, state)
    result.stats.execution_time = time.perf_counter() - t0
    result.stats.total_time += result.stats.execution_time

    contract = None
    if config.check_contract:
        contract = verify_postcondition(
            result.expr,
            env,
            result.instructions,
            state,
            result.watermark,
            final_state=trace.final_state,
        )

    if config.verbose:
        print("═══ Trace ═══")
        print(trace.format())
        print()
        if contract is not None:
            print(contract.summary())
        print(result.stats.report())

    return ExecutionReport(result=result, trace=trace, contract=contract)
