"""Sum-expression compiler for an accumulator-register machine."""

from .expr import Const, Var, Sum, evaluate  # noqa: F401
from .compiler import compile_expr, checked_compile  # noqa: F401
from .machine import step, run, run_traced  # noqa: F401
from .machine_types import MachineState  # noqa: F401
from .variable_map import VariableMap, allocate_registers  # noqa: F401
from .api import (  # noqa: F401
    lower_source,
    compile_source,
    dump_program,
    execute_source,
)
