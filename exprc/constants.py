"""Named constants shared across the compiler, machine and CLI."""

from __future__ import annotations

SOURCE_GRAMMAR = "python"

ZERO_WORD = 0

SUM_OPERATOR = "+"

# Sum and parenthesis nesting accepted by the front-end and checked_compile;
# keeps every recursive walk well inside the interpreter recursion limit.
MAX_NESTING_DEPTH = 256

EXPRESSION_STATEMENT = "expression_statement"
BINARY_OPERATOR = "binary_operator"
PARENTHESIZED_EXPRESSION = "parenthesized_expression"
INTEGER_LITERAL = "integer"
IDENTIFIER = "identifier"

DEMO_SOURCE = "(x + 3) + (x + (y + 2))"
DEMO_BINDINGS: dict[str, int] = {"x": 2, "y": 5}
DEMO_ENVIRONMENT: dict[str, int] = {"x": 4, "y": 5}
DEMO_WATERMARK = 10

EXIT_CONTRACT_FAILED = 1
EXIT_USAGE_ERROR = 2
