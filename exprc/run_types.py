"""Pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompileConfig:
    """Groups compilation and execution configuration."""

    watermark: int | None = None  # None: one past the highest variable register
    verbose: bool = False
    check_contract: bool = True


@dataclass
class CompileStats:
    """Timing and size statistics for each pipeline stage."""

    source_bytes: int = 0

    # Expression shape
    node_count: int = 0
    nesting_depth: int = 0
    identifier_count: int = 0

    # Output sizes
    watermark: int = 0
    registers_required: int = 0
    instruction_count: int = 0

    # Stage timings (seconds)
    parse_time: float = 0.0
    compile_time: float = 0.0
    execution_time: float = 0.0
    total_time: float = 0.0

    def report(self) -> str:
        lines = [
            "═══ Pipeline Statistics ═══",
            f"  Source: {self.source_bytes} bytes, {self.node_count} nodes,"
            f" depth {self.nesting_depth}, {self.identifier_count} identifiers",
            "",
            f"  {'Stage':<20} {'Time':>10}  {'Output':>30}",
            f"  {'─' * 20} {'─' * 10}  {'─' * 30}",
        ]

        stages = [
            ("Parse", self.parse_time, f"{self.node_count} nodes"),
            (
                "Compile",
                self.compile_time,
                f"{self.instruction_count} instructions",
            ),
            ("Execute", self.execution_time, f"{self.instruction_count} steps"),
        ]
        for name, t, output in stages:
            time_str = f"{t * 1000:>8.1f}ms"
            lines.append(f"  {name:<20} {time_str:>10}  {output:>30}")

        lines.append(f"  {'─' * 20} {'─' * 10}  {'─' * 30}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        lines.append("")
        lines.append(
            f"  Registers: watermark r{self.watermark},"
            f" {self.registers_required} slots required"
        )
        return "\n".join(lines)
