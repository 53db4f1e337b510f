"""Variable map — identifiers to register indices, plus the symbol-resolution pass."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from .errors import ConfigurationError, PreconditionViolation
from .expr import Expr, identifiers

logger = logging.getLogger(__name__)


class VariableMap(Mapping[str, int]):
    """Immutable finite mapping from identifiers to registers.

    Totality is checked per expression (``require_total`` / ``for_expr``).
    Injectivity is reported by ``is_injective_over`` but never enforced.
    """

    def __init__(self, bindings: Mapping[str, int] | None = None):
        bindings = dict(bindings or {})
        for name, reg in bindings.items():
            if not name:
                raise ValueError("Identifier must be non-empty")
            if isinstance(reg, bool) or not isinstance(reg, int) or reg < 0:
                raise ValueError(
                    f"Register for '{name}' must be a non-negative int, got {reg!r}"
                )
        self._bindings = bindings

    @classmethod
    def for_expr(cls, bindings: Mapping[str, int], expr: Expr) -> VariableMap:
        """Construct a map and check it covers every identifier in *expr*."""
        vmap = cls(bindings)
        vmap.require_total(expr)
        return vmap

    # ── Mapping protocol ─────────────────────────────────────────

    def __getitem__(self, name: str) -> int:
        return self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"VariableMap({self._bindings!r})"

    def as_dict(self) -> dict[str, int]:
        return dict(self._bindings)

    # ── Totality ─────────────────────────────────────────────────

    def missing_for(self, expr: Expr) -> list[str]:
        return [name for name in identifiers(expr) if name not in self._bindings]

    def require_total(self, expr: Expr) -> None:
        missing = self.missing_for(expr)
        if missing:
            raise ConfigurationError(missing)

    # ── Watermark ────────────────────────────────────────────────

    def _relevant(self, expr: Expr | None) -> dict[str, int]:
        if expr is None:
            return dict(self._bindings)
        return {name: self._bindings[name] for name in identifiers(expr) if name in self._bindings}

    def max_register(self, expr: Expr | None = None) -> int | None:
        """Highest register assigned to an identifier of *expr* (or of the whole map)."""
        return max(self._relevant(expr).values(), default=None)

    def min_watermark(self, expr: Expr | None = None) -> int:
        """Lowest watermark that keeps temporaries clear of variable storage."""
        highest = self.max_register(expr)
        return 0 if highest is None else highest + 1

    def require_below(self, watermark: int, expr: Expr | None = None) -> None:
        """Raise PreconditionViolation unless every variable register is below *watermark*."""
        if watermark < 0:
            raise PreconditionViolation(
                f"Watermark must be non-negative, got {watermark}", watermark
            )
        offending = {
            name: reg for name, reg in self._relevant(expr).items() if reg >= watermark
        }
        if offending:
            listing = ", ".join(f"{n}->r{r}" for n, r in sorted(offending.items()))
            raise PreconditionViolation(
                f"Watermark {watermark} does not lie above variable register(s): {listing}",
                watermark,
                offending,
            )

    # ── Aliasing ─────────────────────────────────────────────────

    def aliases(self, expr: Expr | None = None) -> dict[int, list[str]]:
        """Registers shared by more than one identifier of *expr*."""
        by_reg: dict[int, list[str]] = {}
        for name, reg in self._relevant(expr).items():
            by_reg.setdefault(reg, []).append(name)
        return {reg: names for reg, names in by_reg.items() if len(names) > 1}

    def is_injective_over(self, expr: Expr | None = None) -> bool:
        return not self.aliases(expr)


def allocate_registers(expr: Expr, base: int = 0) -> VariableMap:
    """Assign consecutive registers from *base* to identifiers in first-occurrence order."""
    if base < 0:
        raise ValueError(f"Base register must be non-negative, got {base}")
    bindings = {name: base + i for i, name in enumerate(identifiers(expr))}
    logger.debug("Allocated %d variable register(s) from r%d", len(bindings), base)
    return VariableMap(bindings)
