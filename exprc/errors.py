"""Error types raised by the calling layer around the compiler core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A variable map does not assign a register to every identifier in an expression."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"No register assigned for identifier(s): {', '.join(self.missing)}"
        )


class PreconditionViolation(ValueError):
    """Compilation was requested with a watermark that overlaps variable storage."""

    def __init__(
        self,
        message: str,
        watermark: int | None = None,
        offending: dict[str, int] | None = None,
    ):
        self.watermark = watermark
        self.offending = dict(offending or {})
        super().__init__(message)


class UnsupportedSyntaxError(ValueError):
    """The front-end met a construct outside constants, variables and sums."""

    def __init__(self, construct: str, location: str = ""):
        self.construct = construct
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(f"Unsupported syntax{where}: {construct}")
