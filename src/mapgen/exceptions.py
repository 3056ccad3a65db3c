"""Custom exceptions for map generation."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationResult


class MapGenError(Exception):
    """Base exception for map generation errors."""

    pass


class GenerationFailedError(MapGenError):
    """Raised when no attempt produced a map that passed validation."""

    def __init__(
        self,
        seed: int,
        attempts: int,
        last_result: "ValidationResult | None" = None,
    ):
        self.seed = seed
        self.attempts = attempts
        self.last_result = last_result

        reasons = ""
        if last_result is not None and last_result.errors:
            reasons = ": " + "; ".join(last_result.errors)
        super().__init__(
            f"Map generation failed after {attempts} attempts "
            f"starting from seed {seed}{reasons}"
        )
