# Path: src/skelthin/errors.py

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raster rejected before any pass runs (empty, < 3x3, not 2-D, non-binary values)."""


class PreconditionViolation(RuntimeError):
    """Classifier asked about a pixel outside the interior. Always a bug in the caller."""


class ThinningCancelled(RuntimeError):
    """
    Thinning stopped between rounds before convergence
    (should_stop() returned True, or max_rounds was exceeded).
    """

    def __init__(self, message: str, rounds_completed: int) -> None:
        super().__init__(message)
        self.rounds_completed = int(rounds_completed)
