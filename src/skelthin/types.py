# src/skelthin/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Optional

import numpy as np


class ThinningVariant(str, Enum):
    ZHANG_SUEN = "zhang_suen"
    GUO_HALL = "guo_hall"


@dataclass(frozen=True)
class PassResult:
    """
    Outcome of one sub-iteration.

    step: 0 or 1 (which of the two complementary rule sets was applied)
    removed: number of pixels deleted by the commit phase
    """
    step: int
    removed: int

    def to_dict(self) -> Dict[str, Any]:
        return {"step": int(self.step), "removed": int(self.removed)}


@dataclass(frozen=True)
class RoundRecord:
    """
    One round = sub-iteration 0 followed by sub-iteration 1.

    round_index: 1-based
    passes: the two PassResult of this round, in order
    foreground_count: foreground pixels left after the round
    """
    round_index: int
    passes: Tuple[PassResult, ...]
    foreground_count: int

    @property
    def removed(self) -> int:
        return int(sum(p.removed for p in self.passes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_index": int(self.round_index),
            "passes": [p.to_dict() for p in self.passes],
            "removed": self.removed,
            "foreground_count": int(self.foreground_count),
        }


@dataclass
class ThinningResult:
    """
    Result of a full thinning run.

    skeleton: same shape, dtype and foreground sentinel as the input
    rounds: per-round records, the last one has removed == 0
    initial_foreground_count: foreground pixels before the first round
    """
    skeleton: np.ndarray
    variant: ThinningVariant
    rounds: List[RoundRecord] = field(default_factory=list)
    initial_foreground_count: int = 0
    converged: bool = False

    @property
    def n_rounds(self) -> int:
        return len(self.rounds)

    @property
    def total_removed(self) -> int:
        return int(sum(r.removed for r in self.rounds))

    @property
    def final_foreground_count(self) -> int:
        if not self.rounds:
            return int(self.initial_foreground_count)
        return int(self.rounds[-1].foreground_count)

    def to_dict(self) -> Dict[str, Any]:
        # skeleton itself is saved as an image, not in the json
        return {
            "variant": str(self.variant.value),
            "shape": [int(x) for x in self.skeleton.shape],
            "converged": bool(self.converged),
            "n_rounds": int(self.n_rounds),
            "initial_foreground_count": int(self.initial_foreground_count),
            "final_foreground_count": self.final_foreground_count,
            "total_removed": self.total_removed,
            "rounds": [r.to_dict() for r in self.rounds],
        }


def parse_variant(value: Optional[str | ThinningVariant]) -> ThinningVariant:
    if value is None:
        return ThinningVariant.ZHANG_SUEN
    if isinstance(value, ThinningVariant):
        return value
    key = str(value).strip().lower().replace("-", "_")
    try:
        return ThinningVariant(key)
    except ValueError:
        names = ", ".join(v.value for v in ThinningVariant)
        raise ValueError(f"Unknown thinning variant {value!r} (expected one of: {names})") from None
