# Path: src/skelthin/rules.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence

import numpy as np

from skelthin.neighborhood import (
    Neighborhood,
    neighbor_count_plane,
    transition_count_plane,
)
from skelthin.types import ThinningVariant, parse_variant


class ThinningRule(ABC):
    """
    Removal predicate for one thinning algorithm.

    Every rule has two complementary sub-iterations (step 0 / step 1).
    is_candidate() decides for a single pixel, candidate_mask() for the
    whole interior at once; both must give the same answer for every pixel.
    Neither looks at the center pixel: callers restrict to foreground.
    """

    variant: ThinningVariant
    n_steps: int = 2

    @abstractmethod
    def is_candidate(self, nb: Neighborhood, step: int) -> bool:
        ...

    @abstractmethod
    def candidate_mask(self, planes: Sequence[np.ndarray], step: int) -> np.ndarray:
        ...

    def _check_step(self, step: int) -> None:
        if step not in (0, 1):
            raise ValueError(f"step must be 0 or 1, got {step}")


class ZhangSuenRule(ThinningRule):
    """
    Zhang & Suen (1984).

      2 <= B(P1) <= 6
      A(P1) == 1
      step 0: P2*P4*P6 == 0 and P4*P6*P8 == 0   (south-east boundary, north-west corner)
      step 1: P2*P4*P8 == 0 and P2*P6*P8 == 0   (north-west boundary, south-east corner)
    """

    variant = ThinningVariant.ZHANG_SUEN

    def is_candidate(self, nb: Neighborhood, step: int) -> bool:
        self._check_step(step)
        B = nb.neighbor_count
        if B < 2 or B > 6:
            return False
        if nb.transition_count != 1:
            return False
        if step == 0:
            return nb.p2 * nb.p4 * nb.p6 == 0 and nb.p4 * nb.p6 * nb.p8 == 0
        return nb.p2 * nb.p4 * nb.p8 == 0 and nb.p2 * nb.p6 * nb.p8 == 0

    def candidate_mask(self, planes: Sequence[np.ndarray], step: int) -> np.ndarray:
        self._check_step(step)
        p2, p3, p4, p5, p6, p7, p8, p9 = planes

        B = neighbor_count_plane(planes)
        A = transition_count_plane(planes)

        m2 = (B >= 2) & (B <= 6)
        m3 = (A == 1)
        if step == 0:
            m4 = (p2 * p4 * p6 == 0)
            m5 = (p4 * p6 * p8 == 0)
        else:
            m4 = (p2 * p4 * p8 == 0)
            m5 = (p2 * p6 * p8 == 0)
        return m2 & m3 & m4 & m5


class GuoHallRule(ThinningRule):
    """
    Guo & Hall (1989), "Parallel thinning with two-subiteration algorithms".

      C(P1) == 1                      connectivity number
      2 <= min(N1, N2) <= 3           N1/N2: pairwise-OR neighbor groupings
      step 0: (P6 | P7 | !P9) & P8 == 0
      step 1: (P2 | P3 | !P5) & P4 == 0
    """

    variant = ThinningVariant.GUO_HALL

    def is_candidate(self, nb: Neighborhood, step: int) -> bool:
        self._check_step(step)
        p2, p3, p4, p5, p6, p7, p8, p9 = nb.ring

        C = ((1 - p2) & (p3 | p4)) + ((1 - p4) & (p5 | p6)) \
            + ((1 - p6) & (p7 | p8)) + ((1 - p8) & (p9 | p2))
        N1 = (p9 | p2) + (p3 | p4) + (p5 | p6) + (p7 | p8)
        N2 = (p2 | p3) + (p4 | p5) + (p6 | p7) + (p8 | p9)
        N = min(N1, N2)
        if step == 0:
            m = (p6 | p7 | (1 - p9)) & p8
        else:
            m = (p2 | p3 | (1 - p5)) & p4

        return C == 1 and 2 <= N <= 3 and m == 0

    def candidate_mask(self, planes: Sequence[np.ndarray], step: int) -> np.ndarray:
        self._check_step(step)
        p2, p3, p4, p5, p6, p7, p8, p9 = (p.astype(bool) for p in planes)

        def n(x: np.ndarray) -> np.ndarray:
            return x.astype(np.uint8)

        # bool + bool is a logical OR in numpy, so every term is summed as uint8
        C = n(~p2 & (p3 | p4)) + n(~p4 & (p5 | p6)) + n(~p6 & (p7 | p8)) + n(~p8 & (p9 | p2))
        N1 = n(p9 | p2) + n(p3 | p4) + n(p5 | p6) + n(p7 | p8)
        N2 = n(p2 | p3) + n(p4 | p5) + n(p6 | p7) + n(p8 | p9)
        N = np.minimum(N1, N2)
        if step == 0:
            m = (p6 | p7 | ~p9) & p8
        else:
            m = (p2 | p3 | ~p5) & p4

        return (C == 1) & (N >= 2) & (N <= 3) & ~m


_RULES: Dict[ThinningVariant, ThinningRule] = {
    ThinningVariant.ZHANG_SUEN: ZhangSuenRule(),
    ThinningVariant.GUO_HALL: GuoHallRule(),
}


def get_rule(variant: Optional[str | ThinningVariant] = None) -> ThinningRule:
    return _RULES[parse_variant(variant)]
