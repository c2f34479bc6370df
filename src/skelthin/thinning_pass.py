# Path: src/skelthin/thinning_pass.py

from __future__ import annotations

import numpy as np

from skelthin.neighborhood import neighbor_planes
from skelthin.raster import BinaryRaster
from skelthin.rules import ThinningRule
from skelthin.types import PassResult


def mark_candidates(
    raster: BinaryRaster,
    rule: ThinningRule,
    step: int,
    *,
    vectorized: bool = True,
) -> np.ndarray:
    """
    Classify phase of one sub-iteration.

    Returns a bool mask shaped like the raster (border always False) with the
    pixels to delete. Reads the raster only; every decision is taken against
    the same pre-pass state.
    """
    x = raster.data
    marks = np.zeros(x.shape, dtype=bool)

    if vectorized:
        planes = neighbor_planes(x)
        center = (x[1:-1, 1:-1] == 1)
        marks[1:-1, 1:-1] = center & rule.candidate_mask(planes, step)
        return marks

    h, w = raster.shape
    for i in range(1, h - 1):
        for j in range(1, w - 1):
            if x[i, j] == 0:
                continue
            if rule.is_candidate(raster.neighborhood(i, j), step):
                marks[i, j] = True
    return marks


def commit_removals(raster: BinaryRaster, marks: np.ndarray) -> int:
    """Commit phase: delete every marked pixel at once. Returns the number removed."""
    removed = int(np.count_nonzero(marks & (raster.data == 1)))
    if removed:
        raster.data[marks] = 0
    return removed


def run_pass(
    raster: BinaryRaster,
    rule: ThinningRule,
    step: int,
    *,
    vectorized: bool = True,
) -> PassResult:
    """One sub-iteration: mark against a frozen raster, then commit in bulk (in place)."""
    marks = mark_candidates(raster, rule, step, vectorized=vectorized)
    return PassResult(step=int(step), removed=commit_removals(raster, marks))
