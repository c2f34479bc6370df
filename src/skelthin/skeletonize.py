# Path: src/skelthin/skeletonize.py

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from skelthin.errors import ThinningCancelled
from skelthin.raster import BinaryRaster
from skelthin.rules import get_rule
from skelthin.thinning_pass import run_pass
from skelthin.types import RoundRecord, ThinningResult, ThinningVariant

RoundObserver = Callable[[RoundRecord, BinaryRaster], None]


def run_thinning(
    img: Any,
    variant: Optional[str | ThinningVariant] = ThinningVariant.ZHANG_SUEN,
    *,
    foreground: Optional[Any] = None,
    observer: Optional[RoundObserver] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    max_rounds: Optional[int] = None,
    vectorized: bool = True,
) -> ThinningResult:
    """
    Thin a binary raster until a full round removes nothing.

    Parameters
    ----------
    img : 2-D ndarray
        bool, 0/1 or 0/255 (or 0/foreground). Not modified.
    variant : "zhang_suen" / "guo_hall"
    foreground : sentinel of the object pixels, detected when None
    observer : called as observer(record, raster) after every round.
        The raster is the live working copy and must not be modified.
    should_stop : polled between rounds; True raises ThinningCancelled
    max_rounds : None means no cap; exceeding it raises ThinningCancelled
    vectorized : numpy classification (default) or per-pixel loop

    Returns
    -------
    ThinningResult whose skeleton has the input's shape, dtype and sentinel.

    Raises
    ------
    InvalidInputError : before any round, for a malformed raster
    ThinningCancelled : stop flag or round cap; no partial result
    """
    raster = BinaryRaster.from_array(img, foreground=foreground)
    rule = get_rule(variant)

    result = ThinningResult(
        skeleton=np.empty((0, 0)),
        variant=rule.variant,
        initial_foreground_count=raster.foreground_count(),
    )

    changed = True
    while changed:
        round_index = len(result.rounds) + 1
        if max_rounds is not None and round_index > int(max_rounds):
            raise ThinningCancelled(
                f"not converged after max_rounds={max_rounds}", rounds_completed=len(result.rounds)
            )
        if should_stop is not None and should_stop():
            raise ThinningCancelled(
                f"stopped before round {round_index}", rounds_completed=len(result.rounds)
            )

        passes = tuple(
            run_pass(raster, rule, step, vectorized=vectorized) for step in range(rule.n_steps)
        )
        record = RoundRecord(
            round_index=round_index,
            passes=passes,
            foreground_count=raster.foreground_count(),
        )
        result.rounds.append(record)
        if observer is not None:
            observer(record, raster)

        changed = record.removed > 0

    result.converged = True
    result.skeleton = raster.to_array()
    return result


def thin(
    img: Any,
    variant: Optional[str | ThinningVariant] = ThinningVariant.ZHANG_SUEN,
    **kwargs: Any,
) -> np.ndarray:
    """Skeleton only; same keyword arguments as run_thinning()."""
    return run_thinning(img, variant, **kwargs).skeleton


def skeletonize(
    img_for_skeletonized: np.ndarray,
    variant: Optional[str | ThinningVariant] = ThinningVariant.ZHANG_SUEN,
    **kwargs: Any,
) -> np.ndarray:
    """
    Skeletonize (8-neighborhood).
    Input: bool ndarray (True=foreground)
    Output: bool ndarray
    """
    img = np.asarray(img_for_skeletonized, dtype=bool)
    return thin(img, variant, **kwargs).astype(bool)
