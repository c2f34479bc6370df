# Path: src/skelthin/raster.py

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np
from scipy.ndimage import label

from skelthin.errors import InvalidInputError, PreconditionViolation
from skelthin.neighborhood import RING_OFFSETS, Neighborhood


_EIGHT_CONNECTED = np.ones((3, 3), dtype=bool)


class BinaryRaster:
    """
    2-D binary grid for one thinning run.

    data is uint8 0/1 and is mutated in place by the sub-iteration passes.
    The 1-pixel border is never a removal candidate, so every interior pixel
    has a complete 8-neighborhood.

    foreground / dtype remember how the caller encoded the input so that
    to_array() hands back the same convention (0/255, 0/1 or bool).
    """

    def __init__(self, data: np.ndarray, foreground: Any = 1, dtype: Any = np.uint8) -> None:
        self.data = data
        self.foreground = foreground
        self.dtype = np.dtype(dtype)

    # ---- construction ----------------------------------------------------
    @classmethod
    def from_array(cls, img: Any, foreground: Optional[Any] = None) -> "BinaryRaster":
        """
        Validate and wrap a caller raster.

        foreground:
          - None: detect from the values (bool -> True, {0,1} -> 1, {0,255} -> 255)
          - value: the input must only contain 0 and this value
        """
        a = np.asarray(img)

        if a.ndim != 2:
            raise InvalidInputError(f"raster must be 2-D, got shape {a.shape}")
        if a.size == 0:
            raise InvalidInputError("raster is empty")
        if a.shape[0] < 3 or a.shape[1] < 3:
            raise InvalidInputError(f"raster must be at least 3x3, got {a.shape[0]}x{a.shape[1]}")
        if not (a.dtype == np.bool_ or np.issubdtype(a.dtype, np.number)):
            raise InvalidInputError(f"raster dtype must be bool or numeric, got {a.dtype}")

        fg = _resolve_foreground(a, foreground)
        data = (a == fg).astype(np.uint8)
        return cls(data, foreground=fg, dtype=a.dtype)

    def copy(self) -> "BinaryRaster":
        return BinaryRaster(self.data.copy(), foreground=self.foreground, dtype=self.dtype)

    # ---- geometry --------------------------------------------------------
    @property
    def shape(self) -> Tuple[int, int]:
        return (int(self.data.shape[0]), int(self.data.shape[1]))

    @property
    def interior(self) -> np.ndarray:
        """View of the pixels eligible for removal (border excluded)."""
        return self.data[1:-1, 1:-1]

    def is_interior(self, r: int, c: int) -> bool:
        h, w = self.shape
        return 1 <= r < h - 1 and 1 <= c < w - 1

    def neighborhood(self, r: int, c: int) -> Neighborhood:
        if not self.is_interior(r, c):
            raise PreconditionViolation(
                f"pixel ({r}, {c}) is not interior to a {self.shape[0]}x{self.shape[1]} raster"
            )
        x = self.data
        return Neighborhood.from_ring([x[r + dr, c + dc] for dr, dc in RING_OFFSETS])

    # ---- counts / output -------------------------------------------------
    def foreground_count(self) -> int:
        return int(np.count_nonzero(self.data))

    def to_array(self) -> np.ndarray:
        if self.dtype == np.bool_:
            return self.data.astype(bool)
        out = np.zeros(self.data.shape, dtype=self.dtype)
        out[self.data == 1] = self.foreground
        return out


def count_components(img: np.ndarray) -> int:
    """Number of 8-connected foreground components (nonzero = foreground)."""
    _, n = label(np.asarray(img) != 0, structure=_EIGHT_CONNECTED)
    return int(n)


def _fits_dtype(value: Any, dtype: np.dtype) -> bool:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return False
    if not np.isfinite(v):
        return False
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return v == int(v) and info.min <= int(v) <= info.max
    return True


def _resolve_foreground(a: np.ndarray, foreground: Optional[Any]) -> Any:
    if a.dtype == np.bool_:
        if foreground not in (None, True, 1):
            raise InvalidInputError(f"bool raster cannot use foreground={foreground!r}")
        return True

    values = np.unique(a)
    if np.issubdtype(a.dtype, np.floating) and not np.all(np.isfinite(values)):
        raise InvalidInputError("raster contains NaN or inf")

    if foreground is not None:
        if foreground == 0:
            raise InvalidInputError("foreground value must be nonzero")
        if not _fits_dtype(foreground, a.dtype):
            raise InvalidInputError(f"foreground={foreground!r} cannot be stored in a {a.dtype} raster")
        bad = values[(values != 0) & (values != foreground)]
        if bad.size:
            raise InvalidInputError(
                f"raster values must be 0 or {foreground}, found {bad[:5].tolist()}"
            )
        return a.dtype.type(foreground)

    nonzero = values[values != 0]
    if nonzero.size == 0:
        # all background: any sentinel reproduces the input
        return a.dtype.type(1)
    if nonzero.size == 1 and nonzero[0] in (1, 255):
        return a.dtype.type(nonzero[0])
    raise InvalidInputError(
        f"raster must be binary (0/1 or 0/255), found values {values[:5].tolist()}"
    )
