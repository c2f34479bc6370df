# Path: src/skelthin/input_img.py
from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
import imageio.v3 as iio

PathLike = Union[str, Path]

# ITU-R BT.601 luma
_LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def input_img(img_path: PathLike, background_is_dark: bool) -> np.ndarray:
    """Read an image as float32 gray in 0..1 with the object on the bright side."""
    img01 = to_gray01(iio.imread(str(Path(img_path))))
    return img01 if background_is_dark else (1.0 - img01).astype(np.float32)


def to_gray01(arr: np.ndarray) -> np.ndarray:
    """
    Any 2-D gray or (H, W, 3|4) color array -> float32 (H, W) in 0..1.

    Integer images are scaled by their dtype maximum (before the luma mix, so
    a white RGB pixel stays exactly 1.0). Float images already inside 0..1 are
    kept, other float ranges are stretched min-max. Alpha is ignored.
    """
    x = np.asarray(arr)
    if x.ndim == 3 and x.shape[2] in (3, 4):
        return _luma(_scale01(x[..., :3]))
    if x.ndim == 2:
        return _scale01(x)
    raise ValueError(f"Unsupported image shape: {x.shape}")


def _luma(rgb01: np.ndarray) -> np.ndarray:
    return np.clip(rgb01 @ _LUMA, 0.0, 1.0).astype(np.float32)


def _scale01(x: np.ndarray) -> np.ndarray:
    if x.dtype == np.bool_:
        return x.astype(np.float32)
    if np.issubdtype(x.dtype, np.integer):
        return x.astype(np.float32) / np.float32(np.iinfo(x.dtype).max)

    f = x.astype(np.float32)
    lo, hi = float(np.nanmin(f)), float(np.nanmax(f))
    if lo >= 0.0 and hi <= 1.0:
        return f
    if hi <= lo:
        return np.zeros(f.shape, dtype=np.float32)
    return (f - lo) / np.float32(hi - lo)
