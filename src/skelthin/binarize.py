# Path: src/skelthin/binarize.py

from __future__ import annotations

from typing import Optional

import numpy as np
from skimage.filters import threshold_otsu


def calc_otsu_threshold(img01: np.ndarray) -> float:
    """
    大津の二値化閾値（0..1）。GUI/パイプラインの推奨値として使う。
    画素値が一様な画像では 0.5 を返す。
    """
    x = np.asarray(img01, dtype=np.float32)
    x = x[np.isfinite(x)]
    if x.size == 0 or float(x.min()) == float(x.max()):
        return 0.5
    return float(threshold_otsu(np.clip(x, 0.0, 1.0)))


def binarize(img01: np.ndarray, threshold: Optional[float] = None) -> np.ndarray:
    """
    二値化（背景が黒、対象が明るい前提）

    Parameters
    ----------
    img01 : float ndarray [0,1]
    threshold : float | None
        これより大きい画素を前景(True)とする。None なら Otsu。

    Returns
    -------
    img_binarized : bool ndarray
    """
    x = np.asarray(img01, dtype=np.float32)
    t = calc_otsu_threshold(x) if threshold is None else float(threshold)
    return (x > t)
