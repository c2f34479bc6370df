# Path: src/skelthin/denoise.py

from __future__ import annotations

import numpy as np
from skimage.morphology import remove_small_objects


def denoise(img_binarized: np.ndarray, eliminate_length: int) -> np.ndarray:
    """
    Drop foreground specks before thinning.

    Each leftover speck would otherwise survive as a stray dot or a one-pixel
    spur in the skeleton. 8-connected components whose area is at most
    eliminate_length**2 are removed; eliminate_length <= 0 returns a copy.
    """
    bw = np.array(img_binarized, dtype=bool)  # always a fresh array
    side = int(eliminate_length)
    if side > 0:
        bw = remove_small_objects(bw, max_size=side * side, connectivity=2)
    return bw
