# Path: src/skelthin/overlay.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import imageio.v3 as iio

from skelthin.config import CFG


_OUT_DIR: Optional[Path] = None
_TAG: str = "result"


def configure_overlay_output(out_dir: str | Path, tag: str) -> None:
    global _OUT_DIR, _TAG
    _OUT_DIR = Path(out_dir)
    _TAG = str(tag)


def draw_skeleton_overlay(
    img01: np.ndarray,
    skeleton: np.ndarray,
    color: Optional[Sequence[int]] = None,
) -> np.ndarray:
    """
    元画像（グレー 0..1）を RGB にして、スケルトン画素だけ color で塗る。

    Returns
    -------
    rgb : uint8 ndarray (H, W, 3)
    """
    gray = np.asarray(img01, dtype=np.float32)
    sk = np.asarray(skeleton) != 0
    if gray.shape != sk.shape:
        raise ValueError(f"image shape {gray.shape} and skeleton shape {sk.shape} differ")

    g8 = np.clip(gray * 255.0, 0, 255).astype(np.uint8)
    rgb = np.repeat(g8[:, :, None], 3, axis=2)

    c = np.asarray(CFG.overlay_color if color is None else color, dtype=np.uint8)
    if c.shape != (3,):
        raise ValueError(f"color must be (R, G, B), got {color!r}")
    rgb[sk] = c
    return rgb


def save_skeleton_overlay(img01: np.ndarray, skeleton: np.ndarray) -> Path:
    out_dir = _OUT_DIR if _OUT_DIR is not None else Path("data/output")
    out_dir.mkdir(parents=True, exist_ok=True)

    rgb = draw_skeleton_overlay(img01, skeleton)
    out_path = out_dir / f"{_TAG}__overlay.png"
    iio.imwrite(out_path, rgb)
    return out_path
