# generate_inspection_image.py
# -*- coding: utf-8 -*-
"""
黒地(0)に白(255)の図形を描いた検査用画像を PNG で保存します。

図形: square / disk / ring / line / star / rect
出力:
  workingdirectly/data/input_inspect/

ファイル名:
  shape_<kind>_s<ssss>.png
    ssss : size (0埋め, 4桁)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import numpy as np
from PIL import Image, ImageDraw


SHAPES = ("square", "disk", "ring", "line", "star", "rect")


@dataclass(frozen=True)
class Params:
    img_size: int = 64        # キャンバス一辺
    shape_size: int = 21      # 図形の大きさ（一辺 or 直径）
    line_width: int = 5       # line / star の太さ


def format_filename(kind: str, shape_size: int) -> str:
    return f"shape_{kind}_s{shape_size:04d}.png"


def generate_shape_image(kind: str, params: Params) -> Image.Image:
    n = int(params.img_size)
    s = int(params.shape_size)
    img = Image.new("L", (n, n), 0)  # 黒地
    draw = ImageDraw.Draw(img)

    cx = cy = n // 2
    h = s // 2

    if kind == "square":
        draw.rectangle((cx - h, cy - h, cx - h + s - 1, cy - h + s - 1), fill=255)
    elif kind == "rect":
        draw.rectangle((cx - 2 * h, cy - h // 2, cx + 2 * h, cy + h // 2), fill=255)
    elif kind == "disk":
        draw.ellipse((cx - h, cy - h, cx + h, cy + h), fill=255)
    elif kind == "ring":
        draw.ellipse((cx - h, cy - h, cx + h, cy + h), fill=255)
        inner = max(1, h // 2)
        draw.ellipse((cx - inner, cy - inner, cx + inner, cy + inner), fill=0)
    elif kind == "line":
        draw.line((cx - h, cy - h // 2, cx + h, cy + h // 2), fill=255, width=int(params.line_width))
    elif kind == "star":
        pts = []
        for k in range(10):
            r = h if k % 2 == 0 else h * 0.4
            theta = -math.pi / 2 + k * math.pi / 5
            pts.append((cx + r * math.cos(theta), cy + r * math.sin(theta)))
        draw.polygon(pts, fill=255)
    else:
        raise ValueError(f"Unknown shape {kind!r} (expected one of {SHAPES})")

    return img


def generate_all(params: Params) -> Dict[str, np.ndarray]:
    """kind -> uint8 0/255 ndarray"""
    return {kind: np.asarray(generate_shape_image(kind, params), dtype=np.uint8) for kind in SHAPES}


def main() -> None:
    # workingdirectly/script/ に置かれる想定なので、親が workingdirectly
    script_dir = Path(__file__).resolve().parent
    working_dir = script_dir.parent

    out_dir = working_dir / "data" / "input_inspect"
    out_dir.mkdir(parents=True, exist_ok=True)

    params = Params()
    for kind in SHAPES:
        img = generate_shape_image(kind, params)
        out_path = out_dir / format_filename(kind, params.shape_size)
        img.save(out_path, format="PNG")
        print(f"Saved: {out_path}")


if __name__ == "__main__":
    main()
