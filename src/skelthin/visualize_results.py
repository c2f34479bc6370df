# src/skelthin/visualize_results.py
from __future__ import annotations

import math
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from skelthin.config import CFG
from skelthin.raster import BinaryRaster
from skelthin.types import RoundRecord


_OUTPUT_DIR: Optional[Path] = None
_TAG: Optional[str] = None


def configure_visualize_output(out_dir: str | Path, tag: str) -> None:
    global _OUTPUT_DIR, _TAG
    _OUTPUT_DIR = Path(out_dir)
    _TAG = str(tag)


class RoundRecorder:
    """
    Round observer for run_thinning(): keeps bit-packed 0/1 snapshots of the
    raster for the rounds grid.

    At most about max_frames snapshots are held. When the list fills up every
    other one is dropped and the sampling stride doubles, so a long run keeps
    evenly spaced rounds without holding one full copy per round. The last
    round is always kept.
    """

    def __init__(self, keep_frames: bool = True, max_frames: Optional[int] = None) -> None:
        self.keep_frames = bool(keep_frames)
        self.max_frames = int(CFG.rounds_figure_max if max_frames is None else max_frames)
        self.records: List[RoundRecord] = []
        self._packed: List[Tuple[int, np.ndarray]] = []
        self._last: Optional[Tuple[int, np.ndarray]] = None
        self._shape: Optional[Tuple[int, int]] = None
        self._stride = 1

    def __call__(self, record: RoundRecord, raster: BinaryRaster) -> None:
        self.records.append(record)
        if not self.keep_frames:
            return

        self._shape = raster.shape
        frame = (int(record.round_index), np.packbits(raster.data, axis=None))
        self._last = frame
        if (frame[0] - 1) % self._stride != 0:
            return
        self._packed.append(frame)
        # one slot is reserved for the last round
        if len(self._packed) > max(2, self.max_frames - 1):
            self._packed = self._packed[::2]
            self._stride *= 2

    @property
    def foreground_counts(self) -> List[int]:
        return [int(r.foreground_count) for r in self.records]

    @property
    def frame_rounds(self) -> List[int]:
        return [k for k, _ in self._kept()]

    @property
    def frames(self) -> List[np.ndarray]:
        if self._shape is None:
            return []
        h, w = self._shape
        return [np.unpackbits(p, count=h * w).reshape(h, w) for _, p in self._kept()]

    def _kept(self) -> List[Tuple[int, np.ndarray]]:
        kept = list(self._packed)
        if self._last is not None and (not kept or kept[-1][0] != self._last[0]):
            kept.append(self._last)
        return kept


def visualize_results(
    recorder: RoundRecorder,
    img_initial: np.ndarray,
    *,
    n_cols: Optional[int] = None,
    max_frames: Optional[int] = None,
) -> Dict[str, str]:
    """
    img_initial: 細線化前の二値画像
    ラウンド毎のスナップショット一覧（png）と、ラウンド毎の残り画素数（txt）を保存する。
    """
    out_dir = _OUTPUT_DIR if _OUTPUT_DIR is not None else (Path.cwd() / "data" / "output")
    out_dir.mkdir(parents=True, exist_ok=True)
    tag = _TAG if _TAG is not None else time.strftime("results_%Y%m%d_%H%M%S")

    n_cols = int(CFG.rounds_figure_cols if n_cols is None else n_cols)
    max_frames = int(CFG.rounds_figure_max if max_frames is None else max_frames)

    n0 = int(np.count_nonzero(img_initial))
    lines = [
        f"tag: {tag}",
        f"rounds: {len(recorder.records)}",
        f"foreground_initial: {n0}",
        "round,removed_step0,removed_step1,foreground",
    ]
    for r in recorder.records:
        removed = ",".join(str(int(p.removed)) for p in r.passes)
        lines.append(f"{r.round_index},{removed},{int(r.foreground_count)}")
    txt_path = out_dir / f"{tag}__rounds.txt"
    _write_text(txt_path, "\n".join(lines) + "\n")

    out: Dict[str, str] = {"rounds_txt": str(txt_path)}
    if not recorder.frames:
        return out

    frames = [np.asarray(img_initial) != 0] + recorder.frames
    titles = ["input"] + [f"round {k}" for k in recorder.frame_rounds]
    idx = _pick_frames(len(frames), max_frames)

    n = len(idx)
    cols = max(1, min(n_cols, n))
    rows = int(math.ceil(n / cols))
    fig, axes = plt.subplots(rows, cols, figsize=(2.2 * cols, 2.2 * rows), squeeze=False)
    for ax in axes.ravel():
        ax.axis("off")
    for ax, k in zip(axes.ravel(), idx):
        ax.imshow(frames[k], cmap="gray", vmin=0, vmax=1, interpolation="nearest")
        ax.set_title(titles[k], fontsize=8)
    fig.tight_layout()

    png_path = out_dir / f"{tag}__rounds.png"
    fig.savefig(png_path, dpi=120)
    plt.close(fig)
    out["rounds_png"] = str(png_path)
    return out


def _pick_frames(n: int, max_frames: int) -> List[int]:
    # 先頭と末尾は必ず残して等間隔に間引く
    if n <= max_frames or max_frames < 2:
        return list(range(n))
    return sorted(set(int(round(x)) for x in np.linspace(0, n - 1, max_frames)))


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
