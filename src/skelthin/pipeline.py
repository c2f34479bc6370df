# Path: src/skelthin/pipeline.py
#
# 入出力フォルダ（project root 基準）
#   data/input          : 元画像
#   data/intermediate   : 中間生成物（任意）
#   data/output         : 最終結果（skeleton, overlay, json 等）
#
# 注意:
# ・コア（skeletonize）は CFG を読まない。ここで CFG から値を取り出して渡す
# ・画像の前景は出力時に CFG.foreground_value (既定 255) で書き出す

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

import json
import time

import numpy as np
import imageio.v3 as iio

from skelthin.config import CFG

from skelthin.input_img import input_img
from skelthin.binarize import binarize, calc_otsu_threshold
from skelthin.denoise import denoise
from skelthin.skeletonize import run_thinning
from skelthin.raster import count_components
from skelthin.types import ThinningResult, parse_variant
from skelthin.overlay import configure_overlay_output, save_skeleton_overlay
from skelthin.visualize_results import RoundRecorder, configure_visualize_output, visualize_results


def run_pipeline(
    img_path: str | Path,
    *,
    variant: Optional[str] = None,
    save_intermediate: bool = True,
    out_tag: Optional[str] = None,
    verbose: bool = True,
) -> Dict[str, Any]:
    """
    画像1枚を 読み込み -> 二値化 -> ノイズ除去 -> 細線化 -> 保存 まで一気通貫で処理する。
    Returns には、ラウンド数・画素数・連結成分数と出力ファイルパスを入れる。
    """
    t_all0 = time.perf_counter()

    def log(msg: str) -> None:
        if verbose:
            print(msg, flush=True)

    def step_begin(name: str) -> float:
        log(f"[BEGIN] {name}")
        return time.perf_counter()

    def step_end(name: str, t0: float, extra: str = "") -> None:
        dt = time.perf_counter() - t0
        if extra:
            log(f"[END]   {name}  {dt:.3f}s  {extra}")
        else:
            log(f"[END]   {name}  {dt:.3f}s")

    img_path = Path(img_path)
    thinning_variant = parse_variant(variant if variant is not None else CFG.variant)

    t0 = step_begin("0) resolve paths")
    project_root = _find_project_root(img_path)
    data_dir = project_root / "data"
    inter_dir = data_dir / "intermediate"
    out_dir = data_dir / "output"

    out_dir.mkdir(parents=True, exist_ok=True)
    if save_intermediate:
        inter_dir.mkdir(parents=True, exist_ok=True)

    stem = img_path.stem
    tag = out_tag.strip() if isinstance(out_tag, str) and out_tag.strip() else stem
    step_end("0) resolve paths", t0, extra=f"tag={tag} root={project_root}")

    # ---- 1) 画像の読み込み ----
    t0 = step_begin("1) input_img")
    img_raw01 = input_img(img_path, CFG.background_is_dark)
    step_end("1) input_img", t0, extra=f"shape={tuple(img_raw01.shape)} dtype={img_raw01.dtype}")

    # ---- 2) 二値化 ----
    t0 = step_begin("2) binarize")
    threshold_otsu = float(calc_otsu_threshold(img_raw01))
    threshold_used = threshold_otsu if CFG.threshold is None else float(CFG.threshold)
    img_binarized = binarize(img_raw01, threshold_used)
    nz = int(np.count_nonzero(img_binarized))
    step_end(
        "2) binarize",
        t0,
        extra=f"threshold={threshold_used:.4f} (otsu={threshold_otsu:.4f}) nonzero={nz} ({nz/img_binarized.size:.6f})",
    )

    # ---- 3) ノイズ除去 ----
    t0 = step_begin("3) denoise")
    img_for_skeletonize = denoise(img_binarized, CFG.eliminate_length_px)
    nz2 = int(np.count_nonzero(img_for_skeletonize))
    n_comp_before = count_components(img_for_skeletonize)
    step_end("3) denoise", t0, extra=f"nonzero={nz2} components={n_comp_before}")

    # ---- 4) 細線化 ----
    t0 = step_begin(f"4) skeletonize ({thinning_variant.value})")
    recorder = RoundRecorder(keep_frames=save_intermediate)
    result = run_thinning(
        img_for_skeletonize,
        thinning_variant,
        observer=recorder,
        max_rounds=CFG.max_rounds,
        vectorized=CFG.vectorized,
    )
    img_skeletonized = result.skeleton.astype(bool)
    n_comp_after = count_components(img_skeletonized)
    step_end(
        f"4) skeletonize ({thinning_variant.value})",
        t0,
        extra=(
            f"rounds={result.n_rounds} removed={result.total_removed} "
            f"nonzero={result.final_foreground_count} components={n_comp_after}"
        ),
    )
    if n_comp_after != n_comp_before:
        log(f"[WARN]  component count changed {n_comp_before} -> {n_comp_after}")

    # ---- 5) 保存 ----
    t0 = step_begin("5) save outputs")
    fg = np.uint8(CFG.foreground_value)
    skel_path = out_dir / f"{tag}__skeleton.png"
    iio.imwrite(skel_path, img_skeletonized.astype(np.uint8) * fg)

    configure_overlay_output(out_dir, tag)
    overlay_path = save_skeleton_overlay(img_raw01, img_skeletonized)

    summary_json = out_dir / f"{tag}__summary.json"
    _save_summary_json(
        result,
        summary_json,
        img_path=img_path,
        threshold_otsu=threshold_otsu,
        threshold_used=threshold_used,
        components=(n_comp_before, n_comp_after),
    )
    step_end("5) save outputs", t0, extra=f"skeleton={skel_path.name}")

    # ---- optional: intermediate 保存 ----
    saved: Dict[str, str] = {}
    if save_intermediate:
        t0 = step_begin("6) save_intermediate")
        saved.update(
            _save_intermediate_images(
                inter_dir=inter_dir,
                tag=tag,
                img_raw01=img_raw01,
                img_binarized=img_binarized,
                img_for_skeletonize=img_for_skeletonize,
            )
        )
        configure_visualize_output(inter_dir, tag)
        saved.update(visualize_results(recorder, img_for_skeletonize))
        step_end("6) save_intermediate", t0, extra=f"n_files={len(saved)}")

    dt_all = time.perf_counter() - t_all0
    log(f"[DONE] pipeline total {dt_all:.3f}s")

    return {
        "img_path": str(img_path),
        "tag": tag,
        "variant": thinning_variant.value,
        "threshold_otsu": threshold_otsu,
        "threshold_used": threshold_used,
        "n_rounds": int(result.n_rounds),
        "foreground_before": int(result.initial_foreground_count),
        "foreground_after": int(result.final_foreground_count),
        "components_before": int(n_comp_before),
        "components_after": int(n_comp_after),
        "skeleton_png": str(skel_path),
        "overlay_png": str(overlay_path),
        "summary_json": str(summary_json),
        "saved_intermediate": saved,
    }


def _save_intermediate_images(
    *,
    inter_dir: Path,
    tag: str,
    img_raw01: np.ndarray,
    img_binarized: np.ndarray,
    img_for_skeletonize: np.ndarray,
) -> Dict[str, str]:
    out: Dict[str, str] = {}

    raw8 = np.clip(img_raw01 * 255.0, 0, 255).astype(np.uint8)
    bin8 = (img_binarized.astype(np.uint8) * 255)
    den8 = (img_for_skeletonize.astype(np.uint8) * 255)

    p_raw = inter_dir / f"{tag}__raw.png"
    p_bin = inter_dir / f"{tag}__binarized.png"
    p_den = inter_dir / f"{tag}__for_skeletonize.png"
    iio.imwrite(p_raw, raw8)
    iio.imwrite(p_bin, bin8)
    iio.imwrite(p_den, den8)
    out["raw_png"] = str(p_raw)
    out["binarized_png"] = str(p_bin)
    out["for_skeletonize_png"] = str(p_den)

    return out


def _save_summary_json(
    result: ThinningResult,
    path: Path,
    *,
    img_path: Path,
    threshold_otsu: float,
    threshold_used: float,
    components: tuple,
) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "img_path": str(img_path),
        "threshold_otsu_recommended": float(threshold_otsu),
        "threshold_used": float(threshold_used),
        "components_before": int(components[0]),
        "components_after": int(components[1]),
        "thinning": result.to_dict(),
        "used_config": asdict(CFG),
    }

    with path.open("w", encoding="utf-8") as fp:
        json.dump(payload, fp, ensure_ascii=False, indent=2)


def _find_project_root(any_path: Path) -> Path:
    p = any_path.resolve()
    for parent in [p] + list(p.parents):
        if (parent / "data").exists():
            return parent
    return Path.cwd().resolve()
