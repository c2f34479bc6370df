# script/run_inspection.py
from __future__ import annotations

import argparse
import csv
import time
from pathlib import Path
from typing import Dict, List

import numpy as np
import imageio.v3 as iio
from skimage.morphology import thin as sk_thin

from skelthin.raster import count_components
from skelthin.skeletonize import run_thinning
from skelthin.types import ThinningVariant

from generate_inspection_image import Params, SHAPES, generate_all


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def inspect_one(img: np.ndarray, variant: ThinningVariant) -> Dict[str, object]:
    """
    1枚を細線化し、性質チェックの結果を返す。
      - idempotent      : 2回目の細線化で1画素も消えない
      - border_kept     : 外周1画素が変化しない
      - components_kept : 8連結成分数が変わらない
      - rounds_bounded  : ラウンド数 <= 前景画素数/2 + 1
      - agree_skimage   : skimage.morphology.thin と一致する画素の割合（参考値）
    """
    t0 = time.perf_counter()
    result = run_thinning(img, variant)
    dt = time.perf_counter() - t0

    sk = result.skeleton
    again = run_thinning(sk, variant)

    border = np.ones(img.shape, dtype=bool)
    border[1:-1, 1:-1] = False

    ref = sk_thin(img != 0)
    union = np.count_nonzero((sk != 0) | ref)
    agree = 1.0 if union == 0 else float(np.count_nonzero((sk != 0) & ref)) / float(union)

    n0 = int(result.initial_foreground_count)
    return {
        "skeleton": sk,
        "n_rounds": int(result.n_rounds),
        "foreground_before": n0,
        "foreground_after": int(result.final_foreground_count),
        "components_before": count_components(img),
        "components_after": count_components(sk),
        "idempotent": bool(again.total_removed == 0 and np.array_equal(again.skeleton, sk)),
        "border_kept": bool(np.array_equal(sk[border], img[border])),
        "rounds_bounded": bool(result.n_rounds <= n0 // 2 + 1),
        "agree_skimage": agree,
        "time": float(dt),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--img-size", type=int, default=Params.img_size)
    ap.add_argument("--sizes", type=int, nargs="+", default=[5, 11, 21, 41])
    ap.add_argument("--save-images", action="store_true")
    args = ap.parse_args()

    out_dir = Path("data") / "inspection"
    _ensure_dir(out_dir)
    out_csv = out_dir / "inspection_result.csv"

    print("=== Inspection runner ===", flush=True)
    print(f"output_dir={out_dir}", flush=True)
    print(f"img_size={args.img_size}  sizes={args.sizes}  shapes={list(SHAPES)}", flush=True)

    header = [
        "shape",
        "size",
        "variant",
        "n_rounds",
        "foreground_before",
        "foreground_after",
        "components_before",
        "components_after",
        "idempotent",
        "border_kept",
        "rounds_bounded",
        "agree_skimage",
        "time_s",
    ]

    failures: List[str] = []
    t_all0 = time.perf_counter()

    with out_csv.open("w", newline="", encoding="utf-8") as fout:
        w = csv.writer(fout)
        w.writerow(header)

        for size in args.sizes:
            params = Params(img_size=max(int(args.img_size), int(size) * 2 + 8), shape_size=int(size))
            images = generate_all(params)

            for kind, img in images.items():
                for variant in ThinningVariant:
                    run = inspect_one(img, variant)
                    ok = run["idempotent"] and run["border_kept"] and run["rounds_bounded"] \
                        and run["components_after"] == run["components_before"]
                    if not ok:
                        failures.append(f"{kind}/s{size}/{variant.value}")

                    print(
                        f"  {kind:>6s} s={size:<3d} {variant.value:<10s} rounds={run['n_rounds']:<3d} "
                        f"fg={run['foreground_before']}->{run['foreground_after']} "
                        f"comp={run['components_before']}->{run['components_after']} "
                        f"agree={run['agree_skimage']:.2f} {'ok' if ok else 'NG'}",
                        flush=True,
                    )

                    w.writerow(
                        [
                            kind,
                            f"{size:d}",
                            variant.value,
                            f"{run['n_rounds']:d}",
                            f"{run['foreground_before']:d}",
                            f"{run['foreground_after']:d}",
                            f"{run['components_before']:d}",
                            f"{run['components_after']:d}",
                            int(run["idempotent"]),
                            int(run["border_kept"]),
                            int(run["rounds_bounded"]),
                            f"{run['agree_skimage']:.4f}",
                            f"{run['time']:.4f}",
                        ]
                    )

                    if args.save_images:
                        fname = f"{kind}_s{size:04d}_{variant.value}__skeleton.png"
                        iio.imwrite(out_dir / fname, run["skeleton"])

    dt_all = time.perf_counter() - t_all0
    print("", flush=True)
    if failures:
        print(f"[NG] {len(failures)} case(s): {', '.join(failures)}", flush=True)
    print(f"[DONE] wrote: {out_csv}  total_time={dt_all:.3f}s", flush=True)


if __name__ == "__main__":
    main()
