# Path: script/run_one.py
import argparse

from skelthin.config import CFG
from skelthin.pipeline import run_pipeline

if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("img_path", type=str)
    ap.add_argument("--variant", type=str, default=CFG.variant, choices=["zhang_suen", "guo_hall"])
    ap.add_argument("--tag", type=str, default=None)
    ap.add_argument("--no-intermediate", action="store_true")
    args = ap.parse_args()

    result = run_pipeline(
        args.img_path,
        variant=args.variant,
        save_intermediate=not args.no_intermediate,
        out_tag=args.tag,
    )
    print(result)
