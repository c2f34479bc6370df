# Path: src/skelthin/config.py
# 役割: pipeline / app / scripts から参照される設定値を集約する
# (コアの thin() はここを読まない。呼び出し側が明示的に引数で渡す)

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Config:
    # ---- input ----
    background_is_dark: bool = True  # True: 背景が黒で対象が白 / False: 背景が明るい（input_imgで反転して以降は背景黒で統一）

    # ---- binarize ----
    threshold: Optional[float] = None  # 手動閾値（0..1）。None なら Otsu の推奨値を使う

    # ---- denoise ----
    eliminate_length_px: int = 0  # 面積が eliminate_length_px**2 以下の成分を細線化の前に除去（0 で無効）

    # ---- skeletonize ----
    variant: str = "zhang_suen"  # "zhang_suen" / "guo_hall"
    max_rounds: Optional[int] = None  # None: 収束するまで回す
    vectorized: bool = True  # False: 画素ごとのループ（遅いが境界チェック付き）

    # ---- output ----
    foreground_value: int = 255  # 出力画像の前景値
    overlay_color: tuple = (255, 0, 0)  # スケルトンの描画色 (R, G, B)

    # ---- visualize result ----
    rounds_figure_cols: int = 6  # ラウンド毎のスナップショット一覧の列数
    rounds_figure_max: int = 24  # 一覧に載せる最大コマ数（超えたら間引く）


CFG = Config()
