# app/app.py
import sys
from pathlib import Path
import tempfile
import hashlib

import numpy as np
import streamlit as st
import matplotlib.pyplot as plt

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from skelthin.config import CFG

from skelthin.input_img import input_img
from skelthin.binarize import binarize, calc_otsu_threshold
from skelthin.denoise import denoise
from skelthin.skeletonize import run_thinning
from skelthin.raster import count_components
from skelthin.overlay import draw_skeleton_overlay
from skelthin.types import ThinningVariant
from skelthin.errors import InvalidInputError
from skelthin.visualize_results import RoundRecorder

st.set_page_config(layout="wide")
st.title("Skeleton Thinning GUI")


def _file_id_from_bytes(b: bytes) -> str:
    return hashlib.sha1(b).hexdigest()[:12]


def crop_center(img: np.ndarray, size: int = 800) -> np.ndarray:
    if img.ndim < 2:
        return img
    h, w = img.shape[0], img.shape[1]
    if h <= size and w <= size:
        return img
    r0 = max(0, (h - size) // 2)
    c0 = max(0, (w - size) // 2)
    r1 = min(h, r0 + size)
    c1 = min(w, c0 + size)
    return img[r0:r1, c0:c1, ...]


def compute_skeleton(img01: np.ndarray, threshold: float, eliminate_length_px: int, variant: str):
    img_bin = binarize(img01, float(threshold))
    img_for_skel = denoise(img_bin, int(eliminate_length_px))
    recorder = RoundRecorder(keep_frames=False)
    result = run_thinning(img_for_skel, variant, observer=recorder, max_rounds=CFG.max_rounds)
    img_skel = result.skeleton.astype(bool)
    return dict(
        img_for_skel=img_for_skel,
        img_skel=img_skel,
        overlay=draw_skeleton_overlay(img01, img_skel),
        n_rounds=int(result.n_rounds),
        foreground_counts=recorder.foreground_counts,
        foreground_before=int(result.initial_foreground_count),
        foreground_after=int(result.final_foreground_count),
        components_before=count_components(img_for_skel),
        components_after=count_components(img_skel),
    )


# ----------------------------
# Session state
# ----------------------------
if "file_id" not in st.session_state:
    st.session_state.file_id = None
if "threshold_manual" not in st.session_state:
    st.session_state.threshold_manual = None
if "result_cache" not in st.session_state:
    st.session_state.result_cache = None

# ----------------------------
# Sidebar: input + parameters
# ----------------------------
st.sidebar.header("Input")
uploaded = st.sidebar.file_uploader(
    "Drag & drop here, or Browse file",
    type=["tif", "tiff", "png", "jpg", "jpeg", "bmp"],
)

st.sidebar.header("Parameters")
sidebar_disabled = uploaded is None

background_is_dark = bool(
    st.sidebar.toggle(
        "dark background",
        value=bool(CFG.background_is_dark),
    )
)

variant = st.sidebar.selectbox(
    "**variant:**  \n thinning rule set",
    options=[v.value for v in ThinningVariant],
    index=[v.value for v in ThinningVariant].index(CFG.variant),
)

threshold_manual = float(
    st.sidebar.number_input(
        "threshold (0..1)",
        value=float(st.session_state.threshold_manual)
        if (st.session_state.threshold_manual is not None)
        else 0.5,
        step=0.01,
        min_value=0.0,
        max_value=1.0,
        format="%.2f",
        disabled=sidebar_disabled,
    )
)
if not sidebar_disabled:
    st.session_state.threshold_manual = float(threshold_manual)

threshold_otsu_line_ph = st.sidebar.empty()
threshold_otsu_line_ph.write("threshold_otsu: -" if sidebar_disabled else "threshold_otsu (recommended): (computing...)")

eliminate_length_px = int(
    st.sidebar.number_input(
        "**eliminate_length_px:**  \n remove specks up to this px*px area before thinning",
        value=int(CFG.eliminate_length_px),
        min_value=0,
        step=1,
        disabled=sidebar_disabled,
    )
)

st.sidebar.markdown("---")
run_button = st.sidebar.button("Run thinning", disabled=sidebar_disabled)

# ----------------------------
# Main: fixed layout placeholders
# ----------------------------
blank_gray = np.zeros((800, 800), dtype=np.uint8)
blank_rgb = np.zeros((800, 800, 3), dtype=np.uint8)

u1, u2 = st.columns(2)
with u1:
    st.write("Binarized (after denoise)")
    bin_ph = st.image(blank_gray)
with u2:
    st.write("Skeleton")
    skel_ph = st.image(blank_gray)

st.write("Skeleton over input")
overlay_ph = st.image(blank_rgb)

st.markdown("---")
st.subheader("Foreground pixels per round")
rounds_ph = st.empty()
counts_ph = st.empty()

if uploaded is None:
    counts_ph.text("Rounds: -\nForeground: - -> -\nComponents: - -> -")
    rounds_ph.pyplot(plt.figure())
    plt.close("all")
    st.stop()

# ----------------------------
# With file: prepare temp path
# ----------------------------
file_bytes = uploaded.getvalue()
file_id = _file_id_from_bytes(file_bytes)

tmpdir = tempfile.TemporaryDirectory()
tmp_path = Path(tmpdir.name) / uploaded.name
tmp_path.write_bytes(file_bytes)

if st.session_state.file_id != file_id:
    st.session_state.file_id = file_id
    st.session_state.result_cache = None
    st.session_state.threshold_manual = None

img01 = input_img(str(tmp_path), background_is_dark)
threshold_otsu = float(calc_otsu_threshold(img01))
threshold_otsu_line_ph.write(f"threshold_otsu (recommended): {threshold_otsu:.3f}")

# Initialize threshold from Otsu once per new image, then rerun so the sidebar reflects it.
if st.session_state.threshold_manual is None:
    st.session_state.threshold_manual = float(threshold_otsu)
    st.rerun()

threshold_manual = float(st.session_state.threshold_manual)
img_bin = denoise(binarize(img01, threshold_manual), eliminate_length_px)
bin_ph.image(crop_center(img_bin.astype(np.uint8) * 255, 800))

if run_button:
    try:
        st.session_state.result_cache = compute_skeleton(img01, threshold_manual, eliminate_length_px, variant)
    except InvalidInputError as e:
        st.session_state.result_cache = None
        st.error(str(e))

res = st.session_state.result_cache

if res is None:
    counts_ph.text("Rounds: -\nForeground: - -> -\nComponents: - -> -")
    fig = plt.figure()
    ax = fig.add_subplot(111)
    ax.set_xlabel("Round")
    ax.set_ylabel("Foreground pixels")
    fig.tight_layout()
    rounds_ph.pyplot(fig)
    plt.close(fig)
else:
    skel_ph.image(crop_center(res["img_skel"].astype(np.uint8) * 255, 800))
    overlay_ph.image(crop_center(res["overlay"], 800))

    counts = [res["foreground_before"]] + list(res["foreground_counts"])
    fig = plt.figure()
    ax = fig.add_subplot(111)
    ax.plot(np.arange(len(counts)), counts, "o-")
    ax.set_xlabel("Round")
    ax.set_ylabel("Foreground pixels")
    fig.tight_layout()
    rounds_ph.pyplot(fig)
    plt.close(fig)

    counts_ph.text(
        "\n".join(
            [
                f"Rounds: {res['n_rounds']}",
                f"Foreground: {res['foreground_before']} -> {res['foreground_after']}",
                f"Components: {res['components_before']} -> {res['components_after']}",
            ]
        )
    )

tmpdir.cleanup()
