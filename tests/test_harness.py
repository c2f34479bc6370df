import numpy as np
import imageio.v3 as iio
import pytest

from skelthin.binarize import binarize, calc_otsu_threshold
from skelthin.denoise import denoise
from skelthin.input_img import input_img, to_gray01
from skelthin.overlay import configure_overlay_output, draw_skeleton_overlay, save_skeleton_overlay
from skelthin.raster import BinaryRaster
from skelthin.skeletonize import run_thinning
from skelthin.types import PassResult, RoundRecord
from skelthin.visualize_results import (
    RoundRecorder,
    _pick_frames,
    configure_visualize_output,
    visualize_results,
)


def test_input_img_normalizes_and_inverts(tmp_path):
    img = np.full((8, 8), 255, dtype=np.uint8)
    img[2:6, 2:6] = 0
    path = tmp_path / "dark_on_light.png"
    iio.imwrite(path, img)

    light = input_img(path, background_is_dark=False)
    assert light.dtype == np.float32
    assert light[3, 3] == pytest.approx(1.0)
    assert light[0, 0] == pytest.approx(0.0)

    raw = input_img(path, background_is_dark=True)
    assert raw[3, 3] == pytest.approx(0.0)


def test_to_gray01_rgb():
    rgb = np.zeros((4, 4, 3), dtype=np.uint8)
    rgb[1, 1] = (255, 255, 255)
    g = to_gray01(rgb)
    assert g.shape == (4, 4)
    assert g[1, 1] == pytest.approx(1.0)
    assert g[0, 0] == pytest.approx(0.0)


def test_to_gray01_rejects_odd_shapes():
    with pytest.raises(ValueError):
        to_gray01(np.zeros((4, 4, 2), dtype=np.uint8))


def test_to_gray01_float_ranges():
    unit = np.array([[0.0, 0.25], [0.5, 1.0]])
    assert to_gray01(unit).dtype == np.float32
    assert np.allclose(to_gray01(unit), unit)
    assert np.allclose(to_gray01(unit * 4 + 2), unit)
    assert not to_gray01(np.full((3, 3), 7.0)).any()


def test_otsu_splits_a_bimodal_image():
    img = np.full((10, 10), 0.1, dtype=np.float32)
    img[3:7, 3:7] = 0.9
    t = calc_otsu_threshold(img)
    assert 0.1 < t < 0.9
    bw = binarize(img)
    assert bw.dtype == np.bool_
    assert np.count_nonzero(bw) == 16


def test_otsu_on_flat_image():
    assert calc_otsu_threshold(np.zeros((5, 5))) == 0.5


def test_binarize_manual_threshold():
    img = np.array([[0.2, 0.5, 0.8]], dtype=np.float32)
    assert binarize(img, 0.5).tolist() == [[False, False, True]]


def test_denoise_removes_specks_only():
    bw = np.zeros((20, 20), dtype=bool)
    bw[2, 2] = True
    bw[10:15, 10:15] = True
    out = denoise(bw, 2)
    assert not out[2, 2]
    assert out[10:15, 10:15].all()


def test_denoise_disabled_returns_copy():
    bw = np.zeros((5, 5), dtype=bool)
    bw[2, 2] = True
    out = denoise(bw, 0)
    assert np.array_equal(out, bw)
    assert out is not bw


def test_overlay_paints_skeleton_pixels():
    img01 = np.full((5, 5), 0.5, dtype=np.float32)
    sk = np.zeros((5, 5), dtype=bool)
    sk[2, 1:4] = True
    rgb = draw_skeleton_overlay(img01, sk)
    assert rgb.shape == (5, 5, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[2, 2]) == (255, 0, 0)
    assert tuple(rgb[0, 0]) == (127, 127, 127)

    green = draw_skeleton_overlay(img01, sk, color=(0, 255, 0))
    assert tuple(green[2, 1]) == (0, 255, 0)


def test_overlay_shape_mismatch():
    with pytest.raises(ValueError):
        draw_skeleton_overlay(np.zeros((4, 4)), np.zeros((5, 5)))


def test_save_overlay(tmp_path):
    configure_overlay_output(tmp_path, "demo")
    path = save_skeleton_overlay(np.zeros((6, 6)), np.eye(6, dtype=bool))
    assert path == tmp_path / "demo__overlay.png"
    assert iio.imread(path).shape == (6, 6, 3)


def test_round_recorder_and_visualize(tmp_path, square5):
    recorder = RoundRecorder()
    result = run_thinning(square5, observer=recorder)
    assert len(recorder.frames) == result.n_rounds
    assert recorder.foreground_counts == [8, 1, 1]
    assert recorder.frames[-1].sum() == 1

    configure_visualize_output(tmp_path, "sq")
    saved = visualize_results(recorder, square5)
    txt = (tmp_path / "sq__rounds.txt").read_text(encoding="utf-8")
    assert "rounds: 3" in txt
    assert "1,10,7,8" in txt
    assert (tmp_path / "sq__rounds.png").exists()
    assert set(saved) == {"rounds_txt", "rounds_png"}


def test_visualize_without_frames(tmp_path, square5):
    recorder = RoundRecorder(keep_frames=False)
    run_thinning(square5, observer=recorder)
    configure_visualize_output(tmp_path, "noframes")
    saved = visualize_results(recorder, square5)
    assert set(saved) == {"rounds_txt"}


def test_pick_frames_keeps_first_and_last():
    idx = _pick_frames(100, 10)
    assert idx[0] == 0 and idx[-1] == 99
    assert len(idx) <= 10
    assert _pick_frames(5, 10) == [0, 1, 2, 3, 4]


def test_round_recorder_thins_frames_on_long_runs():
    raster = BinaryRaster.from_array(np.ones((6, 7), dtype=np.uint8))
    recorder = RoundRecorder(max_frames=4)
    for k in range(1, 21):
        raster.data[:] = 0
        raster.data.flat[k] = 1
        record = RoundRecord(k, (PassResult(0, 1), PassResult(1, 0)), raster.foreground_count())
        recorder(record, raster)

    assert len(recorder.records) == 20
    assert recorder.frame_rounds == [1, 9, 17, 20]
    frames = recorder.frames
    assert len(frames) == 4
    assert frames[0].shape == (6, 7)
    assert np.array_equal(frames[-1], raster.data)
    assert frames[1].flat[9] == 1 and frames[1].sum() == 1


def test_round_recorder_without_frames_keeps_nothing(square5):
    recorder = RoundRecorder(keep_frames=False)
    run_thinning(square5, observer=recorder)
    assert recorder.frames == []
    assert recorder.frame_rounds == []
    assert len(recorder.records) == 3
