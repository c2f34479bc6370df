import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


def make_canvas(h, w, dtype=np.uint8):
    return np.zeros((h, w), dtype=dtype)


def make_disk(radius, margin=5, value=255):
    n = 2 * (radius + margin) + 1
    c = n // 2
    rr, cc = np.mgrid[0:n, 0:n]
    img = np.zeros((n, n), dtype=np.uint8)
    img[(rr - c) ** 2 + (cc - c) ** 2 <= radius * radius] = value
    return img, (c, c)


def random_blobs(seed, shape=(40, 40), n_rects=6, value=1):
    rng = np.random.default_rng(seed)
    img = np.zeros(shape, dtype=np.uint8)
    h, w = shape
    for _ in range(n_rects):
        r0 = int(rng.integers(1, h - 8))
        c0 = int(rng.integers(1, w - 8))
        rh = int(rng.integers(2, 8))
        cw = int(rng.integers(2, 8))
        img[r0:r0 + rh, c0:c0 + cw] = value
    return img


@pytest.fixture
def square5():
    img = make_canvas(9, 9)
    img[2:7, 2:7] = 255
    return img


@pytest.fixture
def thick_bar():
    img = make_canvas(25, 40)
    img[10:15, 3:37] = 255
    return img


@pytest.fixture
def plus_shape():
    img = make_canvas(31, 31)
    img[13:18, 4:27] = 1
    img[4:27, 13:18] = 1
    return img


@pytest.fixture
def l_shape():
    img = make_canvas(30, 30, dtype=bool)
    img[3:26, 3:10] = True
    img[19:26, 3:26] = True
    return img
