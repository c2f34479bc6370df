import numpy as np
import pytest

from skelthin.errors import InvalidInputError, PreconditionViolation
from skelthin.raster import BinaryRaster, count_components


def test_0_255_round_trip_keeps_dtype_and_sentinel():
    img = np.zeros((5, 6), dtype=np.uint8)
    img[1:4, 2:5] = 255
    raster = BinaryRaster.from_array(img)

    assert raster.foreground == 255
    assert raster.data.dtype == np.uint8
    assert set(np.unique(raster.data).tolist()) == {0, 1}
    out = raster.to_array()
    assert out.dtype == np.uint8
    assert np.array_equal(out, img)


def test_bool_round_trip():
    img = np.zeros((4, 4), dtype=bool)
    img[1, 1] = True
    out = BinaryRaster.from_array(img).to_array()
    assert out.dtype == np.bool_
    assert np.array_equal(out, img)


def test_0_1_int_round_trip():
    img = np.eye(5, dtype=np.int64)
    raster = BinaryRaster.from_array(img)
    assert raster.foreground == 1
    assert np.array_equal(raster.to_array(), img)
    assert raster.to_array().dtype == np.int64


def test_explicit_foreground_value():
    img = np.zeros((3, 3), dtype=np.int32)
    img[1, 1] = 7
    raster = BinaryRaster.from_array(img, foreground=7)
    assert raster.foreground_count() == 1
    assert np.array_equal(raster.to_array(), img)


def test_all_background_is_accepted():
    img = np.zeros((3, 3), dtype=np.uint8)
    raster = BinaryRaster.from_array(img)
    assert raster.foreground_count() == 0
    assert np.array_equal(raster.to_array(), img)


@pytest.mark.parametrize(
    "img",
    [
        np.zeros((2, 5), dtype=np.uint8),
        np.zeros((5, 2), dtype=np.uint8),
        np.zeros((0, 5), dtype=np.uint8),
        np.zeros((5,), dtype=np.uint8),
        np.zeros((4, 4, 3), dtype=np.uint8),
        np.array([[0, 1, 255], [0, 0, 0], [0, 0, 0]], dtype=np.uint8),
        np.array([[0, 128, 0], [0, 0, 0], [0, 0, 0]], dtype=np.uint8),
        np.array([[0.0, np.nan, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 0.0]]),
        np.array([["a", "b", "c"]] * 3),
    ],
)
def test_invalid_rasters_are_rejected(img):
    with pytest.raises(InvalidInputError):
        BinaryRaster.from_array(img)


def test_explicit_foreground_rejects_other_values():
    img = np.zeros((3, 3), dtype=np.uint8)
    img[1, 1] = 255
    with pytest.raises(InvalidInputError):
        BinaryRaster.from_array(img, foreground=1)


@pytest.mark.parametrize(
    "dtype, foreground",
    [(np.int8, 255), (np.uint8, 256), (np.uint8, -1), (np.uint8, 1.5), (np.float32, np.inf)],
)
def test_foreground_that_does_not_fit_the_dtype_is_rejected(dtype, foreground):
    img = np.zeros((3, 3), dtype=dtype)
    with pytest.raises(InvalidInputError):
        BinaryRaster.from_array(img, foreground=foreground)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        BinaryRaster.from_array(np.zeros((1, 1)))


def test_interior_and_border():
    raster = BinaryRaster.from_array(np.zeros((4, 5), dtype=np.uint8))
    assert raster.interior.shape == (2, 3)
    assert raster.is_interior(1, 1)
    assert raster.is_interior(2, 3)
    assert not raster.is_interior(0, 2)
    assert not raster.is_interior(3, 2)
    assert not raster.is_interior(2, 0)
    assert not raster.is_interior(2, 4)


@pytest.mark.parametrize("rc", [(0, 0), (0, 2), (2, 4), (3, 1), (-1, 1), (10, 10)])
def test_neighborhood_outside_interior_is_a_precondition_violation(rc):
    raster = BinaryRaster.from_array(np.ones((4, 5), dtype=np.uint8))
    with pytest.raises(PreconditionViolation):
        raster.neighborhood(*rc)


def test_copy_is_independent():
    raster = BinaryRaster.from_array(np.ones((3, 3), dtype=np.uint8))
    other = raster.copy()
    other.data[1, 1] = 0
    assert raster.data[1, 1] == 1


def test_count_components_uses_8_connectivity():
    img = np.zeros((6, 6), dtype=np.uint8)
    img[1, 1] = 1
    img[2, 2] = 1      # diagonal touch -> same component
    img[4, 4] = 255
    assert count_components(img) == 2
    assert count_components(np.zeros((3, 3))) == 0
