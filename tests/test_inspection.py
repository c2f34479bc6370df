import numpy as np
import pytest

from generate_inspection_image import SHAPES, Params, format_filename, generate_all, generate_shape_image
from run_inspection import inspect_one
from skelthin.types import ThinningVariant


def test_generate_all_shapes():
    images = generate_all(Params(img_size=40, shape_size=11))
    assert set(images) == set(SHAPES)
    for img in images.values():
        assert img.shape == (40, 40)
        assert set(np.unique(img).tolist()) == {0, 255}
        # nothing touches the border
        assert not img[0, :].any() and not img[-1, :].any()


def test_unknown_shape():
    with pytest.raises(ValueError):
        generate_shape_image("hexagon", Params())


def test_format_filename():
    assert format_filename("disk", 21) == "shape_disk_s0021.png"


@pytest.mark.parametrize("variant", list(ThinningVariant))
@pytest.mark.parametrize("kind", ["square", "rect", "disk", "line"])
def test_inspect_one_properties_hold(variant, kind):
    img = generate_all(Params(img_size=48, shape_size=17))[kind]
    run = inspect_one(img, variant)
    assert run["idempotent"]
    assert run["border_kept"]
    assert run["rounds_bounded"]
    assert run["components_after"] == run["components_before"] == 1
    assert 0.0 <= run["agree_skimage"] <= 1.0
    assert run["foreground_after"] < run["foreground_before"]
