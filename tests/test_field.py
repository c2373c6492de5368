"""DataField 테스트"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from corrfield import DataField


def test_dims_and_extent():
    field = DataField.new(7, 5, xreal=14.0, yreal=2.5)
    assert field.get_dims() == (7, 5)
    assert field.data.shape == (5, 7)
    assert field.get_physical_extent() == (14.0, 2.5)


def test_default_extent_is_pixel_count():
    field = DataField(np.zeros((4, 6)))
    assert field.get_physical_extent() == (6.0, 4.0)


def test_invalid_arrays_rejected():
    with pytest.raises(ValueError):
        DataField(np.zeros(5))
    with pytest.raises(ValueError):
        DataField(np.zeros((3, 3)), xreal=-1.0)


def test_duplicate_is_independent():
    field = DataField.from_array(np.arange(12).reshape(3, 4))
    copy = field.duplicate()
    copy.data[0, 0] = 100.0
    assert field.data[0, 0] == 0.0


def test_get_data_is_read_only():
    field = DataField.new(3, 3)
    view = field.get_data()
    with pytest.raises(ValueError):
        view[0, 0] = 1.0


def test_new_alike_and_fill():
    field = DataField.new(4, 3, xreal=8.0, yreal=3.0, fill=2.0)
    alike = field.new_alike()
    assert alike.get_dims() == (4, 3)
    assert alike.get_physical_extent() == (8.0, 3.0)
    assert np.all(alike.data == 0.0)

    alike.fill(5.0)
    assert alike.get_sum() == pytest.approx(60.0)
    alike.clear()
    assert alike.get_sum() == 0.0


def test_area_statistics():
    values = np.arange(20, dtype=np.float64).reshape(4, 5)
    field = DataField.from_array(values)
    area = values[1:3, 2:5]

    assert field.area_sum(2, 1, 3, 2) == pytest.approx(np.sum(area))
    assert field.area_avg(2, 1, 3, 2) == pytest.approx(np.mean(area))
    assert field.area_rms(2, 1, 3, 2) == pytest.approx(np.std(area))
    assert field.get_rms() == pytest.approx(np.std(values))

    with pytest.raises(ValueError):
        field.area_avg(3, 0, 3, 2)


def test_from_image_converts_bgr():
    image = np.zeros((6, 8, 3), dtype=np.uint8)
    image[..., 1] = 200
    field = DataField.from_image(image)
    assert field.get_dims() == (8, 6)
    assert np.all(field.data > 0)
