import itertools

import numpy as np
import pytest
from PIL import Image

from collage.errors import InvalidImageError
from collage.models.layout_model import Dimensions
from collage.services.fit_service import FitService
from helpers import gradient, solid

fitter = FitService()


@pytest.mark.parametrize("source_size", [(1, 1), (40, 30), (30, 40), (401, 97), (100, 200)])
@pytest.mark.parametrize("target_size", [(1, 1), (50, 50), (120, 33), (7, 300)])
@pytest.mark.parametrize("preserve", [False, True])
def test_fit_returns_exact_target_size(source_size, target_size, preserve):
    result = fitter.fit(gradient(*source_size), Dimensions(*target_size), preserve)
    assert result.size == target_size
    assert result.mode == "RGBA"


def test_fit_converts_rgb_source():
    result = fitter.fit(Image.new("RGB", (20, 10), (10, 20, 30)), Dimensions(5, 5), preserve_aspect=False)
    assert result.mode == "RGBA"
    r, g, b, a = result.getpixel((2, 2))
    assert abs(r - 10) <= 1 and abs(g - 20) <= 1 and abs(b - 30) <= 1 and a >= 254


def test_fit_does_not_mutate_source():
    source = gradient(64, 48)
    before = source.tobytes()
    fitter.fit(source, Dimensions(10, 10), preserve_aspect=True)
    fitter.fit(source, Dimensions(64, 48), preserve_aspect=False)
    assert source.tobytes() == before
    assert source.size == (64, 48)


def test_fit_same_size_returns_new_buffer():
    source = solid(10, 10)
    result = fitter.fit(source, Dimensions(10, 10), preserve_aspect=False)
    assert result is not source
    assert result.tobytes() == source.tobytes()


def test_preserve_crops_center_without_scaling():
    source = gradient(400, 100)
    result = fitter.fit(source, Dimensions(100, 100), preserve_aspect=True)
    assert result.tobytes() == source.crop((150, 0, 250, 100)).tobytes()


def test_preserve_crops_vertical_excess():
    source = gradient(50, 80)
    result = fitter.fit(source, Dimensions(50, 50), preserve_aspect=True)
    assert result.tobytes() == source.crop((0, 15, 50, 65)).tobytes()


def test_odd_excess_drops_trailing_pixel():
    assert FitService.center_crop_box((103, 10), Dimensions(100, 10)) == (1, 0, 101, 10)
    assert FitService.center_crop_box((10, 13), Dimensions(10, 10)) == (0, 1, 10, 11)


def test_preserve_resamples_only_visible_region(monkeypatch):
    sizes = []
    original = Image.Image.resize

    def recording_resize(self, size, *args, **kwargs):
        sizes.append(tuple(size))
        return original(self, size, *args, **kwargs)

    monkeypatch.setattr(Image.Image, "resize", recording_resize)
    # full cover scaling would be 300x90000
    result = fitter.fit(solid(1, 300, (0, 0, 255, 255)), Dimensions(300, 1), preserve_aspect=True)
    assert result.size == (300, 1)
    assert sizes and all(w * h <= 300 for w, h in sizes)


def test_preserve_matches_scale_then_center_crop():
    source = gradient(200, 100)
    result = fitter.fit(source, Dimensions(50, 50), preserve_aspect=True)
    expected = source.resize((100, 50), Image.Resampling.BICUBIC).crop((25, 0, 75, 50))
    diff = np.abs(np.asarray(result).astype(int) - np.asarray(expected).astype(int))
    assert diff.max() <= 2


def test_source_box_maps_crop_back_to_source():
    box = FitService.source_box(Dimensions(200, 100), (100, 50), (25, 0, 75, 50))
    assert box == (50.0, 0.0, 150.0, 100.0)


@pytest.mark.parametrize(
    "source, target",
    list(itertools.product([(300, 200), (200, 300), (37, 91), (1000, 3), (64, 64)], [(100, 100), (160, 90), (9, 16)])),
)
def test_cover_size_keeps_source_aspect(source, target):
    sw, sh = source
    tw, th = target
    w, h = FitService.cover_size(Dimensions(sw, sh), Dimensions(tw, th))
    scale = max(tw / sw, th / sh)
    assert w >= tw and h >= th
    assert w == tw or h == th
    assert abs(w - sw * scale) <= 1
    assert abs(h - sh * scale) <= 1


def test_stretch_fills_whole_target_with_content():
    result = fitter.fit(solid(10, 40, (0, 0, 255, 255)), Dimensions(80, 20), preserve_aspect=False)
    arr = np.asarray(result).astype(int)
    assert np.abs(arr - np.array([0, 0, 255, 255])).max() <= 1


@pytest.mark.parametrize("size", [(0, 5), (5, 0)])
def test_degenerate_source_rejected(size):
    with pytest.raises(InvalidImageError):
        fitter.fit(Image.new("RGBA", size), Dimensions(10, 10), preserve_aspect=True)
    with pytest.raises(InvalidImageError):
        fitter.fit(Image.new("RGBA", size), Dimensions(10, 10), preserve_aspect=False)
