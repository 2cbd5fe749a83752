"""
Pytest configuration and shared fixtures for orientcrop tests.
"""
import numpy as np
import pytest
from PIL import Image

from orientcrop.models.orientation import Orientation
from orientcrop.models.pixel_buffer import PixelBuffer
from orientcrop.services.image_service import ORIENTATION_TAG


def coordinate_array(width, height, channels=3):
    """Pixel (x, y) holds (x, y, 7, ...) so every position is distinguishable."""
    arr = np.zeros((height, width, channels), dtype=np.uint8)
    ys, xs = np.mgrid[0:height, 0:width]
    arr[:, :, 0] = xs % 256
    if channels > 1:
        arr[:, :, 1] = ys % 256
    if channels > 2:
        arr[:, :, 2:] = 7
    return arr


@pytest.fixture
def make_buffer():
    """Factory for owning buffers with coordinate-encoded pixels."""
    def _make(width, height, mode="RGB"):
        channels = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}[mode]
        return PixelBuffer.from_array(coordinate_array(width, height, channels), mode=mode)
    return _make


@pytest.fixture
def standard_sizes():
    """Reference sizes, in raw storage orientation."""
    return {
        'portrait': (1200, 1800),
        'landscape': (1800, 1200),
        'square': (1000, 1000),
        'odd': (7, 3),
    }


@pytest.fixture
def write_tagged_image(tmp_path):
    """Writes a coordinate-encoded image with the given EXIF orientation tag."""
    def _write(width, height, orientation=Orientation.UP, name="sample.png", fmt="PNG"):
        image = Image.fromarray(coordinate_array(width, height))
        exif = Image.Exif()
        exif[ORIENTATION_TAG] = int(orientation)
        path = tmp_path / name
        image.save(path, fmt, exif=exif.tobytes())
        return path
    return _write



@pytest.fixture
def coordinates():
    """The coordinate-encoded array factory used by the other fixtures."""
    return coordinate_array
