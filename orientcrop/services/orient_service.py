"""Физический поворот/отражение пикселей в отображаемую ориентацию.

Используется, когда получателю нужны «вертикальные» пиксели (например,
кодировщику, не понимающему тег ориентации).
"""
from __future__ import annotations

import logging
from typing import Iterator, Tuple

import numpy as np

from orientcrop.models.errors import AllocationError
from orientcrop.models.orientation import Orientation
from orientcrop.models.pixel_buffer import PixelBuffer
from orientcrop.services.transform_service import inverse_orientation_transform

logger = logging.getLogger(__name__)


def materialize(buffer: PixelBuffer, orientation: Orientation) -> PixelBuffer:
    """Новый владеющий буфер с пикселями `buffer` в отображаемой ориентации.

    Для каждого выходного пикселя исходный пиксель находится обратным
    преобразованием центра пикселя (начало координат сверху слева).

    Raises:
        AllocationError: если не удалось выделить память.
        ReleasedBufferError: если память `buffer` уже освобождена.
    """
    src = buffer.to_array()
    out_size = buffer.size.oriented(orientation)
    out = PixelBuffer.allocate(out_size.width, out_size.height, buffer.mode)
    if out.width == 0 or out.height == 0:
        return out

    inverse = inverse_orientation_transform(orientation, buffer.size)
    try:
        ys, xs = np.mgrid[0:out.height, 0:out.width]
        sx, sy = inverse.apply_to_points(xs + 0.5, ys + 0.5)
        out.pixels()[...] = src[np.floor(sy).astype(np.intp), np.floor(sx).astype(np.intp)]
    except MemoryError as exc:
        raise AllocationError(f"Не удалось ориентировать буфер {buffer.width}x{buffer.height}") from exc

    logger.debug("materialize %s: %dx%d -> %dx%d", orientation.name, buffer.width, buffer.height, out.width, out.height)
    return out


def materialize_all(buffer: PixelBuffer) -> Iterator[Tuple[Orientation, PixelBuffer]]:
    """Все 8 вариантов; исходный буфер только читается."""
    for orientation in Orientation:
        yield orientation, materialize(buffer, orientation)
