"""Кадрирование буфера без копирования пикселей.

Результат — окно над памятью исходного буфера: смещение меняется, шаг строки
остаётся прежним. Исходный буфер должен жить дольше всех своих окон.
"""
from __future__ import annotations

import logging

from orientcrop.models.errors import OutOfBoundsError
from orientcrop.models.geometry import Rect
from orientcrop.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def crop(buffer: PixelBuffer, rect: Rect) -> PixelBuffer:
    """Окно `rect` (в сырых координатах самого буфера) над памятью `buffer`.

    Raises:
        OutOfBoundsError: если `rect` выходит за границы буфера; результат
            никогда не подрезается до допустимой области.
        ValueError: если координаты не целые.
    """
    if not rect.is_integral():
        raise ValueError(f"Прямоугольник кадрирования должен быть целочисленным: {rect}")
    x, y, w, h = (int(v) for v in rect.as_tuple())
    view = buffer.view(x, y, w, h)
    logger.debug("crop %s at offset %d (stride %d)", (x, y, w, h), view.offset, buffer.bytes_per_row)
    return view
