"""Ориентирование прямоугольников кадрирования.

Принципы:
- Каждый из 8 кодов разобран явно. Общая схема «матрица + ограничивающий
  прямоугольник» проверяется тестами на совпадение, но источником истины
  служат формулы ниже: для зеркальных поворотов на 90° платформенные
  преобразования давали неверный результат.
- Округление выполняется после преобразования, отдельно для начала и размера.
"""
from __future__ import annotations

import logging

from orientcrop.models.errors import OutOfBoundsError
from orientcrop.models.geometry import Rect, Size
from orientcrop.models.orientation import Orientation

logger = logging.getLogger(__name__)


def orient_rect(rect: Rect, orientation: Orientation, reference_size: Size) -> Rect:
    """Переносит прямоугольник из отображаемых координат в сырые.

    Args:
        rect: Прямоугольник в отображаемых координатах (начало сверху слева).
        orientation: Код ориентации изображения.
        reference_size: Размер пространства, в котором задан `rect`
            (отображаемый размер изображения).

    Returns:
        Тот же участок изображения в сырых координатах, округлённый до целых.
        Для кода `orientation.inverse` функция работает в обратную сторону.
    """
    W, H = reference_size.width, reference_size.height
    x, y, w, h = rect.x, rect.y, rect.width, rect.height

    if orientation is Orientation.UP:
        result = rect
    elif orientation is Orientation.UP_MIRRORED:
        result = Rect(W - w - x, y, w, h)
    elif orientation is Orientation.DOWN:
        result = Rect(W - w - x, H - h - y, w, h)
    elif orientation is Orientation.DOWN_MIRRORED:
        result = Rect(x, H - h - y, w, h)
    elif orientation is Orientation.LEFT_MIRRORED:
        result = Rect(y, x, h, w)
    elif orientation is Orientation.RIGHT:
        result = Rect(y, W - w - x, h, w)
    elif orientation is Orientation.RIGHT_MIRRORED:
        result = Rect(H - h - y, W - w - x, h, w)
    elif orientation is Orientation.LEFT:
        result = Rect(H - h - y, x, h, w)
    else:
        raise ValueError(f"Неизвестная ориентация: {orientation!r}")
    return result.rounded()


def display_rect(rect: Rect, orientation: Orientation, raw_size: Size) -> Rect:
    """Переносит прямоугольник из сырых координат в отображаемые.

    `raw_size` — сырой размер изображения.
    """
    return orient_rect(rect, orientation.inverse, raw_size)


def display_to_raw_crop(rect: Rect, orientation: Orientation, raw_size: Size) -> Rect:
    """Прямоугольник кадрирования в отображаемых координатах -> сырые координаты.

    Сначала прямоугольник ориентируется (с округлением), затем пересекается
    с сырыми границами изображения, поэтому результат всегда целочисленный
    и лежит внутри изображения.

    Raises:
        OutOfBoundsError: если прямоугольник не пересекается с изображением.
    """
    display_size = raw_size.oriented(orientation)
    oriented = orient_rect(rect, orientation, display_size)
    raw = oriented.intersection(Rect.from_size(raw_size))
    if raw.is_empty:
        raise OutOfBoundsError(f"Прямоугольник {rect} не пересекается с изображением {display_size}")
    logger.debug("crop %s (display %s) -> %s (raw %s)", rect, display_size, raw, raw_size)
    return raw
