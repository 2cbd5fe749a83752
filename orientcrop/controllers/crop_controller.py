"""Контроллер кадрирования: оркестрация сервисов геометрии и ввода-вывода.

SOLID:
- SRP: класс связывает декодер, геометрию и кодировщик (без собственной математики).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Порядок шагов повторяет конвейер: отображаемый прямоугольник -> сырые
  координаты -> окно буфера -> (опционально) вертикальные пиксели -> файл.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from orientcrop.models.config import ImageFormat
from orientcrop.models.geometry import Rect
from orientcrop.models.image_model import ImageData
from orientcrop.models.orientation import Orientation
from orientcrop.models.pixel_buffer import PixelBuffer
from orientcrop.services.crop_service import crop
from orientcrop.services.image_service import ImageService
from orientcrop.services.orient_service import materialize
from orientcrop.services.rect_service import display_to_raw_crop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropResult:
    """Результат кадрирования.

    Fields:
        buffer: Пиксели кадра; окно над исходным буфером, если не материализован.
        orientation: Код, который нужно записать вместе с `buffer`.
        raw_rect: Кадр в сырых координатах исходного изображения.
    """
    buffer: PixelBuffer
    orientation: Orientation
    raw_rect: Rect


@dataclass
class CropController:
    """Кадрирование изображений по прямоугольнику в отображаемых координатах.

    Ответственности:
    - Перевод прямоугольника в сырые координаты через `rect_service`.
    - Вырезание окна без копирования через `crop_service`.
    - Материализация в вертикальную ориентацию через `orient_service`.
    - Чтение и запись файлов через `ImageService`.
    """
    _image_service: ImageService = ImageService()

    def crop(self, image: ImageData, display_rect: Rect, materialize_upright: bool = True) -> CropResult:
        """Вырезает `display_rect` (отображаемые координаты) из сырого буфера `image`.

        При `materialize_upright=False` возвращается окно над памятью `image.buffer`
        и исходный код ориентации; окно действительно, пока жив исходный буфер.
        """
        raw_rect = display_to_raw_crop(display_rect, image.orientation, image.size)
        view = crop(image.buffer, raw_rect)
        if not materialize_upright:
            return CropResult(buffer=view, orientation=image.orientation, raw_rect=raw_rect)
        return CropResult(buffer=materialize(view, image.orientation), orientation=Orientation.UP, raw_rect=raw_rect)

    def crop_file(
        self,
        source: str | Path,
        display_rect: Rect,
        output: str | Path,
        keep_orientation: bool = False,
        image_format: Optional[ImageFormat] = None,
        quality: Optional[float] = None,
    ) -> Path:
        """Декодирует `source`, кадрирует и записывает результат в `output`."""
        image = self._image_service.load_image(source)
        result = self.crop(image, display_rect, materialize_upright=not keep_orientation)
        buffer = result.buffer.copy() if result.buffer.is_view else result.buffer
        logger.info("crop %s: display %s -> raw %s", source, display_rect.as_tuple(), result.raw_rect.as_tuple())
        path = self._image_service.save_image(buffer, output, result.orientation, image_format, quality)
        image.buffer.release()
        return path

    def reorient_file(
        self,
        source: str | Path,
        output: str | Path,
        image_format: Optional[ImageFormat] = None,
        quality: Optional[float] = None,
    ) -> Path:
        """Переносит ориентацию в пиксели и записывает файл с кодом `UP`."""
        image = self._image_service.load_image(source)
        upright = materialize(image.buffer, image.orientation)
        image.buffer.release()
        return self._image_service.save_image(upright, output, Orientation.UP, image_format, quality)
