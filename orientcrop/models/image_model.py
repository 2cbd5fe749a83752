"""Модель декодированного изображения и его метаданных.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from orientcrop.models.geometry import Size
from orientcrop.models.orientation import Orientation
from orientcrop.models.pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель изображения в сырой (неповёрнутой) раскладке.

    Fields:
        path: Путь к исходному файлу.
        buffer: Пиксели в том виде, в каком они хранятся в файле.
        orientation: Код ориентации из метаданных.
        size: Сырой размер, px.
        mode: Режим PIL, например "RGBA".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    buffer: PixelBuffer
    orientation: Orientation
    size: Size
    mode: str
    size_bytes: Optional[int]

    @property
    def display_size(self) -> Size:
        return self.size.oriented(self.orientation)
