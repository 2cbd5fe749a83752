"""Настройки генератора эталонных изображений.

Подписи задаются явно через `LabelStyle`, без глобального состояния.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from orientcrop.models.geometry import Size


class ImageFormat(Enum):
    JPEG = "jpeg"
    PNG = "png"
    HEIF = "heif"
    TIFF = "tiff"

    @property
    def extension(self) -> str:
        return {"jpeg": "jpg", "png": "png", "heif": "heic", "tiff": "tiff"}[self.value]

    @property
    def pil_format(self) -> str:
        return {"jpeg": "JPEG", "png": "PNG", "heif": "HEIF", "tiff": "TIFF"}[self.value]

    @property
    def is_lossy(self) -> bool:
        return self in (ImageFormat.JPEG, ImageFormat.HEIF)


@dataclass(frozen=True)
class LabelStyle:
    """Оформление подписей.

    Fields:
        font_size: Размер шрифта, px; `None` — min(ширина, высота) / 16.
        edge_offset: Отступ подписей от края изображения, px.
        text_color: Цвет текста RGBA.
        background_color: Цвет подложки RGBA (полупрозрачный чёрный).
        edge_labels: Подписи краёв: слева, сверху, справа, снизу.
    """
    font_size: Optional[float] = None
    edge_offset: int = 16
    text_color: Tuple[int, int, int, int] = (255, 255, 255, 255)
    background_color: Tuple[int, int, int, int] = (0, 0, 0, 77)
    edge_labels: Tuple[str, str, str, str] = ("Left", "Top", "Right", "Bottom")

    def font_size_for(self, size: Size) -> float:
        if self.font_size is not None:
            return self.font_size
        return min(size.width, size.height) / 16.0


@dataclass(frozen=True)
class GeneratorConfig:
    """Параметры генерации 8 ориентированных копий.

    Fields:
        format: Формат вывода.
        max_size: Размер, в который вписывается изображение; `None` — исходный.
        quality: Сжатие 0.0–1.0, только для форматов с потерями.
        label_style: Оформление подписей; `None` — без подписей.
    """
    format: ImageFormat = ImageFormat.JPEG
    max_size: Optional[Size] = None
    quality: Optional[float] = None
    label_style: Optional[LabelStyle] = field(default_factory=LabelStyle)

    def __post_init__(self) -> None:
        if self.quality is not None and not 0.0 <= self.quality <= 1.0:
            raise ValueError(f"quality должно быть в диапазоне 0.0–1.0: {self.quality}")
