"""Генерация эталонных изображений для всех 8 кодов ориентации.

Из исходного снимка получаются 8 файлов: пиксели каждого хранятся в сырой
раскладке своего кода, а тег ориентации записан так, что корректный
просмотрщик покажет все 8 одинаково. Подписи краёв и названия кода позволяют
сразу увидеть ошибку в конвейере отображения.

Аналог в ImageMagick (без подписей):
    convert image.jpg -auto-orient -set option:exif '6' -orient RightTop -rotate -90 image_6.jpg
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Tuple

from PIL import Image, ImageDraw, ImageFont

from orientcrop.models.config import GeneratorConfig, LabelStyle
from orientcrop.models.orientation import Orientation
from orientcrop.models.pixel_buffer import PixelBuffer
from orientcrop.services.image_service import ImageService, buffer_to_pil, pil_to_buffer
from orientcrop.services.orient_service import materialize

logger = logging.getLogger(__name__)

# (ширина изображения, высота изображения, ширина подписи, высота подписи, отступ) -> (x, y)
Placement = Callable[[int, int, int, int, int], Tuple[int, int]]

_EDGE_PLACEMENTS: Tuple[Placement, ...] = (
    lambda W, H, w, h, o: (o, (H - h) // 2),  # left
    lambda W, H, w, h, o: ((W - w) // 2, o),  # top
    lambda W, H, w, h, o: (W - w - o, (H - h) // 2),  # right
    lambda W, H, w, h, o: ((W - w) // 2, H - h - o),  # bottom
)


def _center(W: int, H: int, w: int, h: int, _o: int) -> Tuple[int, int]:
    return ((W - w) // 2, (H - h) // 2)


def draw_labels(buffer: PixelBuffer, labels: List[Tuple[str, Placement]], style: LabelStyle) -> PixelBuffer:
    """Рисует подписи на полупрозрачной подложке; возвращает новый буфер."""
    base = buffer_to_pil(buffer)
    mode = base.mode
    base = base.convert("RGBA")
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    font = ImageFont.load_default(size=max(1.0, style.font_size_for(buffer.size)))

    W, H = base.size
    for text, placement in labels:
        text = f" {text} "
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x, y = placement(W, H, right, bottom, style.edge_offset)
        draw.rectangle((x, y, x + right, y + bottom), fill=style.background_color)
        draw.text((x, y), text, font=font, fill=style.text_color)

    return pil_to_buffer(Image.alpha_composite(base, overlay).convert(mode))


@dataclass
class OrientedGenerator:
    """Создаёт 8 ориентированных копий изображения."""
    image_service: ImageService = ImageService()

    def generate(self, source: str | Path, destination: str | Path, config: GeneratorConfig = GeneratorConfig()) -> List[Path]:
        """Генерирует файлы `<имя>_<код>.<расширение>` в каталоге `destination`.

        Args:
            source: Исходное изображение (его собственная ориентация учитывается).
            destination: Существующий каталог назначения.
            config: Формат, размер, качество и оформление подписей.

        Returns:
            Пути записанных файлов в порядке кодов 1..8.

        Raises:
            FileNotFoundError: если источника или каталога назначения нет.
        """
        directory = Path(destination)
        if not directory.is_dir():
            raise FileNotFoundError(f"Каталог назначения не найден: {directory}")

        image = self.image_service.load_image(source)
        upright = materialize(image.buffer, image.orientation)
        if config.max_size is not None:
            upright = self.image_service.resize_to_fit(upright, config.max_size)

        style = config.label_style
        if style is not None:
            upright = draw_labels(upright, list(zip(style.edge_labels, _EDGE_PLACEMENTS)), style)

        stem = Path(source).name.split(".")[0] or "oriented_image"
        written: List[Path] = []
        for orientation in Orientation:
            labeled = upright
            if style is not None:
                labeled = draw_labels(upright, [(f"{orientation.label} ({int(orientation)})", _center)], style)
            # stored pixels are the upright ones run through the inverse mapping
            raw = materialize(labeled, orientation.inverse)
            path = directory / f"{stem}_{int(orientation)}.{config.format.extension}"
            written.append(
                self.image_service.save_image(raw, path, orientation, config.format, config.quality)
            )

        logger.info("generated %d oriented images from %s in %s", len(written), source, directory)
        return written

