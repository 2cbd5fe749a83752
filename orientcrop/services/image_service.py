"""Загрузка, сохранение и масштабирование изображений через Pillow.

Принципы:
- SRP: класс отвечает только за обмен с файлами и форматами; геометрия
  ориентации живёт в отдельных сервисах.
- Пиксели декодируются без применения тега ориентации: буфер хранит сырую
  раскладку, а код ориентации возвращается отдельно.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from orientcrop.models.config import ImageFormat
from orientcrop.models.errors import SourceUnreadableError, UnsupportedFormatError
from orientcrop.models.geometry import Size
from orientcrop.models.image_model import ImageData
from orientcrop.models.orientation import Orientation
from orientcrop.models.pixel_buffer import MODE_CHANNELS, PixelBuffer
from orientcrop.services.orient_service import materialize

logger = logging.getLogger(__name__)

register_heif_opener()

ORIENTATION_TAG = 0x0112

_SUFFIX_FORMATS = {
    ".jpg": ImageFormat.JPEG,
    ".jpeg": ImageFormat.JPEG,
    ".png": ImageFormat.PNG,
    ".heic": ImageFormat.HEIF,
    ".heif": ImageFormat.HEIF,
    ".tif": ImageFormat.TIFF,
    ".tiff": ImageFormat.TIFF,
}


def format_for_path(path: Path) -> ImageFormat:
    try:
        return _SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError:
        raise UnsupportedFormatError(f"Неизвестный формат для файла: {path}") from None


def buffer_to_pil(buffer: PixelBuffer) -> Image.Image:
    arr = buffer.to_array()
    if buffer.channels == 1:
        arr = arr[:, :, 0]
    return Image.fromarray(np.ascontiguousarray(arr))


def pil_to_buffer(image: Image.Image) -> PixelBuffer:
    if image.mode not in MODE_CHANNELS:
        image = image.convert("RGBA")
    return PixelBuffer.from_array(np.asarray(image, dtype=np.uint8), mode=image.mode)


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска вместе с кодом ориентации.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` с сырым буфером пикселей, кодом ориентации, размером и режимом.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            SourceUnreadableError: если файл не распознан как изображение.
            InvalidOrientationError: если тег ориентации содержит недопустимое значение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as pil_image:
                # TIFF: the tag is in the IFD, readable before decoding
                stored_value = pil_image.tag_v2.get(ORIENTATION_TAG) if hasattr(pil_image, "tag_v2") else None
                pil_image.load()
                orientation_value = pil_image.getexif().get(ORIENTATION_TAG)
                buffer = pil_to_buffer(pil_image)
        except UnidentifiedImageError as exc:
            raise SourceUnreadableError(f"Файл не является изображением: {path}") from exc
        except OSError as exc:
            raise SourceUnreadableError(f"Не удалось декодировать {path}: {exc}") from exc

        # Some Pillow decoders transpose on load and drop the tag; undo that
        applied_on_load = orientation_value is None and stored_value is not None
        if applied_on_load:
            orientation_value = stored_value
        orientation = Orientation.from_exif(orientation_value)
        if applied_on_load and orientation is not Orientation.UP:
            buffer = materialize(buffer, orientation.inverse)
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.debug("loaded %s: %dx%d %s, orientation %s", path, buffer.width, buffer.height, buffer.mode, orientation.name)
        return ImageData(
            path=path,
            buffer=buffer,
            orientation=orientation,
            size=buffer.size,
            mode=buffer.mode,
            size_bytes=size_bytes,
        )

    def save_image(
        self,
        buffer: PixelBuffer,
        file_path: str | Path,
        orientation: Orientation = Orientation.UP,
        image_format: Optional[ImageFormat] = None,
        quality: Optional[float] = None,
    ) -> Path:
        """Кодирует буфер в файл и записывает код ориентации в метаданные.

        Args:
            buffer: Пиксели для записи (окно тоже допустимо).
            file_path: Путь назначения.
            orientation: Код, который будет записан в тег 0x0112.
            image_format: Формат; `None` — по расширению файла.
            quality: Сжатие 0.0–1.0; для PNG и TIFF игнорируется.

        Returns:
            Путь записанного файла.
        """
        path = Path(file_path)
        image_format = image_format or format_for_path(path)
        if quality is not None and not 0.0 <= quality <= 1.0:
            raise ValueError(f"quality должно быть в диапазоне 0.0–1.0: {quality}")

        pil_image = buffer_to_pil(buffer)
        if image_format is ImageFormat.JPEG and pil_image.mode in ("RGBA", "LA"):
            pil_image = pil_image.convert(pil_image.mode[:-1])
        elif image_format is ImageFormat.HEIF and pil_image.mode in ("L", "LA"):
            pil_image = pil_image.convert("RGBA" if pil_image.mode == "LA" else "RGB")

        params = {}
        if image_format is ImageFormat.TIFF:
            params["tiffinfo"] = {ORIENTATION_TAG: int(orientation)}
        else:
            exif = Image.Exif()
            exif[ORIENTATION_TAG] = int(orientation)
            params["exif"] = exif.tobytes()
        if quality is not None and image_format.is_lossy:
            params["quality"] = max(1, int(round(quality * 100)))

        pil_image.save(path, image_format.pil_format, **params)
        logger.info("saved %s (%dx%d, orientation %d)", path, buffer.width, buffer.height, int(orientation))
        return path

    def resize_to_fit(self, buffer: PixelBuffer, max_size: Size) -> PixelBuffer:
        """Вписывает буфер в `max_size` с сохранением пропорций (Lanczos).

        Никогда не увеличивает изображение: если буфер уже помещается,
        он возвращается без изменений.
        """
        w, h = buffer.width, buffer.height
        if w <= max_size.width and h <= max_size.height:
            return buffer
        scale = min(max_size.width / w, max_size.height / h)
        new_w = max(1, min(int(max_size.width), int(round(w * scale))))
        new_h = max(1, min(int(max_size.height), int(round(h * scale))))
        resized = buffer_to_pil(buffer).resize((new_w, new_h), Image.Resampling.LANCZOS)
        logger.debug("resize %dx%d -> %dx%d", w, h, new_w, new_h)
        return pil_to_buffer(resized)
