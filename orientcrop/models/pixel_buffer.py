"""Буфер пикселей поверх плоского блока памяти.

Принципы:
- SRP: только хранение пикселей и учёт владения памятью, без геометрии.
- Владение явное: буфер либо владеет памятью (`allocate`, `from_array`),
  либо является окном (`view`) в память родителя. Окно нельзя освободить
  отдельно, а после освобождения родителя любое обращение к окну — ошибка.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from orientcrop.models.errors import AllocationError, BorrowedBufferError, OutOfBoundsError, ReleasedBufferError
from orientcrop.models.geometry import Size

# 8 бит на канал; режимы Pillow, которые умеет хранить буфер
MODE_CHANNELS = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}
_CHANNELS_MODE = {v: k for k, v in MODE_CHANNELS.items()}


class PixelBuffer:
    """Прямоугольная сетка пикселей: ширина, высота, шаг строки, бит на пиксель, смещение.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        bytes_per_row: Шаг строки (stride) в байтах.
        bits_per_pixel: Бит на пиксель, кратно 8.
        offset: Смещение первого пикселя в блоке памяти, байт.
        mode: Режим Pillow ("L", "LA", "RGB", "RGBA").
        parent: Буфер, из памяти которого вырезано окно; `None` у владельца.
    """

    def __init__(
        self,
        memory: np.ndarray,
        width: int,
        height: int,
        bytes_per_row: int,
        bits_per_pixel: int,
        offset: int = 0,
        mode: Optional[str] = None,
        parent: Optional["PixelBuffer"] = None,
    ) -> None:
        if bits_per_pixel <= 0 or bits_per_pixel % 8:
            raise ValueError(f"bits_per_pixel должно быть положительным и кратным 8: {bits_per_pixel}")
        bpp = bits_per_pixel // 8
        if mode is None:
            mode = _CHANNELS_MODE.get(bpp)
        if MODE_CHANNELS.get(mode) != bpp:
            raise ValueError(f"Режим {mode!r} не соответствует {bits_per_pixel} бит на пиксель")
        if width < 0 or height < 0 or offset < 0:
            raise ValueError(f"Некорректные размеры буфера: {width}x{height}, offset={offset}")
        if bytes_per_row < width * bpp:
            raise ValueError(f"Шаг строки {bytes_per_row} меньше ширины строки {width * bpp}")
        if width and height:
            end = offset + (height - 1) * bytes_per_row + width * bpp
            if end > memory.size:
                raise ValueError(f"Окно буфера выходит за пределы памяти: {end} > {memory.size}")

        self.width = int(width)
        self.height = int(height)
        self.bytes_per_row = int(bytes_per_row)
        self.bits_per_pixel = int(bits_per_pixel)
        self.offset = int(offset)
        self.mode = mode
        self.parent = parent
        self._memory: Optional[np.ndarray] = memory if parent is None else None
        self._released = False

    # ---- Construction ----
    @classmethod
    def allocate(cls, width: int, height: int, mode: str = "RGBA") -> "PixelBuffer":
        """Выделяет плотно упакованный буфер, заполненный нулями.

        Raises:
            AllocationError: если память выделить не удалось.
        """
        channels = MODE_CHANNELS.get(mode)
        if channels is None:
            raise ValueError(f"Неподдерживаемый режим: {mode!r}")
        try:
            memory = np.zeros(int(width) * int(height) * channels, dtype=np.uint8)
        except MemoryError as exc:
            raise AllocationError(f"Не удалось выделить буфер {width}x{height} {mode}") from exc
        return cls(memory, width, height, int(width) * channels, channels * 8, mode=mode)

    @classmethod
    def from_array(cls, array: np.ndarray, mode: Optional[str] = None) -> "PixelBuffer":
        """Создаёт владеющий буфер из массива (H, W) или (H, W, C) типа uint8.

        Данные копируются: буфер всегда владеет своей памятью.
        """
        arr = np.asarray(array)
        if arr.dtype != np.uint8:
            raise ValueError(f"Ожидался массив uint8, получен {arr.dtype}")
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise ValueError(f"Ожидался массив (H, W) или (H, W, C), получена форма {arr.shape}")
        height, width, channels = arr.shape
        try:
            memory = np.array(arr, dtype=np.uint8, order="C", copy=True).reshape(-1)
        except MemoryError as exc:
            raise AllocationError(f"Не удалось выделить буфер {width}x{height}") from exc
        return cls(memory, width, height, width * channels, channels * 8, mode=mode)

    def view(self, x: int, y: int, width: int, height: int) -> "PixelBuffer":
        """Окно над той же памятью: тот же шаг строки, новое смещение и размер.

        Args:
            x, y: Левый верхний угол окна в пикселях этого буфера.
            width, height: Размер окна, px.

        Raises:
            OutOfBoundsError: если окно не лежит целиком внутри буфера.
            ReleasedBufferError: если память уже освобождена.
        """
        self._ensure_alive()
        if width < 0 or height < 0 or x < 0 or y < 0 or x + width > self.width or y + height > self.height:
            raise OutOfBoundsError(
                f"Окно {(x, y, width, height)} выходит за границы буфера {self.width}x{self.height}"
            )
        offset = self.offset + y * self.bytes_per_row + x * self.bytes_per_pixel
        return PixelBuffer(
            self._root_memory(),
            width,
            height,
            self.bytes_per_row,
            self.bits_per_pixel,
            offset=offset,
            mode=self.mode,
            parent=self,
        )

    # ---- Ownership ----
    @property
    def is_view(self) -> bool:
        return self.parent is not None

    @property
    def owns_memory(self) -> bool:
        return self.parent is None

    @property
    def is_alive(self) -> bool:
        if self.parent is not None:
            return self.parent.is_alive
        return not self._released

    def release(self) -> None:
        """Освобождает память владеющего буфера; все его окна становятся недействительными."""
        if self.parent is not None:
            raise BorrowedBufferError("Окно не владеет памятью и не может быть освобождено")
        self._released = True
        self._memory = None

    # ---- Pixel access ----
    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def channels(self) -> int:
        return self.bytes_per_pixel

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def to_array(self) -> np.ndarray:
        """Массив (H, W, C) только для чтения поверх памяти буфера, без копирования."""
        return self._strided(writeable=False)

    def pixels(self) -> np.ndarray:
        """Изменяемый массив (H, W, C); доступен только владельцу памяти."""
        if self.parent is not None:
            raise BorrowedBufferError("Окно не может изменять пиксели родителя")
        return self._strided(writeable=True)

    def copy(self) -> "PixelBuffer":
        """Плотно упакованная владеющая копия (например, окна перед кодированием)."""
        return PixelBuffer.from_array(self.to_array(), mode=self.mode)

    # ---- Internals ----
    def _root_memory(self) -> np.ndarray:
        node = self
        while node.parent is not None:
            node = node.parent
        return node._memory

    def _ensure_alive(self) -> None:
        if not self.is_alive:
            raise ReleasedBufferError("Память буфера уже освобождена")

    def _strided(self, writeable: bool) -> np.ndarray:
        self._ensure_alive()
        bpp = self.bytes_per_pixel
        memory = self._root_memory()
        if self.width == 0 or self.height == 0:
            return np.zeros((self.height, self.width, bpp), dtype=np.uint8)
        return np.lib.stride_tricks.as_strided(
            memory[self.offset:],
            shape=(self.height, self.width, bpp),
            strides=(self.bytes_per_row, bpp, 1),
            writeable=writeable,
        )

    def __repr__(self) -> str:
        kind = "view" if self.is_view else "owner"
        return (
            f"PixelBuffer({self.width}x{self.height}, {self.mode}, stride={self.bytes_per_row}, "
            f"offset={self.offset}, {kind})"
        )
