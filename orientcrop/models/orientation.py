"""Коды ориентации EXIF (тег 0x0112).

Принципы:
- Ровно 8 значений; других кодов не существует, поэтому тип — `IntEnum`.
- Угол и признак зеркалирования — неизменяемые константы каждого кода.

Таблица (угол, зеркалирование) описывает, как из вертикально ориентированного
изображения получить сохранённые пиксели в системе координат с началом внизу
слева: сначала отражение по горизонтали, затем поворот на угол.
"""
from __future__ import annotations

import math
from enum import IntEnum
from typing import Optional, Union

from orientcrop.models.errors import InvalidOrientationError


class Orientation(IntEnum):
    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @classmethod
    def from_exif(cls, value: Optional[Union[int, str]]) -> "Orientation":
        """Преобразует сырое значение тега в код ориентации.

        Args:
            value: Значение тега из метаданных; `None` — тег отсутствует.

        Returns:
            `Orientation`; при отсутствии тега — `Orientation.UP`.

        Raises:
            InvalidOrientationError: если значение вне диапазона 1..8.
        """
        if value is None:
            return cls.UP
        try:
            code = int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidOrientationError(f"Некорректный код ориентации: {value!r}") from exc
        try:
            return cls(code)
        except ValueError as exc:
            raise InvalidOrientationError(f"Некорректный код ориентации: {value!r}") from exc

    @property
    def angle(self) -> float:
        return _TABLE[self][0]

    @property
    def is_mirrored(self) -> bool:
        return _TABLE[self][1]

    @property
    def swaps_dimensions(self) -> bool:
        """Истина для кодов с поворотом на 90°: ширина и высота меняются местами."""
        return self in (Orientation.LEFT_MIRRORED, Orientation.RIGHT, Orientation.RIGHT_MIRRORED, Orientation.LEFT)

    @property
    def inverse(self) -> "Orientation":
        """Код, преобразование которого отменяет преобразование данного кода.

        Отражения обратны сами себе; повороты на 90° обратны друг другу.
        """
        if self is Orientation.RIGHT:
            return Orientation.LEFT
        if self is Orientation.LEFT:
            return Orientation.RIGHT
        return self

    @property
    def label(self) -> str:
        # "RIGHT_MIRRORED" -> "Right Mirrored"
        return self.name.replace("_", " ").title()


_TABLE = {
    Orientation.UP: (0.0, False),
    Orientation.UP_MIRRORED: (0.0, True),
    Orientation.DOWN: (math.pi, False),
    Orientation.DOWN_MIRRORED: (math.pi, True),
    Orientation.LEFT_MIRRORED: (math.pi / 2.0, True),
    Orientation.RIGHT: (math.pi / 2.0, False),
    Orientation.RIGHT_MIRRORED: (-math.pi / 2.0, True),
    Orientation.LEFT: (-math.pi / 2.0, False),
}


def angle_of(code: Orientation) -> float:
    return code.angle


def is_mirrored(code: Orientation) -> bool:
    return code.is_mirrored
