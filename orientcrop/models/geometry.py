"""Геометрические типы-значения: размер, точка, прямоугольник.

Принципы:
- Неизменяемость (`frozen=True`): значения создаются на каждый вызов.
- Прямоугольник сам по себе не знает своей системы координат (сырая или
  отображаемая); это всегда оговаривается в документации функции.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from orientcrop.models.orientation import Orientation

Number = Union[int, float]


class Origin(Enum):
    """Направление вертикальной оси системы координат."""
    TOP_LEFT = "top_left"  # растр: y растёт вниз
    BOTTOM_LEFT = "bottom_left"  # вектор: y растёт вверх


def round_half_away(value: Number) -> int:
    """Округление к ближайшему целому, половины — от нуля (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Size:
    width: Number
    height: Number

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Размер не может быть отрицательным: {self.width}x{self.height}")

    def oriented(self, orientation: Orientation) -> "Size":
        """Размер после применения ориентации: для поворотов на 90° стороны меняются."""
        if orientation.swaps_dimensions:
            return Size(self.height, self.width)
        return self

    def as_tuple(self) -> tuple:
        return (self.width, self.height)


@dataclass(frozen=True)
class Point:
    x: Number
    y: Number


@dataclass(frozen=True)
class Rect:
    """Осевой прямоугольник (x, y, ширина, высота)."""
    x: Number
    y: Number
    width: Number
    height: Number

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Размер прямоугольника не может быть отрицательным: {self}")

    @classmethod
    def from_size(cls, size: Size) -> "Rect":
        return cls(0, 0, size.width, size.height)

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def max_x(self) -> Number:
        return self.x + self.width

    @property
    def max_y(self) -> Number:
        return self.y + self.height

    @property
    def area(self) -> Number:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def rounded(self) -> "Rect":
        """Округляет начало и размер независимо друг от друга."""
        return Rect(
            round_half_away(self.x),
            round_half_away(self.y),
            round_half_away(self.width),
            round_half_away(self.height),
        )

    def is_integral(self) -> bool:
        return all(float(v).is_integer() for v in (self.x, self.y, self.width, self.height))

    def intersection(self, other: "Rect") -> "Rect":
        """Пересечение; при отсутствии общей области — пустой прямоугольник в нуле."""
        x0 = max(self.x, other.x)
        y0 = max(self.y, other.y)
        x1 = min(self.max_x, other.max_x)
        y1 = min(self.max_y, other.max_y)
        if x1 <= x0 or y1 <= y0:
            return Rect(0, 0, 0, 0)
        return Rect(x0, y0, x1 - x0, y1 - y0)

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.width, self.height)


def size_oriented(orientation: Orientation, size: Size) -> Size:
    return size.oriented(orientation)
