"""Аффинные преобразования между сырыми и отображаемыми координатами.

Принципы:
- Чистые функции: никакого состояния, никаких побочных эффектов.
- Две системы координат (начало сверху слева и снизу слева) — разные
  преобразования; одно и то же преобразование в другой системе даёт
  вертикально отражённый результат, поэтому система всегда передаётся явно.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable

import numpy as np

from orientcrop.models.geometry import Origin, Point, Rect, Size
from orientcrop.models.orientation import Orientation

logger = logging.getLogger(__name__)


def _snap(matrix: np.ndarray, eps: float = 1e-9) -> np.ndarray:
    """Заменяет почти целые элементы точными целыми (cos(pi/2) -> 0)."""
    rounded = np.rint(matrix)
    return np.where(np.abs(matrix - rounded) < eps, rounded, matrix)


class AffineTransform:
    """Аффинное преобразование плоскости в виде матрицы 3x3.

    Точка (x, y) рассматривается как столбец (x, y, 1); `concatenating(other)`
    возвращает преобразование «сначала self, затем other».
    """

    __hash__ = None

    def __init__(self, matrix: Iterable = None) -> None:
        m = np.identity(3, dtype=np.float64) if matrix is None else np.array(matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"Ожидалась матрица 3x3, получена {m.shape}")
        m.setflags(write=False)
        self.matrix = m

    # ---- Constructors ----
    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])

    @classmethod
    def rotation(cls, angle: float) -> "AffineTransform":
        c, s = math.cos(angle), math.sin(angle)
        return cls(_snap(np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])))

    @classmethod
    def scale(cls, sx: float, sy: float) -> "AffineTransform":
        return cls([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])

    # ---- Algebra ----
    def concatenating(self, other: "AffineTransform") -> "AffineTransform":
        return AffineTransform(other.matrix @ self.matrix)

    def inverted(self) -> "AffineTransform":
        return AffineTransform(_snap(np.linalg.inv(self.matrix)))

    @property
    def is_identity(self) -> bool:
        return bool(np.allclose(self.matrix, np.identity(3)))

    # ---- Application ----
    def apply_to_point(self, point: Point) -> Point:
        x, y, _ = self.matrix @ np.array([point.x, point.y, 1.0])
        return Point(float(x), float(y))

    def apply_to_points(self, xs: np.ndarray, ys: np.ndarray) -> tuple:
        """Векторное применение к массивам координат одинаковой формы."""
        m = self.matrix
        return (m[0, 0] * xs + m[0, 1] * ys + m[0, 2], m[1, 0] * xs + m[1, 1] * ys + m[1, 2])

    def apply_to_rect(self, rect: Rect) -> Rect:
        """Ограничивающий прямоугольник четырёх преобразованных углов."""
        xs = np.array([rect.x, rect.max_x, rect.x, rect.max_x], dtype=np.float64)
        ys = np.array([rect.y, rect.y, rect.max_y, rect.max_y], dtype=np.float64)
        tx, ty = self.apply_to_points(xs, ys)
        x0, y0 = float(tx.min()), float(ty.min())
        return Rect(x0, y0, float(tx.max()) - x0, float(ty.max()) - y0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return bool(np.allclose(self.matrix, other.matrix))

    def __repr__(self) -> str:
        (a, c, tx), (b, d, ty), _ = self.matrix.tolist()
        return f"AffineTransform(a={a:g}, b={b:g}, c={c:g}, d={d:g}, tx={tx:g}, ty={ty:g})"


def _rotation_angle(orientation: Orientation, origin: Origin) -> float:
    """Угол поворота сырых координат в отображаемые для заданной системы.

    Табличный угол описывает обратное направление (отображаемое -> сырое) при
    начале снизу слева. Отражения обратны сами себе, поэтому для зеркальных
    кодов угол при начале снизу слева сохраняется, а для остальных меняет знак;
    переход к началу сверху слева меняет знак ещё раз.
    """
    angle = orientation.angle
    if origin is Origin.BOTTOM_LEFT:
        return angle if orientation.is_mirrored else -angle
    return -angle if orientation.is_mirrored else angle


def orientation_transform(orientation: Orientation, size: Size, origin: Origin = Origin.TOP_LEFT) -> AffineTransform:
    """Преобразование сырых координат в отображаемые.

    Args:
        orientation: Код ориентации EXIF.
        size: Сырой размер изображения (до перестановки сторон).
        origin: Система координат: растровая (сверху слева) или векторная (снизу слева).

    Returns:
        `AffineTransform`: отражение по вертикальной оси (для зеркальных кодов),
        поворот и перенос, при котором границы результата начинаются в нуле.
    """
    if orientation is Orientation.UP:
        return AffineTransform.identity()

    transform = AffineTransform.identity()
    if orientation.is_mirrored:
        transform = transform.concatenating(AffineTransform.scale(-1.0, 1.0))
    transform = transform.concatenating(AffineTransform.rotation(_rotation_angle(orientation, origin)))

    bounds = transform.apply_to_rect(Rect.from_size(size))
    transform = transform.concatenating(AffineTransform.translation(-bounds.x, -bounds.y))
    logger.debug("orientation_transform(%s, %s, %s) = %r", orientation.name, size, origin.value, transform)
    return transform


def inverse_orientation_transform(
    orientation: Orientation, size: Size, origin: Origin = Origin.TOP_LEFT
) -> AffineTransform:
    """Преобразование отображаемых координат в сырые; `size` — сырой размер."""
    return orientation_transform(orientation, size, origin).inverted()
