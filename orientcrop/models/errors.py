"""Исключения библиотеки.

Принципы:
- Ошибки не глушатся и не «исправляются» молча: кадрирование за границами
  буфера или неизвестный код ориентации всегда приводят к исключению.
- Каждое исключение наследует и общий базовый класс, и подходящий встроенный
  тип, чтобы вызывающий код мог ловить привычные `ValueError`/`IndexError`.
"""
from __future__ import annotations


class OrientCropError(Exception):
    """Базовый класс всех ошибок orientcrop."""


class OutOfBoundsError(OrientCropError, IndexError):
    """Прямоугольник кадрирования выходит за пределы буфера."""


class InvalidOrientationError(OrientCropError, ValueError):
    """Значение не является одним из 8 кодов EXIF Orientation."""


class AllocationError(OrientCropError, MemoryError):
    """Не удалось выделить память под новый буфер."""


class ReleasedBufferError(OrientCropError, RuntimeError):
    """Обращение к буферу (или его окну) после освобождения памяти."""


class BorrowedBufferError(OrientCropError, RuntimeError):
    """Попытка освободить окно, которое не владеет памятью."""


class SourceUnreadableError(OrientCropError, ValueError):
    """Источник не удалось декодировать как изображение."""


class UnsupportedFormatError(OrientCropError, ValueError):
    """Формат вывода не поддерживается кодировщиком."""
