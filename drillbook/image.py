"""A simple RGBA raster image."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RGB:
    """One pixel with 8-bit channels; fully opaque by default."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __str__(self) -> str:
        return f"{self.r} {self.g} {self.b} {self.a}"


class Image:
    """A height x width grid of :class:`RGB` pixels, indexed as ``image[row, col]``."""

    def __init__(self, height: int = 0, width: int = 0) -> None:
        self._height = 0
        self._width = 0
        self._pixels: list[RGB] = []
        self.set_size(height, width)

    def set_size(self, height: int, width: int) -> None:
        """Resize the pixel storage, keeping existing pixels in storage order."""
        if height < 0 or width < 0:
            raise ValueError(f"invalid image size {height}x{width}")
        size = height * width
        del self._pixels[size:]
        self._pixels.extend(RGB() for _ in range(size - len(self._pixels)))
        self._height = height
        self._width = width

    def _offset(self, key: tuple[int, int]) -> int:
        row, col = key
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(
                f"pixel ({row}, {col}) outside {self._height}x{self._width} image"
            )
        return row * self._width + col

    def __getitem__(self, key: tuple[int, int]) -> RGB:
        return self._pixels[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: RGB) -> None:
        self._pixels[self._offset(key)] = value

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width