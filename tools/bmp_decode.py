"""Decode BMP files into an in-memory pixel grid"""

from pathlib import Path
from typing import BinaryIO, Tuple, Union

from PIL import Image, UnidentifiedImageError


class ConversionError(Exception):
    pass


class BitmapOpenError(ConversionError):
    pass


class BitmapDecodeError(ConversionError):
    pass


class PixelGrid:
    """Fully decoded RGBA bitmap with origin (0, 0).

    ``at(x, y)`` returns 8-bit ``(r, g, b, a)`` channels.
    """

    def __init__(self, img: Image.Image):
        self._img = img.convert('RGBA')
        self._pixels = self._img.load()
        self.width, self.height = self._img.size

    def at(self, x: int, y: int) -> Tuple[int, int, int, int]:
        return self._pixels[x, y]

    def __repr__(self):
        return f'PixelGrid({self.width}x{self.height})'


def decode_bitmap(f: BinaryIO) -> PixelGrid:
    try:
        img = Image.open(f, formats=['BMP'])
        img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise BitmapDecodeError(f'Not a valid bitmap: {e}') from e
    return PixelGrid(img)


def load_bitmap(path: Union[str, Path]) -> PixelGrid:
    try:
        f = open(path, 'rb')
    except OSError as e:
        raise BitmapOpenError(f"Can't open file '{path}': {e.strerror}") from e
    with f:
        try:
            return decode_bitmap(f)
        except BitmapDecodeError as e:
            raise BitmapDecodeError(f'{path}: {e}') from e.__cause__
