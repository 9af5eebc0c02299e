"""Emit a decoded bitmap as C arrays or as RGB565 binary streams"""

import os
import re
import struct
from typing import BinaryIO, Iterator, List, Tuple

from bmp_decode import ConversionError, PixelGrid
from rgb565 import PANEL_PALETTE, PaletteProfile, convert_to_16bit_color, pixel_palette_index

NAME_SUFFIXES = ('_21h.bmp', '_30h.bmp')

# Longest run a uint16 count-minus-one field can hold
MAX_RUN = 1 << 16

TEXT_WRAP_PIXELS = 24
LINE_CHARS = 80

RGB565_PREAMBLE = '// File generated by bmp2c_escher3d\n\n#include <cstdint>\n\n'


def variable_name(path: str) -> str:
    name = os.path.basename(path)
    for suffix in NAME_SUFFIXES:
        if name.endswith(suffix):
            name = name[:-len(suffix)]
    return name


def format_text(grid: PixelGrid, name: str, profile: PaletteProfile = PANEL_PALETTE) -> str:
    """Render the grid as a 4-bit palette-indexed C array.

    Pixels are walked column by column (outer x, inner y) and packed two
    per byte, first pixel in the high nibble.
    """
    parts = [
        f'extern const uint8_t {name}[] =\n',
        f'{{\t{grid.width}, {grid.height},\t// width, height\n\t',
    ]
    pixel_count = 0
    for x in range(grid.width):
        for y in range(grid.height):
            if pixel_count % 2 == 0:
                parts.append('0x')
            parts.append(f'{pixel_palette_index(*grid.at(x, y), profile=profile):x}')
            pixel_count += 1
            last = x + 1 == grid.width and y + 1 == grid.height
            if pixel_count % 2 == 0 and not last:
                parts.append(', ')
                if pixel_count % TEXT_WRAP_PIXELS == 0:
                    parts.append('\n\t')
    # odd pixel count leaves a half byte
    if pixel_count % 2 == 1:
        parts.append('0')
    parts.append('\n};\n')
    return ''.join(parts)


def write_text(out: BinaryIO, grid: PixelGrid, name: str,
               profile: PaletteProfile = PANEL_PALETTE) -> int:
    data = format_text(grid, name, profile).encode('utf-8')
    out.write(data)
    return len(data)


def _pixel_runs(grid: PixelGrid) -> Iterator[List[Tuple[int, int]]]:
    """Yield, for every scanned pixel, the runs that pixel completes (0 to 2)."""
    repeat_count = 0
    last_color = 0
    for y in range(grid.height - 1, -1, -1):
        for x in range(grid.width):
            runs = []
            color = convert_to_16bit_color(*grid.at(x, y))
            if repeat_count > 0 and (color != last_color or repeat_count == MAX_RUN):
                runs.append((repeat_count, last_color))
                repeat_count = 0
            last_color = color
            repeat_count += 1
            # row 0 is scanned last
            if x + 1 == grid.width and y == 0:
                runs.append((repeat_count, last_color))
            yield runs


def iter_runs(grid: PixelGrid) -> Iterator[Tuple[int, int]]:
    """Yield (count, rgb565) runs, scanning rows bottom-to-top, left-to-right."""
    for runs in _pixel_runs(grid):
        yield from runs


def _pack_header(grid: PixelGrid) -> bytes:
    try:
        return struct.pack('<HH', grid.width, grid.height)
    except struct.error:
        raise ConversionError(
            f'{grid.width}x{grid.height} does not fit the 16-bit width/height header'
        ) from None


def write_binary(out: BinaryIO, grid: PixelGrid) -> int:
    """Write the little-endian header and (count - 1, color) run pairs."""
    written = out.write(_pack_header(grid))
    for count, color in iter_runs(grid):
        written += out.write(struct.pack('<HH', count - 1, color))
    return written


def identifier_name(path: str) -> str:
    """Directory and extension stripped, then anything outside [A-Za-z0-9_] dropped."""
    name = os.path.basename(path)
    dot = name.rfind('.')
    if dot > 0:
        name = name[:dot]
    return re.sub(r'[^A-Za-z0-9_]', '', name)


def _rgb565_array_header(grid: PixelGrid, name: str) -> str:
    return (
        f'{RGB565_PREAMBLE}'
        f'extern const uint16_t {name}[] =\n{{\n'
        f'\t{grid.width}, {grid.height},\t\t\t// width and height in pixels\n\t'
    )


def format_text_rle(grid: PixelGrid, name: str) -> str:
    """Render the RLE runs as a uint16_t C array of (count - 1, color) pairs.

    The line is broken before a pixel's output once it holds more than
    LINE_CHARS characters, so both pairs written by the last pixel
    always share a line.
    """
    parts = [_rgb565_array_header(grid, name)]
    line_chars = 0
    total = grid.width * grid.height
    for i, runs in enumerate(_pixel_runs(grid), start=1):
        if line_chars > LINE_CHARS:
            parts.append('\n\t')
            line_chars = 0
        chunk = ', '.join(f'0x{count - 1:04x}, 0x{color:04x}' for count, color in runs)
        # every pair but the final one is followed by a separator
        if runs and i < total:
            chunk += ', '
        parts.append(chunk)
        line_chars += len(chunk)
    parts.append('\n};\n\n')
    return ''.join(parts)


def write_text_rle(out: BinaryIO, grid: PixelGrid, name: str) -> int:
    data = format_text_rle(grid, name).encode('utf-8')
    out.write(data)
    return len(data)


def iter_column_colors(grid: PixelGrid) -> Iterator[int]:
    """Yield every pixel as RGB565, column by column (outer x, inner y)."""
    for x in range(grid.width):
        for y in range(grid.height):
            yield convert_to_16bit_color(*grid.at(x, y))


def format_text_raw(grid: PixelGrid, name: str) -> str:
    """Render one 0x%04x RGB565 entry per pixel as a uint16_t C array."""
    parts = [_rgb565_array_header(grid, name)]
    line_chars = 0
    total = grid.width * grid.height
    for i, color in enumerate(iter_column_colors(grid), start=1):
        if line_chars > LINE_CHARS:
            # continuation lines are not indented
            parts.append('\n')
            line_chars = 0
        entry = f'0x{color:04x}' + (', ' if i < total else '')
        parts.append(entry)
        line_chars += len(entry)
    parts.append('\n};\n\n')
    return ''.join(parts)


def write_text_raw(out: BinaryIO, grid: PixelGrid, name: str) -> int:
    data = format_text_raw(grid, name).encode('utf-8')
    out.write(data)
    return len(data)


def write_binary_raw(out: BinaryIO, grid: PixelGrid) -> int:
    """Write the little-endian header and one uint16 RGB565 per pixel, column-major."""
    written = out.write(_pack_header(grid))
    for color in iter_column_colors(grid):
        written += out.write(struct.pack('<H', color))
    return written
