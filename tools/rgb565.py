"""RGB565 conversion and fixed icon palette lookup"""

from dataclasses import dataclass
from typing import Dict, Tuple

from bmp_decode import ConversionError


def convert_to_16bit_color(r: int, g: int, b: int, a: int = 0xFF) -> int:
    """Pack 8-bit channels into RGB565. Alpha is ignored.

    Only the low 8 bits of each channel are examined, so callers must
    pass 8-bit-per-channel values.
    """
    return ((r & 0xF8) << 8) | ((g & 0xFC) << 3) | ((b & 0xF8) >> 3)


@dataclass(frozen=True)
class PaletteProfile:
    name: str
    colors: Tuple[int, ...]

    def index(self, color: int) -> int:
        # colors[i] is palette entry i + 1, entry 0 is background
        try:
            return self.colors.index(color) + 1
        except ValueError:
            return 0


# Icon palette used by the panel firmware. The comments give a sample
# 24-bit source color for each entry.
PANEL_PALETTE = PaletteProfile('panel', (
    0xffff,  # 0xffffff
    0x20e4,  # 0x201c20
    0xffdf,  # 0xf8f8f8
    0x18e3,  # 0x181c18
    0xf79e,  # 0xf0f0f0
    0xc986,  # 0xc83030
    0xd30c,  # 0xd06060
    0xc103,  # 0xc02018
    0xff52,  # 0xf8e890
    0xfffb,  # 0xf8fcd8
    0x4569,  # 0x40ac48
    0x9492,  # 0x909090
))

PALETTES: Dict[str, PaletteProfile] = {
    PANEL_PALETTE.name: PANEL_PALETTE,
}

DEFAULT_PALETTE = PANEL_PALETTE.name


class UnknownPaletteError(ConversionError, ValueError):
    pass


def get_palette(name: str) -> PaletteProfile:
    try:
        return PALETTES[name]
    except KeyError:
        raise UnknownPaletteError(
            f"Unknown palette '{name}', expected one of: {', '.join(sorted(PALETTES))}"
        ) from None


def palette_index(color: int, profile: PaletteProfile = PANEL_PALETTE) -> int:
    """Map an RGB565 value to its palette index, 0 when it is not in the palette."""
    return profile.index(color)


def pixel_palette_index(r: int, g: int, b: int, a: int = 0xFF,
                        profile: PaletteProfile = PANEL_PALETTE) -> int:
    return palette_index(convert_to_16bit_color(r, g, b, a), profile)
