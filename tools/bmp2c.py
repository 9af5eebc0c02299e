#!/usr/bin/env python3
"""Convert BMP icons to 4-bit palette C arrays or RGB565 arrays and binaries"""

import argparse
import sys
from contextlib import contextmanager

from bmp_decode import ConversionError, load_bitmap
from bmp_emit import (
    identifier_name,
    variable_name,
    write_binary,
    write_binary_raw,
    write_text,
    write_text_raw,
    write_text_rle,
)
from rgb565 import DEFAULT_PALETTE, PALETTES, get_palette


def build_parser():
    parser = argparse.ArgumentParser(
        prog='bmp2c',
        description='Convert BMP files to a 4-bit palette C array or an RLE RGB565 binary stream.',
    )
    parser.add_argument('-binary', action='store_true',
                        help='Binary output (only the first file is converted)')
    parser.add_argument('-outfile', default='-',
                        help="Output file, opened for append. The default '-' writes to stdout.")
    encoding = parser.add_mutually_exclusive_group()
    encoding.add_argument('-rle', action='store_true',
                          help='Text mode: emit RLE RGB565 runs as a uint16_t array')
    encoding.add_argument('-raw', action='store_true',
                          help='Uncompressed RGB565, one value per pixel, column by column')
    parser.add_argument('-palette', default=DEFAULT_PALETTE, choices=sorted(PALETTES),
                        help=f'Icon palette for text mode (default: {DEFAULT_PALETTE})')
    parser.add_argument('-quiet', action='store_true', help='No status lines on stderr')
    parser.add_argument('files', nargs='+', metavar='file.bmp', help='Input bitmap files')
    return parser


@contextmanager
def open_output(outfile):
    """Yield a buffered binary writer, flushed (and closed for files) on exit."""
    if outfile == '-':
        out = sys.stdout.buffer
        try:
            yield out
        finally:
            out.flush()
    else:
        with open(outfile, 'ab') as out:
            yield out


def convert(files, out, binary=False, rle=False, raw=False, palette=DEFAULT_PALETTE,
            quiet=False):
    profile = get_palette(palette)

    if binary and len(files) > 1 and not quiet:
        print(f"! Binary output converts one file, ignoring: {' '.join(files[1:])}",
              file=sys.stderr)

    for file in files:
        grid = load_bitmap(file)

        if binary and raw:
            size = write_binary_raw(out, grid)
        elif binary:
            size = write_binary(out, grid)
        elif raw:
            size = write_text_raw(out, grid, identifier_name(file))
        elif rle:
            size = write_text_rle(out, grid, identifier_name(file))
        else:
            size = write_text(out, grid, variable_name(file), profile)

        if not quiet:
            print(f'✓ {file}: {grid.width}x{grid.height} → {size} bytes', file=sys.stderr)

        if binary:
            break


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        with open_output(args.outfile) as out:
            convert(args.files, out, binary=args.binary, rle=args.rle, raw=args.raw,
                    palette=args.palette, quiet=args.quiet)
    except (ConversionError, OSError) as e:
        print(f'✗ Error: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
