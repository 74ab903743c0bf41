#!/usr/bin/env python3
"""
Convert a 256-color BMP into a map file, one symbol byte per pixel:

    palette index 0xFF -> 0x00
    palette index 0x00 -> 0x01
    anything else      -> 0x02

Paths left off the command line are asked for interactively.
"""
import argparse
import sys

from bmp_parser import BMPError
from converter import MapConverter


def build_parser():
    parser = argparse.ArgumentParser(prog='bmp2map', description='Convert a 256-color bitmap into a map file.')
    parser.add_argument('input', nargs='?', help='the 8 bpp bitmap (.bmp) to read')
    parser.add_argument('output', nargs='?', help='the map file to write')
    parser.add_argument('--strict', action='store_true',
                        help='reject bitmaps whose row padding is not 4-byte aligned')
    return parser


def prompt(label, stdin):
    print(label)
    return stdin.readline().strip()


def main(argv=None, stdin=None):
    args = build_parser().parse_args(argv)
    stdin = stdin or sys.stdin

    print("BMP2MAP")
    input_path = args.input or prompt("256-color Bitmap file:", stdin)
    output_path = args.output or prompt("output Map file:", stdin)
    if not input_path or not output_path:
        print("error: both a bitmap and a map file are needed", file=sys.stderr)
        return 1

    try:
        info = MapConverter(strict=args.strict).convert(input_path, output_path)
    except (BMPError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Converted {input_path} ({info['width']}x{info['height']}, "
          f"{info['padding']} padding bytes/row) -> {output_path} "
          f"({info['output_size']} bytes)")
    print("done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
