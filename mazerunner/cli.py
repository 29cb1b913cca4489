"""Decode a maze image, solve it and write the solution as a PNG."""

from __future__ import annotations

import argparse
import sys
from typing import Iterator, Optional, Sequence

from PIL import Image

from mazerunner.pathfinding import astar
from mazerunner.pngchunks import (
    GreyscalePixel,
    PalettePixel,
    PngError,
    TruecolorPixel,
)
from mazerunner.pngdecode import Pixel, Png, decode_png

DEFAULT_INPUT = "mazediag10001x10001.png"
DEFAULT_OUTPUT = "output.png"

SOLUTION_COLOUR = (0xFF, 0x00, 0x00, 0xFF)
BACKGROUND_COLOUR = (0, 0, 0, 255)

Colour = tuple[int, int, int, int]


def to_eight_bit(pixel: Pixel) -> Pixel:
    """Reduce a sixteen-bit pixel to eight bits per sample."""
    if isinstance(pixel, TruecolorPixel):
        return TruecolorPixel(
            pixel.red >> 8, pixel.green >> 8, pixel.blue >> 8, pixel.alpha >> 8
        )
    if isinstance(pixel, GreyscalePixel):
        return GreyscalePixel(pixel.value >> 8)
    return pixel


def _eight_bit_rows(png: Png) -> Iterator[list[Pixel]]:
    for row in png.pixels:
        if png.bit_depth > 8:
            yield [to_eight_bit(pixel) for pixel in row]
        else:
            yield list(row)


def _colour(png: Png, pixel: Pixel) -> Colour:
    if isinstance(pixel, TruecolorPixel):
        samples = (pixel.red, pixel.green, pixel.blue, pixel.alpha)
    elif isinstance(pixel, GreyscalePixel):
        samples = (pixel.value, pixel.value, pixel.value, 0xFF)
    elif isinstance(pixel, PalettePixel):
        if not 0 <= pixel.index < len(png.palette):
            raise PngError(
                f"palette index {pixel.index} out of range for "
                f"{len(png.palette)} entries"
            )
        entry = png.palette[pixel.index]
        samples = (entry.red, entry.green, entry.blue, entry.alpha)
    else:
        raise PngError(f"unsupported pixel: {pixel!r}")
    red, green, blue, alpha = (sample & 0xFF for sample in samples)
    return red, green, blue, alpha


def render(png: Png) -> Image.Image:
    """Build an RGBA image holding the decoded pixels."""
    image = Image.new("RGBA", (png.width, png.height))
    image.putdata(
        [_colour(png, pixel) for row in _eight_bit_rows(png) for pixel in row]
    )
    return image


def _maze(png: Png) -> list[list[bool]]:
    return [
        [isinstance(pixel, TruecolorPixel) and pixel.blue > 0 for pixel in row]
        for row in _eight_bit_rows(png)
    ]


def solve_and_draw(png: Png) -> Image.Image:
    """Solve the maze in ``png`` and return it with the path drawn in red.

    Blue cells are open; the path runs from the left edge one row below the
    top to the right edge one row above the bottom. The result is laid over
    an opaque black background.
    """
    image = render(png)
    path = astar(_maze(png), 0, 1, png.width - 1, png.height - 2)
    for point in path:
        image.putpixel(point, SOLUTION_COLOUR)
    background = Image.new("RGBA", image.size, BACKGROUND_COLOUR)
    return Image.alpha_composite(background, image)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mazerunner", description="Solve a maze stored as a PNG image."
    )
    parser.add_argument(
        "input", nargs="?", default=DEFAULT_INPUT, help="maze image to read"
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT, help="where to write the solution"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a maze, solve it and save the result; return the exit status."""
    args = _parser().parse_args(argv)
    try:
        with open(args.input, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        print(f"failed to read file: {exc}", file=sys.stderr)
        return 1

    try:
        result = solve_and_draw(decode_png(data))
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        result.save(args.output, format="PNG")
    except OSError as exc:
        print(f"failed to write file: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())