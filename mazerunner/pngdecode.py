"""Scanline unfiltering, pixel extraction and whole-file PNG decoding."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import islice
from typing import Optional, Union

from mazerunner.pngchunks import (
    IDAT,
    IEND,
    IHDR,
    PLTE,
    Buffer,
    ColorType,
    GreyscalePixel,
    Header,
    InterlaceMethod,
    PalettePixel,
    PngError,
    TruecolorPixel,
    decode_ihdr,
    decode_plte,
    iter_chunks,
    read_signature,
)

Pixel = Union[PalettePixel, GreyscalePixel, TruecolorPixel]


class FilterType(IntEnum):
    """Per-scanline filter types."""

    NONE = 0
    SUB = 1
    UP = 2
    AVERAGE = 3
    PAETH = 4

    @property
    def needs_previous(self) -> bool:
        return self >= FilterType.UP


@dataclass
class Png:
    """A decoded image: header properties, rows of pixels and the palette."""

    width: int
    height: int
    color_type: ColorType
    bit_depth: int
    interlace_method: InterlaceMethod
    pixels: list[list[Pixel]] = field(default_factory=list)
    palette: list[TruecolorPixel] = field(default_factory=list)


def paeth_predictor(a: int, b: int, c: int) -> int:
    """Return whichever of left, above and upper-left is nearest to a + b - c."""
    estimate = a + b - c
    to_a = abs(estimate - a)
    to_b = abs(estimate - b)
    to_c = abs(estimate - c)
    if to_a <= to_b and to_a <= to_c:
        return a
    if to_b <= to_c:
        return b
    return c


def unfilter_scanline(
    filter_type: int,
    filtered: Buffer,
    previous: Optional[Buffer],
    bytes_per_pixel: int,
) -> bytes:
    """Undo one scanline's filter; ``previous`` is the prior unfiltered line."""
    try:
        kind = FilterType(filter_type)
    except ValueError:
        raise PngError(f"unknown filter type {filter_type}") from None

    line = bytes(filtered)
    if kind is FilterType.NONE:
        return line

    bpp = max(bytes_per_pixel, 1)
    prior = bytes(previous) if previous is not None else bytes(len(line))
    if kind.needs_previous and len(prior) < len(line):
        raise PngError(
            "couldn't unfilter scanline, previous scanline has "
            f"{len(prior)} bytes, expected {len(line)}"
        )
    if kind is FilterType.UP:
        return bytes((value + above) & 0xFF for value, above in zip(line, prior))

    out = bytearray(len(line))
    for i, value in enumerate(line):
        left = out[i - bpp] if i >= bpp else 0
        if kind is FilterType.SUB:
            predictor = left
        elif kind is FilterType.AVERAGE:
            predictor = (left + prior[i]) // 2
        else:
            upper_left = prior[i - bpp] if i >= bpp else 0
            predictor = paeth_predictor(left, prior[i], upper_left)
        out[i] = (value + predictor) & 0xFF
    return bytes(out)


def _small_pixels(header: Header, data: bytes) -> list[Pixel]:
    bits = header.bits_per_pixel
    mask = (1 << bits) - 1
    shifts = range(8 - bits, -1, -bits)
    values = islice(
        ((byte >> shift) & mask for byte in data for shift in shifts), header.width
    )
    if header.color_type is ColorType.PALETTE:
        return [PalettePixel(value) for value in values]
    return [GreyscalePixel(value) for value in values]


def _wide_pixel(header: Header, samples: tuple[int, ...]) -> Pixel:
    color_type = header.color_type
    if color_type is ColorType.GRAYSCALE:
        return GreyscalePixel(samples[0])
    if color_type is ColorType.PALETTE:
        return PalettePixel(samples[0])
    if color_type is ColorType.TRUECOLOR:
        red, green, blue = samples
        return TruecolorPixel(red, green, blue, (1 << header.bit_depth) - 1)
    if color_type is ColorType.GRAYSCALE_ALPHA:
        grey, alpha = samples
        return TruecolorPixel(grey, grey, grey, alpha)
    return TruecolorPixel(*samples)


def decode_scanline(header: Header, data: Buffer) -> list[Pixel]:
    """Turn one unfiltered scanline into ``header.width`` pixels."""
    line = bytes(data)
    if len(line) < header.scanline_size:
        raise PngError(
            f"scanline too short: expected {header.scanline_size} bytes, "
            f"got {len(line)}"
        )
    if header.bits_per_pixel < 8:
        return _small_pixels(header, line)
    sample = "B" if header.bit_depth == 8 else "H"
    layout = struct.Struct(f">{header.channels}{sample}")
    used = line[: layout.size * header.width]
    return [_wide_pixel(header, samples) for samples in layout.iter_unpack(used)]


def decode_pixels(raw: Buffer, header: Header) -> list[list[Pixel]]:
    """Split decompressed image data into scanlines and decode every row."""
    data = memoryview(bytes(raw))
    size = header.scanline_size
    stride = size + 1
    rows: list[list[Pixel]] = []
    previous = bytes(size)
    for row in range(header.height):
        line = data[row * stride : (row + 1) * stride]
        if len(line) < stride:
            raise PngError(
                "couldn't parse IDAT data, not enough data to read all scanlines, "
                f"expected: {header.height} scanlines, got: {row}"
            )
        current = unfilter_scanline(line[0], line[1:], previous, header.bytes_per_pixel)
        rows.append(decode_scanline(header, current))
        previous = current
    expected = header.height * stride
    if header.height and len(data) > expected:
        raise PngError(
            "there was data left in the IDAT chunks after reading all scanlines, "
            f"remaining bytes: {len(data) - expected}"
        )
    return rows


def _decompress(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as exc:
        raise PngError(f"couldn't decompress IDAT data: {exc}") from None


def decode_png(data: Buffer) -> Png:
    """Decode a complete PNG file held in memory."""
    offset = read_signature(data)
    chunks = list(iter_chunks(memoryview(data)[offset:]))
    if not chunks:
        raise PngError("first chunk should be IHDR, found: nothing")

    header: Optional[Header] = None
    palette: list[TruecolorPixel] = []
    idat = bytearray()
    for index, chunk in enumerate(chunks):
        if index == 0 and chunk.type != IHDR:
            raise PngError(f"first chunk should be IHDR, found: {chunk.type}")
        if chunk.type == IHDR:
            header = decode_ihdr(chunk.data)
        elif chunk.type == PLTE:
            if header is None:
                raise PngError("PLTE chunk found before IHDR")
            palette = decode_plte(header, chunk.data)
        elif chunk.type == IDAT:
            idat += chunk.data

    last = chunks[-1]
    if last.type != IEND:
        raise PngError(f"last chunk should be IEND, found: {last.type}")
    if header is None:
        raise PngError("missing IHDR chunk")
    if not idat:
        raise PngError("there should be at least one IDAT chunk")
    if header.color_type is ColorType.PALETTE and not palette:
        raise PngError("palette color type missing PLTE chunk")

    pixels = decode_pixels(_decompress(bytes(idat)), header)
    return Png(
        width=header.width,
        height=header.height,
        color_type=header.color_type,
        bit_depth=header.bit_depth,
        interlace_method=header.interlace_method,
        pixels=pixels,
        palette=palette,
    )