"""PNG signature, chunk framing and the IHDR and PLTE chunk decoders."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Union

SIGNATURE = b"\x89PNG\r\n\x1a\n"

IHDR = "IHDR"
IEND = "IEND"
PLTE = "PLTE"
IDAT = "IDAT"

_IHDR_LAYOUT = struct.Struct(">IIBBBBB")

Buffer = Union[bytes, bytearray, memoryview]


class PngError(ValueError):
    """Raised when PNG data is malformed or unsupported."""


class ColorType(IntEnum):
    """Colour types as stored in the IHDR chunk."""

    GRAYSCALE = 0
    TRUECOLOR = 2
    PALETTE = 3
    GRAYSCALE_ALPHA = 4
    TRUECOLOR_ALPHA = 6

    @property
    def channels(self) -> int:
        return _CHANNELS[self]

    @property
    def allowed_bit_depths(self) -> frozenset[int]:
        return _BIT_DEPTHS[self]


_CHANNELS = {
    ColorType.GRAYSCALE: 1,
    ColorType.TRUECOLOR: 3,
    ColorType.PALETTE: 1,
    ColorType.GRAYSCALE_ALPHA: 2,
    ColorType.TRUECOLOR_ALPHA: 4,
}

_BIT_DEPTHS = {
    ColorType.GRAYSCALE: frozenset({1, 2, 4, 8, 16}),
    ColorType.TRUECOLOR: frozenset({8, 16}),
    ColorType.PALETTE: frozenset({1, 2, 4, 8}),
    ColorType.GRAYSCALE_ALPHA: frozenset({8, 16}),
    ColorType.TRUECOLOR_ALPHA: frozenset({8, 16}),
}

_COLOR_NAMES = {
    ColorType.GRAYSCALE: "grayscale",
    ColorType.TRUECOLOR: "truecolor",
    ColorType.PALETTE: "palette",
    ColorType.GRAYSCALE_ALPHA: "grayscale with Alpha",
    ColorType.TRUECOLOR_ALPHA: "truecolor with Alpha",
}


class InterlaceMethod(IntEnum):
    """Interlace methods as stored in the IHDR chunk."""

    NONE = 0
    ADAM7 = 1


@dataclass(frozen=True, slots=True)
class PalettePixel:
    """A pixel holding an index into the palette."""

    index: int


@dataclass(frozen=True, slots=True)
class GreyscalePixel:
    """A single-channel grey pixel."""

    value: int


@dataclass(frozen=True, slots=True)
class TruecolorPixel:
    """A red, green, blue and alpha pixel."""

    red: int
    green: int
    blue: int
    alpha: int


@dataclass(frozen=True, slots=True)
class Chunk:
    """One chunk of a PNG stream: its four-letter type and its payload."""

    type: str
    data: bytes


@dataclass(frozen=True, slots=True)
class Header:
    """The image properties carried by the IHDR chunk."""

    width: int
    height: int
    bit_depth: int
    color_type: ColorType
    interlace_method: InterlaceMethod = InterlaceMethod.NONE

    @property
    def channels(self) -> int:
        return self.color_type.channels

    @property
    def bits_per_pixel(self) -> int:
        return self.channels * self.bit_depth

    @property
    def bytes_per_pixel(self) -> int:
        """Whole bytes per pixel; zero for pixels narrower than a byte."""
        return self.bits_per_pixel // 8

    @property
    def scanline_size(self) -> int:
        """Bytes of pixel data in one scanline, without the filter byte."""
        return (self.bits_per_pixel * self.width + 7) // 8


def read_signature(data: Buffer) -> int:
    """Check the PNG signature and return the number of bytes it takes."""
    if bytes(data[: len(SIGNATURE)]) != SIGNATURE:
        raise PngError("invalid PNG signature")
    return len(SIGNATURE)


def read_chunk(data: Buffer) -> tuple[Chunk, int]:
    """Read the chunk at the start of ``data``; return it and the bytes consumed."""
    view = memoryview(data)
    if len(view) < 12:
        raise PngError(f"truncated chunk: only {len(view)} bytes left")
    (length,) = struct.unpack_from(">I", view, 0)
    end = 8 + length
    if len(view) < end + 4:
        raise PngError(
            f"truncated chunk: declared {length} data bytes, "
            f"only {max(len(view) - 12, 0)} available"
        )
    (expected,) = struct.unpack_from(">I", view, end)
    actual = zlib.crc32(view[4:end])
    if expected != actual:
        raise PngError(f"checksum mismatch, expected {expected}, got: {actual}")
    chunk = Chunk(
        type=bytes(view[4:8]).decode("latin-1"),
        data=bytes(view[8:end]),
    )
    return chunk, end + 4


def iter_chunks(data: Buffer) -> Iterator[Chunk]:
    """Yield every chunk in ``data``, which follows the signature."""
    view = memoryview(data)
    while view:
        chunk, consumed = read_chunk(view)
        yield chunk
        view = view[consumed:]


def decode_ihdr(data: Buffer) -> Header:
    """Decode and validate the payload of an IHDR chunk."""
    if len(data) != _IHDR_LAYOUT.size:
        raise PngError(
            f"expected IHDR chunk to be {_IHDR_LAYOUT.size} bytes long, was: {len(data)}"
        )
    width, height, bit_depth, color_code, compression, filtering, interlace = (
        _IHDR_LAYOUT.unpack(bytes(data))
    )
    try:
        color_type = ColorType(color_code)
    except ValueError:
        raise PngError(f"invalid color type: {color_code}") from None
    if bit_depth not in color_type.allowed_bit_depths:
        raise PngError(
            f"invalid bit depth for {_COLOR_NAMES[color_type]}: {bit_depth}"
        )
    if compression != 0:
        raise PngError(f"invalid compression method: {compression}")
    if filtering != 0:
        raise PngError(f"invalid filter method: {filtering}")
    try:
        interlace_method = InterlaceMethod(interlace)
    except ValueError:
        raise PngError(f"invalid interlace method: {interlace}") from None
    return Header(width, height, bit_depth, color_type, interlace_method)


def decode_plte(header: Header, data: Buffer) -> list[TruecolorPixel]:
    """Decode the palette entries of a PLTE chunk; every entry is opaque."""
    raw = bytes(data)
    if len(raw) % 3 != 0:
        raise PngError("invalid PLTE chunk data, not divisible by 3")
    max_entries = 1 << header.bit_depth
    count = len(raw) // 3
    if count > max_entries:
        raise PngError(
            f"invalid PLTE chunk data, max samples: {max_entries} "
            f"found: {count} samples"
        )
    return [
        TruecolorPixel(red, green, blue, 0xFF)
        for red, green, blue in struct.iter_unpack("BBB", raw)
    ]