import struct
import zlib

import pytest

from mazerunner.pngchunks import (
    IDAT,
    IEND,
    IHDR,
    Chunk,
    ColorType,
    Header,
    InterlaceMethod,
    PngError,
    TruecolorPixel,
    decode_ihdr,
    decode_plte,
    iter_chunks,
    read_chunk,
    read_signature,
)

PNG_SIGN = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])

REAL_PNG = bytes.fromhex(
    "89 50 4e 47 0d 0a 1a 0a"
    "00 00 00 0d 49 48 44 52"
    "00 00 00 05 00 00 00 05"
    "08 06 00 00 00 8d 6f 26"
    "e5 00 00 00 01 73 52 47"
    "42 00 ae ce 1c e9 00 00"
    "00 2a 49 44 41 54 18 57"
    "63 64 60 60 f8 cf 80 06"
    "18 ff ff ff 8f 22 c8 c8"
    "c8 c8 c0 08 52 09 12 07"
    "71 60 00 2e 88 6c 02 58"
    "10 dd 4c 00 34 02 0d fe"
    "a4 8d 71 f6 00 00 00 00"
    "49 45 4e 44 ae 42 60 82"
)

REAL_IHDR_CHUNK = bytes.fromhex(
    "00 00 00 0d 49 48 44 52"
    "00 00 00 05 00 00 00 05"
    "08 06 00 00 00 8d 6f 26"
    "e5"
)


def make_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    body = chunk_type + payload
    return struct.pack(">I", len(payload)) + body + struct.pack(">I", zlib.crc32(body))


def ihdr_payload(width=5, height=5, depth=8, color=6, comp=0, filt=0, interlace=0):
    return struct.pack(">IIBBBBB", width, height, depth, color, comp, filt, interlace)


def test_first_bytes_are_file_sign():
    with pytest.raises(PngError, match="signature"):
        read_signature(bytes(8))


def test_signature_of_real_png():
    assert read_signature(REAL_PNG) == 8
    assert read_signature(PNG_SIGN) == 8


def test_short_signature_is_rejected():
    with pytest.raises(PngError):
        read_signature(PNG_SIGN[:4])


def test_decode_chunk_with_real_ihdr():
    chunk, read = read_chunk(REAL_IHDR_CHUNK)
    assert chunk.type == IHDR
    assert read == len(REAL_IHDR_CHUNK)
    assert len(chunk.data) == 13


def test_read_chunk_ignores_trailing_data():
    chunk, read = read_chunk(REAL_IHDR_CHUNK + b"extra")
    assert read == 25
    assert chunk == Chunk(IHDR, REAL_IHDR_CHUNK[8:21])


def test_checksum_mismatch():
    corrupted = bytearray(REAL_IHDR_CHUNK)
    corrupted[10] ^= 0xFF
    with pytest.raises(PngError, match="checksum mismatch"):
        read_chunk(bytes(corrupted))


def test_truncated_chunk():
    with pytest.raises(PngError, match="truncated"):
        read_chunk(REAL_IHDR_CHUNK[:-2])


def test_zero_chunk_fails_checksum():
    with pytest.raises(PngError, match="checksum"):
        list(iter_chunks(bytes(12)))


def test_iter_chunks_of_real_png():
    chunks = list(iter_chunks(REAL_PNG[8:]))
    assert [c.type for c in chunks] == [IHDR, "sRGB", IDAT, IEND]
    assert chunks[1].data == b"\x00"
    assert len(chunks[2].data) == 42
    assert chunks[2].data[:2] == b"\x18\x57"
    assert chunks[3].data == b""


def test_iter_chunks_after_ihdr_only():
    chunks = list(iter_chunks(REAL_IHDR_CHUNK))
    assert [c.type for c in chunks] == [IHDR]


def test_iter_chunks_round_trip():
    payloads = [(b"IHDR", ihdr_payload()), (b"tEXt", b"hello"), (b"IEND", b"")]
    stream = b"".join(make_chunk(t, p) for t, p in payloads)
    decoded = [(c.type.encode("latin-1"), c.data) for c in iter_chunks(stream)]
    assert decoded == payloads


def test_decode_real_ihdr():
    chunk, _ = read_chunk(REAL_IHDR_CHUNK)
    header = decode_ihdr(chunk.data)
    assert header == Header(5, 5, 8, ColorType.TRUECOLOR_ALPHA, InterlaceMethod.NONE)


def test_header_sizes_for_rgba():
    header = decode_ihdr(ihdr_payload())
    assert header.channels == 4
    assert header.bits_per_pixel == 32
    assert header.bytes_per_pixel == 4
    assert header.scanline_size == 20


def test_header_sizes_for_one_bit_grayscale():
    header = decode_ihdr(ihdr_payload(width=5, depth=1, color=0))
    assert header.bits_per_pixel == 1
    assert header.bytes_per_pixel == 0
    assert header.scanline_size == 1


def test_decode_ihdr_adam7():
    header = decode_ihdr(ihdr_payload(interlace=1))
    assert header.interlace_method is InterlaceMethod.ADAM7


@pytest.mark.parametrize("length", [0, 12, 14])
def test_decode_ihdr_wrong_length(length):
    with pytest.raises(PngError, match="13 bytes"):
        decode_ihdr(bytes(length))


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"color": 5}, "invalid color type: 5"),
        ({"color": 2, "depth": 4}, "invalid bit depth for truecolor: 4"),
        ({"color": 0, "depth": 3}, "invalid bit depth for grayscale: 3"),
        ({"color": 3, "depth": 16}, "invalid bit depth for palette: 16"),
        ({"color": 4, "depth": 2}, "invalid bit depth for grayscale with Alpha: 2"),
        ({"color": 6, "depth": 1}, "invalid bit depth for truecolor with Alpha: 1"),
        ({"comp": 1}, "invalid compression method: 1"),
        ({"filt": 2}, "invalid filter method: 2"),
        ({"interlace": 2}, "invalid interlace method: 2"),
    ],
)
def test_decode_ihdr_invalid_fields(kwargs, message):
    with pytest.raises(PngError, match=message):
        decode_ihdr(ihdr_payload(**kwargs))


def test_decode_plte_entries():
    header = Header(2, 2, 1, ColorType.PALETTE)
    entries = decode_plte(header, bytes([1, 2, 3, 250, 251, 252]))
    assert entries == [
        TruecolorPixel(1, 2, 3, 255),
        TruecolorPixel(250, 251, 252, 255),
    ]


def test_decode_plte_not_divisible_by_three():
    header = Header(2, 2, 8, ColorType.PALETTE)
    with pytest.raises(PngError, match="not divisible by 3"):
        decode_plte(header, bytes(4))


def test_decode_plte_too_many_entries():
    header = Header(2, 2, 1, ColorType.PALETTE)
    with pytest.raises(PngError, match="max samples: 2 found: 3"):
        decode_plte(header, bytes(9))


def test_decode_plte_empty():
    header = Header(2, 2, 8, ColorType.PALETTE)
    assert decode_plte(header, b"") == []