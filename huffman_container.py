"""
Container format for a compressed unit: the packed payload together with its
code table and true bit length, so it can be written to disk and read back.

Layout (big-endian):
    magic        4 bytes   b"HUF1"
    bit_length   8 bytes   number of meaningful payload bits
    entry_count  2 bytes   code table entries (0..256)
    entries      per entry: symbol (1), code length (1), code bits packed MSB-first
    payload      ceil(bit_length / 8) bytes
"""

import struct
from pathlib import Path
from typing import Dict, Tuple, Union

from huffman import (
    CompressedUnit,
    huffman_compress,
    huffman_decompress,
    pack_bit_chunks,
    unpack_bits,
)

MAGIC = b"HUF1"
HEADER = struct.Struct(">4sQH")
ENTRY = struct.Struct(">BB")

PathLike = Union[str, Path]


class ContainerFormatError(ValueError):
    """Blob is not a well-formed compressed container."""


def dump_unit(unit: CompressedUnit) -> bytes:
    out = bytearray(HEADER.pack(MAGIC, unit.bit_length, len(unit.code_map)))
    for symbol in sorted(unit.code_map): # stable order -> identical blobs for identical units
        code = unit.code_map[symbol]
        if not 0 < len(code) <= 0xFF:
            raise ValueError(f"code length {len(code)} for symbol {symbol} does not fit the container")
        out += ENTRY.pack(symbol, len(code))
        out += pack_bit_chunks([code])[0]
    out += unit.packed
    return bytes(out)


def load_unit(blob: bytes) -> CompressedUnit:
    if len(blob) < HEADER.size:
        raise ContainerFormatError(f"container too short ({len(blob)} bytes)")
    magic, bit_length, entry_count = HEADER.unpack_from(blob, 0)
    if magic != MAGIC:
        raise ContainerFormatError(f"bad magic {magic!r}")
    if entry_count > 256:
        raise ContainerFormatError(f"{entry_count} code table entries, at most 256 allowed")

    offset = HEADER.size
    code_map: Dict[int, str] = {}
    for _ in range(entry_count):
        if offset + ENTRY.size > len(blob):
            raise ContainerFormatError("truncated code table")
        symbol, code_len = ENTRY.unpack_from(blob, offset)
        offset += ENTRY.size
        if code_len == 0:
            raise ContainerFormatError(f"zero-length code for symbol {symbol}")
        if symbol in code_map:
            raise ContainerFormatError(f"symbol {symbol} appears twice in the code table")
        n_bytes = (code_len + 7) // 8
        if offset + n_bytes > len(blob):
            raise ContainerFormatError("truncated code table")
        code_map[symbol] = unpack_bits(blob[offset:offset + n_bytes], code_len)
        offset += n_bytes

    packed = blob[offset:]
    if len(packed) != (bit_length + 7) // 8:
        raise ContainerFormatError(
            f"payload has {len(packed)} bytes but bit length {bit_length} needs {(bit_length + 7) // 8}"
        )
    return CompressedUnit(bytes(packed), code_map, bit_length)


def compress_file(src: PathLike, dst: PathLike) -> Tuple[int, int]:
    data = Path(src).read_bytes()
    blob = dump_unit(huffman_compress(data))
    Path(dst).write_bytes(blob)
    return len(data), len(blob)


def decompress_file(src: PathLike, dst: PathLike) -> int:
    unit = load_unit(Path(src).read_bytes())
    data = huffman_decompress(unit)
    Path(dst).write_bytes(data)
    return len(data)
