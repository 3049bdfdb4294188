import random

import pytest

import huffman as huff
from huffman_container import (
    HEADER,
    ContainerFormatError,
    compress_file,
    decompress_file,
    dump_unit,
    load_unit,
)


def test_layout_of_a_small_unit():
    blob = dump_unit(huff.huffman_compress(b"ABACA"))
    expected = (
        b"HUF1" + (7).to_bytes(8, "big") + (3).to_bytes(2, "big")
        + bytes([0x41, 1, 0x80])
        + bytes([0x42, 2, 0x00])
        + bytes([0x43, 2, 0x40])
        + bytes([0x96])
    )
    assert blob == expected

def test_dump_load_restores_the_unit():
    rng = random.Random(3)
    data = bytes(rng.choice(b"the quick brown fox\n") for _ in range(3000))
    unit = huff.huffman_compress(data)
    restored = load_unit(dump_unit(unit))
    assert restored == unit
    assert huff.huffman_decompress(restored) == data

def test_all_256_symbols_survive_the_container():
    data = bytes(range(256)) * 2 + b"\x00" * 1000
    unit = load_unit(dump_unit(huff.huffman_compress(data)))
    assert len(unit.code_map) == 256
    assert huff.huffman_decompress(unit) == data

def test_empty_unit():
    blob = dump_unit(huff.huffman_compress(b""))
    assert len(blob) == HEADER.size
    unit = load_unit(blob)
    assert unit == huff.CompressedUnit(b"", {}, 0)
    assert huff.huffman_decompress(unit) == b""

def test_identical_input_gives_identical_blobs():
    data = b"Hello World" * 50
    assert dump_unit(huff.huffman_compress(data)) == dump_unit(huff.huffman_compress(data))

def test_bad_magic():
    blob = bytearray(dump_unit(huff.huffman_compress(b"Hello World" * 50)))
    blob[0] ^= 0xFF
    with pytest.raises(ContainerFormatError):
        load_unit(bytes(blob))

def test_header_too_short():
    with pytest.raises(ContainerFormatError):
        load_unit(b"HUF1\x00")

def test_truncated_payload():
    blob = dump_unit(huff.huffman_compress(b"This is a test" * 100))
    with pytest.raises(ContainerFormatError):
        load_unit(blob[:-3])

def test_truncated_code_table():
    blob = dump_unit(huff.huffman_compress(b"ABACA"))
    with pytest.raises(ContainerFormatError):
        load_unit(blob[:HEADER.size + 4])

def test_duplicate_symbol_entry():
    blob = (
        HEADER.pack(b"HUF1", 2, 2)
        + bytes([0x41, 1, 0x00])
        + bytes([0x41, 1, 0x80])
        + b"\x00"
    )
    with pytest.raises(ContainerFormatError):
        load_unit(blob)

def test_zero_length_code():
    blob = HEADER.pack(b"HUF1", 0, 1) + bytes([0x41, 0])
    with pytest.raises(ContainerFormatError):
        load_unit(blob)

def test_container_error_is_a_value_error():
    assert issubclass(ContainerFormatError, ValueError)


def test_compress_and_decompress_files(tmp_path):
    src = tmp_path / "input.txt"
    packed = tmp_path / "input.txt.huf"
    restored = tmp_path / "restored.txt"
    data = b"a tale of two cities\n" * 200
    src.write_bytes(data)

    original_size, compressed_size = compress_file(src, packed)
    assert original_size == len(data)
    assert compressed_size == packed.stat().st_size
    assert compressed_size < original_size

    assert decompress_file(packed, restored) == len(data)
    assert restored.read_bytes() == data

def test_compress_empty_file(tmp_path):
    src = tmp_path / "empty.bin"
    src.write_bytes(b"")
    compress_file(src, tmp_path / "empty.huf")
    assert decompress_file(tmp_path / "empty.huf", tmp_path / "out.bin") == 0
    assert (tmp_path / "out.bin").read_bytes() == b""
