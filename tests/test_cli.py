from pathlib import Path

import huffman_cli as cli


def test_compress_then_decompress_with_default_paths(tmp_path, capsys):
    src = tmp_path / "notes.txt"
    data = b"to be or not to be\n" * 40
    src.write_bytes(data)

    assert cli.main(["compress", str(src)]) == 0
    packed = tmp_path / "notes.txt.huf"
    assert packed.exists()
    assert "Compressed" in capsys.readouterr().out

    src.unlink()
    assert cli.main(["decompress", str(packed)]) == 0
    assert src.read_bytes() == data

def test_explicit_output_path(tmp_path):
    src = tmp_path / "data.bin"
    src.write_bytes(bytes(range(256)))
    packed = tmp_path / "packed"
    restored = tmp_path / "restored.bin"

    assert cli.main(["compress", str(src), "-o", str(packed)]) == 0
    assert cli.main(["decompress", str(packed), "--output", str(restored)]) == 0
    assert restored.read_bytes() == bytes(range(256))

def test_missing_input_reports_error(tmp_path, capsys):
    assert cli.main(["compress", str(tmp_path / "nope.txt")]) == 1
    assert "no such file" in capsys.readouterr().err

def test_corrupt_container_reports_error(tmp_path, capsys):
    bad = tmp_path / "bad.huf"
    bad.write_bytes(b"not a container at all")
    assert cli.main(["decompress", str(bad)]) == 1
    assert "bad magic" in capsys.readouterr().err

def test_codes_lists_shortest_codes_first(tmp_path, capsys):
    src = tmp_path / "abaca.txt"
    src.write_bytes(b"ABACA")
    assert cli.main(["codes", str(src)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[1].split() == ["65", "3", "1"]
    assert lines[2].split() == ["66", "1", "00"]
    assert lines[3].split() == ["67", "1", "01"]
    assert lines[4].startswith("3 symbols, 7 bits")

def test_codes_on_empty_file(tmp_path, capsys):
    src = tmp_path / "empty"
    src.write_bytes(b"")
    assert cli.main(["codes", str(src)]) == 0
    assert "no codes" in capsys.readouterr().out

def test_default_paths():
    assert cli.default_compressed_path(Path("a/b.txt")) == Path("a/b.txt.huf")
    assert cli.default_restored_path(Path("a/b.txt.huf")) == Path("a/b.txt")
    assert cli.default_restored_path(Path("a/b.bin")) == Path("a/b.bin.out")

def test_directory_input_reports_error(tmp_path, capsys):
    assert cli.main(["compress", str(tmp_path)]) == 1
    assert capsys.readouterr().err.startswith("error:")
