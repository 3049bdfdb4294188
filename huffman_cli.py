"""
Command-line front end for file compression.

How to run:
  huffpack compress notes.txt                # writes notes.txt.huf
  huffpack decompress notes.txt.huf -o copy.txt
  huffpack codes notes.txt                   # print the code table
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import huffman as huff
from huffman_container import compress_file, decompress_file

SUFFIX = ".huf"


def default_compressed_path(src: Path) -> Path:
    return src.with_name(src.name + SUFFIX)

def default_restored_path(src: Path) -> Path:
    if src.suffix == SUFFIX:
        return src.with_suffix("")
    return src.with_name(src.name + ".out")


def cmd_compress(args: argparse.Namespace) -> int:
    src = Path(args.src)
    dst = Path(args.output) if args.output else default_compressed_path(src)
    original, compressed = compress_file(src, dst)
    ratio = compressed / max(1, original)
    print(f"Compressed {src} -> {dst}")
    print(f"{original:,} bytes -> {compressed:,} bytes (ratio {ratio:.3f})")
    return 0

def cmd_decompress(args: argparse.Namespace) -> int:
    src = Path(args.src)
    dst = Path(args.output) if args.output else default_restored_path(src)
    restored = decompress_file(src, dst)
    print(f"Decompressed {src} -> {dst} ({restored:,} bytes)")
    return 0

def cmd_codes(args: argparse.Namespace) -> int:
    data = Path(args.src).read_bytes()
    ft = huff.freq_table(data)
    if not ft:
        print("Input is empty; no codes.")
        return 0
    code_map = huff.generate_huffman_codes(huff.build_huffman_tree(huff.leaf_queue(ft)))

    print(f"{'symbol':>6}  {'count':>10}  code")
    for symbol in sorted(code_map, key=lambda s: (len(code_map[s]), s)):
        print(f"{symbol:>6}  {ft[symbol]:>10}  {code_map[symbol]}")
    bits = huff.encoded_bit_length(ft, code_map)
    print(f"{len(code_map)} symbols, {bits} bits ({bits / len(data):.3f} bits/byte)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffpack", description="Static Huffman file compressor")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compress", help="Compress a file")
    p.add_argument("src", help="File to compress")
    p.add_argument("-o", "--output", help=f"Output path (default: SRC{SUFFIX})")
    p.set_defaults(func=cmd_compress)

    p = sub.add_parser("decompress", help="Restore a compressed file")
    p.add_argument("src", help="Compressed file")
    p.add_argument("-o", "--output", help=f"Output path (default: SRC without {SUFFIX})")
    p.set_defaults(func=cmd_decompress)

    p = sub.add_parser("codes", help="Print the Huffman code table of a file")
    p.add_argument("src", help="File to analyse")
    p.set_defaults(func=cmd_codes)

    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except FileNotFoundError as e:
        print(f"error: no such file: {e.filename}", file=sys.stderr)
    except OSError as e: # directories, permissions
        print(f"error: {e}", file=sys.stderr)
    except ValueError as e: # corrupt container or undecodable payload
        print(f"error: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
