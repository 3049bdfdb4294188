"""
Compression sweep for the static Huffman coder

Every generator is run at every requested size, several times, through
build -> encode -> decode. One CSV row is written per run, plus a summary
per (dataset, size) and one chart per summary metric.

Outputs (in --outdir):
  - metrics.csv
  - summary.csv
  - compression_ratio.png, avg_code_bits.png, encode_ms.png, decode_ms.png

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --generators zipf128,constant --sizes_kb 1,16,256
"""

from __future__ import annotations

import argparse
import csv
import math
import random
import statistics
import time
from bisect import bisect_left
from dataclasses import asdict, dataclass
from itertools import accumulate
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import matplotlib.pyplot as plt

import huffman as huff


def shannon_entropy(ft: Dict[int, int]) -> float:
    """Bits per symbol of an ideal coder for this frequency table"""
    total = sum(ft.values())
    if total == 0:
        return 0.0
    return -sum((c / total) * math.log2(c / total) for c in ft.values())


# Synthetic datasets

ENGLISH_WEIGHTS = {
    " ": 18.0, "e": 10.0, "t": 7.5, "a": 6.5, "o": 6.2, "i": 5.7, "n": 5.7,
    "s": 5.3, "h": 5.0, "r": 4.9, "d": 3.4, "l": 3.3, "c": 2.3, "u": 2.3,
    "m": 2.0, "w": 1.9, "f": 1.8, "g": 1.6, "y": 1.6, "p": 1.5, "b": 1.2,
    "v": 0.8, "k": 0.6, ",": 1.0, ".": 1.0, "\n": 1.5, "x": 0.15, "j": 0.1,
    "q": 0.1, "z": 0.07,
}

def _sample_cdf(rng: random.Random, weights: Sequence[float], size: int) -> List[int]:
    # Indices drawn proportional to weights
    cdf = list(accumulate(weights))
    last = len(cdf) - 1
    return [min(bisect_left(cdf, rng.random() * cdf[-1]), last) for _ in range(size)]

def gen_uniform(size: int, seed: int) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(size))

def gen_zipf(size: int, seed: int, alphabet: int = 128, s: float = 1.2) -> bytes:
    return bytes(_sample_cdf(random.Random(seed), [rank ** -s for rank in range(1, alphabet + 1)], size))

def gen_skewed(size: int, seed: int, dominant: int = 0x41, share: float = 0.9) -> bytes:
    """One dominant byte, the rest spread over the other 255 values"""
    rng = random.Random(seed)
    out = bytearray(size)
    for i in range(size):
        if rng.random() < share:
            out[i] = dominant
        else:
            out[i] = (dominant + rng.randrange(1, 256)) & 0xFF
    return bytes(out)

def gen_english(size: int, seed: int) -> bytes:
    letters = list(ENGLISH_WEIGHTS)
    picks = _sample_cdf(random.Random(seed), list(ENGLISH_WEIGHTS.values()), size)
    return "".join(letters[i] for i in picks).encode("ascii")

DATASETS: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": gen_uniform,
    "zipf128": gen_zipf,
    "repetitive90": gen_skewed,
    "english_like": gen_english,
    "constant": lambda size, seed: b"A" * size,
}

def make_dataset(name: str, size: int, seed: int) -> bytes:
    try:
        return DATASETS[name](size, seed)
    except KeyError:
        raise ValueError(f"unknown dataset {name!r}; choose from {', '.join(DATASETS)}") from None


# Measurements

@dataclass
class MetricRow:
    dataset: str
    size_bytes: int
    run_id: int
    unique_symbols: int
    build_ms: float
    encode_ms: float
    decode_ms: float
    compressed_bytes: int
    bit_length: int
    compression_ratio: float
    avg_code_bits: float
    entropy_bits: float
    roundtrip_ok: bool


def _elapsed_ms(start_ns: int) -> float:
    return (time.perf_counter_ns() - start_ns) / 1e6

def run_one(dataset: str, data: bytes, run_id: int = 0) -> MetricRow:
    ft = huff.freq_table(data)

    start = time.perf_counter_ns()
    code_map = huff.generate_huffman_codes(huff.build_huffman_tree(huff.leaf_queue(ft))) if ft else {}
    build_ms = _elapsed_ms(start)

    start = time.perf_counter_ns()
    packed, bit_length = huff.pack_bits_from_codes(data, code_map)
    encode_ms = _elapsed_ms(start)

    start = time.perf_counter_ns()
    try:
        ok = huff.huffman_decode(packed, bit_length, code_map) == data
    except huff.HuffmanDecodeError:
        ok = False
    decode_ms = _elapsed_ms(start)

    n = max(1, len(data))
    return MetricRow(
        dataset, len(data), run_id, len(ft),
        build_ms, encode_ms, decode_ms,
        len(packed), bit_length, len(packed) / n, bit_length / n,
        shannon_entropy(ft), ok,
    )

def sweep(datasets: Iterable[str], sizes: Iterable[int], runs: int, seed: int) -> List[MetricRow]:
    sizes = list(sizes)
    rows = []
    for name in datasets:
        for size in sizes:
            for run_id in range(runs):
                rows.append(run_one(name, make_dataset(name, size, seed + size + run_id), run_id))
    return rows


# Reporting

SUMMARY_METRICS = ("compression_ratio", "avg_code_bits", "entropy_bits", "build_ms", "encode_ms", "decode_ms")

def summarize(rows: List[MetricRow]) -> List[dict]:
    groups: Dict[Tuple[str, int], List[MetricRow]] = {}
    for r in rows:
        groups.setdefault((r.dataset, r.size_bytes), []).append(r)

    summary = []
    for (dataset, size), items in sorted(groups.items()):
        entry = {"dataset": dataset, "size_bytes": size, "runs": len(items),
                 "roundtrip_ok_rate": sum(r.roundtrip_ok for r in items) / len(items)}
        for metric in SUMMARY_METRICS:
            values = [getattr(r, metric) for r in items]
            entry[f"{metric}_mean"] = statistics.fmean(values)
            entry[f"{metric}_stdev"] = statistics.stdev(values) if len(values) > 1 else 0.0
        summary.append(entry)
    return summary

def write_rows(path: Path, records: List[dict]) -> None:
    if not records:
        path.write_text("", encoding="utf-8")
        return
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(records[0]))
        writer.writeheader()
        writer.writerows(records)

CHARTS = {
    "compression_ratio": "Compressed / original bytes",
    "avg_code_bits": "Bits per input byte",
    "encode_ms": "Encode time (ms)",
    "decode_ms": "Decode time (ms)",
}

def plot_metric(summary: List[dict], metric: str, ylabel: str, path: Path) -> None:
    fig, ax = plt.subplots()
    for dataset in sorted({s["dataset"] for s in summary}):
        points = [s for s in summary if s["dataset"] == dataset]
        line, = ax.plot([p["size_bytes"] for p in points], [p[f"{metric}_mean"] for p in points],
                        marker="o", label=dataset)
        if metric == "avg_code_bits": # entropy is the lower bound for the same dataset
            ax.plot([p["size_bytes"] for p in points], [p["entropy_bits_mean"] for p in points],
                    linestyle="--", color=line.get_color())
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Input size (bytes)")
    ax.set_ylabel(ylabel)
    ax.set_title(ylabel + " by dataset")
    ax.legend()
    fig.tight_layout()
    fig.savefig(path, dpi=200)
    plt.close(fig)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Measure the Huffman coder on synthetic data")
    ap.add_argument("--outdir", default="results", help="Directory for CSV files and charts")
    ap.add_argument("--runs", type=int, default=3, help="Runs per dataset and size")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--generators", default=",".join(DATASETS),
                    help=f"Comma-separated datasets out of: {', '.join(DATASETS)}")
    ap.add_argument("--sizes_kb", default="4,64,1024", help="Comma-separated input sizes in KB")
    return ap

def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    names = [n.strip() for n in args.generators.split(",") if n.strip()]
    unknown = [n for n in names if n not in DATASETS]
    if unknown:
        print(f"Unknown dataset(s): {', '.join(unknown)}")
        return 2
    sizes = [int(kb) * 1024 for kb in args.sizes_kb.split(",") if kb.strip()]

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    rows = sweep(names, sizes, max(1, args.runs), args.seed)
    summary = summarize(rows)
    write_rows(outdir / "metrics.csv", [asdict(r) for r in rows])
    write_rows(outdir / "summary.csv", summary)
    for metric, ylabel in CHARTS.items():
        plot_metric(summary, metric, ylabel, outdir / f"{metric}.png")

    failures = sum(not r.roundtrip_ok for r in rows)
    print(f"{len(rows)} runs over {len(names)} datasets x {len(sizes)} sizes, {failures} round-trip failures")
    print("Results in", outdir.resolve())
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
