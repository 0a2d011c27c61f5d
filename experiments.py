"""
Huffman coding demo and experiments

Demo mode encodes one text and prints the bit-string, its length against an
8-bit-per-symbol baseline, the saved percentage and the decoded text.

Experiment mode runs the pipeline over synthetic texts, repeated runs per
configuration, and writes:
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --text "Hello World!"
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --size 4096 --generators zipf64,english_like
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff


BITS_PER_SYMBOL = 8


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


@dataclass
class CompressionStats:
    encoded_bits: int
    baseline_bits: int
    saved_percent: float
    ratio: float  # encoded / baseline


def fixed_width_bits(text: str, bits_per_symbol: int = BITS_PER_SYMBOL) -> int:
    return len(text) * bits_per_symbol

def compression_stats(text: str, bits: str) -> CompressionStats:
    baseline = fixed_width_bits(text)
    ratio = len(bits) / max(1, baseline)
    return CompressionStats(
        encoded_bits=len(bits),
        baseline_bits=baseline,
        saved_percent=100.0 - ratio * 100.0,
        ratio=ratio,
    )


def demo(text: str, pad_single_symbol: bool = False) -> str:
    encoded = huff.encode(text, pad_single_symbol=pad_single_symbol)
    stats = compression_stats(text, encoded.bits)
    decoded = huff.decode(encoded.tree, encoded.bits)
    print(f"Encoded: {encoded.bits} {stats.encoded_bits}")
    print(f"Fixed width ({BITS_PER_SYMBOL} bit): {stats.baseline_bits}")
    print(f"Saved: {stats.saved_percent:.2f}%")
    print(f"Decoded: {decoded}")
    return decoded


# Synthetic text generators

ENGLISH_CHARS = (
    " etaoinshrdlcumwfgypbvkjxq"
    "ETAOINSHRDLCUMWFGYPBVKJXQ"
    "\n"
)

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_uniform(size: int, alphabet: int = 95, seed: int = 0) -> str:
    rng = random.Random(seed)
    return ''.join(chr(32 + rng.randrange(0, alphabet)) for _ in range(size))

def gen_repetitive(size: int, dominant: str = 'A', dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    other_symbols = [chr(i) for i in range(32, 127) if chr(i) != dominant]
    return ''.join(dominant if rng.random() < dom_frac else rng.choice(other_symbols) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return ''.join(chr(32 + _sample_cdf(rng, cdf)) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    weights = []
    for ch in ENGLISH_CHARS:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    cdf = _cdf(weights)
    return ''.join(ENGLISH_CHARS[_sample_cdf(rng, cdf)] for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform95": lambda size, seed: gen_uniform(size, alphabet=95, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant='A', dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant='A', dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    Unknown generator names fall back to uniform95; the returned name says so
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform95", gen_uniform(size, alphabet=95, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    dataset_name: str
    text_length: int
    run_id: int
    unique_symbols: int

    build_tree_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    baseline_bits: int
    compression_ratio: float
    correctness_ok: int  # 1 or 0


def run_one(text: str, pad_single_symbol: bool = True) -> MetricRow:
    t0 = now_ns()
    root = huff.build_huffman_tree(huff.count_symbols(text))
    code_map = huff.codes_for_encoding(root, pad_single_symbol)
    t1 = now_ns()

    t2 = now_ns()
    bits = huff.huffman_encode(text, code_map)
    t3 = now_ns()

    t4 = now_ns()
    decoded = huff.huffman_decode(bits, root)
    t5 = now_ns()

    stats = compression_stats(text, bits)
    build_ms, encode_ms, decode_ms = ns_to_ms(t1 - t0), ns_to_ms(t3 - t2), ns_to_ms(t5 - t4)

    return MetricRow(
        dataset_name="",
        text_length=len(text),
        run_id=0,
        unique_symbols=len(code_map),
        build_tree_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=stats.encoded_bits,
        baseline_bits=stats.baseline_bits,
        compression_ratio=stats.ratio,
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by dataset_name, text_length and compute mean/stdev
    """
    key_to: Dict[Tuple[str, int], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.dataset_name, r.text_length), []).append(r)

    summary_fields = [
        "dataset_name", "text_length", "n_runs",
        "compression_ratio_mean", "compression_ratio_stdev",
        "build_tree_ms_mean", "build_tree_ms_stdev",
        "encode_ms_mean", "encode_ms_stdev",
        "decode_ms_mean", "decode_ms_stdev",
        "total_ms_mean", "total_ms_stdev",
        "correctness_ok_rate",
    ]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (dataset_name, length), items in sorted(key_to.items()):
            row = {"dataset_name": dataset_name, "text_length": length, "n_runs": len(items)}
            for field in ("compression_ratio", "build_tree_ms", "encode_ms", "decode_ms", "total_ms"):
                m, s = mean_stdev([getattr(x, field) for x in items])
                row[f"{field}_mean"] = m
                row[f"{field}_stdev"] = s
            row["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(row)


# Plotting

def plot_metric(rows: List[MetricRow], outdir: Path, field: str, ylabel: str, filename: str) -> Optional[Path]:
    if not rows:
        return None

    datasets = sorted(set(r.dataset_name for r in rows))
    x = list(range(len(datasets)))
    y = [statistics.mean(getattr(r, field) for r in rows if r.dataset_name == d) for d in datasets]

    plt.figure()
    plt.plot(x, y, marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel(ylabel)
    plt.title(f"{ylabel} by Dataset")
    plt.tight_layout()
    path = outdir / filename
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_all(rows: List[MetricRow], outdir: Path) -> List[Path]:
    charts = [
        plot_metric(rows, outdir, "compression_ratio", "Encoded Bits / Fixed-Width Bits", "compression_ratio.png"),
        plot_metric(rows, outdir, "encode_ms", "Encode Time (ms)", "encode_time.png"),
        plot_metric(rows, outdir, "total_ms", "Total Time (ms) (build + encode + decode)", "total_time.png"),
    ]
    return [c for c in charts if c is not None]


def run_experiments(gen_names: List[str], size: int, runs: int, seed: int) -> List[MetricRow]:
    rows: List[MetricRow] = []
    for gen_name in gen_names:
        for run_id in range(1, runs + 1):
            dataset_name, text = generate_dataset(gen_name, size, seed + run_id)
            row = run_one(text)
            row.dataset_name = dataset_name
            row.run_id = run_id
            rows.append(row)
    return rows


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Huffman coding demo and experiments")
    ap.add_argument("--text", type=str, default=None, help="Encode this text, print statistics and exit")
    ap.add_argument("--pad-single-symbol", action="store_true",
                    help="Give a text of one distinct symbol the 1-bit code '0' instead of failing")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per dataset")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--size", type=int, default=16 * 1024, help="Text length in symbols for each dataset")
    ap.add_argument("--generators", type=str, default="uniform95,zipf64,repetitive90,english_like",
                    help="Comma-separated dataset generator names")
    ap.add_argument("--no-plots", action="store_true", help="Only write the CSV files")
    args = ap.parse_args(argv)

    if args.text is not None:
        try:
            demo(args.text, pad_single_symbol=args.pad_single_symbol)
        except huff.HuffmanError as e:
            ap.error(str(e))
        return 0

    if args.runs < 1 or args.size < 1:
        ap.error("--runs and --size must be at least 1")

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows = run_experiments(parse_csv_list(args.generators), args.size, args.runs, args.seed)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_all(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
