# src/readqc/commands/pairs.py
from __future__ import annotations

import sys
from pathlib import Path

from readqc.errors import ConfigError
from readqc.pairing.discover import discover_samples, read_sample_list
from readqc.utils.logger import get_logger

LOG = get_logger("pairs")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "pairs", parents=[parent],
        help="Show which samples would be processed (no tools are run).",
        description=(
            "Runs sample discovery only and prints one line per sample: "
            "id, naming pattern, R1 and R2 paths. Incomplete pairs and "
            "sample-list ids without files are listed after the table."
        ),
    )
    p.add_argument("-i", "--input", type=Path, required=True, help="Directory with FASTQ(.gz) files.")
    p.add_argument("-s", "--samples", type=Path, default=None, help="Sample list file (one sample ID per line).")
    p.add_argument("--single-end", action="store_true", help="Treat every FASTQ as one single-end sample.")
    p.set_defaults(func=run, _parser=p)


def run(args) -> int:
    try:
        ids = read_sample_list(args.samples) if args.samples else None
        found = discover_samples(args.input, paired_end=not args.single_end, sample_ids=ids)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code

    print("sample-id\tpattern\tR1\tR2")
    for rec in found.samples:
        print(f"{rec.id}\t{rec.pattern}\t{rec.mate1}\t{rec.mate2 or '-'}")
    for rec in found.incomplete:
        print(f"[incomplete] {rec.id}: {rec.mate1} (no mate, expected pattern {rec.pattern})")
    for sid in found.missing_ids:
        print(f"[missing] {sid}: no matching file")
    for f in found.unknown_files:
        print(f"[unknown] {f}")

    c = found.counts()
    print(f"[ok] {c['complete']} complete, {c['incomplete']} incomplete, {c['missing']} missing")
    return 0
