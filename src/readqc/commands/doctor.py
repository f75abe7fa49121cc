# src/readqc/commands/doctor.py
from __future__ import annotations

import sys
from pathlib import Path

from readqc.errors import ConfigError
from readqc.tools.locate import find_toolchain, resolve_adapter_file
from readqc.utils.logger import get_logger
from readqc.utils.runner import run_command

LOG = get_logger("doctor")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "doctor", parents=[parent],
        help="Preflight checks for FastQC, Trimmomatic and adapter files.",
    )
    p.add_argument("--toolchain", type=Path, default=None,
                   help="YAML/JSON file with 'fastqc', 'trimmomatic', 'adapter_dir' paths (default: PATH).")
    p.add_argument("--single-end", action="store_true", help="Check the single-end adapter file.")
    p.set_defaults(func=run)


def _ok(x: bool) -> str:
    return "OK" if x else "MISSING"


def run(args) -> int:
    try:
        tc = find_toolchain(args.toolchain)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code

    bad = []
    for name, path in (("fastqc", tc.fastqc), ("trimmomatic", tc.trimmomatic)):
        present = path is not None and path.is_file()
        print(f"[check] {name}: {_ok(present)} ({path or 'not found'})")
        if not present:
            bad.append(name)
            continue
        flag = "--version" if name == "fastqc" else "-version"
        try:
            res = run_command([str(path), flag], dry_run=getattr(args, "dry_run", False))
        except OSError as e:
            print(f"[check] {name} {flag}: FAILED ({e})")
            bad.append(name)
            continue
        version = res.stdout.strip().splitlines()[-1] if res.stdout.strip() else "unknown"
        print(f"[check] {name} {flag}: {version if res.returncode == 0 else 'FAILED'}")
        if res.returncode != 0:
            bad.append(name)

    print(f"[check] adapter dir: {tc.adapter_dir or 'not found (bundled adapters will be used)'}")
    try:
        adapters = resolve_adapter_file(None, tc.adapter_dir, paired_end=not args.single_end)
        print(f"[check] adapter file: OK ({adapters})")
    except ConfigError as e:
        print(f"[check] adapter file: MISSING ({e})")
        bad.append("adapters")

    if bad:
        print("error: missing or broken: " + ", ".join(bad), file=sys.stderr)
        return 3
    print("[ok] environment looks good.")
    return 0
