# src/readqc/cli.py
from __future__ import annotations

import argparse
from typing import Optional, Sequence

from readqc import __version__
from readqc.utils.logger import setup_logger

from readqc.commands import run as cmd_run
from readqc.commands import pairs as cmd_pairs
from readqc.commands import doctor as cmd_doctor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readqc",
        description="Read QC pipeline CLI (FastQC → Trimmomatic → FastQC; pairs; doctor).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--dry-run", action="store_true", help="Log tool commands without executing them.")
    parent.add_argument("--show-tool-output", dest="show_tool_output", action="store_true",
                        help="Echo FastQC/Trimmomatic output to the console as well as the logs.")
    parent.add_argument("--no-show-tool-output", dest="show_tool_output", action="store_false",
                        help="Write tool output to the log files only (default).")
    parent.add_argument("-v", "--verbose", action="store_true", help="DEBUG messages on the console.")
    parent.set_defaults(show_tool_output=False)

    subparsers = parser.add_subparsers(dest="command", required=True)

    cmd_run.setup_parser(subparsers, parent)
    cmd_pairs.setup_parser(subparsers, parent)
    cmd_doctor.setup_parser(subparsers, parent)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = setup_logger(verbose=args.verbose)
    logger.debug("Parsed args: %r", args)
    return args.func(args)
