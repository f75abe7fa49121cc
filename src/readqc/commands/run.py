# src/readqc/commands/run.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

from readqc.config.io import apply_params_defaults, load_params
from readqc.config.load import build_run_config
from readqc.errors import ConfigError, ReadQCError
from readqc.pipeline.layout import OutputLayout
from readqc.pipeline.orchestrator import Pipeline
from readqc.tools.fastqc import FastQC
from readqc.tools.locate import find_toolchain, require_tools
from readqc.tools.trimmomatic import Trimmomatic
from readqc.utils.logger import attach_log_file, get_logger

LOG = get_logger("run")

_DEFAULTS: Dict[str, Any] = {
    "samples": None, "threads": 8, "adapters": None,
    "phred": 33, "minlen": 70, "leading": 3, "trailing": 3, "slidingwindow": "4:20",
    "fastqc_only": False, "skip_trim": False,
    "skip_raw_fastqc": False, "skip_trimmed_fastqc": False,
    "resume": False, "single_end": False,
}

_EPILOG = """\
Notes:
  - In paired-end mode R1/R2 naming is auto-detected as
      *_R1.* + *_R2.*  OR  *_1.* + *_2.*
  - If you manually move files out of INPUT_DIR you may leave incomplete pairs
    behind (R1 exists but R2 missing). Those samples are skipped with a warning.

Examples:
  readqc run -i raw_data/ -o qc_results/ -t 20
  readqc run -i raw_data/ -o qc_results/ -t 20 --resume
  readqc run -i raw_data/ -o qc_results/ --skip-trim
  readqc run -i raw_data/ -o qc_results/ --fastqc-only
  readqc run -i raw_data/ -o qc_results/ --single-end
"""


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "run", parents=[parent],
        help="FastQC on raw reads → Trimmomatic → FastQC on trimmed reads.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-i", "--input", type=Path, required=True,
                   help="Input directory containing FASTQ files.")
    p.add_argument("-o", "--output", type=Path, required=True,
                   help="Output directory for QC results.")
    p.add_argument("-s", "--samples", type=Path, default=None,
                   help="Sample list file (one sample ID per line).")
    p.add_argument("-t", "--threads", type=int, default=_DEFAULTS["threads"],
                   help="Number of threads passed to each tool (default: 8).")
    p.add_argument("-a", "--adapters", type=Path, default=None,
                   help="Adapter file for Trimmomatic (default: auto-detect).")
    p.add_argument("--params", type=Path, default=None,
                   help="YAML/JSON file with default values for these options (CLI wins).")
    p.add_argument("--toolchain", type=Path, default=None,
                   help="YAML/JSON file with 'fastqc', 'trimmomatic', 'adapter_dir' paths (default: PATH).")

    q = p.add_argument_group("trimming parameters")
    q.add_argument("--phred", type=int, choices=(33, 64), default=_DEFAULTS["phred"],
                   help="Phred score encoding (default: 33).")
    q.add_argument("--minlen", type=int, default=_DEFAULTS["minlen"],
                   help="Minimum read length after trimming (default: 70).")
    q.add_argument("--leading", type=int, default=_DEFAULTS["leading"],
                   help="Minimum quality at read start (default: 3).")
    q.add_argument("--trailing", type=int, default=_DEFAULTS["trailing"],
                   help="Minimum quality at read end (default: 3).")
    q.add_argument("--slidingwindow", type=str, default=_DEFAULTS["slidingwindow"],
                   help="Sliding window quality cutoff WINDOW:QUALITY (default: 4:20).")

    s = p.add_argument_group("stage controls")
    s.add_argument("--fastqc-only", action="store_true",
                   help="Run only FastQC on raw reads; skip trimming and trimmed FastQC.")
    s.add_argument("--skip-trim", action="store_true",
                   help="Skip the Trimmomatic step.")
    s.add_argument("--skip-raw-fastqc", action="store_true",
                   help="Skip step 1 (FastQC on raw reads).")
    s.add_argument("--skip-trimmed-fastqc", action="store_true",
                   help="Skip step 3 (FastQC on trimmed reads).")
    s.add_argument("--skip-fastqc", action="store_true",
                   help="Skip both raw and trimmed FastQC steps.")
    s.add_argument("--resume", "--skip-completed", dest="resume", action="store_true",
                   help="Skip samples whose trimmed outputs already exist and are non-empty.")
    s.add_argument("--single-end", action="store_true",
                   help="Process as single-end reads (default: paired-end).")

    p.set_defaults(func=run, _parser=p)


def run(args) -> int:
    try:
        if getattr(args, "params", None):
            apply_params_defaults(args, load_params(args.params), _DEFAULTS)

        toolchain = find_toolchain(getattr(args, "toolchain", None))
        config = build_run_config(args, adapter_dir=toolchain.adapter_dir)

        try:
            attach_log_file(OutputLayout(config.output_dir).run_log)
        except OSError as e:
            raise ConfigError(f"cannot create output directory {config.output_dir}: {e}") from e
        LOG.debug("Run config: %r", config)

        toolchain = require_tools(
            toolchain,
            need_fastqc=not (config.skip_raw_qc and config.skip_trimmed_qc),
            need_trimmomatic=not config.skip_trim,
            dry_run=config.dry_run,
        )
        assessor = FastQC(toolchain.fastqc or "fastqc", dry_run=config.dry_run, echo=config.show_tool_output)
        trimmer = Trimmomatic(toolchain.trimmomatic or "trimmomatic", dry_run=config.dry_run,
                              echo=config.show_tool_output)

        Pipeline(config, assessor, trimmer).run()
    except ReadQCError as e:
        LOG.error("%s", e)
        parser = getattr(args, "_parser", None)
        if e.exit_code == 2 and parser is not None:
            parser.print_usage(sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code
    return 0
