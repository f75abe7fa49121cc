# src/readqc/config/load.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from readqc.config.schema import QualityParams, RunConfig
from readqc.errors import ConfigError
from readqc.tools.locate import resolve_adapter_file


def resolve_stage_toggles(
    *,
    fastqc_only: bool = False,
    skip_trim: bool = False,
    skip_raw_fastqc: bool = False,
    skip_trimmed_fastqc: bool = False,
    skip_fastqc: bool = False,
) -> Tuple[bool, bool, bool]:
    """
    Collapse the CLI switches into (skip_raw_qc, skip_trim, skip_trimmed_qc).

    --skip-fastqc is exactly --skip-raw-fastqc plus --skip-trimmed-fastqc.
    --fastqc-only turns off trimming and post-trim QC whatever else is set.
    """
    skip_raw = skip_raw_fastqc or skip_fastqc
    skip_trimmed = skip_trimmed_fastqc or skip_fastqc
    if fastqc_only:
        skip_trim = True
        skip_trimmed = True
    return skip_raw, skip_trim, skip_trimmed


def build_run_config(args, *, adapter_dir: Optional[Path] = None) -> RunConfig:
    """
    Turn parsed `run` arguments into the one immutable RunConfig of this run.
    The adapter file is resolved here, once, and only when trimming is enabled.
    """
    input_dir: Optional[Path] = getattr(args, "input", None)
    output_dir: Optional[Path] = getattr(args, "output", None)
    if not input_dir or not output_dir:
        raise ConfigError("Input and output directories are required")
    input_dir = Path(input_dir).expanduser()
    output_dir = Path(output_dir).expanduser()
    if not input_dir.is_dir():
        raise ConfigError(f"Input directory does not exist: {input_dir}")

    sample_list: Optional[Path] = getattr(args, "samples", None)
    if sample_list is not None:
        sample_list = Path(sample_list).expanduser()
        if not sample_list.is_file():
            raise ConfigError(f"Sample file not found: {sample_list}")

    skip_raw, skip_trim, skip_trimmed = resolve_stage_toggles(
        fastqc_only=args.fastqc_only,
        skip_trim=args.skip_trim,
        skip_raw_fastqc=args.skip_raw_fastqc,
        skip_trimmed_fastqc=args.skip_trimmed_fastqc,
        skip_fastqc=getattr(args, "skip_fastqc", False),
    )
    paired_end = not args.single_end

    try:
        quality = QualityParams(
            minlen=args.minlen,
            leading=args.leading,
            trailing=args.trailing,
            sliding_window=args.slidingwindow,
        )
    except ValidationError as e:
        raise ConfigError(f"invalid quality parameters:\n{e}") from e

    adapter_file = None
    if not skip_trim:
        explicit = Path(args.adapters).expanduser() if args.adapters else None
        adapter_file = resolve_adapter_file(explicit, adapter_dir, paired_end=paired_end)

    try:
        return RunConfig(
            input_dir=input_dir,
            output_dir=output_dir,
            sample_list=sample_list,
            thread_count=args.threads,
            paired_end=paired_end,
            quality=quality,
            phred=args.phred,
            adapter_file=adapter_file,
            skip_raw_qc=skip_raw,
            skip_trim=skip_trim,
            skip_trimmed_qc=skip_trimmed,
            fastqc_only=args.fastqc_only,
            resume=args.resume,
            dry_run=getattr(args, "dry_run", False),
            show_tool_output=getattr(args, "show_tool_output", False),
        )
    except ValidationError as e:
        raise ConfigError(f"invalid run configuration:\n{e}") from e
