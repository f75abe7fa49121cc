# src/readqc/tools/locate.py
from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional

from readqc.config.io import load_toolchain
from readqc.config.schema import Toolchain
from readqc.errors import ConfigError, FatalAdapterMissing
from readqc.utils.logger import get_logger

LOG = get_logger("tools")

BUNDLED_ADAPTER_DIR = Path(__file__).resolve().parent.parent / "data" / "adapters"


def adapter_basename(paired_end: bool) -> str:
    return "TruSeq3-PE.fa" if paired_end else "TruSeq3-SE.fa"


def _adapter_dir_candidates(trimmomatic: Path) -> List[Path]:
    """Where Trimmomatic installs keep their adapters: next to the wrapper, or a conda share/."""
    real = trimmomatic.resolve()
    out = [
        real.parent / "adapters",
        real.parent.parent / "adapters",
        real.parent.parent / "Trimmomatic" / "adapters",
    ]
    share = real.parent.parent / "share"
    if share.is_dir():
        out += sorted(share.glob("trimmomatic*/adapters"))
    return out


def _which(configured: Optional[Path], default_name: str) -> Optional[Path]:
    """Configured paths are kept as given unless they are bare names, which go through PATH."""
    if configured is not None and (configured.is_absolute() or configured.exists()):
        return configured
    found = shutil.which(str(configured or default_name))
    return Path(found) if found else configured


def find_toolchain(toolchain_file: Optional[Path] = None) -> Toolchain:
    """
    Locate FastQC, Trimmomatic and Trimmomatic's adapter directory.

    Values from `toolchain_file` win; anything it leaves out is looked up on PATH.
    Missing tools stay None here; require_tools() decides whether that is fatal.
    """
    tc = load_toolchain(toolchain_file) if toolchain_file else Toolchain()

    fastqc = _which(tc.fastqc, "fastqc")
    trimmomatic = _which(tc.trimmomatic, "trimmomatic")

    adapter_dir = tc.adapter_dir
    if adapter_dir is None and trimmomatic is not None and trimmomatic.exists():
        adapter_dir = next((d for d in _adapter_dir_candidates(trimmomatic) if d.is_dir()), None)

    return Toolchain(fastqc=fastqc, trimmomatic=trimmomatic, adapter_dir=adapter_dir)


def _usable(path: Optional[Path]) -> bool:
    return path is not None and path.is_file()


def require_tools(
    toolchain: Toolchain,
    *,
    need_fastqc: bool,
    need_trimmomatic: bool,
    dry_run: bool = False,
) -> Toolchain:
    """
    Check that every tool an enabled stage needs can be executed.
    Raises FatalAdapterMissing; in dry-run mode only warns and falls back to bare names.
    """
    missing: List[str] = []
    if need_fastqc and not _usable(toolchain.fastqc):
        missing.append(f"FastQC not found at: {toolchain.fastqc or 'PATH'}")
    if need_trimmomatic and not _usable(toolchain.trimmomatic):
        missing.append(f"Trimmomatic not found at: {toolchain.trimmomatic or 'PATH'}")

    if missing:
        if not dry_run:
            raise FatalAdapterMissing("; ".join(missing) + ". Install the tools or pass --toolchain FILE.")
        for m in missing:
            LOG.warning("[dry-run] %s", m)
        return Toolchain(
            fastqc=toolchain.fastqc or Path("fastqc"),
            trimmomatic=toolchain.trimmomatic or Path("trimmomatic"),
            adapter_dir=toolchain.adapter_dir,
        )

    if need_fastqc:
        LOG.info("FastQC: %s", toolchain.fastqc)
    if need_trimmomatic:
        LOG.info("Trimmomatic: %s", toolchain.trimmomatic)
    return toolchain


def resolve_adapter_file(
    explicit: Optional[Path],
    adapter_dir: Optional[Path],
    *,
    paired_end: bool,
) -> Path:
    """
    explicit --adapters file > toolchain adapter dir > adapters bundled with readqc.
    Called once per run, before the trim stage.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Adapter file not found: {explicit}")
        LOG.info("Using specified adapter file: %s", explicit)
        return explicit

    name = adapter_basename(paired_end)
    if adapter_dir is not None:
        candidate = adapter_dir / name
        if candidate.is_file():
            LOG.info("Using adapter file: %s", candidate)
            return candidate
        LOG.warning("Adapter file not found in Trimmomatic directory: %s", candidate)

    fallback = BUNDLED_ADAPTER_DIR / name
    if fallback.is_file():
        LOG.info("Using fallback adapter file bundled with readqc: %s", fallback)
        return fallback

    raise ConfigError("No adapter file found. Install Trimmomatic adapters or provide one with -a/--adapters.")
