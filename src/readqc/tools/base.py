# src/readqc/tools/base.py
from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from readqc.config.schema import QualityParams


class TrimMode(str, Enum):
    PE = "PE"
    SE = "SE"


@dataclass(frozen=True)
class ToolRun:
    exit_status: int
    log_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


@dataclass(frozen=True)
class QcJob:
    files: Tuple[Path, ...]
    output_dir: Path
    temp_dir: Path
    thread_count: int
    log_path: Path


@dataclass(frozen=True)
class TrimOutputs:
    paired: Tuple[Path, ...]          # PE: (R1_paired, R2_paired); SE: (trimmed,)
    unpaired: Tuple[Path, ...] = ()   # PE: (R1_unpaired, R2_unpaired)

    @property
    def primary(self) -> Tuple[Path, ...]:
        """The files resume checks and downstream stages read."""
        return self.paired


@dataclass(frozen=True)
class TrimJob:
    mode: TrimMode
    sample_id: str
    inputs: Tuple[Path, ...]
    outputs: TrimOutputs
    adapter_file: Path
    quality: QualityParams
    phred: int
    thread_count: int
    log_path: Path
    trimlog_path: Path


class QualityAssessor(abc.ABC):
    """Runs a quality-assessment tool over a set of read files. Blocking, no retries."""

    @abc.abstractmethod
    def run(self, job: QcJob) -> ToolRun:
        ...


class Trimmer(abc.ABC):
    """Trims one sample. Blocking, one tool invocation per call, no retries."""

    @abc.abstractmethod
    def run(self, job: TrimJob) -> ToolRun:
        ...
