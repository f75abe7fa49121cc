# src/readqc/pipeline/layout.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from readqc.errors import ConfigError
from readqc.tools.base import TrimOutputs

SUMMARY_TXT = "qc_summary.txt"
SUMMARY_YAML = "qc_summary.yaml"


@dataclass(frozen=True)
class OutputLayout:
    """Fixed directory tree under output_dir. One run at a time; nothing here locks."""
    root: Path

    @property
    def fastqc_raw(self) -> Path:
        return self.root / "fastqc_raw"

    @property
    def fastqc_trimmed(self) -> Path:
        return self.root / "fastqc_trimmed"

    @property
    def trimmed_pe(self) -> Path:
        return self.root / "trimmed" / "PE"

    @property
    def trimmed_up(self) -> Path:
        return self.root / "trimmed" / "UP"

    @property
    def trimmed_se(self) -> Path:
        return self.root / "trimmed" / "SE"

    @property
    def logs(self) -> Path:
        return self.root / "logs"

    @property
    def temp(self) -> Path:
        return self.root / "temp"

    @property
    def run_log(self) -> Path:
        return self.logs / "readqc.log"

    @property
    def summary_txt(self) -> Path:
        return self.root / SUMMARY_TXT

    @property
    def summary_yaml(self) -> Path:
        return self.root / SUMMARY_YAML

    def directories(self) -> Iterable[Path]:
        return (
            self.fastqc_raw, self.fastqc_trimmed,
            self.trimmed_pe, self.trimmed_up, self.trimmed_se,
            self.logs, self.temp,
        )

    def create(self) -> None:
        try:
            for d in self.directories():
                d.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"cannot create output directory {self.root}: {e}") from e

    def trimmed_dir(self, paired_end: bool) -> Path:
        """Where post-trim QC looks when this run did not trim."""
        return self.trimmed_pe if paired_end else self.trimmed_se

    def trim_outputs(self, sample_id: str, paired_end: bool) -> TrimOutputs:
        if not paired_end:
            return TrimOutputs(paired=(self.trimmed_se / f"{sample_id}_trimmed.fastq",))
        return TrimOutputs(
            paired=(
                self.trimmed_pe / f"{sample_id}_R1_paired.fastq",
                self.trimmed_pe / f"{sample_id}_R2_paired.fastq",
            ),
            unpaired=(
                self.trimmed_up / f"{sample_id}_R1_unpaired.fastq",
                self.trimmed_up / f"{sample_id}_R2_unpaired.fastq",
            ),
        )

    def trim_log(self, sample_id: str) -> Path:
        return self.logs / f"{sample_id}_trimmomatic.log"

    def trimlog(self, sample_id: str) -> Path:
        return self.logs / f"{sample_id}_trimlog.txt"

    def qc_log(self, label: str) -> Path:
        return self.logs / f"fastqc_{label}.log"


def outputs_complete(paths: Iterable[Path]) -> bool:
    """Resume predicate: every file exists and is non-empty. Content is not checked."""
    for p in paths:
        try:
            if p.stat().st_size == 0:
                return False
        except FileNotFoundError:
            return False
    return True
