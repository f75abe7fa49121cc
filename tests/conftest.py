from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

import pytest

from readqc.config.schema import RunConfig
from readqc.tools.base import QcJob, QualityAssessor, ToolRun, TrimJob, Trimmer

FASTQ_RECORD = "@read1\nACGTACGTAC\n+\nIIIIIIIIII\n"


def make_reads(root: Path, names: Iterable[str]) -> List[Path]:
    """Create small FASTQ files under root (names may contain sub-directories)."""
    out = []
    for name in names:
        p = root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(FASTQ_RECORD)
        out.append(p)
    return out


class FakeAssessor(QualityAssessor):
    def __init__(self, exit_status: int = 0):
        self.exit_status = exit_status
        self.jobs: List[QcJob] = []

    def run(self, job: QcJob) -> ToolRun:
        self.jobs.append(job)
        return ToolRun(self.exit_status, job.log_path)


class FakeTrimmer(Trimmer):
    """Writes every requested output unless the sample is told to fail."""

    def __init__(self, fail: Sequence[str] = (), raise_for: Sequence[str] = ()):
        self.fail = set(fail)
        self.raise_for = set(raise_for)
        self.jobs: List[TrimJob] = []

    @property
    def sample_ids(self) -> List[str]:
        return [j.sample_id for j in self.jobs]

    def run(self, job: TrimJob) -> ToolRun:
        self.jobs.append(job)
        if job.sample_id in self.raise_for:
            raise FileNotFoundError("trimmomatic")
        if job.sample_id in self.fail:
            return ToolRun(1, job.log_path)
        for p in (*job.outputs.paired, *job.outputs.unpaired):
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(FASTQ_RECORD)
        return ToolRun(0, job.log_path)


@pytest.fixture
def raw_dir(tmp_path: Path) -> Path:
    d = tmp_path / "raw"
    d.mkdir()
    return d


@pytest.fixture
def adapter_file(tmp_path: Path) -> Path:
    p = tmp_path / "TruSeq3-PE.fa"
    p.write_text(">PrefixPE/1\nTACACTCTTTCCCTACACGACGCTCTTCCGATCT\n")
    return p


@pytest.fixture
def scenario_dir(raw_dir: Path) -> Path:
    """s1 (_R1/_R2, gz), s2 (_1/_2), and s3 with no R2."""
    make_reads(raw_dir, [
        "s1_R1.fastq.gz", "s1_R2.fastq.gz",
        "s2_1.fq", "s2_2.fq",
        "s3_R1.fastq",
    ])
    return raw_dir


@pytest.fixture
def make_config(tmp_path: Path, raw_dir: Path, adapter_file: Path):
    def _make(**overrides) -> RunConfig:
        values = dict(
            input_dir=raw_dir,
            output_dir=tmp_path / "out",
            adapter_file=adapter_file,
            thread_count=2,
        )
        values.update(overrides)
        return RunConfig(**values)
    return _make
