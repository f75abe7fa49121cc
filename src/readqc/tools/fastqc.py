# src/readqc/tools/fastqc.py
from __future__ import annotations

from pathlib import Path
from typing import List, Union

from readqc.tools.base import QcJob, QualityAssessor, ToolRun
from readqc.utils.runner import run_command


class FastQC(QualityAssessor):
    def __init__(self, executable: Union[str, Path] = "fastqc", *, dry_run: bool = False, echo: bool = False):
        self.executable = str(executable)
        self.dry_run = dry_run
        self.echo = echo

    def command(self, job: QcJob) -> List[str]:
        cmd: List[str] = [
            self.executable,
            "--threads", str(job.thread_count),
            "--outdir", str(job.output_dir),
            "--dir", str(job.temp_dir),
            "--extract",
        ]
        cmd += [str(f) for f in job.files]
        return cmd

    def run(self, job: QcJob) -> ToolRun:
        job.output_dir.mkdir(parents=True, exist_ok=True)
        job.temp_dir.mkdir(parents=True, exist_ok=True)
        res = run_command(self.command(job), dry_run=self.dry_run, log_path=job.log_path, echo=self.echo)
        return ToolRun(res.returncode, job.log_path)
