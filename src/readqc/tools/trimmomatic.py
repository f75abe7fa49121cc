# src/readqc/tools/trimmomatic.py
from __future__ import annotations

from pathlib import Path
from typing import List, Union

from readqc.tools.base import ToolRun, TrimJob, TrimMode, Trimmer
from readqc.utils.runner import run_command

# ILLUMINACLIP seed mismatches : palindrome clip threshold : simple clip threshold
_CLIP = "2:30:10"
# PE only: min adapter length : keep both reads
_CLIP_PE_EXTRA = "2:True"


class Trimmomatic(Trimmer):
    def __init__(self, executable: Union[str, Path] = "trimmomatic", *, dry_run: bool = False, echo: bool = False):
        self.executable = str(executable)
        self.dry_run = dry_run
        self.echo = echo

    def command(self, job: TrimJob) -> List[str]:
        cmd: List[str] = [
            self.executable, job.mode.value,
            "-threads", str(job.thread_count),
            f"-phred{job.phred}",
            "-trimlog", str(job.trimlog_path),
        ]
        cmd += [str(p) for p in job.inputs]
        if job.mode is TrimMode.PE:
            r1_paired, r2_paired = job.outputs.paired
            r1_unpaired, r2_unpaired = job.outputs.unpaired
            cmd += [str(r1_paired), str(r1_unpaired), str(r2_paired), str(r2_unpaired)]
            clip = f"ILLUMINACLIP:{job.adapter_file}:{_CLIP}:{_CLIP_PE_EXTRA}"
        else:
            cmd += [str(job.outputs.paired[0])]
            clip = f"ILLUMINACLIP:{job.adapter_file}:{_CLIP}"
        q = job.quality
        cmd += [
            clip,
            f"LEADING:{q.leading}",
            f"TRAILING:{q.trailing}",
            f"SLIDINGWINDOW:{q.sliding_window}",
            f"MINLEN:{q.minlen}",
        ]
        return cmd

    def run(self, job: TrimJob) -> ToolRun:
        for p in (*job.outputs.paired, *job.outputs.unpaired, job.trimlog_path):
            p.parent.mkdir(parents=True, exist_ok=True)
        res = run_command(self.command(job), dry_run=self.dry_run, log_path=job.log_path, echo=self.echo)
        return ToolRun(res.returncode, job.log_path)
