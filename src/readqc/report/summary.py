# src/readqc/report/summary.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import yaml

from readqc.config.schema import RunConfig
from readqc.pairing.types import DiscoveryResult
from readqc.pipeline.layout import OutputLayout
from readqc.pipeline.types import STAGE_ORDER, Stage, StageResult, StageStatus
from readqc.utils.logger import get_logger, log_success

LOG = get_logger("report")

_RULE = "=" * 40


@dataclass(frozen=True)
class RunSummary:
    config: RunConfig
    discovery: Dict[str, int]
    results: Tuple[StageResult, ...]
    counts: Dict[str, Dict[str, int]]
    started: datetime
    finished: datetime
    report_written: bool = False

    @property
    def runtime(self) -> str:
        secs = int((self.finished - self.started).total_seconds())
        return f"{secs // 3600}h {(secs % 3600) // 60}m {secs % 60}s"

    @property
    def failed(self) -> List[StageResult]:
        return [r for r in self.results if r.status is StageStatus.FAILED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started": self.started.isoformat(timespec="seconds"),
            "finished": self.finished.isoformat(timespec="seconds"),
            "runtime": self.runtime,
            "config": self.config.snapshot(),
            "discovery": dict(self.discovery),
            "counts": {k: dict(v) for k, v in self.counts.items()},
            "results": [
                {
                    "stage": r.stage.value,
                    "sample_id": r.sample_id,
                    "status": r.status.value,
                    "message": r.message,
                    "log": str(r.log_path) if r.log_path else None,
                    "n_inputs": r.n_inputs,
                }
                for r in self.results
            ],
        }


@dataclass
class RunReport:
    """Append-only collector of StageResults; finalize() seals it exactly once."""

    _results: List[StageResult] = field(default_factory=list)
    _summary: Optional[RunSummary] = None

    def add(self, result: StageResult) -> StageResult:
        if self._summary is not None:
            raise RuntimeError("run report already finalized")
        self._results.append(result)
        return result

    @property
    def results(self) -> Tuple[StageResult, ...]:
        return tuple(self._results)

    def counts(self) -> Dict[str, Dict[str, int]]:
        out: Dict[str, Dict[str, int]] = {}
        for stage in STAGE_ORDER:
            if stage is Stage.SUMMARIZE:
                continue
            per = {s.value: 0 for s in StageStatus}
            for r in self._results:
                if r.stage is stage:
                    per[r.status.value] += 1
            out[stage.value] = per
        return out

    def finalize(
        self,
        config: RunConfig,
        discovery: Optional[DiscoveryResult],
        started: datetime,
    ) -> RunSummary:
        if self._summary is not None:
            raise RuntimeError("run report already finalized")
        self._summary = RunSummary(
            config=config,
            discovery=discovery.counts() if discovery else {},
            results=tuple(self._results),
            counts=self.counts(),
            started=started,
            finished=datetime.now(),
        )
        return self._summary


# -------- rendering -----------------------------------------------------------

def render_text(summary: RunSummary, layout: OutputLayout) -> str:
    cfg = summary.config
    q = cfg.quality
    lines = [
        _RULE,
        "QC Module Summary Report",
        _RULE,
        f"Date: {summary.finished:%a %b %d %H:%M:%S %Y}",
        f"Input Directory: {cfg.input_dir}",
        f"Output Directory: {cfg.output_dir}",
        f"Sample List: {cfg.sample_list or '-'}",
        "",
        "Parameters:",
        f"Threads: {cfg.thread_count}",
        f"Phred Score: {cfg.phred}",
        f"Min Length: {q.minlen}",
        f"Leading Quality: {q.leading}",
        f"Trailing Quality: {q.trailing}",
        f"Sliding Window: {q.sliding_window}",
        f"Adapter File: {cfg.adapter_file or 'n/a (trimming disabled)'}",
        "",
        f"Processing Mode: {cfg.mode_label}",
        "",
        "Run Controls:",
        f"FastQC-only: {str(cfg.fastqc_only).lower()}",
        f"Skip trimming: {str(cfg.skip_trim).lower()}",
        f"Skip completed: {str(cfg.resume).lower()}",
        f"Skip raw FastQC: {str(cfg.skip_raw_qc).lower()}",
        f"Skip trimmed FastQC: {str(cfg.skip_trimmed_qc).lower()}",
        f"Dry run: {str(cfg.dry_run).lower()}",
        "",
        "Discovery:",
    ]
    for k, v in summary.discovery.items():
        lines.append(f"{k.capitalize()}: {v}")

    lines += ["", "Stage Results (processed / skipped / failed):"]
    for stage, per in summary.counts.items():
        lines.append(
            f"{stage}: {per[StageStatus.SUCCESS.value]} / {per[StageStatus.SKIPPED.value]} / {per[StageStatus.FAILED.value]}"
        )

    if summary.failed:
        lines += ["", "Failures:"]
        for r in summary.failed:
            who = r.sample_id or "batch"
            lines.append(f"{r.stage.value} {who}: {r.message} (log: {r.log_path or '-'})")

    lines += [
        "",
        "FastQC Results:",
        f"Raw reads: {layout.fastqc_raw}/",
        f"Trimmed reads: {layout.fastqc_trimmed}/",
        "",
        "Trimmed Reads:",
    ]
    if cfg.paired_end:
        lines += [f"Paired: {layout.trimmed_pe}/", f"Unpaired: {layout.trimmed_up}/"]
    else:
        lines += [f"Single-end: {layout.trimmed_se}/"]
    lines += [
        "",
        "Logs:",
        f"{layout.logs}/",
        "",
        f"Total runtime: {summary.runtime}",
        _RULE,
        "",
    ]
    return "\n".join(lines)


def write_reports(summary: RunSummary, layout: OutputLayout) -> bool:
    """Best effort: a report that cannot be written is logged, never raised."""
    LOG.info("Generating summary report...")
    try:
        layout.summary_txt.write_text(render_text(summary, layout), encoding="utf-8")
        layout.summary_yaml.write_text(
            yaml.safe_dump(summary.to_dict(), sort_keys=False), encoding="utf-8"
        )
    except (OSError, yaml.YAMLError) as e:
        LOG.error("Could not write summary report in %s: %s", layout.root, e)
        return False
    log_success(f"Summary report: {layout.summary_txt}")
    return True


def display_final_summary(summary: RunSummary, layout: OutputLayout) -> None:
    LOG.info(_RULE)
    LOG.info(" QC Processing Complete")
    LOG.info(_RULE)
    if summary.failed:
        LOG.warning("%d step(s) failed; see the logs listed in %s", len(summary.failed), layout.summary_txt)
        for r in summary.failed:
            LOG.warning("  %s %s → %s", r.stage.value, r.sample_id or "batch", r.log_path or "-")
    else:
        log_success("All QC steps completed successfully!")
    LOG.info("Results Directory: %s", layout.root)
    LOG.info("Output Structure:")
    LOG.info(" FastQC (raw): %s/", layout.fastqc_raw)
    LOG.info(" FastQC (trimmed): %s/", layout.fastqc_trimmed)
    if summary.config.paired_end:
        LOG.info(" Trimmed PE: %s/", layout.trimmed_pe)
        LOG.info(" Trimmed UP: %s/", layout.trimmed_up)
    else:
        LOG.info(" Trimmed SE: %s/", layout.trimmed_se)
    LOG.info(" Logs: %s/", layout.logs)
    LOG.info(" Summary: %s", layout.summary_txt)
    LOG.info("Total runtime: %s", summary.runtime)
