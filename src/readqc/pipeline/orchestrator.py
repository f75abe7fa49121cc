# src/readqc/pipeline/orchestrator.py
from __future__ import annotations

import dataclasses
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from readqc.config.schema import RunConfig
from readqc.errors import ConfigError
from readqc.pairing.discover import discover_samples, find_read_files, read_sample_list
from readqc.pairing.types import DiscoveryResult, SampleRecord
from readqc.pipeline.layout import OutputLayout, outputs_complete
from readqc.pipeline.types import Stage, StageResult, StageStatus
from readqc.report.summary import RunReport, RunSummary, display_final_summary, write_reports
from readqc.tools.base import QcJob, QualityAssessor, TrimJob, TrimMode, Trimmer
from readqc.utils.logger import get_logger, log_success

LOG = get_logger("pipeline")


class Pipeline:
    """
    Runs DISCOVER → STAGE_PRE_QC → STAGE_TRIM → STAGE_POST_QC → SUMMARIZE for one RunConfig.

    Strictly sequential: one stage at a time, one sample at a time, in discovery
    order. Adapter calls block with no timeout. Only ConfigError (from discovery or
    creating the output tree) escapes run(); every tool failure becomes a FAILED StageResult.
    """

    def __init__(self, config: RunConfig, assessor: QualityAssessor, trimmer: Trimmer,
                 *, report: Optional[RunReport] = None):
        self.config = config
        self.assessor = assessor
        self.trimmer = trimmer
        self.layout = OutputLayout(config.output_dir)
        self.report = report if report is not None else RunReport()
        if not config.skip_trim and config.adapter_file is None:
            raise ConfigError("Trimming is enabled but no adapter file was resolved.")

    # -------- stages ----------------------------------------------------------

    def discover(self) -> DiscoveryResult:
        cfg = self.config
        sample_ids = read_sample_list(cfg.sample_list) if cfg.sample_list else None
        if sample_ids is not None:
            LOG.info("Processing samples from file: %s (%d ids)", cfg.sample_list, len(sample_ids))
        else:
            LOG.info("Processing all samples in directory: %s", cfg.input_dir)

        found = discover_samples(
            cfg.input_dir,
            paired_end=cfg.paired_end,
            sample_ids=sample_ids,
            exclude=cfg.output_dir,
        )
        self.report.add(StageResult(
            Stage.DISCOVER, None, StageStatus.SUCCESS,
            message=(f"{found.n_complete} complete, {found.n_incomplete} incomplete, "
                     f"{len(found.missing_ids)} missing"),
            n_inputs=found.n_files,
        ))
        return found

    def quality_stage(self, stage: Stage, *, enabled: bool, files: Sequence[Path],
                      output_dir: Path, label: str) -> StageResult:
        if not enabled:
            LOG.info("Skipping %s FastQC (--skip-%s-fastqc/--skip-fastqc).", label, label)
            return self.report.add(StageResult(stage, None, StageStatus.SKIPPED, "disabled"))

        LOG.info("Running FastQC on %s reads...", label)
        # On resume some folders may legitimately be empty (e.g. trimmed/PE)
        if not files:
            LOG.warning("No FASTQ files found for %s reads. Skipping FastQC for %s.", label, label)
            return self.report.add(StageResult(stage, None, StageStatus.SUCCESS, "no input files", n_inputs=0))

        log_path = self.layout.qc_log(label)
        job = QcJob(
            files=tuple(files),
            output_dir=output_dir,
            temp_dir=self.layout.temp,
            thread_count=self.config.thread_count,
            log_path=log_path,
        )
        try:
            run = self.assessor.run(job)
        except OSError as e:
            LOG.warning("FastQC %s step could not start: %s; continuing.", label, e)
            return self.report.add(StageResult(stage, None, StageStatus.FAILED, str(e), log_path, len(files)))

        if not run.ok:
            LOG.warning("FastQC %s step had issues (exit %d, log: %s); continuing.", label, run.exit_status, run.log_path)
            return self.report.add(StageResult(
                stage, None, StageStatus.FAILED, f"exit status {run.exit_status}", run.log_path, len(files),
            ))
        log_success(f"FastQC completed for {label} reads")
        return self.report.add(StageResult(stage, None, StageStatus.SUCCESS, "", run.log_path, len(files)))

    def trim(self, samples: Sequence[SampleRecord]) -> List[StageResult]:
        if self.config.skip_trim:
            LOG.info("Skipping trimming (%s).", "--fastqc-only" if self.config.fastqc_only else "--skip-trim")
            self.report.add(StageResult(Stage.TRIM, None, StageStatus.SKIPPED, "disabled"))
            return []
        LOG.info("Running Trimmomatic on %d sample(s)...", len(samples))
        if not samples:
            LOG.warning("No complete samples to trim.")
            self.report.add(StageResult(Stage.TRIM, None, StageStatus.SUCCESS, "no complete samples"))
            return []

        out: List[StageResult] = []
        for n, rec in enumerate(samples, start=1):
            LOG.info("=========================================")
            LOG.info("Processing sample %d: %s", n, rec.id)
            LOG.info("=========================================")
            if rec.mate2 is not None:
                LOG.info("Detected naming pattern: %s", rec.pattern)
                LOG.info("R1: %s", rec.mate1)
                LOG.info("R2: %s", rec.mate2)
            else:
                LOG.info("Input: %s", rec.mate1)
            out.append(self.report.add(self._trim_one(rec)))

        done = sum(1 for r in out if r.status is StageStatus.SUCCESS)
        log_success(f"Processed {done} samples ({len(out) - done} skipped or failed)")
        return out

    def _trim_one(self, rec: SampleRecord) -> StageResult:
        cfg = self.config
        outputs = self.layout.trim_outputs(rec.id, cfg.paired_end)

        if cfg.resume and outputs_complete(outputs.primary):
            LOG.info("Skipping %s: trimmed outputs already exist.", rec.id)
            return StageResult(Stage.TRIM, rec.id, StageStatus.SKIPPED, "trimmed outputs already exist",
                               n_inputs=len(rec.inputs))

        job = TrimJob(
            mode=TrimMode.PE if cfg.paired_end else TrimMode.SE,
            sample_id=rec.id,
            inputs=rec.inputs,
            outputs=outputs,
            adapter_file=cfg.adapter_file,
            quality=cfg.quality,
            phred=cfg.phred,
            thread_count=cfg.thread_count,
            log_path=self.layout.trim_log(rec.id),
            trimlog_path=self.layout.trimlog(rec.id),
        )
        try:
            run = self.trimmer.run(job)
        except OSError as e:
            LOG.error("Trimmomatic could not start for %s: %s", rec.id, e)
            return StageResult(Stage.TRIM, rec.id, StageStatus.FAILED, str(e), job.log_path, len(rec.inputs))

        if not run.ok:
            LOG.error("Trimmomatic failed for %s (exit %d). See %s", rec.id, run.exit_status, run.log_path)
            return StageResult(Stage.TRIM, rec.id, StageStatus.FAILED, f"exit status {run.exit_status}",
                               run.log_path, len(rec.inputs))
        log_success(f"Trimmomatic completed for {rec.id}")
        return StageResult(Stage.TRIM, rec.id, StageStatus.SUCCESS, "", run.log_path, len(rec.inputs))

    def _post_qc_inputs(self, trimmed: Sequence[StageResult], trim_ran: bool) -> List[Path]:
        """
        When this run trimmed, only samples whose result lets them contribute are
        assessed. Otherwise whatever an earlier run left in the trimmed folder is.
        """
        if not trim_ran:
            return find_read_files(self.layout.trimmed_dir(self.config.paired_end))
        files: List[Path] = []
        for r in trimmed:
            if r.sample_id is not None and r.contributes_output:
                files += self.layout.trim_outputs(r.sample_id, self.config.paired_end).primary
        return files

    # -------- driver ----------------------------------------------------------

    def run(self) -> RunSummary:
        cfg = self.config
        started = datetime.now()
        LOG.info("Started at: %s", started.strftime("%c"))

        discovery = self.discover()
        self.layout.create()

        LOG.info("Step 1: FastQC on raw reads")
        self.quality_stage(
            Stage.PRE_QC,
            enabled=not cfg.skip_raw_qc,
            files=find_read_files(cfg.input_dir, exclude=cfg.output_dir) if not cfg.skip_raw_qc else (),
            output_dir=self.layout.fastqc_raw,
            label="raw",
        )

        LOG.info("Step 2: Trimmomatic")
        trimmed = self.trim(discovery.samples)

        LOG.info("Step 3: FastQC on trimmed reads")
        self.quality_stage(
            Stage.POST_QC,
            enabled=not cfg.skip_trimmed_qc,
            files=self._post_qc_inputs(trimmed, trim_ran=not cfg.skip_trim) if not cfg.skip_trimmed_qc else (),
            output_dir=self.layout.fastqc_trimmed,
            label="trimmed",
        )

        summary = self.report.finalize(cfg, discovery, started)
        summary = dataclasses.replace(summary, report_written=write_reports(summary, self.layout))
        LOG.info("Completed at: %s", summary.finished.strftime("%c"))
        display_final_summary(summary, self.layout)
        return summary
