# src/readqc/config/schema.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QualityParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    minlen: int = Field(default=70, ge=1)
    leading: int = Field(default=3, ge=0)
    trailing: int = Field(default=3, ge=0)
    sliding_window: str = "4:20"

    @field_validator("sliding_window")
    @classmethod
    def _check_window(cls, v: str) -> str:
        parts = v.strip().split(":")
        if len(parts) != 2 or not all(p.isdigit() and int(p) > 0 for p in parts):
            raise ValueError("sliding_window must look like WINDOW:QUALITY, e.g. 4:20")
        return v.strip()


class RunParams(BaseModel):
    """Defaults that may come from a --params YAML/JSON file (CLI always wins)."""

    threads: int = Field(default=8, ge=1)
    phred: int = 33
    minlen: int = 70
    leading: int = 3
    trailing: int = 3
    slidingwindow: str = "4:20"
    adapters: Optional[Path] = None
    samples: Optional[Path] = None
    single_end: bool = False
    resume: bool = False
    skip_raw_fastqc: bool = False
    skip_trimmed_fastqc: bool = False
    skip_trim: bool = False
    fastqc_only: bool = False

    @field_validator("phred")
    @classmethod
    def _check_phred(cls, v: int) -> int:
        if v not in (33, 64):
            raise ValueError("phred must be 33 or 64")
        return v


class Toolchain(BaseModel):
    """Locations of the external tools, from a toolchain file or PATH."""

    fastqc: Optional[Path] = None
    trimmomatic: Optional[Path] = None
    adapter_dir: Optional[Path] = None


class RunConfig(BaseModel):
    """Everything one run needs. Built once from parsed input, never mutated."""

    model_config = ConfigDict(frozen=True)

    input_dir: Path
    output_dir: Path
    sample_list: Optional[Path] = None
    thread_count: int = Field(default=8, ge=1)
    paired_end: bool = True
    quality: QualityParams = Field(default_factory=QualityParams)
    phred: int = 33
    adapter_file: Optional[Path] = None

    # stage toggles
    skip_raw_qc: bool = False
    skip_trim: bool = False
    skip_trimmed_qc: bool = False
    fastqc_only: bool = False

    resume: bool = False
    dry_run: bool = False
    show_tool_output: bool = False

    @field_validator("phred")
    @classmethod
    def _check_phred(cls, v: int) -> int:
        if v not in (33, 64):
            raise ValueError("phred must be 33 or 64")
        return v

    @property
    def mode_label(self) -> str:
        return "Paired-end" if self.paired_end else "Single-end"

    def snapshot(self) -> Dict[str, Any]:
        """Plain, YAML-safe view used by the run report."""
        return self.model_dump(mode="json")
