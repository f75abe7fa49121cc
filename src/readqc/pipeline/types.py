# src/readqc/pipeline/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Stage(str, Enum):
    DISCOVER = "DISCOVER"
    PRE_QC = "STAGE_PRE_QC"
    TRIM = "STAGE_TRIM"
    POST_QC = "STAGE_POST_QC"
    SUMMARIZE = "SUMMARIZE"


STAGE_ORDER = (Stage.DISCOVER, Stage.PRE_QC, Stage.TRIM, Stage.POST_QC, Stage.SUMMARIZE)


class StageStatus(str, Enum):
    SUCCESS = "Success"
    SKIPPED = "Skipped"
    FAILED = "Failed"


@dataclass(frozen=True)
class StageResult:
    stage: Stage
    sample_id: Optional[str]          # None for whole-batch results
    status: StageStatus
    message: str = ""
    log_path: Optional[Path] = None
    n_inputs: int = 0

    @property
    def contributes_output(self) -> bool:
        """A trimmed sample feeds later stages iff it succeeded or was already done."""
        return self.status is not StageStatus.FAILED
