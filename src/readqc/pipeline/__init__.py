# src/readqc/pipeline/__init__.py
from readqc.pipeline.layout import OutputLayout, outputs_complete
from readqc.pipeline.types import STAGE_ORDER, Stage, StageResult, StageStatus

__all__ = ["OutputLayout", "STAGE_ORDER", "Stage", "StageResult", "StageStatus", "outputs_complete"]
