# src/readqc/tools/__init__.py
from readqc.tools.base import QcJob, QualityAssessor, ToolRun, TrimJob, TrimMode, TrimOutputs, Trimmer
from readqc.tools.fastqc import FastQC
from readqc.tools.trimmomatic import Trimmomatic

__all__ = [
    "FastQC",
    "QcJob",
    "QualityAssessor",
    "ToolRun",
    "TrimJob",
    "TrimMode",
    "TrimOutputs",
    "Trimmer",
    "Trimmomatic",
]
