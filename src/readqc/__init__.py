# src/readqc/__init__.py
"""readqc: batch FastQC / Trimmomatic quality control for sequencing reads."""

__version__ = "0.3.0"
