# src/readqc/report/__init__.py
from readqc.report.summary import RunReport, RunSummary, display_final_summary, render_text, write_reports

__all__ = ["RunReport", "RunSummary", "display_final_summary", "render_text", "write_reports"]
