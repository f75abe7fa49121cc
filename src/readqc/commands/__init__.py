# src/readqc/commands/__init__.py
"""
Sub-commands of the readqc CLI: `run`, `pairs`, `doctor`.

Each module exposes setup_parser(subparsers, parent) and run(args) -> int.
readqc.cli imports them one by one; keep this file free of imports.
"""
__all__ = [
    "run",
    "pairs",
    "doctor",
]
