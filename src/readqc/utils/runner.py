# src/readqc/utils/runner.py
from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from readqc.utils.logger import get_logger

LOG = get_logger("runner")


def run_command(
    cmd: Sequence[str],
    *,
    dry_run: bool = False,
    log_path: Optional[Path] = None,
    echo: bool = False,
    check: bool = False,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Execute a subprocess with unified logging and error handling.

    - Logs the exact command line.
    - Respects dry_run (no execution, exit status 0).
    - Merges stdout and stderr and streams them line by line into log_path
      (when given) and to the console (when echo is set), like `cmd 2>&1 | tee log`.
    - Merges provided env with the current process environment (preserves PATH).
    - Returns the exit status in CompletedProcess.returncode; raises
      CalledProcessError only when check=True.
    - FileNotFoundError / PermissionError from a missing executable propagate.
    """
    LOG.info("Running: %s", " ".join(str(c) for c in cmd))
    if dry_run:
        LOG.debug("[dry-run] command not executed")
        return subprocess.CompletedProcess(list(cmd), 0, "", "")

    # Merge env with current environment so PATH and friends are preserved
    env_dict = os.environ.copy()
    if env:
        env_dict.update({str(k): str(v) for k, v in env.items()})

    log_fh = None
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_fh = log_path.open("w", encoding="utf-8")

    try:
        try:
            proc = subprocess.Popen(
                [str(c) for c in cmd],
                cwd=str(cwd) if cwd else None,
                env=env_dict,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except FileNotFoundError:
            # Typically means the executable is not on PATH
            LOG.error("Executable not found: %s (PATH=%s)", cmd[0], env_dict.get("PATH", ""))
            raise

        assert proc.stdout is not None
        tail: list[str] = []
        for line in proc.stdout:
            if log_fh is not None:
                log_fh.write(line)
            if echo:
                sys.stdout.write(line)
            tail.append(line)
            if len(tail) > 20:
                tail.pop(0)
        returncode = proc.wait()
    finally:
        if log_fh is not None:
            log_fh.close()

    output = "".join(tail)
    if returncode != 0:
        if output and not echo:
            LOG.debug("Last output lines:\n%s", output.rstrip())
        LOG.error("Command failed with exit code %s%s", returncode,
                  f" (log: {log_path})" if log_path else "")
        if check:
            raise subprocess.CalledProcessError(returncode, list(cmd), output=output)
    else:
        LOG.debug("Command completed successfully.")
    return subprocess.CompletedProcess(list(cmd), returncode, output, "")
