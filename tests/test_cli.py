"""End-to-end CLI runs with stand-in FastQC/Trimmomatic scripts."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

from readqc.cli import main

from conftest import make_reads

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts as tools")

_FAKE_FASTQC = """#!/bin/sh
if [ "$1" = "--version" ]; then echo "FastQC v0.12.1"; exit 0; fi
echo "Analysis complete"
"""

_FAKE_TRIMMOMATIC = """#!/bin/sh
if [ "$1" = "-version" ]; then echo "0.39"; exit 0; fi
for a in "$@"; do
  case "$a" in
    *FAILME*) echo "simulated failure" >&2; exit 1 ;;
  esac
done
for a in "$@"; do
  case "$a" in
    *_paired.fastq|*_unpaired.fastq|*_trimmed.fastq) printf '@r\\nACGT\\n+\\nIIII\\n' > "$a" ;;
  esac
done
echo "TrimmomaticPE: Completed successfully"
"""


@pytest.fixture
def toolchain(tmp_path: Path) -> Path:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    for name, body in (("fastqc", _FAKE_FASTQC), ("trimmomatic", _FAKE_TRIMMOMATIC)):
        exe = bin_dir / name
        exe.write_text(body)
        exe.chmod(0o755)
    tfile = tmp_path / "toolchain.yaml"
    tfile.write_text(f"fastqc: {bin_dir / 'fastqc'}\ntrimmomatic: {bin_dir / 'trimmomatic'}\n")
    return tfile


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert "readqc" in capsys.readouterr().out


def test_run_requires_input_and_output():
    with pytest.raises(SystemExit) as exc:
        main(["run", "-i", "raw"])
    assert exc.value.code == 2


class TestRun:
    def test_dry_run(self, scenario_dir, tmp_path):
        out = tmp_path / "out"
        assert main(["run", "-i", str(scenario_dir), "-o", str(out), "--dry-run"]) == 0
        text = (out / "qc_summary.txt").read_text()
        assert "STAGE_TRIM: 2 / 0 / 0" in text
        assert "Dry run: true" in text
        assert (out / "logs" / "readqc.log").is_file()

    def test_empty_input_exits_2_with_usage(self, raw_dir, tmp_path, capsys):
        rc = main(["run", "-i", str(raw_dir), "-o", str(tmp_path / "out"), "--dry-run"])
        assert rc == 2
        err = capsys.readouterr().err
        assert "usage:" in err
        assert "error: No FASTQ files found" in err
        assert not (tmp_path / "out" / "qc_summary.txt").exists()

    def test_missing_input_dir_exits_2(self, tmp_path):
        assert main(["run", "-i", str(tmp_path / "nope"), "-o", str(tmp_path / "out"), "--dry-run"]) == 2

    def test_undecodable_sample_list_exits_2(self, scenario_dir, tmp_path, capsys):
        ids = tmp_path / "ids.txt"
        ids.write_bytes(b"s1\n\xff\xfe bad\n")
        rc = main(["run", "-i", str(scenario_dir), "-o", str(tmp_path / "out"), "-s", str(ids), "--dry-run"])
        assert rc == 2
        assert "error: Sample file not found or unreadable" in capsys.readouterr().err

    def test_output_path_is_a_file_exits_2(self, scenario_dir, tmp_path, capsys):
        out = tmp_path / "out"
        out.write_text("not a directory")
        rc = main(["run", "-i", str(scenario_dir), "-o", str(out), "--dry-run"])
        assert rc == 2
        assert "error: cannot create output directory" in capsys.readouterr().err

    def test_missing_tool_exits_3(self, scenario_dir, tmp_path):
        tfile = tmp_path / "toolchain.yaml"
        tfile.write_text(f"fastqc: {tmp_path / 'no' / 'fastqc'}\ntrimmomatic: {tmp_path / 'no' / 'trimmomatic'}\n")
        rc = main(["run", "-i", str(scenario_dir), "-o", str(tmp_path / "out"), "--toolchain", str(tfile)])
        assert rc == 3

    @posix_only
    def test_failing_sample_does_not_fail_run(self, raw_dir, tmp_path, toolchain, adapter_file):
        make_reads(raw_dir, ["FAILME_R1.fq", "FAILME_R2.fq", "good_R1.fq.gz", "good_R2.fq.gz"])
        out = tmp_path / "out"
        rc = main([
            "run", "-i", str(raw_dir), "-o", str(out),
            "--toolchain", str(toolchain), "-a", str(adapter_file), "-t", "2",
        ])
        assert rc == 0
        assert (out / "trimmed" / "PE" / "good_R1_paired.fastq").stat().st_size > 0
        assert not (out / "trimmed" / "PE" / "FAILME_R1_paired.fastq").exists()
        assert "simulated failure" in (out / "logs" / "FAILME_trimmomatic.log").read_text()
        assert "Analysis complete" in (out / "logs" / "fastqc_raw.log").read_text()

        text = (out / "qc_summary.txt").read_text()
        assert "STAGE_TRIM: 1 / 0 / 1" in text
        assert "STAGE_TRIM FAILME: exit status 1" in text

    @posix_only
    def test_resume_skips_completed(self, raw_dir, tmp_path, toolchain, adapter_file):
        make_reads(raw_dir, ["a_1.fq", "a_2.fq"])
        out = tmp_path / "out"
        argv = ["run", "-i", str(raw_dir), "-o", str(out), "--toolchain", str(toolchain), "-a", str(adapter_file)]
        assert main(argv) == 0
        assert main(argv + ["--skip-completed"]) == 0
        assert "STAGE_TRIM: 0 / 1 / 0" in (out / "qc_summary.txt").read_text()

    @posix_only
    def test_fastqc_only_needs_no_trimmomatic(self, scenario_dir, tmp_path):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        (bin_dir / "fastqc").write_text(_FAKE_FASTQC)
        (bin_dir / "fastqc").chmod(0o755)
        tfile = tmp_path / "toolchain.yaml"
        tfile.write_text(f"fastqc: {bin_dir / 'fastqc'}\ntrimmomatic: {tmp_path / 'absent'}\n")
        out = tmp_path / "out"
        assert main(["run", "-i", str(scenario_dir), "-o", str(out), "--toolchain", str(tfile), "--fastqc-only"]) == 0
        assert "Adapter File: n/a" in (out / "qc_summary.txt").read_text()


class TestPairs:
    def test_table(self, scenario_dir, capsys):
        assert main(["pairs", "-i", str(scenario_dir)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "sample-id\tpattern\tR1\tR2"
        assert lines[1] == f"s1\t_R1/_R2\t{scenario_dir / 's1_R1.fastq.gz'}\t{scenario_dir / 's1_R2.fastq.gz'}"
        assert lines[2].startswith("s2\t_1/_2\t")
        assert lines[3].startswith("[incomplete] s3:")
        assert lines[-1] == "[ok] 2 complete, 1 incomplete, 0 missing"

    def test_sample_list(self, scenario_dir, tmp_path, capsys):
        ids = tmp_path / "ids.txt"
        ids.write_text("s2\nghost\n")
        assert main(["pairs", "-i", str(scenario_dir), "-s", str(ids)]) == 0
        out = capsys.readouterr().out
        assert "[missing] ghost: no matching file" in out
        assert out.splitlines()[-1] == "[ok] 1 complete, 0 incomplete, 1 missing"

    def test_empty_dir(self, raw_dir, capsys):
        assert main(["pairs", "-i", str(raw_dir)]) == 2
        assert "error:" in capsys.readouterr().err


class TestDoctor:
    @posix_only
    def test_all_good(self, toolchain, capsys):
        assert main(["doctor", "--toolchain", str(toolchain)]) == 0
        out = capsys.readouterr().out
        assert "[check] fastqc --version: FastQC v0.12.1" in out
        assert "[check] trimmomatic -version: 0.39" in out
        assert "[ok] environment looks good." in out

    def test_missing_tools(self, tmp_path, capsys):
        tfile = tmp_path / "toolchain.yaml"
        tfile.write_text(f"fastqc: {tmp_path / 'fastqc'}\ntrimmomatic: {tmp_path / 'trimmomatic'}\n")
        assert main(["doctor", "--toolchain", str(tfile)]) == 3
        assert "missing or broken: fastqc, trimmomatic" in capsys.readouterr().err
