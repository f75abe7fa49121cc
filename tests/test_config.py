"""Parsed arguments → RunConfig: stage toggles, params files, adapter resolution."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from readqc.cli import build_parser
from readqc.commands.run import _DEFAULTS
from readqc.config.io import apply_params_defaults, load_params, load_toolchain
from readqc.config.load import build_run_config, resolve_stage_toggles
from readqc.config.schema import QualityParams, RunConfig
from readqc.errors import ConfigError
from readqc.tools import locate


def _args(raw_dir: Path, tmp_path: Path, *extra: str):
    return build_parser().parse_args(["run", "-i", str(raw_dir), "-o", str(tmp_path / "out"), *extra])


@pytest.fixture
def bundled(tmp_path, monkeypatch) -> Path:
    d = tmp_path / "bundled"
    d.mkdir()
    (d / "TruSeq3-PE.fa").write_text(">a\nACGT\n")
    (d / "TruSeq3-SE.fa").write_text(">b\nACGT\n")
    monkeypatch.setattr(locate, "BUNDLED_ADAPTER_DIR", d)
    return d


class TestStageToggles:
    def test_defaults_run_everything(self):
        assert resolve_stage_toggles() == (False, False, False)

    def test_skip_fastqc_equals_both_qc_skips(self):
        assert resolve_stage_toggles(skip_fastqc=True) == resolve_stage_toggles(
            skip_raw_fastqc=True, skip_trimmed_fastqc=True
        )

    def test_fastqc_only_wins(self):
        assert resolve_stage_toggles(fastqc_only=True) == (False, True, True)
        assert resolve_stage_toggles(fastqc_only=True, skip_raw_fastqc=True) == (True, True, True)

    def test_skip_fastqc_via_cli(self, raw_dir, tmp_path, bundled):
        a = build_run_config(_args(raw_dir, tmp_path, "--skip-fastqc"))
        b = build_run_config(_args(raw_dir, tmp_path, "--skip-raw-fastqc", "--skip-trimmed-fastqc"))
        assert a == b
        assert (a.skip_raw_qc, a.skip_trim, a.skip_trimmed_qc) == (True, False, True)


class TestBuildRunConfig:
    def test_defaults(self, raw_dir, tmp_path, bundled):
        cfg = build_run_config(_args(raw_dir, tmp_path))
        assert cfg.thread_count == 8
        assert cfg.paired_end and cfg.mode_label == "Paired-end"
        assert cfg.quality == QualityParams()
        assert cfg.phred == 33
        assert cfg.adapter_file == bundled / "TruSeq3-PE.fa"
        assert not cfg.resume and not cfg.dry_run

    def test_cli_values(self, raw_dir, tmp_path, bundled):
        cfg = build_run_config(_args(
            raw_dir, tmp_path, "-t", "20", "--single-end", "--phred", "64", "--minlen", "36",
            "--slidingwindow", "5:15", "--skip-completed",
        ))
        assert cfg.thread_count == 20
        assert cfg.mode_label == "Single-end"
        assert cfg.phred == 64
        assert cfg.quality.minlen == 36
        assert cfg.quality.sliding_window == "5:15"
        assert cfg.resume
        assert cfg.adapter_file == bundled / "TruSeq3-SE.fa"

    def test_config_is_frozen(self, raw_dir, tmp_path, bundled):
        cfg = build_run_config(_args(raw_dir, tmp_path))
        with pytest.raises(ValidationError):
            cfg.thread_count = 1

    def test_missing_input_dir(self, tmp_path, bundled):
        with pytest.raises(ConfigError):
            build_run_config(_args(tmp_path / "nope", tmp_path))

    def test_missing_sample_file(self, raw_dir, tmp_path, bundled):
        with pytest.raises(ConfigError):
            build_run_config(_args(raw_dir, tmp_path, "-s", str(tmp_path / "ids.txt")))

    @pytest.mark.parametrize("extra", [
        ("--slidingwindow", "4"),
        ("--slidingwindow", "a:b"),
        ("--minlen", "0"),
        ("-t", "0"),
    ])
    def test_invalid_values(self, raw_dir, tmp_path, bundled, extra):
        with pytest.raises(ConfigError):
            build_run_config(_args(raw_dir, tmp_path, *extra))

    def test_invalid_phred_rejected_by_model(self, tmp_path):
        with pytest.raises(ValidationError):
            RunConfig(input_dir=tmp_path, output_dir=tmp_path, phred=42)

    def test_no_adapter_needed_without_trimming(self, raw_dir, tmp_path, monkeypatch):
        monkeypatch.setattr(locate, "BUNDLED_ADAPTER_DIR", tmp_path / "empty")
        cfg = build_run_config(_args(raw_dir, tmp_path, "--fastqc-only"))
        assert cfg.adapter_file is None
        assert cfg.fastqc_only and cfg.skip_trim and cfg.skip_trimmed_qc and not cfg.skip_raw_qc


class TestAdapterResolution:
    def test_explicit_file_wins(self, tmp_path, bundled, adapter_file):
        tool_dir = tmp_path / "tool_adapters"
        tool_dir.mkdir()
        (tool_dir / "TruSeq3-PE.fa").write_text(">x\nA\n")
        assert locate.resolve_adapter_file(adapter_file, tool_dir, paired_end=True) == adapter_file

    def test_explicit_file_must_exist(self, tmp_path, bundled):
        with pytest.raises(ConfigError):
            locate.resolve_adapter_file(tmp_path / "missing.fa", None, paired_end=True)

    def test_toolchain_dir_before_bundled(self, tmp_path, bundled):
        tool_dir = tmp_path / "tool_adapters"
        tool_dir.mkdir()
        (tool_dir / "TruSeq3-SE.fa").write_text(">x\nA\n")
        assert locate.resolve_adapter_file(None, tool_dir, paired_end=False) == tool_dir / "TruSeq3-SE.fa"

    def test_falls_back_to_bundled(self, tmp_path, bundled):
        assert locate.resolve_adapter_file(None, tmp_path / "nowhere", paired_end=True) == bundled / "TruSeq3-PE.fa"

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.setattr(locate, "BUNDLED_ADAPTER_DIR", tmp_path / "empty")
        with pytest.raises(ConfigError):
            locate.resolve_adapter_file(None, None, paired_end=True)

    def test_package_ships_adapters(self):
        for paired_end in (True, False):
            fa = Path(locate.__file__).resolve().parent.parent / "data" / "adapters" / locate.adapter_basename(paired_end)
            assert fa.read_text().startswith(">")


class TestParamsFile:
    def test_yaml_params_fill_defaults_cli_wins(self, raw_dir, tmp_path, bundled):
        pfile = tmp_path / "params.yaml"
        pfile.write_text("params:\n  threads: 4\n  minlen: 50\n  resume: true\n")
        args = _args(raw_dir, tmp_path, "--minlen", "80")
        apply_params_defaults(args, load_params(pfile), _DEFAULTS)
        cfg = build_run_config(args)
        assert cfg.thread_count == 4
        assert cfg.quality.minlen == 80
        assert cfg.resume

    def test_json_params_at_top_level(self, tmp_path):
        pfile = tmp_path / "params.json"
        pfile.write_text('{"phred": 64, "slidingwindow": "4:15"}')
        params = load_params(pfile)
        assert params.phred == 64
        assert params.slidingwindow == "4:15"

    def test_empty_file_gives_defaults(self, tmp_path):
        pfile = tmp_path / "params.yaml"
        pfile.write_text("")
        assert load_params(pfile).threads == 8

    @pytest.mark.parametrize("text", ["- a\n- b\n", "phred: 42\n", "threads: [1\n"])
    def test_bad_params(self, tmp_path, text):
        pfile = tmp_path / "params.yaml"
        pfile.write_text(text)
        with pytest.raises(ConfigError):
            load_params(pfile)

    def test_missing_params_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_params(tmp_path / "nope.yaml")

    def test_undecodable_params_file(self, tmp_path):
        pfile = tmp_path / "params.yaml"
        pfile.write_bytes(b"threads: 4\n# \xff\xfe\n")
        with pytest.raises(ConfigError):
            load_params(pfile)

    def test_toolchain_file(self, tmp_path):
        tfile = tmp_path / "tools.yaml"
        tfile.write_text("fastqc: /opt/fastqc/fastqc\nadapter_dir: /opt/trimmomatic/adapters\n")
        tc = load_toolchain(tfile)
        assert tc.fastqc == Path("/opt/fastqc/fastqc")
        assert tc.trimmomatic is None
        assert tc.adapter_dir == Path("/opt/trimmomatic/adapters")
