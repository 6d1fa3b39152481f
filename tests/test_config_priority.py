from pathlib import Path

import pytest
from typer.testing import CliRunner

from csvstream.config.config import Settings, loadSettings
from csvstream.main import app

runner = CliRunner()


def _clear_env(monkeypatch):
    for name in (
        "CSVSTREAM_LOG_DIR",
        "CSVSTREAM_REPORT_DIR",
        "CSVSTREAM_LOG_LEVEL",
        "CSVSTREAM_ENCODING",
        "CSVSTREAM_KEEP_QUOTED_CR",
        "CSVSTREAM_EMIT_DANGLING_ROW",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_sources(monkeypatch):
    _clear_env(monkeypatch)
    loaded = loadSettings(config_path=None, cli_overrides={})
    assert loaded.settings == Settings()
    assert loaded.sources_used == []


def test_priority_cli_over_env_over_config(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            'log_dir: "cfg_logs"',
            'report_dir: "cfg_reports"',
            'log_level: "DEBUG"',
            "keep_quoted_cr: true",
        ]),
        encoding="utf-8",
    )

    # ENV overrides config
    monkeypatch.setenv("CSVSTREAM_REPORT_DIR", "env_reports")
    monkeypatch.setenv("CSVSTREAM_LOG_DIR", "env_logs")
    monkeypatch.setenv("CSVSTREAM_KEEP_QUOTED_CR", "no")

    # CLI overrides env
    loaded = loadSettings(config_path=str(cfg), cli_overrides={"log_dir": "cli_logs", "log_level": None})

    assert loaded.settings.log_dir == "cli_logs"
    assert loaded.settings.report_dir == "env_reports"
    assert loaded.settings.log_level == "DEBUG"
    assert loaded.settings.keep_quoted_cr is False
    assert loaded.sources_used == ["config", "env", "cli"]


def test_invalid_boolean_env_value(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("CSVSTREAM_EMIT_DANGLING_ROW", "maybe")
    with pytest.raises(ValueError, match="Invalid boolean value"):
        loadSettings(config_path=None, cli_overrides={})


def test_missing_config_file_is_ignored(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    loaded = loadSettings(config_path=str(tmp_path / "nope.yml"), cli_overrides={})
    assert loaded.sources_used == []


def test_dangling_row_policy_flows_from_config_env_and_flag(tmp_path: Path, monkeypatch):
    _clear_env(monkeypatch)
    csv_path = tmp_path / "in.csv"
    csv_path.write_bytes(b"a,b\nc,d")
    cfg = tmp_path / "config.yml"
    cfg.write_text("emit_dangling_row: true\n", encoding="utf-8")
    base = ["--config", str(cfg), "--log-dir", str(tmp_path / "logs"), "--report-dir", str(tmp_path / "reports")]

    result = runner.invoke(app, base + ["read", str(csv_path)])
    assert result.exit_code == 0
    assert "['c', 'd']" in result.output

    monkeypatch.setenv("CSVSTREAM_EMIT_DANGLING_ROW", "false")
    result = runner.invoke(app, base + ["read", str(csv_path)])
    assert result.exit_code == 0
    assert "['c', 'd']" not in result.output

    result = runner.invoke(app, base + ["read", "--emit-dangling-row", str(csv_path)])
    assert result.exit_code == 0
    assert "['c', 'd']" in result.output


def test_empty_config_keys_fall_back_to_defaults(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yml"
    cfg.write_text("encoding:\nlog_level:\nlog_dir:\nreport_dir: ''\nkeep_quoted_cr:\n", encoding="utf-8")

    loaded = loadSettings(config_path=str(cfg), cli_overrides={})

    assert loaded.settings == Settings()


def test_yaml_string_booleans_parsed_like_env(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yml"
    cfg.write_text('keep_quoted_cr: "no"\nemit_dangling_row: "yes"\n', encoding="utf-8")

    loaded = loadSettings(config_path=str(cfg), cli_overrides={})

    assert loaded.settings.keep_quoted_cr is False
    assert loaded.settings.emit_dangling_row is True


def test_invalid_yaml_boolean(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yml"
    cfg.write_text('emit_dangling_row: "sometimes"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid boolean value"):
        loadSettings(config_path=str(cfg), cli_overrides={})


def test_read_with_empty_encoding_key_uses_default(tmp_path: Path, monkeypatch):
    _clear_env(monkeypatch)
    csv_path = tmp_path / "in.csv"
    csv_path.write_bytes(b"a,b\n")
    cfg = tmp_path / "config.yml"
    cfg.write_text("encoding:\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "--config",
            str(cfg),
            "--log-dir",
            str(tmp_path / "logs"),
            "--report-dir",
            str(tmp_path / "reports"),
            "read",
            str(csv_path),
        ],
    )

    assert result.exit_code == 0
    assert "['a', 'b']" in result.output
