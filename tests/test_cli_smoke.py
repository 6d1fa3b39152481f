from typer.testing import CliRunner
from csvstream.main import app

runner = CliRunner()

def test_help_shows_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "read" in result.stdout
    assert "validate" in result.stdout

def test_read_requires_path(tmp_path):
    result = runner.invoke(app, ["--log-dir", str(tmp_path / "logs"), "--report-dir", str(tmp_path / "reports"), "read"])
    assert result.exit_code == 2

def test_read_rejects_extra_arguments(tmp_path):
    result = runner.invoke(
        app,
        ["--log-dir", str(tmp_path / "logs"), "--report-dir", str(tmp_path / "reports"), "read", "a.csv", "b.csv"],
    )
    assert result.exit_code == 2
