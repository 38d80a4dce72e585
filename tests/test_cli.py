"""Tests for the validate CLI."""

import io
import json

import pytest
import yaml

from deploylint.cli.validate import EXIT_FAILED, EXIT_OK, EXIT_USAGE, exit_code, main, render_report
from deploylint.config.report import CheckType, Report, Severity

VALID_CONFIG = """\
deployments:
  - name: production
    modules:
      - path: frontend
        pre_deploy:
          - path: hooks/build.sh
            args: {env: prod}
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DEPLOYLINT_* variables from leaking into tests."""
    for name in (
        "DEPLOYLINT_BASE_DIR",
        "DEPLOYLINT_FORMAT",
        "DEPLOYLINT_STRICT",
        "DEPLOYLINT_LOG_LEVEL",
        "DEPLOYLINT_LOG_FILE",
        "DEPLOYLINT_JSON_LOGS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    """Create a valid config file whose hook exists."""
    (tmp_path / "hooks").mkdir()
    (tmp_path / "hooks" / "build.sh").write_text("#!/bin/sh\n")
    path = tmp_path / "deployments.yaml"
    path.write_text(VALID_CONFIG)
    return path


class TestMain:
    """Tests for the CLI entry point."""

    def test_valid_config_exits_zero(self, config_file, capsys):
        assert main([str(config_file)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "[PASS] deployments: 1 deployment(s) defined" in out
        assert "Result: PASSED" in out

    def test_failing_config_exits_non_zero(self, tmp_path, capsys):
        path = tmp_path / "deployments.yaml"
        path.write_text("deployments: []\n")

        assert main([str(path)]) == EXIT_FAILED
        assert "[FAIL]" in capsys.readouterr().out

    def test_parse_error_exits_non_zero(self, tmp_path, capsys):
        path = tmp_path / "deployments.yaml"
        path.write_text("deployments: [unclosed\n")

        assert main([str(path)]) == EXIT_FAILED
        assert "parse error" in capsys.readouterr().out

    def test_missing_file_is_usage_error(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.yaml")]) == EXIT_USAGE
        assert "Configuration file not found" in capsys.readouterr().err

    def test_warnings_pass_unless_strict(self, tmp_path):
        path = tmp_path / "deployments.yaml"
        path.write_text("deployments:\n  - modules: []\n")

        assert main([str(path)]) == EXIT_OK
        assert main([str(path), "--strict"]) == EXIT_FAILED

    def test_json_format(self, config_file, capsys):
        assert main([str(config_file), "--format", "json"]) == EXIT_OK

        data = json.loads(capsys.readouterr().out)
        assert data["passed"] is True
        assert [c["message"] for c in data["checks"]] == [
            "deployments: 1 deployment(s) defined",
            "deployment 0: 1 module(s)",
        ]

    def test_format_from_environment(self, config_file, capsys, monkeypatch):
        monkeypatch.setenv("DEPLOYLINT_FORMAT", "yaml")

        assert main([str(config_file)]) == EXIT_OK
        assert yaml.safe_load(capsys.readouterr().out)["passed"] is True

    def test_invalid_environment_is_usage_error(self, config_file, capsys, monkeypatch):
        monkeypatch.setenv("DEPLOYLINT_FORMAT", "xml")

        assert main([str(config_file)]) == EXIT_USAGE
        assert "Unknown output format" in capsys.readouterr().err

    def test_format_flag_overrides_invalid_environment(self, config_file, capsys, monkeypatch):
        """Flags are applied before the merged settings are validated."""
        monkeypatch.setenv("DEPLOYLINT_FORMAT", "xml")
        monkeypatch.setenv("DEPLOYLINT_LOG_LEVEL", "TRACE")

        assert main([str(config_file), "--format", "json", "-v"]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)["passed"] is True

    def test_settings_file(self, config_file, tmp_path, capsys):
        """A settings file supplies defaults for format and strictness."""
        settings = tmp_path / "deploylint.yaml"
        settings.write_text("lint:\n  output_format: json\n  strict: true\n")
        config_file.write_text("deployments:\n  - modules: []\n")

        assert main([str(config_file), "--settings", str(settings)]) == EXIT_FAILED
        assert json.loads(capsys.readouterr().out)["warnings"] == 1

    def test_environment_overrides_settings_file(self, config_file, tmp_path, capsys, monkeypatch):
        settings = tmp_path / "deploylint.yaml"
        settings.write_text("lint:\n  output_format: json\n")
        monkeypatch.setenv("DEPLOYLINT_FORMAT", "yaml")

        assert main([str(config_file), "--settings", str(settings)]) == EXIT_OK
        assert yaml.safe_load(capsys.readouterr().out)["passed"] is True

    def test_missing_settings_file_is_usage_error(self, config_file, tmp_path, capsys):
        assert main([str(config_file), "--settings", str(tmp_path / "nope.yaml")]) == EXIT_USAGE
        assert "Settings file not found" in capsys.readouterr().err

    def test_list_hooks_text(self, config_file, capsys):
        assert main([str(config_file), "--list-hooks"]) == EXIT_OK

        out = capsys.readouterr().out
        assert "Hooks: 1 across 1 module(s)" in out
        assert "deployment 0 frontend pre_deploy: hooks/build.sh env=prod" in out

    def test_list_hooks_json(self, config_file, capsys):
        assert main([str(config_file), "--list-hooks", "-f", "json"]) == EXIT_OK

        assert json.loads(capsys.readouterr().out)["hooks"] == [
            {
                "deployment": 0,
                "module": "frontend",
                "stage": "pre_deploy",
                "path": "hooks/build.sh",
                "args": {"env": "prod"},
            }
        ]

    def test_list_hooks_skipped_for_failing_config(self, tmp_path, capsys):
        path = tmp_path / "deployments.yaml"
        path.write_text("deployments: []\n")

        assert main([str(path), "--list-hooks"]) == EXIT_FAILED
        assert "Hooks:" not in capsys.readouterr().out

    def test_base_dir_option(self, tmp_path, capsys):
        """--base-dir changes where hook paths are resolved."""
        hooks_root = tmp_path / "infra"
        (hooks_root / "hooks").mkdir(parents=True)
        (hooks_root / "hooks" / "build.sh").write_text("#!/bin/sh\n")
        path = tmp_path / "deployments.yaml"
        path.write_text(VALID_CONFIG)

        assert main([str(path), "--strict"]) == EXIT_FAILED
        assert "missing hook file: hooks/build.sh" in capsys.readouterr().out

        assert main([str(path), "--strict", "--base-dir", str(hooks_root)]) == EXIT_OK

    def test_output_file(self, config_file, tmp_path, capsys):
        output = tmp_path / "results" / "lint.json"

        assert main([str(config_file), "-f", "json", "-o", str(output)]) == EXIT_OK

        assert capsys.readouterr().out == ""
        assert json.loads(output.read_text())["passed"] is True

    def test_unwritable_output_is_usage_error(self, config_file, tmp_path, capsys):
        """A report that cannot be written is an error, not a traceback."""
        blocker = tmp_path / "results"
        blocker.write_text("not a directory\n")

        assert main([str(config_file), "-o", str(blocker / "lint.txt")]) == EXIT_USAGE
        assert "Error: could not write" in capsys.readouterr().err

    def test_verbose_logs_carry_config_file(self, config_file, capsys):
        assert main([str(config_file), "-v"]) == EXIT_OK
        assert f"[{config_file}] deploylint.cli: {config_file}: passed" in capsys.readouterr().err

    def test_reads_stdin(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO("deployments:\n  - modules: [{path: app}]\n"))

        assert main(["-"]) == EXIT_OK
        assert "Validation Report: <stdin>" in capsys.readouterr().out

    def test_verbose_logs_checks(self, config_file, capsys):
        assert main([str(config_file), "-v"]) == EXIT_OK
        assert "deployments: 1 deployment(s) defined" in capsys.readouterr().err


class TestHelpers:
    """Tests for rendering and exit codes."""

    def test_exit_code(self):
        report = Report()
        report.add(Severity.WARNING, CheckType.HOOK_PATH, "missing hook file: x.sh")

        assert exit_code(report) == EXIT_OK
        assert exit_code(report, strict=True) == EXIT_FAILED

        report.add(Severity.FAIL, CheckType.STRUCTURAL_ERROR, "deployments: no deployments defined")
        assert exit_code(report) == EXIT_FAILED

    def test_render_text(self):
        report = Report()
        report.add(Severity.PASS, CheckType.DEPLOYMENTS, "deployments: 1 deployment(s) defined")

        assert render_report(report, "text") == report.summary()

    def test_render_yaml_preserves_order(self):
        report = Report()
        report.add(Severity.PASS, CheckType.DEPLOYMENTS, "first")
        report.add(Severity.WARNING, CheckType.HOOK_PATH, "second")

        data = yaml.safe_load(render_report(report, "yaml"))
        assert [c["message"] for c in data["checks"]] == ["first", "second"]
