"""
Tests for the entrypoint-tool command line.

main() is called in-process; exit codes are its return values.
"""

import os
from unittest.mock import patch

import pytest

from entrykit import cli
from entrykit.colors import Color
from entrykit.errors import ConfigError


class TestMain:
    """Tests for cli.main."""

    def test_no_arguments_exits_zero(self, capsys):
        assert cli.main([]) == 0
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help_flags_are_unknown_operations(self, flag, capsys):
        assert cli.main([flag]) == 1
        captured = capsys.readouterr()
        assert f"Unknown command: {flag}" in captured.err
        assert captured.out == ""

    def test_unknown_operation(self, capsys):
        assert cli.main(["frobnicate"]) == 1
        err = capsys.readouterr().err
        assert err.startswith(Color.RED.value)
        assert "Unknown command: frobnicate" in err

    def test_unknown_operation_lists_operations(self, capsys):
        assert cli.main(["frobnicate"]) == 1
        err = capsys.readouterr().err
        assert "wait-for-port" in err
        assert "Run a command as another user" in err

    def test_failure_is_logged_at_error_level(self, capsys):
        assert cli.main(["frobnicate"]) == 1
        err = capsys.readouterr().err
        assert "ERROR entrykit.cli: Operation failed" in err

    def test_unknown_operation_skips_config(self):
        with patch.object(cli, "load_config") as mock_load:
            assert cli.main(["frobnicate"]) == 1
        mock_load.assert_not_called()

    def test_usage_error_prints_usage(self, capsys):
        assert cli.main(["wait-for-port", "db"]) == 1
        err = capsys.readouterr().err
        assert "entrypoint-tool wait-for-port: the following arguments are required: PORT" in err
        assert "usage: entrypoint-tool wait-for-port HOST PORT" in err

    def test_colored_output(self, capsys):
        assert cli.main(["colored-output", "CYAN", "hello"]) == 0
        assert capsys.readouterr().out.startswith(Color.CYAN.value + "hello")

    def test_substitution_failure_exits_one(self, tmp_path, capsys):
        assert cli.main(["substitute-in-file", str(tmp_path / "missing.conf")]) == 1
        assert "no such file" in capsys.readouterr().err

    def test_wait_for_file_success(self, tmp_path):
        target = tmp_path / "ready"
        target.write_text("")
        assert cli.main(["wait-for-file", str(target)]) == 0

    def test_wait_timeout_exits_one(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("ENTRYKIT_WAIT_INTERVAL", "0.01")
        monkeypatch.setenv("ENTRYKIT_WAIT_TIMEOUT", "0.03")

        assert cli.main(["wait-for-file", str(tmp_path / "never")]) == 1
        assert "Timed out after 0.03s" in capsys.readouterr().err

    def test_exec_as_passes_child_status_through(self):
        with patch("entrykit.dispatcher.exec_as", return_value=42):
            assert cli.main(["exec-as", "app", "true"]) == 42

    def test_invalid_configuration_exits_one(self, monkeypatch, capsys):
        monkeypatch.setenv("ENTRYKIT_WAIT_TIMEOUT", "-5")

        assert cli.main(["colored-output", "RED", "x"]) == 1
        err = capsys.readouterr().err
        assert "Invalid configuration" in err
        assert "wait_timeout must be positive" in err

    def test_unparseable_setting_exits_one(self, monkeypatch, capsys):
        monkeypatch.setenv("ENTRYKIT_WAIT_TIMEOUT", "abc")

        assert cli.main(["colored-output", "RED", "x"]) == 1
        err = capsys.readouterr().err
        assert "Invalid wait_timeout from ENTRYKIT_WAIT_TIMEOUT" in err

    def test_unreadable_config_path_exits_one(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("ENTRYKIT_CONFIG", str(tmp_path))

        assert cli.main(["colored-output", "RED", "x"]) == 1
        captured = capsys.readouterr()
        assert captured.err.startswith(Color.RED.value + f"Cannot read {tmp_path}")
        assert "Traceback" not in captured.err
        assert captured.out == ""

    def test_unusable_log_file_exits_before_operation(self, tmp_path, monkeypatch, capsys):
        blocker = tmp_path / "ready"
        blocker.write_text("")
        monkeypatch.setenv("ENTRYKIT_LOG_FILE", str(blocker / "sub" / "log.json"))

        assert cli.main(["wait-for-file", str(blocker)]) == 1
        captured = capsys.readouterr()
        assert f"Cannot open log file {blocker / 'sub' / 'log.json'}" in captured.err
        assert "is available" not in captured.out


class TestLoadConfig:
    """Tests for cli.load_config."""

    def test_defaults(self):
        config = cli.load_config()
        assert config.wait_timeout == 300.0
        assert config.wait_interval == 1.0

    def test_bad_yaml_is_a_config_error(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("wait_timeout: [unclosed\n")
        monkeypatch.setenv("ENTRYKIT_CONFIG", str(config_file))

        with pytest.raises(ConfigError, match="Invalid YAML"):
            cli.load_config()

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read any file")
    def test_permission_denied_config_is_a_config_error(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("wait_timeout: 5\n")
        config_file.chmod(0)
        monkeypatch.setenv("ENTRYKIT_CONFIG", str(config_file))

        with pytest.raises(ConfigError, match="Cannot read"):
            cli.load_config()

    def test_unusable_log_file_is_a_config_error(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ENTRYKIT_LOG_FILE", str(tmp_path))

        with pytest.raises(ConfigError, match="Cannot open log file"):
            cli.load_config()

    def test_env_file_directory_is_a_config_error(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ENTRYKIT_ENV_FILE", str(tmp_path))

        with pytest.raises(ConfigError, match="not a regular file"):
            cli.load_config()

    def test_degraded_configuration_is_usable(self, tmp_path, monkeypatch, capfd):
        monkeypatch.setenv("ENTRYKIT_ENV_FILE", str(tmp_path / "missing.env"))

        config = cli.load_config()

        assert config.env_file == str(tmp_path / "missing.env")
        assert "does not exist" in capfd.readouterr().err

    def test_json_log_file(self, tmp_path, monkeypatch):
        log_file = tmp_path / "logs" / "entrykit.jsonl"
        monkeypatch.setenv("ENTRYKIT_LOG_FILE", str(log_file))
        monkeypatch.setenv("ENTRYKIT_LOG_LEVEL", "debug")

        assert cli.main(["colored-output", "GREEN", "logged"]) == 0

        assert log_file.exists()
        assert '"operation": "colored-output"' in log_file.read_text()
