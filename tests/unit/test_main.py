"""Unit tests for the boxs command line."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from boxs import main as main_module


def run_cli(argv):
    with pytest.raises(SystemExit) as exc_info:
        main_module.main(argv)
    return exc_info.value.code


@pytest.fixture
def cli_files(temp_data_dir):
    base = Path(temp_data_dir)
    log = base / "run.log"
    log.write_text("2024-01-01T10:00:00 start\n")
    cast = base / "session.cast"
    cast.write_text('{"version": 2}\n')
    empty = base / "empty.txt"
    empty.touch()
    return {"log": str(log), "cast": str(cast), "empty": str(empty)}


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logging")
class TestCommandLine:
    """Test cases for the CLI subcommands."""

    def test_validate(self, config_file, cli_files, capsys):
        code = run_cli(["--config", str(config_file), "validate", cli_files["log"], cli_files["empty"]])

        out = capsys.readouterr()
        assert code == 0
        assert "1 valid file(s)" in out.out
        assert "File is empty" in out.out

    def test_validate_nothing_valid(self, config_file, cli_files):
        assert run_cli(["--config", str(config_file), "validate", cli_files["empty"]]) == 1

    def test_detect(self, config_file, cli_files, capsys):
        code = run_cli(["--config", str(config_file), "detect", cli_files["log"], cli_files["cast"]])

        out = capsys.readouterr().out
        assert code == 0
        assert "TIMESTAMPED" in out
        assert "ASCIINEMA" in out

    def test_paths_with_brackets(self, config_file, temp_data_dir, capsys):
        """Test file names that look like rich markup are shown as-is."""
        nested = Path(temp_data_dir) / "a[" / "b]"
        nested.mkdir(parents=True)
        tagged = nested / "x[bold]y.log"
        tagged.write_text("plain output\n")

        validate_code = run_cli(["--config", str(config_file), "validate", str(tagged)])
        detect_code = run_cli(["--config", str(config_file), "detect", str(tagged)])

        out = capsys.readouterr().out
        assert validate_code == 0
        assert detect_code == 0
        assert "x[bold]y.log" in out
        assert "RAW_LOG" in out

    def test_writes_log_file(self, config_file, cli_files):
        run_cli(["--config", str(config_file), "validate", cli_files["log"]])

        assert (config_file.parent / "logs" / "boxs.log").exists()

    def test_missing_config(self, temp_data_dir):
        assert run_cli(["--config", str(Path(temp_data_dir) / "nope.yaml"), "status"]) == 1

    def test_status_reports_backends(self, config_file, capsys):
        with patch.object(main_module, "is_executable_available", side_effect=lambda name: name == "script"):
            code = run_cli(["--config", str(config_file), "status"])

        out = capsys.readouterr().out
        assert code == 0
        assert "script available" in out
        assert "asciinema not found" in out

    def test_status_without_backends(self, config_file):
        with patch.object(main_module, "is_executable_available", return_value=False):
            assert run_cli(["--config", str(config_file), "status"]) == 1

    def test_record(self, config_file, fake_launcher, capsys):
        """Test a recording whose shell exits on its own."""
        def launch_and_exit(command):
            process = fake_launcher.process_factory()
            process.finish(0)
            fake_launcher.commands.append(list(command))
            return process

        with patch.object(fake_launcher, "launch", side_effect=launch_and_exit), \
                patch("boxs.services.recording_service.SubprocessLauncher", return_value=fake_launcher):
            code = run_cli(["--config", str(config_file), "record", "CLI test"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Recording stopped successfully" in out
        assert "ASCIINEMA" in out
        assert fake_launcher.commands[0][0] == "asciinema"

    def test_record_without_tools(self, config_file, fake_launcher, capsys):
        fake_launcher.missing.update({"asciinema", "script"})

        with patch("boxs.services.recording_service.SubprocessLauncher", return_value=fake_launcher):
            code = run_cli(["--config", str(config_file), "record", "nothing"])

        captured = capsys.readouterr()
        assert code == 1
        assert "asciinema.org" in captured.out
        assert "Recording tool not found" in captured.err

    def test_record_requires_title(self, config_file):
        assert run_cli(["--config", str(config_file), "record", "   "]) == 1

    def test_log_level_option_overrides_config(self, config_file, cli_files):
        run_cli(["--config", str(config_file), "--log-level", "WARNING", "validate", cli_files["log"]])

        assert logging.getLogger().level == logging.WARNING


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logging")
class TestSetupLogging:
    """Test cases for log handler setup."""

    def test_file_handler_only(self, test_config):
        log_file = main_module.setup_logging(test_config)

        root_logger = logging.getLogger()
        assert log_file == test_config.get_log_file()
        assert log_file.parent.is_dir()
        assert root_logger.level == logging.DEBUG
        assert [type(h) for h in root_logger.handlers] == [logging.FileHandler]

    def test_console_handler_shows_warnings_only(self, test_config):
        test_config.set('logging.console_output', True)

        main_module.setup_logging(test_config)

        stream_handlers = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].level == logging.WARNING

    def test_unknown_level(self, test_config):
        test_config.set('logging.level', 'LOUD')

        with pytest.raises(ValueError, match="Unknown logging.level"):
            main_module.setup_logging(test_config)
