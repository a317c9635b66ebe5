"""Main application entry point for boxs."""

import os
import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pubsub import pub

from . import __version__
from .config import BoxsConfig
from .errors import BackendNotFound, RecordingError
from .models.events import RecordingEvent
from .recording.backends import BACKENDS
from .recording.process import is_executable_available
from .services.recording_service import RecordingService
from .storage.file_validator import validate_files
from .storage.format_detector import detect_file_format
from .ui.console import ConsoleOutput, format_duration, format_file_size

logger = logging.getLogger(__name__)

ASCIINEMA_INSTALL_URL = "https://asciinema.org/docs/installation"


FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
CONSOLE_LOG_FORMAT = 'boxs: %(levelname)s: %(message)s'


def setup_logging(config: BoxsConfig) -> Path:
    """Send log records to the boxs log file and, if enabled, to stderr.

    Only warnings and above reach stderr.

    Returns:
        Path of the log file
    """
    level = config.get_log_level()
    log_file = config.get_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    handlers: List[logging.Handler] = [file_handler]

    if config.get('logging.console_output', True):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.WARNING)
        stderr_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
        handlers.append(stderr_handler)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.debug(f"boxs {__version__} logging to {log_file} at {logging.getLevelName(level)}")
    return log_file


def record_command(args: argparse.Namespace, config: BoxsConfig, output: ConsoleOutput) -> int:
    """Record the terminal until the recorded shell exits."""
    output.header("Record")

    title = (args.title or "").strip()
    if not title:
        output.error("Operation title is required")
        return 1

    def on_fallback(event: RecordingEvent) -> None:
        output.warn(f"{', '.join(event.metadata.get('missing', []))} not found, recording with {event.backend}")
        if not event.metadata.get("has_timing_data"):
            output.warn("Timing data will not be captured; interactive replay will be unavailable")
            output.info(f"Tip: Install asciinema for full-fidelity recordings: {ASCIINEMA_INSTALL_URL}")

    # pubsub keeps weak references; on_fallback stays alive for this call
    pub.subscribe(on_fallback, "recording.fallback")
    try:
        try:
            service = RecordingService(config)
        except ValueError as e:
            output.error(f"Configuration error: {e}")
            return 1

        output.info(f"Starting recording for: {title}")
        output.log("Your terminal session is now being recorded.")
        output.log("Exit the shell (Ctrl-D or 'exit') to finish the recording.")
        output.divider()

        try:
            file_path = service.start_recording(title, args.output)
        except BackendNotFound as e:
            output.error(f"Failed to start recording: {e}")
            output.info(f"Tip: Install asciinema for better recording support: {ASCIINEMA_INSTALL_URL}")
            output.info("Or ensure the script command is available on your system")
            return 1
        except RecordingError as e:
            output.error(f"Failed to start recording: {e}")
            return 1

        try:
            service.wait_for_exit()
        except KeyboardInterrupt:
            output.warn("Interrupted, stopping recording...")
        finally:
            result = service.stop_recording()
    finally:
        pub.unsubscribe(on_fallback, "recording.fallback")

    if result is None:
        output.error("Failed to stop recording")
        return 1

    output.divider()
    output.success("Recording stopped successfully!")
    output.info(f"Saved to: {result.file_path}")
    output.info(f"Final duration: {format_duration(result.duration_ms)}")
    if result.forced:
        output.warn("Recording tool had to be force-stopped; the file may be incomplete")

    file_format = detect_file_format(file_path)
    output.info(f"Format: {file_format.value}")
    if file_format.has_timing_data:
        output.info("✓ Timing data preserved - full interactive replay available")
    else:
        output.info("ℹ Static log - command analysis available")
    return 0


def status_command(args: argparse.Namespace, config: BoxsConfig, output: ConsoleOutput) -> int:
    """Show configuration and recording tool availability."""
    output.header("Status")

    output.info("Configuration:")
    output.log(f"  Config file: {config.config_file or 'defaults'}")
    output.log(f"  Recording directory: {config.get_recording_directory()}")
    output.log(f"  Idle time limit: {config.get_idle_time_limit()}s")
    output.log(f"  Stop grace period: {config.get_stop_grace_seconds()}s")

    output.divider()
    output.info("System Status:")

    available = []
    for name in config.get_backend_names():
        backend = BACKENDS.get(name)
        if backend is None:
            output.warn(f"  Unknown recording backend: {name}")
            continue
        if is_executable_available(backend.executable):
            available.append(backend)
            quality = "recommended" if backend.has_timing_data else "basic recording"
            output.log(f"  ✓ {backend.name} available ({quality})")
        else:
            output.log(f"  ✗ {backend.name} not found")

    if not available:
        output.warn("No recording tools found")
        output.info(f"    Install asciinema for best experience: {ASCIINEMA_INSTALL_URL}")
        output.info("    Or ensure script command is available on your system")
        return 1
    return 0


def validate_command(args: argparse.Namespace, config: BoxsConfig, output: ConsoleOutput) -> int:
    """Report which of the given files can be uploaded."""
    output.header("Validate Files")

    result = validate_files(args.files)
    if result.has_valid:
        output.success(f"{len(result.valid)} valid file(s):")
        output.lines(result.valid)
    if result.has_invalid:
        output.error("Some files are invalid:")
        output.lines(result.error_lines())

    return 0 if result.has_valid else 1


def detect_command(args: argparse.Namespace, config: BoxsConfig, output: ConsoleOutput) -> int:
    """Show the detected format of each valid file."""
    output.header("Detect Formats")

    result = validate_files(args.files)
    if result.has_invalid:
        output.warn("Skipping invalid files:")
        output.lines(result.error_lines())
    if not result.has_valid:
        output.error("No valid files to inspect")
        return 1

    rows = []
    for file_path in result.valid:
        file_format = detect_file_format(file_path)
        rows.append([
            os.path.basename(file_path),
            file_format.value,
            format_file_size(os.path.getsize(file_path)),
            "yes" if file_format.has_timing_data else "no",
        ])
    output.table(["File", "Format", "Size", "Timing data"], rows)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boxs",
        description="boxs - Record terminal sessions and classify logs for upload",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: ~/.boxs/config.yaml if present)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, INFO)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"boxs {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    record_parser = subparsers.add_parser("record", help="Record the terminal until the shell exits")
    record_parser.add_argument("title", help="Operation title")
    record_parser.add_argument("-o", "--output", help="Output directory for recording files")
    record_parser.set_defaults(handler=record_command)

    status_parser = subparsers.add_parser("status", help="Show configuration and recording tools")
    status_parser.set_defaults(handler=status_command)

    validate_parser = subparsers.add_parser("validate", help="Check files before upload")
    validate_parser.add_argument("files", nargs="+", help="Files to check")
    validate_parser.set_defaults(handler=validate_command)

    detect_parser = subparsers.add_parser("detect", help="Detect the format of log files")
    detect_parser.add_argument("files", nargs="+", help="Files to classify")
    detect_parser.set_defaults(handler=detect_command)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for boxs."""
    parser = build_parser()
    args = parser.parse_args(argv)
    output = ConsoleOutput()

    try:
        config = BoxsConfig(args.config)
        if args.log_level:
            config.set('logging.level', args.log_level)
        setup_logging(config)
    except (FileNotFoundError, ValueError) as e:
        output.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        exit_code = args.handler(args, config, output)
    except ValueError as e:
        output.error(f"Error: {e}")
        logging.error(f"Application error: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
