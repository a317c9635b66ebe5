"""Pytest configuration and fixtures for boxs tests."""

import pytest
import tempfile
import threading
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from pubsub import pub

from boxs.config import BoxsConfig
from boxs.errors import BackendLaunchFailed, BackendNotFound
from boxs.recording.process import ProcessHandle, ProcessLauncher


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

RECORDING_TOPICS = ["recording.started", "recording.fallback", "recording.escalated", "recording.stopped"]


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without real processes")
    config.addinivalue_line("markers", "integration: tests that spawn real processes")


class FakeProcess(ProcessHandle):
    """Backend process stand-in that records the signals it receives."""

    def __init__(self, pid: int = 4242, exits_on_terminate: bool = True, exit_delay: float = 0.0):
        self._pid = pid
        self.exits_on_terminate = exits_on_terminate
        self.exit_delay = exit_delay
        self.signals: List[str] = []
        self._exited = threading.Event()
        self._return_code: Optional[int] = None

    @property
    def pid(self) -> int:
        return self._pid

    def finish(self, return_code: int = 0) -> None:
        """Simulate the process exiting."""
        if self._exited.is_set():
            return
        self._return_code = return_code
        self._exited.set()

    def terminate(self) -> None:
        self.signals.append("SIGTERM")
        if not self.exits_on_terminate:
            return
        if self.exit_delay > 0:
            timer = threading.Timer(self.exit_delay, self.finish, args=(-15,))
            timer.daemon = True
            timer.start()
        else:
            self.finish(-15)

    def kill(self) -> None:
        self.signals.append("SIGKILL")
        self.finish(-9)

    def has_exited(self) -> bool:
        return self._exited.is_set()

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        if self._exited.wait(timeout):
            return self._return_code
        return None


class FakeLauncher(ProcessLauncher):
    """Launcher that never starts real binaries."""

    def __init__(self):
        self.missing = set()
        self.failing = {}
        self.commands: List[List[str]] = []
        self.processes: List[FakeProcess] = []
        self.process_factory = FakeProcess

    def launch(self, command: Sequence[str]) -> ProcessHandle:
        self.commands.append(list(command))
        executable = command[0]
        if executable in self.missing:
            raise BackendNotFound(executable)
        if executable in self.failing:
            raise BackendLaunchFailed(executable, self.failing[executable])
        process = self.process_factory()
        self.processes.append(process)
        return process


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def config_file(temp_data_dir):
    """Write a config file that keeps recordings and logs inside the temp dir."""
    path = Path(temp_data_dir) / "boxs.yaml"
    path.write_text(yaml.safe_dump({
        "recording": {
            "output_directory": "recordings",
            "idle_time_limit": 60,
            "stop_grace_seconds": 0.5,
        },
        "logging": {
            "level": "DEBUG",
            "file_path": "logs/boxs.log",
            "console_output": False,
        },
    }))
    return path


@pytest.fixture
def test_config(config_file):
    """Configuration loaded from the temp config file."""
    return BoxsConfig(str(config_file))


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def recorded_events():
    """Collect every recording lifecycle event published during a test."""
    events = []

    def listener(event):
        events.append(event)

    for topic in RECORDING_TOPICS:
        pub.subscribe(listener, topic)
    yield events
    for topic in RECORDING_TOPICS:
        pub.unsubscribe(listener, topic)


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by setup_logging()."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def fake_process_class():
    return FakeProcess
