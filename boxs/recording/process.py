"""Process execution for capture backends."""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..errors import BackendLaunchFailed, BackendNotFound

logger = logging.getLogger(__name__)


class ProcessHandle(ABC):
    """A running backend process."""

    @property
    @abstractmethod
    def pid(self) -> int:
        pass

    @abstractmethod
    def terminate(self) -> None:
        """Ask the process to exit (SIGTERM)."""
        pass

    @abstractmethod
    def kill(self) -> None:
        """Force the process to exit (SIGKILL)."""
        pass

    @abstractmethod
    def has_exited(self) -> bool:
        pass

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Wait for the process to exit.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            Exit code, or None if the timeout elapsed first
        """
        pass


class ProcessLauncher(ABC):
    """Starts backend processes with the caller's terminal attached."""

    @abstractmethod
    def launch(self, command: Sequence[str]) -> ProcessHandle:
        """Spawn ``command`` and return once the process is running.

        Raises:
            BackendNotFound: The executable does not exist
            BackendLaunchFailed: The executable exists but could not be started
        """
        pass


class SubprocessHandle(ProcessHandle):
    """ProcessHandle backed by subprocess.Popen."""

    def __init__(self, process: subprocess.Popen):
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    def terminate(self) -> None:
        # Popen drops signals once the child has been reaped
        self._process.terminate()

    def kill(self) -> None:
        self._process.kill()

    def has_exited(self) -> bool:
        return self._process.poll() is not None

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        try:
            return self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None


class SubprocessLauncher(ProcessLauncher):
    """Launches backends as child processes sharing this terminal."""

    def launch(self, command: Sequence[str]) -> ProcessHandle:
        argv: List[str] = list(command)
        executable = argv[0]
        logger.debug(f"Launching: {' '.join(argv)}")

        try:
            # stdin/stdout/stderr are inherited so the user drives the backend
            process = subprocess.Popen(argv)
        except FileNotFoundError as e:
            raise BackendNotFound(executable) from e
        except OSError as e:
            raise BackendLaunchFailed(executable, e.strerror or str(e)) from e

        logger.info(f"Started {executable} (pid {process.pid})")
        return SubprocessHandle(process)


def is_executable_available(name: str) -> bool:
    """Check whether ``name`` resolves to an executable on PATH."""
    return shutil.which(name) is not None
