"""Recording service that supervises the terminal capture process."""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..config import BoxsConfig
from ..errors import BackendNotFound, RecordingError, SessionConflict
from ..models.events import RecordingEvent
from ..models.recording import RecordingInfo, RecordingSession, StopResult, SupervisorState
from ..recording.backends import CaptureBackend, build_recording_path, get_backends
from ..recording.process import ProcessHandle, ProcessLauncher, SubprocessLauncher
from ..recording.publisher import RecordingEventPublisher

logger = logging.getLogger(__name__)


class RecordingService:
    """Owns at most one recording session and the backend process behind it.

    The first configured backend is preferred; when its executable is missing
    the next one is tried. A session is committed only once a backend process
    is running, and cleared only once that process has exited after
    stop_recording().
    """

    def __init__(
        self,
        config: BoxsConfig,
        launcher: Optional[ProcessLauncher] = None,
        backends: Optional[Sequence[CaptureBackend]] = None,
        publisher: Optional[RecordingEventPublisher] = None,
    ):
        """Initialize recording service.

        Args:
            config: Application configuration
            launcher: Process launcher (defaults to SubprocessLauncher)
            backends: Capture backends in fallback order (defaults to config)
            publisher: Lifecycle event publisher
        """
        self.config = config
        self.launcher = launcher or SubprocessLauncher()
        self.backends: List[CaptureBackend] = (
            list(backends) if backends is not None else get_backends(config.get_backend_names())
        )
        if not self.backends:
            raise ValueError("At least one recording backend must be configured")
        self.publisher = publisher or RecordingEventPublisher()
        self.grace_seconds = config.get_stop_grace_seconds()
        self.idle_time_limit = config.get_idle_time_limit()

        # Single recording slot; transitions happen under _slot_lock
        self._slot_lock = threading.Lock()
        self._state = SupervisorState.IDLE
        self._session: Optional[RecordingSession] = None

        logger.info(f"RecordingService ready (backends: {', '.join(b.name for b in self.backends)})")

    @property
    def state(self) -> SupervisorState:
        return self._state

    def is_recording(self) -> bool:
        """True while a started recording has not finished stopping."""
        return self._session is not None

    def get_current_recording(self) -> Optional[RecordingInfo]:
        """Get a snapshot of the active recording with an up-to-date duration."""
        session = self._session
        if session is None:
            return None

        return RecordingInfo(
            title=session.title,
            start_time=session.start_time,
            duration_ms=session.duration_ms,
            file_path=session.file_path,
            backend=session.backend,
            has_timing_data=session.has_timing_data,
        )

    def start_recording(self, title: str, output_dir: Optional[str] = None) -> str:
        """Start recording the terminal.

        Args:
            title: Recording title, used in the file name
            output_dir: Directory for the recording (defaults to config)

        Returns:
            Path of the file the backend is recording to

        Raises:
            SessionConflict: A recording is already in progress
            BackendNotFound: None of the configured backends is installed
            BackendLaunchFailed: A backend was found but failed to start
        """
        with self._slot_lock:
            if self._state is not SupervisorState.IDLE:
                active_path = self._session.file_path if self._session else None
                raise SessionConflict(active_path)
            self._state = SupervisorState.STARTING

        try:
            recording_dir = self._prepare_directory(output_dir)
            handle, backend, file_path, missing = self._launch_backend(title, recording_dir)
        except Exception:
            with self._slot_lock:
                self._state = SupervisorState.IDLE
            raise

        session = RecordingSession(
            handle=handle,
            file_path=str(file_path),
            title=title,
            backend=backend.name,
            has_timing_data=backend.has_timing_data,
        )
        with self._slot_lock:
            self._session = session
            self._state = SupervisorState.ACTIVE

        logger.info(f"Started recording '{title}' with {backend.name}: {file_path}")
        try:
            if missing:
                self.publisher.publish(RecordingEvent(
                    event_type="fallback",
                    title=title,
                    file_path=session.file_path,
                    backend=backend.name,
                    metadata={
                        "missing": list(missing),
                        "has_timing_data": backend.has_timing_data,
                    },
                ))
            self.publisher.publish(RecordingEvent(
                event_type="started",
                title=title,
                file_path=session.file_path,
                backend=backend.name,
                timestamp=session.start_time,
            ))
        except BaseException:
            logger.error(f"Start of '{title}' aborted, stopping {backend.name}")
            try:
                self._shut_down(handle, backend.name)
            finally:
                with self._slot_lock:
                    self._session = None
                    self._state = SupervisorState.IDLE
            raise
        return session.file_path

    def _prepare_directory(self, output_dir: Optional[str]) -> Path:
        recording_dir = Path(output_dir or self.config.get_recording_directory()).expanduser()
        try:
            recording_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RecordingError(f"Cannot create recording directory {recording_dir}: {e}") from e
        logger.debug(f"Ensured recording directory exists: {recording_dir}")
        return recording_dir

    def _launch_backend(self, title: str, recording_dir: Path):
        """Launch the first available backend.

        Returns:
            Tuple of (process handle, backend, file path, names of missing backends)
        """
        tried: List[str] = []

        for backend in self.backends:
            file_path = build_recording_path(recording_dir, title, backend)
            command = backend.build_command(str(file_path), self.idle_time_limit)

            try:
                handle: ProcessHandle = self.launcher.launch(command)
            except BackendNotFound:
                tried.append(backend.name)
                logger.info(f"{backend.name} not found, trying next recording backend")
                continue

            if tried:
                downgrade = "" if backend.has_timing_data else "; timing data will not be captured"
                logger.warning(f"Falling back to {backend.name} ({', '.join(tried)} not found){downgrade}")

            return handle, backend, file_path, tried

        logger.error(f"No recording backend available (tried: {', '.join(tried)})")
        raise BackendNotFound(tried[0], tried)

    def _shut_down(self, handle: ProcessHandle, backend_name: str) -> Tuple[Optional[int], bool]:
        """Terminate the backend, killing it if the grace window runs out.

        Returns:
            Tuple of (return code, whether SIGKILL was needed)
        """
        if handle.has_exited():
            return_code = handle.wait()
            logger.info(f"{backend_name} had already exited (code {return_code})")
            return return_code, False

        logger.info(f"Stopping {backend_name} (pid {handle.pid})")
        handle.terminate()
        return_code = handle.wait(timeout=self.grace_seconds)

        forced = False
        # The wait timed out; re-check so a reaped pid is never signaled
        if return_code is None and not handle.has_exited():
            logger.warning(f"{backend_name} did not exit within {self.grace_seconds}s, force killing")
            forced = True
            handle.kill()

        if return_code is None:
            return_code = handle.wait()
        return return_code, forced

    def wait_for_exit(self, timeout: Optional[float] = None) -> bool:
        """Block until the backend exits on its own, e.g. the user ends the shell.

        The session stays registered; call stop_recording() afterwards.

        Returns:
            True if the backend has exited, False if idle or timed out
        """
        session = self._session
        if session is None:
            return False
        return session.handle.wait(timeout=timeout) is not None

    def stop_recording(self) -> Optional[StopResult]:
        """Stop the backend, escalating to a kill after the grace window.

        If stopping is interrupted before the backend exits, the session goes
        back to ACTIVE so stop_recording() can be called again.

        Returns:
            StopResult, or None if nothing was recording
        """
        with self._slot_lock:
            if self._state is not SupervisorState.ACTIVE or self._session is None:
                return None
            self._state = SupervisorState.STOPPING
            session = self._session

        duration_ms = session.duration_ms
        handle = session.handle

        try:
            return_code, forced = self._shut_down(handle, session.backend)
        finally:
            with self._slot_lock:
                if handle.has_exited():
                    self._session = None
                    self._state = SupervisorState.IDLE
                else:
                    logger.error(f"Stopping {session.backend} was interrupted; recording still active")
                    self._state = SupervisorState.ACTIVE

        logger.info(f"Recording stopped: {session.file_path} ({duration_ms} ms)")
        if forced:
            self.publisher.publish(RecordingEvent(
                event_type="escalated",
                title=session.title,
                file_path=session.file_path,
                backend=session.backend,
                metadata={"grace_seconds": self.grace_seconds},
            ))
        self.publisher.publish(RecordingEvent(
            event_type="stopped",
            title=session.title,
            file_path=session.file_path,
            backend=session.backend,
            metadata={"duration_ms": duration_ms, "return_code": return_code, "forced": forced},
        ))
        return StopResult(
            file_path=session.file_path,
            duration_ms=duration_ms,
            return_code=return_code,
            forced=forced,
        )
