import os
import shutil
import signal
import tempfile

from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from backuptool.errors import RunInterrupted, ValidationError
from backuptool.globals import Globals
from backuptool.log import logger


class TempRegistry:
    """
    Run-scoped registry of scratch paths that must not outlive the run.

    Paths are recorded with `track()` (or created and recorded in one step with
    `make_temp_dir()`) and removed by `cleanup()`. Cleanup is best effort and
    idempotent: removal failures are logged, and entries are forgotten once
    handled, so calling it again is a no-op.
    """

    def __init__(self, tmp_dir: Optional[str] = None, prefix: str = Globals.TMP_PREFIX):
        self.tmp_dir = os.path.expanduser(tmp_dir) if tmp_dir else tmp_dir
        self.prefix = prefix
        self._paths: List[str] = []

    @property
    def tracked(self) -> List[str]:
        return list(self._paths)

    def track(self, path) -> None:
        # Existence is checked at cleanup time, the resource may be created later
        self._paths.append(str(path) if path is not None else "")

    def make_temp_dir(self) -> Path:
        """
        Create a private scratch directory and track it before returning it.

        SIGINT and SIGTERM are held back while the directory is created and
        recorded, so an interrupt can never leave an untracked directory behind.
        """
        with _signals_blocked():
            try:
                if self.tmp_dir:
                    os.makedirs(self.tmp_dir, exist_ok=True)
                tmp_dir = tempfile.mkdtemp(prefix=self.prefix, dir=self.tmp_dir)
            except OSError as e:
                raise ValidationError(f"Failed to create temporary directory in {self.tmp_dir or tempfile.gettempdir()}: {e}") from e
            self.track(tmp_dir)
        logger.debug(f"Temporary directory {tmp_dir} created.")
        return Path(tmp_dir)

    def cleanup(self) -> None:
        """
        Remove every tracked path that still exists.

        Directories are removed recursively, anything else is unlinked. A path
        that cannot be removed is reported as a warning and skipped, so the
        error that ended the run (if any) is never masked.
        """
        while self._paths:
            tmp_path = self._paths.pop(0)
            if not tmp_path or not os.path.lexists(tmp_path):
                continue

            logger.info(f"Removing {tmp_path}")
            try:
                if os.path.isdir(tmp_path) and not os.path.islink(tmp_path):
                    shutil.rmtree(tmp_path)
                else:
                    os.unlink(tmp_path)
            except OSError as e:
                logger.warning(f"Failed to remove temporary path {tmp_path}: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False


@contextmanager
def _signals_blocked(signals=(signal.SIGINT, signal.SIGTERM)):
    if not hasattr(signal, "pthread_sigmask"):
        yield
        return
    previous = signal.pthread_sigmask(signal.SIG_BLOCK, signals)
    try:
        yield
    finally:
        # pending signals are delivered here
        signal.pthread_sigmask(signal.SIG_SETMASK, previous)


def _raise_interrupt(signum, frame):
    raise RunInterrupted(signum)


@contextmanager
def cleanup_guard(registry: TempRegistry, signals=(signal.SIGINT, signal.SIGTERM)):
    """
    Wrap a run so that `registry` is cleaned up on every exit path.

    While the block runs, SIGINT and SIGTERM raise `RunInterrupted` instead of
    killing the process. When the block is left (normally, through an error or
    through a signal) the previous handlers are restored first and the registry
    is cleaned up exactly once afterwards.
    """
    previous = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, _raise_interrupt)

    try:
        yield registry
    finally:
        try:
            for signum, handler in previous.items():
                signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        finally:
            logger.info("Cleaning up temporary files before exiting..")
            registry.cleanup()
            logger.info("Done")
