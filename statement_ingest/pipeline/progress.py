from collections.abc import Callable

from statement_ingest.logging.logger import Log

ProgressCallback = Callable[[int, str], None]


class ProgressReporter:
    """Forwards progress to the caller's callback without ever going backwards.

    Callback errors are logged and swallowed so a broken UI hook cannot fail
    the run.
    """

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self._percent = 0
        self._closed = False

    @property
    def percent(self) -> int:
        return self._percent

    def report(self, percent: int, label: str) -> None:
        if self._closed:
            return
        self._percent = max(self._percent, min(100, percent))
        if self._callback is None:
            return
        try:
            self._callback(self._percent, label)
        except Exception:
            Log.exception("Progress callback raised", label=label)

    def finish(self, label: str) -> None:
        """Report 100 and ignore every later report."""
        self.report(100, label)
        self._closed = True
