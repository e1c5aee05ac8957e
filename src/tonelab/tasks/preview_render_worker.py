"""Worker that executes preview renders on a background thread."""

from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from ..core.adjustments import Adjustments
from ..core.preview_backends import PreviewBackend, PreviewSession
from ..utils.logging import get_logger

logger = get_logger(__name__)


class PreviewRenderSignals(QObject):
    """Signals emitted by :class:`PreviewRenderWorker`."""

    finished = Signal(object, int)
    """Emitted with the rendered :class:`PixelBuffer` and the job identifier."""

    failed = Signal(int, str)
    """Emitted with the job identifier and error message when rendering raises."""


class PreviewRenderWorker(QRunnable):
    """Render one adjustment snapshot using ``PreviewBackend.render``."""

    def __init__(
        self,
        backend: PreviewBackend,
        session: PreviewSession,
        adjustments: Adjustments,
        job_id: int,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._session = session
        self._adjustments = adjustments
        self._job_id = job_id
        self.signals = PreviewRenderSignals()

    @property
    def job_id(self) -> int:
        return self._job_id

    @property
    def session(self) -> PreviewSession:
        """Expose the session so callers can manage resource lifetimes."""

        return self._session

    def run(self) -> None:  # type: ignore[override]
        """Render the adjusted frame and notify listeners when done."""

        try:
            result = self._backend.render(self._session, self._adjustments)
        except Exception as exc:
            logger.exception("Preview render %d failed", self._job_id)
            self.signals.failed.emit(self._job_id, str(exc))
            return
        self.signals.finished.emit(result, self._job_id)


__all__ = ["PreviewRenderSignals", "PreviewRenderWorker"]
