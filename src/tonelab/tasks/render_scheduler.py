"""Coalesce rapid adjustment changes into at most one running render.

Slider drags produce snapshots far faster than a full-buffer render finishes.
The scheduler keeps a single pending slot: each :meth:`submit` overwrites it,
and whenever no render is running the slot is drained into a worker.  A
result is only published if no newer snapshot arrived while it was being
computed, so the view always converges on the latest edit without rendering
every intermediate one.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, QThreadPool, Signal

from ..core.adjustments import Adjustments
from ..core.pixel_buffer import PixelBuffer
from ..core.preview_backends import PreviewBackend, PreviewSession, select_preview_backend
from ..utils.logging import get_logger
from .preview_render_worker import PreviewRenderWorker

_LOGGER = get_logger(__name__)


class PreviewRenderScheduler(QObject):
    """Single-slot, last-writer-wins render queue for one preview session."""

    frame_ready = Signal(object, int)
    """Emitted with the rendered buffer and the generation it belongs to."""

    render_failed = Signal(int, str)
    """Emitted when the render for the latest generation raised."""

    def __init__(
        self,
        backend: PreviewBackend,
        session: PreviewSession,
        *,
        pool: QThreadPool | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._backend = backend
        self._session = session
        self._pool = pool if pool is not None else QThreadPool.globalInstance()
        self._generation = 0
        self._pending: tuple[Adjustments, int] | None = None
        self._active: PreviewRenderWorker | None = None

    @classmethod
    def for_source(
        cls,
        source: PixelBuffer,
        *,
        pool: QThreadPool | None = None,
        parent: QObject | None = None,
    ) -> PreviewRenderScheduler:
        """Open a session for *source* on the process preview backend."""

        backend = select_preview_backend()
        return cls(backend, backend.create_session(source), pool=pool, parent=parent)

    @property
    def backend(self) -> PreviewBackend:
        return self._backend

    @property
    def generation(self) -> int:
        return self._generation

    def is_busy(self) -> bool:
        return self._active is not None

    def has_pending(self) -> bool:
        return self._pending is not None

    # ------------------------------------------------------------------
    def submit(self, adjustments: Adjustments) -> int:
        """Queue *adjustments* for rendering, replacing any pending snapshot."""

        self._generation += 1
        if self._pending is not None:
            _LOGGER.debug("Dropping pending preview generation %d", self._pending[1])
        self._pending = (adjustments, self._generation)
        if self._active is None:
            self._drain()
        return self._generation

    def _drain(self) -> None:
        if self._pending is None:
            return
        adjustments, job_id = self._pending
        self._pending = None

        worker = PreviewRenderWorker(self._backend, self._session, adjustments, job_id)
        worker.signals.finished.connect(self._on_worker_finished)
        worker.signals.failed.connect(self._on_worker_failed)
        # Keep a Python reference so the signals object outlives the run.
        self._active = worker
        self._pool.start(worker)

    def _on_worker_finished(self, result: PixelBuffer, job_id: int) -> None:
        self._active = None
        if job_id == self._generation:
            self.frame_ready.emit(result, job_id)
        else:
            _LOGGER.debug("Discarding stale preview %d (latest %d)", job_id, self._generation)
        self._drain()

    def _on_worker_failed(self, job_id: int, message: str) -> None:
        self._active = None
        if job_id == self._generation:
            self.render_failed.emit(job_id, message)
        self._drain()

    def dispose(self) -> None:
        """Forget pending work and release the session.

        A render that is already running finishes in the pool, but its result
        is ignored because the generation no longer matches.
        """

        self._pending = None
        self._generation += 1
        self._backend.dispose_session(self._session)


__all__ = ["PreviewRenderScheduler"]
