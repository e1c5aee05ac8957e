"""Preview backends for the edit pipeline."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from .adjustments import Adjustments
from .image_filters import apply_adjustments
from .pixel_buffer import PixelBuffer

_LOGGER = logging.getLogger(__name__)


class PreviewSession(ABC):
    """Represents a backend specific rendering context.

    A session holds whatever state must live between individual preview
    renders of one image.  The controller keeps it alive for as long as the
    image stays in the edit view.
    """

    @abstractmethod
    def dispose(self) -> None:
        """Release resources associated with the session."""


class PreviewBackend(ABC):
    """Abstract preview backend selecting the rendering strategy."""

    tier_name: str = "unknown"
    """Human readable tier label."""

    @abstractmethod
    def create_session(self, source: PixelBuffer) -> PreviewSession:
        """Create a rendering session for *source*."""

    @abstractmethod
    def render(self, session: PreviewSession, adjustments: Adjustments) -> PixelBuffer:
        """Apply *adjustments* to the session's source and return the result."""

    def dispose_session(self, session: PreviewSession) -> None:
        """Release resources owned by *session*."""

        session.dispose()


@dataclass
class CpuPreviewSession(PreviewSession):
    """Store a private copy of the original pixels for the CPU backend."""

    source: PixelBuffer
    rng: np.random.Generator | None = None

    def dispose(self) -> None:  # pragma: no cover - nothing to free
        return


class CpuPreviewBackend(PreviewBackend):
    """CPU implementation driving the compiled adjustment kernel."""

    tier_name = "CPU"

    def __init__(self, *, rng: np.random.Generator | None = None) -> None:
        self._rng = rng

    def create_session(self, source: PixelBuffer) -> PreviewSession:
        # Copy so the caller may reuse or mutate its buffer while renders run.
        return CpuPreviewSession(source.copy(), self._rng)

    def render(self, session: PreviewSession, adjustments: Adjustments) -> PixelBuffer:
        if not isinstance(session, CpuPreviewSession):
            raise TypeError(f"CpuPreviewBackend cannot render {type(session).__name__}")
        return apply_adjustments(session.source, adjustments, rng=session.rng)


def select_preview_backend() -> PreviewBackend:
    """Return the preview backend for this process."""

    backend = CpuPreviewBackend()
    _LOGGER.info("Using %s preview backend", backend.tier_name)
    return backend


__all__ = [
    "CpuPreviewBackend",
    "CpuPreviewSession",
    "PreviewBackend",
    "PreviewSession",
    "select_preview_backend",
]
