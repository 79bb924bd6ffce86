"""Singleton audio stream slot.

At most one audio brief plays at a time. Starting a stream stops and releases
the previous one first; stop() releases the current one. A stream is any
object exposing stop(); errors raised by stop() on an already-finished stream
are logged and do not prevent the slot from being cleared.
"""

from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


class AudioStream(Protocol):
    def stop(self) -> None: ...


class AudioSlot:
    """Holds the one active audio stream."""

    def __init__(self):
        self._active: AudioStream | None = None

    @property
    def active(self) -> AudioStream | None:
        return self._active

    @property
    def is_playing(self) -> bool:
        return self._active is not None

    def start(self, stream: AudioStream) -> AudioStream:
        """Make stream the active one, stopping whatever was playing."""
        self.stop()
        self._active = stream
        return stream

    def stop(self) -> None:
        stream, self._active = self._active, None
        if stream is None:
            return
        try:
            stream.stop()
        except Exception as e:
            logger.warning("audio_stop_failed", error=str(e), error_type=type(e).__name__)

    def finished(self, stream: AudioStream) -> None:
        """Playback ended on its own; clear the slot if stream is still the active one."""
        if self._active is stream:
            self._active = None


class BufferedAudio:
    """An audio brief held in memory as the active stream."""

    def __init__(self, data: bytes, mime_type: str):
        self.data = data
        self.mime_type = mime_type
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True
