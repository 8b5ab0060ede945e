"""On-demand media playlist control."""

from __future__ import annotations

import logging
import math
import threading
from contextlib import suppress

from airplay_player.models import PlaybackInfo, PlaylistState

from .engine import MediaEngine, PipelineHandle, SeekFlags
from .errors import PipelineError, SequencingError

logger = logging.getLogger(__name__)

NANOSECONDS_PER_SECOND = 1_000_000_000


def _to_seconds(value_ns: int | None) -> float:
    """Convert an engine time value to seconds, reporting unknown values as 0."""
    if value_ns is None or value_ns < 0:
        return 0.0
    return value_ns / NANOSECONDS_PER_SECOND


class PlaylistController:
    """
    Owns at most one playlist pipeline.

    Unlike the push pipelines, the playlist pipeline fetches its media itself.
    Transport commands act on whichever pipeline is current when they arrive.
    """

    def __init__(self, engine: MediaEngine, *, log: logging.Logger | None = None) -> None:
        """Initialize with an empty playlist slot."""
        self._engine = engine
        self._logger = log or logger
        self._lock = threading.Lock()
        self._handle: PipelineHandle | None = None
        self._uri: str | None = None

    @property
    def uri(self) -> str | None:
        """URI of the current playlist, if any."""
        return self._uri

    @property
    def state(self) -> PlaylistState:
        """Current state of the playlist slot."""
        with self._lock:
            handle = self._handle
        if handle is None:
            return PlaylistState.NONE
        return PlaylistState.PLAYING if self._engine.is_playing(handle) else PlaylistState.PAUSED

    def on_playlist(self, uri: str) -> None:
        """
        Start playing ``uri``, replacing the current playlist.

        The previous pipeline is stopped once the new one has started. If the new
        pipeline cannot be built or started the current one keeps playing. A
        failure to stop the previous pipeline is logged and not raised.

        Raises:
            PipelineError: If the engine cannot build or start a pipeline for ``uri``.
        """
        with self._lock:
            handle = self._engine.build_playbin(uri)
            try:
                self._engine.start(handle)
            except PipelineError:
                self._logger.error("Failed to start playlist %s", uri)
                with suppress(PipelineError):
                    self._engine.stop(handle)
                raise
            previous, previous_uri = self._handle, self._uri
            self._handle, self._uri = handle, uri
            if previous is not None:
                self._logger.info("Replacing playlist %s", previous_uri)
                try:
                    self._engine.stop(previous)
                except PipelineError as err:
                    self._logger.warning(
                        "Failed to stop replaced playlist %s: %s", previous_uri, err
                    )
        self._logger.info("Playing playlist %s", uri)

    def on_remove(self) -> None:
        """Stop and release the current playlist pipeline, if any."""
        with self._lock:
            handle, uri = self._handle, self._uri
            if handle is None:
                self._logger.debug("No playlist to remove")
                return
            self._handle, self._uri = None, None
            self._engine.stop(handle)
        self._logger.info("Removed playlist %s", uri)

    def on_pause(self) -> None:
        """Pause the current playlist if it is playing."""
        with self._lock:
            if self._handle is None or not self._engine.is_playing(self._handle):
                self._logger.debug("Ignoring pause, no playing playlist")
                return
            self._engine.pause(self._handle)
        self._logger.debug("Playlist paused")

    def on_resume(self) -> None:
        """Resume the current playlist if it is not playing."""
        with self._lock:
            if self._handle is None or self._engine.is_playing(self._handle):
                self._logger.debug("Ignoring resume, no paused playlist")
                return
            self._engine.start(self._handle)
        self._logger.debug("Playlist resumed")

    def on_scrub(self, position_seconds: float) -> None:
        """
        Seek the current playlist to an absolute position.

        The seek flushes queued data and lands on the nearest key unit.

        Raises:
            SequencingError: If there is no playlist pipeline.
            ValueError: If the position is negative or not finite.
        """
        if not math.isfinite(position_seconds) or position_seconds < 0:
            raise ValueError(f"Invalid seek position: {position_seconds}")
        position_ns = int(position_seconds * NANOSECONDS_PER_SECOND)
        with self._lock:
            if self._handle is None:
                raise SequencingError("Seek requested without a media playlist")
            self._engine.seek(self._handle, SeekFlags.FLUSH | SeekFlags.KEY_UNIT, position_ns)
        self._logger.debug("Playlist seek to %.3fs", position_seconds)

    def query_playback_info(self) -> PlaybackInfo:
        """Return duration and position of the current playlist, or the sentinel."""
        with self._lock:
            handle = self._handle
        if handle is None:
            return PlaybackInfo()
        return PlaybackInfo(
            duration_seconds=_to_seconds(self._engine.query_duration(handle)),
            position_seconds=_to_seconds(self._engine.query_position(handle)),
        )
