"""Video pipeline control and per-target rendering graphs."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from airplay_player.models import VideoStreamInfo
from airplay_player.models.config import DEFAULT_VIDEO_SINK

from .caps import H264_CAPS, H264_SOURCE_NAME
from .engine import MediaEngine, PipelineSpec
from .errors import SequencingError

logger = logging.getLogger(__name__)


class VideoPipelineBuilder(Protocol):
    """Builds the rendering graph that consumes the H.264 input stage."""

    def build_description(self) -> str:
        """Return the graph downstream of the appsrc, in gst-launch syntax."""
        ...


class AutoVideoPipelineBuilder:
    """Software decoding into an automatically selected video sink."""

    def __init__(self, sink: str = DEFAULT_VIDEO_SINK) -> None:
        """Initialize the builder with the sink element to render into."""
        self._sink = sink

    def build_description(self) -> str:
        """Return the graph downstream of the appsrc."""
        return f"h264parse ! avdec_h264 ! videoconvert ! {self._sink} sync=false"


class MacOSVideoPipelineBuilder:
    """VideoToolbox hardware decoding rendered in a native macOS window."""

    def build_description(self) -> str:
        """Return the graph downstream of the appsrc."""
        return "h264parse ! vtdec ! videoconvert ! osxvideosink sync=false"


class HeadlessVideoPipelineBuilder:
    """Decode without rendering, for receivers without a display."""

    def build_description(self) -> str:
        """Return the graph downstream of the appsrc."""
        return "h264parse ! avdec_h264 ! fakesink sync=false"


def build_video_pipeline_spec(builder: VideoPipelineBuilder) -> PipelineSpec:
    """Join the fixed H.264 input stage with the target's rendering graph."""
    return PipelineSpec(
        description=f"appsrc name={H264_SOURCE_NAME} ! {builder.build_description()}",
        source_name=H264_SOURCE_NAME,
        caps=H264_CAPS,
    )


class VideoPipelineController:
    """
    Owns the H.264 pipeline.

    The pipeline is started by a format announcement, fed while playing and
    stopped on disconnect. It can be started again by the next announcement.
    """

    def __init__(
        self,
        engine: MediaEngine,
        builder: VideoPipelineBuilder,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        """Build the (unstarted) video pipeline."""
        self._engine = engine
        self._logger = log or logger
        self._lock = threading.Lock()
        self._handle = engine.build_pipeline(build_video_pipeline_spec(builder))
        self._playing = False

    @property
    def is_playing(self) -> bool:
        """Whether the pipeline has been started and not stopped since."""
        return self._playing

    def on_format(self, info: VideoStreamInfo) -> None:
        """Start the pipeline unless it is already playing."""
        with self._lock:
            if self._playing:
                self._logger.debug("Video pipeline already playing")
                return
            self._engine.start(self._handle)
            self._playing = True
        self._logger.info(
            "Video pipeline started (stream connection %s)", info.stream_connection_id
        )

    def on_buffer(self, data: bytes) -> None:
        """
        Push one access unit into the pipeline.

        Raises:
            SequencingError: If no format has been announced since the last disconnect.
        """
        with self._lock:
            if not self._playing:
                self._logger.warning(
                    "Rejecting video buffer (%d bytes) before format announcement", len(data)
                )
                raise SequencingError("Video buffer received before video format")
            self._engine.push(self._handle, data)

    def on_disconnect(self) -> None:
        """Stop the pipeline if it is playing."""
        with self._lock:
            if not self._playing:
                self._logger.debug("Video pipeline already stopped")
                return
            self._engine.stop(self._handle)
            self._playing = False
        self._logger.info("Video pipeline stopped")
