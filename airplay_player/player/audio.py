"""Audio pipeline control and routing by compression type."""

from __future__ import annotations

import logging
import threading
from contextlib import suppress

from airplay_player.models import AudioStreamInfo, CompressionType
from airplay_player.models.config import DEFAULT_AUDIO_SINK

from .caps import (
    AAC_ELD_CAPS,
    AAC_ELD_DECODER,
    AAC_ELD_SOURCE_NAME,
    ALAC_CAPS,
    ALAC_DECODER,
    ALAC_SOURCE_NAME,
)
from .engine import MediaEngine, PipelineHandle, PipelineSpec
from .errors import PipelineError, UnhandledCompressionError

logger = logging.getLogger(__name__)


class StreamFormatState:
    """Compression type negotiated for the current audio session."""

    def __init__(self) -> None:
        """Initialize with no compression type recorded."""
        self._lock = threading.Lock()
        self._compression_type: CompressionType | None = None

    @property
    def compression_type(self) -> CompressionType | None:
        """The recorded compression type, or None before the first announcement."""
        with self._lock:
            return self._compression_type

    def set(self, compression_type: CompressionType) -> None:
        """Record the compression type announced by the sender."""
        with self._lock:
            self._compression_type = compression_type

    def clear(self) -> None:
        """Forget the compression type at the end of a session."""
        with self._lock:
            self._compression_type = None


def build_audio_pipeline_spec(
    compression_type: CompressionType, sink: str = DEFAULT_AUDIO_SINK
) -> PipelineSpec:
    """Return the pipeline decoding one of the routable compression types."""
    match compression_type:
        case CompressionType.ALAC:
            source_name, decoder, caps = ALAC_SOURCE_NAME, ALAC_DECODER, ALAC_CAPS
        case CompressionType.AAC_ELD:
            source_name, decoder, caps = AAC_ELD_SOURCE_NAME, AAC_ELD_DECODER, AAC_ELD_CAPS
        case _:
            raise UnhandledCompressionError(
                f"No audio pipeline for compression type {compression_type.name}"
            )
    return PipelineSpec(
        description=(
            f"appsrc name={source_name} ! {decoder} ! audioconvert ! audioresample ! "
            f"{sink} sync=false"
        ),
        source_name=source_name,
        caps=caps,
    )


class AudioPipelineController:
    """
    Owns one pipeline per routable compression type.

    Both pipelines are started together on a format announcement so that every
    buffer can be routed from the recorded compression type alone, and both are
    stopped and released on disconnect. A later announcement builds fresh ones.
    """

    ROUTABLE_TYPES = (CompressionType.ALAC, CompressionType.AAC_ELD)

    def __init__(
        self,
        engine: MediaEngine,
        *,
        sink: str = DEFAULT_AUDIO_SINK,
        format_state: StreamFormatState | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Build the (unstarted) pipelines for every routable compression type."""
        self._engine = engine
        self._logger = log or logger
        self._sink = sink
        self._format_state = format_state or StreamFormatState()
        self._lock = threading.Lock()
        self._playing = False
        self._handles: dict[CompressionType, PipelineHandle] | None = self._build_pipelines()

    @property
    def format_state(self) -> StreamFormatState:
        """The negotiated stream format."""
        return self._format_state

    @property
    def is_playing(self) -> bool:
        """Whether the pipelines have been started and not stopped since."""
        return self._playing

    def on_format(self, info: AudioStreamInfo) -> None:
        """
        Record the compression type and start both pipelines.

        If either pipeline fails to start, both are stopped and released and the
        recorded type is cleared, so the next announcement starts from scratch.

        Raises:
            PipelineError: If the engine cannot start a pipeline.
        """
        if info.compression_type not in self.ROUTABLE_TYPES:
            self._logger.warning(
                "Compression type %s has no audio pipeline, its buffers will be rejected",
                info.compression_type.name,
            )
        with self._lock:
            self._format_state.set(info.compression_type)
            if self._playing:
                self._logger.debug("Audio pipelines already playing")
                return
            try:
                if self._handles is None:
                    self._handles = self._build_pipelines()
                for handle in self._handles.values():
                    self._engine.start(handle)
            except PipelineError:
                self._logger.error(
                    "Failed to start audio pipelines for %s", info.compression_type.name
                )
                for handle in (self._handles or {}).values():
                    with suppress(PipelineError):
                        self._engine.stop(handle)
                self._handles = None
                self._format_state.clear()
                raise
            self._playing = True
        self._logger.info("Audio pipelines started for %s", info.compression_type.name)

    def on_buffer(self, data: bytes) -> None:
        """
        Push one audio frame into the pipeline matching the compression type.

        Raises:
            UnhandledCompressionError: If no compression type is recorded or it has
                no pipeline.
        """
        with self._lock:
            compression_type = self._format_state.compression_type
            match compression_type:
                case CompressionType.ALAC | CompressionType.AAC_ELD:
                    pass
                case None:
                    raise UnhandledCompressionError(
                        "Audio buffer received before audio format"
                    )
                case _:
                    raise UnhandledCompressionError(
                        f"No audio pipeline for compression type {compression_type.name}"
                    )
            # the type is only recorded together with starting the pipelines
            assert self._handles is not None
            self._engine.push(self._handles[compression_type], data)

    def on_disconnect(self) -> None:
        """Stop and release both pipelines."""
        with self._lock:
            self._format_state.clear()
            if not self._playing:
                self._logger.debug("Audio pipelines already stopped")
                return
            assert self._handles is not None
            for handle in self._handles.values():
                self._engine.stop(handle)
            self._handles = None
            self._playing = False
        self._logger.info("Audio pipelines stopped")

    def _build_pipelines(self) -> dict[CompressionType, PipelineHandle]:
        return {
            compression_type: self._engine.build_pipeline(
                build_audio_pipeline_spec(compression_type, self._sink)
            )
            for compression_type in self.ROUTABLE_TYPES
        }
