"""Playback orchestration for the AirPlay receiver."""

from .audio import AudioPipelineController, StreamFormatState
from .consumer import AirPlayConsumer, GstPlayer
from .engine import (
    GstMediaEngine,
    GstRuntime,
    MediaEngine,
    PipelineSpec,
    SeekFlags,
    gst_runtime,
)
from .errors import PipelineError, SequencingError, UnhandledCompressionError
from .playlist import PlaylistController
from .video import (
    AutoVideoPipelineBuilder,
    HeadlessVideoPipelineBuilder,
    MacOSVideoPipelineBuilder,
    VideoPipelineBuilder,
    VideoPipelineController,
)

__all__ = [
    "AirPlayConsumer",
    "AudioPipelineController",
    "AutoVideoPipelineBuilder",
    "GstMediaEngine",
    "GstPlayer",
    "GstRuntime",
    "HeadlessVideoPipelineBuilder",
    "MacOSVideoPipelineBuilder",
    "MediaEngine",
    "PipelineError",
    "PipelineSpec",
    "PlaylistController",
    "SeekFlags",
    "SequencingError",
    "StreamFormatState",
    "UnhandledCompressionError",
    "VideoPipelineBuilder",
    "VideoPipelineController",
    "gst_runtime",
]
