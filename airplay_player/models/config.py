"""Player configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from mashumaro.mixins.orjson import DataClassORJSONMixin

DEFAULT_GST_DEBUG = "3"
DEFAULT_MIN_GST_VERSION = (1, 10)
DEFAULT_AUDIO_SINK = "autoaudiosink"
DEFAULT_VIDEO_SINK = "autovideosink"


@dataclass
class PlayerConfig(DataClassORJSONMixin):
    """
    Configuration for the GStreamer runtime and the rendering pipelines.

    Can be loaded from a JSON document with ``PlayerConfig.from_json``.
    """

    gst_debug: str = DEFAULT_GST_DEBUG
    """Value exported as GST_DEBUG before the runtime is initialized."""
    plugin_paths: list[str] = field(default_factory=list)
    """Extra plugin directories, prepended to GST_PLUGIN_PATH."""
    min_gst_version: tuple[int, int] = DEFAULT_MIN_GST_VERSION
    """Minimum (major, minor) GStreamer version the runtime must provide."""
    audio_sink: str = DEFAULT_AUDIO_SINK
    """Sink element terminating both audio pipelines."""
    video_sink: str = DEFAULT_VIDEO_SINK
    """Sink element used by the default video pipeline builder."""

    def __post_init__(self) -> None:
        """Validate field values."""
        if not self.audio_sink:
            raise ValueError("audio_sink cannot be empty")
        if not self.video_sink:
            raise ValueError("video_sink cannot be empty")
        if len(self.min_gst_version) != 2 or any(v < 0 for v in self.min_gst_version):
            raise ValueError(f"Invalid min_gst_version: {self.min_gst_version}")
