"""
Stream messages exchanged between the protocol layer and the player.

The protocol layer announces the negotiated video and audio formats with these
descriptors before it starts delivering buffers, and reads PlaybackInfo back
when the sender polls the playback state of an on-demand media playlist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from mashumaro.config import BaseConfig
from mashumaro.mixins.orjson import DataClassORJSONMixin
from mashumaro.types import Alias

from .types import CompressionType


@dataclass
class VideoStreamInfo(DataClassORJSONMixin):
    """Video format announcement - H.264 is the only supported codec."""

    stream_connection_id: int | None = None
    """Stream connection identifier from the SETUP request, if provided."""

    class Config(BaseConfig):
        """Config for parsing json messages."""

        omit_none = True


@dataclass
class AudioStreamInfo(DataClassORJSONMixin):
    """Audio format announcement."""

    compression_type: CompressionType
    """Negotiated compression type; selects the pipeline audio buffers are routed to."""
    audio_format: int | None = None
    """Audio format bitmask from the SETUP request, if provided."""
    samples_per_frame: int | None = None
    """Samples per frame (352 for ALAC, 480 for AAC-ELD), if provided."""

    def __post_init__(self) -> None:
        """Validate field values."""
        if self.samples_per_frame is not None and self.samples_per_frame <= 0:
            raise ValueError(
                f"samples_per_frame must be positive, got {self.samples_per_frame}"
            )

    class Config(BaseConfig):
        """Config for parsing json messages."""

        omit_none = True


@dataclass
class PlaybackInfo(DataClassORJSONMixin):
    """
    Playback state of the current media playlist.

    The default instance is the sentinel reported when no playlist pipeline exists.
    """

    duration_seconds: Annotated[float, Alias("durationSeconds")] = 0.0
    """Duration of the media in seconds, 0 when unknown."""
    position_seconds: Annotated[float, Alias("positionSeconds")] = 0.0
    """Current playback position in seconds, 0 when unknown."""

    class Config(BaseConfig):
        """Config for serializing to the wire format."""

        serialize_by_alias = True
