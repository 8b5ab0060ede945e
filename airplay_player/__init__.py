"""GStreamer playback for AirPlay receivers."""

from .models import AudioStreamInfo, CompressionType, PlaybackInfo, PlayerConfig, VideoStreamInfo
from .player import AirPlayConsumer, GstPlayer, gst_runtime

__all__ = [
    "AirPlayConsumer",
    "AudioStreamInfo",
    "CompressionType",
    "GstPlayer",
    "PlaybackInfo",
    "PlayerConfig",
    "VideoStreamInfo",
    "gst_runtime",
]
