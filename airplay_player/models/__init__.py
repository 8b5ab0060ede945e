"""Models for the AirPlay player."""

from __future__ import annotations

__all__ = [
    "AudioStreamInfo",
    "CompressionType",
    "PlaybackInfo",
    "PlayerConfig",
    "PlaylistState",
    "VideoStreamInfo",
    "config",
    "stream",
    "types",
]

from . import config, stream, types
from .config import PlayerConfig
from .stream import AudioStreamInfo, PlaybackInfo, VideoStreamInfo
from .types import CompressionType, PlaylistState
