"""Models for enum types used by the AirPlay player."""

from __future__ import annotations

from enum import Enum


class CompressionType(Enum):
    """
    Audio compression type announced by the sender.

    Values are the ``ct`` codes carried in the RTSP SETUP request. Only ALAC and
    AAC_ELD have a rendering pipeline; the remaining members exist so that an
    unsupported announcement can be represented and rejected when audio arrives.
    """

    LPCM = 1
    """Uncompressed PCM."""
    ALAC = 2
    """Apple Lossless, used for music streaming."""
    AAC = 4
    """AAC-LC."""
    AAC_ELD = 8
    """AAC Enhanced Low Delay, used for screen mirroring."""
    OPUS = 32
    """Opus."""

    @classmethod
    def from_code(cls, code: int) -> CompressionType:
        """Decode the ``ct`` value from a SETUP request."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown compression type code: {code}") from None


class PlaylistState(Enum):
    """Enum for media playlist states."""

    NONE = "none"
    """No playlist pipeline exists."""
    PLAYING = "playing"
    PAUSED = "paused"
