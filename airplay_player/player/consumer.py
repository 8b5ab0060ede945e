"""Consumer contract of the AirPlay protocol layer and its GStreamer player."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from airplay_player.models import AudioStreamInfo, PlaybackInfo, PlayerConfig, VideoStreamInfo

from .audio import AudioPipelineController
from .engine import GstMediaEngine, MediaEngine
from .playlist import PlaylistController
from .video import AutoVideoPipelineBuilder, VideoPipelineBuilder, VideoPipelineController

logger = logging.getLogger(__name__)


class AirPlayConsumer(ABC):
    """
    Receives the events the protocol layer extracts from an AirPlay session.

    Video and audio are pushed as encoded buffers after a format announcement.
    Media playlists are announced by URI and then driven by transport commands.
    """

    @abstractmethod
    def on_video_format(self, info: VideoStreamInfo) -> None:
        """Video stream negotiated; buffers follow."""

    @abstractmethod
    def on_video(self, data: bytes) -> None:
        """One encoded H.264 access unit."""

    @abstractmethod
    def on_video_src_disconnect(self) -> None:
        """Video stream ended."""

    @abstractmethod
    def on_audio_format(self, info: AudioStreamInfo) -> None:
        """Audio stream negotiated; buffers follow."""

    @abstractmethod
    def on_audio(self, data: bytes) -> None:
        """One encoded audio frame."""

    @abstractmethod
    def on_audio_src_disconnect(self) -> None:
        """Audio stream ended."""

    @abstractmethod
    def on_media_playlist(self, uri: str) -> None:
        """Play the media playlist at ``uri``, replacing the current one."""

    @abstractmethod
    def on_media_playlist_remove(self) -> None:
        """Stop the media playlist."""

    @abstractmethod
    def on_media_playlist_pause(self) -> None:
        """Pause the media playlist."""

    @abstractmethod
    def on_media_playlist_resume(self) -> None:
        """Resume the media playlist."""

    @abstractmethod
    def on_media_scrub(self, position_seconds: float) -> None:
        """Seek the media playlist to ``position_seconds``."""

    def playback_info(self) -> PlaybackInfo:
        """Return the playback state of the media playlist."""
        return PlaybackInfo()


class GstPlayer(AirPlayConsumer):
    """AirPlayConsumer that renders every stream with GStreamer pipelines."""

    def __init__(
        self,
        *,
        config: PlayerConfig | None = None,
        engine: MediaEngine | None = None,
        video_builder: VideoPipelineBuilder | None = None,
    ) -> None:
        """
        Build the player and its (unstarted) push pipelines.

        Args:
            config: Player configuration, defaults to ``PlayerConfig()``.
            engine: Media engine, defaults to a ``GstMediaEngine`` on the
                process-wide runtime, which must already be initialized.
            video_builder: Rendering graph for the video stream, defaults to an
                ``AutoVideoPipelineBuilder`` using the configured video sink.

        Raises:
            PipelineError: If a push pipeline cannot be built.
        """
        self._config = config or PlayerConfig()
        self._engine = engine or GstMediaEngine()
        video_builder = video_builder or AutoVideoPipelineBuilder(self._config.video_sink)
        self._video = VideoPipelineController(
            self._engine, video_builder, log=logger.getChild("video")
        )
        self._audio = AudioPipelineController(
            self._engine, sink=self._config.audio_sink, log=logger.getChild("audio")
        )
        self._playlist = PlaylistController(self._engine, log=logger.getChild("playlist"))
        logger.debug("GstPlayer initialized with %s", type(self._engine).__name__)

    @property
    def video(self) -> VideoPipelineController:
        """The video pipeline controller."""
        return self._video

    @property
    def audio(self) -> AudioPipelineController:
        """The audio pipeline controller."""
        return self._audio

    @property
    def playlist(self) -> PlaylistController:
        """The media playlist controller."""
        return self._playlist

    def on_video_format(self, info: VideoStreamInfo) -> None:
        self._video.on_format(info)

    def on_video(self, data: bytes) -> None:
        self._video.on_buffer(data)

    def on_video_src_disconnect(self) -> None:
        self._video.on_disconnect()

    def on_audio_format(self, info: AudioStreamInfo) -> None:
        self._audio.on_format(info)

    def on_audio(self, data: bytes) -> None:
        self._audio.on_buffer(data)

    def on_audio_src_disconnect(self) -> None:
        self._audio.on_disconnect()

    def on_media_playlist(self, uri: str) -> None:
        self._playlist.on_playlist(uri)

    def on_media_playlist_remove(self) -> None:
        self._playlist.on_remove()

    def on_media_playlist_pause(self) -> None:
        self._playlist.on_pause()

    def on_media_playlist_resume(self) -> None:
        self._playlist.on_resume()

    def on_media_scrub(self, position_seconds: float) -> None:
        self._playlist.on_scrub(position_seconds)

    def playback_info(self) -> PlaybackInfo:
        return self._playlist.query_playback_info()
