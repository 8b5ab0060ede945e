from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from airplay_player.models import (
    AudioStreamInfo,
    CompressionType,
    PlaybackInfo,
    PlayerConfig,
    VideoStreamInfo,
)
from airplay_player.player.caps import ALAC_SOURCE_NAME, H264_SOURCE_NAME
from airplay_player.player.consumer import AirPlayConsumer, GstPlayer
from airplay_player.player.errors import SequencingError
from airplay_player.player.video import HeadlessVideoPipelineBuilder

if TYPE_CHECKING:
    from .conftest import FakeMediaEngine


class _NullConsumer(AirPlayConsumer):
    def on_video_format(self, info: VideoStreamInfo) -> None: ...
    def on_video(self, data: bytes) -> None: ...
    def on_video_src_disconnect(self) -> None: ...
    def on_audio_format(self, info: AudioStreamInfo) -> None: ...
    def on_audio(self, data: bytes) -> None: ...
    def on_audio_src_disconnect(self) -> None: ...
    def on_media_playlist(self, uri: str) -> None: ...
    def on_media_playlist_remove(self) -> None: ...
    def on_media_playlist_pause(self) -> None: ...
    def on_media_playlist_resume(self) -> None: ...
    def on_media_scrub(self, position_seconds: float) -> None: ...


def test_default_playback_info_is_sentinel() -> None:
    assert _NullConsumer().playback_info() == PlaybackInfo(0.0, 0.0)


def test_player_builds_push_pipelines_up_front(engine: FakeMediaEngine) -> None:
    GstPlayer(
        engine=engine,
        config=PlayerConfig(audio_sink="fakesink"),
        video_builder=HeadlessVideoPipelineBuilder(),
    )
    assert len(engine.handles) == 3
    assert all(handle.state == "null" for handle in engine.handles)
    assert all(
        handle.spec.description.endswith("fakesink sync=false") for handle in engine.handles
    )


def test_default_video_builder_uses_configured_sink(engine: FakeMediaEngine) -> None:
    GstPlayer(engine=engine, config=PlayerConfig(video_sink="waylandsink"))
    (video,) = engine.pipeline_by_source(H264_SOURCE_NAME)
    assert video.spec.description.endswith("waylandsink sync=false")


def test_mirroring_session(player: GstPlayer, engine: FakeMediaEngine) -> None:
    player.on_video_format(VideoStreamInfo(stream_connection_id=42))
    player.on_audio_format(AudioStreamInfo(compression_type=CompressionType.ALAC))
    player.on_video(b"\x00\x00\x00\x01idr")
    player.on_audio(b"alac-frame")
    player.on_video(b"\x00\x00\x00\x01p")

    (video,) = engine.pipeline_by_source(H264_SOURCE_NAME)
    (alac,) = engine.pipeline_by_source(ALAC_SOURCE_NAME)
    assert video.pushed == [b"\x00\x00\x00\x01idr", b"\x00\x00\x00\x01p"]
    assert alac.pushed == [b"alac-frame"]

    player.on_video_src_disconnect()
    player.on_video_src_disconnect()
    player.on_audio_src_disconnect()
    assert not player.video.is_playing
    assert not player.audio.is_playing


def test_video_before_format_propagates(player: GstPlayer) -> None:
    with pytest.raises(SequencingError):
        player.on_video(b"frame")


def test_playlist_session(player: GstPlayer, engine: FakeMediaEngine) -> None:
    assert player.playback_info() == PlaybackInfo()

    player.on_media_playlist("http://x/a.m3u8")
    player.on_media_playlist_pause()
    player.on_media_playlist_pause()
    player.on_media_playlist_resume()
    player.on_media_scrub(30.0)

    info = player.playback_info()
    assert info.duration_seconds == 120.0
    assert info.position_seconds == 30.0

    player.on_media_playlist_remove()
    assert player.playback_info() == PlaybackInfo()
    (playbin,) = engine.playbins()
    assert playbin.history == ["start", "pause", "start", "stop"]


def test_scrub_without_playlist_propagates(player: GstPlayer) -> None:
    with pytest.raises(SequencingError):
        player.on_media_scrub(1.0)


def test_controllers_log_through_player_children(
    player: GstPlayer, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="airplay_player.player.consumer"):
        player.on_video_format(VideoStreamInfo())
        player.on_audio_format(AudioStreamInfo(compression_type=CompressionType.ALAC))
        player.on_media_playlist("http://x/a.m3u8")

    assert {record.name for record in caplog.records} == {
        "airplay_player.player.consumer.video",
        "airplay_player.player.consumer.audio",
        "airplay_player.player.consumer.playlist",
    }
