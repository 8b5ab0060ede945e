from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from airplay_player.player.consumer import GstPlayer
from airplay_player.player.engine import MediaEngine, PipelineSpec, SeekFlags
from airplay_player.player.errors import PipelineError
from airplay_player.player.video import HeadlessVideoPipelineBuilder


@dataclass(eq=False)
class FakeHandle:
    spec: PipelineSpec | None = None
    uri: str | None = None
    state: str = "null"
    pushed: list[bytes] = field(default_factory=list)
    seeks: list[tuple[SeekFlags, int]] = field(default_factory=list)
    duration_ns: int | None = 120 * 1_000_000_000
    position_ns: int = 0
    history: list[str] = field(default_factory=list)


class FakeMediaEngine(MediaEngine):
    """Records every request instead of rendering anything."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []
        self.fail_start_for: set[str] = set()
        self.fail_stop_for: set[str] = set()

    def build_pipeline(self, spec: PipelineSpec) -> FakeHandle:
        handle = FakeHandle(spec=spec)
        self.handles.append(handle)
        return handle

    def build_playbin(self, uri: str) -> FakeHandle:
        if "://" not in uri:
            raise PipelineError(f"Invalid media URI: {uri!r}")
        handle = FakeHandle(uri=uri)
        self.handles.append(handle)
        return handle

    def start(self, handle: FakeHandle) -> None:
        if self._key(handle) in self.fail_start_for:
            raise PipelineError("Failed to set pipeline state to playing")
        handle.state = "playing"
        handle.history.append("start")

    def stop(self, handle: FakeHandle) -> None:
        if self._key(handle) in self.fail_stop_for:
            raise PipelineError("Failed to set pipeline state to null")
        handle.state = "null"
        handle.position_ns = 0
        handle.history.append("stop")

    def pause(self, handle: FakeHandle) -> None:
        handle.state = "paused"
        handle.history.append("pause")

    def is_playing(self, handle: FakeHandle) -> bool:
        return handle.state == "playing"

    def push(self, handle: FakeHandle, data: bytes) -> None:
        handle.pushed.append(data)

    def seek(self, handle: FakeHandle, flags: SeekFlags, position_ns: int) -> None:
        handle.seeks.append((flags, position_ns))
        handle.position_ns = position_ns

    def query_duration(self, handle: FakeHandle) -> int | None:
        return handle.duration_ns if handle.state != "null" else None

    def query_position(self, handle: FakeHandle) -> int | None:
        return handle.position_ns if handle.state != "null" else None

    @staticmethod
    def _key(handle: FakeHandle) -> str | None:
        """Playbins are keyed by URI, push pipelines by appsrc name."""
        if handle.uri is not None:
            return handle.uri
        return handle.spec.source_name if handle.spec is not None else None

    def playbins(self) -> list[FakeHandle]:
        return [handle for handle in self.handles if handle.uri is not None]

    def pipeline_by_source(self, source_name: str) -> list[FakeHandle]:
        return [
            handle
            for handle in self.handles
            if handle.spec is not None and handle.spec.source_name == source_name
        ]


@pytest.fixture
def engine() -> FakeMediaEngine:
    return FakeMediaEngine()


@pytest.fixture
def player(engine: FakeMediaEngine) -> GstPlayer:
    return GstPlayer(engine=engine, video_builder=HeadlessVideoPipelineBuilder())
