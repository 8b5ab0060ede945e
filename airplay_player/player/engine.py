"""
Media engine abstraction and its GStreamer implementation.

The controllers only talk to the ``MediaEngine`` interface: they describe the
pipeline they need, receive an opaque handle, and issue fire-and-forget state
changes against it. ``GstMediaEngine`` maps these requests onto GStreamer via
PyGObject. The process-wide GStreamer initialization lives in ``GstRuntime``
and must be performed explicitly, once, before the first ``GstMediaEngine`` is
created.
"""

from __future__ import annotations

import logging
import os
import threading
import types
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Flag, auto
from typing import Any, TypeAlias

from airplay_player.models import PlayerConfig

from .caps import PLAYLIST_ELEMENT
from .errors import PipelineError

logger = logging.getLogger(__name__)

PipelineHandle: TypeAlias = Any
"""Opaque reference to a pipeline built by a MediaEngine."""


def _get_gst() -> types.ModuleType:
    """Lazy import of the GStreamer bindings to avoid slow startup."""
    import gi  # noqa: PLC0415

    gi.require_version("Gst", "1.0")
    from gi.repository import Gst  # noqa: PLC0415

    return Gst  # type: ignore[no-any-return]


def _get_glib() -> types.ModuleType:
    """Lazy import of the GLib bindings."""
    from gi.repository import GLib  # noqa: PLC0415

    return GLib  # type: ignore[no-any-return]


class SeekFlags(Flag):
    """Flags for seek requests."""

    NONE = 0
    FLUSH = auto()
    """Discard all data queued in the pipeline."""
    KEY_UNIT = auto()
    """Resume decoding from the nearest key unit at or before the target."""


@dataclass(frozen=True)
class PipelineSpec:
    """Description of a push pipeline fed through a named ``appsrc``."""

    description: str
    """Pipeline description in gst-launch syntax."""
    source_name: str | None = None
    """Name of the appsrc element buffers are pushed into."""
    caps: str | None = None
    """Fixed caps of the appsrc element."""


class MediaEngine(ABC):
    """Interface of the external engine that decodes and renders media."""

    @abstractmethod
    def build_pipeline(self, spec: PipelineSpec) -> PipelineHandle:
        """Build a push pipeline, leaving it unstarted."""

    @abstractmethod
    def build_playbin(self, uri: str) -> PipelineHandle:
        """Build a pull pipeline that fetches and renders the media at ``uri``."""

    @abstractmethod
    def start(self, handle: PipelineHandle) -> None:
        """Request the pipeline to play."""

    @abstractmethod
    def stop(self, handle: PipelineHandle) -> None:
        """Request the pipeline to stop and release its resources."""

    @abstractmethod
    def pause(self, handle: PipelineHandle) -> None:
        """Request the pipeline to pause."""

    @abstractmethod
    def is_playing(self, handle: PipelineHandle) -> bool:
        """Return True if the pipeline is playing or about to play."""

    @abstractmethod
    def push(self, handle: PipelineHandle, data: bytes) -> None:
        """Push one encoded buffer into the pipeline's input."""

    @abstractmethod
    def seek(self, handle: PipelineHandle, flags: SeekFlags, position_ns: int) -> None:
        """Seek to an absolute position in nanoseconds."""

    @abstractmethod
    def query_duration(self, handle: PipelineHandle) -> int | None:
        """Return the media duration in nanoseconds, or None if unknown."""

    @abstractmethod
    def query_position(self, handle: PipelineHandle) -> int | None:
        """Return the playback position in nanoseconds, or None if unknown."""


class GstRuntime:
    """
    Process-wide GStreamer initialization.

    ``init`` may be called once per process. It exports the configured debug
    level and plugin paths, initializes GStreamer and verifies its version.
    ``shutdown`` deinitializes GStreamer; the runtime cannot be initialized again
    afterwards.
    """

    def __init__(self) -> None:
        """Initialize an uninitialized runtime handle."""
        self._lock = threading.Lock()
        self._initialized = False
        self._shut_down = False
        self._version: tuple[int, int, int, int] | None = None

    @property
    def is_initialized(self) -> bool:
        """Whether GStreamer has been initialized and not shut down."""
        return self._initialized

    @property
    def version(self) -> tuple[int, int, int, int] | None:
        """GStreamer version (major, minor, micro, nano) once initialized."""
        return self._version

    def init(self, config: PlayerConfig | None = None) -> None:
        """Initialize GStreamer for this process."""
        config = config or PlayerConfig()
        with self._lock:
            if self._initialized:
                raise RuntimeError("GStreamer runtime is already initialized")
            if self._shut_down:
                raise RuntimeError("GStreamer runtime cannot be re-initialized after shutdown")

            self._configure_environment(config)
            try:
                gst = _get_gst()
            except (ImportError, ValueError) as exc:
                raise PipelineError(
                    "GStreamer runtime is not available. Install PyGObject and "
                    "GStreamer 1.x to enable playback."
                ) from exc

            gst.init(None)
            version = tuple(gst.version())
            if version[:2] < tuple(config.min_gst_version):
                raise PipelineError(
                    f"GStreamer {'.'.join(map(str, version[:3]))} is older than the "
                    f"required {'.'.join(map(str, config.min_gst_version))}"
                )
            self._version = version  # type: ignore[assignment]
            self._initialized = True
        logger.info("GStreamer %s initialized", ".".join(map(str, version[:3])))

    def shutdown(self) -> None:
        """Deinitialize GStreamer. No-op if the runtime was never initialized."""
        with self._lock:
            if not self._initialized:
                return
            _get_gst().deinit()
            self._initialized = False
            self._shut_down = True
        logger.info("GStreamer runtime shut down")

    @staticmethod
    def _configure_environment(config: PlayerConfig) -> None:
        os.environ["GST_DEBUG"] = config.gst_debug
        if config.plugin_paths:
            paths = list(config.plugin_paths)
            if existing := os.environ.get("GST_PLUGIN_PATH"):
                paths.append(existing)
            os.environ["GST_PLUGIN_PATH"] = os.pathsep.join(paths)
            logger.debug("GST_PLUGIN_PATH set to %s", os.environ["GST_PLUGIN_PATH"])


gst_runtime = GstRuntime()
"""The process-wide runtime handle."""


@dataclass
class GstPipelineHandle:
    """A GStreamer pipeline and the appsrc feeding it, if any."""

    pipeline: Any
    source: Any | None = None


class GstMediaEngine(MediaEngine):
    """MediaEngine backed by GStreamer."""

    def __init__(self, runtime: GstRuntime = gst_runtime) -> None:
        """
        Create an engine on an initialized runtime.

        Raises:
            RuntimeError: If ``runtime.init()`` has not been called.
        """
        if not runtime.is_initialized:
            raise RuntimeError("GStreamer runtime is not initialized, call init() first")
        self._gst = _get_gst()
        self._glib = _get_glib()

    def build_pipeline(self, spec: PipelineSpec) -> GstPipelineHandle:
        """Parse the description and configure its appsrc as a live stream."""
        gst = self._gst
        try:
            pipeline = gst.parse_launch(spec.description)
        except self._glib.Error as exc:
            raise PipelineError(f"Failed to build pipeline '{spec.description}': {exc}") from exc

        source = None
        if spec.source_name is not None:
            source = pipeline.get_by_name(spec.source_name)
            if source is None:
                raise PipelineError(f"Pipeline has no element named '{spec.source_name}'")
            if spec.caps is not None:
                source.set_property("caps", gst.Caps.from_string(spec.caps))
            gst.util_set_object_arg(source, "stream-type", "stream")
            gst.util_set_object_arg(source, "format", "time")
            source.set_property("is-live", True)
            source.set_property("emit-signals", True)
        logger.debug("Built pipeline: %s", spec.description)
        return GstPipelineHandle(pipeline=pipeline, source=source)

    def build_playbin(self, uri: str) -> GstPipelineHandle:
        """Build a playbin pipeline for the URI."""
        gst = self._gst
        if not gst.uri_is_valid(uri):
            raise PipelineError(f"Invalid media URI: {uri!r}")
        pipeline = gst.ElementFactory.make(PLAYLIST_ELEMENT, None)
        if pipeline is None:
            raise PipelineError(f"GStreamer element {PLAYLIST_ELEMENT!r} is not available")
        pipeline.set_property("uri", uri)
        return GstPipelineHandle(pipeline=pipeline)

    def start(self, handle: GstPipelineHandle) -> None:
        """Set the pipeline to PLAYING."""
        self._set_state(handle, self._gst.State.PLAYING)

    def stop(self, handle: GstPipelineHandle) -> None:
        """Set the pipeline to NULL."""
        self._set_state(handle, self._gst.State.NULL)

    def pause(self, handle: GstPipelineHandle) -> None:
        """Set the pipeline to PAUSED."""
        self._set_state(handle, self._gst.State.PAUSED)

    def is_playing(self, handle: GstPipelineHandle) -> bool:
        """Return True if the current or pending state is PLAYING."""
        gst = self._gst
        _, current, pending = handle.pipeline.get_state(0)
        target = current if pending == gst.State.VOID_PENDING else pending
        return bool(target == gst.State.PLAYING)

    def push(self, handle: GstPipelineHandle, data: bytes) -> None:
        """Wrap the bytes in a buffer and push it into the appsrc."""
        gst = self._gst
        if handle.source is None:
            raise PipelineError("Pipeline has no input source")
        flow = handle.source.emit("push-buffer", gst.Buffer.new_wrapped(data))
        if flow != gst.FlowReturn.OK:
            # FLUSHING is expected while the pipeline is being stopped
            logger.debug("push-buffer returned %s", flow.value_nick)

    def seek(self, handle: GstPipelineHandle, flags: SeekFlags, position_ns: int) -> None:
        """Issue an absolute time seek."""
        gst = self._gst
        gst_flags = gst.SeekFlags.NONE
        if SeekFlags.FLUSH in flags:
            gst_flags |= gst.SeekFlags.FLUSH
        if SeekFlags.KEY_UNIT in flags:
            gst_flags |= gst.SeekFlags.KEY_UNIT
        if not handle.pipeline.seek_simple(gst.Format.TIME, gst_flags, position_ns):
            raise PipelineError(f"Seek to {position_ns}ns was rejected by the pipeline")

    def query_duration(self, handle: GstPipelineHandle) -> int | None:
        """Query the duration in nanoseconds."""
        ok, value = handle.pipeline.query_duration(self._gst.Format.TIME)
        return int(value) if ok else None

    def query_position(self, handle: GstPipelineHandle) -> int | None:
        """Query the position in nanoseconds."""
        ok, value = handle.pipeline.query_position(self._gst.Format.TIME)
        return int(value) if ok else None

    def _set_state(self, handle: GstPipelineHandle, state: Any) -> None:
        result = handle.pipeline.set_state(state)
        if result == self._gst.StateChangeReturn.FAILURE:
            raise PipelineError(f"Failed to set pipeline state to {state.value_nick}")
