"""Microphone capture: fixed-size PCM16 frames plus an independent volume loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
import contextlib
from typing import Any
from collections.abc import Callable

import numpy as np

try:
    import sounddevice as sd
except OSError:  # PortAudio shared library is missing
    sd = None

from src.errors import DeviceUnavailable
from src.config.client import (
    AUDIO_CHANNELS,
    VOLUME_REFRESH_HZ,
    AUDIO_FRAME_SAMPLES,
    AUDIO_SAMPLE_RATE_HZ,
    AUDIO_MAX_QUEUED_FRAMES,
)

from .pcm import float_to_pcm16
from .volume import VolumeMeter

logger = logging.getLogger(__name__)

FrameCallback = Callable[[np.ndarray], Any]
VolumeCallback = Callable[[float], Any]
StreamFactory = Callable[..., Any]


def open_input_stream(*, samplerate: int, channels: int, blocksize: int, callback: Callable[..., None]) -> Any:
    if sd is None:
        raise DeviceUnavailable("PortAudio library not found; install it to capture audio")
    try:
        return sd.InputStream(
            samplerate=samplerate,
            channels=channels,
            blocksize=blocksize,
            dtype="float32",
            callback=callback,
        )
    except (sd.PortAudioError, ValueError) as exc:
        raise DeviceUnavailable(f"Error accessing microphone: {exc}") from exc


class AudioCapture:
    """Emits int16 frames of `frame_samples` samples in capture order.

    The device callback runs on a PortAudio thread and only copies the block
    into the event loop; conversion, metering and delivery happen on the loop.
    """

    def __init__(
        self,
        on_frame: FrameCallback,
        *,
        on_volume: VolumeCallback | None = None,
        stream_factory: StreamFactory = open_input_stream,
        sample_rate: int = AUDIO_SAMPLE_RATE_HZ,
        channels: int = AUDIO_CHANNELS,
        frame_samples: int = AUDIO_FRAME_SAMPLES,
        volume_hz: float = VOLUME_REFRESH_HZ,
        max_queued_frames: int = AUDIO_MAX_QUEUED_FRAMES,
        meter: VolumeMeter | None = None,
    ) -> None:
        self._on_frame = on_frame
        self._on_volume = on_volume
        self._stream_factory = stream_factory
        self.sample_rate = sample_rate
        self.channels = channels
        self.frame_samples = frame_samples
        self._volume_interval_s = 1.0 / max(1.0, volume_hz)
        self._meter = meter or VolumeMeter()
        self._max_queued_frames = max(1, max_queued_frames)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._stream: Any = None
        self._queue: asyncio.Queue[np.ndarray] | None = None
        self._consumer_task: asyncio.Task | None = None
        self._volume_task: asyncio.Task | None = None
        self._recording = False
        self.frames_emitted = 0
        self.frames_dropped = 0

    @property
    def recording(self) -> bool:
        return self._recording

    async def start(self) -> bool:
        if self._recording:
            return False
        self._loop = asyncio.get_running_loop()

        if self._stream is None:
            self._stream = self._stream_factory(
                samplerate=self.sample_rate,
                channels=self.channels,
                blocksize=self.frame_samples,
                callback=self._on_block,
            )
            logger.info("Audio input opened: %s Hz, %s channel(s)", self.sample_rate, self.channels)

        self._queue = asyncio.Queue(maxsize=self._max_queued_frames)
        self._recording = True
        try:
            self._stream.start()
        except Exception as exc:
            self._recording = False
            self._queue = None
            raise DeviceUnavailable(f"Error accessing microphone: {exc}") from exc

        self._consumer_task = asyncio.create_task(self._consume_frames(self._queue))
        if self._on_volume is not None:
            self._meter.reset()
            self._volume_task = asyncio.create_task(self._volume_loop())
        logger.info("Audio recording started")
        return True

    async def stop(self) -> None:
        """Stop emitting frames; the stream object stays open for a fast restart."""
        if not self._recording:
            return
        self._recording = False
        try:
            self._stream.stop()
        except Exception:
            logger.warning("Error stopping audio stream", exc_info=True)
        await self._cancel_tasks()
        self._queue = None
        logger.info("Audio recording stopped")

    async def close(self) -> None:
        await self.stop()
        await self._cancel_tasks()
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.close()
        except Exception:
            logger.warning("Error closing audio stream", exc_info=True)
        logger.info("Audio input closed")

    def _on_block(self, indata: np.ndarray, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("audio input status: %s", status)
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        block = np.array(indata[:, 0] if indata.ndim > 1 else indata, dtype=np.float32, copy=True)
        loop.call_soon_threadsafe(self._enqueue, block)

    def _enqueue(self, block: np.ndarray) -> None:
        if not self._recording or self._queue is None:
            return
        self._meter.push(block)
        if self._queue.full():
            # Keep the most recent audio when the consumer falls behind.
            self._queue.get_nowait()
            self.frames_dropped += 1
            if self.frames_dropped == 1 or self.frames_dropped % 100 == 0:
                logger.warning("Audio consumer is behind; dropped %s frame(s) so far", self.frames_dropped)
        self._queue.put_nowait(float_to_pcm16(block))

    async def _consume_frames(self, queue: asyncio.Queue[np.ndarray]) -> None:
        while True:
            frame = await queue.get()
            try:
                result = self._on_frame(frame)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error processing audio frame")
                continue
            self.frames_emitted += 1

    async def _volume_loop(self) -> None:
        while self._recording:
            try:
                self._on_volume(self._meter.level())
            except Exception:
                logger.exception("Volume meter failed; volume updates stopped")
                return
            await asyncio.sleep(self._volume_interval_s)

    async def _cancel_tasks(self) -> None:
        tasks = [task for task in (self._consumer_task, self._volume_task) if task is not None]
        self._consumer_task = None
        self._volume_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task


__all__ = ["AudioCapture", "open_input_stream"]
