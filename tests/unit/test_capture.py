from __future__ import annotations

import asyncio

import numpy as np
import pytest

from src.errors import DeviceUnavailable
from src.audio.pcm import float_to_pcm16
from src.audio.capture import AudioCapture


class _FakeStream:
    def __init__(self, *, fail_start: bool = False) -> None:
        self.fail_start = fail_start
        self.starts = 0
        self.stops = 0
        self.closes = 0

    def start(self) -> None:
        if self.fail_start:
            raise RuntimeError("device busy")
        self.starts += 1

    def stop(self) -> None:
        self.stops += 1

    def close(self) -> None:
        self.closes += 1


class _StreamFactory:
    def __init__(self, stream: _FakeStream) -> None:
        self.stream = stream
        self.calls: list[dict] = []
        self.callback = None

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        self.callback = kwargs["callback"]
        return self.stream


def _block(value: float, n: int = 4) -> np.ndarray:
    return np.full((n, 1), value, dtype=np.float32)


async def _drain() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_capture_emits_pcm16_frames_in_order() -> None:
    frames: list[list[int]] = []
    factory = _StreamFactory(_FakeStream())
    capture = AudioCapture(lambda frame: frames.append(frame.tolist()), stream_factory=factory)

    assert await capture.start() is True
    assert factory.calls[0]["samplerate"] == 24000
    assert factory.calls[0]["channels"] == 1

    for value in (0.0, 1.0, -1.0):
        factory.callback(_block(value), 4, None, None)
    await _drain()

    assert frames == [[0] * 4, [32767] * 4, [-32768] * 4]
    assert capture.frames_emitted == 3
    await capture.close()


@pytest.mark.asyncio
async def test_capture_start_twice_returns_false() -> None:
    capture = AudioCapture(lambda frame: None, stream_factory=_StreamFactory(_FakeStream()))
    assert await capture.start() is True
    assert await capture.start() is False
    await capture.close()


@pytest.mark.asyncio
async def test_stop_keeps_stream_and_close_is_idempotent() -> None:
    frames: list[np.ndarray] = []
    stream = _FakeStream()
    factory = _StreamFactory(stream)
    capture = AudioCapture(frames.append, stream_factory=factory)

    await capture.start()
    await capture.stop()
    factory.callback(_block(0.5), 4, None, None)
    await _drain()
    assert frames == []
    assert stream.stops == 1
    assert stream.closes == 0

    assert await capture.start() is True
    assert len(factory.calls) == 1
    assert stream.starts == 2

    await capture.close()
    await capture.close()
    assert stream.closes == 1
    assert capture.recording is False


@pytest.mark.asyncio
async def test_device_unavailable_from_factory_propagates() -> None:
    def _no_device(**_kwargs):
        raise DeviceUnavailable("no input device")

    capture = AudioCapture(lambda frame: None, stream_factory=_no_device)
    with pytest.raises(DeviceUnavailable):
        await capture.start()
    assert capture.recording is False


@pytest.mark.asyncio
async def test_stream_start_failure_is_device_unavailable() -> None:
    capture = AudioCapture(lambda frame: None, stream_factory=_StreamFactory(_FakeStream(fail_start=True)))
    with pytest.raises(DeviceUnavailable):
        await capture.start()
    assert capture.recording is False


@pytest.mark.asyncio
async def test_volume_failure_does_not_stop_frames() -> None:
    frames: list[np.ndarray] = []
    volume_calls = 0

    def _broken_volume(_level: float) -> None:
        nonlocal volume_calls
        volume_calls += 1
        raise RuntimeError("render failed")

    factory = _StreamFactory(_FakeStream())
    capture = AudioCapture(frames.append, on_volume=_broken_volume, stream_factory=factory, volume_hz=1000.0)
    await capture.start()
    await asyncio.sleep(0.01)

    factory.callback(_block(0.25), 4, None, None)
    await _drain()

    assert volume_calls == 1
    assert len(frames) == 1
    await capture.close()


@pytest.mark.asyncio
async def test_frame_consumer_failure_does_not_stop_volume() -> None:
    levels: list[float] = []

    async def _broken_frame(_frame: np.ndarray) -> None:
        raise RuntimeError("send failed")

    factory = _StreamFactory(_FakeStream())
    capture = AudioCapture(_broken_frame, on_volume=levels.append, stream_factory=factory, volume_hz=1000.0)
    await capture.start()
    factory.callback(_block(0.25), 4, None, None)
    await _drain()
    count = len(levels)
    await asyncio.sleep(0.02)

    assert len(levels) > count
    await capture.close()


@pytest.mark.asyncio
async def test_slow_consumer_drops_oldest_queued_frames() -> None:
    gate = asyncio.Event()
    frames: list[int] = []

    async def _slow_frame(frame: np.ndarray) -> None:
        await gate.wait()
        frames.append(int(frame[0]))

    factory = _StreamFactory(_FakeStream())
    capture = AudioCapture(_slow_frame, stream_factory=factory, max_queued_frames=2)
    await capture.start()

    values = (0.0, 0.2, 0.4, 0.6, 0.8)
    factory.callback(_block(values[0]), 4, None, None)
    await _drain()
    for value in values[1:]:
        factory.callback(_block(value), 4, None, None)
    await _drain()

    gate.set()
    await _drain()

    expected = [int(float_to_pcm16(_block(value)[:, 0])[0]) for value in (0.0, 0.6, 0.8)]
    assert frames == expected
    assert capture.frames_dropped == 2
    await capture.close()
