from __future__ import annotations

import numpy as np
import pytest

from src.audio.volume import VolumeMeter


def test_volume_meter_is_zero_for_silence() -> None:
    meter = VolumeMeter()
    meter.push(np.zeros(512, dtype=np.float32))
    assert meter.level() == 0.0


def test_volume_meter_caps_loud_noise_at_100() -> None:
    rng = np.random.default_rng(7)
    meter = VolumeMeter()
    level = 0.0
    for _ in range(10):
        meter.push(rng.uniform(-1.0, 1.0, 4096).astype(np.float32))
        level = meter.level()
    assert level == 100.0


def test_volume_meter_tone_is_between_silence_and_cap() -> None:
    meter = VolumeMeter()
    t = np.arange(256, dtype=np.float32) / 24000.0
    meter.push(0.5 * np.sin(2 * np.pi * 1000.0 * t))
    level = meter.level()
    assert 0.0 < level <= 100.0


def test_volume_meter_keeps_latest_samples_for_short_blocks() -> None:
    meter = VolumeMeter(fft_size=8)
    meter.push(np.ones(6, dtype=np.float32))
    meter.push(np.full(4, 2.0, dtype=np.float32))
    assert meter._samples.tolist() == [1.0, 1.0, 1.0, 1.0, 2.0, 2.0, 2.0, 2.0]


def test_volume_meter_rejects_bad_configuration() -> None:
    with pytest.raises(ValueError):
        VolumeMeter(fft_size=100)
    with pytest.raises(ValueError):
        VolumeMeter(min_db=-30.0, max_db=-100.0)
