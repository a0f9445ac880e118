"""Coarse input level for UI feedback, computed the way a browser analyser node does."""

from __future__ import annotations

import numpy as np

from src.config.client import (
    VOLUME_GAIN,
    VOLUME_MAX_DB,
    VOLUME_MIN_DB,
    VOLUME_FFT_SIZE,
    VOLUME_SMOOTHING,
)


class VolumeMeter:
    """Blackman-windowed FFT over the latest samples, smoothed over time.

    `level()` maps the smoothed spectrum to 0..255 bins over [min_db, max_db],
    averages the bins, applies the gain and caps the result at 100.
    """

    def __init__(
        self,
        *,
        fft_size: int = VOLUME_FFT_SIZE,
        smoothing: float = VOLUME_SMOOTHING,
        min_db: float = VOLUME_MIN_DB,
        max_db: float = VOLUME_MAX_DB,
        gain: float = VOLUME_GAIN,
    ) -> None:
        if fft_size < 2 or fft_size & (fft_size - 1):
            raise ValueError("fft_size must be a power of two")
        if max_db <= min_db:
            raise ValueError("max_db must be greater than min_db")
        self.fft_size = fft_size
        self.smoothing = min(max(smoothing, 0.0), 1.0)
        self.min_db = min_db
        self.max_db = max_db
        self.gain = gain

        self._window = np.blackman(fft_size).astype(np.float32)
        self._samples = np.zeros(fft_size, dtype=np.float32)
        self._smoothed = np.zeros(fft_size // 2, dtype=np.float64)

    def push(self, samples: np.ndarray) -> None:
        block = np.asarray(samples, dtype=np.float32).reshape(-1)
        if block.size >= self.fft_size:
            self._samples[:] = block[-self.fft_size :]
            return
        self._samples = np.roll(self._samples, -block.size)
        self._samples[-block.size :] = block

    def byte_spectrum(self) -> np.ndarray:
        magnitudes = np.abs(np.fft.rfft(self._samples * self._window))[: self.fft_size // 2] / self.fft_size
        self._smoothed = self.smoothing * self._smoothed + (1.0 - self.smoothing) * magnitudes
        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(self._smoothed)
        scaled = np.floor((db - self.min_db) * (255.0 / (self.max_db - self.min_db)))
        return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)

    def level(self) -> float:
        average = float(self.byte_spectrum().mean())
        return min(100.0, average * self.gain)

    def reset(self) -> None:
        self._samples.fill(0.0)
        self._smoothed.fill(0.0)


__all__ = ["VolumeMeter"]
