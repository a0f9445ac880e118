"""Float to PCM16 conversion and transport encoding."""

from __future__ import annotations

import base64

import numpy as np

PCM16_MIN = -32768
PCM16_MAX = 32767


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Convert normalized float samples to little-endian int16.

    Values are clamped to [-1, 1] first; negatives scale by 32768 and
    positives by 32767 so both ends of the int16 range are reachable.
    """
    data = np.nan_to_num(np.asarray(samples, dtype=np.float32).reshape(-1), nan=0.0)
    data = np.clip(data, -1.0, 1.0)
    scaled = np.where(data < 0, data * -PCM16_MIN, data * PCM16_MAX)
    return scaled.astype("<i2")


def pcm16_to_base64(frame: np.ndarray | bytes | bytearray) -> str:
    if isinstance(frame, bytes | bytearray):
        raw = bytes(frame)
    else:
        raw = np.asarray(frame, dtype="<i2").tobytes()
    return base64.b64encode(raw).decode("ascii")


__all__ = ["PCM16_MAX", "PCM16_MIN", "float_to_pcm16", "pcm16_to_base64"]
