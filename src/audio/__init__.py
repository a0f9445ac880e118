from .capture import AudioCapture
from .volume import VolumeMeter
from .pcm import float_to_pcm16, pcm16_to_base64

__all__ = ["AudioCapture", "VolumeMeter", "float_to_pcm16", "pcm16_to_base64"]
