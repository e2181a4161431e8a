"""Streaming audio capture buffered into 16-bit PCM WAV assets."""

from wavcapture.config import CaptureConfig, StreamParams
from wavcapture.core.session import CaptureSession, SessionState
from wavcapture.exceptions import (
    AcquisitionError,
    AudioWriteError,
    EncodingError,
    InitializationError,
    LengthMismatchError,
    StreamInterruptedError,
    WavCaptureError,
)
from wavcapture.writers.wav_encoder import WavEncoder, WavFile

__version__ = "0.1.0"

__all__ = [
    "AcquisitionError",
    "AudioWriteError",
    "CaptureConfig",
    "CaptureSession",
    "EncodingError",
    "InitializationError",
    "LengthMismatchError",
    "SessionState",
    "StreamInterruptedError",
    "StreamParams",
    "WavCaptureError",
    "WavEncoder",
    "WavFile",
]
