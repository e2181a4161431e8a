"""Custom exceptions for the capture pipeline."""


class WavCaptureError(Exception):
    """Base exception for all capture pipeline errors."""


class AcquisitionError(WavCaptureError):
    """Raised when an audio source cannot begin a stream."""


class InitializationError(WavCaptureError):
    """Raised when the capture pipeline cannot be set up for a stream."""


class LengthMismatchError(WavCaptureError):
    """Raised when channel arrays of different lengths are interleaved."""

    def __init__(self, lengths: list[int], channels: int) -> None:
        self.lengths = lengths
        self.channels = channels
        super().__init__(f"Expected {channels} equal-length channels, got lengths {lengths}")


class StreamInterruptedError(WavCaptureError):
    """Raised (or recorded) when a stream ends without being stopped."""

    def __init__(self, source_name: str, reason: str = "stream ended unexpectedly") -> None:
        self.source_name = source_name
        self.reason = reason
        super().__init__(f"Stream from '{source_name}' interrupted: {reason}")


class EncodingError(WavCaptureError):
    """Raised when samples cannot be encoded into a WAV container."""


class AudioWriteError(WavCaptureError):
    """Raised when writing an exported asset fails."""
