"""Configuration dataclasses for audio capture."""

from dataclasses import dataclass

DEFAULT_SAMPLE_RATE = 48000

# Frames are floats in [-1.0, 1.0]
FLOAT_DTYPES = ("float32", "float64")


@dataclass(frozen=True)
class CaptureConfig:
    """Configuration for a capture session.

    Attributes:
        channels: Number of buffered channels (default: 2 for stereo).
        sample_rate: Requested sample rate in Hz (None lets the device choose).
        block_size: Number of frames per audio block requested from the source.
        dtype: NumPy float dtype string for captured samples (float32 or float64).
        timer_interval: Seconds between elapsed-time ticks.
    """

    channels: int = 2
    sample_rate: int | None = None
    block_size: int = 1024
    dtype: str = "float32"
    timer_interval: float = 1.0

    def __post_init__(self) -> None:
        if self.channels < 1:
            raise ValueError(f"channels must be at least 1, got {self.channels}")
        if self.sample_rate is not None and self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if self.timer_interval <= 0:
            raise ValueError(f"timer_interval must be positive, got {self.timer_interval}")
        if self.dtype not in FLOAT_DTYPES:
            raise ValueError(f"dtype must be one of {FLOAT_DTYPES}, got {self.dtype!r}")


@dataclass(frozen=True)
class StreamParams:
    """Stream parameters reported by an audio source once a stream begins.

    Attributes:
        sample_rate: Actual sample rate of the stream in Hz.
        channel_count: Number of channels the source delivers per tick.
    """

    sample_rate: int
    channel_count: int
