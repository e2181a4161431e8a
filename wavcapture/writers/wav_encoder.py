"""16-bit PCM WAV encoding.

This module serializes interleaved float samples into a canonical 44-byte
header RIFF/WAVE container and wraps the result in an exportable WavFile.
"""

import io
import logging
import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import soundfile as sf
from numpy.typing import ArrayLike, NDArray

from wavcapture.exceptions import AudioWriteError, EncodingError

logger = logging.getLogger(__name__)

WAV_HEADER_SIZE = 44
WAV_MIME_TYPE = "audio/wav; codecs=MS_PCM"

BYTES_PER_SAMPLE = 2
BITS_PER_SAMPLE = 16
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16

# RIFF id, RIFF size, WAVE, fmt id, fmt size, format, channels, rate,
# byte rate, block align, bits per sample, data id, data size
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")

_MAX_DATA_BYTES = 0xFFFFFFFF - (WAV_HEADER_SIZE - 8)


def float_to_pcm16(samples: ArrayLike) -> NDArray[np.int16]:
    """Quantize float samples to signed 16-bit integers.

    Samples are clamped to [-1.0, 1.0]. Negative values scale by 32768 and
    non-negative values by 32767, so -1.0 maps to -32768 and 1.0 to 32767.
    The scaled value is truncated toward zero. NaN maps to 0.

    Args:
        samples: Float samples of any shape.

    Returns:
        Array of the same shape with dtype int16.
    """
    data = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    data = np.clip(data, -1.0, 1.0)
    scaled = np.where(data < 0, data * 0x8000, data * 0x7FFF)
    return np.trunc(scaled).astype(np.int16)


class WavEncoder:
    """Encodes interleaved float samples as a 16-bit PCM WAV byte string.

    Args:
        sample_rate: Sample rate in Hz.
        channels: Number of interleaved channels.

    Example:
        encoder = WavEncoder(sample_rate=44100, channels=2)
        data = encoder.encode(interleaved)
    """

    def __init__(self, sample_rate: int, channels: int = 2) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if channels < 1:
            raise ValueError(f"channels must be at least 1, got {channels}")
        self._sample_rate = sample_rate
        self._channels = channels

    @property
    def sample_rate(self) -> int:
        """Sample rate written to the header."""
        return self._sample_rate

    @property
    def channels(self) -> int:
        """Channel count written to the header."""
        return self._channels

    def header(self, data_bytes: int) -> bytes:
        """Build the 44-byte header for a payload of data_bytes bytes."""
        if data_bytes > _MAX_DATA_BYTES:
            raise EncodingError(f"{data_bytes} bytes of PCM data exceed the WAV size limit")

        block_align = self._channels * BYTES_PER_SAMPLE
        return _HEADER.pack(
            b"RIFF",
            WAV_HEADER_SIZE - 8 + data_bytes,
            b"WAVE",
            b"fmt ",
            FMT_CHUNK_SIZE,
            PCM_FORMAT,
            self._channels,
            self._sample_rate,
            self._sample_rate * block_align,
            block_align,
            BITS_PER_SAMPLE,
            b"data",
            data_bytes,
        )

    def encode(self, samples: ArrayLike) -> bytes:
        """Encode interleaved samples into a complete WAV file.

        Args:
            samples: 1-D interleaved float samples. May be empty.

        Returns:
            Header followed by little-endian 16-bit PCM data.

        Raises:
            EncodingError: If the payload does not fit the 32-bit size fields.
        """
        pcm = float_to_pcm16(np.ravel(samples)).astype("<i2", copy=False)
        data_bytes = pcm.size * BYTES_PER_SAMPLE
        return self.header(data_bytes) + pcm.tobytes()


@dataclass(frozen=True)
class WavFile:
    """An exported WAV asset.

    Attributes:
        name: File name of the asset.
        data: Complete WAV bytes (header and PCM payload).
        sample_rate: Sample rate in Hz.
        channels: Number of channels.
    """

    name: str
    data: bytes
    sample_rate: int
    channels: int

    mime_type = WAV_MIME_TYPE

    @property
    def size(self) -> int:
        """Total size in bytes."""
        return len(self.data)

    @property
    def frames(self) -> int:
        """Number of sample frames (samples per channel) in the payload."""
        return (self.size - WAV_HEADER_SIZE) // (self.channels * BYTES_PER_SAMPLE)

    @property
    def duration(self) -> float:
        """Duration of the asset in seconds."""
        return self.frames / self.sample_rate

    def save(self, directory: Path | str) -> Path:
        """Write the asset into directory under its name.

        Returns:
            Path of the written file.

        Raises:
            AudioWriteError: If the file cannot be written.
        """
        path = Path(directory) / self.name
        try:
            path.write_bytes(self.data)
        except OSError as e:
            raise AudioWriteError(f"Failed to write {path}: {e}")
        logger.info("Saved %s (%.2f seconds, %d bytes)", path, self.duration, self.size)
        return path

    def decode(self) -> tuple[NDArray[np.int16], int]:
        """Parse the asset with soundfile.

        Returns:
            Tuple of (int16 samples with shape (frames, channels), sample rate).
        """
        data, sample_rate = sf.read(io.BytesIO(self.data), dtype="int16", always_2d=True)
        return data, sample_rate
