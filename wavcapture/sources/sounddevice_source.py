"""Audio source using the sounddevice library.

This module streams audio from a PortAudio input device and pushes one
frame per channel to the capture session from the PortAudio callback thread.
"""

import logging
from typing import Any

import numpy as np
import sounddevice as sd
from numpy.typing import NDArray

from wavcapture.config import CaptureConfig, StreamParams
from wavcapture.core.protocols import FrameCallback, InterruptCallback
from wavcapture.exceptions import AcquisitionError, InitializationError

logger = logging.getLogger(__name__)


class SoundDeviceSource:
    """Captures audio from an input device using sounddevice.

    The callback runs in a thread managed by sounddevice/PortAudio and only
    splits the block into per-channel frames before handing them on.

    Args:
        device: Sounddevice device index or name (None for the default input).

    Example:
        session = CaptureSession(SoundDeviceSource(device="USB Audio"))
        session.start()
    """

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device
        self._stream: sd.InputStream | None = None
        self._on_frames: FrameCallback | None = None
        self._on_interrupted: InterruptCallback | None = None
        self._closing = False

    @property
    def name(self) -> str:
        """Human-readable name of the audio source."""
        return "default input" if self._device is None else str(self._device)

    @property
    def is_active(self) -> bool:
        """Whether the source is currently streaming."""
        return self._stream is not None and self._stream.active

    def _audio_callback(
        self,
        indata: NDArray[np.float32],
        frames: int,
        time_info: Any,
        status: sd.CallbackFlags,
    ) -> None:
        """Callback invoked by sounddevice when audio data is available.

        This runs in a separate thread - must be thread-safe and fast.
        """
        if status.input_overflow:
            logger.warning("Input overflow on %s", self.name)

        on_frames = self._on_frames
        if on_frames is None:
            return

        # Copy columns since sounddevice reuses the buffer
        on_frames([indata[:, channel].copy() for channel in range(indata.shape[1])])

    def _finished_callback(self) -> None:
        """Called by sounddevice once the stream is no longer active."""
        if self._closing:
            return

        on_interrupted = self._on_interrupted
        if on_interrupted is not None:
            on_interrupted("input stream finished")

    def _input_channels(self, requested: int) -> int:
        try:
            info = sd.query_devices(self._device, "input")
        except (ValueError, sd.PortAudioError) as e:
            raise AcquisitionError(f"No input device available for {self.name}: {e}")

        available = int(info["max_input_channels"])
        if available < 1:
            raise AcquisitionError(f"{self.name} has no input channels")
        return min(requested, available)

    def begin_stream(
        self,
        config: CaptureConfig,
        on_frames: FrameCallback,
        on_interrupted: InterruptCallback,
    ) -> StreamParams:
        """Open and start an input stream.

        Raises:
            AcquisitionError: If the device cannot be opened.
            InitializationError: If the device rejects the stream settings.
        """
        if self.is_active:
            logger.warning("Source %s already streaming", self.name)
            return StreamParams(int(self._stream.samplerate), self._stream.channels)
        if self._stream is not None:
            logger.info("Replacing finished stream from %s", self.name)
            self.end_stream()

        channels = self._input_channels(config.channels)
        self._on_frames = on_frames
        self._on_interrupted = on_interrupted
        self._closing = False

        try:
            self._stream = sd.InputStream(
                device=self._device,
                samplerate=config.sample_rate,
                channels=channels,
                dtype=config.dtype,
                blocksize=config.block_size,
                callback=self._audio_callback,
                finished_callback=self._finished_callback,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self._abandon()
            raise AcquisitionError(f"Failed to start capture from {self.name}: {e}")
        except ValueError as e:
            self._abandon()
            raise InitializationError(f"Invalid stream settings for {self.name}: {e}")

        params = StreamParams(
            sample_rate=int(self._stream.samplerate),
            channel_count=self._stream.channels,
        )
        logger.info(
            "Started capture from %s (%d Hz, %d channel(s))",
            self.name,
            params.sample_rate,
            params.channel_count,
        )
        return params

    def end_stream(self) -> None:
        """Stop capturing audio from this source."""
        if self._stream is None:
            return

        self._closing = True
        try:
            self._stream.stop()
            self._stream.close()
        except sd.PortAudioError as e:
            logger.error("Error stopping stream %s: %s", self.name, e)
        finally:
            self._reset()
            logger.info("Stopped capture from %s", self.name)

    def _abandon(self) -> None:
        """Close a stream that failed to start."""
        if self._stream is not None:
            self._closing = True
            try:
                self._stream.close()
            except sd.PortAudioError as e:
                logger.error("Error closing stream %s: %s", self.name, e)
        self._reset()

    def _reset(self) -> None:
        self._stream = None
        self._on_frames = None
        self._on_interrupted = None
