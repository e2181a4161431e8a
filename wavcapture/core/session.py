"""Capture session orchestration.

This module provides the CaptureSession class that gates frame ingestion on
recording state, keeps one FrameBuffer per channel, and turns the buffered
audio into a WAV asset on demand.
"""

import logging
import threading
import time
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Self

import numpy as np
from numpy.typing import NDArray

from wavcapture.config import DEFAULT_SAMPLE_RATE, CaptureConfig, StreamParams
from wavcapture.core.buffer import ChannelMerger, FrameBuffer
from wavcapture.core.interleave import Interleaver
from wavcapture.core.protocols import AudioSource
from wavcapture.core.timer import ElapsedTimer
from wavcapture.exceptions import InitializationError, StreamInterruptedError
from wavcapture.writers.wav_encoder import WavEncoder, WavFile

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Recording state of a capture session."""

    IDLE = "idle"
    RECORDING = "recording"


class CaptureSession:
    """Buffers frames pushed by an audio source and exports them as WAV.

    Frames are only kept while the session is recording; frames that arrive
    after stop() are discarded. Buffered audio survives stop() and is
    dropped by clear(). A session can be started and stopped any number
    of times.

    Ingestion runs on the source's audio thread. A lock is held only for the
    append itself, for swapping buffers on clear() and for taking a snapshot
    on export, so export_asset() and clear() are safe while recording.

    Args:
        source: Audio source that feeds the session.
        config: Capture configuration.
        on_interrupted: Called with the error when the stream ends without
            stop() being called (e.g. the device was unplugged).

    Example:
        with CaptureSession(SoundDeviceSource()) as session:
            session.start()
            time.sleep(5)
            session.stop()
            session.export_asset("take1.wav").save(Path("recordings"))
    """

    def __init__(
        self,
        source: AudioSource,
        config: CaptureConfig | None = None,
        on_interrupted: Callable[[StreamInterruptedError], None] | None = None,
    ) -> None:
        self._source = source
        self._config = config or CaptureConfig()
        self._on_interrupted = on_interrupted
        self._lock = threading.Lock()
        self._buffers = self._new_buffers()
        self._merger = ChannelMerger()
        self._interleaver = Interleaver(channels=self._config.channels)
        self._timer = ElapsedTimer(interval=self._config.timer_interval)
        self._state = SessionState.IDLE
        self._stream_open = False
        self._stream_params: StreamParams | None = None
        self._dropped_deliveries = 0
        self._last_error: StreamInterruptedError | None = None

    @property
    def state(self) -> SessionState:
        """Current recording state."""
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is SessionState.RECORDING

    @property
    def channels(self) -> int:
        """Number of buffered channels."""
        return self._config.channels

    @property
    def sample_rate(self) -> int:
        """Sample rate of the most recent stream, or the configured default."""
        if self._stream_params is not None:
            return self._stream_params.sample_rate
        return self._config.sample_rate or DEFAULT_SAMPLE_RATE

    @property
    def total_samples(self) -> int:
        """Samples buffered per channel."""
        return self._buffers[0].total_samples

    @property
    def duration(self) -> float:
        """Seconds of audio buffered."""
        return self.total_samples / self.sample_rate

    @property
    def elapsed_seconds(self) -> int:
        """Seconds since the current recording started (0 when idle)."""
        return self._timer.seconds

    @property
    def dropped_deliveries(self) -> int:
        """Number of malformed deliveries discarded by ingest()."""
        return self._dropped_deliveries

    @property
    def last_error(self) -> StreamInterruptedError | None:
        """The interruption that ended the last recording, if any."""
        return self._last_error

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: object,
    ) -> None:
        """Stop recording and release the stream."""
        self.stop()

    def _new_buffers(self) -> list[FrameBuffer]:
        return [FrameBuffer() for _ in range(self._config.channels)]

    def _check_stream(self, params: StreamParams) -> None:
        """Validate the parameters reported by the source."""
        if params.sample_rate <= 0:
            raise InitializationError(
                f"{self._source.name} reported an invalid sample rate: {params.sample_rate}"
            )
        if params.channel_count not in (1, self._config.channels):
            raise InitializationError(
                f"{self._source.name} delivers {params.channel_count} channels, "
                f"session buffers {self._config.channels}"
            )

    def _release_stream(self) -> None:
        if self._stream_open:
            self._stream_open = False
            self._source.end_stream()

    def start(self) -> None:
        """Begin a stream and start buffering frames.

        Does nothing if the session is already recording.

        Raises:
            AcquisitionError: If the source cannot begin a stream.
            InitializationError: If the stream cannot be buffered.
        """
        if self._state is SessionState.RECORDING:
            logger.debug("Session already recording from %s", self._source.name)
            return

        self._last_error = None
        # A stream that ended on its own is still open until released
        self._release_stream()
        try:
            params = self._source.begin_stream(
                self._config, self.ingest, self._handle_interruption
            )
        except Exception as e:
            logger.error("Failed to start capture from %s: %s", self._source.name, e)
            raise
        self._stream_open = True

        try:
            self._check_stream(params)
        except InitializationError as e:
            logger.error("Failed to initialize capture: %s", e)
            self._release_stream()
            raise

        self._stream_params = params
        self._state = SessionState.RECORDING
        self._timer.start()
        logger.info(
            "Recording from %s (%d Hz, %d channel(s))",
            self._source.name,
            params.sample_rate,
            params.channel_count,
        )

    def stop(self) -> None:
        """Stop buffering frames and release the stream.

        Buffered audio is kept. Safe to call when idle.
        """
        was_recording = self._state is SessionState.RECORDING
        self._state = SessionState.IDLE
        self._timer.cancel()
        self._release_stream()
        if was_recording:
            logger.info(
                "Stopped recording (%d samples per channel, %.2f seconds)",
                self.total_samples,
                self.duration,
            )

    def clear(self) -> None:
        """Discard all buffered audio. The recording state is unchanged."""
        with self._lock:
            self._buffers = self._new_buffers()
        logger.info("Cleared capture buffers")

    def ingest(self, frames: Sequence[NDArray[np.float32]]) -> None:
        """Append one frame per channel to the buffers.

        Called by the audio source on its own thread, once per audio block.
        Frames are discarded unless the session is recording. A single frame
        is copied into every channel. Deliveries that would misalign the
        channels are dropped and counted.

        Args:
            frames: One 1-D float array per channel.
        """
        if self._state is not SessionState.RECORDING:
            return

        channels = self._config.channels
        if len(frames) == 1 and channels > 1:
            frames = [frames[0]] * channels
        elif len(frames) != channels:
            self._drop(f"{len(frames)} frames for {channels} channels")
            return

        frames = [np.asarray(frame, dtype=np.float32) for frame in frames]
        lengths = {len(frame) for frame in frames}
        if len(lengths) > 1:
            self._drop(f"frames of unequal length {sorted(lengths)}")
            return

        with self._lock:
            for buffer, frame in zip(self._buffers, frames):
                buffer.append(frame)

    def _drop(self, reason: str) -> None:
        with self._lock:
            self._dropped_deliveries += 1
        if self._dropped_deliveries % 10 == 1:  # Log every 10th drop
            logger.warning(
                "Dropped delivery: %s (count: %d)", reason, self._dropped_deliveries
            )

    def _handle_interruption(self, reason: str) -> None:
        """Return to idle when the stream ends on its own."""
        if self._state is not SessionState.RECORDING:
            return

        self._state = SessionState.IDLE
        self._timer.cancel()
        error = StreamInterruptedError(self._source.name, reason)
        self._last_error = error
        logger.warning("%s (%d samples per channel kept)", error, self.total_samples)
        if self._on_interrupted is not None:
            self._on_interrupted(error)

    def export_asset(self, name: str | None = None) -> WavFile:
        """Encode the buffered audio as a 16-bit PCM WAV asset.

        Session state is not modified. While recording, the asset holds the
        audio buffered at the time of the call.

        Args:
            name: File name of the asset (default: "<unix time>.wav").

        Returns:
            The exported WavFile. An empty capture yields a header-only file.
        """
        with self._lock:
            snapshots = [buffer.snapshot() for buffer in self._buffers]

        merged = [self._merger.merge_frames(frames, total) for frames, total in snapshots]
        interleaved = self._interleaver.interleave(merged)
        encoder = WavEncoder(sample_rate=self.sample_rate, channels=self._config.channels)
        asset = WavFile(
            name=name or f"{int(time.time())}.wav",
            data=encoder.encode(interleaved),
            sample_rate=encoder.sample_rate,
            channels=encoder.channels,
        )
        logger.info("Exported %s (%.2f seconds, %d bytes)", asset.name, asset.duration, asset.size)
        return asset
