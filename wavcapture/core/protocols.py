"""Protocol definitions for capture pipeline collaborators.

These protocols define the contract an audio source must implement to feed
a capture session, following the Dependency Inversion Principle.
"""

from collections.abc import Callable, Sequence
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from wavcapture.config import CaptureConfig, StreamParams

FrameCallback = Callable[[Sequence[NDArray[np.float32]]], None]
InterruptCallback = Callable[[str], None]


class AudioSource(Protocol):
    """Protocol for audio sources that push frames into a session.

    A source delivers one Frame per channel per audio tick by calling the
    frame callback it was given in begin_stream(). Delivery happens on a
    thread the session does not control.
    """

    @property
    def name(self) -> str:
        """Human-readable name of the audio source."""
        ...

    @property
    def is_active(self) -> bool:
        """Whether the source is currently streaming."""
        ...

    def begin_stream(
        self,
        config: CaptureConfig,
        on_frames: FrameCallback,
        on_interrupted: InterruptCallback,
    ) -> StreamParams:
        """Begin streaming frames to on_frames.

        Args:
            config: Capture configuration (requested channels, rate, block size).
            on_frames: Called once per tick with one frame per channel.
            on_interrupted: Called with a reason if the stream ends on its own.

        Returns:
            Parameters of the stream that was opened.

        Raises:
            AcquisitionError: If the stream cannot be acquired.
            InitializationError: If the stream settings are invalid.
        """
        ...

    def end_stream(self) -> None:
        """Stop the stream and release the device. Safe to call repeatedly."""
        ...
