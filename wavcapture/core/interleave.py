"""Channel interleaving.

This module combines per-channel sample arrays into a single frame-major
array, the sample layout PCM WAV data chunks use.
"""

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from wavcapture.exceptions import LengthMismatchError

logger = logging.getLogger(__name__)


class Interleaver:
    """Interleaves equal-length channel arrays.

    The output holds sample 0 of every channel, then sample 1 of every
    channel, and so on: ``output[k * channels + c] == arrays[c][k]``.
    Inputs are never truncated or padded; unequal lengths are an error.

    Args:
        channels: Number of channel arrays expected per call.

    Example:
        interleaver = Interleaver(channels=2)
        stereo = interleaver.interleave([left, right])
    """

    def __init__(self, channels: int = 2) -> None:
        if channels < 1:
            raise ValueError(f"channels must be at least 1, got {channels}")
        self._channels = channels

    @property
    def channels(self) -> int:
        """Number of channels this interleaver combines."""
        return self._channels

    def interleave(self, arrays: Sequence[NDArray[np.float32]]) -> NDArray[np.float32]:
        """Interleave channel arrays into one frame-major array.

        Args:
            arrays: One 1-D array per channel, all of the same length.

        Returns:
            Array of length channels * L. With a single channel the input
            array is returned unchanged.

        Raises:
            LengthMismatchError: If the arrays differ in length or their
                number does not match the channel count.
        """
        lengths = [len(array) for array in arrays]
        if len(arrays) != self._channels or len(set(lengths)) > 1:
            logger.error(
                "Cannot interleave %d arrays for %d channels (lengths %s)",
                len(arrays),
                self._channels,
                lengths,
            )
            raise LengthMismatchError(lengths, self._channels)

        if self._channels == 1:
            return arrays[0]

        # (L, channels) row-major flattens to frame-major order
        return np.stack(arrays, axis=1).reshape(-1).astype(np.float32, copy=False)
