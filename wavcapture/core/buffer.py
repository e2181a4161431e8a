"""Per-channel frame storage and merging.

A FrameBuffer keeps the frames of one channel in arrival order together with
a running sample count. ChannelMerger flattens a buffer into one contiguous
array once capture is done (or for a live snapshot).
"""

import logging

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


class FrameBuffer:
    """Append-only ordered store of sample frames for one channel.

    Appending is O(1); frames are kept as-is and only copied when merged.

    Example:
        buffer = FrameBuffer()
        buffer.append(np.zeros(128, dtype=np.float32))
        buffer.total_samples  # 128
    """

    def __init__(self) -> None:
        self._frames: list[NDArray[np.float32]] = []
        self._total_samples = 0

    @property
    def total_samples(self) -> int:
        """Cumulative number of samples appended since the last clear."""
        return self._total_samples

    def __len__(self) -> int:
        return len(self._frames)

    def append(self, frame: NDArray[np.float32]) -> None:
        """Append a frame to the end of the buffer."""
        self._frames.append(frame)
        self._total_samples += len(frame)

    def snapshot(self) -> tuple[tuple[NDArray[np.float32], ...], int]:
        """Return the current frames and sample count as an immutable view."""
        return tuple(self._frames), self._total_samples

    def clear(self) -> None:
        """Drop all frames and reset the sample count."""
        self._frames = []
        self._total_samples = 0


class ChannelMerger:
    """Flattens a channel's frames into one contiguous sample array.

    Example:
        merger = ChannelMerger()
        samples = merger.merge(buffer)
    """

    def merge(self, buffer: FrameBuffer) -> NDArray[np.float32]:
        """Merge all frames of a buffer in arrival order.

        Args:
            buffer: Buffer to merge. It is only read.

        Returns:
            Float32 array of length buffer.total_samples. Empty buffers
            yield a zero-length array.
        """
        frames, total = buffer.snapshot()
        return self.merge_frames(frames, total)

    def merge_frames(
        self, frames: tuple[NDArray[np.float32], ...], total: int
    ) -> NDArray[np.float32]:
        """Copy frames into a preallocated array of length total."""
        result = np.empty(total, dtype=np.float32)
        offset = 0
        for frame in frames:
            result[offset : offset + len(frame)] = frame
            offset += len(frame)

        if offset != total:
            # Frames and count come from one snapshot, so this means a caller
            # mutated a frame after appending it.
            raise ValueError(f"Frames hold {offset} samples, expected {total}")

        logger.debug("Merged %d frames into %d samples", len(frames), total)
        return result
