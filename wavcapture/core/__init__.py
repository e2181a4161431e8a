"""Core capture pipeline components."""

from wavcapture.core.buffer import ChannelMerger, FrameBuffer
from wavcapture.core.interleave import Interleaver
from wavcapture.core.protocols import AudioSource
from wavcapture.core.session import CaptureSession, SessionState
from wavcapture.core.timer import ElapsedTimer

__all__ = [
    "AudioSource",
    "CaptureSession",
    "ChannelMerger",
    "ElapsedTimer",
    "FrameBuffer",
    "Interleaver",
    "SessionState",
]
