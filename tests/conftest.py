"""Pytest configuration and fixtures for wavcapture tests."""

import logging

import numpy as np
import pytest

from wavcapture.config import CaptureConfig, StreamParams
from wavcapture.core.session import CaptureSession

# Configure logging for tests
logging.basicConfig(level=logging.INFO)


class FakeAudioSource:
    """In-memory audio source that lets tests deliver frames by hand.

    The frame callback is kept after end_stream() so tests can simulate
    callbacks that arrive late.
    """

    def __init__(self, sample_rate=44100, channel_count=2, error=None):
        self.sample_rate = sample_rate
        self.channel_count = channel_count
        self.error = error
        self.begin_calls = 0
        self.end_calls = 0
        self.streaming = False
        self.config = None
        self.on_frames = None
        self.on_interrupted = None

    @property
    def name(self):
        return "fake"

    @property
    def is_active(self):
        return self.streaming

    def begin_stream(self, config, on_frames, on_interrupted):
        self.begin_calls += 1
        if self.error is not None:
            raise self.error
        self.config = config
        self.on_frames = on_frames
        self.on_interrupted = on_interrupted
        self.streaming = True
        return StreamParams(self.sample_rate, self.channel_count)

    def end_stream(self):
        self.end_calls += 1
        self.streaming = False

    def push(self, *frames):
        """Deliver one audio tick with one frame per channel."""
        self.on_frames(list(frames))


@pytest.fixture
def sample_frame():
    """A four-sample frame used by the stereo scenario."""
    return np.array([0.5, -0.5, 0.25, -0.25], dtype=np.float32)


@pytest.fixture
def fake_source():
    return FakeAudioSource()


@pytest.fixture
def session(fake_source):
    """Stereo session fed by a fake source, stopped after the test."""
    capture = CaptureSession(fake_source, CaptureConfig(channels=2, timer_interval=0.01))
    yield capture
    capture.stop()
