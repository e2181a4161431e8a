"""Unit tests for configuration dataclasses."""

import pytest

from wavcapture.config import CaptureConfig


@pytest.mark.unit
class TestCaptureConfig:
    """Test cases for CaptureConfig validation."""

    def test_defaults(self):
        config = CaptureConfig()

        assert config.channels == 2
        assert config.sample_rate is None
        assert config.block_size == 1024
        assert config.timer_interval == 1.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"channels": 0},
            {"sample_rate": 0},
            {"block_size": -1},
            {"timer_interval": 0},
            {"dtype": "int16"},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CaptureConfig(**kwargs)

    def test_accepts_float64(self):
        assert CaptureConfig(dtype="float64").dtype == "float64"
