"""Unit tests for WAV encoding and exported assets."""

import struct

import numpy as np
import pytest

from wavcapture.exceptions import AudioWriteError
from wavcapture.writers.wav_encoder import WAV_HEADER_SIZE, WavEncoder, WavFile, float_to_pcm16


def parse_header(data):
    """Unpack the 44-byte canonical WAV header."""
    return struct.unpack("<4sI4s4sIHHIIHH4sI", data[:WAV_HEADER_SIZE])


@pytest.mark.unit
class TestFloatToPcm16:
    """Test cases for float_to_pcm16 quantization."""

    def test_full_scale_values(self):
        result = float_to_pcm16([1.0, -1.0, 0.0])

        assert result.tolist() == [32767, -32768, 0]

    def test_out_of_range_is_clamped(self):
        result = float_to_pcm16([2.0, -3.5])

        assert result.tolist() == [32767, -32768]

    def test_asymmetric_scaling(self):
        result = float_to_pcm16([0.5, -0.5])

        assert result.tolist() == [16383, -16384]

    def test_truncates_toward_zero(self):
        # 0.3 * 32767 = 9830.1, -0.3 * 32768 = -9830.4
        result = float_to_pcm16([0.3, -0.3])

        assert result.tolist() == [9830, -9830]

    def test_nan_is_silence(self):
        assert float_to_pcm16([np.nan]).tolist() == [0]


@pytest.mark.unit
class TestWavEncoder:
    """Test cases for WavEncoder."""

    @pytest.mark.parametrize("sample_rate,channels", [(8000, 1), (44100, 2), (96000, 6)])
    def test_chunk_ids(self, sample_rate, channels):
        data = WavEncoder(sample_rate, channels).encode(np.zeros(channels * 3))

        assert data[0:4] == b"RIFF"
        assert data[8:12] == b"WAVE"
        assert data[12:16] == b"fmt "
        assert data[36:40] == b"data"

    def test_header_fields(self):
        samples = np.linspace(-1, 1, 10, dtype=np.float32)

        data = WavEncoder(sample_rate=22050, channels=2).encode(samples)
        header = parse_header(data)

        assert header[1] == 36 + 20
        assert header[4] == 16
        assert header[5] == 1
        assert header[6] == 2
        assert header[7] == 22050
        assert header[8] == 22050 * 2 * 2
        assert header[9] == 4
        assert header[10] == 16
        assert header[12] == 20
        assert len(data) == WAV_HEADER_SIZE + 20

    def test_mono_byte_rate(self):
        header = parse_header(WavEncoder(sample_rate=16000, channels=1).encode([0.0]))

        assert header[8] == 32000
        assert header[9] == 2

    def test_empty_samples(self):
        data = WavEncoder(sample_rate=44100).encode(np.zeros(0, dtype=np.float32))
        header = parse_header(data)

        assert len(data) == 44
        assert header[1] == 36
        assert header[12] == 0

    def test_payload_is_little_endian_pcm(self):
        data = WavEncoder(sample_rate=8000, channels=1).encode([1.0, -1.0, 0.0, 2.0])

        assert data[44:] == struct.pack("<4h", 32767, -32768, 0, 32767)

    def test_rejects_invalid_parameters(self):
        with pytest.raises(ValueError):
            WavEncoder(sample_rate=0)
        with pytest.raises(ValueError):
            WavEncoder(sample_rate=44100, channels=0)


@pytest.mark.unit
class TestWavFile:
    """Test cases for WavFile."""

    def make_asset(self, name="take.wav"):
        samples = np.array([0.5, -0.5, 0.25, -0.25], dtype=np.float32)
        data = WavEncoder(sample_rate=44100, channels=2).encode(samples)
        return WavFile(name=name, data=data, sample_rate=44100, channels=2)

    def test_properties(self):
        asset = self.make_asset()

        assert asset.size == 52
        assert asset.frames == 2
        assert asset.duration == pytest.approx(2 / 44100)
        assert asset.mime_type == "audio/wav; codecs=MS_PCM"

    def test_decode_with_soundfile(self):
        asset = self.make_asset()

        samples, sample_rate = asset.decode()

        assert sample_rate == 44100
        assert samples.shape == (2, 2)
        assert samples.tolist() == [[16383, -16384], [8191, -8192]]

    def test_save(self, tmp_path):
        asset = self.make_asset()

        path = asset.save(tmp_path)

        assert path == tmp_path / "take.wav"
        assert path.read_bytes() == asset.data

    def test_save_to_missing_directory(self, tmp_path):
        asset = self.make_asset()

        with pytest.raises(AudioWriteError):
            asset.save(tmp_path / "missing")
