"""WAV encoding and exported assets."""

from wavcapture.writers.wav_encoder import WavEncoder, WavFile, float_to_pcm16

__all__ = ["WavEncoder", "WavFile", "float_to_pcm16"]
