"""Audio source implementations."""

from wavcapture.sources.sounddevice_source import SoundDeviceSource

__all__ = ["SoundDeviceSource"]
