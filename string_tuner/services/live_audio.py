"""Microphone input through sounddevice (PortAudio)."""

import sounddevice as sd
import numpy as np
from typing import Any, Dict, Iterator, List, Optional

from ..core.interfaces import IAudioProvider
from ..logger import get_logger
from ..tuner_types import AudioFrame
from .audio_providers import to_mono

logger = get_logger(__name__)


def list_input_devices() -> List[Dict[str, Any]]:
    """Return the audio devices that can record, with their index."""
    try:
        found = sd.query_devices()
    except sd.PortAudioError as e:
        raise RuntimeError(f"Could not query audio devices: {e}") from e

    devices = []
    for index, device in enumerate(found):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "index": index,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


class LiveAudioProvider(IAudioProvider):
    """Provides live audio frames from an input device using sounddevice."""

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: int = 44100,
        frame_size: int = 2048,
        channels: int = 1,
        max_frames: Optional[int] = None,
    ):
        self._device_id = device_id
        self._sample_rate = sample_rate
        self._frame_size = frame_size
        self._channels = channels
        self._max_frames = max_frames
        self._stream: Optional[sd.InputStream] = None

    def open(self) -> None:
        if self._stream is not None:
            return
        try:
            stream = sd.InputStream(
                device=self._device_id,
                channels=self._channels,
                samplerate=self._sample_rate,
                blocksize=self._frame_size,
                dtype="float32",
            )
        except sd.PortAudioError as e:
            raise RuntimeError(f"Could not open input device: {e}") from e
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream
        logger.info(
            f"Opened input device {self._device_id if self._device_id is not None else 'default'} "
            f"at {self._sample_rate}Hz"
        )

    def close(self) -> None:
        if self._stream is not None:
            try:
                self._stream.stop()
            finally:
                self._stream.close()
                self._stream = None
            logger.info("Closed input device")

    def frames(self) -> Iterator[AudioFrame]:
        if self._stream is None:
            raise RuntimeError("Audio stream is not open; use the provider as a context manager")

        count = 0
        while self._max_frames is None or count < self._max_frames:
            block, overflowed = self._stream.read(self._frame_size)
            if overflowed:
                logger.warning("Input overflow, samples were dropped")
            yield AudioFrame(to_mono(np.asarray(block, dtype=np.float32)), self._sample_rate)
            count += 1

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels
