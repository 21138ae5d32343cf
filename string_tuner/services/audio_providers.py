import soundfile as sf
import numpy as np
from typing import Iterator, Optional

from ..core.interfaces import IAudioProvider
from ..logger import get_logger
from ..tuner_types import AudioFrame

logger = get_logger(__name__)


def to_mono(block: np.ndarray) -> np.ndarray:
    """Average the channels of a (frames, channels) block into one."""
    if block.ndim == 1:
        return block
    if block.shape[1] == 1:
        return block[:, 0]
    return block.mean(axis=1)


class WavFileAudioProvider(IAudioProvider):
    """Provides audio frames by reading from a sound file."""

    def __init__(
        self,
        file_path: str,
        frame_size: int = 2048,
        gain: float = 1.0,
        hop_size: Optional[int] = None,
    ):
        if hop_size is not None and not 0 < hop_size <= frame_size:
            raise ValueError(f"Hop size must be in 1..{frame_size}, got {hop_size}")
        self._file_path = file_path
        self._frame_size = frame_size
        self._hop_size = hop_size or frame_size
        self._gain = gain
        self._file: Optional[sf.SoundFile] = None

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels

    def open(self) -> None:
        if self._file is None:
            self._file = sf.SoundFile(self._file_path)
            logger.info(f"Opened {self._file_path} ({self._sample_rate}Hz, {self._channels} ch)")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def frames(self) -> Iterator[AudioFrame]:
        if self._file is None:
            raise RuntimeError("Sound file is not open; use the provider as a context manager")

        overlap = self._frame_size - self._hop_size
        for block in self._file.blocks(
            blocksize=self._frame_size,
            overlap=overlap,
            dtype="float32",
            always_2d=True,
        ):
            # Trailing partial frames are dropped
            if len(block) < self._frame_size:
                break

            samples = to_mono(block)
            if self._gain != 1.0:
                samples = samples * self._gain
            yield AudioFrame(samples, self._sample_rate)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels
