"""Factory for creating String Tuner components."""

from dataclasses import replace
from importlib import import_module
from typing import Optional, Dict, Type

from ..logger import get_logger
from ..detection.pitch_estimator import YinPitchEstimator
from .config import ConfigManager
from .interfaces import IAudioProvider, IPitchEstimator
from .tuner import Tuner

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating String Tuner components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.pitch_estimator_classes: Dict[str, Type[IPitchEstimator]] = {
            "yin": YinPitchEstimator,
        }

        # Providers are imported on first use; "live" needs the PortAudio library
        self.audio_provider_classes: Dict[str, str] = {
            "live": "string_tuner.services.live_audio.LiveAudioProvider",
            "wav": "string_tuner.services.audio_providers.WavFileAudioProvider",
        }

    def create_pitch_estimator(
        self, implementation: str = "yin", **kwargs
    ) -> IPitchEstimator:
        """Create a pitch estimator.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Constructor parameters overriding the 'tuner' configuration

        Returns:
            Pitch estimator instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.pitch_estimator_classes:
            raise ValueError(f"Unknown pitch estimator implementation: {implementation}")

        settings = self.config_manager.get_tuner_settings()
        config = {
            "threshold": settings.yin_threshold,
            "min_frequency": settings.min_frequency,
            "max_frequency": settings.max_frequency,
        }
        config.update(kwargs)

        instance = self.pitch_estimator_classes[implementation](**config)
        logger.info(f"Created pitch estimator: {implementation}")
        return instance

    def create_tuner(self, **kwargs) -> Tuner:
        """Create the analysis pipeline from configuration.

        Args:
            **kwargs: TunerSettings fields overriding the stored configuration

        Raises:
            TypeError: If an override does not name a TunerSettings field
            ValueError: If the configured tuning table is invalid
        """
        settings = replace(self.config_manager.get_tuner_settings(), **kwargs)
        tuner = Tuner.from_settings(settings)
        logger.info(f"Created tuner for tuning '{settings.tuning.name}'")
        return tuner

    def create_audio_provider(self, implementation: str = "live", **kwargs) -> IAudioProvider:
        """Create an audio provider.

        Args:
            implementation: 'live' for an input device, 'wav' for a sound file
            **kwargs: Constructor parameters; live providers fall back to the
                'audio_input' configuration

        Returns:
            Audio provider instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.audio_provider_classes:
            raise ValueError(f"Unknown audio provider implementation: {implementation}")

        audio_config = self.config_manager.get_config("audio_input")
        if implementation == "live":
            config = {
                "device_id": audio_config.get("device_id"),
                "sample_rate": audio_config.get("sample_rate", 44100),
                "frame_size": audio_config.get("frame_size", 2048),
                "channels": audio_config.get("channels", 1),
            }
        else:
            config = {"frame_size": audio_config.get("frame_size", 2048)}
        config.update({key: value for key, value in kwargs.items() if value is not None})

        module_name, class_name = self.audio_provider_classes[implementation].rsplit(".", 1)
        cls: Type[IAudioProvider] = getattr(import_module(module_name), class_name)
        instance = cls(**config)
        logger.info(f"Created audio provider: {implementation}")
        return instance
