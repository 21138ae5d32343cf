"""Configuration management for String Tuner components."""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Sequence, Union
import copy
import json
import os
from pathlib import Path

from ..logger import get_logger
from ..note_utils import note_to_frequency
from ..tuner_types import STANDARD_TUNING, TuningTable

logger = get_logger(__name__)

TuningEntry = Union[str, Sequence[Any]]


def build_tuning_table(entries: Sequence[TuningEntry], name: str = "custom") -> TuningTable:
    """Build a tuning table from configuration entries.

    Each entry is either ``[label, frequency]`` or a bare note name such as
    ``"D2"``, whose frequency is derived from equal temperament.

    Raises:
        ValueError: If an entry cannot be interpreted or the table is invalid
    """
    tones = []
    for entry in entries:
        if isinstance(entry, str):
            tones.append((entry, note_to_frequency(entry)))
        elif len(entry) == 2:
            label, frequency = entry
            tones.append((str(label), float(frequency)))
        else:
            raise ValueError(f"Invalid tuning entry: {entry!r}")
    return TuningTable(tones, name=name)


@dataclass
class TunerSettings:
    """Calibration constants for one analysis pipeline."""

    silence_threshold: float = 0.005
    yin_threshold: float = 0.2
    min_frequency: float = 70.0
    max_frequency: float = 600.0
    in_tune_cents: float = 10.0
    direction_tolerance_hz: float = 2.0
    display_range_cents: float = 50.0
    tuning: TuningTable = field(default_factory=lambda: STANDARD_TUNING)

    @classmethod
    def from_config(
        cls, tuner_config: Dict[str, Any], tuning_config: Optional[Dict[str, Any]] = None
    ) -> "TunerSettings":
        """Create settings from the 'tuner' and 'tuning' configuration sections.

        Unknown keys are ignored with a warning.
        """
        known = {name for name in cls.__dataclass_fields__ if name != "tuning"}
        values = {}
        for key, value in tuner_config.items():
            if key in known:
                values[key] = float(value)
            else:
                logger.warning(f"Ignoring unknown tuner setting: {key}")

        if tuning_config:
            values["tuning"] = build_tuning_table(
                tuning_config.get("strings", []), tuning_config.get("name", "custom")
            )
        return cls(**values)


DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "tuner": {
        "silence_threshold": 0.005,
        "yin_threshold": 0.2,
        "min_frequency": 70.0,
        "max_frequency": 600.0,
        "in_tune_cents": 10.0,
        "direction_tolerance_hz": 2.0,
        "display_range_cents": 50.0,
    },
    "tuning": {
        "name": STANDARD_TUNING.name,
        "strings": [[tone.label, tone.frequency] for tone in STANDARD_TUNING],
    },
    "audio_input": {
        "device_id": None,
        "sample_rate": 44100,
        "frame_size": 2048,
        "channels": 1,
    },
}


class ConfigManager:
    """Keeps one JSON file per configuration section.

    Files live in ``~/.config/string_tuner`` unless another directory is
    given. A section whose file is missing is written out with its defaults;
    one that cannot be read is replaced by the defaults in memory only.
    """

    def __init__(self, config_dir: Optional[str] = None):
        if config_dir is None:
            config_dir = os.path.join(os.path.expanduser("~"), ".config", "string_tuner")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = copy.deepcopy(DEFAULT_CONFIGS)
        self.configs: Dict[str, Dict[str, Any]] = {
            section: self.load_config(section, defaults)
            for section, defaults in self.default_configs.items()
        }

    def _config_file(self, name: str) -> Path:
        return self.config_dir / f"{name}.json"

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Read a section from disk, falling back to its defaults.

        Keys missing from the file are filled in from ``default_config``.
        """
        path = self._config_file(name)
        if not path.exists():
            config = copy.deepcopy(default_config)
            self.save_config(name, config)
            return config

        try:
            with open(path, "r") as f:
                config = json.load(f)
            if not isinstance(config, dict):
                raise ValueError(f"expected a JSON object, got {type(config).__name__}")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {path}: {e}")
            return copy.deepcopy(default_config)

        for key, value in default_config.items():
            config.setdefault(key, copy.deepcopy(value))
        logger.info(f"Loaded configuration from {path}")
        return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Write a section to disk; returns False if it could not be written."""
        path = self._config_file(name)
        try:
            with open(path, "w") as f:
                json.dump(config, f, indent=2)
        except (OSError, TypeError) as e:
            logger.error(f"Error saving configuration to {path}: {e}")
            return False

        logger.info(f"Saved configuration to {path}")
        return True

    def get_config(self, name: str) -> Dict[str, Any]:
        """Return a copy of a section, or an empty dict for unknown names."""
        return copy.deepcopy(self.configs.get(name, {}))

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Merge ``updates`` into a section and persist it.

        Returns:
            False for an unknown section or a failed write
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration section: {name}")
            return False

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        if name not in self.default_configs:
            logger.error(f"Unknown configuration section: {name}")
            return False

        self.configs[name] = copy.deepcopy(self.default_configs[name])
        return self.save_config(name, self.configs[name])

    def get_tuner_settings(self) -> TunerSettings:
        """Build pipeline settings from the 'tuner' and 'tuning' sections."""
        return TunerSettings.from_config(
            self.get_config("tuner"), self.get_config("tuning")
        )
