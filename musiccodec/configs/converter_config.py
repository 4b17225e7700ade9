import json
from dataclasses import MISSING, dataclass, asdict, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Union

from ..core.errors import UnknownConverterTypeError


class ConverterType(str, Enum):
    """The converter families the factory can build."""

    DRUMS = "DrumsConverter"
    DRUM_ROLL = "DrumRollConverter"
    MELODY = "MelodyConverter"

    @classmethod
    def parse(cls, value: Union[str, "ConverterType"]) -> "ConverterType":
        """Resolve a type name, raising UnknownConverterTypeError if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownConverterTypeError(value) from None


# Argument names used in MusicVAE checkpoint config.json files
CAMEL_CASE_ARGS: Dict[str, str] = {
    "numSteps": "num_steps",
    "numSegments": "num_segments",
    "pitchClasses": "pitch_classes",
    "minPitch": "min_pitch",
    "maxPitch": "max_pitch",
}


def _normalize_args(config_class, args: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys to field names and reject keys the config does not have."""
    normalized = {CAMEL_CASE_ARGS.get(key, key): value for key, value in args.items()}

    config_fields = fields(config_class)
    known = {f.name for f in config_fields}
    unknown = sorted(key for key in normalized if key not in known)
    if unknown:
        raise ValueError(
            f"Unknown {config_class.__name__} arguments: {', '.join(unknown)}. "
            f"Valid arguments: {', '.join(sorted(known))}"
        )

    missing = [
        f.name for f in config_fields
        if f.default is MISSING and f.name not in normalized
    ]
    if missing:
        raise ValueError(
            f"Missing {config_class.__name__} arguments: {', '.join(missing)}"
        )
    return normalized


def _validate_segments(num_steps: int, num_segments: Optional[int]) -> None:
    if num_steps < 1:
        raise ValueError("num_steps must be at least 1")
    if num_segments is not None and num_segments < 1:
        raise ValueError("num_segments must be at least 1 if specified")


@dataclass
class DrumsConverterConfig:
    """
    Arguments for the drum converters.

    pitch_classes defaults to the 9-class drum kit when None.
    """

    num_steps: int
    num_segments: Optional[int] = None
    pitch_classes: Optional[List[List[int]]] = None

    def __post_init__(self):
        """Validate configuration."""
        _validate_segments(self.num_steps, self.num_segments)

        if self.pitch_classes is not None:
            if len(self.pitch_classes) == 0:
                raise ValueError("pitch_classes must contain at least one class")
            for index, group in enumerate(self.pitch_classes):
                if len(group) == 0:
                    raise ValueError(f"pitch_classes[{index}] is empty")
            self.pitch_classes = [list(group) for group in self.pitch_classes]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrumsConverterConfig":
        """Create from a dict with snake_case or camelCase keys."""
        return cls(**_normalize_args(cls, data))

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        save_path = Path(path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "DrumsConverterConfig":
        """Load configuration from JSON file."""
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))


@dataclass
class MelodyConverterConfig:
    """Arguments for the melody converter. Pitch bounds are inclusive."""

    MIDI_PITCH_RANGE: ClassVar[tuple] = (0, 127)

    num_steps: int
    min_pitch: int
    max_pitch: int
    num_segments: Optional[int] = None

    def __post_init__(self):
        """Validate configuration."""
        _validate_segments(self.num_steps, self.num_segments)

        low, high = self.MIDI_PITCH_RANGE
        if not low <= self.min_pitch <= high:
            raise ValueError(f"min_pitch must be between {low} and {high}")
        if not low <= self.max_pitch <= high:
            raise ValueError(f"max_pitch must be between {low} and {high}")
        if self.min_pitch > self.max_pitch:
            raise ValueError("min_pitch must be <= max_pitch")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MelodyConverterConfig":
        """Create from a dict with snake_case or camelCase keys."""
        return cls(**_normalize_args(cls, data))

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        save_path = Path(path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "MelodyConverterConfig":
        """Load configuration from JSON file."""
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))


ConverterArgs = Union[DrumsConverterConfig, MelodyConverterConfig]


@dataclass
class ConverterSpec:
    """
    Descriptor the factory turns into a converter.

    Mirrors the `dataConverter` entry of a MusicVAE checkpoint config:
        {"type": "MelodyConverter", "args": {"numSteps": 32, ...}}
    """

    type: ConverterType
    args: ConverterArgs = field(default=None)

    def __post_init__(self):
        """Resolve the type and coerce args to the matching config class."""
        self.type = ConverterType.parse(self.type)

        args_class = (
            MelodyConverterConfig if self.type is ConverterType.MELODY
            else DrumsConverterConfig
        )
        if self.args is None:
            raise ValueError(f"{self.type.value} requires args")
        if isinstance(self.args, dict):
            self.args = args_class.from_dict(self.args)
        elif not isinstance(self.args, args_class):
            raise ValueError(
                f"{self.type.value} expects {args_class.__name__}, "
                f"got {type(self.args).__name__}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterSpec":
        """Create from {'type': ..., 'args': {...}}."""
        if "type" not in data:
            raise ValueError("Converter spec is missing 'type'")
        return cls(type=data["type"], args=data.get("args"))

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with snake_case args, suitable for JSON."""
        return {"type": self.type.value, "args": asdict(self.args)}

    def save(self, path: str) -> None:
        """Save spec to JSON file."""
        save_path = Path(path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "ConverterSpec":
        """
        Load spec from JSON file.

        Accepts either a bare spec or a checkpoint config that nests it
        under a 'dataConverter' key.
        """
        with open(path, "r") as f:
            data = json.load(f)

        if "dataConverter" in data:
            data = data["dataConverter"]
        return cls.from_dict(data)
