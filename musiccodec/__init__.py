"""
musiccodec - note sequence <-> tensor converters for MusicVAE-style models.

Encodes quantized drum and melody tracks (muspy) to the fixed-shape
tensors a sequence model consumes, and decodes model output back.

Quick start:
    from musiccodec import converter_from_spec

    converter = converter_from_spec({
        'type': 'MelodyConverter',
        'args': {'num_steps': 32, 'min_pitch': 21, 'max_pitch': 108},
    })
    tensor = converter.encode(track)    # [32, 90] one-hot
    track = converter.decode(tensor)    # muspy.Track
"""

__version__ = "0.1.0"

from .configs import ConverterType, ConverterSpec, DrumsConverterConfig, MelodyConverterConfig
from .converters import (
    BaseConverter,
    DrumsConverter,
    DrumRollConverter,
    MelodyConverter,
    converter_from_spec,
    converter_from_config,
)
from .core import (
    ConverterError,
    UnknownPitchError,
    NotMonophonicError,
    PitchOutOfRangeError,
    StepOutOfRangeError,
    UnknownConverterTypeError,
    PitchClassTable,
    DEFAULT_DRUM_PITCH_CLASSES,
)
