"""
Data converters between note sequences and model tensors.
"""

from .base_converter import BaseConverter
from .drums_converter import DrumsConverter, DrumRollConverter, encode_drum_roll
from .melody_converter import MelodyConverter
from .factory import converter_from_spec, converter_from_config

__all__ = [
    'BaseConverter',
    'DrumsConverter',
    'DrumRollConverter',
    'encode_drum_roll',
    'MelodyConverter',
    'converter_from_spec',
    'converter_from_config',
]
