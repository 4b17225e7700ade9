from .errors import (
    ConverterError,
    UnknownPitchError,
    NotMonophonicError,
    PitchOutOfRangeError,
    StepOutOfRangeError,
    UnknownConverterTypeError,
)
from .pitch_classes import PitchClassTable, DEFAULT_DRUM_PITCH_CLASSES
from .note_sequence import (
    DEFAULT_VELOCITY,
    DEFAULT_RESOLUTION,
    make_note,
    make_track,
    select_track,
    to_music,
)
