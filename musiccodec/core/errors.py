"""
Error types raised by the converters.

All of them are validation failures caused by bad input data or bad
configuration. They derive from ValueError so callers that already
guard against ValueError keep working.
"""


class ConverterError(ValueError):
    """Base class for all codec errors."""


class UnknownPitchError(ConverterError):
    """A pitch is not registered in any pitch class."""

    def __init__(self, pitch: int):
        self.pitch = pitch
        super().__init__(f"Pitch {pitch} is not in any pitch class")


class NotMonophonicError(ConverterError):
    """Two notes overlap in a sequence that must be monophonic."""

    def __init__(self, start: int, last_end: int):
        self.start = start
        self.last_end = last_end
        super().__init__(
            f"Sequence is not monophonic: note starts at step {start} "
            f"before the previous note ends at step {last_end}"
        )


class PitchOutOfRangeError(ConverterError):
    """A pitch falls outside the converter's [min_pitch, max_pitch] range."""

    def __init__(self, pitch: int, min_pitch: int, max_pitch: int):
        self.pitch = pitch
        super().__init__(
            f"Sequence has a pitch outside of the valid range "
            f"[{min_pitch}, {max_pitch}]: {pitch}"
        )


class StepOutOfRangeError(ConverterError):
    """A note start or end step lies outside the converter's timeline."""

    def __init__(self, step: int, num_steps: int):
        self.step = step
        super().__init__(f"Step {step} is outside the timeline of {num_steps} steps")


class UnknownConverterTypeError(ConverterError):
    """The factory was given a converter type it does not know."""

    def __init__(self, converter_type):
        self.converter_type = converter_type
        super().__init__(f"Unknown converter type in spec: {converter_type}")
