"""
Pitch-class tables for drum encoding.

A pitch class groups General MIDI percussion pitches that the model
treats as the same drum. The first pitch of each class is the canonical
pitch written back when decoding.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import UnknownPitchError


# Standard 9-class drum kit (General MIDI percussion map)
DEFAULT_DRUM_PITCH_CLASSES: List[List[int]] = [
    # bass drum
    [36, 35],
    # snare drum
    [38, 27, 28, 31, 32, 33, 34, 37, 39, 40, 56, 65, 66, 75, 85],
    # closed hi-hat
    [42, 44, 54, 68, 69, 70, 71, 73, 78, 80],
    # open hi-hat
    [46, 67, 72, 74, 79, 81],
    # low tom
    [45, 29, 41, 61, 64, 84],
    # mid tom
    [48, 47, 60, 63, 77, 86, 87],
    # high tom
    [50, 30, 43, 62, 76, 83],
    # crash cymbal
    [49, 55, 57, 58],
    # ride cymbal
    [51, 52, 53, 59, 82],
]


class PitchClassTable:
    """
    Immutable mapping between MIDI pitches and drum classes.

    Attributes:
        classes: Tuple of pitch tuples, one per class
        pitch_to_class: Read-only pitch -> class index mapping

    A pitch listed in more than one class belongs to the first one.
    """

    def __init__(self, pitch_classes: Optional[Iterable[Sequence[int]]] = None):
        """
        Build the table and its reverse map.

        Args:
            pitch_classes: Groups of MIDI pitches. Defaults to the
                           9-class drum kit.
        """
        if pitch_classes is None:
            pitch_classes = DEFAULT_DRUM_PITCH_CLASSES

        classes = tuple(tuple(int(p) for p in group) for group in pitch_classes)
        if not classes:
            raise ValueError("pitch_classes must contain at least one class")
        for index, group in enumerate(classes):
            if not group:
                raise ValueError(f"Pitch class {index} is empty")

        pitch_to_class: Dict[int, int] = {}
        for index, group in enumerate(classes):
            for pitch in group:
                pitch_to_class.setdefault(pitch, index)

        self._classes = classes
        self._pitch_to_class = MappingProxyType(pitch_to_class)

    @property
    def classes(self) -> Tuple[Tuple[int, ...], ...]:
        return self._classes

    @property
    def pitch_to_class(self) -> MappingProxyType:
        return self._pitch_to_class

    @property
    def num_classes(self) -> int:
        """Number of drum classes."""
        return len(self._classes)

    def classify(self, pitch: int) -> int:
        """
        Return the class index of a pitch.

        Raises:
            UnknownPitchError: If the pitch is not in any class
        """
        try:
            return self._pitch_to_class[pitch]
        except KeyError:
            raise UnknownPitchError(pitch) from None

    def canonical_pitch(self, class_index: int) -> int:
        """Return the pitch used for a class when decoding (its first entry)."""
        return self._classes[class_index][0]

    def to_list(self) -> List[List[int]]:
        """Plain-list copy of the table, for JSON."""
        return [list(group) for group in self._classes]

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, pitch: int) -> bool:
        return pitch in self._pitch_to_class

    def __eq__(self, other) -> bool:
        if not isinstance(other, PitchClassTable):
            return NotImplemented
        return self._classes == other._classes

    def __hash__(self) -> int:
        return hash(self._classes)

    def __repr__(self) -> str:
        return f"PitchClassTable(num_classes={self.num_classes})"
