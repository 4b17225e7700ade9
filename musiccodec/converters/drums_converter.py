"""
Drum converters.

Both converters encode a drum track to the same 2-D "drum roll": each
row is a time step and each column up to the last says whether a drum
from that pitch class is hit at the step. The last column is the NOR
of the others (1 when nothing is hit).

They differ in what decode() expects:
    - DrumsConverter: one-hot labels over the 2**num_classes drum
      combinations, as sampled from the model. Bit p of a label is
      pitch class p (least significant bit = class 0).
    - DrumRollConverter: the drum roll itself, with or without the
      NOR column.

Decoded notes last exactly one step and use the first pitch of their
class. Sustain is not represented.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import muspy
import numpy as np
import tensorflow as tf

from .base_converter import BaseConverter
from ..configs.converter_config import ConverterType, DrumsConverterConfig
from ..core.errors import StepOutOfRangeError
from ..core.note_sequence import make_note, make_track, note_start
from ..core.pitch_classes import PitchClassTable
from ..core.tensors import argmax_labels, as_matrix, fetched

logger = logging.getLogger(__name__)

DEFAULT_DRUM_TABLE = PitchClassTable()

# Roll cells at or above this value count as hits
ROLL_THRESHOLD = 0.5


def encode_drum_roll(sequence: Any, table: PitchClassTable, num_steps: int) -> tf.Tensor:
    """
    Encode a drum sequence to a [num_steps, num_classes + 1] drum roll.

    Args:
        sequence: Object with a `notes` list of muspy.Note
        table: Pitch-class table mapping pitches to columns
        num_steps: Number of rows

    Returns:
        float32 tf.Tensor drum roll

    Raises:
        UnknownPitchError: If a pitch is not in the table
        StepOutOfRangeError: If a note starts outside [0, num_steps)
    """
    roll = np.zeros((num_steps, table.num_classes + 1), dtype=np.float32)
    # Start every row as "no hit" and clear it when a note lands there
    roll[:, -1] = 1.0

    for note in sequence.notes:
        step = note_start(note)
        if not 0 <= step < num_steps:
            raise StepOutOfRangeError(step, num_steps)
        roll[step, table.classify(note.pitch)] = 1.0
        roll[step, -1] = 0.0

    return tf.convert_to_tensor(roll)


class _DrumKitConverter(BaseConverter):
    """Configuration and encoding shared by the two drum converters."""

    IS_DRUM = True

    def __init__(
        self,
        num_steps: int,
        num_segments: Optional[int] = None,
        pitch_classes: Optional[Sequence[Sequence[int]]] = None,
    ):
        """
        Initialize the converter.

        Args:
            num_steps: Length of each sequence
            num_segments: Number of conductor segments, if applicable
            pitch_classes: Groups of MIDI pitches treated as the same drum.
                           The first pitch of each group is used when
                           decoding. Defaults to a 9-class kit.
        """
        if pitch_classes is not None:
            pitch_classes = [list(group) for group in pitch_classes]
        DrumsConverterConfig(
            num_steps=num_steps,
            num_segments=num_segments,
            pitch_classes=pitch_classes,
        )
        super().__init__(num_steps, num_segments)
        self._table = PitchClassTable(pitch_classes)
        self._custom_classes = self._table != DEFAULT_DRUM_TABLE

        logger.debug(
            "Built %s with %d steps and %d pitch classes",
            type(self).__name__, num_steps, self._table.num_classes,
        )

    @classmethod
    def from_config(cls, config: DrumsConverterConfig):
        return cls(
            num_steps=config.num_steps,
            num_segments=config.num_segments,
            pitch_classes=config.pitch_classes,
        )

    @property
    def pitch_classes(self) -> PitchClassTable:
        return self._table

    @property
    def num_classes(self) -> int:
        return self._table.num_classes

    @property
    def depth(self) -> int:
        """Drum roll width: one column per class plus the NOR column."""
        return self._table.num_classes + 1

    def encode(self, sequence: Any) -> tf.Tensor:
        return encode_drum_roll(sequence, self._table, self._num_steps)

    def get_state(self) -> Dict[str, Any]:
        return {
            'type': self.converter_type.value,
            'args': {
                'num_steps': self._num_steps,
                'num_segments': self._num_segments,
                'pitch_classes': self._table.to_list() if self._custom_classes else None,
            },
        }

    def _hit(self, step: int, class_index: int) -> muspy.Note:
        return make_note(self._table.canonical_pitch(class_index), step, step + 1)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_steps={self._num_steps}, "
            f"num_segments={self._num_segments}, "
            f"num_classes={self.num_classes})"
        )


class DrumsConverter(_DrumKitConverter):
    """
    Drum converter whose decode() reads one-hot drum-combination labels.

    The expected decode input is [steps, 2**num_classes], a one-hot
    encoding of the integer formed by the drum roll's class bits.
    """

    @property
    def converter_type(self) -> ConverterType:
        return ConverterType.DRUMS

    @property
    def label_depth(self) -> int:
        """Width of the one-hot tensor accepted by decode()."""
        return 2 ** self._table.num_classes

    def decode(self, tensor: Any) -> muspy.Track:
        tensor = as_matrix(tensor, [self.label_depth], name="Drum label tensor")
        labels = argmax_labels(tensor)

        notes: List[muspy.Note] = []
        for step, label in enumerate(labels):
            for class_index in range(self._table.num_classes):
                if label >> class_index & 1:
                    notes.append(self._hit(step, class_index))

        logger.debug("Decoded %d drum hits from %d steps", len(notes), len(labels))
        return make_track(notes, is_drum=True)


class DrumRollConverter(_DrumKitConverter):
    """
    Drum converter whose decode() reads the drum roll directly.

    The expected decode input is [steps, num_classes + 1] as produced by
    encode(), or [steps, num_classes] without the NOR column. Cells are
    treated as hits when >= 0.5, so model probabilities can be passed
    in as well as exact 0/1 values.
    """

    @property
    def converter_type(self) -> ConverterType:
        return ConverterType.DRUM_ROLL

    def decode(self, tensor: Any) -> muspy.Track:
        num_classes = self._table.num_classes
        tensor = as_matrix(tensor, [num_classes + 1, num_classes], name="Drum roll")

        with fetched(tf.cast(tensor[:, :num_classes], tf.float32)) as roll:
            hits = np.argwhere(roll >= ROLL_THRESHOLD)

        # argwhere yields (step, class) pairs in row-major order
        notes = [self._hit(int(step), int(class_index)) for step, class_index in hits]

        logger.debug("Decoded %d drum hits from %d steps", len(notes), tensor.shape[0])
        return make_track(notes, is_drum=True)
