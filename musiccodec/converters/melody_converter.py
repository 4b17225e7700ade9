"""
Melody converter.

Melodies are a sequence of categorical labels, one per step:
    0:      non-event (hold the current note, or rest)
    1:      note-off
    2..:    note-on at pitch label - 2 + min_pitch

encode() returns the one-hot encoding of these labels and decode()
expects a one-hot (or probability) tensor of the same width.
"""

import logging
from typing import Any, Dict, List, Optional

import muspy
import numpy as np
import tensorflow as tf

from .base_converter import BaseConverter
from ..configs.converter_config import ConverterType, MelodyConverterConfig
from ..core.errors import (
    ConverterError,
    NotMonophonicError,
    PitchOutOfRangeError,
    StepOutOfRangeError,
)
from ..core.note_sequence import make_note, make_track, note_end, note_start, sorted_notes
from ..core.tensors import argmax_labels, as_matrix, one_hot

logger = logging.getLogger(__name__)


class MelodyConverter(BaseConverter):
    """
    Converter for monophonic melodies within a fixed pitch range.

    Attributes:
        min_pitch: Lowest pitch modelled (inclusive)
        max_pitch: Highest pitch modelled (inclusive)
        depth: Number of labels, max_pitch - min_pitch + 3
    """

    NO_EVENT = 0
    NOTE_OFF = 1
    FIRST_PITCH = 2

    def __init__(
        self,
        num_steps: int,
        min_pitch: int,
        max_pitch: int,
        num_segments: Optional[int] = None,
    ):
        """
        Initialize the converter.

        Args:
            num_steps: Length of each sequence
            min_pitch: Lowest pitch to model; lower pitches raise on encode
            max_pitch: Highest pitch to model; higher pitches raise on encode
            num_segments: Number of conductor segments, if applicable
        """
        MelodyConverterConfig(
            num_steps=num_steps,
            min_pitch=min_pitch,
            max_pitch=max_pitch,
            num_segments=num_segments,
        )
        super().__init__(num_steps, num_segments)
        self._min_pitch = min_pitch
        self._max_pitch = max_pitch

        logger.debug(
            "Built MelodyConverter with %d steps, pitches %d-%d",
            num_steps, min_pitch, max_pitch,
        )

    @classmethod
    def from_config(cls, config: MelodyConverterConfig) -> "MelodyConverter":
        return cls(
            num_steps=config.num_steps,
            min_pitch=config.min_pitch,
            max_pitch=config.max_pitch,
            num_segments=config.num_segments,
        )

    @property
    def min_pitch(self) -> int:
        return self._min_pitch

    @property
    def max_pitch(self) -> int:
        return self._max_pitch

    @property
    def depth(self) -> int:
        return self._max_pitch - self._min_pitch + 3

    @property
    def converter_type(self) -> ConverterType:
        return ConverterType.MELODY

    def labels_from_sequence(self, sequence: Any) -> np.ndarray:
        """
        Convert a monophonic sequence to per-step labels.

        Notes are visited in start order on a sorted copy. A note-on
        overwrites a note-off written at the same step by the previous
        note. A note ending exactly at num_steps gets no note-off; it is
        closed by the end of the timeline.

        Args:
            sequence: Object with a `notes` list of muspy.Note

        Returns:
            int32 array of shape [num_steps]

        Raises:
            NotMonophonicError: If a note starts before the previous one ends
            PitchOutOfRangeError: If a pitch is outside [min_pitch, max_pitch]
            StepOutOfRangeError: If a note does not fit in the timeline
        """
        labels = np.full(self._num_steps, self.NO_EVENT, dtype=np.int32)
        last_end = -1

        for note in sorted_notes(sequence):
            start, end = note_start(note), note_end(note)
            if start < last_end:
                raise NotMonophonicError(start, last_end)
            if note.pitch < self._min_pitch or note.pitch > self._max_pitch:
                raise PitchOutOfRangeError(note.pitch, self._min_pitch, self._max_pitch)
            if not 0 <= start < self._num_steps:
                raise StepOutOfRangeError(start, self._num_steps)
            if end > self._num_steps:
                raise StepOutOfRangeError(end, self._num_steps)
            if end <= start:
                raise ConverterError(f"Note at step {start} has non-positive duration")

            labels[start] = note.pitch - self._min_pitch + self.FIRST_PITCH
            if end < self._num_steps:
                labels[end] = self.NOTE_OFF
            last_end = end

        return labels

    def sequence_from_labels(self, labels: np.ndarray) -> muspy.Track:
        """
        Rebuild notes from per-step labels.

        A note-on closes any open note before opening its own, so a
        missing note-off is not an error. A note still open after the
        last step ends at len(labels).
        """
        notes: List[muspy.Note] = []
        open_pitch = None
        open_start = 0

        for step, label in enumerate(labels):
            label = int(label)
            if label == self.NO_EVENT:
                continue
            if open_pitch is not None:
                notes.append(make_note(open_pitch, open_start, step))
                open_pitch = None
            if label != self.NOTE_OFF:
                open_pitch = label - self.FIRST_PITCH + self._min_pitch
                open_start = step

        if open_pitch is not None:
            notes.append(make_note(open_pitch, open_start, len(labels)))

        return make_track(notes, is_drum=False)

    def encode(self, sequence: Any) -> tf.Tensor:
        labels = self.labels_from_sequence(sequence)
        logger.debug("Encoded %d melody notes", len(sequence.notes))
        return one_hot(labels, self.depth)

    def decode(self, tensor: Any) -> muspy.Track:
        tensor = as_matrix(tensor, [self.depth], name="Melody tensor")
        track = self.sequence_from_labels(argmax_labels(tensor))
        logger.debug("Decoded %d melody notes", len(track.notes))
        return track

    def get_state(self) -> Dict[str, Any]:
        return {
            'type': self.converter_type.value,
            'args': {
                'num_steps': self._num_steps,
                'min_pitch': self._min_pitch,
                'max_pitch': self._max_pitch,
                'num_segments': self._num_segments,
            },
        }

    def __repr__(self) -> str:
        return (
            f"MelodyConverter(num_steps={self._num_steps}, "
            f"min_pitch={self._min_pitch}, max_pitch={self._max_pitch}, "
            f"depth={self.depth})"
        )
