"""Tests for MelodyConverter."""

import numpy as np
import pytest
import tensorflow as tf

from musiccodec.converters import MelodyConverter
from musiccodec.core import (
    ConverterError,
    NotMonophonicError,
    PitchOutOfRangeError,
    StepOutOfRangeError,
)

from .conftest import make_track, note_tuples


class TestMelodyEncoding:
    """Tests for melody labels and one-hot encoding."""

    def test_depth(self, melody_converter, wide_melody_converter):
        """Test that depth is max_pitch - min_pitch + 3."""
        assert melody_converter.depth == 4
        assert wide_melody_converter.depth == 27

    def test_two_note_example(self, melody_converter):
        """Test the two-note example: the second note-on replaces the note-off."""
        track = make_track([(60, 0, 2), (61, 2, 4)])

        labels = melody_converter.labels_from_sequence(track)

        np.testing.assert_array_equal(labels, [2, 0, 3, 0])

    def test_one_hot_shape(self, melody_converter):
        """Test that encode returns a [num_steps, depth] one-hot tensor."""
        track = make_track([(60, 0, 2), (61, 2, 4)])

        tensor = melody_converter.encode(track)

        assert tensor.shape == (4, 4)
        assert tensor.dtype == tf.float32
        np.testing.assert_array_equal(tf.reduce_sum(tensor, axis=1).numpy(), [1, 1, 1, 1])
        np.testing.assert_array_equal(tf.argmax(tensor, axis=1).numpy(), [2, 0, 3, 0])

    def test_note_off_written(self, melody_converter):
        """Test that a note ending before the timeline end gets a note-off."""
        track = make_track([(61, 0, 1), (60, 2, 3)])
        labels = melody_converter.labels_from_sequence(track)
        np.testing.assert_array_equal(labels, [3, 1, 2, 1])

    def test_unsorted_input(self, wide_melody_converter, melody_track):
        """Test that notes are sorted by start step before encoding."""
        shuffled = make_track(list(reversed(note_tuples(melody_track))))
        np.testing.assert_array_equal(
            wide_melody_converter.labels_from_sequence(shuffled),
            wide_melody_converter.labels_from_sequence(melody_track),
        )

    def test_input_not_mutated(self, wide_melody_converter):
        """Test that sorting does not reorder the caller's notes."""
        track = make_track([(67, 4, 6), (60, 0, 2)])
        wide_melody_converter.encode(track)
        assert note_tuples(track) == [(67, 4, 6), (60, 0, 2)]

    def test_empty_track(self, melody_converter):
        """Test that an empty track encodes to all non-events."""
        labels = melody_converter.labels_from_sequence(make_track([]))
        np.testing.assert_array_equal(labels, [0, 0, 0, 0])


class TestMelodyValidation:
    """Tests for encode-time validation errors."""

    def test_overlapping_notes_raise(self, melody_converter):
        """Test that overlapping notes raise NotMonophonicError."""
        track = make_track([(60, 0, 3), (61, 2, 4)])
        with pytest.raises(NotMonophonicError):
            melody_converter.encode(track)

    def test_chord_raises(self, melody_converter):
        """Test that two notes starting together are not monophonic."""
        track = make_track([(60, 0, 2), (61, 0, 2)])
        with pytest.raises(NotMonophonicError):
            melody_converter.encode(track)

    def test_adjacent_notes_allowed(self, melody_converter):
        """Test that a note may start exactly where the previous one ends."""
        track = make_track([(60, 0, 1), (61, 1, 2)])
        melody_converter.encode(track)

    @pytest.mark.parametrize("pitch", [59, 62, 0, 127])
    def test_pitch_out_of_range_raises(self, melody_converter, pitch):
        """Test that pitches outside [min_pitch, max_pitch] raise."""
        track = make_track([(pitch, 0, 1)])
        with pytest.raises(PitchOutOfRangeError) as exc_info:
            melody_converter.encode(track)
        assert exc_info.value.pitch == pitch

    def test_range_bounds_inclusive(self, melody_converter):
        """Test that min_pitch and max_pitch themselves are valid."""
        track = make_track([(60, 0, 1), (61, 2, 3)])
        melody_converter.encode(track)

    def test_monophony_checked_before_range(self, melody_converter):
        """Test that an overlap is reported even when the pitch is also bad."""
        track = make_track([(60, 0, 3), (99, 1, 2)])
        with pytest.raises(NotMonophonicError):
            melody_converter.encode(track)

    @pytest.mark.parametrize("start,end", [(-1, 1), (4, 5), (2, 5)])
    def test_steps_out_of_range_raise(self, melody_converter, start, end):
        """Test that notes must fit inside the timeline."""
        track = make_track([(60, start, end)])
        with pytest.raises(StepOutOfRangeError):
            melody_converter.encode(track)

    def test_zero_duration_raises(self, melody_converter):
        """Test that a zero-length note is rejected."""
        track = make_track([(60, 1, 1)])
        with pytest.raises(ConverterError, match="non-positive duration"):
            melody_converter.encode(track)

    def test_errors_are_value_errors(self, melody_converter):
        """Test that validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            melody_converter.encode(make_track([(70, 0, 1)]))


class TestMelodyDecoding:
    """Tests for rebuilding notes from labels and tensors."""

    def test_two_note_example_round_trip(self, melody_converter):
        """Test that the two-note example decodes to the same notes."""
        track = make_track([(60, 0, 2), (61, 2, 4)])
        decoded = melody_converter.decode(melody_converter.encode(track))
        assert note_tuples(decoded) == [(60, 0, 2), (61, 2, 4)]
        assert not decoded.is_drum

    def test_round_trip_with_rests(self, wide_melody_converter, melody_track):
        """Test round-trip for a melody with rests and a note to the end."""
        decoded = wide_melody_converter.decode(wide_melody_converter.encode(melody_track))
        assert note_tuples(decoded) == note_tuples(melody_track)

    def test_implicit_termination(self, melody_converter):
        """Test that an unterminated note ends at the last step."""
        track = melody_converter.sequence_from_labels(np.array([0, 3, 0, 0]))
        assert note_tuples(track) == [(61, 1, 4)]

    def test_note_on_closes_previous(self, melody_converter):
        """Test that a note-on ends the open note without a note-off."""
        track = melody_converter.sequence_from_labels(np.array([2, 0, 3, 1]))
        assert note_tuples(track) == [(60, 0, 2), (61, 2, 3)]

    def test_repeated_pitch_splits_notes(self, melody_converter):
        """Test that repeating a note-on starts a new note."""
        track = melody_converter.sequence_from_labels(np.array([2, 2, 0, 1]))
        assert note_tuples(track) == [(60, 0, 1), (60, 1, 3)]

    def test_stray_note_off_ignored(self, melody_converter):
        """Test that a note-off with no open note does nothing."""
        track = melody_converter.sequence_from_labels(np.array([1, 1, 2, 1]))
        assert note_tuples(track) == [(60, 2, 3)]

    def test_all_non_events(self, melody_converter):
        """Test that silence decodes to an empty track."""
        track = melody_converter.decode(tf.one_hot([0, 0, 0, 0], 4))
        assert note_tuples(track) == []

    def test_decodes_probabilities(self, melody_converter):
        """Test that decode takes the arg-max of soft model output."""
        probs = np.array([
            [0.1, 0.1, 0.7, 0.1],
            [0.5, 0.2, 0.2, 0.1],
            [0.1, 0.1, 0.1, 0.7],
            [0.1, 0.7, 0.1, 0.1],
        ], dtype=np.float32)
        track = melody_converter.decode(probs)
        assert note_tuples(track) == [(60, 0, 2), (61, 2, 3)]

    def test_wrong_depth_raises(self, melody_converter):
        """Test that a tensor of the wrong width is rejected."""
        with pytest.raises(ValueError, match="depth 4"):
            melody_converter.decode(tf.zeros([4, 5]))


class TestMelodyMetadata:
    """Tests for construction, metadata and serialization."""

    def test_state(self, melody_converter):
        """Test the serialized state."""
        assert melody_converter.get_state() == {
            'type': 'MelodyConverter',
            'args': {'num_steps': 4, 'min_pitch': 60, 'max_pitch': 61, 'num_segments': None},
        }

    def test_min_above_max_rejected(self):
        """Test that min_pitch must not exceed max_pitch."""
        with pytest.raises(ValueError, match="min_pitch must be <= max_pitch"):
            MelodyConverter(num_steps=4, min_pitch=62, max_pitch=60)

    def test_segments_passed_through(self):
        """Test that num_segments is stored as given, even when it does not divide num_steps."""
        converter = MelodyConverter(num_steps=32, min_pitch=21, max_pitch=108, num_segments=3)
        assert converter.num_segments == 3
        assert converter.get_state()['args']['num_segments'] == 3

    def test_equality(self):
        """Test that converters with the same config compare equal."""
        a = MelodyConverter(num_steps=32, min_pitch=21, max_pitch=108)
        b = MelodyConverter(num_steps=32, min_pitch=21, max_pitch=108)
        assert a == b
        assert a != MelodyConverter(num_steps=32, min_pitch=21, max_pitch=107)
