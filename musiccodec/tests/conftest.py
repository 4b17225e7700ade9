"""Shared pytest fixtures for converter tests."""

import pytest
import muspy

from musiccodec.converters import DrumsConverter, DrumRollConverter, MelodyConverter


def make_track(notes, is_drum=False):
    """Build a muspy.Track from (pitch, start, end) tuples."""
    return muspy.Track(
        program=0,
        is_drum=is_drum,
        notes=[
            muspy.Note(time=start, pitch=pitch, duration=end - start, velocity=80)
            for pitch, start, end in notes
        ],
    )


def note_tuples(track):
    """(pitch, start, end) tuples of a track, in track order."""
    return [(n.pitch, n.time, n.time + n.duration) for n in track.notes]


@pytest.fixture
def two_class_table():
    """Minimal two-drum kit: kick and snare."""
    return [[36], [38]]


@pytest.fixture
def drums_converter():
    """DrumsConverter with the default 9-class kit and 16 steps."""
    return DrumsConverter(num_steps=16)


@pytest.fixture
def small_drums_converter(two_class_table):
    """DrumsConverter over the two-drum kit."""
    return DrumsConverter(num_steps=4, pitch_classes=two_class_table)


@pytest.fixture
def drum_roll_converter():
    """DrumRollConverter with the default 9-class kit and 16 steps."""
    return DrumRollConverter(num_steps=16)


@pytest.fixture
def melody_converter():
    """Two-pitch melody converter over 4 steps."""
    return MelodyConverter(num_steps=4, min_pitch=60, max_pitch=61)


@pytest.fixture
def wide_melody_converter():
    """Melody converter over a two-octave range and 16 steps."""
    return MelodyConverter(num_steps=16, min_pitch=48, max_pitch=72)


@pytest.fixture
def drum_track():
    """Kick/snare/hi-hat pattern with a doubled hit on step 0."""
    return make_track(
        [
            (36, 0, 1), (42, 0, 1),
            (42, 2, 3),
            (38, 4, 5), (42, 4, 5),
            (35, 8, 9),   # alternate kick, collapses to 36
            (40, 12, 13), # electric snare, collapses to 38
        ],
        is_drum=True,
    )


@pytest.fixture
def melody_track():
    """Monophonic melody with a rest between notes."""
    return make_track([(60, 0, 2), (64, 2, 3), (67, 5, 8), (72, 8, 16)])


@pytest.fixture
def mock_music(melody_track, drum_track):
    """Multitrack muspy.Music with one pitched and one drum track."""
    return muspy.Music(resolution=4, tracks=[melody_track, drum_track])
