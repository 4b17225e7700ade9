"""
Helpers around muspy objects used as note sequences.

A note sequence is anything with a `notes` list of muspy.Note, normally
a muspy.Track. Times are quantized steps: a note covers
[note.time, note.time + note.duration).
"""

from typing import Any, Iterable, List, Optional

import muspy


DEFAULT_VELOCITY = 64
DEFAULT_RESOLUTION = 4  # Steps per quarter note (16th-note grid)


def note_start(note: muspy.Note) -> int:
    """Inclusive start step of a note."""
    return int(note.time)


def note_end(note: muspy.Note) -> int:
    """Exclusive end step of a note."""
    return int(note.time) + int(note.duration)


def sorted_notes(sequence: Any) -> List[muspy.Note]:
    """Notes ordered by start step. The sequence itself is left untouched."""
    return sorted(sequence.notes, key=note_start)


def make_note(pitch: int, start: int, end: int) -> muspy.Note:
    """Create a muspy.Note covering [start, end)."""
    return muspy.Note(
        time=int(start),
        pitch=int(pitch),
        duration=int(end) - int(start),
        velocity=DEFAULT_VELOCITY,
    )


def make_track(notes: Iterable[muspy.Note], is_drum: bool) -> muspy.Track:
    """Wrap decoded notes in a new muspy.Track."""
    return muspy.Track(
        program=0,
        is_drum=is_drum,
        name="Drums" if is_drum else "Melody",
        notes=list(notes),
    )


def select_track(music: muspy.Music, is_drum: bool) -> Optional[muspy.Track]:
    """
    Pick the first drum track (or the first pitched track) from a Music.

    Returns:
        The matching track, or None if the music has none
    """
    for track in music.tracks:
        if track.is_drum == is_drum:
            return track
    return None


def to_music(track: muspy.Track, resolution: int = DEFAULT_RESOLUTION) -> muspy.Music:
    """Wrap a single track in a muspy.Music with the given steps per quarter."""
    return muspy.Music(resolution=resolution, tracks=[track])
