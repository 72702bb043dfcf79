"""Diatonic chord transposition.

A chord is moved by scale degree rather than by semitones: its root is
located among the diatonic chords of the source key and replaced by the
root of the chord at the same degree in the target key. Chords whose root
is not diatonic to the source key are returned untouched.
"""

import logging

from services.theory import (
    chords_for,
    key_interval,
    normalize,
    parse_chord_root,
    shift_root,
    uses_flats,
)

logger = logging.getLogger(__name__)


def _degree_of(root: str, scale_chords: tuple[str, ...]) -> int:
    """Index of the first scale chord whose root is enharmonic to ``root``, or -1."""
    target = normalize(root)
    for i, scale_chord in enumerate(scale_chords):
        scale_root = parse_chord_root(scale_chord)
        if scale_root and normalize(scale_root) == target:
            return i
    return -1


def transpose(chord: str, from_key: str, to_key: str) -> str:
    """Transpose ``chord`` from ``from_key`` to ``to_key`` by scale degree.

    Never raises: unsupported keys, unparseable tokens and non-diatonic
    chords all come back unchanged.
    """
    if from_key == to_key:
        return chord

    source_chords = chords_for(from_key)
    target_chords = chords_for(to_key)
    if source_chords is None or target_chords is None:
        logger.warning(
            "Diatonic chords not defined for key %r or %r; leaving chord %r unchanged",
            normalize(from_key), normalize(to_key), chord,
        )
        return chord

    if normalize(from_key) == normalize(to_key):
        return chord

    if "/" in chord:
        main_chord, bass_note = chord.split("/", 1)
        return (
            f"{transpose(main_chord, from_key, to_key)}/"
            f"{transpose_bass(bass_note, from_key, to_key)}"
        )

    root = parse_chord_root(chord)
    if root is None:
        return chord
    suffix = chord[len(root):]

    degree = _degree_of(root, source_chords)
    if degree == -1:
        return chord

    target_root = parse_chord_root(target_chords[degree]) or target_chords[degree]
    return target_root + suffix


def transpose_bass(note: str, from_key: str, to_key: str) -> str:
    """Transpose the bass note of a slash chord.

    The note is looked up like any chord first. A bass root outside the
    source key's diatonic set (a passing bass such as the F# in D/F# over C)
    is shifted by the interval between the two tonics instead.
    """
    transposed = transpose(note, from_key, to_key)
    if transposed != note or normalize(from_key) == normalize(to_key):
        return transposed

    root = parse_chord_root(note)
    source_chords = chords_for(from_key)
    if root is None or source_chords is None or chords_for(to_key) is None:
        return note
    if _degree_of(root, source_chords) != -1:
        return note

    interval = key_interval(normalize(from_key), normalize(to_key))
    if interval is None:
        return note
    new_root = shift_root(root, interval, prefer_flats=uses_flats(to_key))
    if new_root is None:
        return note
    return new_root + note[len(root):]
