"""Unit tests for key normalization, the diatonic table and semitone helpers."""

import pytest

from services.theory import (
    DIATONIC_CHORDS,
    MAJOR_KEYS,
    MINOR_KEYS,
    UNMODELED_MINOR_KEYS,
    calculate_semitones,
    chords_for,
    is_supported_key,
    normalize,
    transpose_chord_symbol,
    uses_flats,
)


@pytest.mark.parametrize(
    "alias, canonical",
    [("Db", "C#"), ("Eb", "D#"), ("Gb", "F#"), ("Ab", "G#"), ("A#", "Bb"), ("E#", "F"), ("B#", "C")],
)
def test_normalize_maps_aliases(alias: str, canonical: str) -> None:
    assert normalize(alias) == canonical


def test_normalize_leaves_canonical_and_unknown_keys() -> None:
    assert normalize("C") == "C"
    assert normalize("Bb") == "Bb"
    assert normalize("Am") == "Am"
    assert normalize("H") == "H"


def test_every_listed_key_has_seven_chords() -> None:
    for key in MAJOR_KEYS + MINOR_KEYS:
        chords = chords_for(key)
        assert chords is not None, key
        assert len(chords) == 7


def test_table_has_exactly_the_listed_keys() -> None:
    assert set(DIATONIC_CHORDS) == set(MAJOR_KEYS) | set(MINOR_KEYS)
    assert len(MAJOR_KEYS) == 12
    assert len(MINOR_KEYS) == 7


def test_major_and_minor_degree_patterns() -> None:
    assert chords_for("C") == ("C", "Dm", "Em", "F", "G", "Am", "Bdim")
    assert chords_for("Am") == ("Am", "Bdim", "C", "Dm", "Em", "F", "G")


def test_chords_for_alias_uses_canonical_entry() -> None:
    assert chords_for("Eb") == DIATONIC_CHORDS["D#"]
    assert chords_for("A#") == DIATONIC_CHORDS["Bb"]


def test_unmodeled_minor_keys_are_unsupported() -> None:
    for key in UNMODELED_MINOR_KEYS:
        assert chords_for(key) is None
        assert not is_supported_key(key)


def test_table_cannot_be_modified() -> None:
    with pytest.raises(TypeError):
        DIATONIC_CHORDS["H"] = ("H",) * 7  # type: ignore[index]


def test_uses_flats() -> None:
    assert uses_flats("F")
    assert uses_flats("Cm")
    assert not uses_flats("G")
    assert not uses_flats("C#m")


@pytest.mark.parametrize(
    "symbol, semitones, expected",
    [
        ("Am7", 2, "Bm7"),
        ("C", 1, "C#"),
        ("D", -1, "Db"),
        ("C", -1, "B"),
        ("Bbmaj7", 2, "Cmaj7"),
        ("N.C.", 3, "N.C."),
    ],
)
def test_transpose_chord_symbol(symbol: str, semitones: int, expected: str) -> None:
    assert transpose_chord_symbol(symbol, semitones) == expected


def test_calculate_semitones_picks_shortest_direction() -> None:
    assert calculate_semitones("C", "D") == 2
    assert calculate_semitones("C", "G") == -5
    assert calculate_semitones("G", "C") == 5
    assert calculate_semitones("C", "F#") == 6
    assert calculate_semitones("Am", "Bbmaj7") == 1


def test_calculate_semitones_unknown_root_is_zero() -> None:
    assert calculate_semitones("H", "C") == 0
