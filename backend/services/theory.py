import re
from types import MappingProxyType
from typing import Optional

# Major keys offered in key selectors, in the spelling used as table keys
MAJOR_KEYS = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "Bb", "B")

# Only these natural minor keys have a diatonic table entry
MINOR_KEYS = ("Cm", "Dm", "Em", "Fm", "Gm", "Am", "Bm")

UNMODELED_MINOR_KEYS = ("C#m", "D#m", "F#m", "G#m", "Bbm")

# Enharmonic spelling -> canonical table spelling
_ENHARMONIC = MappingProxyType({
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "A#": "Bb",
    "E#": "F",
    "B#": "C",
})

# Key -> diatonic chords for scale degrees I..VII (major) or i..VII (minor).
# Spellings follow the key's own scale, so some roots (E#, B#) only match
# through normalize().
DIATONIC_CHORDS = MappingProxyType({
    "C": ("C", "Dm", "Em", "F", "G", "Am", "Bdim"),
    "C#": ("C#", "D#m", "E#m", "F#", "G#", "A#m", "B#dim"),
    "D": ("D", "Em", "F#m", "G", "A", "Bm", "C#dim"),
    "D#": ("D#", "Fm", "Gm", "G#", "A#", "Cm", "Ddim"),
    "E": ("E", "F#m", "G#m", "A", "B", "C#m", "D#dim"),
    "F": ("F", "Gm", "Am", "Bb", "C", "Dm", "Edim"),
    "F#": ("F#", "G#m", "A#m", "B", "C#", "D#m", "E#dim"),
    "G": ("G", "Am", "Bm", "C", "D", "Em", "F#dim"),
    "G#": ("G#", "A#m", "B#m", "C#", "D#", "Fm", "Gdim"),
    "A": ("A", "Bm", "C#m", "D", "E", "F#m", "G#dim"),
    "Bb": ("Bb", "Cm", "Dm", "Eb", "F", "Gm", "Adim"),
    "B": ("B", "C#m", "D#m", "E", "F#", "G#m", "A#dim"),

    "Cm": ("Cm", "Ddim", "Eb", "Fm", "Gm", "Ab", "Bb"),
    "Dm": ("Dm", "Edim", "F", "Gm", "Am", "Bb", "C"),
    "Em": ("Em", "F#dim", "G", "Am", "Bm", "C", "D"),
    "Fm": ("Fm", "Gdim", "Ab", "Bbm", "Cm", "Db", "Eb"),
    "Gm": ("Gm", "Adim", "Bb", "Cm", "Dm", "Eb", "F"),
    "Am": ("Am", "Bdim", "C", "Dm", "Em", "F", "G"),
    "Bm": ("Bm", "C#dim", "D", "Em", "F#m", "G", "A"),
})

# Pitch-class map: note name -> semitone offset from C
PITCH_CLASS = {
    "C": 0, "C#": 1, "Db": 1,
    "D": 2, "D#": 3, "Eb": 3,
    "E": 4, "Fb": 4, "E#": 5,
    "F": 5, "F#": 6, "Gb": 6,
    "G": 7, "G#": 8, "Ab": 8,
    "A": 9, "A#": 10, "Bb": 10,
    "B": 11, "Cb": 11, "B#": 0,
}

SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

TRANSPOSE_OPTIONS = (
    {"label": "Original", "value": 0},
    {"label": "+1 (Half step up)", "value": 1},
    {"label": "+2 (Whole step up)", "value": 2},
    {"label": "+3", "value": 3},
    {"label": "+4", "value": 4},
    {"label": "+5", "value": 5},
    {"label": "+6 (Tritone)", "value": 6},
    {"label": "-6 (Tritone)", "value": -6},
    {"label": "-5", "value": -5},
    {"label": "-4", "value": -4},
    {"label": "-3", "value": -3},
    {"label": "-2 (Whole step down)", "value": -2},
    {"label": "-1 (Half step down)", "value": -1},
)

AVAILABLE_CHORDS = tuple(
    {"label": sharp if sharp == flat else f"{sharp}/{flat}", "value": sharp}
    for sharp, flat in zip(SHARP_NAMES, FLAT_NAMES)
)

# Regex: root is a capital letter optionally followed by # or b
_ROOT_RE = re.compile(r"^([A-G][#b]?)")


def normalize(key: str) -> str:
    """Map an enharmonic spelling to the one used as a table key.

    Unknown spellings are returned unchanged.
    """
    return _ENHARMONIC.get(key, key)


def chords_for(key: str) -> Optional[tuple[str, ...]]:
    """Return the seven diatonic chords of ``key``, or None if not modelled."""
    return DIATONIC_CHORDS.get(normalize(key))


def is_supported_key(key: str) -> bool:
    return chords_for(key) is not None


def parse_chord_root(symbol: str) -> str | None:
    """Extract the root note from a chord symbol like 'Dm7', 'F#7', 'Bbmaj7'.

    Returns None if no valid root is found.
    """
    m = _ROOT_RE.match(symbol)
    return m.group(1) if m else None


def uses_flats(key: str) -> bool:
    """True when the diatonic chords of ``key`` are spelled with flats."""
    chords = chords_for(key) or ()
    return any("b" in (parse_chord_root(c) or "") for c in chords)


def shift_root(root: str, semitones: int, prefer_flats: bool) -> Optional[str]:
    pitch = PITCH_CLASS.get(root)
    if pitch is None:
        return None
    names = FLAT_NAMES if prefer_flats else SHARP_NAMES
    return names[(pitch + semitones) % 12]


def key_interval(from_key: str, to_key: str) -> Optional[int]:
    """Semitones (0-11) from the tonic of ``from_key`` up to that of ``to_key``."""
    src = PITCH_CLASS.get(parse_chord_root(from_key) or "")
    dst = PITCH_CLASS.get(parse_chord_root(to_key) or "")
    if src is None or dst is None:
        return None
    return (dst - src) % 12


def transpose_chord_symbol(symbol: str, semitones: int) -> str:
    """Transpose a chord symbol chromatically by a semitone interval.

    Keeps quality/extensions unchanged; only the root is moved. Upward
    shifts are spelled with sharps, downward shifts with flats.
    """
    root = parse_chord_root(symbol)
    if root is None:
        return symbol  # can't parse root, return as-is

    new_root = shift_root(root, semitones, prefer_flats=semitones < 0)
    if new_root is None:
        return symbol
    return new_root + symbol[len(root):]


def calculate_semitones(from_chord: str, to_chord: str) -> int:
    """Return the shortest signed interval (-6..6) between two chord roots.

    Returns 0 if either root is not recognized.
    """
    src = PITCH_CLASS.get(parse_chord_root(from_chord) or from_chord)
    dst = PITCH_CLASS.get(parse_chord_root(to_chord) or to_chord)
    if src is None or dst is None:
        return 0

    semitones = dst - src
    if semitones > 6:
        semitones -= 12
    if semitones < -6:
        semitones += 12
    return semitones
