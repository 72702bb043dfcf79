import re
from typing import Iterable

from bs4 import BeautifulSoup

from schemas.song import ParsedSong
from services.theory import transpose_chord_symbol

_CHORD_RE = re.compile(r"^[A-G][#b]?(m|maj|min|dim|aug|sus|add)?[0-9]*(/[A-G][#b]?)?$")
_SIMPLE_CHORD_RE = re.compile(r"^[A-G][#b]?m?$")

# A line with more words than this is treated as lyrics
_MAX_CHORD_LINE_WORDS = 6


def is_likely_chord(word: str) -> bool:
    if not word:
        return False
    return bool(_CHORD_RE.match(word) or _SIMPLE_CHORD_RE.match(word))


def is_likely_chord_line(line: str) -> bool:
    """True when more than half the words on the line look like chords."""
    words = line.split()
    if not words or len(words) > _MAX_CHORD_LINE_WORDS:
        return False
    chord_like = [w for w in words if is_likely_chord(w)]
    return len(chord_like) > len(words) / 2


def _extract_chords(line: str, chords: set[str]) -> None:
    chords.update(w for w in line.split() if is_likely_chord(w))


def parse_lyrics_and_chords(text: str) -> ParsedSong:
    """Split chord-over-lyrics text into lyrics and the set of chords used.

    Input format example::

        D              G
        Bapa, Engkau Sungguh Baik
                 F#m  Bm  E         A
        Kasih-Mu Melimpah   Di Hidupku
    """
    if not text.strip():
        return ParsedSong(lyrics_and_chords="", lyrics="", chords=[])

    lines = text.split("\n")
    lyrics_lines: list[str] = []
    chords: set[str] = set()

    i = 0
    while i < len(lines):
        current = lines[i].strip()
        following = lines[i + 1].strip() if i + 1 < len(lines) else ""
        chord_line = is_likely_chord_line(current)

        if chord_line and following and not is_likely_chord_line(following):
            # Chord line directly above its lyrics line
            _extract_chords(current, chords)
            lyrics_lines.append(following)
            i += 2
        elif not chord_line and current:
            lyrics_lines.append(current)
            i += 1
        elif chord_line:
            _extract_chords(current, chords)
            i += 1
        else:
            lyrics_lines.append("")
            i += 1

    return ParsedSong(
        lyrics_and_chords=text,
        lyrics="\n".join(lyrics_lines).strip(),
        chords=sorted(chords),
    )


def rich_text_to_plain_text(markup: str) -> str:
    """Convert editor HTML to plain text."""
    text = BeautifulSoup(markup, "html.parser").get_text()
    return text.replace("\u00a0", " ").strip()


def transpose_lyrics_and_chords(markup: str, chords: Iterable[str], semitones: int) -> str:
    """Shift every occurrence of the given chords by ``semitones``.

    Chords are matched as whole tokens and replaced in a single pass, so a
    chord produced by the shift is never shifted again.
    """
    mapping = {chord: transpose_chord_symbol(chord, semitones) for chord in chords if chord}
    if not mapping:
        return markup

    alternation = "|".join(re.escape(c) for c in sorted(mapping, key=len, reverse=True))
    pattern = re.compile(rf"(?<![\w#])({alternation})(?![\w#])")
    return pattern.sub(lambda m: mapping[m.group(1)], markup)
