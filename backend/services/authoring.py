import html
import re

from bs4 import BeautifulSoup

# Chord tokens as typed by song editors: root, qualities/extensions, optional bass
CHORD_REGEX = re.compile(
    r"\b([A-G][#b]?(?:m|maj|min|dim|aug|sus[24]?|add\d+|[0-9])*(?:/[A-G][#b]?)?)(?![\w#])"
)


def _chord_span(chord: str) -> str:
    if "/" in chord:
        main_chord, bass_note = chord.split("/", 1)
        return (
            f'<span class="c" title="">{main_chord}</span>'
            f'<span class="on" title="">/</span>'
            f'<span class="c" title="">{bass_note}</span>'
        )
    return f'<span class="c" title="">{chord}</span>'


def convert_text_to_chord_html(text: str, key: str = "C") -> str:
    """Convert plain chord-over-lyrics text to the stored markup format.

    Returns an empty string for blank input.
    """
    if not text or not text.strip():
        return ""

    body = CHORD_REGEX.sub(lambda m: _chord_span(m.group(1)), html.escape(text, quote=False))
    return f'<div>\n<pre data-key="{html.escape(key)}">{body}</pre>\n</div>'


def parse_content_for_editing(markup: str) -> str:
    """Turn stored markup back into the plain text shown in the editor."""
    if not markup or not markup.strip():
        return ""

    soup = BeautifulSoup(markup, "html.parser")
    for element in soup.select('[data-chord="true"], span.c, span.on'):
        element.replace_with(element.get_text())

    pre = soup.find("pre")
    if pre is not None:
        return pre.get_text()
    return soup.get_text()
