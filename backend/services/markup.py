"""Chord rewriting for stored song markup.

Songs are stored as HTML produced by the chord editor::

    <div>
    <pre data-key="C"><span class="c" title="">G</span> Amazing grace ...</pre>
    </div>

The markup is parsed into an owned node tree in which every node keeps the
exact source text it was built from, so serializing an untouched tree gives
back the input byte-for-byte. Only chord nodes and the key attribute are
ever rewritten.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Optional, Union

from services.theory import is_supported_key, normalize
from services.transposer import transpose, transpose_bass

logger = logging.getLogger(__name__)

CHORD_CLASS = "c"
SLASH_CLASS = "on"
KEY_ATTRIBUTE = "data-key"

_VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_TAG_NAME_RE = re.compile(r"<[^\s/>]+")
# One attribute at a time; quoted values are consumed whole
_ATTR_RE = re.compile(
    r"""[\s/]*([^\s"'>/=][^\s"'>/=]*)(?:\s*=\s*("[^"]*"|'[^']*'|(?!['"])[^\s>]*))?"""
)


@dataclass
class Text:
    raw: str
    value: str


@dataclass
class Raw:
    """Comments, declarations and stray end tags, kept verbatim."""

    raw: str


@dataclass
class Element:
    tag: str
    attrs: list[tuple[str, Optional[str]]]
    start_tag: str = ""
    children: list["Node"] = field(default_factory=list)
    end_tag: str = ""

    def get(self, name: str) -> Optional[str]:
        for attr_name, value in self.attrs:
            if attr_name == name:
                return value
        return None

    def has_class(self, name: str) -> bool:
        return name in (self.get("class") or "").split()

    @property
    def text(self) -> str:
        return "".join(
            child.value if isinstance(child, Text) else
            child.text if isinstance(child, Element) else ""
            for child in self.children
        )


Node = Union[Text, Raw, Element]


class _TreeBuilder(HTMLParser):
    """Builds a node tree, recording where each parser event starts.

    Every handler runs while ``getpos()`` still points at the start of the
    construct being handled, so the source text of each event is the slice
    up to the start of the next one.
    """

    def __init__(self, document: str):
        super().__init__(convert_charrefs=True)
        self._document = document
        self._line_starts = [0]
        for i, ch in enumerate(document):
            if ch == "\n":
                self._line_starts.append(i + 1)
        self.root: list[Node] = []
        self._stack: list[Element] = []
        self._marks: list[tuple[int, object, str]] = []

    def _offset(self) -> int:
        line, col = self.getpos()
        return self._line_starts[line - 1] + col

    def _mark(self, target: object, attr: str) -> None:
        self._marks.append((self._offset(), target, attr))

    def _append(self, node: Node) -> None:
        if self._stack:
            self._stack[-1].children.append(node)
        else:
            self.root.append(node)

    def handle_starttag(self, tag, attrs):
        element = Element(tag=tag, attrs=attrs)
        self._append(element)
        self._mark(element, "start_tag")
        if tag not in _VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        element = Element(tag=tag, attrs=attrs)
        self._append(element)
        self._mark(element, "start_tag")

    def handle_endtag(self, tag):
        for depth in range(len(self._stack) - 1, -1, -1):
            if self._stack[depth].tag == tag:
                element = self._stack[depth]
                del self._stack[depth:]
                self._mark(element, "end_tag")
                return
        stray = Raw(raw="")
        self._append(stray)
        self._mark(stray, "raw")

    def handle_data(self, data):
        node = Text(raw="", value=data)
        self._append(node)
        self._mark(node, "raw")

    def _handle_raw(self, _data):
        node = Raw(raw="")
        self._append(node)
        self._mark(node, "raw")

    handle_comment = _handle_raw
    handle_decl = _handle_raw
    handle_pi = _handle_raw
    unknown_decl = _handle_raw

    def build(self) -> list[Node]:
        self.feed(self._document)
        self.close()

        ends = [offset for offset, _, _ in self._marks[1:]] + [len(self._document)]
        for (start, target, attr), end in zip(self._marks, ends):
            setattr(target, attr, self._document[start:end])

        # Text before the first event never reaches a handler
        leading = self._marks[0][0] if self._marks else len(self._document)
        if leading:
            self.root.insert(0, Raw(raw=self._document[:leading]))
        return self.root


def parse_markup(document: str) -> list[Node]:
    """Parse markup into an owned node tree that serializes back losslessly."""
    return _TreeBuilder(document).build()


def serialize(nodes: list[Node]) -> str:
    parts: list[str] = []

    def _walk(items: list[Node]) -> None:
        for node in items:
            if isinstance(node, Element):
                parts.append(node.start_tag)
                _walk(node.children)
                parts.append(node.end_tag)
            else:
                parts.append(node.raw)

    _walk(nodes)
    return "".join(parts)


def _iter_elements(nodes: list[Node]):
    for node in nodes:
        if isinstance(node, Element):
            yield node
            yield from _iter_elements(node.children)


def _find_key_element(nodes: list[Node]) -> Optional[Element]:
    for element in _iter_elements(nodes):
        if element.get(KEY_ATTRIBUTE) is not None:
            return element
    return None


def _replace_attr_value(start_tag: str, name: str, value: str) -> str:
    """Swap the value of attribute ``name`` in a raw start tag."""
    match = _TAG_NAME_RE.match(start_tag)
    if match is None:
        return start_tag
    pos = match.end()
    while True:
        match = _ATTR_RE.match(start_tag, pos)
        if match is None or match.end() == pos:
            return start_tag
        if match.group(1).lower() == name and match.group(2) is not None:
            return start_tag[:match.start(2)] + value + start_tag[match.end(2):]
        pos = match.end()


def _set_key(nodes: list[Node], key: str) -> None:
    element = _find_key_element(nodes)
    if element is None:
        logger.debug("No %s attribute found; key metadata not updated", KEY_ATTRIBUTE)
        return
    value = '"%s"' % html.escape(key, quote=True)
    element.start_tag = _replace_attr_value(element.start_tag, KEY_ATTRIBUTE, value)
    element.attrs = [
        (name, key if name == KEY_ATTRIBUTE else v) for name, v in element.attrs
    ]


def _text_nodes(nodes: list[Node]):
    for node in nodes:
        if isinstance(node, Text):
            yield node
        elif isinstance(node, Element):
            yield from _text_nodes(node.children)


def _set_text(element: Element, text: str) -> None:
    # Keep inline formatting when the chord sits in a single text run
    runs = [node for node in _text_nodes(element.children) if node.value]
    if len(runs) == 1:
        runs[0].value = text
        runs[0].raw = html.escape(text, quote=False)
    else:
        element.children = [Text(raw=html.escape(text, quote=False), value=text)]


def _is_chord(node: Node) -> bool:
    return (
        isinstance(node, Element)
        and node.tag == "span"
        and node.has_class(CHORD_CLASS)
    )


def _is_separator(node: Node) -> bool:
    return (
        isinstance(node, Element)
        and node.tag == "span"
        and node.has_class(SLASH_CLASS)
    )


def _is_slash(node: Node) -> bool:
    return _is_separator(node) and node.text.strip() == "/"


def _transpose_chords(nodes: list[Node], from_key: str, to_key: str) -> int:
    """Rewrite chord nodes in place; return the number of chords changed."""
    changed = 0
    for i, node in enumerate(nodes):
        if not isinstance(node, Element):
            continue
        if not _is_chord(node):
            changed += _transpose_chords(node.children, from_key, to_key)
            continue

        original = node.text
        is_bass = i >= 2 and _is_slash(nodes[i - 1]) and _is_chord(nodes[i - 2])
        if is_bass:
            new = transpose_bass(original, from_key, to_key)
        else:
            new = transpose(original, from_key, to_key)
        if new != original:
            _set_text(node, new)
            changed += 1
    return changed


def rewrite(document: str, from_key: str, to_key: str) -> str:
    """Transpose every chord in ``document`` and record ``to_key`` as its key.

    Nothing but chord text and the key attribute changes. When either key has
    no diatonic table the document is returned as-is.
    """
    nodes = parse_markup(document)

    if from_key == to_key:
        _set_key(nodes, to_key)
        return serialize(nodes)

    if not is_supported_key(from_key) or not is_supported_key(to_key):
        logger.warning(
            "Cannot transpose markup from %r to %r: key not supported",
            normalize(from_key), normalize(to_key),
        )
        return document

    changed = _transpose_chords(nodes, from_key, to_key)
    _set_key(nodes, to_key)
    logger.debug("Transposed %d chord(s) from %s to %s", changed, from_key, to_key)
    return serialize(nodes)


def read_key(document: str) -> Optional[str]:
    """Return the key recorded in the document's key attribute, if any."""
    element = _find_key_element(parse_markup(document))
    return element.get(KEY_ATTRIBUTE) if element is not None else None


def _strip(nodes: list[Node]) -> list[Node]:
    kept: list[Node] = []
    for node in nodes:
        if _is_chord(node) or _is_separator(node):
            continue
        if isinstance(node, Text) and node.value.strip() == "/":
            continue
        if isinstance(node, Element):
            node.children = _strip(node.children)
        kept.append(node)
    return kept


def hide_chords(document: str) -> str:
    """Remove chord nodes and slash separators, leaving only the lyrics."""
    return serialize(_strip(parse_markup(document)))
