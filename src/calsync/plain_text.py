"""
HTML event body sanitization: turns Exchange HTML bodies into plain text.
"""

from html.parser import HTMLParser

# Private-use code point standing in for a newline until markup is gone, so
# that literal newlines in the source markup are not confused with the ones
# we insert for <br>/<p>.
_NEWLINE_MARKER = "\ue000"
_NBSP = "\xa0"

# Elements that never have children.
_VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose text is not part of the visible body.
_RAW_TEXT_TAGS = frozenset({"script", "style", "title"})


class _Element:
    __slots__ = ("tag", "children")

    def __init__(self, tag: str):
        self.tag = tag
        self.children: list = []  # _Element | str

    def iter(self, tag: str):
        """Yield every descendant element with the given tag, document order."""
        for child in self.children:
            if isinstance(child, _Element):
                if child.tag == tag:
                    yield child
                yield from child.iter(tag)

    def text(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, _Element):
                parts.append(child.text())
            else:
                parts.append(child)
        return "".join(parts)


class _TreeBuilder(HTMLParser):
    """Lenient HTML-to-tree parser; mismatched end tags are tolerated."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root = _Element("#document")
        self._stack = [self.root]

    def handle_starttag(self, tag, attrs):
        element = _Element(tag)
        self._stack[-1].children.append(element)
        if tag not in _VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        self._stack[-1].children.append(_Element(tag))

    def handle_endtag(self, tag):
        # Close up to the nearest open element with this tag; stray end tags
        # (e.g. </br> or an unopened </div>) are ignored.
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data):
        if self._stack[-1].tag in _RAW_TEXT_TAGS:
            return
        self._stack[-1].children.append(data)


def _is_nbsp_separator(element: _Element) -> bool:
    """True for ``<div>&nbsp;</div>``, Exchange's line separator."""
    text = element.text()
    return _NBSP in text and not text.replace(_NBSP, "").strip()


def to_plain_text(html_text: str | None) -> str | None:
    """
    Transform an HTML event body into plain text.

    Line breaks and paragraphs become newlines, non-breaking spaces become
    regular spaces and entities are unescaped. Malformed markup is handled
    on a best-effort basis rather than rejected.

    Returns:
        The trimmed plain text, or None when nothing but whitespace is left
    """
    if html_text is None or not html_text.strip():
        return None

    builder = _TreeBuilder()
    builder.feed(html_text)
    builder.close()
    document = builder.root

    for br in document.iter("br"):
        br.children.append(_NEWLINE_MARKER)

    for paragraph in document.iter("p"):
        paragraph.children.insert(0, _NEWLINE_MARKER * 2)

    # Collect first: prepending markers changes nothing inside other divs,
    # but the separator test must see the original content.
    separators = [div for div in document.iter("div") if _is_nbsp_separator(div)]
    for div in separators:
        div.children.insert(0, _NEWLINE_MARKER * 2)

    # Markers were inserted as text nodes, so they survive dropping the tags.
    # Entities were already decoded by the parser (convert_charrefs).
    text = document.text()
    text = text.replace(_NEWLINE_MARKER, "\n").replace(_NBSP, " ")

    return text.strip() or None
