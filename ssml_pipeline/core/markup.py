"""Markup tree model and XML parsing.

WHY: Both the validator and the text extractor need to look at markup as a
tree: element names for the whitelist check, text and <break> elements for
extraction. Synthesizer markup routinely carries vendor elements such as
<mstts:express-as>, often without the xmlns declaration, and the whitelist
has to see them under their written name rather than fail the parse or
lose the prefix. This module converts once into a small tagged variant.

HOW: parse_document() feeds the string to the expat parser (the one behind
xml.etree.ElementTree) with namespace processing off, and builds TextNode /
Element values from its start/end/character-data callbacks.
parse_fragment() does the same for a bare fragment by wrapping it in a
<speak> root first. Both raise MarkupSyntaxError on any well-formedness
failure, including text that cannot be encoded (lone surrogates).

RULES:
- Element.name is the qualified name as written, lower-cased
  ("break", "mstts:express-as"); a default xmlns is just an attribute
- Prefixes need no declaration
- Attribute names keep their case; Element.get() matches them
  case-insensitively and returns the value unchanged
- Comments and processing instructions are dropped; adjacent text is merged
- Nesting deeper than MAX_NESTING_DEPTH is reported as a syntax error
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union
from xml.parsers import expat

MAX_NESTING_DEPTH = 256

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml\b[^>]*\?>", re.IGNORECASE)


class MarkupSyntaxError(ValueError):
    """Raised when markup is not well-formed XML."""


@dataclass(frozen=True)
class TextNode:
    """A run of character data between elements."""

    text: str


@dataclass(frozen=True)
class Element:
    """A markup element with ordered attributes and children.

    RULES:
    - name: lower-cased qualified name, e.g. "break", "mstts:express-as"
    - attributes: (name, value) pairs in document order
    - children: TextNode and Element values in document order
    """

    name: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["Node", ...] = ()

    def get(self, attribute: str, default: Optional[str] = None) -> Optional[str]:
        """Look up an attribute value, ignoring the case of its name."""
        wanted = attribute.lower()
        for key, value in self.attributes:
            if key.lower() == wanted:
                return value
        return default

    def iter(self) -> Iterator["Element"]:
        """Yield this element and every descendant element, depth-first."""
        stack: List[Element] = [self]
        while stack:
            element = stack.pop()
            yield element
            nested = [child for child in element.children if isinstance(child, Element)]
            stack.extend(reversed(nested))


Node = Union[TextNode, Element]


class _TreeBuilder:
    """Collects expat callbacks into an Element tree."""

    def __init__(self) -> None:
        # (name, attributes, children) for every open element
        self.open: List[Tuple[str, Tuple[Tuple[str, str], ...], List[Node]]] = []
        self.root: Optional[Element] = None

    def start(self, name: str, attributes: List[str]) -> None:
        if len(self.open) >= MAX_NESTING_DEPTH:
            raise MarkupSyntaxError(
                "markup nested deeper than {} levels".format(MAX_NESTING_DEPTH)
            )
        # ordered_attributes gives a flat [name, value, name, value, ...] list
        pairs = tuple(zip(attributes[0::2], attributes[1::2]))
        self.open.append((name.lower(), pairs, []))

    def end(self, name: str) -> None:
        tag, attributes, children = self.open.pop()
        element = Element(name=tag, attributes=attributes, children=tuple(children))
        if self.open:
            self.open[-1][2].append(element)
        else:
            self.root = element

    def data(self, text: str) -> None:
        if not self.open:
            return
        children = self.open[-1][2]
        if children and isinstance(children[-1], TextNode):
            children[-1] = TextNode(children[-1].text + text)
        else:
            children.append(TextNode(text))


def strip_xml_declaration(text: str) -> str:
    """Remove a leading ``<?xml ...?>`` declaration, if any."""
    return _XML_DECLARATION_RE.sub("", text, count=1).lstrip()


def parse_document(text: str) -> Element:
    """Parse a complete XML document into an Element tree.

    Args:
        text: Markup with exactly one root element.

    Returns:
        The converted root Element.

    Raises:
        MarkupSyntaxError: If the text is not a well-formed document.
    """
    builder = _TreeBuilder()
    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.ordered_attributes = True
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    try:
        parser.Parse(text, True)
    except (expat.ExpatError, UnicodeError) as exc:
        raise MarkupSyntaxError(str(exc)) from exc
    return builder.root


def parse_fragment(text: str) -> Element:
    """Parse a markup fragment (text and elements, any number of roots).

    The fragment is wrapped in a ``<speak>`` element before parsing, so the
    returned root is always named "speak". A leading XML declaration is
    dropped first since it may only appear at the very start of a document.
    """
    return parse_document("<speak>{}</speak>".format(strip_xml_declaration(text)))


def is_well_formed(text: str) -> bool:
    """True if the text parses as a markup fragment."""
    try:
        parse_fragment(text)
    except MarkupSyntaxError:
        return False
    return True
