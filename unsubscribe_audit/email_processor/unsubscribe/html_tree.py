"""
Lenient HTML tree for anchor scanning.

Mail markup is frequently a fragment or simply broken, so the fragment is
wrapped in a synthetic root element and handed to BeautifulSoup's
forgiving ``html.parser`` backend. The resulting soup is converted into a
small tagged tree of Element and Text nodes that the scanner walks
structurally.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .constants import FRAGMENT_ROOT_TAG
from .exceptions import HtmlParseError


@dataclass
class Text:
    """A text node."""
    
    value: str


@dataclass
class Element:
    """
    An element node.
    
    ``attributes`` keys are lowercase. ``text`` holds the element's own
    direct text (not its descendants'), or None when it has none.
    """
    
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List['HtmlNode'] = field(default_factory=list)
    text: Optional[str] = None
    
    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name.lower())
    
    def inner_text(self) -> str:
        """
        Concatenated descendant text, skipping text inside nested anchors.
        
        The lenient parser leaves an unclosed <a> open around every later
        link; their labels are not part of this element's text.
        """
        parts = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.value)
            elif child.tag != 'a':
                parts.append(child.inner_text())
        return ''.join(parts)


HtmlNode = Union[Element, Text]


def _attribute_text(value) -> str:
    if isinstance(value, (list, tuple)):
        return ' '.join(str(item) for item in value)
    return str(value) if value is not None else ''


def _convert(tag: Tag) -> Element:
    element = Element(
        tag=tag.name.lower(),
        attributes={name.lower(): _attribute_text(value) for name, value in tag.attrs.items()}
    )
    own_text = []
    for child in tag.children:
        if isinstance(child, Tag):
            element.children.append(_convert(child))
        elif isinstance(child, PreformattedString):
            continue
        elif isinstance(child, NavigableString):
            element.children.append(Text(str(child)))
            own_text.append(str(child))
    if own_text:
        element.text = ''.join(own_text)
    return element


def build_html_tree(fragment: str) -> Element:
    """
    Parse an HTML fragment into an Element tree rooted at a synthetic root.
    
    Unbalanced and unknown tags are tolerated by the parser. Any failure
    inside the parser is raised as HtmlParseError.
    """
    wrapped = f'<{FRAGMENT_ROOT_TAG}>{fragment}</{FRAGMENT_ROOT_TAG}>'
    try:
        soup = BeautifulSoup(wrapped, 'html.parser', multi_valued_attributes=None)
        root_tag = soup.find(FRAGMENT_ROOT_TAG)
        if root_tag is None:
            return _convert(soup)
        return _convert(root_tag)
    except RecursionError as e:
        raise HtmlParseError("Markup nested too deeply", {'length': len(fragment)}) from e
    except Exception as e:
        raise HtmlParseError(f"Failed to parse HTML: {e}", {'length': len(fragment)}) from e
