"""
Heuristic unsubscribe link scanning over HTML bodies.

Every anchor in the body is scored against a multilingual unsubscribe
term pattern, using its rel and aria-label attributes, its inner text and
its link target. Matching targets become candidates; the best one by
scheme wins.
"""

from typing import Dict, Iterator, List, Optional, Pattern

from .classifiers import dedupe, pick_preferred
from .constants import (
    ANCHOR_TAG_PATTERN, LINK_TARGET_ATTRIBUTES, UNSUBSCRIBE_PATTERN,
    build_unsubscribe_pattern
)
from .exceptions import HtmlParseError
from .html_tree import Element, build_html_tree
from .logging import UnsubscribeLogger
from .types import FoundIn, UnsubscribeCandidate


class HtmlAnchorScanner:
    """Find the best unsubscribe link among the anchors of an HTML body."""
    
    def __init__(self, terms: Optional[Dict[str, List[str]]] = None):
        self.pattern: Pattern = build_unsubscribe_pattern(terms) if terms is not None else UNSUBSCRIBE_PATTERN
        self.logger = UnsubscribeLogger("anchor_scanner")
    
    @staticmethod
    def link_target(anchor: Element) -> Optional[str]:
        for name in LINK_TARGET_ATTRIBUTES:
            value = anchor.get_attribute(name)
            if value and value.strip():
                return value.strip()
        return None
    
    def matches_unsubscribe(self, anchor: Element, target: Optional[str]) -> bool:
        """True when the anchor's labels or its target look like an unsubscribe link."""
        combined = ' '.join([
            anchor.get_attribute('rel') or '',
            anchor.get_attribute('aria-label') or '',
            anchor.inner_text()
        ]).lower()
        if self.pattern.search(combined):
            return True
        return bool(target and self.pattern.search(target))
    
    def _anchors(self, node: Element) -> Iterator[Element]:
        for child in node.children:
            if isinstance(child, Element):
                if child.tag == 'a':
                    yield child
                yield from self._anchors(child)
    
    def collect_candidates(self, html: Optional[str]) -> List[str]:
        """
        Return the distinct matching link targets in document order.
        
        Bodies without an anchor tag are rejected before parsing. Parser
        failures are logged and yield no candidates.
        """
        if not html or not ANCHOR_TAG_PATTERN.search(html):
            return []
        
        try:
            root = build_html_tree(html)
            targets = []
            for anchor in self._anchors(root):
                target = self.link_target(anchor)
                if target and self.matches_unsubscribe(anchor, target):
                    targets.append(target)
        except (HtmlParseError, RecursionError) as e:
            self.logger.log_exception(e, {'stage': 'anchor_scan'})
            return []
        
        return dedupe(targets)
    
    def scan(self, html: Optional[str]) -> Optional[UnsubscribeCandidate]:
        """Return the preferred body candidate, or None when nothing matches."""
        candidates = self.collect_candidates(html)
        best = pick_preferred(candidates)
        if best is None:
            return None
        
        self.logger.debug("Found body candidate", {
            'candidates': len(candidates),
            'selected': best
        })
        return UnsubscribeCandidate(uri=best, origin=FoundIn.BODY)
