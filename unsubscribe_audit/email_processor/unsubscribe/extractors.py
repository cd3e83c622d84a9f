"""
Unsubscribe URI extraction from the List-Unsubscribe header.

The header value may be folded over several lines, may list URIs in the
RFC 2369 angle-bracket form or as a bare comma-separated list, and may
contain duplicates.
"""

from typing import List, Optional

from .classifiers import dedupe, first_of_scheme
from .constants import (
    HEADER_FOLD_PATTERN, HEADER_URL_PATTERN, HEADER_LIST_SEPARATOR,
    HTTP_URL_PATTERN, MAILTO_URL_PATTERN
)
from .logging import UnsubscribeLogger
from .types import FoundIn, UnsubscribeCandidate, UriScheme


class HeaderUnsubscribeResolver:
    """Resolve List-Unsubscribe header values into ranked candidates."""
    
    def __init__(self):
        self.logger = UnsubscribeLogger("header_resolver")
    
    @staticmethod
    def unfold(header_value: str) -> str:
        """Join folded continuation lines with a single space and trim."""
        return HEADER_FOLD_PATTERN.sub(' ', header_value).strip()
    
    def extract_uris(self, header_value: Optional[str]) -> List[str]:
        """
        Extract the distinct URIs listed in a header value, in order.
        
        Angle-bracketed tokens are used when present. Otherwise the value
        is split on commas outside quotes and an http(s) or mailto URI is
        taken from each piece.
        """
        if not header_value:
            return []
        
        text = self.unfold(header_value)
        uris = [match.strip() for match in HEADER_URL_PATTERN.findall(text) if match.strip()]
        
        if not uris:
            for piece in HEADER_LIST_SEPARATOR.split(text):
                piece = piece.strip().strip('"')
                match = HTTP_URL_PATTERN.search(piece) or MAILTO_URL_PATTERN.search(piece)
                if match:
                    uris.append(match.group(0))
        
        return dedupe(uris)
    
    def resolve(self, header_value: Optional[str]) -> List[UnsubscribeCandidate]:
        """
        Return up to two header candidates: the first http(s) URI, then the
        first mailto URI. When neither kind is present the first URI of any
        form is returned alone.
        """
        uris = self.extract_uris(header_value)
        if not uris:
            return []
        
        selected = [uri for uri in (first_of_scheme(uris, UriScheme.HTTP),
                                    first_of_scheme(uris, UriScheme.MAILTO)) if uri]
        if not selected:
            selected = [uris[0]]
        
        self.logger.debug("Resolved header candidates", {
            'distinct_uris': len(uris),
            'candidates': selected
        })
        return [UnsubscribeCandidate(uri=uri, origin=FoundIn.HEADER) for uri in selected]
