"""
Scheme classification and ranking of unsubscribe candidates.

http(s) links are preferred over mailto links, which are preferred over
anything else. The same rules serve the header resolver, the body
scanner and the final selection in the pipeline.
"""

from typing import Iterable, List, Optional, Sequence

from .constants import (
    HTTP_SCHEME_PATTERN, MAILTO_SCHEME_PATTERN,
    PRIORITY_HTTP, PRIORITY_MAILTO, PRIORITY_OTHER, PRIORITY_NONE
)
from .types import UnsubscribeCandidate, UriScheme


def classify_scheme(uri: str) -> UriScheme:
    """Classify a URI as http(s), mailto or other."""
    if HTTP_SCHEME_PATTERN.match(uri):
        return UriScheme.HTTP
    if MAILTO_SCHEME_PATTERN.match(uri):
        return UriScheme.MAILTO
    return UriScheme.OTHER


def priority_score(uri: Optional[str]) -> int:
    """Ranking score of a URI; higher is better, None scores 0."""
    if not uri:
        return PRIORITY_NONE
    scheme = classify_scheme(uri)
    if scheme is UriScheme.HTTP:
        return PRIORITY_HTTP
    if scheme is UriScheme.MAILTO:
        return PRIORITY_MAILTO
    return PRIORITY_OTHER


def dedupe(uris: Iterable[str]) -> List[str]:
    """Remove duplicates while preserving first-occurrence order."""
    return list(dict.fromkeys(uris))


def first_of_scheme(uris: Sequence[str], scheme: UriScheme) -> Optional[str]:
    return next((uri for uri in uris if classify_scheme(uri) is scheme), None)


def pick_preferred(uris: Sequence[str]) -> Optional[str]:
    """First http(s) URI, else first mailto URI, else the first URI."""
    if not uris:
        return None
    return (first_of_scheme(uris, UriScheme.HTTP)
            or first_of_scheme(uris, UriScheme.MAILTO)
            or uris[0])


def rank_candidates(candidates: Sequence[UnsubscribeCandidate]) -> List[UnsubscribeCandidate]:
    """Sort candidates by priority, highest first; ties keep their order."""
    return sorted(candidates, key=lambda c: priority_score(c.uri), reverse=True)
