"""
Unsubscribe resolution module.

This module determines the single best unsubscribe action for a message:
- URI extraction from the List-Unsubscribe header
- Quoted-printable and multipart decoding of the body
- Heuristic anchor scanning over lenient HTML
- Priority-based selection with provenance
"""

from .decoders import MimeHtmlExtractor, decode_quoted_printable
from .extractors import HeaderUnsubscribeResolver
from .scanners import HtmlAnchorScanner
from .processors import ResolutionPipeline
from .types import FoundIn, UnsubscribeCandidate, UnsubscribeResult, UriScheme

__all__ = [
    'decode_quoted_printable',
    'MimeHtmlExtractor',
    'HeaderUnsubscribeResolver',
    'HtmlAnchorScanner',
    'ResolutionPipeline',
    'FoundIn',
    'UnsubscribeCandidate',
    'UnsubscribeResult',
    'UriScheme'
]
