"""
Per-message unsubscribe resolution pipeline.

Each message moves through three stages: the List-Unsubscribe header is
tried first; the body is scanned only when the header yields nothing;
the collected candidates are then ranked into a single result. Messages
are independent of each other, so a batch may be resolved concurrently.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from .classifiers import rank_candidates
from .constants import MIME_BOUNDARY_MIN_HEX_LENGTH
from .decoders import MimeHtmlExtractor, decode_quoted_printable, looks_quoted_printable
from .extractors import HeaderUnsubscribeResolver
from .logging import UnsubscribeLogger
from .scanners import HtmlAnchorScanner
from .types import ResolutionStage, UnsubscribeCandidate, UnsubscribeResult


class ResolutionPipeline:
    """Resolve a message's header and body into one UnsubscribeResult."""
    
    def __init__(self, header_resolver: Optional[HeaderUnsubscribeResolver] = None,
                 mime_extractor: Optional[MimeHtmlExtractor] = None,
                 anchor_scanner: Optional[HtmlAnchorScanner] = None,
                 boundary_min_length: int = MIME_BOUNDARY_MIN_HEX_LENGTH):
        self.header_resolver = header_resolver or HeaderUnsubscribeResolver()
        self.mime_extractor = mime_extractor or MimeHtmlExtractor(boundary_min_length)
        self.anchor_scanner = anchor_scanner or HtmlAnchorScanner()
        self.logger = UnsubscribeLogger("resolution_pipeline")
    
    def decode_body(self, raw_body: Optional[str]) -> str:
        """
        Decoded HTML for scanning.
        
        A multipart body gives its text/html part. A single-part body that
        looks quoted-printable is decoded whole. Anything else is scanned as is.
        """
        if not raw_body:
            return ''
        html = self.mime_extractor.extract_html(raw_body)
        if html:
            return html
        if self.mime_extractor.find_boundary(raw_body) is None and looks_quoted_printable(raw_body):
            return decode_quoted_printable(raw_body)
        return raw_body
    
    def collect_candidates(self, header_field: Optional[str],
                           raw_body: Optional[str]) -> List[UnsubscribeCandidate]:
        stage = ResolutionStage.TRY_HEADER
        candidates: List[UnsubscribeCandidate] = []
        
        if header_field and header_field.strip():
            candidates = self.header_resolver.resolve(header_field)
        
        if not candidates:
            stage = ResolutionStage.TRY_BODY
            body_candidate = self.anchor_scanner.scan(self.decode_body(raw_body))
            if body_candidate is not None:
                candidates = [body_candidate]
        
        self.logger.debug("Candidates collected", {
            'stage': stage.value,
            'count': len(candidates)
        })
        return candidates
    
    @staticmethod
    def select(candidates: Sequence[UnsubscribeCandidate]) -> UnsubscribeResult:
        """Pick the highest-priority candidate."""
        ranked = rank_candidates(candidates)
        if not ranked:
            return UnsubscribeResult.not_found()
        return UnsubscribeResult.from_candidate(ranked[0])
    
    def resolve(self, header_field: Optional[str], raw_body: Optional[str]) -> UnsubscribeResult:
        """Resolve one message's unsubscribe action."""
        result = self.select(self.collect_candidates(header_field, raw_body))
        
        self.logger.log_operation_count(result.found_in.value, result.is_found)
        self.logger.debug("Message resolved", {
            'stage': ResolutionStage.RESOLVED.value,
            'found_in': result.found_in.value,
            'unsubscribe': result.uri
        })
        return result
    
    def resolve_batch(self, messages: Iterable[Tuple[Optional[str], Optional[str]]],
                      max_workers: Optional[int] = None) -> List[UnsubscribeResult]:
        """
        Resolve (header_field, raw_body) pairs; results keep input order.
        
        With max_workers greater than 1 the messages are resolved on a
        thread pool. Parsing is pure Python and holds the GIL, so the
        sequential default is usually just as fast.
        """
        pairs = list(messages)
        if not max_workers or max_workers <= 1:
            return [self.resolve(header, body) for header, body in pairs]
        
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda pair: self.resolve(*pair), pairs))
