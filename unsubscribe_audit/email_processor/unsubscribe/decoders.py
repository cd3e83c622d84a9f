"""
Body decoding for unsubscribe scanning.

Handles quoted-printable transfer encoding and locating the text/html part
of a raw multipart body. Both are best effort: malformed input is passed
through or reported as "no HTML", never raised.
"""

import re
from typing import Optional, Pattern

from .constants import (
    MIME_BOUNDARY_MIN_HEX_LENGTH, HTML_PART_PATTERN, PART_BODY_SEPARATOR,
    QP_SOFT_BREAK_PATTERN, QP_ESCAPE_RUN_PATTERN, QP_MARKER_PATTERN
)
from .logging import UnsubscribeLogger


def decode_quoted_printable(text: str, charset: str = 'utf-8') -> str:
    """
    Decode a quoted-printable fragment.
    
    Soft line breaks (``=`` at end of line) are removed and ``=XX`` escapes
    are replaced by the characters they encode. Consecutive escapes are
    decoded together so multi-byte sequences such as ``=C3=A9`` become a
    single character; a run that is not valid in ``charset`` falls back to
    Latin-1. An ``=`` that does not start a valid escape is left as is.
    
    Example:
        "href=3D\"https://ex.com/u=\nnsub\"" becomes "href=\"https://ex.com/unsub\""
    """
    if not text:
        return text or ''
    
    text = QP_SOFT_BREAK_PATTERN.sub('', text)
    
    def _decode_run(match: re.Match) -> str:
        raw = bytes.fromhex(match.group(0).replace('=', ''))
        try:
            return raw.decode(charset)
        except (UnicodeDecodeError, LookupError):
            return raw.decode('latin-1')
    
    return QP_ESCAPE_RUN_PATTERN.sub(_decode_run, text)


def looks_quoted_printable(text: str) -> bool:
    """True when the text carries an encoded '=' or a soft line break."""
    return bool(text and QP_MARKER_PATTERN.search(text))


class MimeHtmlExtractor:
    """Pull the decoded text/html part out of a raw multipart body."""
    
    def __init__(self, boundary_min_length: int = MIME_BOUNDARY_MIN_HEX_LENGTH):
        if boundary_min_length < 1:
            raise ValueError(f"MIME boundary minimum length must be at least 1, got {boundary_min_length}")
        self.boundary_min_length = boundary_min_length
        self.boundary_pattern: Pattern = re.compile(
            rf'--([a-f0-9]{{{boundary_min_length},}})', re.IGNORECASE
        )
        self.logger = UnsubscribeLogger("mime_extractor")
    
    def find_boundary(self, raw_body: str) -> Optional[str]:
        """Return the first hexadecimal boundary token, or None."""
        if not raw_body:
            return None
        match = self.boundary_pattern.search(raw_body)
        return match.group(1) if match else None
    
    def extract_html(self, raw_body: str) -> Optional[str]:
        """
        Return the decoded HTML of the first text/html part.
        
        None means there was no recognizable boundary, no HTML part, or an
        HTML part with no content; callers scan the raw body instead.
        """
        boundary = self.find_boundary(raw_body)
        if boundary is None:
            self.logger.debug("No MIME boundary found")
            return None
        
        for segment in raw_body.split(f'--{boundary}'):
            pieces = PART_BODY_SEPARATOR.split(segment, maxsplit=1)
            if len(pieces) < 2:
                continue
            part_headers, part_body = pieces
            if not HTML_PART_PATTERN.search(part_headers):
                continue
            
            html = decode_quoted_printable(part_body.strip(), self._part_charset(part_headers))
            if not html:
                return None
            self.logger.debug("Extracted HTML part", {'length': len(html)})
            return html
        
        self.logger.debug("No text/html part found", {'boundary_length': len(boundary)})
        return None
    
    @staticmethod
    def _part_charset(part_headers: str) -> str:
        match = re.search(r'charset\s*=\s*"?([A-Za-z0-9_.:-]+)', part_headers, re.IGNORECASE)
        return match.group(1) if match else 'utf-8'
