"""
Type-safe dataclasses for unsubscribe resolution.

Candidates are produced transiently while one message is resolved; only
the final UnsubscribeResult leaves the pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


class FoundIn(str, Enum):
    """Provenance of a resolved unsubscribe URI."""
    
    HEADER = 'header'
    BODY = 'body'
    NONE = 'none'


class UriScheme(str, Enum):
    """Scheme classification of a candidate URI, used for ranking."""
    
    HTTP = 'http'
    MAILTO = 'mailto'
    OTHER = 'other'


class ResolutionStage(str, Enum):
    """States of the per-message resolution pipeline."""
    
    TRY_HEADER = 'try_header'
    TRY_BODY = 'try_body'
    RESOLVED = 'resolved'


@dataclass(frozen=True)
class UnsubscribeCandidate:
    """A URI found in the header or body, not yet selected."""
    
    uri: str
    origin: FoundIn


@dataclass(frozen=True)
class UnsubscribeResult:
    """Outcome of resolving one message."""
    
    uri: Optional[str] = None
    found_in: FoundIn = FoundIn.NONE
    
    def __post_init__(self):
        if (self.uri is None) != (self.found_in is FoundIn.NONE):
            raise ValueError(
                f"uri and found_in disagree: uri={self.uri!r}, found_in={self.found_in.value}"
            )
    
    @classmethod
    def not_found(cls) -> 'UnsubscribeResult':
        return cls()
    
    @classmethod
    def from_candidate(cls, candidate: UnsubscribeCandidate) -> 'UnsubscribeResult':
        return cls(uri=candidate.uri, found_in=candidate.origin)
    
    @property
    def is_found(self) -> bool:
        return self.uri is not None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting and JSON output."""
        return {
            'unsubscribe': self.uri,
            'found_in': self.found_in.value
        }
