"""
Custom exceptions for unsubscribe resolution and the audit collaborators.

Malformed mail content never surfaces as one of these from the resolution
pipeline; they describe internal parser failures (always caught) and
collaborator failures (mailbox access, report writing).
"""

from typing import Dict, Any, Optional


class UnsubscribeExtractionError(Exception):
    """Base exception carrying optional context for logging."""
    
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context
    
    def __str__(self) -> str:
        base_message = super().__str__()
        if self.context:
            context_info = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_message} (context: {context_info})"
        return base_message


class HtmlParseError(UnsubscribeExtractionError):
    """Raised when the lenient HTML parser cannot build a tree."""


class MailboxError(Exception):
    """Raised when the mailbox cannot be reached, selected or searched."""
    
    def __init__(self, message: str, mailbox: Optional[str] = None):
        super().__init__(message)
        self.mailbox = mailbox
    
    def __str__(self) -> str:
        base_message = super().__str__()
        if self.mailbox:
            return f"{base_message} (mailbox={self.mailbox})"
        return base_message


class ReportError(Exception):
    """Raised when the audit report cannot be written."""
    
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
    
    def __str__(self) -> str:
        base_message = super().__str__()
        if self.path:
            return f"{base_message} (path={self.path})"
        return base_message
