"""
Unsubscribe audit of a mailbox.

Fetches unseen messages, resolves each one's unsubscribe action and
writes the results as a CSV report.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..report.csv_report import AuditRow, write_report
from .imap_client import FetchedMessage, IMAPConnection
from .unsubscribe.logging import UnsubscribeLogger
from .unsubscribe.processors import ResolutionPipeline


class UnsubscribeAuditor:
    """Resolve unsubscribe actions for a batch of messages and report them."""
    
    def __init__(self, pipeline: Optional[ResolutionPipeline] = None, max_workers: Optional[int] = None):
        self.pipeline = pipeline or ResolutionPipeline()
        self.max_workers = max_workers
        self.logger = UnsubscribeLogger("auditor")
    
    def audit_messages(self, messages: Iterable[FetchedMessage]) -> List[AuditRow]:
        """Resolve every message; rows follow the input order."""
        messages = list(messages)
        results = self.pipeline.resolve_batch(
            ((msg.list_unsubscribe, msg.raw_body) for msg in messages),
            max_workers=self.max_workers
        )
        return [
            AuditRow(
                subject=msg.subject,
                date=msg.date,
                sender=msg.sender,
                unsubscribe=result.uri,
                found_in=result.found_in
            )
            for msg, result in zip(messages, results)
        ]
    
    def run(self, imap: IMAPConnection, mailbox: str, output_path: Union[str, Path]) -> List[AuditRow]:
        """
        Audit the unseen messages of a mailbox on an open connection.
        
        Returns the rows written. When the mailbox has no unseen messages
        nothing is written and an empty list is returned.
        """
        with self.logger.scoped_context({'mailbox': mailbox}):
            imap.select_folder(mailbox)
            messages = imap.fetch_unseen()
            if not messages:
                self.logger.info("No unseen messages")
                return []
            
            with self.logger.time_operation("unsubscribe_audit"):
                rows = self.audit_messages(messages)
            
            write_report(rows, output_path)
            self.logger.info("Report written", {
                'rows': len(rows),
                'output_path': str(output_path),
                'stats': self.pipeline.logger.get_operation_stats()
            })
            return rows
