"""
IMAP mailbox access for the unsubscribe audit.

Only what the audit needs: log in, select a mailbox, search for unseen
messages and fetch the header fields and raw body text of each one.
Bodies are fetched with BODY.PEEK so the audit leaves messages unread.
"""

import imaplib
import email
from dataclasses import dataclass
from email.header import decode_header, make_header
from email.errors import HeaderParseError
from typing import List, Dict, Any, Optional

from .unsubscribe.exceptions import MailboxError
from .unsubscribe.logging import UnsubscribeLogger

HEADER_FIELDS = 'FROM SUBJECT DATE LIST-UNSUBSCRIBE'
FETCH_ITEMS = f'(BODY.PEEK[HEADER.FIELDS ({HEADER_FIELDS})] BODY.PEEK[TEXT])'


@dataclass(frozen=True)
class FetchedMessage:
    """Header fields and raw body text of one message."""
    
    uid: int
    subject: str
    date: str
    sender: str
    list_unsubscribe: str
    raw_body: str


def decode_header_value(value: Optional[str]) -> str:
    """Decode RFC 2047 encoded words, returning the raw value on failure."""
    if not value:
        return ''
    try:
        return str(make_header(decode_header(value)))
    except (HeaderParseError, UnicodeDecodeError, LookupError):
        return value


class IMAPConnection:
    """Manages an IMAP connection for the audit."""
    
    def __init__(self, server: str, port: int = 993, use_ssl: bool = True, timeout: Optional[int] = None):
        self.server = server
        self.port = port
        self.use_ssl = use_ssl
        self.timeout = timeout
        self.connection = None
        self.logger = UnsubscribeLogger("imap_client")
    
    def connect(self, username: str, password: str):
        """Connect to the IMAP server and authenticate."""
        try:
            if self.use_ssl:
                self.connection = imaplib.IMAP4_SSL(self.server, self.port, timeout=self.timeout)
            else:
                self.connection = imaplib.IMAP4(self.server, self.port, timeout=self.timeout)
            self.connection.login(username, password)
        except (imaplib.IMAP4.error, OSError) as e:
            self.connection = None
            raise MailboxError(f"Failed to connect to {self.server}: {e}") from e
        
        self.logger.info("Connected to IMAP server", {'server': self.server, 'port': self.port})
    
    def disconnect(self):
        """Close the IMAP connection."""
        if self.connection:
            try:
                self.connection.logout()
            except (imaplib.IMAP4.error, OSError) as e:
                self.logger.warning(f"Error during logout: {e}")
            self.connection = None
    
    def _require_connection(self):
        if not self.connection:
            raise MailboxError("Not connected")
        return self.connection
    
    def select_folder(self, folder: str = 'INBOX'):
        """Select a mailbox read-only."""
        connection = self._require_connection()
        try:
            status, _ = connection.select(folder, readonly=True)
        except imaplib.IMAP4.error as e:
            raise MailboxError(f"Failed to select mailbox: {e}", mailbox=folder) from e
        if status != 'OK':
            raise MailboxError("Failed to select mailbox", mailbox=folder)
    
    def search_unseen(self) -> List[int]:
        """Return the UIDs of unseen messages in the selected mailbox."""
        connection = self._require_connection()
        try:
            status, data = connection.uid('SEARCH', None, 'UNSEEN')
        except imaplib.IMAP4.error as e:
            raise MailboxError(f"Search failed: {e}") from e
        if status != 'OK':
            raise MailboxError("Search failed")
        
        if not data or not data[0]:
            return []
        return [int(uid) for uid in data[0].split()]
    
    def fetch_message(self, uid: int) -> Optional[FetchedMessage]:
        """Fetch one message's header fields and body text, or None."""
        connection = self._require_connection()
        try:
            status, msg_data = connection.uid('FETCH', str(uid), FETCH_ITEMS)
        except imaplib.IMAP4.error as e:
            self.logger.warning(f"Error fetching message: {e}", {'uid': uid})
            return None
        if status != 'OK' or not msg_data:
            return None
        
        return self._parse_fetch_response(uid, msg_data)
    
    def fetch_messages(self, uids: List[int]) -> List[FetchedMessage]:
        """Fetch several messages, skipping those that fail."""
        messages = []
        for uid in uids:
            msg = self.fetch_message(uid)
            if msg:
                messages.append(msg)
        return messages
    
    def fetch_unseen(self) -> List[FetchedMessage]:
        uids = self.search_unseen()
        self.logger.info("Found unseen messages", {'count': len(uids)})
        return self.fetch_messages(uids)
    
    def _parse_fetch_response(self, uid: int, msg_data: List[Any]) -> Optional[FetchedMessage]:
        header_bytes = b''
        body_bytes = b''
        for item in msg_data:
            if not isinstance(item, tuple) or len(item) < 2:
                continue
            descriptor, payload = item[0], item[1]
            if b'HEADER.FIELDS' in descriptor.upper():
                header_bytes = payload
            elif b'BODY[TEXT]' in descriptor.upper():
                body_bytes = payload
        
        if not header_bytes and not body_bytes:
            return None
        
        headers = email.message_from_bytes(header_bytes)
        return FetchedMessage(
            uid=uid,
            subject=decode_header_value(headers.get('Subject')) or 'No subject',
            date=headers.get('Date', '') or '',
            sender=decode_header_value(headers.get('From')),
            list_unsubscribe=str(headers.get('List-Unsubscribe', '') or ''),
            raw_body=body_bytes.decode('utf-8', errors='replace')
        )
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def get_imap_settings(provider: str) -> Dict[str, Any]:
    """Get IMAP settings for common email providers."""
    servers = {
        'gmail': 'imap.gmail.com',
        'outlook': 'outlook.office365.com',
        'yahoo': 'imap.mail.yahoo.com',
        'icloud': 'imap.mail.me.com',
        'comcast': 'imap.comcast.net',
    }
    provider = provider.lower()
    return {
        'server': servers.get(provider, f'imap.{provider}.com'),
        'port': 993,
        'use_ssl': True,
    }
