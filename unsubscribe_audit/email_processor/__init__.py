"""
Email processing modules.
"""

from .imap_client import FetchedMessage, IMAPConnection, get_imap_settings

__all__ = ['FetchedMessage', 'IMAPConnection', 'get_imap_settings']
