"""
Mailbox audit of bulk-mail unsubscribe options.
"""

__version__ = '0.3.0'
