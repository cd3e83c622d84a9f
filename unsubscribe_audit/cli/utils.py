"""
Common utilities for CLI commands.
"""

import email
import getpass
import re
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import click

from unsubscribe_audit.config import Config
from unsubscribe_audit.email_processor.imap_client import get_imap_settings
from unsubscribe_audit.email_processor.unsubscribe.processors import ResolutionPipeline

HEADER_BODY_SEPARATOR = re.compile(rb'\r?\n\r?\n')


def get_password_for_account(email_address: str) -> str:
    """
    Get the IMAP password, from IMAP_PASSWORD if set, otherwise by prompting.
    
    Args:
        email_address: Account the password is for
        
    Returns:
        Password
    """
    password = Config.get_imap_password()
    if password:
        return password
    
    return getpass.getpass(f"Password for {email_address}: ")


def resolve_connection_settings(server: Optional[str], port: Optional[int],
                                provider: Optional[str]) -> Dict[str, Any]:
    """
    Work out server, port and SSL from options, provider presets and config.
    
    An explicit server wins over a provider preset, which wins over
    IMAP_SERVER.
    """
    if server:
        settings = {'server': server, 'port': Config.IMAP_PORT, 'use_ssl': Config.IMAP_USE_SSL}
    elif provider:
        settings = get_imap_settings(provider)
    elif Config.IMAP_SERVER:
        settings = {'server': Config.IMAP_SERVER, 'port': Config.IMAP_PORT, 'use_ssl': Config.IMAP_USE_SSL}
    else:
        raise ValueError("No IMAP server given (use --server, --provider or IMAP_SERVER)")
    
    if port:
        settings['port'] = port
    return settings


def build_pipeline() -> ResolutionPipeline:
    """Build the resolution pipeline from Config, aborting on a bad setting."""
    try:
        return ResolutionPipeline(boundary_min_length=Config.MIME_BOUNDARY_MIN_LENGTH)
    except ValueError as e:
        click.secho(f"✗ Error: {e}", fg='red')
        raise click.Abort()


def split_raw_message(raw: bytes) -> Tuple[bytes, bytes]:
    """Split a raw RFC 822 message into its header block and body."""
    pieces = HEADER_BODY_SEPARATOR.split(raw, maxsplit=1)
    if len(pieces) < 2:
        return raw, b''
    return pieces[0], pieces[1]


def read_message_file(path: Path) -> Tuple[str, str]:
    """
    Read a saved message and return its List-Unsubscribe value and raw body.
    """
    header_bytes, body_bytes = split_raw_message(Path(path).read_bytes())
    headers = email.message_from_bytes(header_bytes + b'\n\n')
    list_unsubscribe = str(headers.get('List-Unsubscribe', '') or '')
    return list_unsubscribe, body_bytes.decode('utf-8', errors='replace')
