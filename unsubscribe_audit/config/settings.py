"""
Configuration settings for the unsubscribe audit tool.
"""

import os
from pathlib import Path
from typing import Optional


class Config:
    """Configuration settings, read from the environment."""
    
    # IMAP connection settings
    IMAP_SERVER = ''
    IMAP_PORT = 993
    IMAP_USE_SSL = True
    IMAP_USERNAME = ''
    IMAP_TIMEOUT = 30
    
    # Audit settings
    DEFAULT_MAILBOX = 'INBOX'
    UNSUBSCRIBE_REPORT_PATH = 'unsubscribe_links.csv'
    MIME_BOUNDARY_MIN_LENGTH = 40
    
    # Logging settings
    LOG_LEVEL = 'WARNING'
    LOG_FORMAT = 'standard'
    
    @classmethod
    def reload(cls):
        """Re-read every setting from the current environment."""
        cls.IMAP_SERVER = os.getenv('IMAP_SERVER', '')
        cls.IMAP_PORT = int(os.getenv('IMAP_PORT', '993'))
        cls.IMAP_USE_SSL = os.getenv('IMAP_USE_SSL', 'true').lower() == 'true'
        cls.IMAP_USERNAME = os.getenv('IMAP_USERNAME', '')
        cls.IMAP_TIMEOUT = int(os.getenv('IMAP_TIMEOUT', '30'))
        
        cls.DEFAULT_MAILBOX = os.getenv('DEFAULT_MAILBOX', 'INBOX')
        cls.UNSUBSCRIBE_REPORT_PATH = os.getenv('UNSUBSCRIBE_REPORT_PATH', 'unsubscribe_links.csv')
        cls.MIME_BOUNDARY_MIN_LENGTH = int(os.getenv('MIME_BOUNDARY_MIN_LENGTH', '40'))
        
        cls.LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
        cls.LOG_FORMAT = os.getenv('LOG_FORMAT', 'standard')
    
    @classmethod
    def get_report_path(cls, output: Optional[str] = None) -> Path:
        """Get the CSV report path, falling back to the configured default."""
        return Path(output or cls.UNSUBSCRIBE_REPORT_PATH).expanduser()
    
    @classmethod
    def get_imap_password(cls) -> Optional[str]:
        """Get the IMAP password from the environment, if set."""
        # Never cached on the class
        return os.getenv('IMAP_PASSWORD') or None


Config.reload()


def load_config_from_env_file(env_file: str = '.env'):
    """Load configuration from environment file."""
    env_path = Path(env_file)
    if env_path.exists():
        from dotenv import load_dotenv
        load_dotenv(env_path)
        Config.reload()
