#!/usr/bin/env python3
"""
Command-line entry point for the unsubscribe audit.

Usage:
    python main.py extract-unsubscribe --email user@gmail.com --provider gmail
    python main.py resolve message.eml
"""

from unsubscribe_audit.cli.main import main


if __name__ == '__main__':
    main()
