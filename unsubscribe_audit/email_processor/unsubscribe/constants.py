"""
Constants and shared patterns for unsubscribe resolution.

This module contains the locale term table, the precompiled patterns and
the ranking scores shared by the header resolver, the body scanner and
the resolution pipeline.
"""

import re
from typing import Dict, List, Pattern

# Unsubscribe terms by language tag. Each entry is a regex fragment; new
# locales are added here without touching the scanner.
UNSUBSCRIBE_TERMS: Dict[str, List[str]] = {
    'en': [r'unsubscribe', r'opt[- ]?out'],
    'fr': [r'd[ée]sabonner', r'd[ée]sinscrire'],
}


def build_unsubscribe_pattern(terms: Dict[str, List[str]]) -> Pattern:
    """Compile a locale term table into one case-insensitive pattern."""
    fragments = [fragment for locale in terms for fragment in terms[locale]]
    if not fragments:
        # Matches nothing
        return re.compile(r'(?!x)x')
    return re.compile('|'.join(f'(?:{fragment})' for fragment in fragments), re.IGNORECASE)


UNSUBSCRIBE_PATTERN: Pattern = build_unsubscribe_pattern(UNSUBSCRIBE_TERMS)

# Header folding: a line break followed by spaces or tabs
HEADER_FOLD_PATTERN: Pattern = re.compile(r'\r?\n[ \t]+')

HEADER_URL_PATTERN: Pattern = re.compile(r'<([^>]+)>')

# Commas outside double-quoted tokens
HEADER_LIST_SEPARATOR: Pattern = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')

HTTP_URL_PATTERN: Pattern = re.compile(r'https?://[^\s"\'<>]+', re.IGNORECASE)
MAILTO_URL_PATTERN: Pattern = re.compile(r'mailto:[^\s"\'<>]+', re.IGNORECASE)

HTTP_SCHEME_PATTERN: Pattern = re.compile(r'^https?://', re.IGNORECASE)
MAILTO_SCHEME_PATTERN: Pattern = re.compile(r'^mailto:', re.IGNORECASE)

# Anchor opening tag, used to skip bodies without links
ANCHOR_TAG_PATTERN: Pattern = re.compile(r'<a\s', re.IGNORECASE)

# Boundary detection: common mail generators use a long hexadecimal token
MIME_BOUNDARY_MIN_HEX_LENGTH = 40

HTML_PART_PATTERN: Pattern = re.compile(r'Content-Type:\s*text/html', re.IGNORECASE)
PART_BODY_SEPARATOR: Pattern = re.compile(r'\r?\n\r?\n')

QP_SOFT_BREAK_PATTERN: Pattern = re.compile(r'=\r?\n')
QP_ESCAPE_RUN_PATTERN: Pattern = re.compile(r'(?:=[0-9A-Fa-f]{2})+')
# Signs of a quoted-printable body: an encoded "=" or a soft line break
QP_MARKER_PATTERN: Pattern = re.compile(r'=3D|=\r?\n', re.IGNORECASE)

# Wrapper element for parsing fragments
FRAGMENT_ROOT_TAG = 'root'

# Link target attributes, in lookup order
LINK_TARGET_ATTRIBUTES: List[str] = ['href', 'src']

# Priority scores for picking one candidate (higher wins)
PRIORITY_HTTP = 3
PRIORITY_MAILTO = 2
PRIORITY_OTHER = 1
PRIORITY_NONE = 0
