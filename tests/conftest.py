"""
Shared fixtures.
"""

import logging

import pytest

from unsubscribe_audit.config import Config

HEX_BOUNDARY = 'a' * 10 + '0123456789abcdef' * 2 + 'deadbeef'


@pytest.fixture(autouse=True)
def reset_unsubscribe_logging():
    """Drop handlers installed by CLI runs so later tests start clean."""
    yield
    logger = logging.getLogger("unsubscribe")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def reset_config():
    yield
    Config.reload()


@pytest.fixture
def hex_boundary():
    return HEX_BOUNDARY


@pytest.fixture
def multipart_body():
    """Factory for a raw multipart body with a plain part and a QP html part."""
    def build(html_part: str, boundary: str = HEX_BOUNDARY, plain_part: str = 'Plain text version') -> str:
        return (
            f"--{boundary}\r\n"
            "Content-Type: text/plain; charset=utf-8\r\n"
            "Content-Transfer-Encoding: quoted-printable\r\n"
            "\r\n"
            f"{plain_part}\r\n"
            f"--{boundary}\r\n"
            "Content-Type: text/html; charset=utf-8\r\n"
            "Content-Transfer-Encoding: quoted-printable\r\n"
            "\r\n"
            f"{html_part}\r\n"
            f"--{boundary}--\r\n"
        )
    return build
