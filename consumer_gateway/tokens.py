"""
Generate, classify and parse human-readable API tokens.

A starter token is three random alphanumeric segments joined by underscores,
e.g. ``abcdefghi_1234567_jklmnopqr``. Once a consumer has an id, the id is
appended as a fourth segment to obtain the valid token that the consumer
submits for activation: ``abcdefghi_1234567_jklmnopqr_42``.

Nothing in this module performs I/O.
"""

import secrets
import string

from .domain import ParsedToken, TokenStatus
from .exceptions import MalformedToken

DELIMITER = '_'
ALPHABET = string.ascii_letters + string.digits

STARTER_SEGMENTS = (9, 7, 9)
RESET_KEY_SEGMENTS = (5, 5, 5)


def _random_segment(length: int) -> str:
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def _generate(segments: tuple) -> str:
    return DELIMITER.join(_random_segment(length) for length in segments)


def generate_starter_token() -> str:
    """Generate a random (not yet valid) starter token for a new consumer."""
    return _generate(STARTER_SEGMENTS)


def generate_reset_key() -> str:
    """Generate a one-time key authorizing a token refresh."""
    return _generate(RESET_KEY_SEGMENTS)


def classify(token: str) -> TokenStatus:
    """
    Determine whether ``token`` is a starter token or an active one.

    Only the length is considered: anything as long as a freshly generated
    starter token is a starter token, and everything else is active.
    """
    if len(token) == len(generate_starter_token()):
        return TokenStatus.STARTER
    return TokenStatus.ACTIVE


def parse(token: str) -> ParsedToken:
    """
    Split a valid token into the consumer id and the starter token.

    Raises
    ------
    :class:`.MalformedToken`
        If the token has no delimiter, so no id can be separated.

    """
    if DELIMITER not in token:
        raise MalformedToken('Token has no consumer id')
    starter_token, _, consumer_id = token.rpartition(DELIMITER)
    return ParsedToken(id=consumer_id, starter_token=starter_token)


def append_id(starter_token: str, consumer_id: str) -> str:
    """Bind a starter token to a consumer."""
    return f'{starter_token}{DELIMITER}{consumer_id}'
