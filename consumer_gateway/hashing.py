"""One-way hashing of valid tokens and reset keys."""

from werkzeug.security import check_password_hash, generate_password_hash


def hash_token(token: str) -> str:
    """Generate a salted hash of a token.

    Raises
    ------
    ValueError
        If the token is not ascii.

    """
    if not token.isascii():
        raise ValueError('Tokens must be ascii')
    return generate_password_hash(token)


def check_token(token: str, hashed: str) -> bool:
    """Check a token against a stored hash, in constant time."""
    if not hashed or not token.isascii():
        return False
    return check_password_hash(hashed, token)
