"""
Access key generation using the operating system CSPRNG
"""

import secrets
import string


# 62 symbols, 32 characters: log2(62) * 32 is roughly 190 bits of entropy
ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
KEY_LENGTH = 32


def generate_access_key(length: int = KEY_LENGTH) -> str:
    """
    Generate a random alphanumeric access key

    Args:
        length: Number of characters in the key

    Returns:
        Key string drawn uniformly per character from ALPHABET
    """
    if length <= 0:
        raise ValueError("Key length must be positive")

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))

