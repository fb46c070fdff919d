"""Utilities for generating record ids."""

import secrets

UID_LENGTH = 10


def generate_uid() -> str:
    """
    Generate a (very likely) unique id of random digits.

    Example: "4093817265"
    """
    return "".join(str(secrets.randbelow(10)) for _ in range(UID_LENGTH))
