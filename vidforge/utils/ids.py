"""Opaque identifier generation"""

import secrets
import time


def new_id(prefix: str, random_length: int = 9) -> str:
    """
    Build an id of the form <prefix>_<epoch millis>_<random suffix>.

    Uniqueness is probabilistic.
    """
    suffix = secrets.token_hex((random_length + 1) // 2)[:random_length]
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"
