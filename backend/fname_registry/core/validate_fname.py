"""Fname format policy - what strings may be registered as usernames."""

import re

MAX_FNAME_LENGTH = 16
FNAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{0,15}$")


def validate_fname(name: str) -> bool:
    """True if name is 1-16 chars of lowercase letters, digits and dashes,
    not starting with a dash."""
    if not name or len(name) > MAX_FNAME_LENGTH:
        return False
    return FNAME_PATTERN.fullmatch(name) is not None
