"""
Identifier generation for question definitions.
"""

import os
import time


def new_uid() -> str:
    """
    Generate a 24 hex character uid (4-byte time prefix + 8 random bytes).

    Same width as the uids already embedded in authored presentations, so
    generated and authored uids are interchangeable.
    """
    return format(int(time.time()), "08x") + os.urandom(8).hex()
