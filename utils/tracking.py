"""
Tracking IDs for errors and crash records.

Same layout as a public identifier (10 chars milliseconds + 16 chars random,
restricted Base32) but always drawn from the system clock and os.urandom,
so a misconfigured encoder can still be reported.
"""

import os
import time

from sortid.base32 import RANDOM_LEN, TIME_LEN, encode_int

# 16 symbols * 5 bits
_RANDOM_BITS = RANDOM_LEN * 5


def generate_tracking_id():
    """Generate a 26-character sortable tracking ID."""
    ms = int(time.time() * 1000)
    rand = int.from_bytes(os.urandom(_RANDOM_BITS // 8), byteorder="big")
    return encode_int(ms, TIME_LEN) + encode_int(rand, RANDOM_LEN)
