"""
MGF1 Mask Generation Function (RFC 8017, B.2.1)

Expands a seed into a pseudorandom mask:

    T = Hash(seed || C(0)) || Hash(seed || C(1)) || ...

where C(i) is the counter as a 4-byte big-endian integer, truncated to
the requested length.
"""

import struct
from typing import Optional

from .digest import Digest, DEFAULT_DIGEST
from .number_theory import ceil_div


def mgf1(seed: bytes, mask_len: int, digest: Optional[Digest] = None) -> bytes:
    """
    Generate a mask of exactly mask_len bytes from seed.

    Args:
        seed: Seed bytes (the PSS hash H)
        mask_len: Length of the mask in bytes
        digest: Hash primitive (default SHA-1)

    Returns:
        mask_len bytes, identical for identical inputs
    """
    if mask_len < 0:
        raise ValueError("Mask length must be non-negative")
    digest = digest or DEFAULT_DIGEST

    blocks = []
    for counter in range(ceil_div(mask_len, digest.digest_size)):
        blocks.append(digest(seed + struct.pack('>I', counter)))

    return b''.join(blocks)[:mask_len]
