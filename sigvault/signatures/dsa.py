"""
Digital Signature Algorithm (DSA)

Domain parameters (p, q, g):
- q: N-bit prime
- p: L-bit prime with p - 1 = q * factor
- g: h^factor mod p, an element of order q

Keys:      x in (0, q),  y = g^x mod p
Signing:   r = (g^k mod p) mod q,  s = k^(-1) * (H(m) + x*r) mod q
Verifying: w = s^(-1),  u1 = H(m)*w,  u2 = r*w (all mod q)
           v = (g^u1 * y^u2 mod p) mod q,  accept iff v == r

A fresh secret nonce k is drawn for every signature. Reusing or fixing k
reveals x from any two signatures.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ..core_crypto.digest import Digest, hash_to_int
from ..core_crypto.errors import NoInverseError
from ..core_crypto.number_theory import mod_pow, mod_inverse, probable_prime, is_probable_prime
from ..core_crypto.randomness import SecureRandomSource, default_source, sample_until, random_below
from .. import config


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DSADomain:
    """Global public parameters shared by all DSA keys."""
    p: int
    q: int
    g: int


@dataclass(frozen=True)
class DSAKeyPair:
    """Private scalar x and public value y = g^x mod p."""
    x: int
    y: int


class DSASignature(NamedTuple):
    r: int
    s: int


def generate_domain(l: Optional[int] = None, n: Optional[int] = None,
                    rng: Optional[SecureRandomSource] = None,
                    certainty: Optional[int] = None) -> DSADomain:
    """
    Generate DSA domain parameters.

    Args:
        l: Bit length of p (default DSA_CONFIG['l'])
        n: Bit length of q (default DSA_CONFIG['n'])
        rng: Randomness source
        certainty: Error exponent for primality tests

    Returns:
        DSADomain(p, q, g)

    Raises:
        ValueError: If the sizes do not satisfy l >= n + 3, n >= 2
    """
    l = l if l is not None else config.DSA_CONFIG['l']
    n = n if n is not None else config.DSA_CONFIG['n']
    # factor needs at least 3 bits to be even and give an L-bit p
    if n < 2 or l - n < 3:
        raise ValueError("DSA sizes must satisfy L >= N + 3 and N >= 2")
    rng = rng or default_source()

    q = probable_prime(n, certainty, rng)

    # p - 1 = q * factor, p must be an L-bit prime
    def make_p(factor: int) -> int:
        return q * factor + 1

    factor = sample_until(
        lambda f: make_p(f).bit_length() == l and
        is_probable_prime(make_p(f), certainty, rng),
        lambda: rng.randbits(l - n),
    )
    p = make_p(factor)

    # 1 < h < p-1 and h^factor mod p > 1
    h = sample_until(
        lambda h: 1 < h < p - 1 and mod_pow(h, factor, p) > 1,
        lambda: rng.randbits(l),
    )
    g = mod_pow(h, factor, p)

    logger.debug("Generated DSA domain L=%d N=%d", l, n)
    return DSADomain(p=p, q=q, g=g)


def generate_keypair(domain: DSADomain,
                     rng: Optional[SecureRandomSource] = None) -> DSAKeyPair:
    """Generate a key pair with private x in (0, q)."""
    x = random_below(domain.q, domain.q.bit_length(), lambda x: x > 0, rng)
    return DSAKeyPair(x=x, y=mod_pow(domain.g, x, domain.p))


def sign(message: int, domain: DSADomain, x: int,
         rng: Optional[SecureRandomSource] = None,
         digest: Optional[Digest] = None) -> DSASignature:
    """
    Sign an integer message.

    Args:
        message: Non-negative integer message
        domain: Domain parameters
        x: Private key
        rng: Source for the per-message nonce
        digest: Hash primitive (default SHA-1)

    Returns:
        DSASignature(r, s)
    """
    p, q, g = domain.p, domain.q, domain.g
    hash_m = hash_to_int(message, digest)
    rng = rng or default_source()

    def attempt() -> DSASignature:
        # Nonce k in (1, q)
        k = random_below(q, q.bit_length(), lambda k: k > 1, rng)
        r = mod_pow(g, k, p) % q
        s = (mod_inverse(k, q) * (hash_m + x * r)) % q
        return DSASignature(r, s)

    # r == 0 or s == 0 means a new k
    return sample_until(lambda sig: sig.r != 0 and sig.s != 0, attempt)


def verify(message: int, signature, domain: DSADomain, y: int,
           digest: Optional[Digest] = None) -> bool:
    """
    Verify a DSA signature.

    Returns False for any malformed input rather than raising.
    """
    p, q, g = domain.p, domain.q, domain.g
    r, s = signature

    if message < 0 or p <= 0:
        return False
    if not (0 < r < q and 0 < s < q):
        return False

    try:
        w = mod_inverse(s, q)
    except NoInverseError:
        return False

    hash_m = hash_to_int(message, digest)
    u1 = (hash_m * w) % q
    u2 = (r * w) % q
    v = (mod_pow(g, u1, p) * mod_pow(y, u2, p)) % p % q

    return v == r
