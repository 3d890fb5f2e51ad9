"""
Schnorr Digital Signature Scheme

Domain parameters (a, p, q):
- q: prime subgroup order (160 bits by default)
- p: prime modulus with p - 1 = k*q (1024 bits by default)
- a: element of order q, a = x^k mod p

Keys:      s in [0, q),  v = (a^(-1))^s mod p
Signing:   r in [0, q),  x = a^r mod p
           e = H(m || x),  y = (r + s*e) mod q
Verifying: x' = a^y * v^e mod p,  accept iff H(m || x') == e

m || x is formed arithmetically: m is shifted left by the bit length of x
and x is added, then the sum is hashed in canonical byte form.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ..core_crypto.digest import Digest, DEFAULT_DIGEST
from ..core_crypto.number_theory import (
    mod_pow, mod_inverse, probable_prime, is_probable_prime,
    to_canonical_bytes, bytes_to_int,
)
from ..core_crypto.randomness import SecureRandomSource, default_source, sample_until, random_below
from .. import config


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchnorrDomain:
    """Generator a of order q in the group mod p."""
    a: int
    p: int
    q: int


@dataclass(frozen=True)
class SchnorrKeyPair:
    """Private scalar s and public value v = a^(-s) mod p."""
    s: int
    v: int


class SchnorrSignature(NamedTuple):
    e: int
    y: int


def generate_domain(q_bits: Optional[int] = None, p_bits: Optional[int] = None,
                    rng: Optional[SecureRandomSource] = None,
                    certainty: Optional[int] = None) -> SchnorrDomain:
    """
    Generate Schnorr group parameters.

    Args:
        q_bits: Bit length of q (default 160)
        p_bits: Bit length of p (default 1024)
        rng: Randomness source
        certainty: Error exponent for primality tests

    Returns:
        SchnorrDomain(a, p, q)
    """
    q_bits = q_bits if q_bits is not None else config.SCHNORR_CONFIG['q_bits']
    p_bits = p_bits if p_bits is not None else config.SCHNORR_CONFIG['p_bits']
    # k needs at least 3 bits to be even and give a p_bits-bit p
    if q_bits < 2 or p_bits - q_bits < 3:
        raise ValueError("Schnorr sizes must satisfy p_bits >= q_bits + 3 and q_bits >= 2")
    rng = rng or default_source()

    q = probable_prime(q_bits, certainty, rng)

    # p - 1 = k*q, p a p_bits-bit prime
    k = sample_until(
        lambda k: (k * q + 1).bit_length() == p_bits and
        is_probable_prime(k * q + 1, certainty, rng),
        lambda: rng.randbits(p_bits - q_bits),
    )
    p = k * q + 1

    # x^(p-1) = 1 mod p and p-1 = kq, so (x^k)^q = 1 mod p
    a = sample_until(
        lambda a: a > 1,
        lambda: mod_pow(rng.randbits(p_bits), k, p),
    )

    logger.debug("Generated Schnorr domain q=%d bits, p=%d bits", q_bits, p_bits)
    return SchnorrDomain(a=a, p=p, q=q)


def generate_keypair(domain: SchnorrDomain,
                     rng: Optional[SecureRandomSource] = None) -> SchnorrKeyPair:
    """Generate a key pair with private s in [0, q)."""
    s = random_below(domain.q, domain.q.bit_length(), rng=rng)
    v = mod_pow(mod_inverse(domain.a, domain.p), s, domain.p)
    return SchnorrKeyPair(s=s, v=v)


def challenge(message: int, commitment: int,
              digest: Optional[Digest] = None) -> int:
    """e = H(m || x) with || realised as (m << bitlen(x)) + x."""
    digest = digest or DEFAULT_DIGEST
    joined = (message << commitment.bit_length()) + commitment
    return bytes_to_int(digest(to_canonical_bytes(joined)))


def sign(message: int, domain: SchnorrDomain, s: int,
         rng: Optional[SecureRandomSource] = None,
         digest: Optional[Digest] = None) -> SchnorrSignature:
    """
    Sign an integer message.

    Args:
        message: Non-negative integer message
        domain: Domain parameters
        s: Private key
        rng: Source for the commitment randomness
        digest: Hash primitive (default SHA-1)

    Returns:
        SchnorrSignature(e, y)
    """
    if message < 0:
        raise ValueError("Message must be non-negative")
    a, p, q = domain.a, domain.p, domain.q

    r = random_below(q, q.bit_length(), rng=rng)
    x = mod_pow(a, r, p)
    e = challenge(message, x, digest)
    y = (r + s * e) % q
    return SchnorrSignature(e, y)


def verify(message: int, signature, domain: SchnorrDomain, v: int,
           digest: Optional[Digest] = None) -> bool:
    """Verify a Schnorr signature. Malformed input yields False."""
    a, p = domain.a, domain.p
    e, y = signature

    if message < 0 or e < 0 or y < 0 or p <= 0:
        return False

    x = (mod_pow(a, y, p) * mod_pow(v, e, p)) % p
    return challenge(message, x, digest) == e
