"""
ElGamal Digital Signature Scheme

Domain parameters (q, a):
- q: safe prime modulus, q = 2q' + 1 with q' prime
- a: generator of the full multiplicative group mod q

Keys:      x in (1, q-1),  y = a^x mod q
Signing:   k in [1, q-1] with gcd(k, q-1) = 1
           S1 = a^k mod q
           S2 = k^(-1) * (H(m) - x*S1) mod (q-1)
Verifying: accept iff a^H(m) mod q == y^S1 * S1^S2 mod q

The message hash must lie in [0, q), so q must be wider than the digest.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ..core_crypto.digest import Digest, hash_to_int
from ..core_crypto.errors import InvalidMessageError
from ..core_crypto.number_theory import mod_pow, mod_inverse, gcd, probable_prime, safe_prime
from ..core_crypto.randomness import SecureRandomSource, default_source, sample_until, random_below
from .. import config


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElGamalDomain:
    """Safe-prime modulus q and generator a."""
    q: int
    a: int


@dataclass(frozen=True)
class ElGamalKeyPair:
    """Private scalar x and public value y = a^x mod q."""
    x: int
    y: int


class ElGamalSignature(NamedTuple):
    s1: int
    s2: int


def generate_domain(q_bits: Optional[int] = None, a_bits: Optional[int] = None,
                    rng: Optional[SecureRandomSource] = None,
                    certainty: Optional[int] = None) -> ElGamalDomain:
    """
    Generate a safe prime and a generator of its multiplicative group.

    Args:
        q_bits: Bit length of the Sophie Germain prime q' (modulus has q_bits + 1 bits)
        a_bits: Bit length of the prime generator candidates (2 <= a_bits <= q_bits)
        rng: Randomness source
        certainty: Error exponent for primality tests

    Returns:
        ElGamalDomain(q, a)
    """
    q_bits = q_bits if q_bits is not None else config.ELGAMAL_CONFIG['q_bits']
    a_bits = a_bits if a_bits is not None else config.ELGAMAL_CONFIG['a_bits']
    if not 2 <= a_bits <= q_bits:
        raise ValueError("Generator length must be between 2 and the prime length")
    rng = rng or default_source()

    modulus, sophie_germain = safe_prime(q_bits, certainty, rng)

    # Order of a divides 2q'; rule out orders 1, 2 and q'
    def is_generator(a: int) -> bool:
        return (mod_pow(a, 2, modulus) != 1 and
                mod_pow(a, sophie_germain, modulus) != 1)

    a = sample_until(is_generator,
                     lambda: probable_prime(a_bits, certainty, rng))

    logger.debug("Generated ElGamal domain with %d-bit modulus",
                 modulus.bit_length())
    return ElGamalDomain(q=modulus, a=a)


def generate_keypair(domain: ElGamalDomain,
                     rng: Optional[SecureRandomSource] = None) -> ElGamalKeyPair:
    """Generate a key pair with private x in (1, q-1)."""
    q = domain.q
    x = random_below(q - 1, q.bit_length(), lambda x: x > 1, rng)
    return ElGamalKeyPair(x=x, y=mod_pow(domain.a, x, q))


def sign(message: int, domain: ElGamalDomain, x: int,
         rng: Optional[SecureRandomSource] = None,
         digest: Optional[Digest] = None) -> ElGamalSignature:
    """
    Sign an integer message.

    Raises:
        InvalidMessageError: If H(m) is not in [0, q)
    """
    q, a = domain.q, domain.a
    hash_m = hash_to_int(message, digest)
    if not 0 <= hash_m < q:
        raise InvalidMessageError(
            f"Message hash does not fit the {q.bit_length()}-bit modulus"
        )

    # 1 <= k <= q-1 and gcd(k, q-1) = 1
    k = random_below(q, q.bit_length(),
                     lambda k: k >= 1 and gcd(k, q - 1) == 1, rng)

    s1 = mod_pow(a, k, q)
    s2 = (mod_inverse(k, q - 1) * (hash_m - x * s1)) % (q - 1)
    return ElGamalSignature(s1, s2)


def verify(message: int, signature, domain: ElGamalDomain, y: int,
           digest: Optional[Digest] = None) -> bool:
    """Verify an ElGamal signature. Malformed input yields False."""
    q, a = domain.q, domain.a
    s1, s2 = signature

    if message < 0:
        return False
    if not (0 < s1 < q and 0 <= s2 < q - 1):
        return False

    hash_m = hash_to_int(message, digest)
    if hash_m >= q:
        return False

    v1 = mod_pow(a, hash_m, q)
    v2 = (mod_pow(y, s1, q) * mod_pow(s1, s2, q)) % q
    return v1 == v2
