"""
Number-Theoretic Operations

Implements the big-integer arithmetic shared by DSA, ElGamal, Schnorr and
RSA-PSS:
- Modular exponentiation (square-and-multiply algorithm)
- GCD and Extended Euclidean Algorithm for modular inverse
- Miller-Rabin primality testing with a certainty bound
- Probable prime and safe prime generation
- Canonical big-endian byte conversion

Note: Modular exponentiation uses the square-and-multiply algorithm rather
      than Python's built-in pow(a, b, mod).
"""

import logging
import math
from typing import Optional, Tuple

from .errors import NoInverseError
from .randomness import SecureRandomSource, default_source, sample_until
from .. import config


logger = logging.getLogger(__name__)


# Odd primes below 256, used to discard most candidates before Miller-Rabin
SMALL_PRIMES = [
    p for p in range(3, 256, 2)
    if all(p % d for d in range(3, math.isqrt(p) + 1, 2))
]


def ceil_div(a: int, b: int) -> int:
    """Integer ceiling of a / b for positive b."""
    return -(-a // b)


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Modular exponentiation using square-and-multiply algorithm.

    Algorithm (right-to-left binary method):
    1. Start with result = 1
    2. For each bit of exponent (from LSB to MSB):
       - If bit is 1, multiply result by base (mod modulus)
       - Square the base (mod modulus)

    Args:
        base: The base number (reduced modulo modulus first)
        exponent: The exponent (must be non-negative)
        modulus: The modulus (must be positive)

    Returns:
        (base^exponent) mod modulus

    Raises:
        ValueError: If exponent < 0 or modulus <= 0
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative")
    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    if modulus == 1:
        return 0

    base = base % modulus
    result = 1

    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1

    return result


def gcd(a: int, b: int) -> int:
    """Greatest common divisor (Euclidean algorithm)."""
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Extended Euclidean Algorithm.

    Finds integers x, y such that: a*x + b*y = gcd(a, b)

    Returns:
        Tuple (gcd, x, y)
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1

    while r:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_x, x = x, old_x - quotient * x
        old_y, y = y, old_y - quotient * y

    return old_r, old_x, old_y


def mod_inverse(a: int, modulus: int) -> int:
    """
    Compute modular multiplicative inverse.

    Finds x such that (a * x) mod modulus = 1

    Args:
        a: The number to invert
        modulus: The modulus (must be positive)

    Returns:
        Modular inverse of a mod modulus, in [0, modulus)

    Raises:
        NoInverseError: If gcd(a, modulus) != 1
    """
    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    g, x, _ = extended_gcd(a % modulus, modulus)

    if g != 1:
        raise NoInverseError(a, modulus, g)

    return x % modulus


def _rounds_for(certainty: Optional[int]) -> int:
    """Miller-Rabin rounds giving error probability <= 2^-certainty."""
    if certainty is None:
        certainty = config.PRIME_CONFIG['certainty']
    if certainty < config.PRIME_CONFIG['min_certainty']:
        raise ValueError(
            f"Certainty must be at least {config.PRIME_CONFIG['min_certainty']}"
        )
    # Each round leaves at most 1/4 probability of a false positive
    return ceil_div(certainty, 2)


def _passes_trial_division(n: int) -> bool:
    """False if n has a small odd prime factor other than itself."""
    for p in SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False
    return True


def _miller_rabin(n: int, rounds: int, rng: SecureRandomSource) -> bool:
    """Miller-Rabin witness loop for odd n > 3."""
    # Write n-1 as 2^r * d
    r, d = 0, n - 1
    while d % 2 == 0:
        r += 1
        d //= 2

    for _ in range(rounds):
        # Random witness in [2, n-2]
        a = sample_until(lambda w: 2 <= w <= n - 2,
                         lambda: rng.randbits(n.bit_length()))
        x = mod_pow(a, d, n)

        if x == 1 or x == n - 1:
            continue

        for _ in range(r - 1):
            x = mod_pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False

    return True


def is_probable_prime(n: int, certainty: Optional[int] = None,
                      rng: Optional[SecureRandomSource] = None) -> bool:
    """
    Probabilistic primality test.

    Trial division by small primes followed by Miller-Rabin. A composite
    passes with probability at most 2^-certainty.

    Args:
        n: Number to test
        certainty: Error exponent (default PRIME_CONFIG['certainty'])
        rng: Source for Miller-Rabin witnesses

    Returns:
        True if n is probably prime, False if definitely composite
    """
    rounds = _rounds_for(certainty)

    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n % 2 == 0:
        return False
    if not _passes_trial_division(n):
        return False
    if n < SMALL_PRIMES[-1] ** 2:
        return True

    return _miller_rabin(n, rounds, rng or default_source())


def _random_odd_candidate(bits: int, rng: SecureRandomSource) -> int:
    """Random odd integer with exactly `bits` bits (MSB and LSB set)."""
    candidate = rng.randbits(bits)
    candidate |= (1 << (bits - 1))
    candidate |= 1
    return candidate


def probable_prime(bits: int, certainty: Optional[int] = None,
                   rng: Optional[SecureRandomSource] = None) -> int:
    """
    Generate a random probable prime of exactly `bits` bits.

    Args:
        bits: Desired bit length (at least 2)
        certainty: Error exponent for the primality test
        rng: Randomness source

    Returns:
        A probable prime p with p.bit_length() == bits

    Raises:
        ValueError: If bits < 2 or certainty is below the configured minimum
    """
    if bits < 2:
        raise ValueError("Bit length must be at least 2")
    _rounds_for(certainty)
    rng = rng or default_source()

    return sample_until(
        lambda c: is_probable_prime(c, certainty, rng),
        lambda: _random_odd_candidate(bits, rng),
    )


def safe_prime(bits: int, certainty: Optional[int] = None,
               rng: Optional[SecureRandomSource] = None) -> Tuple[int, int]:
    """
    Generate a safe prime p = 2q + 1 where q is a `bits`-bit probable prime.

    Both candidates are sieved by trial division before any Miller-Rabin
    round, since nearly all (q, 2q + 1) pairs fail there.

    Args:
        bits: Bit length of q (at least 2)
        certainty: Error exponent applied to both q and p
        rng: Randomness source

    Returns:
        Tuple (p, q)
    """
    if bits < 2:
        raise ValueError("Bit length must be at least 2")
    rounds = _rounds_for(certainty)
    rng = rng or default_source()

    def is_sophie_germain(q: int) -> bool:
        p = 2 * q + 1
        if q < SMALL_PRIMES[-1] ** 2:
            return is_probable_prime(q, certainty, rng) and \
                is_probable_prime(p, certainty, rng)
        if not (_passes_trial_division(q) and _passes_trial_division(p)):
            return False
        # One cheap round on each before paying for the full count
        if not (_miller_rabin(q, 1, rng) and _miller_rabin(p, 1, rng)):
            return False
        return _miller_rabin(q, rounds, rng) and _miller_rabin(p, rounds, rng)

    q = sample_until(is_sophie_germain,
                     lambda: _random_odd_candidate(bits, rng))
    logger.debug("Found %d-bit safe prime", (2 * q + 1).bit_length())
    return 2 * q + 1, q


def to_canonical_bytes(n: int) -> bytes:
    """
    Minimal big-endian encoding of a non-negative integer.

    No leading zero byte is emitted, so 0 encodes to b''.

    Raises:
        ValueError: If n is negative
    """
    if n < 0:
        raise ValueError("Cannot encode a negative integer")
    return n.to_bytes((n.bit_length() + 7) // 8, byteorder='big')


def bytes_to_int(data: bytes) -> int:
    """Convert bytes to a non-negative integer (big-endian)."""
    return int.from_bytes(data, byteorder='big')
