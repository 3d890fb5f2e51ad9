"""
Secure Randomness and Rejection Sampling

Every key, nonce and parameter generator in sigvault draws its integers
through a SecureRandomSource and filters them with sample_until():

    k = random_below(q, q.bit_length(), lambda k: k > 1, rng)

Randomness is passed in explicitly so tests can use a seeded source while
production code uses the operating system's CSPRNG via `secrets`.
"""

import logging
import random
import secrets
from typing import Callable, Optional, TypeVar

from .errors import SamplingExhaustedError
from .. import config


logger = logging.getLogger(__name__)

T = TypeVar("T")


class SecureRandomSource:
    """
    Source of uniformly random integers.

    Subclasses implement randbits(); the remaining helpers are built on it.
    """

    def randbits(self, bits: int) -> int:
        """Return a uniform integer in [0, 2^bits)."""
        raise NotImplementedError

    def token_bytes(self, length: int) -> bytes:
        """Return `length` uniformly random bytes."""
        if length == 0:
            return b''
        return self.randbits(8 * length).to_bytes(length, byteorder='big')


class SystemRandomSource(SecureRandomSource):
    """OS-backed source (secrets module). Safe to share between threads."""

    def randbits(self, bits: int) -> int:
        if bits < 0:
            raise ValueError("Number of bits must be non-negative")
        if bits == 0:
            return 0
        return secrets.randbits(bits)


class SeededRandomSource(SecureRandomSource):
    """
    Deterministic source for reproducible tests.

    NOT cryptographically secure - never use it to generate real keys.

    Example:
        >>> SeededRandomSource(7).randbits(16) == SeededRandomSource(7).randbits(16)
        True
    """

    def __init__(self, seed: int):
        self._random = random.Random(seed)

    def randbits(self, bits: int) -> int:
        if bits < 0:
            raise ValueError("Number of bits must be non-negative")
        if bits == 0:
            return 0
        return self._random.getrandbits(bits)


_SYSTEM_SOURCE = SystemRandomSource()


def default_source() -> SecureRandomSource:
    """Shared system randomness source."""
    return _SYSTEM_SOURCE


def sample_until(predicate: Callable[[T], bool],
                 generator: Callable[[], T],
                 max_attempts: Optional[int] = None) -> T:
    """
    Draw values from generator until one satisfies predicate.

    Args:
        predicate: Acceptance test for a candidate
        generator: Zero-argument callable producing candidates
        max_attempts: Optional cap on the number of draws
            (defaults to SAMPLING_CONFIG['max_attempts'], None = unbounded)

    Returns:
        The first accepted candidate

    Raises:
        SamplingExhaustedError: If the cap is reached first
    """
    if max_attempts is None:
        max_attempts = config.SAMPLING_CONFIG['max_attempts']

    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        candidate = generator()
        if predicate(candidate):
            if attempts > 1:
                logger.debug("Accepted candidate after %d attempts", attempts)
            return candidate

    raise SamplingExhaustedError(
        f"No acceptable candidate after {max_attempts} attempts"
    )


def random_below(bound: int, bits: int,
                 predicate: Optional[Callable[[int], bool]] = None,
                 rng: Optional[SecureRandomSource] = None) -> int:
    """
    Sample from [0, 2^bits) until the value is below bound.

    Args:
        bound: Exclusive upper bound
        bits: Width of each raw draw
        predicate: Additional acceptance test (range, coprimality, ...)
        rng: Randomness source (system source if None)

    Returns:
        An integer v with 0 <= v < bound and predicate(v)
    """
    if bound <= 0:
        raise ValueError("Bound must be positive")
    if bits <= 0:
        raise ValueError("Bit width must be positive")
    rng = rng or default_source()

    def accept(value: int) -> bool:
        if value >= bound:
            return False
        return predicate is None or predicate(value)

    return sample_until(accept, lambda: rng.randbits(bits))
