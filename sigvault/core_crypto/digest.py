"""
Hash Primitive

A fixed-output-length digest capability shared by every scheme. The
concrete algorithm comes from the `cryptography` package; SHA-1 is the
default, giving H_LEN = 20 bytes.

The digest is checked once when constructed. A missing algorithm or an
output length that disagrees with the declared one is a configuration
error, never a per-call failure.
"""

from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from .errors import ConfigurationError
from .number_theory import to_canonical_bytes, bytes_to_int


class Digest:
    """
    Stateless wrapper around a cryptography hash algorithm.

    Example:
        >>> sha1 = Digest()
        >>> sha1.digest_size
        20
        >>> sha1(b"abc").hex()
        'a9993e364706816aba3e25717850c26c9cd0d89d'
    """

    def __init__(self, algorithm: Optional[hashes.HashAlgorithm] = None):
        """
        Args:
            algorithm: cryptography hash algorithm instance (SHA-1 if None)

        Raises:
            ConfigurationError: If the algorithm is unusable
        """
        self._algorithm = algorithm or hashes.SHA1()
        try:
            probe = self._compute(b"")
        except UnsupportedAlgorithm as exc:
            raise ConfigurationError(
                f"Hash algorithm {self._algorithm.name} is unavailable"
            ) from exc
        if len(probe) != self._algorithm.digest_size:
            raise ConfigurationError(
                f"{self._algorithm.name} produced {len(probe)} bytes, "
                f"declared {self._algorithm.digest_size}"
            )

    def _compute(self, data: bytes) -> bytes:
        h = hashes.Hash(self._algorithm)
        h.update(data)
        return h.finalize()

    def __call__(self, data: bytes) -> bytes:
        """Hash data and return digest_size bytes."""
        return self._compute(data)

    @property
    def name(self) -> str:
        """Algorithm name as reported by cryptography (e.g. 'sha1')."""
        return self._algorithm.name

    @property
    def digest_size(self) -> int:
        """Output length in bytes (H_LEN)."""
        return self._algorithm.digest_size

    def __repr__(self) -> str:
        return f"Digest({self.name})"


DEFAULT_DIGEST = Digest()

H_LEN = DEFAULT_DIGEST.digest_size


def hash_to_int(message: int, digest: Optional[Digest] = None) -> int:
    """
    Hash an integer message and read the digest as an unsigned integer.

    The message is hashed in its canonical byte form.
    """
    digest = digest or DEFAULT_DIGEST
    return bytes_to_int(digest(to_canonical_bytes(message)))
