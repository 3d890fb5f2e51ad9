"""
RSA-PSS Signature Scheme

Implements the EMSA-PSS probabilistic encoding with RSA exponentiation:
- encode():          salt + MGF1 masking into emLen = ceil(emBits/8) bytes
- rsa_transform():   data^exponent mod modulus, canonical bytes out
- verify_encoding(): structural and hash check of a decoded block

Encoded message layout (emLen bytes):

    [ maskedDB (emLen - H_LEN - 1) | H (H_LEN) | 0xBC ]

    DB  = 0x00 * (emLen - S_LEN - H_LEN - 2) || 0x01 || salt
    M'  = 0x00 * 8 || Hash(m) || salt
    H   = Hash(M')
    maskedDB = DB xor MGF1(H, emLen - H_LEN - 1)

The leftmost 8*emLen - emBits bits of maskedDB are forced to zero so the
encoded integer stays below a modulus of emBits + 1 bits.

Security note: verification returns False on the first failed check; it
is not constant-time.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from ..core_crypto.digest import Digest, DEFAULT_DIGEST
from ..core_crypto.errors import EncodingError, MalformedSignatureError
from ..core_crypto.mgf import mgf1
from ..core_crypto.number_theory import (
    ceil_div, mod_pow, mod_inverse, gcd, probable_prime,
    to_canonical_bytes, bytes_to_int,
)
from ..core_crypto.randomness import SecureRandomSource, default_source, sample_until
from .. import config


logger = logging.getLogger(__name__)


# Trailer byte closing every encoded message
TRAILER = 0xBC

# M' starts with eight zero bytes
PADDING1 = b'\x00' * 8

S_LEN = config.RSA_PSS_CONFIG['salt_len']


@dataclass(frozen=True)
class RSAKeyPair:
    """RSA key pair: public (e, n), private (d, n)."""
    e: int
    d: int
    n: int

    @property
    def public_key(self):
        """Public key (e, n)."""
        return self.e, self.n

    @property
    def private_key(self):
        """Private key (d, n)."""
        return self.d, self.n

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return self.n.bit_length()


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _top_bit_mask(em_len: int, em_bits: int) -> int:
    """Mask clearing the leftmost 8*emLen - emBits bits of a byte."""
    return 0xFF >> (8 * em_len - em_bits)


def _layout(em_bits: int, digest: Digest, salt_len: int):
    """Return (emLen, dbLen) and check the block can hold hash and salt."""
    if em_bits <= 0:
        raise EncodingError("emBits must be positive")
    em_len = ceil_div(em_bits, 8)
    if em_len < digest.digest_size + salt_len + 2:
        raise EncodingError(
            f"emBits={em_bits} gives {em_len} bytes, need at least "
            f"{digest.digest_size + salt_len + 2}"
        )
    return em_len, em_len - digest.digest_size - 1


def encode(message: int, em_bits: int,
           digest: Optional[Digest] = None,
           salt_len: Optional[int] = None,
           rng: Optional[SecureRandomSource] = None) -> bytes:
    """
    EMSA-PSS encode an integer message.

    Args:
        message: Non-negative integer message (hashed in canonical bytes)
        em_bits: Maximal bit length of the encoded integer
        digest: Hash primitive (default SHA-1, H_LEN = 20)
        salt_len: Salt length S_LEN in bytes (default 20)
        rng: Source for the salt

    Returns:
        Encoded message of exactly ceil(em_bits/8) bytes ending in 0xBC

    Raises:
        EncodingError: If emLen < H_LEN + S_LEN + 2
    """
    digest = digest or DEFAULT_DIGEST
    salt_len = S_LEN if salt_len is None else salt_len
    rng = rng or default_source()
    em_len, db_len = _layout(em_bits, digest, salt_len)

    m_hash = digest(to_canonical_bytes(message))

    # Fixed-width field: a salt with leading zero bytes stays right-aligned
    salt = rng.token_bytes(salt_len)

    h = digest(PADDING1 + m_hash + salt)

    db = b'\x00' * (db_len - salt_len - 1) + b'\x01' + salt
    masked_db = bytearray(_xor(db, mgf1(h, db_len, digest)))
    masked_db[0] &= _top_bit_mask(em_len, em_bits)

    return bytes(masked_db) + h + bytes([TRAILER])


def rsa_transform(data: bytes, exponent: int, modulus: int) -> bytes:
    """
    Raw RSA exponentiation on a byte string.

    data is read as an unsigned big-endian integer; the result is returned
    in canonical form, so leading zero bytes are dropped.
    """
    return to_canonical_bytes(mod_pow(bytes_to_int(data), exponent, modulus))


def sign_encoded(em: bytes, d: int, n: int) -> bytes:
    """s = em^d mod n."""
    return rsa_transform(em, d, n)


def decode(signature: bytes, e: int, n: int) -> bytes:
    """em' = s^e mod n (may be shorter than emLen)."""
    return rsa_transform(signature, e, n)


def check_encoding(message: int, em: bytes, em_bits: int,
                   digest: Optional[Digest] = None,
                   salt_len: Optional[int] = None) -> None:
    """
    Strict EMSA-PSS verification.

    em may be shorter than emLen (leading zeros lost by decode()); it is
    left-padded before checking.

    Raises:
        MalformedSignatureError: Naming the first rule the block breaks
    """
    digest = digest or DEFAULT_DIGEST
    salt_len = S_LEN if salt_len is None else salt_len
    h_len = digest.digest_size

    try:
        em_len, db_len = _layout(em_bits, digest, salt_len)
    except EncodingError as exc:
        raise MalformedSignatureError(str(exc)) from exc

    if len(em) > em_len:
        raise MalformedSignatureError(
            f"Encoded message is {len(em)} bytes, expected at most {em_len}"
        )
    em = em.rjust(em_len, b'\x00')

    if message < 0:
        raise MalformedSignatureError("Message must be non-negative")
    m_hash = digest(to_canonical_bytes(message))

    if em[-1] != TRAILER:
        raise MalformedSignatureError("Missing 0xBC trailer")

    masked_db = em[:db_len]
    h = em[db_len:db_len + h_len]

    top_mask = _top_bit_mask(em_len, em_bits)
    if masked_db[0] & ~top_mask & 0xFF:
        raise MalformedSignatureError("Leftmost bits of maskedDB are not zero")

    db = bytearray(_xor(masked_db, mgf1(h, db_len, digest)))
    db[0] &= top_mask

    pad_len = db_len - salt_len - 1
    if any(db[:pad_len]):
        raise MalformedSignatureError("Nonzero byte in DB padding")
    if db[pad_len] != 0x01:
        raise MalformedSignatureError("Missing 0x01 separator in DB")

    salt = bytes(db[db_len - salt_len:])
    h_check = digest(PADDING1 + m_hash + salt)

    if not hmac.compare_digest(h, h_check):
        raise MalformedSignatureError("Hash mismatch")


def verify_encoding(message: int, em: bytes, em_bits: int,
                    digest: Optional[Digest] = None,
                    salt_len: Optional[int] = None) -> bool:
    """
    EMSA-PSS verification as a boolean.

    Returns:
        True if em is a valid encoding of message, False otherwise
    """
    try:
        check_encoding(message, em, em_bits, digest, salt_len)
    except MalformedSignatureError as exc:
        logger.debug("PSS verification failed: %s", exc)
        return False
    return True


def generate_keypair(bits: Optional[int] = None,
                     public_exponent: Optional[int] = None,
                     rng: Optional[SecureRandomSource] = None,
                     certainty: Optional[int] = None) -> RSAKeyPair:
    """
    Generate an RSA key pair.

    Generates two distinct random primes of half the bit length,
    computes n = p*q and d = e^(-1) mod phi(n).

    Args:
        bits: Desired bit length of modulus n (default 1024)
        public_exponent: Starting public exponent (default 65537)
        rng: Randomness source
        certainty: Error exponent for primality tests

    Returns:
        RSAKeyPair(e, d, n)

    Raises:
        ValueError: If bits < 16 or the exponent is even or below 3
    """
    bits = bits if bits is not None else config.RSA_PSS_CONFIG['modulus_bits']
    e = public_exponent or config.RSA_PSS_CONFIG['public_exponent']
    if bits < 16:
        raise ValueError("RSA modulus must be at least 16 bits")
    # Stepping by 2 only reaches a unit mod phi(n) from an odd start
    if e < 3 or e % 2 == 0:
        raise ValueError("Public exponent must be odd and at least 3")
    rng = rng or default_source()

    prime_bits = bits // 2
    p, q = sample_until(
        lambda pq: pq[0] != pq[1] and (pq[0] * pq[1]).bit_length() == bits,
        lambda: (probable_prime(prime_bits, certainty, rng),
                 probable_prime(bits - prime_bits, certainty, rng)),
    )

    n = p * q
    phi_n = (p - 1) * (q - 1)

    # Ensure gcd(e, phi(n)) = 1
    while gcd(e, phi_n) != 1:
        e += 2

    d = mod_inverse(e, phi_n)

    logger.debug("Generated %d-bit RSA key, e=%d", bits, e)
    return RSAKeyPair(e=e, d=d, n=n)


def sign(message: int, key: RSAKeyPair, em_bits: Optional[int] = None,
         digest: Optional[Digest] = None,
         salt_len: Optional[int] = None,
         rng: Optional[SecureRandomSource] = None) -> bytes:
    """
    RSASSA-PSS sign: encode then exponentiate with d.

    em_bits defaults to modBits - 1, the largest value that keeps the
    encoded integer below n.
    """
    if em_bits is None:
        em_bits = key.n.bit_length() - 1
    em = encode(message, em_bits, digest, salt_len, rng)
    return sign_encoded(em, key.d, key.n)


def verify(message: int, signature: bytes, key: RSAKeyPair,
           em_bits: Optional[int] = None,
           digest: Optional[Digest] = None,
           salt_len: Optional[int] = None) -> bool:
    """RSASSA-PSS verify: exponentiate with e then check the encoding."""
    if em_bits is None:
        em_bits = key.n.bit_length() - 1
    if bytes_to_int(signature) >= key.n:
        return False
    em = decode(signature, key.e, key.n)
    return verify_encoding(message, em, em_bits, digest, salt_len)
