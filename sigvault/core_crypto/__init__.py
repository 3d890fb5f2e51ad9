# Core Cryptography Module
"""
Primitives shared by every signature scheme:
- Modular arithmetic and prime generation (number_theory.py)
- Injected secure randomness and rejection sampling (randomness.py)
- Pluggable hash primitive (digest.py)
- MGF1 mask generation (mgf.py)
- Error taxonomy (errors.py)
"""

from .errors import (
    SignatureSchemeError,
    NoInverseError,
    InvalidMessageError,
    EncodingError,
    MalformedSignatureError,
    SamplingExhaustedError,
    ConfigurationError,
)

from .randomness import (
    SecureRandomSource,
    SystemRandomSource,
    SeededRandomSource,
    default_source,
    sample_until,
    random_below,
)

from .number_theory import (
    ceil_div,
    mod_pow,
    gcd,
    extended_gcd,
    mod_inverse,
    is_probable_prime,
    probable_prime,
    safe_prime,
    to_canonical_bytes,
    bytes_to_int,
)

from .digest import Digest, DEFAULT_DIGEST, H_LEN, hash_to_int
from .mgf import mgf1

__all__ = [
    'SignatureSchemeError',
    'NoInverseError',
    'InvalidMessageError',
    'EncodingError',
    'MalformedSignatureError',
    'SamplingExhaustedError',
    'ConfigurationError',
    'SecureRandomSource',
    'SystemRandomSource',
    'SeededRandomSource',
    'default_source',
    'sample_until',
    'random_below',
    'ceil_div',
    'mod_pow',
    'gcd',
    'extended_gcd',
    'mod_inverse',
    'is_probable_prime',
    'probable_prime',
    'safe_prime',
    'to_canonical_bytes',
    'bytes_to_int',
    'Digest',
    'DEFAULT_DIGEST',
    'H_LEN',
    'hash_to_int',
    'mgf1',
]
