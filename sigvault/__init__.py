"""
SigVault - classical digital signature schemes over big integers.

Modules:
- core_crypto: modular arithmetic, primes, randomness, hashing, MGF1
- signatures: DSA, ElGamal, Schnorr, RSA-PSS
- main: command-line driver
"""

__version__ = "1.0.0"
