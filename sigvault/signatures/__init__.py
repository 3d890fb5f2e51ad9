# Signature Schemes Module
"""
Signature scheme implementations:
- DSA - dsa.py
- ElGamal - elgamal.py
- Schnorr - schnorr.py
- RSA-PSS (EMSA-PSS encoding + RSA) - rsa_pss.py

Each module exposes generate_domain / generate_keypair / sign / verify
(RSA-PSS has no domain step) as plain functions over integers.
"""

from . import dsa, elgamal, schnorr, rsa_pss

from .dsa import DSADomain, DSAKeyPair, DSASignature
from .elgamal import ElGamalDomain, ElGamalKeyPair, ElGamalSignature
from .schnorr import SchnorrDomain, SchnorrKeyPair, SchnorrSignature
from .rsa_pss import RSAKeyPair

__all__ = [
    'dsa',
    'elgamal',
    'schnorr',
    'rsa_pss',
    'DSADomain',
    'DSAKeyPair',
    'DSASignature',
    'ElGamalDomain',
    'ElGamalKeyPair',
    'ElGamalSignature',
    'SchnorrDomain',
    'SchnorrKeyPair',
    'SchnorrSignature',
    'RSAKeyPair',
]
