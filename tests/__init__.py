# SigVault Test Suite
"""
Test suite including:
- Unit tests for the arithmetic, randomness and hash primitives
- Sign/verify tests for DSA, ElGamal, Schnorr and RSA-PSS
- Security tests (tampering, malformed signatures)
- Driver integration tests

Run with: pytest
"""
