"""
Unit tests for the discrete-log signature schemes.

Tests:
- DSA domain/key generation, sign, verify
- ElGamal domain/key generation, sign, verify
- Schnorr domain/key generation, sign, verify

Domains are generated once per module at reduced sizes to keep the
suite fast; one test per scheme checks the default sizes.
"""

import pytest

from sigvault.core_crypto.errors import InvalidMessageError
from sigvault.core_crypto.digest import hash_to_int
from sigvault.core_crypto.number_theory import is_probable_prime
from sigvault.core_crypto.randomness import SeededRandomSource
from sigvault.signatures import dsa, elgamal, schnorr


MESSAGES = [0, 1, 12345, 2 ** 64 + 17, 3 ** 200]


@pytest.fixture(scope="module")
def dsa_domain():
    return dsa.generate_domain(512, 160)


@pytest.fixture(scope="module")
def dsa_keys(dsa_domain):
    return dsa.generate_keypair(dsa_domain)


@pytest.fixture(scope="module")
def elgamal_domain():
    return elgamal.generate_domain(192, 32)


@pytest.fixture(scope="module")
def elgamal_keys(elgamal_domain):
    return elgamal.generate_keypair(elgamal_domain)


@pytest.fixture(scope="module")
def schnorr_domain():
    return schnorr.generate_domain(160, 512)


@pytest.fixture(scope="module")
def schnorr_keys(schnorr_domain):
    return schnorr.generate_keypair(schnorr_domain)


class TestDSA:
    """Unit tests for DSA."""

    def test_domain_structure(self, dsa_domain):
        """p, q prime of the requested sizes; q | p-1; g has order q."""
        p, q, g = dsa_domain.p, dsa_domain.q, dsa_domain.g
        assert p.bit_length() == 512
        assert q.bit_length() == 160
        assert is_probable_prime(p) and is_probable_prime(q)
        assert (p - 1) % q == 0
        assert 1 < g < p
        assert pow(g, q, p) == 1

    def test_keypair_invariants(self, dsa_domain):
        """0 < x < q and y = g^x mod p."""
        for _ in range(10):
            keys = dsa.generate_keypair(dsa_domain)
            assert 0 < keys.x < dsa_domain.q
            assert keys.y == pow(dsa_domain.g, keys.x, dsa_domain.p)

    @pytest.mark.parametrize("message", MESSAGES)
    def test_sign_verify(self, dsa_domain, dsa_keys, message):
        signature = dsa.sign(message, dsa_domain, dsa_keys.x)
        assert 0 < signature.r < dsa_domain.q
        assert 0 < signature.s < dsa_domain.q
        assert dsa.verify(message, signature, dsa_domain, dsa_keys.y)

    def test_fresh_nonce_per_signature(self, dsa_domain, dsa_keys):
        """Two signatures of one message must use different nonces."""
        sig1 = dsa.sign(42, dsa_domain, dsa_keys.x)
        sig2 = dsa.sign(42, dsa_domain, dsa_keys.x)
        assert sig1.r != sig2.r
        assert dsa.verify(42, sig1, dsa_domain, dsa_keys.y)
        assert dsa.verify(42, sig2, dsa_domain, dsa_keys.y)

    def test_seeded_signing_reproducible(self, dsa_domain, dsa_keys):
        sig1 = dsa.sign(42, dsa_domain, dsa_keys.x, rng=SeededRandomSource(11))
        sig2 = dsa.sign(42, dsa_domain, dsa_keys.x, rng=SeededRandomSource(11))
        assert sig1 == sig2

    def test_accepts_plain_tuple(self, dsa_domain, dsa_keys):
        r, s = dsa.sign(7, dsa_domain, dsa_keys.x)
        assert dsa.verify(7, (r, s), dsa_domain, dsa_keys.y)

    def test_wrong_key_rejected(self, dsa_domain, dsa_keys):
        other = dsa.generate_keypair(dsa_domain)
        signature = dsa.sign(99, dsa_domain, dsa_keys.x)
        assert not dsa.verify(99, signature, dsa_domain, other.y)

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            dsa.generate_domain(160, 160)
        with pytest.raises(ValueError):
            dsa.generate_domain(512, 1)

    @pytest.mark.parametrize("l", [33, 34])
    def test_gap_too_narrow_for_prime_p(self, l):
        """A factor under 3 bits cannot give an L-bit prime p."""
        with pytest.raises(ValueError):
            dsa.generate_domain(l, 32)

    def test_nonce_retry_uses_sample_until(self, dsa_domain, dsa_keys, monkeypatch):
        """Signing retries a zero r or s through the shared sampling loop."""
        predicates = []
        real_sample_until = dsa.sample_until

        def recording(predicate, generator, max_attempts=None):
            predicates.append(predicate)
            return real_sample_until(predicate, generator, max_attempts)

        monkeypatch.setattr(dsa, "sample_until", recording)
        signature = dsa.sign(21, dsa_domain, dsa_keys.x)
        assert dsa.verify(21, signature, dsa_domain, dsa_keys.y)

        assert len(predicates) == 1
        accept = predicates[0]
        assert not accept(dsa.DSASignature(0, 5))
        assert not accept(dsa.DSASignature(5, 0))
        assert accept(dsa.DSASignature(5, 5))

    def test_default_sizes(self):
        """Defaults are L=1024, N=160."""
        domain = dsa.generate_domain()
        assert domain.p.bit_length() == 1024
        assert domain.q.bit_length() == 160


class TestElGamal:
    """Unit tests for ElGamal."""

    def test_domain_structure(self, elgamal_domain):
        """q is a safe prime and a generates the whole group."""
        q, a = elgamal_domain.q, elgamal_domain.a
        assert q.bit_length() == 193
        assert is_probable_prime(q)
        assert is_probable_prime((q - 1) // 2)
        assert a.bit_length() == 32
        assert pow(a, 2, q) != 1
        assert pow(a, (q - 1) // 2, q) != 1

    def test_keypair_invariants(self, elgamal_domain):
        """1 < x < q-1 and y = a^x mod q."""
        for _ in range(10):
            keys = elgamal.generate_keypair(elgamal_domain)
            assert 1 < keys.x < elgamal_domain.q - 1
            assert keys.y == pow(elgamal_domain.a, keys.x, elgamal_domain.q)

    @pytest.mark.parametrize("message", MESSAGES)
    def test_sign_verify(self, elgamal_domain, elgamal_keys, message):
        signature = elgamal.sign(message, elgamal_domain, elgamal_keys.x)
        assert 0 < signature.s1 < elgamal_domain.q
        assert 0 <= signature.s2 < elgamal_domain.q - 1
        assert elgamal.verify(message, signature, elgamal_domain, elgamal_keys.y)

    def test_verification_equation(self, elgamal_domain, elgamal_keys):
        """a^H(m) = y^S1 * S1^S2 (mod q)."""
        q, a = elgamal_domain.q, elgamal_domain.a
        s1, s2 = elgamal.sign(5, elgamal_domain, elgamal_keys.x)
        assert pow(a, hash_to_int(5), q) == \
            (pow(elgamal_keys.y, s1, q) * pow(s1, s2, q)) % q

    def test_hash_must_fit_modulus(self):
        """A modulus narrower than the digest cannot sign."""
        small = elgamal.generate_domain(64, 16)
        keys = elgamal.generate_keypair(small)
        with pytest.raises(InvalidMessageError):
            elgamal.sign(12345, small, keys.x)

    def test_invalid_generator_length(self):
        with pytest.raises(ValueError):
            elgamal.generate_domain(64, 65)
        with pytest.raises(ValueError):
            elgamal.generate_domain(64, 1)


class TestSchnorr:
    """Unit tests for Schnorr."""

    def test_domain_structure(self, schnorr_domain):
        """q | p-1 and a has order q."""
        a, p, q = schnorr_domain.a, schnorr_domain.p, schnorr_domain.q
        assert q.bit_length() == 160
        assert p.bit_length() == 512
        assert is_probable_prime(p) and is_probable_prime(q)
        assert (p - 1) % q == 0
        assert a > 1
        assert pow(a, q, p) == 1

    def test_keypair_invariants(self, schnorr_domain):
        """0 <= s < q and v = (a^-1)^s mod p."""
        a, p, q = schnorr_domain.a, schnorr_domain.p, schnorr_domain.q
        for _ in range(10):
            keys = schnorr.generate_keypair(schnorr_domain)
            assert 0 <= keys.s < q
            assert (keys.v * pow(a, keys.s, p)) % p == 1

    @pytest.mark.parametrize("message", MESSAGES)
    def test_sign_verify(self, schnorr_domain, schnorr_keys, message):
        signature = schnorr.sign(message, schnorr_domain, schnorr_keys.s)
        assert 0 <= signature.y < schnorr_domain.q
        assert schnorr.verify(message, signature, schnorr_domain, schnorr_keys.v)

    def test_challenge_concatenation(self):
        """m || x is (m << bitlen(x)) + x hashed as canonical bytes."""
        # 0b101 || 0b11 = 0b10111 = 23
        assert schnorr.challenge(5, 3) == hash_to_int(23)
        # x = 0x0100 has 9 bits: 1 || 256 = 512 + 256
        assert schnorr.challenge(1, 256) == hash_to_int(768)

    def test_seeded_signing_reproducible(self, schnorr_domain, schnorr_keys):
        sig1 = schnorr.sign(8, schnorr_domain, schnorr_keys.s, rng=SeededRandomSource(4))
        sig2 = schnorr.sign(8, schnorr_domain, schnorr_keys.s, rng=SeededRandomSource(4))
        assert sig1 == sig2

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            schnorr.generate_domain(160, 160)
        with pytest.raises(ValueError):
            schnorr.generate_domain(1, 512)

    @pytest.mark.parametrize("p_bits", [33, 34])
    def test_gap_too_narrow_for_prime_p(self, p_bits):
        """A multiplier under 3 bits cannot give a p_bits-bit prime p."""
        with pytest.raises(ValueError):
            schnorr.generate_domain(32, p_bits)

    def test_negative_message_rejected_on_sign(self, schnorr_domain, schnorr_keys):
        with pytest.raises(ValueError):
            schnorr.sign(-1, schnorr_domain, schnorr_keys.s)

    def test_default_sizes(self):
        """Defaults are a 160-bit q and a 1024-bit p."""
        domain = schnorr.generate_domain()
        assert domain.q.bit_length() == 160
        assert domain.p.bit_length() == 1024
        keys = schnorr.generate_keypair(domain)
        signature = schnorr.sign(2024, domain, keys.s)
        assert schnorr.verify(2024, signature, domain, keys.v)
