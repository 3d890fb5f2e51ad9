"""
Error types shared by the signature schemes.

Verification functions never raise these for adversarial input; they are
reserved for parameter misuse and for strict checkers whose callers ask
for a reason instead of a boolean.
"""


class SignatureSchemeError(Exception):
    """Base class for all sigvault errors."""
    pass


class NoInverseError(SignatureSchemeError, ValueError):
    """Raised when a modular inverse is requested for a non-coprime pair."""

    def __init__(self, a: int, modulus: int, divisor: int):
        super().__init__(
            f"Modular inverse doesn't exist (gcd({a}, {modulus}) = {divisor})"
        )
        self.a = a
        self.modulus = modulus
        self.divisor = divisor


class InvalidMessageError(SignatureSchemeError, ValueError):
    """Raised when a message hash falls outside the range a scheme accepts."""
    pass


class EncodingError(SignatureSchemeError):
    """Raised when emBits is too small to hold an RSA-PSS encoding."""
    pass


class MalformedSignatureError(SignatureSchemeError):
    """Raised when a decoded RSA-PSS block breaks a structural rule."""
    pass


class SamplingExhaustedError(SignatureSchemeError):
    """Raised when a capped rejection-sampling loop runs out of attempts."""
    pass


class ConfigurationError(SignatureSchemeError):
    """Raised when the hash primitive is unavailable or misdeclared."""
    pass
