"""
Default parameters for prime generation and the signature schemes.

Every value here can be overridden per call through keyword arguments or,
for the command-line driver, through its options.
"""


# Primality testing
# - certainty: error probability of a probable prime is at most 2^-certainty
# - min_certainty: anything weaker is refused
PRIME_CONFIG = {
    'certainty': 80,         # 40 Miller-Rabin rounds
    'min_certainty': 7,
}

# Rejection sampling
# - max_attempts: None samples until the predicate holds
SAMPLING_CONFIG = {
    'max_attempts': None,
}

# DSA (FIPS 186 style L/N sizes)
DSA_CONFIG = {
    'l': 1024,               # bit length of p
    'n': 160,                # bit length of q
}

# ElGamal
# - q_bits: size of the Sophie Germain prime behind the safe-prime modulus
# - a_bits: size of the generator candidates
ELGAMAL_CONFIG = {
    'q_bits': 256,
    'a_bits': 32,
}

# Schnorr
SCHNORR_CONFIG = {
    'q_bits': 160,           # subgroup order
    'p_bits': 1024,          # modulus
}

# RSA-PSS
RSA_PSS_CONFIG = {
    'salt_len': 20,          # S_LEN in bytes
    'modulus_bits': 1024,
    'public_exponent': 65537,
}
