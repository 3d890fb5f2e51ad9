"""
SigVault - Command-Line Driver

Signs or verifies an integer message with one of the four schemes.
Signing generates fresh parameters and keys and prints every value as a
decimal integer; verifying prints True or False.

Usage:
    sigvault dsa sign --message 12345 --l 1024 --n 160
    sigvault dsa verify --message 12345 --r R --s S --p P --q Q --g G --y Y
    sigvault rsa-pss keygen --bits 1024
    sigvault rsa-pss sign --message 12345 --em-bits 1023 --d D --n N

Exit status: 0 on success or a valid signature, 1 for an invalid
signature, 2 for a library error.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .core_crypto.errors import SignatureSchemeError
from .core_crypto.number_theory import bytes_to_int, to_canonical_bytes
from .signatures import dsa, elgamal, schnorr, rsa_pss


EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _print_values(**values) -> None:
    for name, value in values.items():
        print(f"{name}: {value}")


def _report(valid: bool) -> int:
    print(valid)
    return EXIT_OK if valid else EXIT_INVALID


# ============================================================================
# Scheme commands
# ============================================================================

def _dsa_sign(args) -> int:
    domain = dsa.generate_domain(args.l, args.n)
    keys = dsa.generate_keypair(domain)
    signature = dsa.sign(args.message, domain, keys.x)
    _print_values(p=domain.p, q=domain.q, g=domain.g, x=keys.x, y=keys.y,
                  r=signature.r, s=signature.s)
    return EXIT_OK


def _dsa_verify(args) -> int:
    domain = dsa.DSADomain(p=args.p, q=args.q, g=args.g)
    return _report(dsa.verify(args.message, (args.r, args.s), domain, args.y))


def _elgamal_sign(args) -> int:
    domain = elgamal.generate_domain(args.q_bits, args.a_bits)
    keys = elgamal.generate_keypair(domain)
    signature = elgamal.sign(args.message, domain, keys.x)
    _print_values(q=domain.q, a=domain.a, x=keys.x, y=keys.y,
                  s1=signature.s1, s2=signature.s2)
    return EXIT_OK


def _elgamal_verify(args) -> int:
    domain = elgamal.ElGamalDomain(q=args.q, a=args.a)
    return _report(
        elgamal.verify(args.message, (args.s1, args.s2), domain, args.y)
    )


def _schnorr_sign(args) -> int:
    domain = schnorr.generate_domain(args.q_bits, args.p_bits)
    keys = schnorr.generate_keypair(domain)
    signature = schnorr.sign(args.message, domain, keys.s)
    _print_values(a=domain.a, p=domain.p, q=domain.q, s=keys.s, v=keys.v,
                  e=signature.e, y=signature.y)
    return EXIT_OK


def _schnorr_verify(args) -> int:
    # q is not needed to verify
    domain = schnorr.SchnorrDomain(a=args.a, p=args.p, q=0)
    return _report(
        schnorr.verify(args.message, (args.e, args.y), domain, args.v)
    )


def _rsa_pss_keygen(args) -> int:
    keys = rsa_pss.generate_keypair(args.bits)
    _print_values(e=keys.e, d=keys.d, n=keys.n)
    return EXIT_OK


def _rsa_pss_sign(args) -> int:
    em = rsa_pss.encode(args.message, args.em_bits)
    signature = rsa_pss.sign_encoded(em, args.d, args.n)
    _print_values(s=bytes_to_int(signature))
    return EXIT_OK


def _rsa_pss_verify(args) -> int:
    if args.s >= args.n:
        return _report(False)
    em = rsa_pss.decode(to_canonical_bytes(args.s), args.e, args.n)
    return _report(rsa_pss.verify_encoding(args.message, em, args.em_bits))


# ============================================================================
# Argument parsing
# ============================================================================

def _int_options(parser: argparse.ArgumentParser, *names: str) -> None:
    for name in names:
        parser.add_argument(f"--{name}", type=int, required=True)


def build_parser() -> argparse.ArgumentParser:
    """Build the sigvault argument parser."""
    parser = argparse.ArgumentParser(
        prog="sigvault",
        description="Sign and verify integer messages with classical signature schemes",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable debug logging")
    schemes = parser.add_subparsers(dest="scheme", required=True)

    # DSA
    dsa_parser = schemes.add_parser("dsa", help="Digital Signature Algorithm")
    dsa_actions = dsa_parser.add_subparsers(dest="action", required=True)
    p = dsa_actions.add_parser("sign")
    _int_options(p, "message")
    p.add_argument("--l", type=int, default=None, help="bit length of p")
    p.add_argument("--n", type=int, default=None, help="bit length of q")
    p.set_defaults(handler=_dsa_sign)
    p = dsa_actions.add_parser("verify")
    _int_options(p, "message", "r", "s", "p", "q", "g", "y")
    p.set_defaults(handler=_dsa_verify)

    # ElGamal
    elgamal_parser = schemes.add_parser("elgamal", help="ElGamal signatures")
    elgamal_actions = elgamal_parser.add_subparsers(dest="action", required=True)
    p = elgamal_actions.add_parser("sign")
    _int_options(p, "message")
    p.add_argument("--q-bits", type=int, default=None, help="length of q")
    p.add_argument("--a-bits", type=int, default=None, help="length of the generator")
    p.set_defaults(handler=_elgamal_sign)
    p = elgamal_actions.add_parser("verify")
    _int_options(p, "message", "s1", "s2", "q", "a", "y")
    p.set_defaults(handler=_elgamal_verify)

    # Schnorr
    schnorr_parser = schemes.add_parser("schnorr", help="Schnorr signatures")
    schnorr_actions = schnorr_parser.add_subparsers(dest="action", required=True)
    p = schnorr_actions.add_parser("sign")
    _int_options(p, "message")
    p.add_argument("--q-bits", type=int, default=None)
    p.add_argument("--p-bits", type=int, default=None)
    p.set_defaults(handler=_schnorr_sign)
    p = schnorr_actions.add_parser("verify")
    _int_options(p, "message", "e", "y", "a", "p", "v")
    p.set_defaults(handler=_schnorr_verify)

    # RSA-PSS
    pss_parser = schemes.add_parser("rsa-pss", help="RSA-PSS signatures")
    pss_actions = pss_parser.add_subparsers(dest="action", required=True)
    p = pss_actions.add_parser("keygen")
    p.add_argument("--bits", type=int, default=None, help="modulus length")
    p.set_defaults(handler=_rsa_pss_keygen)
    p = pss_actions.add_parser("sign")
    _int_options(p, "message", "em-bits", "d", "n")
    p.set_defaults(handler=_rsa_pss_sign)
    p = pss_actions.add_parser("verify")
    _int_options(p, "message", "s", "em-bits", "e", "n")
    p.set_defaults(handler=_rsa_pss_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for SigVault."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args)
    except (SignatureSchemeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
