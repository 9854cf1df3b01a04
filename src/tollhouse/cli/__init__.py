"""Tollhouse CLI — key generation and signed-cookie inspection.

Entry point registered as ``tollhouse`` in ``pyproject.toml``::

    [project.scripts]
    tollhouse = "tollhouse.cli:main"
"""

import argparse
import os
import sys

from tollhouse.errors import InvalidSignature
from tollhouse.signing import CookieSigner, generate_key

KEY_ENV_VAR = "TOLLHOUSE_COOKIE_KEY"


def _resolve_key(args: argparse.Namespace) -> str:
    key = args.key or os.environ.get(KEY_ENV_VAR, "")
    if not key:
        print(f"error: no key given. Pass --key or set {KEY_ENV_VAR}.", file=sys.stderr)
        sys.exit(2)
    return key


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``tollhouse`` command."""
    parser = argparse.ArgumentParser(
        prog="tollhouse",
        description="Tollhouse — signed cookies for ASGI applications.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- tollhouse keygen -------------------------------------------------
    keygen_parser = subparsers.add_parser("keygen", help="Print a new random cookie key")
    keygen_parser.add_argument(
        "--bytes",
        type=int,
        default=32,
        dest="nbytes",
        help="Bytes of entropy (default: 32)",
    )

    # -- tollhouse sign ---------------------------------------------------
    sign_parser = subparsers.add_parser("sign", help="Sign a cookie value")
    sign_parser.add_argument("value", help="Plaintext cookie value")
    sign_parser.add_argument("--key", default=None, help=f"Signing key (default: ${KEY_ENV_VAR})")

    # -- tollhouse verify -------------------------------------------------
    verify_parser = subparsers.add_parser("verify", help="Verify a signed cookie value")
    verify_parser.add_argument("value", help="Signed wire value (<plaintext>.<tag>)")
    verify_parser.add_argument("--key", default=None, help=f"Signing key (default: ${KEY_ENV_VAR})")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "keygen":
        if args.nbytes < 16:
            parser.error("--bytes must be at least 16")
        print(generate_key(args.nbytes))
    elif args.command == "sign":
        print(CookieSigner(_resolve_key(args)).encode(args.value))
    elif args.command == "verify":
        try:
            print(CookieSigner(_resolve_key(args)).decode(args.value))
        except InvalidSignature:
            print("error: invalid signature", file=sys.stderr)
            sys.exit(1)
