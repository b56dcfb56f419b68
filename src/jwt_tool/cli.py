"""
CLI entry point for jwt-tool.

Subcommands:
    decode  - decode and print a token without any verification
    verify  - verify the signature and claims of a token
    encode  - build and sign a new token

Tokens can be passed as an argument, piped via ``--stdin`` or entered at
an interactive prompt.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time

from .algorithms import Algorithm
from .config import DEFAULT_CONFIG_PATH, ConfigError, load_config, parse_policy, resolve_secret
from .codec import json_parse
from .errors import DecodeError, JWTError, ParsingError, ValidationError
from .logging_setup import setup_logging
from .models import DecodedToken, Token
from .parser import decode
from .policy import ValidationPolicy

__all__ = ["main"]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

def _print_json(label: str, data: dict) -> None:
    """Print a labelled JSON section."""
    print(f"\n{label}:")
    print(json.dumps(data, indent=4, ensure_ascii=False))


def _print_result(token: DecodedToken) -> None:
    """Pretty-print the decoded token parts."""
    _print_json("Header", token.get_headers())
    _print_json("Payload", token.get_payload())
    # Lone surrogates from argv are escaped for printing.
    signature = token.get_signature().encode("utf-8", "backslashreplace").decode("utf-8")
    print(f"\nSignature (base64url encoded):\n{signature}")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _add_token_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "token",
        nargs="?",
        default=None,
        help="JWT token string (optional, prompts interactively if omitted)",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        default=False,
        help="Read token from stdin (for piping)",
    )


def _add_secret_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--secret", "-s", default=None, help="HMAC secret")
    group.add_argument(
        "--secret-env",
        default=None,
        metavar="VAR",
        help="Name of an environment variable holding the HMAC secret",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jwt-tool",
        description="Decode, verify and sign HMAC JSON Web Tokens.",
        epilog="Examples:\n"
               "  %(prog)s decode <token>\n"
               "  echo '<token>' | %(prog)s verify --stdin --secret-env JWT_SECRET\n"
               "  %(prog)s encode --payload '{\"sub\": \"alice\"}' --secret hunter2\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a debug log to this file",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_decode = sub.add_parser("decode", help="Decode a token without verification")
    _add_token_args(p_decode)

    p_verify = sub.add_parser("verify", help="Verify signature and claims")
    _add_token_args(p_verify)
    _add_secret_args(p_verify)
    p_verify.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to YAML config file (default: config/config.yaml if present)",
    )
    p_verify.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Timing tolerance in seconds for exp/nbf/iat",
    )
    p_verify.add_argument(
        "--issuer", action="append", default=None, help="Allowed 'iss' value (repeatable)"
    )
    p_verify.add_argument(
        "--subject", action="append", default=None, help="Allowed 'sub' value (repeatable)"
    )
    p_verify.add_argument(
        "--audience", action="append", default=None, help="Allowed 'aud' value (repeatable)"
    )
    p_verify.add_argument(
        "--check-iat", action="store_true", help="Also validate the 'iat' claim"
    )
    p_verify.add_argument(
        "--no-exp", action="store_true", help="Skip the 'exp' claim check"
    )
    p_verify.add_argument(
        "--no-nbf", action="store_true", help="Skip the 'nbf' claim check"
    )

    p_encode = sub.add_parser("encode", help="Build and sign a token")
    _add_secret_args(p_encode)
    p_encode.add_argument(
        "--payload", "-p", required=True, help="Payload as a JSON object"
    )
    p_encode.add_argument(
        "--header", default=None, help="Headers as a JSON object (default: typ + alg)"
    )
    p_encode.add_argument(
        "--algorithm",
        "-a",
        default=Algorithm.HS256.value,
        choices=[a.value for a in Algorithm],
        help="Hashing algorithm (default: HS256)",
    )
    p_encode.add_argument(
        "--expires-in",
        type=int,
        default=None,
        metavar="SECONDS",
        help="Set iat/nbf to now and exp to now + SECONDS",
    )

    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_token(args: argparse.Namespace) -> str:
    if args.stdin:
        token = sys.stdin.read().strip()
        if not token:
            print("Error: No token received on stdin.")
            sys.exit(1)
        return token
    if args.token:
        return args.token

    # Interactive mode
    print("JWT Token Decoder")
    print("=================")
    try:
        return input("Please enter your JWT token: ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        sys.exit(130)


def _resolve_cli_secret(args: argparse.Namespace) -> str | None:
    if args.secret:
        return args.secret
    if args.secret_env:
        value = os.environ.get(args.secret_env)
        if not value:
            print(f"Error: Environment variable {args.secret_env} is not set.")
            sys.exit(1)
        return value
    return None


def _parse_json_object(text: str, label: str) -> dict:
    try:
        return json_parse(text)
    except DecodeError as exc:
        print(f"Error: --{label} must be a JSON object: {exc}")
        sys.exit(2)


def _build_policy(args: argparse.Namespace, cfg: dict) -> ValidationPolicy:
    policy = parse_policy(cfg) if cfg else ValidationPolicy()

    overrides: dict = {}
    if args.tolerance is not None:
        overrides["timing_tolerance"] = args.tolerance
    if args.issuer:
        overrides["allowable_issuers"] = args.issuer
    if args.subject:
        overrides["allowable_subjects"] = args.subject
    if args.audience:
        overrides["allowable_audiences"] = args.audience
    if args.check_iat:
        overrides["validate_issued_at_claim"] = True
    if args.no_exp:
        overrides["validate_expiration_time_claim"] = False
    if args.no_nbf:
        overrides["validate_not_before_claim"] = False

    return policy.merged(overrides)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def _cmd_decode(args: argparse.Namespace) -> None:
    token = _read_token(args)
    try:
        result = decode(token, validate_before_return=False)
    except ParsingError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    _print_result(result)


def _cmd_verify(args: argparse.Namespace) -> None:
    config_path = args.config
    if config_path is None and os.path.exists(DEFAULT_CONFIG_PATH):
        config_path = DEFAULT_CONFIG_PATH

    cfg: dict = {}
    try:
        if config_path:
            cfg = load_config(config_path)
        policy = _build_policy(args, cfg)
        secret = _resolve_cli_secret(args) or resolve_secret(cfg)
    except (ConfigError, TypeError, ValueError) as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(1)

    if secret is None:
        print("Error: No secret given (use --secret, --secret-env or the config file).")
        sys.exit(1)

    token = _read_token(args)
    try:
        result = decode(token, True, secret, policy)
    except ParsingError as exc:
        print(f"Error: {exc}")
        sys.exit(1)
    except ValidationError as exc:
        print(f"Invalid: {exc}")
        sys.exit(1)

    print("Token is valid.")
    _print_result(result)


def _cmd_encode(args: argparse.Namespace) -> None:
    secret = _resolve_cli_secret(args)
    if secret is None:
        print("Error: No secret given (use --secret or --secret-env).")
        sys.exit(1)

    payload = _parse_json_object(args.payload, "payload")
    headers = _parse_json_object(args.header, "header") if args.header else None

    if args.expires_in is not None:
        now = int(time.time())
        payload.setdefault("iat", now)
        payload.setdefault("nbf", now)
        payload["exp"] = now + args.expires_in

    try:
        token = Token(payload, secret, args.algorithm, headers)
        print(token.to_string())
    except JWTError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

_COMMANDS = {
    "decode": _cmd_decode,
    "verify": _cmd_verify,
    "encode": _cmd_encode,
}


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    _COMMANDS[args.command](args)
