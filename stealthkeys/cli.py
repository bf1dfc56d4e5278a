#!/usr/bin/env python3
"""
stealthkeys command line front end.

Usage:
    stealthkeys keygen
    stealthkeys generate <recipient_public_key>
    stealthkeys recover <recipient_private_key> <ephemeral_public_key>
    stealthkeys check <address>

    stealthkeys --sanctions sanctions.json generate 0x04...
    stealthkeys --sanction 0xAbC... check 0xabc...

Keys are hex, with or without a 0x prefix. Results are printed as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from stealthkeys.address import (
    address_of,
    format_private_key,
    format_public_key,
    parse_private_key,
    parse_public_key,
)
from stealthkeys.config import Settings, build_screen, configure_logging, normalize_entry
from stealthkeys.engine import StealthKeyEngine
from stealthkeys.errors import StealthKeyError


def cmd_keygen(engine: StealthKeyEngine, args: argparse.Namespace) -> Dict:
    pair = engine.new_keypair()
    return {
        'private_key': format_private_key(pair.private),
        'public_key': format_public_key(pair.public),
        'address': address_of(pair.public),
    }


def cmd_generate(engine: StealthKeyEngine, args: argparse.Namespace) -> Dict:
    payment = engine.generate(parse_public_key(args.recipient_public_key))
    return {
        'stealth_public_key': format_public_key(payment.stealth_public),
        'stealth_address': address_of(payment.stealth_public),
        'ephemeral_private_key': format_private_key(payment.ephemeral_private),
        'ephemeral_public_key': format_public_key(payment.ephemeral_public),
    }


def cmd_recover(engine: StealthKeyEngine, args: argparse.Namespace) -> Dict:
    pair = engine.recover(
        parse_private_key(args.recipient_private_key),
        parse_public_key(args.ephemeral_public_key),
    )
    return {
        'stealth_private_key': format_private_key(pair.private),
        'stealth_public_key': format_public_key(pair.public),
        'stealth_address': address_of(pair.public),
    }


def cmd_check(engine: StealthKeyEngine, args: argparse.Namespace) -> Dict:
    address = normalize_entry(args.address)
    return {'address': address, 'sanctioned': engine.screen.is_sanctioned(address)}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='stealthkeys', description='ECDH stealth key derivation with sanction screening')
    parser.add_argument('--sanctions', metavar='FILE', help='Sanctions list (JSON array or one address per line)')
    parser.add_argument('--sanction', metavar='ADDRESS', action='append', default=[], help='Extra sanctioned address (repeatable)')
    parser.add_argument('--log-level', help='Logging level (default: INFO)')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('keygen', help='Generate a recipient keypair')
    p.set_defaults(func=cmd_keygen)

    p = sub.add_parser('generate', help='Derive a stealth public key for a recipient')
    p.add_argument('recipient_public_key')
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('recover', help='Recover a stealth private key')
    p.add_argument('recipient_private_key')
    p.add_argument('ephemeral_public_key')
    p.set_defaults(func=cmd_recover)

    p = sub.add_parser('check', help='Check an address against the sanctions list')
    p.add_argument('address')
    p.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.sanctions:
        settings.sanctions_file = Path(args.sanctions)
    if args.log_level:
        settings.log_level = args.log_level

    try:
        configure_logging(settings.log_level)
        screen = build_screen(settings)
        for address in args.sanction:
            screen.add(normalize_entry(address))
        result = args.func(StealthKeyEngine(screen), args)
    except StealthKeyError as e:
        print(json.dumps({'error': str(e), 'kind': type(e).__name__}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
