#!/usr/bin/env python3
"""
CFBx Command Line Interface

Encrypt and decrypt files with AES in generalized cipher feedback mode.

Usage:
    cfbx encrypt [OPTIONS]
    cfbx decrypt [OPTIONS]
    cfbx keygen [OPTIONS]
    cfbx --version
    cfbx --help
"""

import sys
import logging
import argparse
from typing import List, Optional

from .engine import CfbxConfig, CfbxEngine


class CfbxCLI:
    """Main CLI application for CFBx."""

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        if hasattr(parsed, 'func'):
            try:
                return parsed.func(parsed)
            except Exception as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
        else:
            parser.print_help()
            return 0

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="cfbx",
            description="AES cipher feedback with arbitrary segment sizes",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    cfbx keygen --size 16
    cfbx encrypt -i secret.txt -o secret.enc -k <hex key> -s 8
    cfbx decrypt -i secret.enc -o secret.txt -k <hex key> --iv <hex iv> -s 8
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version='CFBx Toolkit v1.0.0'
        )
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable debug logging')

        subparsers = parser.add_subparsers(title='commands', dest='command')

        self.add_encrypt_command(subparsers)
        self.add_decrypt_command(subparsers)
        self.add_keygen_command(subparsers)

        return parser

    @staticmethod
    def _add_cipher_arguments(cmd: argparse.ArgumentParser, iv_required: bool) -> None:
        cmd.add_argument('--input', '-i', required=True, help='Input file')
        cmd.add_argument('--output', '-o', required=True, help='Output file')
        cmd.add_argument('--key', '-k', required=True, help='AES key as hex')
        cmd.add_argument('--iv', required=iv_required, help='16-byte IV as hex')
        cmd.add_argument('--segment-size', '-s', type=int, default=128,
                         help='Segment size in bits (default: 128)')
        cmd.add_argument('--padding', '-p', default='none',
                         choices=['none', 'one-zero', 'pkcs7'],
                         help='Padding policy (default: none)')
        cmd.add_argument('--hex', action='store_true',
                         help='Treat input and output files as hex text')

    def add_encrypt_command(self, subparsers):
        """Add encrypt command to parser."""
        cmd = subparsers.add_parser('encrypt', help='Encrypt data')
        self._add_cipher_arguments(cmd, iv_required=False)
        cmd.set_defaults(func=self.handle_encrypt)

    def add_decrypt_command(self, subparsers):
        """Add decrypt command to parser."""
        cmd = subparsers.add_parser('decrypt', help='Decrypt data')
        self._add_cipher_arguments(cmd, iv_required=True)
        cmd.set_defaults(func=self.handle_decrypt)

    def add_keygen_command(self, subparsers):
        """Add keygen command to parser."""
        cmd = subparsers.add_parser('keygen', help='Generate a random AES key')
        cmd.add_argument('--size', type=int, default=16, choices=[16, 24, 32],
                         help='Key size in bytes (default: 16)')
        cmd.set_defaults(func=self.handle_keygen)

    # Command handlers

    @staticmethod
    def _engine(args) -> CfbxEngine:
        return CfbxEngine(CfbxConfig(segment_size=args.segment_size, padding=args.padding))

    @staticmethod
    def _read(path: str, as_hex: bool) -> bytes:
        with open(path, 'rb') as f:
            data = f.read()
        if as_hex:
            return bytes.fromhex(data.decode('ascii'))
        return data

    @staticmethod
    def _write(path: str, data: bytes, as_hex: bool) -> None:
        with open(path, 'wb') as f:
            f.write(data.hex().encode('ascii') if as_hex else data)

    def handle_encrypt(self, args):
        """Handle encrypt command."""
        engine = self._engine(args)
        plaintext = self._read(args.input, args.hex)
        iv = bytes.fromhex(args.iv) if args.iv else None

        result = engine.encrypt(plaintext, bytes.fromhex(args.key), iv)
        self._write(args.output, result.ciphertext, args.hex)

        if iv is None:
            print(f"IV: {result.iv.hex()}")
        print(f"Encrypted {len(plaintext)} bytes with {result.algorithm} -> {args.output}")
        return 0

    def handle_decrypt(self, args):
        """Handle decrypt command."""
        engine = self._engine(args)
        ciphertext = self._read(args.input, args.hex)

        result = engine.decrypt(ciphertext, bytes.fromhex(args.key), bytes.fromhex(args.iv))
        self._write(args.output, result.plaintext, args.hex)

        print(f"Decrypted {len(ciphertext)} bytes with {result.algorithm} -> {args.output}")
        return 0

    def handle_keygen(self, args):
        """Handle keygen command."""
        print(CfbxEngine().generate_key(args.size).hex())
        return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    cli = CfbxCLI()
    sys.exit(cli.run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    main()
