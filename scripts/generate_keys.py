#!/usr/bin/env python3
"""Script to generate the RSA key pair used to sign tokens"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from league_api.core.security import RSAKeyManager


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Generate RSA key pair for JWT signing")
    parser.add_argument(
        "--output-dir",
        "-o",
        default=None,
        help="Output directory for keys (default: directories from settings)",
    )
    parser.add_argument(
        "--key-size",
        "-s",
        type=int,
        default=2048,
        choices=[2048, 4096],
        help="RSA key size in bits (default: 2048)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing private key",
    )

    args = parser.parse_args()

    manager = RSAKeyManager()
    if args.output_dir:
        output_dir = Path(args.output_dir)
        manager = RSAKeyManager(
            private_key_path=str(output_dir / "private_key.pem"),
            public_key_path=str(output_dir / "public_key.pem"),
        )

    if manager.private_key_path.exists() and not args.force:
        print(f"✗ Private key already exists at {manager.private_key_path} (use --force to replace it)")
        sys.exit(1)

    print(f"Generating RSA key pair ({args.key_size} bits)...")
    manager.generate_keys(key_size=args.key_size)

    print(f"✓ Private key saved to: {manager.private_key_path}")
    print(f"✓ Public key saved to: {manager.public_key_path}")
    print(f"✓ Key id: {manager.kid}")
    print("✓ Permissions set: private_key (600), public_key (644)")


if __name__ == "__main__":
    main()
