#!/usr/bin/env python3
"""
Generate an RSA key pair for JWT authentication.

Prints PEM keys for the Kolkata Explorer API, in both the escaped single-line
form used by .env files and the multi-line form used by hosting dashboards.

Usage:
    python scripts/generate_keys.py [--bits 2048]
"""

import argparse

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def generate_rsa_keypair(key_size: int = 4096) -> tuple[str, str]:
    """
    Generate an RSA key pair.

    Args:
        key_size: Size of the RSA key in bits

    Returns:
        (private_pem, public_pem) as strings
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")

    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")

    return private_pem, public_pem


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate JWT signing keys")
    parser.add_argument("--bits", type=int, default=4096, help="RSA key size")
    args = parser.parse_args()

    print(f"Generating {args.bits}-bit RSA keys...")
    private_key, public_key = generate_rsa_keypair(args.bits)
    print("✓ Keys generated")
    print()

    print("# .env format")
    print('JWT_PRIVATE_KEY_PEM="' + private_key.replace("\n", "\\n") + '"')
    print('JWT_PUBLIC_KEY_PEM="' + public_key.replace("\n", "\\n") + '"')
    print()

    print("# Multi-line format")
    print("JWT_PRIVATE_KEY_PEM=")
    print(private_key)
    print("JWT_PUBLIC_KEY_PEM=")
    print(public_key)

    print("⚠️  Keep the private key out of version control.")


if __name__ == "__main__":
    main()
