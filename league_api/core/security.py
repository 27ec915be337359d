"""Signing key pair for access and refresh tokens"""

import base64
import hashlib
import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from league_api.core.config import logger, settings


def key_id(public_key) -> str:
    """Short stable identifier derived from the public key"""
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.urlsafe_b64encode(hashlib.sha256(der).digest()[:12]).decode().rstrip("=")


class RSAKeyManager:
    """
    Holds the RSA pair the token authority signs with

    Keys live as PEM files at the configured paths. A missing private key
    is generated on first use, so a fresh deployment can issue tokens
    without a separate setup step. The key id published in the JWKS is
    derived from the public key and changes whenever the pair does.
    """

    def __init__(self, private_key_path: str | None = None, public_key_path: str | None = None):
        self._private_key_path = private_key_path
        self._public_key_path = public_key_path
        self._private_pem: str | None = None
        self._public_pem: str | None = None
        self._kid: str | None = None

    @property
    def private_key_path(self) -> Path:
        return Path(self._private_key_path or settings.private_key_path)

    @property
    def public_key_path(self) -> Path:
        return Path(self._public_key_path or settings.public_key_path)

    def load_keys(self) -> None:
        """Read the pair from disk, generating one if the private key is absent"""
        if not self.private_key_path.exists():
            logger.warning(f"No signing key at {self.private_key_path}, generating one")
            self.generate_keys()
            return

        private_key = serialization.load_pem_private_key(self.private_key_path.read_bytes(), password=None)
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise ValueError(f"{self.private_key_path} does not hold an RSA private key")

        # The public half is always recomputed so a stale public file cannot drift
        self._remember(private_key)
        logger.info(f"Signing key loaded (kid: {self._kid})")

    def generate_keys(self, key_size: int = 2048) -> None:
        """Create a new pair and write it to the configured paths"""
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        self._remember(private_key)

        for path in (self.private_key_path, self.public_key_path):
            path.parent.mkdir(parents=True, exist_ok=True)
        self.private_key_path.write_text(self._private_pem)
        self.public_key_path.write_text(self._public_pem)
        os.chmod(self.private_key_path, 0o600)
        os.chmod(self.public_key_path, 0o644)

        logger.info(f"Generated {key_size}-bit signing key (kid: {self._kid})")

    def _remember(self, private_key: rsa.RSAPrivateKey) -> None:
        public_key = private_key.public_key()
        self._private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()
        self._public_pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()
        self._kid = key_id(public_key)

    def _ensure_loaded(self) -> None:
        if self._private_pem is None:
            self.load_keys()

    @property
    def kid(self) -> str:
        self._ensure_loaded()
        return self._kid

    def get_private_key_pem(self) -> str:
        self._ensure_loaded()
        return self._private_pem

    def get_public_key_pem(self) -> str:
        self._ensure_loaded()
        return self._public_pem


# Global instance
rsa_key_manager = RSAKeyManager()
