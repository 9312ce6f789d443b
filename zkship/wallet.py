"""
zkship - Wallet Module

Key pairs and the on-disk credential store.
"""

import json
import logging
from pathlib import Path
from typing import Union

import base58
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .errors import CredentialError

logger = logging.getLogger(__name__)

KEY_TYPE = "ed25519"


def _decode_key(encoded: str) -> bytes:
    key_type, sep, data = encoded.partition(':')
    if not sep:
        key_type, data = KEY_TYPE, encoded
    if key_type != KEY_TYPE:
        raise CredentialError(f"unsupported key type: {key_type}")
    try:
        return base58.b58decode(data)
    except ValueError as e:
        raise CredentialError(f"malformed key: {e}") from e


class KeyPair:
    """
    ed25519 key pair in NEAR's ``ed25519:<base58>`` notation.

    Example:
        >>> key = KeyPair.from_string(secret)
        >>> print(key.public_key)
        >>> signature = key.sign(message)
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self._private_key = private_key
        self.public_key_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )

    @classmethod
    def generate(cls) -> 'KeyPair':
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_string(cls, secret_key: str) -> 'KeyPair':
        """
        Create key pair from an encoded secret key.

        Args:
            secret_key: ``ed25519:`` followed by the base58 of either the
                64 byte seed+public key or the bare 32 byte seed

        Returns:
            KeyPair instance
        """
        raw = _decode_key(secret_key)
        if len(raw) not in (32, 64):
            raise CredentialError(f"secret key must be 32 or 64 bytes, got {len(raw)}")
        key_pair = cls(Ed25519PrivateKey.from_private_bytes(raw[:32]))
        if len(raw) == 64 and raw[32:] != key_pair.public_key_bytes:
            raise CredentialError("secret key does not match its embedded public key")
        return key_pair

    @property
    def public_key(self) -> str:
        return f"{KEY_TYPE}:{base58.b58encode(self.public_key_bytes).decode()}"

    @property
    def secret_key(self) -> str:
        seed = self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )
        return f"{KEY_TYPE}:{base58.b58encode(seed + self.public_key_bytes).decode()}"

    def sign(self, message: bytes) -> bytes:
        """Sign raw bytes, returning the 64 byte signature."""
        return self._private_key.sign(message)


class UnencryptedFileSystemKeyStore:
    """
    Credential files laid out as ``<base>/<network>/<account>.json``.

    Each file holds ``account_id``, ``public_key`` and ``private_key``.
    The store is only ever read.
    """

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def key_path(self, network_id: str, account_id: str) -> Path:
        return self.base_dir / network_id / f"{account_id}.json"

    def get_key(self, network_id: str, account_id: str) -> KeyPair:
        """
        Load the key for an account.

        Raises:
            CredentialError: If the file is missing or malformed
        """
        path = self.key_path(network_id, account_id)
        logger.debug("loading credential %s", path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CredentialError(
                f"no credential for {account_id} on {network_id}: {path} not found"
            ) from e
        except (OSError, ValueError) as e:
            raise CredentialError(f"cannot read credential {path}: {e}") from e

        secret = data.get('private_key') or data.get('secret_key')
        if not secret:
            raise CredentialError(f"credential {path} has no private_key")

        key_pair = KeyPair.from_string(secret)
        public_key = data.get('public_key')
        if public_key and public_key != key_pair.public_key:
            raise CredentialError(f"credential {path} public_key does not match private_key")
        return key_pair
