"""
Encryption Utilities for encrypted configuration files

File layout: base64 (standard alphabet) of ``nonce || ciphertext+tag``.

- AES-256-GCM, 12-byte nonce
- Key is the SHA-256 digest of the UTF-8 secret, used directly
"""

import base64
import binascii
import hashlib
import os
from pathlib import Path
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import AuthenticationError, CiphertextTooShortError, InvalidEncodingError

NONCE_SIZE = 12


def derive_key(secret: str) -> bytes:
    """Derive a 32-byte AES-256 key from a secret string."""
    return hashlib.sha256(secret.encode("utf-8")).digest()


class AESGCMEncryption:
    """
    AES-256-GCM encryption for configuration payloads.

    The nonce is generated per message and prepended to the ciphertext.
    """

    def __init__(self, secret: str):
        """
        Initialize AES-GCM encryption.

        Args:
            secret: Shared secret; hashed with SHA-256 to form the key
        """
        self.key = derive_key(secret)
        self._aead = AESGCM(self.key)

    def encrypt(self, plaintext: bytes) -> bytes:
        """
        Encrypt data with AES-256-GCM.

        Args:
            plaintext: Data to encrypt

        Returns:
            Nonce + ciphertext + tag
        """
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, plaintext, None)

    def decrypt(self, blob: bytes) -> bytes:
        """
        Decrypt AES-256-GCM data.

        Args:
            blob: Nonce + ciphertext + tag

        Returns:
            Decrypted plaintext

        Raises:
            CiphertextTooShortError: blob cannot hold the nonce
            AuthenticationError: tag verification failed
        """
        if len(blob) < NONCE_SIZE:
            raise CiphertextTooShortError(len(blob), NONCE_SIZE)

        nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
        try:
            return self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise AuthenticationError(
                "decryption failed: wrong secret or corrupted data"
            ) from e

    def encrypt_string(self, plaintext: Union[bytes, str]) -> str:
        """
        Encrypt and return base64-encoded text.

        Args:
            plaintext: Bytes or UTF-8 text to encrypt

        Returns:
            Base64-encoded encrypted string
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")
        return base64.b64encode(self.encrypt(plaintext)).decode("ascii")

    def decrypt_string(self, encoded: Union[bytes, str]) -> bytes:
        """
        Decrypt base64-encoded ciphertext.

        Whitespace (line breaks from editors or ``base64`` wrapping) is ignored.

        Returns:
            Decrypted plaintext bytes
        """
        if isinstance(encoded, str):
            encoded = encoded.encode("ascii", errors="replace")
        compact = b"".join(encoded.split())
        try:
            blob = base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidEncodingError(f"invalid base64 payload: {e}") from e
        return self.decrypt(blob)

    def encrypt_file(self, input_path: Path, output_path: Path):
        """
        Encrypt a plaintext config file into the base64 encrypted layout.

        Args:
            input_path: Path to plaintext file
            output_path: Path to encrypted output file (e.g. config.yaml.enc)
        """
        plaintext = Path(input_path).read_bytes()
        self.write_encrypted(plaintext, output_path)

    def write_encrypted(self, plaintext: bytes, output_path: Path):
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.encrypt_string(plaintext), encoding="ascii")

    def decrypt_file(self, input_path: Path) -> bytes:
        """
        Decrypt an encrypted config file.

        Args:
            input_path: Path to encrypted file

        Returns:
            Decrypted plaintext
        """
        return self.decrypt_string(Path(input_path).read_bytes())
