"""AES-256-GCM encryption for OAuth tokens stored in email_scan_configs.

Blob layout (lowercase hex): nonce (12 bytes) + auth tag (16 bytes) + ciphertext.
The key is a 64-char hex string read from the secret provider on every call,
so rotating EMAIL_ENCRYPTION_KEY takes effect without a restart.
"""

import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.config import ENCRYPTION_KEY_VAR, EnvSecretProvider, SecretProvider
from core.exceptions import AuthenticationError, ConfigurationError

NONCE_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32

_NONCE_HEX = NONCE_LENGTH * 2
_TAG_HEX = TAG_LENGTH * 2


def generate_key() -> str:
    """Fresh random key in the EMAIL_ENCRYPTION_KEY format (64 hex chars)."""
    return secrets.token_hex(KEY_LENGTH)


class CredentialCipher:
    """Encrypt/decrypt short secrets (refresh tokens etc.) for DB storage."""

    def __init__(
        self,
        secret_provider: SecretProvider | None = None,
        key_name: str = ENCRYPTION_KEY_VAR,
    ) -> None:
        self._secrets = secret_provider or EnvSecretProvider()
        self._key_name = key_name

    def _key(self) -> bytes:
        raw = self._secrets.get_secret(self._key_name)
        if not raw:
            raise ConfigurationError(f"{self._key_name} environment variable is not set")
        try:
            key = bytes.fromhex(raw.strip())
        except ValueError:
            key = b""
        if len(key) != KEY_LENGTH:
            raise ConfigurationError(f"{self._key_name} must be 64 hex characters (32 bytes)")
        return key

    def encrypt(self, plaintext: str) -> str:
        """Plaintext -> hex blob. Two calls on the same input never match."""
        key = self._key()
        nonce = secrets.token_bytes(NONCE_LENGTH)
        # AESGCM appends the tag to the ciphertext
        sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return nonce.hex() + tag.hex() + ciphertext.hex()

    def decrypt(self, blob: str) -> str:
        """Hex blob -> plaintext. Raises AuthenticationError on wrong key or tampered data."""
        key = self._key()
        if len(blob) < _NONCE_HEX + _TAG_HEX:
            raise AuthenticationError("Encrypted value too short")
        try:
            nonce = bytes.fromhex(blob[:_NONCE_HEX])
            tag = bytes.fromhex(blob[_NONCE_HEX : _NONCE_HEX + _TAG_HEX])
            ciphertext = bytes.fromhex(blob[_NONCE_HEX + _TAG_HEX :])
        except ValueError as exc:
            raise AuthenticationError("Encrypted value is not valid hex") from exc

        try:
            plaintext = AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            raise AuthenticationError() from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise AuthenticationError("Decrypted value is not UTF-8") from exc
