"""Secret encryption utilities for neo-tenancy.

Tenant database passwords and connection URLs are stored encrypted with
Fernet. The Fernet key is derived from ``TENANCY_ENCRYPTION_KEY``.
"""

import base64
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config.settings import get_settings


class SecretEncryption:
    """Encrypt and decrypt tenant database secrets."""

    SALT = b'NeoTenancyControlPlane'
    ITERATIONS = 100000

    def __init__(self, encryption_key: Optional[str] = None):
        """
        Initialize encryption with the provided key or from settings.

        Args:
            encryption_key: The encryption key to use. If not provided,
                          uses the configured ``encryption_key`` setting.
        """
        self.key_string = encryption_key or get_settings().encryption_key.get_secret_value()

        if not self.key_string:
            raise ValueError("TENANCY_ENCRYPTION_KEY is not configured")

        self.cipher = self._get_cipher()

    def _get_cipher(self) -> Fernet:
        """Derive a Fernet cipher from the key string using PBKDF2."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self.SALT,
            iterations=self.ITERATIONS,
        )
        derived_key = base64.urlsafe_b64encode(kdf.derive(self.key_string.encode('utf-8')))
        return Fernet(derived_key)

    def encrypt(self, value: Optional[str]) -> Optional[str]:
        """
        Encrypt a secret string.

        Args:
            value: The plaintext secret. ``None`` and empty strings pass through.

        Returns:
            The Fernet token as a string.
        """
        if not value:
            return value

        return self.cipher.encrypt(value.encode('utf-8')).decode('utf-8')

    def decrypt(self, token: Optional[str]) -> Optional[str]:
        """
        Decrypt a stored secret.

        Args:
            token: The Fernet token. ``None`` and empty strings pass through.

        Returns:
            The plaintext secret.
        """
        if not token:
            return token

        try:
            return self.cipher.decrypt(token.encode('utf-8')).decode('utf-8')
        except InvalidToken as e:
            raise ValueError("Failed to decrypt stored secret") from e

    def is_encrypted(self, value: Optional[str]) -> bool:
        """Check if a value looks like a Fernet token."""
        if not value:
            return False
        return value.startswith('gAAAAA')


_encryption_instance: Optional[SecretEncryption] = None


def get_encryption() -> SecretEncryption:
    """Get the singleton encryption instance."""
    global _encryption_instance
    if _encryption_instance is None:
        _encryption_instance = SecretEncryption()
    return _encryption_instance


def reset_encryption_instance() -> None:
    """
    Reset the singleton encryption instance.

    Useful in tests that change the configured key.
    """
    global _encryption_instance
    _encryption_instance = None
