"""
Encryption module for ClipTrail
Optionally seals history entries at rest using Fernet (AES-128-CBC + HMAC)
"""
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
import base64
import os
import platform
from pathlib import Path


class EncryptionManager:
    """Manages encryption and decryption of history entries"""

    def __init__(self, password=None, salt_path='.cliptrail_salt'):
        """
        Initialize encryption manager

        Args:
            password: Optional password for encryption. If None, a machine-specific default is used.
            salt_path: File holding the key derivation salt. Created on first use.
        """
        self.password = password or self._get_default_password()
        self.salt_path = Path(salt_path)
        self.salt = self._get_or_create_salt()
        self.key = self._derive_key(self.password, self.salt)
        self.cipher = Fernet(self.key)

    def _get_default_password(self):
        """Get default password derived from the machine name"""
        return f"ClipTrail-{platform.node()}".encode()

    def _get_or_create_salt(self):
        """Get existing salt or create new one"""
        if self.salt_path.exists():
            return self.salt_path.read_bytes()

        salt = os.urandom(16)
        self.salt_path.parent.mkdir(parents=True, exist_ok=True)
        self.salt_path.write_bytes(salt)
        return salt

    def _derive_key(self, password, salt):
        """Derive encryption key from password using PBKDF2"""
        if isinstance(password, str):
            password = password.encode()

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=100000,
        )
        return base64.urlsafe_b64encode(kdf.derive(password))

    def encrypt(self, data):
        """
        Encrypt data

        Args:
            data: Data to encrypt (string or bytes)

        Returns:
            Encrypted data as bytes
        """
        if isinstance(data, str):
            data = data.encode('utf-8')

        return self.cipher.encrypt(data)

    def decrypt(self, encrypted_data):
        """
        Decrypt data

        Args:
            encrypted_data: Encrypted data as bytes

        Returns:
            Decrypted data as bytes
        """
        try:
            return self.cipher.decrypt(encrypted_data)
        except InvalidToken as e:
            raise ValueError(f"Decryption failed: {e!r}") from e
