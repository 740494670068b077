"""Password hashing and random token domain service."""

import hashlib
import secrets

from lamer.config import AuthSettings

from .base import Service


class PasswordService(Service):
    """Derives password hashes with PBKDF2-HMAC and issues random tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize password service.

        Args:
            auth_settings: Hashing parameters and token size
        """
        self.auth_settings = auth_settings

    def generate_random(self) -> str:
        """Return a hex encoded random string (salts, auth tokens, API secrets)."""
        return secrets.token_hex(self.auth_settings.token_bytes)

    def hash_password(self, password: str, salt: str) -> str:
        """Derive the stored hash of a password.

        Args:
            password: Clear text password
            salt: Per-user salt

        Returns:
            Hex encoded derived key
        """
        derived = hashlib.pbkdf2_hmac(
            self.auth_settings.pbkdf2_algorithm,
            password.encode("utf-8"),
            salt.encode("utf-8"),
            self.auth_settings.pbkdf2_iterations,
            dklen=self.auth_settings.pbkdf2_key_length,
        )
        return derived.hex()

    def verify_password(self, password: str, salt: str, password_hash: str) -> bool:
        """Check a password against a stored hash in constant time."""
        return secrets.compare_digest(self.hash_password(password, salt), password_hash)
