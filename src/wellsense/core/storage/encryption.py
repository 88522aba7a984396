"""Fernet encryption for raw wearable payloads at rest.

Only the vendor payload of each sample is encrypted. Metric type, value
and timestamp stay in clear so the analysis window can be queried.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class EncryptionError(Exception):
    """Raised when a payload cannot be encrypted or decrypted."""


class FieldEncryptor:
    """JSON-in, Fernet-token-out encryptor for sample payloads.

    Usage::

        encryptor = FieldEncryptor(key=FieldEncryptor.generate_key())
        token = encryptor.encrypt({"bpm": 62, "device": "ring"})
        encryptor.decrypt(token)  # {"bpm": 62, "device": "ring"}
    """

    def __init__(self, key: str) -> None:
        """
        Args:
            key: A Fernet key (``FieldEncryptor.generate_key()``).

        Raises:
            EncryptionError: If the key is empty or malformed.
        """
        if not key or not key.strip():
            raise EncryptionError("Encryption key must not be empty")
        try:
            self._fernet = Fernet(key.strip().encode("utf-8"))
        except ValueError as exc:
            raise EncryptionError(f"Invalid encryption key: {exc}") from exc

    def encrypt(self, data: Any) -> str:
        """Serialize ``data`` to JSON and return a Fernet token.

        Empty payloads (None or ``{}``) are stored as an empty string.
        """
        if data is None or data == {}:
            return ""
        try:
            plaintext = json.dumps(data, separators=(",", ":"), default=str)
        except (TypeError, ValueError) as exc:
            raise EncryptionError(f"Payload is not JSON-serializable: {exc}") from exc
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str | None) -> Any:
        """Return the payload stored in ``token`` (``{}`` for an empty token).

        Raises:
            EncryptionError: If the token is invalid for this key or does not
                hold JSON.
        """
        if not token:
            return {}
        try:
            plaintext = self._fernet.decrypt(token.encode("utf-8"))
        except InvalidToken as exc:
            raise EncryptionError("Decryption failed: invalid token or wrong key") from exc
        try:
            return json.loads(plaintext)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise EncryptionError("Decrypted payload is not valid JSON") from exc

    @staticmethod
    def generate_key() -> str:
        """Generate a new URL-safe base64 Fernet key."""
        return Fernet.generate_key().decode("utf-8")
