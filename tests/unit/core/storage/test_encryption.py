"""Tests for the FieldEncryptor (Fernet-based payload encryption)."""

from __future__ import annotations

import pytest
from cryptography.fernet import Fernet

from wellsense.core.storage.encryption import EncryptionError, FieldEncryptor


@pytest.fixture
def key() -> str:
    return Fernet.generate_key().decode()


@pytest.fixture
def encryptor(key: str) -> FieldEncryptor:
    return FieldEncryptor(key)


class TestRoundTrip:
    def test_payload_round_trip(self, encryptor: FieldEncryptor):
        data = {"bpm": 62, "device": "ring", "samples": [61, 62, 63]}
        token = encryptor.encrypt(data)
        assert isinstance(token, str)
        assert token != ""
        assert encryptor.decrypt(token) == data

    def test_ciphertext_hides_values(self, encryptor: FieldEncryptor):
        token = encryptor.encrypt({"device": "oura-ring-gen3"})
        assert "oura" not in token

    def test_empty_payload_stored_as_empty_string(self, encryptor: FieldEncryptor):
        assert encryptor.encrypt(None) == ""
        assert encryptor.encrypt({}) == ""
        assert encryptor.decrypt("") == {}
        assert encryptor.decrypt(None) == {}


class TestKeys:
    def test_empty_key_rejected(self):
        with pytest.raises(EncryptionError, match="must not be empty"):
            FieldEncryptor("")

    def test_malformed_key_rejected(self):
        with pytest.raises(EncryptionError, match="Invalid encryption key"):
            FieldEncryptor("not-a-fernet-key")

    def test_wrong_key_cannot_decrypt(self, encryptor: FieldEncryptor):
        token = encryptor.encrypt({"bpm": 70})
        other = FieldEncryptor(FieldEncryptor.generate_key())
        with pytest.raises(EncryptionError, match="Decryption failed"):
            other.decrypt(token)

    def test_generate_key_is_usable(self):
        key = FieldEncryptor.generate_key()
        assert isinstance(key, str)
        FieldEncryptor(key)


def test_unserializable_payload_rejected(encryptor: FieldEncryptor):
    with pytest.raises(EncryptionError, match="JSON-serializable"):
        encryptor.encrypt({1j: "complex key"})


def test_non_json_payload_rejected(key: str, encryptor: FieldEncryptor):
    token = Fernet(key.encode()).encrypt(b"not json {").decode()
    with pytest.raises(EncryptionError, match="not valid JSON"):
        encryptor.decrypt(token)
