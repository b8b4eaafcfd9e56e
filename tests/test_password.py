"""
Tests for the password hasher.
"""

import bcrypt
import pytest

from auth.errors import InternalError


class TestPasswordHasher:
    def test_hash_is_salted(self, hasher):
        first = hasher.hash("correct horse")
        second = hasher.hash("correct horse")
        assert first != second
        assert first.startswith("$argon2")

    def test_verify_roundtrip_and_mismatch(self, hasher):
        stored = hasher.hash("correct horse")
        assert hasher.verify(stored, "correct horse") is True
        assert hasher.verify(stored, "wrong horse") is False

    def test_malformed_hash_is_internal_error(self, hasher):
        with pytest.raises(InternalError) as info:
            hasher.verify("$argon2id$garbage", "whatever")
        assert info.value.code == "PASSWORD_VERIFICATION_ERROR"

    def test_legacy_bcrypt_hash_verifies(self, hasher):
        legacy = bcrypt.hashpw(b"legacy1", bcrypt.gensalt(rounds=4)).decode()
        assert hasher.verify(legacy, "legacy1") is True
        assert hasher.verify(legacy, "legacy2") is False
        assert hasher.needs_rehash(legacy) is True

    def test_fresh_hash_needs_no_rehash(self, hasher):
        assert hasher.needs_rehash(hasher.hash("secret!")) is False

    @pytest.mark.asyncio
    async def test_async_wrappers(self, hasher):
        stored = await hasher.hash_async("secret!")
        assert await hasher.verify_async(stored, "secret!") is True
