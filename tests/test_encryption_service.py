"""토큰 암호화 서비스 테스트"""

import pytest

from adapters.external.encryption_service import EncryptionError, EncryptionServiceAdapter


@pytest.mark.asyncio
async def test_encrypted_token_decrypts_with_same_key(mock_logger):
    service = EncryptionServiceAdapter("test_encryption_key_32_bytes_long", mock_logger)

    encrypted = await service.encrypt("refresh-token")

    assert encrypted != "refresh-token"
    assert await service.decrypt(encrypted) == "refresh-token"


@pytest.mark.asyncio
async def test_empty_values_are_passed_through(mock_logger):
    service = EncryptionServiceAdapter("test_encryption_key_32_bytes_long", mock_logger)

    assert await service.encrypt("") == ""
    assert await service.decrypt("") == ""


@pytest.mark.asyncio
async def test_wrong_key_raises_encryption_error(mock_logger):
    writer = EncryptionServiceAdapter("test_encryption_key_32_bytes_long", mock_logger)
    reader = EncryptionServiceAdapter("another_encryption_key_32_bytes!", mock_logger)

    encrypted = await writer.encrypt("refresh-token")

    with pytest.raises(EncryptionError):
        await reader.decrypt(encrypted)
