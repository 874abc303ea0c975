import pytest
from jose import jwt

from config import settings
from services.passwords import hash_password, verify_password
from services.session_token import create_session_token, decode_session_token
from services.slugs import slugify


def test_password_hash_round_trip():
    stored = hash_password("correct horse", iterations=1000)
    assert stored.startswith("pbkdf2_sha256$1000$")
    assert verify_password("correct horse", stored)
    assert not verify_password("wrong horse", stored)


def test_password_hashes_are_salted():
    assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)


@pytest.mark.parametrize("stored", [None, "", "plaintext", "md5$1$abc$def", "pbkdf2_sha256$x$abc$def"])
def test_malformed_hashes_never_match(stored):
    assert verify_password("anything", stored) is False


def test_slugify_collapses_punctuation():
    assert slugify("  Hello, AI World!  ") == "hello-ai-world"
    assert slugify("GPT-4 & Friends") == "gpt-4-friends"
    assert slugify("!!!") == "untitled"


def test_session_token_carries_role():
    token = create_session_token("user-1", "u@example.com", role="admin")["token"]
    payload = decode_session_token(token)
    assert payload["sub"] == "user-1"
    assert payload["email"] == "u@example.com"
    assert payload["role"] == "admin"


def test_session_token_rejects_foreign_tokens():
    foreign = jwt.encode({"sub": "user-1", "type": "other"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(ValueError, match="type"):
        decode_session_token(foreign)

    with pytest.raises(ValueError):
        decode_session_token("garbage")
