from datetime import timedelta

from blog.core.security import (
    create_access_token, get_password_hash, verify_password, verify_token
)


def test_password_hash_round_trip():
    hashed = get_password_hash("Heslo12345")

    assert hashed != "Heslo12345"
    assert verify_password("Heslo12345", hashed)
    assert not verify_password("heslo12345", hashed)


def test_multibyte_password_is_cut_at_72_bytes():
    # "ž" занимает 2 байта: 36 символов дают ровно 72 байта
    hashed = get_password_hash("ž" * 40)

    assert verify_password("ž" * 36 + "anything", hashed)
    assert not verify_password("ž" * 35, hashed)


def test_token_round_trip():
    token = create_access_token({"sub": "7"})

    assert verify_token(token)["sub"] == "7"


def test_expired_and_malformed_tokens_are_rejected():
    expired = create_access_token({"sub": "7"}, expires_delta=timedelta(minutes=-1))

    assert verify_token(expired) is None
    assert verify_token("not-a-token") is None
