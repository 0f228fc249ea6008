import pytest

from portal.config.exceptions import ValidationError
from portal.utils.passwords import hash_password, validate_password_strength, verify_password

pytestmark = pytest.mark.unit


def test_hash_and_verify_round_trip():
    hashed = hash_password("senha-segura")
    assert hashed.startswith("$2")
    assert verify_password("senha-segura", hashed) is True
    assert verify_password("senha-errada", hashed) is False


@pytest.mark.parametrize("password, hashed", [(None, "x"), ("abc", None), ("", "")])
def test_verify_password_rejects_missing_values(password, hashed):
    assert verify_password(password, hashed) is False


def test_verify_password_tolerates_corrupted_hash():
    assert verify_password("senha-segura", "nao-e-bcrypt") is False


def test_validate_password_enforces_minimum_length():
    with pytest.raises(ValidationError) as exc_info:
        validate_password_strength("123", field="new_password")
    assert exc_info.value.field == "new_password"
    assert "pelo menos 6" in exc_info.value.message


def test_validate_password_enforces_bcrypt_byte_limit():
    with pytest.raises(ValidationError):
        validate_password_strength("ç" * 40)  # 80 bytes em UTF-8


def test_validate_password_returns_value_unchanged():
    assert validate_password_strength(" senha com espaço ") == " senha com espaço "
