"""Hash e verificação de senhas com bcrypt."""

import bcrypt

from portal.config.exceptions import ValidationError
from portal.config.settings import settings


def validate_password_strength(password: str | None, field: str = "password") -> str:
    """Aplica os limites de tamanho e devolve a senha sem alterações."""
    if not password or len(password) < settings.auth.password_min_length:
        raise ValidationError(
            f"A senha deve ter pelo menos {settings.auth.password_min_length} caracteres.",
            field=field,
        )
    # bcrypt só considera os primeiros 72 bytes
    if len(password.encode("utf-8")) > settings.auth.password_max_length:
        raise ValidationError(
            f"A senha deve ter no máximo {settings.auth.password_max_length} caracteres.",
            field=field,
        )
    return password


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.auth.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str | None, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Hash corrompido ou em formato desconhecido
        return False
