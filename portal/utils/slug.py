import re
import secrets
import string
import time
import unicodedata
from typing import Optional

from portal.config.constants import SlugConfig

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def strip_accents(value: str) -> str:
    """Remove acentos via decomposição NFD ("São João" -> "Sao Joao")."""
    normalized = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def slugify(value: str, max_length: Optional[int] = None) -> str:
    """
    Converte um nome em trecho de URL.

    Examples:
        >>> slugify("José da Silva")
        'jose-da-silva'
        >>> slugify("  Maria   Antônia  ", max_length=5)
        'maria'
    """
    text = strip_accents(value or "").lower()
    text = _NON_SLUG_CHARS.sub("", text).strip()
    text = _WHITESPACE.sub("-", text)
    text = _REPEATED_HYPHENS.sub("-", text)
    if max_length is not None:
        text = text[:max_length]
    return text.strip("-")


def random_base36(length: int = SlugConfig.RANDOM_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(length))


def generate_memorial_slug(full_name: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Gera slug único para memorial: base (máx. 20 chars) + timestamp em ms
    + sufixo aleatório base36.

    Example:
        >>> generate_memorial_slug("John Doe Memorial", timestamp_ms=1700000000000)  # doctest: +SKIP
        'john-doe-memorial-1700000000000-k3x9az'
    """
    base = slugify(full_name, max_length=SlugConfig.BASE_MAX_LENGTH) or SlugConfig.FALLBACK_BASE
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{base}-{timestamp_ms}-{random_base36()}"
