import re

import pytest

from portal.utils import slug as slug_mod
from portal.utils.slug import generate_memorial_slug, random_base36, slugify, strip_accents

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "value, expected",
    [
        ("José da Silva", "jose-da-silva"),
        ("  Maria   Antônia  ", "maria-antonia"),
        ("Lourenço (Capiba)!", "lourenco-capiba"),
        ("Ana -- Beatriz", "ana-beatriz"),
        ("", ""),
    ],
)
def test_slugify_normalizes_names(value, expected):
    assert slugify(value) == expected


def test_slugify_truncates_without_trailing_hyphen():
    assert slugify("Joaquim Aurélio Barreto Nabuco", max_length=8) == "joaquim"


def test_strip_accents_keeps_base_letters():
    assert strip_accents("São João da Ponte") == "Sao Joao da Ponte"


def test_random_base36_uses_lowercase_alphanumerics():
    value = random_base36()
    assert len(value) == 6
    assert re.fullmatch(r"[0-9a-z]{6}", value)


def test_generate_memorial_slug_shape(monkeypatch):
    monkeypatch.setattr(slug_mod, "random_base36", lambda length=6: "k3x9az")

    slug = generate_memorial_slug("John Doe Memorial Completo", timestamp_ms=1700000000000)

    assert slug == "john-doe-memorial-co-1700000000000-k3x9az"


def test_generate_memorial_slug_falls_back_when_name_has_no_letters(monkeypatch):
    monkeypatch.setattr(slug_mod, "random_base36", lambda length=6: "aaaaaa")
    assert generate_memorial_slug("!!!", timestamp_ms=1) == "memorial-1-aaaaaa"


def test_generated_slugs_differ_between_calls():
    assert generate_memorial_slug("Maria") != generate_memorial_slug("Maria")
