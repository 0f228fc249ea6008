from types import SimpleNamespace

import pytest

from portal.config.constants import AccountType
from portal.config.exceptions import NotFoundError, PermissionDeniedError
from portal.domain.models import Principal
from portal.services.memorial_service import (
    can_manage_memorial,
    ensure_viewable,
    filter_public_memorials,
)

pytestmark = pytest.mark.unit

ITEMS = [
    {
        "full_name": "Joaquim Nabuco",
        "biography": "Abolicionista e diplomata.",
        "birthplace": "Recife, PE",
        "is_historical": True,
        "category": "Patrimônio Histórico",
    },
    {
        "full_name": "Francisco de Assis França",
        "biography": "Líder do manguebeat.",
        "birthplace": "Olinda, PE",
        "is_historical": True,
        "category": "Artista",
    },
    {
        "full_name": "Menina sem Nome",
        "biography": "Devoção no cemitério.",
        "birthplace": None,
        "is_historical": True,
        "category": "Devoção Popular",
    },
    {
        "full_name": "José da Silva",
        "biography": "Pescador em São José da Coroa Grande.",
        "birthplace": "Goiana, PE",
        "is_historical": False,
        "category": None,
    },
]


def _names(items):
    return [item["full_name"] for item in items]


@pytest.mark.parametrize("category", [None, "", "all", "ALL", "desconhecida"])
def test_unknown_or_empty_category_returns_everything(category):
    assert len(filter_public_memorials(ITEMS, category=category)) == len(ITEMS)


def test_historical_and_family_categories_split_by_flag():
    assert "José da Silva" not in _names(filter_public_memorials(ITEMS, category="historical"))
    assert _names(filter_public_memorials(ITEMS, category="family")) == ["José da Silva"]


@pytest.mark.parametrize(
    "category, expected",
    [
        ("artist", ["Francisco de Assis França"]),
        ("devotion", ["Menina sem Nome"]),
        ("politician", []),
    ],
)
def test_label_categories_match_category_field(category, expected):
    assert _names(filter_public_memorials(ITEMS, category=category)) == expected


def test_search_ignores_accents_and_case():
    assert _names(filter_public_memorials(ITEMS, search="FRANCA")) == ["Francisco de Assis França"]
    assert _names(filter_public_memorials(ITEMS, search="sao jose")) == ["José da Silva"]


def test_search_covers_biography_and_birthplace():
    assert _names(filter_public_memorials(ITEMS, search="manguebeat")) == ["Francisco de Assis França"]
    assert _names(filter_public_memorials(ITEMS, search="olinda")) == ["Francisco de Assis França"]


def test_search_and_category_combine():
    assert filter_public_memorials(ITEMS, search="joaquim", category="family") == []


def test_blank_search_is_ignored():
    assert len(filter_public_memorials(ITEMS, search="   ")) == len(ITEMS)


def _memorial(**overrides):
    data = {
        "slug": "jose-da-silva",
        "status": "active",
        "visibility": "public",
        "funeral_home_id": 1,
        "family_user_id": 2,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


FUNERAL = Principal(AccountType.FUNERAL_HOME, 1, "Funerária", "f@test.com")
OTHER_FUNERAL = Principal(AccountType.FUNERAL_HOME, 9, "Outra", "o@test.com")
FAMILY = Principal(AccountType.FAMILY_USER, 2, "Família", "fam@test.com")
ADMIN = Principal(AccountType.ADMIN, 1, "Admin", "admin@test.com")


def test_can_manage_memorial_by_account_type():
    memorial = _memorial()
    assert can_manage_memorial(ADMIN, memorial)
    assert can_manage_memorial(FUNERAL, memorial)
    assert can_manage_memorial(FAMILY, memorial)
    assert not can_manage_memorial(OTHER_FUNERAL, memorial)
    assert not can_manage_memorial(None, memorial)


def test_ensure_viewable_rules():
    with pytest.raises(NotFoundError):
        ensure_viewable(None, ADMIN)

    with pytest.raises(NotFoundError):
        ensure_viewable(_memorial(status="inactive"), None)

    with pytest.raises(PermissionDeniedError) as exc_info:
        ensure_viewable(_memorial(visibility="private"), OTHER_FUNERAL)
    assert exc_info.value.message == "Este memorial é privado"

    private_inactive = _memorial(visibility="private", status="inactive")
    assert ensure_viewable(private_inactive, FAMILY) is private_inactive
    assert ensure_viewable(_memorial(status="pending_data"), None).status == "pending_data"
